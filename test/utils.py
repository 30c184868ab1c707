"""
Utils module behavioral tests (sentinel and naming helpers).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import pickle
import unittest
from unittest import TestCase

from arglet.utils import Unset, UnsetType, coalesce, kebab, mirror


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnion(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesce(self):
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIs(coalesce(False, "x"), False)


class TestKebab(TestCase):
    """Behavioral tests for kebab()."""

    def testCamelCase(self):
        self.assertEqual(kebab("dryRun"), "dry-run")
        self.assertEqual(kebab("someBooleanOption"), "some-boolean-option")

    def testSnakeCase(self):
        self.assertEqual(kebab("max_depth"), "max-depth")

    def testFirstCharacterKept(self):
        self.assertEqual(kebab("Name"), "Name")
        self.assertEqual(kebab("x"), "x")


class TestMirror(TestCase):
    """Behavioral tests for mirror()."""

    def testFrozenViews(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        with self.assertRaises(AttributeError):
            holder.items = ()


if __name__ == "__main__":
    unittest.main()
