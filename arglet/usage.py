"""
Arglet usage text: schema-driven help rendering.

What this module provides
- render_usage(prefix, positionals, options, *, colorful=False): the full help
  text (usage line, positional table, options table) as a plain string.
- tabulate(rows, justifications, indentation): column layout that measures
  cells by display width, so styled cells line up with plain ones.
- width(text) / ljust(text, size) / rjust(text, size): display-width helpers.

Display width
- Terminal styling sequences (ESC '[' ... 'm') are emitted untouched but never
  counted; the remaining text is measured in terminal cells (rich.cells), so
  wide characters count for two.

Styling
- When colorful=True every fragment is rendered to ANSI through a rich Style.
  The palette can be overridden with a __styles__ mapping in __main__, using the
  keys listed in _STYLES.
"""
import re
from collections import defaultdict

from rich.cells import cell_len
from rich.color import ColorSystem
from rich.style import Style

from .utils import Unset

_ANSI = re.compile(r"\x1b\[[0-9;]*m")

_STYLES = {
    "usage-label": "bold",
    "program-name": "bold",
    "section-label": "bold",
    "positional-name": "bold",
    "option-name": "bold",
    "value-name": "",
    "description": "",
    "default": "dim",
    "required": "italic",
}

_PLACEHOLDERS = {
    "string": "STRING",
    "number": "NUMBER",
    "custom": "VALUE",
}


def width(text, /):
    """
    display width of `text`: terminal cells once styling sequences are removed.
    """
    return cell_len(_ANSI.sub("", text))


def ljust(text, size, /):
    return text + " " * max(size - width(text), 0)


def rjust(text, size, /):
    return " " * max(size - width(text), 0) + text


def tabulate(rows, justifications, indentation="", /):
    """
    lay out rows of cells as aligned columns.

    parameters
    - rows: Sequence[Sequence[str]] - cells may contain styling sequences.
    - justifications: Sequence["left" | "right"] - per column; missing entries
      default to "left".
    - indentation: str prefixed to every line.

    behavior
    - each column is as wide as its widest cell (display width).
    - left cells are right-padded, right cells are left-padded.
    - trailing spaces are stripped from each line.
    """
    sizes = defaultdict(int)
    for row in rows:
        for index, cell in enumerate(row):
            sizes[index] = max(sizes[index], width(cell))

    lines = []
    for row in rows:
        cells = []
        for index, cell in enumerate(row):
            justification = justifications[index] if index < len(justifications) else "left"
            cells.append(rjust(cell, sizes[index]) if justification == "right" else ljust(cell, sizes[index]))
        lines.append((indentation + "".join(cells)).rstrip(" "))
    return "\n".join(lines)


def placeholder(spec, /):
    """
    value placeholder shown after an option name (None for booleans).
    """
    if spec.boolean:
        return None
    return str(spec.value_name or _PLACEHOLDERS[spec.value_kind])


def render_usage(prefix, positionals, options, /, *, colorful=False):
    """
    Render the help text for a normalized schema.

    parameters
    - prefix: str | Sequence[str] - invocation prefix (e.g. interpreter and
      script path); sequences are joined with spaces.
    - positionals: Sequence[Spec] - in declaration order.
    - options: Sequence[Spec]
    - colorful: emit ANSI styling for terminals.

    layout
        Usage: <prefix> FIRST SECOND [OPTIONS]

        Arguments:
          FIRST   description [Default: x]

        Options:
          -s, --some STRING  description [Default: x]
              --flag         description

    the "Arguments" and "Options" sections only appear when non-empty; the
    "[OPTIONS]" suffix only when at least one option exists.
    """
    styles = defaultdict(str, _STYLES | getattr(__import__("__main__"), "__styles__", {}))

    def styled(fragment, style):
        if not fragment or not colorful or not (style := styles[style]):
            return fragment
        return Style.parse(style).render(fragment, color_system=ColorSystem.TRUECOLOR)

    def describe(spec):
        parts = []
        if spec.description:
            parts.append(styled(str(spec.description), "description"))
        if spec.required:
            parts.append(styled("[required]", "required"))
        if spec.default is not Unset and not spec.boolean:
            parts.append(styled("[Default: %s]" % (spec.default,), "default"))
        return " ".join(parts)

    if not isinstance(prefix, str):
        prefix = " ".join(prefix)

    head = [styled("Usage:", "usage-label"), styled(prefix, "program-name")]
    head.extend(styled(spec.display, "positional-name") for spec in positionals)
    if options:
        head.append("[OPTIONS]")
    sections = [" ".join(filter(None, head))]

    if positionals:
        rows = [
            [styled(spec.display, "positional-name"), "  ", describe(spec)]
            for spec in positionals
        ]
        sections.append(styled("Arguments:", "section-label") + "\n" + tabulate(rows, ("left", "left", "left"), "  "))

    if options:
        rows = []
        for spec in options:
            value = placeholder(spec)
            if spec.short and spec.long:
                short = styled("-" + spec.short, "option-name") + ", "
            elif spec.short:
                short = styled("-" + spec.short, "option-name") + " " * bool(value)
            else:
                short = ""
            long = " ".join(filter(None, (
                styled("--" + spec.long, "option-name") if spec.long else None,
                styled(value, "value-name") if value else None,
            )))
            rows.append([short, long, "  ", describe(spec)])
        sections.append(styled("Options:", "section-label") + "\n" + tabulate(rows, ("right", "left", "left", "left"), "  "))

    return "\n\n".join(sections)


__all__ = (
    "width",
    "ljust",
    "rjust",
    "tabulate",
    "placeholder",
    "render_usage",
)
