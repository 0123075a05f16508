"""
optkit help rendering.

Plain layout (render())
    <descr>
    Usage:
      <program> <custom_help> [<positional_help>]

     <group> options:
      -v, --verbose             print more
      -n, --count N             repetitions (default: 1)

- the option column is as wide as its longest entry, capped at OPTION_LONGEST;
  wider entries push their description to the next line.
- descriptions wrap to HELP_WIDTH with a hanging indent.
- options fed by the positional queue are hidden unless show_positional is set.

Rich layout (__rich__) uses the same columns with the palette below; override any
entry through a __styles__ mapping in __main__.
"""
import textwrap
from collections import defaultdict

from rich.cells import cell_len
from rich.console import Console, Group
from rich.text import Text

OPTION_LONGEST = 30
OPTION_DESC_GAP = 2
HELP_WIDTH = 76


def format_option(entry, /):
    """
    Option column for one help entry: "  -s, --long arg" or "  -s, --long [=arg(=implicit)]".
    """
    result = "  -%s," % entry.short if entry.short else "   "
    if entry.long:
        result += " --" + entry.long

    if not entry.is_boolean:
        label = entry.arg_help or "arg"
        if entry.has_implicit:
            result += " [=%s(=%s)]" % (label, entry.implicit)
        else:
            result += " " + label

    return result


def format_description(entry, start, width, /):
    """
    Description column, wrapped to 'width' with continuation lines indented to 'start'.
    """
    descr = entry.descr
    if entry.has_default and (not entry.is_boolean or entry.default != "false"):
        descr += " (default: %s)" % entry.default

    lines = []
    for paragraph in descr.split("\n"):
        lines.extend(textwrap.wrap(paragraph, width, break_on_hyphens=False) or [""])
    return ("\n" + " " * start).join(lines)


class HelpFormatter:
    """
    Renders a registry's help, either as plain text or through rich.

        HelpFormatter(options).render()            # all groups, sorted
        HelpFormatter(options, ("net",)).render()  # selected groups, in order
        rich.print(HelpFormatter(options))
    """

    def __init__(self, options, groups=(), /):
        self._options = options
        self._groups = tuple(groups)

    @property
    def groups(self):
        return self._groups or self._options.groups()

    def _layout(self, group):
        try:
            entries = self._options.group_help(group).options
        except KeyError:
            return None

        positional = set(self._options.positional)
        visible = [
            entry for entry in entries
            if self._options.show_positional or not (entry.long in positional or entry.short in positional)
        ]

        columns = list(map(format_option, visible))
        longest = min(max(map(cell_len, columns), default=0), OPTION_LONGEST)
        start = longest + OPTION_DESC_GAP
        width = HELP_WIDTH - start

        return group, longest, [
            (column, format_description(entry, start, width))
            for entry, column in zip(visible, columns)
        ]

    def usage(self):
        options = self._options
        result = "%s %s" % (options.program, options.custom_help)
        if options.positional and options.positional_help:
            result += " " + options.positional_help
        return result

    def render_group(self, group, /):
        """
        Plain text for one group; empty for unknown groups.
        """
        if (layout := self._layout(group)) is None:
            return ""

        name, longest, rows = layout
        result = " %s options:\n" % name if name else ""
        for column, description in rows:
            result += column
            if cell_len(column) > longest:
                result += "\n" + " " * (longest + OPTION_DESC_GAP)
            else:
                result += " " * (longest + OPTION_DESC_GAP - cell_len(column))
            result += description + "\n"
        return result

    def render(self):
        """
        Plain text help for the selected groups.
        """
        result = "%s\nUsage:\n  %s\n\n" % (self._options.descr, self.usage())
        result += "\n".join(filter(None, map(self.render_group, self.groups)))
        return result

    def __rich__(self):
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",
            "description-section": "italic #A3A3A3",
            "group-label": "bold #FFFFFF",
            "option-name": "bold #00E6FF",
            "argument-description": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._options.colorful else ""

        options = self._options
        renders = []

        if options.descr:
            renders.append(Text(options.descr, styler("description-section")))

        usage = Text.assemble(
            ("Usage:", styler("usage-label")),
            "\n  ",
            (options.program, styler("program-name")),
            " ",
            (options.custom_help, styler("usage-section")),
        )
        if options.positional and options.positional_help:
            usage.append(" ").append(options.positional_help, styler("usage-section"))
        renders.append(usage.append("\n"))

        for group in self.groups:
            if (layout := self._layout(group)) is None:
                continue

            name, longest, rows = layout
            section = Text()
            if name:
                section.append(" ").append(name, styler("group-label")).append(" options:\n")

            for column, description in rows:
                section.append(column, styler("option-name"))
                if cell_len(column) > longest:
                    section.append("\n" + " " * (longest + OPTION_DESC_GAP))
                else:
                    section.append(" " * (longest + OPTION_DESC_GAP - cell_len(column)))
                section.append(description, styler("argument-description")).append("\n")

            renders.append(section)

        return Group(*renders)

    def print(self, *, stderr=False):
        Console(stderr=stderr).print(self)


__all__ = (
    "OPTION_LONGEST",
    "OPTION_DESC_GAP",
    "HELP_WIDTH",
    "HelpFormatter",
    "format_option",
    "format_description",
)
