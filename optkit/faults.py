"""
optkit faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every option fault.
  Codes are grouped by domain (declaration vs. parsing vs. access) to keep
  copy consistent and make logs/searches predictable.
- OptionException: base type that carries a message plus options and knows how
  to render itself in a friendly, lowercased, and actionable way.
- OptionSpecException / OptionParseException: the two subkinds of the taxonomy.
  Declaration errors are raised only while building a registry; parse errors
  only while parsing a token stream or reading a result.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Surfacing policy
- shell=False (default): the fault is raised; the caller decides what to do.
- shell=True: the fault is printed to stderr through rich and the process exits
  with status 1. This is the fallback for hosts that do not want to handle
  exceptions themselves.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - declaration (1120x)
      • OPTION_EXISTS, INVALID_OPTION_FORMAT
    - token stream (1121x)
      • OPTION_SYNTAX, OPTION_NOT_EXISTS, MISSING_ARGUMENT,
        OPTION_REQUIRES_ARGUMENT, OPTION_NOT_HAS_ARGUMENT, OPTION_REQUIRED
    - values (1122x)
      • ARGUMENT_INCORRECT_TYPE
    - result access (1123x)
      • OPTION_NOT_PRESENT, OPTION_HAS_NO_VALUE, OPTION_TYPE_MISMATCH

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- declaration errors (1120x) ---
    OPTION_EXISTS               = 11201
    INVALID_OPTION_FORMAT       = 11202

    # --- token stream errors (1121x) ---
    OPTION_SYNTAX               = 11211
    OPTION_NOT_EXISTS           = 11212
    MISSING_ARGUMENT            = 11213
    OPTION_REQUIRES_ARGUMENT    = 11214
    OPTION_NOT_HAS_ARGUMENT     = 11215
    OPTION_REQUIRED             = 11216

    # --- value errors (1122x) ---
    ARGUMENT_INCORRECT_TYPE     = 11221

    # --- result access errors (1123x) ---
    OPTION_NOT_PRESENT          = 11231
    OPTION_HAS_NO_VALUE         = 11232
    OPTION_TYPE_MISMATCH        = 11233

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class OptionException(Exception):
    """
    root of the option fault taxonomy.

    the message is positional; everything else (title, code, hint, docs, and the
    runtime flags shell/fancy/colorful/program) travels in read-only options.
    """
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("program", "optkit")), styler("prog-name"))
        code = self.options.get("code", Unset)
        title = self.options.get("title", "option error")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
            " | ",
            text(title.title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class OptionSpecException(OptionException): ...
class OptionParseException(OptionException): ...

class OptionExistsError(OptionSpecException): ...
class InvalidOptionFormatError(OptionSpecException): ...

class OptionSyntaxError(OptionParseException): ...
class OptionNotExistsError(OptionParseException): ...
class MissingArgumentError(OptionParseException): ...
class OptionRequiresArgumentError(OptionParseException): ...
class OptionNotHasArgumentError(OptionParseException): ...
class OptionRequiredError(OptionParseException): ...
class ArgumentIncorrectTypeError(OptionParseException): ...
class OptionNotPresentError(OptionParseException): ...
class OptionHasNoValueError(OptionParseException): ...
class OptionTypeMismatchError(OptionParseException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see OptionException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console and the process exits;
      otherwise, the fault is raised.

    typical options
    - program, shell, fancy, colorful, title, code, hint, docs, and any other
      context the reporter may want to show (e.g., token/index/option).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "OptionException",
    "OptionSpecException",
    "OptionParseException",
    "OptionExistsError",
    "InvalidOptionFormatError",
    "OptionSyntaxError",
    "OptionNotExistsError",
    "MissingArgumentError",
    "OptionRequiresArgumentError",
    "OptionNotHasArgumentError",
    "OptionRequiredError",
    "ArgumentIncorrectTypeError",
    "OptionNotPresentError",
    "OptionHasNoValueError",
    "OptionTypeMismatchError",
    "trigger",
    "getdoc",
)
