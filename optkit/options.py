"""
optkit option registry: declare options, then parse argument vectors against them.

What this module provides
- Options: the registry. Holds every declared option keyed by short and long
  name (one shared namespace), the positional queue configuration, the help
  metadata per group, and the runtime flags used to surface faults.
- OptionDetails: one registered option (names, description, value template,
  argument label, group, requiredness). Immutable after registration.
- OptionAdder: chaining helper returned by Options.add_options(group).
- HelpEntry / HelpGroup: display metadata consumed by the help renderer.

Quick start
    from optkit import Options, value, uint8

    options = Options("tool", "a small example")
    options.add_options()(
        "v,verbose", "print more"
    )(
        "n,count", "repetitions", value(uint8).default_value("1"), "N"
    )(
        "input", "file to read", value(str)
    )
    options.parse_positional("input")

    result = options.parse(["tool", "-v", "data.txt"])
    result["count"].as_(uint8)    # -> 1
    result["input"].as_(str)      # -> "data.txt"

Registration rules
- specifiers: "x,long", "x" or "long" (one ASCII alphanumeric short name; long
  names start with an alphanumeric and continue with alphanumerics, '-' or '_').
- a lone one-character specifier is a short name; "x,y" is rejected.
- duplicate names fail with OptionExistsError and leave the registry unchanged.
"""
import logging
import shlex
import sys
from collections import namedtuple
from collections.abc import Iterable

from .faults import *
from .help import HelpFormatter
from .parser import Parser, is_long_name, is_short_name, scan_specifier
from .results import Outcome
from .utils import *
from .values import Value, value as _value

logger = logging.getLogger(__name__)

HelpEntry = namedtuple("HelpEntry", (
    "short",
    "long",
    "descr",
    "has_default",
    "default",
    "has_implicit",
    "implicit",
    "arg_help",
    "is_container",
    "is_boolean",
))

HelpGroup = namedtuple("HelpGroup", (
    "name",
    "options",
))


class OptionDetails:
    """
    A registered option.

    Both names (when present) resolve to the same instance, which is also the
    identity used by parse results. The value template is shared read-only; each
    parse works on its own clone.
    """
    short = mirror("short")
    long = mirror("long")
    descr = mirror("descr")
    value = mirror("value")
    arg_help = mirror("arg_help")
    group = mirror("group")
    required = mirror("required")

    def __init__(self, short, long, descr, value, arg_help="", group="", required=False):
        self._short = short
        self._long = long
        self._descr = descr
        self._value = value
        self._arg_help = arg_help
        self._group = group
        self._required = bool(required)

    @property
    def name(self):
        """
        Display name: the long name when there is one, otherwise the short name.
        """
        return self._long or self._short

    def __repr__(self):
        return "option(short=%r, long=%r, value=%r)" % (self._short, self._long, self._value)


class OptionAdder:
    """
    Chainable registration helper bound to one group.

        options.add_options("network")("p,port", "port", value(uint16))("host", "host", value(str))
    """
    def __init__(self, options, group="", /):
        self._options = options
        self._group = group

    def __call__(self, specifier, descr, /, value=Unset, arg_help="", *, required=False):
        self._options.add_option(specifier, descr, value, arg_help, group=self._group, required=required)
        return self


class Options:
    """
    The option registry and parsing entry point.

    Parameters
    - program: str
      program name used in usage text and as argv[0] for string prompts.
    - descr: str
      free text printed above the usage line.
    - custom_help: str
      usage text after the program name (default "[OPTION...]").
    - positional_help: str
      usage text describing positional parameters.
    - show_positional: bool
      list options fed by the positional queue in help output.
    - allow_unrecognised: bool
      keep unknown long options in the residual list (and skip unknown short
      characters and unknown positional names) instead of failing.
    - shell / fancy / colorful: bool
      how faults are surfaced (see optkit.faults.trigger).
    """

    def __init__(
            self,
            program,
            descr="",
            /,
            *,
            custom_help="[OPTION...]",
            positional_help="positional parameters",
            show_positional=False,
            allow_unrecognised=False,
            shell=False,
            fancy=False,
            colorful=True
    ):
        if not isinstance(program, str):
            raise TypeError("options 'program' must be a string")
        if not isinstance(descr, str):
            raise TypeError("options 'descr' must be a string")
        self.program = program
        self.descr = descr
        self.custom_help = custom_help
        self.positional_help = positional_help
        self.show_positional = bool(show_positional)
        self.allow_unrecognised = bool(allow_unrecognised)
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

        self._options = {}
        self._details = []
        self._positional = ()
        self._help = {}

    @property
    def details(self):
        """
        Registered options in registration order.
        """
        return tuple(self._details)

    @property
    def positional(self):
        """
        Names configured for positional consumption, in order.
        """
        return self._positional

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this registry's runtime flags.
        """
        trigger(fault, program=self.program, shell=self.shell, fancy=self.fancy, colorful=self.colorful, **options)

    def lookup(self, name, /):
        """
        Return the option registered under 'name', or None.
        """
        return self._options.get(name)

    def __contains__(self, name):
        return name in self._options

    def register(self, short, long, descr, value=Unset, arg_help="", *, group="", required=False):
        """
        Register one option under its short and/or long name.

        Raises
        - InvalidOptionFormatError: no name, a short name that is not a single
          alphanumeric, or a long name outside the long-name grammar (which
          takes at least two characters).
        - OptionExistsError: either name is already taken (nothing is inserted).
        - TypeError: 'value' is not a value template.
        """
        if value is Unset:
            value = _value(bool)
        if not isinstance(value, Value):
            raise TypeError("option 'value' must be a value template (see optkit.value)")
        if not isinstance(descr, str):
            raise TypeError("option 'descr' must be a string")

        if (
            (not short and not long) or
            (short and not is_short_name(short)) or
            (long and (len(long) < 2 or not is_long_name(long)))
        ):
            specifier = ",".join(name for name in (short, long) if name)
            return self.trigger(InvalidOptionFormatError(
                "invalid option format %r" % specifier,
                title="invalid option format",
                code=FaultCode.INVALID_OPTION_FORMAT,
                hint="use 'x,long', 'x' or 'long' (long names take letters, digits, '-' and '_')",
                specifier=specifier,
                docs=getdoc(FaultCode.INVALID_OPTION_FORMAT)
            ))

        # check both names first so a failed registration leaves no trace
        for name in (short, long):
            if name and name in self._options:
                return self.trigger(OptionExistsError(
                    "option %r already exists" % name,
                    title="option already exists",
                    code=FaultCode.OPTION_EXISTS,
                    hint="pick another name or remove the duplicated declaration",
                    option=name,
                    docs=getdoc(FaultCode.OPTION_EXISTS)
                ))

        details = OptionDetails(short, long, descr, value, arg_help, group, required)
        for name in (short, long):
            if name:
                self._options[name] = details
        self._details.append(details)

        self._help.setdefault(group, []).append(HelpEntry(
            short,
            long,
            descr,
            value.has_default,
            value.default if value.has_default else "",
            value.has_implicit,
            value.implicit if value.has_implicit else "",
            arg_help,
            value.is_container,
            value.is_boolean,
        ))

        logger.debug("registered %r in group %r", details, group)
        return details

    def add_option(self, specifier, descr, /, value=Unset, arg_help="", *, group="", required=False):
        """
        Register one option from a specifier string ("x,long", "x" or "long").
        """
        if not isinstance(specifier, str):
            raise TypeError("option specifier must be a string")

        names = scan_specifier(specifier)

        if names is None or not any(names) or (len(names[1]) == 1 and names[0]):
            return self.trigger(InvalidOptionFormatError(
                "invalid option format %r" % specifier,
                title="invalid option format",
                code=FaultCode.INVALID_OPTION_FORMAT,
                hint="use 'x,long', 'x' or 'long' (one alphanumeric short name, long names of letters, digits, '-' and '_')",
                specifier=specifier,
                docs=getdoc(FaultCode.INVALID_OPTION_FORMAT)
            ))

        short, long = names
        if len(long) == 1:
            short, long = long, ""

        return self.register(short, long, descr, value, arg_help, group=group, required=required)

    def add_options(self, group="", /):
        """
        Return a chainable adder registering into 'group'.
        """
        if not isinstance(group, str):
            raise TypeError("options group must be a string")
        return OptionAdder(self, group)

    def parse_positional(self, *names):
        """
        Configure the positional queue.

        Accepts names as separate arguments or a single iterable of names; a later
        call replaces the previous configuration. Names are resolved when parsing.
        """
        if len(names) == 1 and not isinstance(names[0], str) and isinstance(names[0], Iterable):
            names = tuple(names[0])
        for name in names:
            if not isinstance(name, str):
                raise TypeError("positional option names must be strings")
        self._positional = tuple(names)

    def _tokenize(self, argv):
        if argv is Unset:
            return list(sys.argv)
        if isinstance(argv, str):
            return [self.program] + shlex.split(argv)
        if isinstance(argv, Iterable):
            tokens = list(argv)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("parse() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("parse() argument must be a string or an iterable of strings")

    def parse(self, argv=Unset, /):
        """
        Parse an argument vector and return a ParseResult.

        Parameters
        - argv:
          • Unset: sys.argv.
          • str: shell-like string split with shlex.split; the program name is
            prepended as argv[0].
          • Iterable[str]: argv-like sequence, argv[0] being the program name.

        Any fault aborts the parse (raised, or printed and exited in shell mode).
        """
        tokens = self._tokenize(argv)
        return Parser(self, self._positional, allow_unrecognised=self.allow_unrecognised, shell=self.shell).parse(tokens)

    def attempt(self, argv=Unset, /):
        """
        Parse like parse(), but return Outcome(result, fault) instead of raising
        or exiting on option faults.
        """
        tokens = self._tokenize(argv)
        try:
            return Outcome(Parser(self, self._positional, allow_unrecognised=self.allow_unrecognised).parse(tokens), None)
        except OptionException as fault:
            logger.debug("parse failed: %s", fault)
            return Outcome(None, fault)

    def groups(self):
        """
        Group names with at least one registered option, sorted.
        """
        return tuple(sorted(self._help))

    def group_help(self, group, /):
        """
        Display metadata for one group; KeyError for unknown groups.
        """
        return HelpGroup(group, tuple(self._help[group]))

    def help(self, groups=(), /):
        """
        Render plain help text for all groups, or only for 'groups' in that order.
        """
        return HelpFormatter(self, groups).render()

    def print_help(self, groups=(), /, *, stderr=False):
        """
        Print the rich help rendering to stdout (or stderr).
        """
        HelpFormatter(self, groups).print(stderr=stderr)

    def __repr__(self):
        return "options(program=%r, options=%r)" % (self.program, len(self._details))


__all__ = (
    "Options",
    "OptionDetails",
    "OptionAdder",
    "HelpEntry",
    "HelpGroup",
)
