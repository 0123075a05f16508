"""
optkit token scanning and the parse state machine.

Token grammar
- long option:  --<name>[=<value>]   name: alnum followed by one or more of alnum, '-', '_'
- short group:  -<alnum>+            each character is one short option
- terminator:   --                   everything after it is positional
- anything else is a positional token; a non-matching token that starts with '-'
  (and is not a lone '-') is a syntax error unless unrecognised options are allowed.

Phases (Parser.parse)
1. scan tokens left to right, dispatching options and feeding positionals to the queue.
2. fill defaults for options that never occurred.
3. after '--', feed positionals until the queue refuses one; keep the rest as residual.
4. check required options.
"""
import logging
from collections import namedtuple

from .faults import *
from .results import KeyValue, OptionValue, ParseResult
from .utils import *
from .values import describe

logger = logging.getLogger(__name__)

Token = namedtuple("Token", ("kind", "name", "value"))
Token.__doc__ = """
A classified command-line token.

- kind: "long" or "short"
- name: the long name, or the run of short characters
- value: text after '=' for long options, else None
"""


def _isalnum(character):
    return character.isascii() and character.isalnum()


def is_short_name(name, /):
    """
    Whether 'name' is a valid short name (one ASCII alphanumeric).
    """
    return len(name) == 1 and _isalnum(name)


def is_long_name(name, /):
    """
    Whether 'name' fits the long-name grammar (alnum, then alnum, '-' or '_').
    """
    return bool(name) and _isalnum(name[0]) and all(_isalnum(character) or character in "-_" for character in name[1:])


def scan_specifier(specifier, /):
    """
    Split an option specifier into (short, long).

    Accepted shape: an optional "<alnum>," prefix, optional spaces, then an optional
    long name. Returns None when the text does not fit; both parts may come back empty.
    """
    short, rest = "", specifier
    if len(specifier) >= 2 and specifier[1] == "," and _isalnum(specifier[0]):
        short, rest = specifier[0], specifier[2:]
    rest = rest.lstrip(" ")
    if rest and not is_long_name(rest):
        return None
    return short, rest


def scan_token(token, /):
    """
    Classify one token as a long or short option, or return None.

        scan_token("--name=x") -> Token("long", "name", "x")
        scan_token("-abc")     -> Token("short", "abc", None)
        scan_token("--x")      -> None (long names take at least two characters)
    """
    if token.startswith("--"):
        name, separator, value = token[2:].partition("=")
        if len(name) >= 2 and is_long_name(name):
            return Token("long", name, value if separator else None)
        return None
    if token.startswith("-") and len(token) > 1 and all(map(_isalnum, token[1:])):
        return Token("short", token[1:], None)
    return None


class PositionalQueue:
    """
    Cursor over the configured positional names.
    """
    def __init__(self, names=(), /):
        self._names = tuple(names)
        self._cursor = 0

    @property
    def current(self):
        return self._names[self._cursor] if self._cursor < len(self._names) else None

    def advance(self):
        self._cursor += 1

    def __bool__(self):
        return self._cursor < len(self._names)

    def __repr__(self):
        return "positional-queue(%r, cursor=%d)" % (self._names, self._cursor)


class Parser:
    """
    One-shot parse of a token list against a registry.

    A parser holds the per-parse state (fresh OptionValue per option, the sequential
    record, the positional cursor); create a new one per parse.
    """

    def __init__(self, options, positional=(), /, *, allow_unrecognised=False, shell=False):
        self._options = options
        self._positional = tuple(positional)
        self._allow_unrecognised = allow_unrecognised
        self._runtime = {
            "program": options.program,
            "shell": shell,
            "fancy": options.fancy,
            "colorful": options.colorful,
        }
        self._results = {}
        self._sequential = []
        self._queue = PositionalQueue()

    def _trigger(self, fault, **options):
        trigger(fault, **self._runtime, **options)

    def parse(self, tokens, /):
        """
        Parse 'tokens' (argv[0] being the program name) and return a ParseResult.
        """
        tokens = list(tokens) or [self._options.program]

        self._results = {details: OptionValue(details, **self._runtime) for details in self._options.details}
        self._sequential = []
        self._queue = PositionalQueue(self._positional)

        logger.debug("parsing %d token(s) with %d option(s)", len(tokens) - 1, len(self._results))

        unmatched = [tokens[0]]
        terminated = False
        current = 1

        while current < len(tokens):
            token = tokens[current]

            if token == "--":
                terminated = True
                current += 1
                break

            match scan_token(token):
                case None:
                    if token.startswith("-") and len(token) > 1 and not self._allow_unrecognised:
                        self._trigger(OptionSyntaxError(
                            "malformed option %r at %s position" % (token, ordinal(current)),
                            title="option syntax error",
                            code=FaultCode.OPTION_SYNTAX,
                            hint="use --name, --name=value, -x or -xyz",
                            token=token,
                            index=current,
                            docs=getdoc(FaultCode.OPTION_SYNTAX)
                        ))
                    if not self._consume_positional(token, current):
                        unmatched.append(token)

                case Token(kind="short", name=characters):
                    for offset, character in enumerate(characters):
                        details = self._options.lookup(character)
                        if details is None:
                            if self._allow_unrecognised:
                                continue
                            self._not_exists(character, current)
                        if offset == len(characters) - 1:
                            current = self._checked_parse_arg(tokens, current, details, character)
                        elif details.value.has_implicit:
                            self._parse_option(details, character, details.value.implicit, current)
                        else:
                            self._trigger(OptionRequiresArgumentError(
                                "option %r requires an argument but is grouped in %r at %s position" % (
                                    character,
                                    token,
                                    ordinal(current)
                                ),
                                title="option requires an argument",
                                code=FaultCode.OPTION_REQUIRES_ARGUMENT,
                                hint="move -%s to the end of the group or give it its own token" % character,
                                option=character,
                                token=token,
                                index=current,
                                docs=getdoc(FaultCode.OPTION_REQUIRES_ARGUMENT)
                            ))

                case Token(kind="long", name=name, value=text):
                    details = self._options.lookup(name)
                    if details is None:
                        if not self._allow_unrecognised:
                            self._not_exists(name, current)
                        unmatched.append(token)
                    elif text is not None:
                        self._parse_option(details, name, text, current)
                    else:
                        current = self._checked_parse_arg(tokens, current, details, name)

            current += 1

        for details, result in self._results.items():
            if details.value.has_default and not result.count and not result.has_default:
                try:
                    result._parse_default()
                except ArgumentIncorrectTypeError as fault:
                    self._trigger(ArgumentIncorrectTypeError(
                        "default value %r of option %r failed to parse as %s" % (
                            details.value.default,
                            details.name,
                            describe(fault.options.get("kind"))
                        ),
                        **fault.options,
                        option=details.name
                    ))
                logger.debug("option %r <- default %r", details.name, details.value.default)

        if terminated:
            while current < len(tokens) and self._consume_positional(tokens[current], current):
                current += 1
            unmatched.extend(tokens[current:])

        for details, result in self._results.items():
            if details.required and not result.count:
                self._trigger(OptionRequiredError(
                    "option %r is required but was not given" % details.name,
                    title="required option missing",
                    code=FaultCode.OPTION_REQUIRED,
                    hint="pass %s" % ("--" + details.long if details.long else "-" + details.short),
                    option=details.name,
                    docs=getdoc(FaultCode.OPTION_REQUIRED)
                ))

        logger.debug("parsed %d argument(s), %d unmatched", len(self._sequential), len(unmatched) - 1)
        return ParseResult(self._results, self._sequential, unmatched, **self._runtime)

    def _not_exists(self, name, index):
        self._trigger(OptionNotExistsError(
            "unknown option %r at %s position" % (name, ordinal(index)),
            title="unknown option",
            code=FaultCode.OPTION_NOT_EXISTS,
            hint="check the spelling or run with --help to list the options",
            option=name,
            index=index,
            docs=getdoc(FaultCode.OPTION_NOT_EXISTS)
        ))

    def _checked_parse_arg(self, tokens, current, details, name):
        """
        Feed an option that appeared without '=value'; return the index of the last
        token consumed.
        """
        # an implicit value always wins, even when another token follows
        if details.value.has_implicit:
            self._parse_option(details, name, details.value.implicit, current)
            return current
        if current + 1 >= len(tokens):
            self._trigger(MissingArgumentError(
                "option %r is missing an argument at %s position" % (name, ordinal(current)),
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                hint="pass a value after %s" % tokens[current],
                option=name,
                index=current,
                docs=getdoc(FaultCode.MISSING_ARGUMENT)
            ))
        self._parse_option(details, name, tokens[current + 1], current + 1)
        return current + 1

    def _parse_option(self, details, name, text, index):
        try:
            self._results[details]._parse(text)
        except ArgumentIncorrectTypeError as fault:
            self._trigger(ArgumentIncorrectTypeError(
                "argument %r for option %r at %s position failed to parse as %s" % (
                    text,
                    name,
                    ordinal(index),
                    describe(fault.options.get("kind"))
                ),
                **fault.options,
                option=name,
                index=index
            ))
        self._sequential.append(KeyValue(details.name, text))
        logger.debug("option %r <- %r", details.name, text)

    def _consume_positional(self, token, index):
        while (name := self._queue.current) is not None:
            details = self._options.lookup(name)
            if details is None:
                if self._allow_unrecognised:
                    self._queue.advance()
                    continue
                self._trigger(OptionNotExistsError(
                    "positional option %r does not exist" % name,
                    title="unknown option",
                    code=FaultCode.OPTION_NOT_EXISTS,
                    hint="register %r before listing it in parse_positional()" % name,
                    option=name,
                    index=index,
                    docs=getdoc(FaultCode.OPTION_NOT_EXISTS)
                ))
            if details.value.is_container:
                self._parse_option(details, name, token, index)
                return True
            if not self._results[details].count:
                self._parse_option(details, name, token, index)
                self._queue.advance()
                return True
            self._queue.advance()
        return False


__all__ = (
    "Token",
    "PositionalQueue",
    "Parser",
    "is_short_name",
    "is_long_name",
    "scan_specifier",
    "scan_token",
)
