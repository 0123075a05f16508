"""
optkit parse results: what a parse produced, queried by option name.

- ParseResult: per-option OptionValue (every registered option has one), the
  sequential record of explicit parse events, and the residual token list.
- OptionValue: occurrence count, default-fill flag and the typed value of one option.
- KeyValue: one explicit parse event (option display name, raw text).
- Outcome: (result, fault) pair returned by Options.attempt().

All of it is read-only once the parse returns.
"""
from collections import namedtuple
from types import MappingProxyType

from .faults import *
from .utils import *
from .values import convert, describe


class KeyValue(namedtuple("KeyValue", ("key", "value"))):
    """
    One explicit parse event: the option's display name and the raw text it received.
    """
    __slots__ = ()

    def as_(self, kind, /, *, delimiter=Unset):
        """
        Convert the raw text again, independently of the stored option value.
        """
        return convert(kind, self.value, delimiter=delimiter)


class Outcome(namedtuple("Outcome", ("result", "fault"))):
    """
    Result of Options.attempt(): exactly one of 'result' and 'fault' is set.
    """
    __slots__ = ()

    @property
    def ok(self):
        return self.fault is None

    def unwrap(self):
        """
        Return the result, or raise the fault.
        """
        if self.fault is not None:
            raise self.fault
        return self.result


class OptionValue:
    """
    Parsed state of one option.

    - count: explicit occurrences (bundled shorts, repeats and positional fills
      included); default fills do not count.
    - has_default: the value came from the declared default.
    - as_(kind): the typed value, checked against the declared kind.
    """

    def __init__(self, details, /, **runtime):
        self._details = details
        self._runtime = runtime
        self._value = Unset
        self._count = 0
        self._default = False
        self._sealed = False

    @property
    def details(self):
        return self._details

    @property
    def count(self):
        return self._count

    @property
    def has_default(self):
        return self._default

    @property
    def value(self):
        """
        The stored value without a kind check, or None when there is none.
        """
        return self._value.get() if self._value is not Unset else None

    def _ensure(self):
        if self._sealed:
            raise RuntimeError("parse results are read-only")
        if self._value is Unset:
            self._value = self._details.value.clone()
        return self._value

    def _parse(self, text):
        # an explicit occurrence discards a previous default fill
        if self._default:
            self._value = Unset
            self._default = False
        self._ensure().parse(text)
        self._count += 1

    def _parse_default(self):
        self._ensure().parse_default()
        self._default = True

    def _seal(self):
        self._sealed = True

    def as_(self, kind, /):
        """
        Return the value as 'kind'.

        Raises
        - OptionTypeMismatchError: 'kind' is not the kind the option was declared with.
        - OptionHasNoValueError: the option was neither given nor defaulted.
        """
        declared = self._details.value
        if not declared.accepts(kind):
            trigger(OptionTypeMismatchError(
                "option %r holds %s, not %s" % (
                    self._details.name,
                    describe(declared.kind),
                    describe(kind) if callable(kind) else repr(kind)
                ),
                title="option type mismatch",
                code=FaultCode.OPTION_TYPE_MISMATCH,
                hint="read it with as_(%s)" % describe(declared.kind),
                option=self._details.name,
                docs=getdoc(FaultCode.OPTION_TYPE_MISMATCH)
            ), **self._runtime)
        if self._value is Unset or not self._value.has_value:
            trigger(OptionHasNoValueError(
                "option %r has no value" % self._details.name,
                title="option has no value",
                code=FaultCode.OPTION_HAS_NO_VALUE,
                hint="check count(%r) first or declare a default value" % self._details.name,
                option=self._details.name,
                docs=getdoc(FaultCode.OPTION_HAS_NO_VALUE)
            ), **self._runtime)
        return self._value.get()

    def __repr__(self):
        return "option-value(option=%r, count=%r, has_default=%r, value=%r)" % (
            self._details.name,
            self._count,
            self._default,
            self.value
        )


class ParseResult:
    """
    Outcome of one successful parse.

    Lookups accept either name of an option. count() never fails; value() and
    result[name] fail with OptionNotPresentError for names that were never
    registered.
    """

    def __init__(self, results, sequential, unmatched, /, **runtime):
        self._results = MappingProxyType(dict(results))
        self._names = MappingProxyType({
            name: details
            for details in self._results
            for name in (details.short, details.long)
            if name
        })
        self._sequential = tuple(sequential)
        self._unmatched = tuple(unmatched)
        self._runtime = runtime
        for result in self._results.values():
            result._seal()

    @property
    def unmatched(self):
        """
        The program name followed by every token the parse did not consume.
        """
        return self._unmatched

    def arguments(self):
        """
        Explicit parse events in input order (default fills excluded).
        """
        return self._sequential

    def count(self, name, /):
        try:
            return self._results[self._names[name]].count
        except (KeyError, TypeError):
            return 0

    def value(self, name, /):
        try:
            return self._results[self._names[name]]
        except (KeyError, TypeError):
            trigger(OptionNotPresentError(
                "option %r is not present" % name,
                title="option not present",
                code=FaultCode.OPTION_NOT_PRESENT,
                hint="register %r before parsing or check the spelling" % name,
                option=name,
                docs=getdoc(FaultCode.OPTION_NOT_PRESENT)
            ), **self._runtime)

    def __getitem__(self, name):
        return self.value(name)

    def __iter__(self):
        return iter(self._results.values())

    def __len__(self):
        return len(self._results)

    def __rich_repr__(self):
        yield "arguments", self._sequential
        yield "unmatched", self._unmatched

    def __repr__(self):
        return "parse-result(arguments=%r, unmatched=%r)" % (self._sequential, self._unmatched)


__all__ = (
    "ParseResult",
    "OptionValue",
    "KeyValue",
    "Outcome",
)
