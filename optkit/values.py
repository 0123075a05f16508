r"""
optkit typed values: templates that turn text tokens into typed values.

Overview
- Kinds (type tags)
  • bool, str: booleans and verbatim strings.
  • char: exactly one character.
  • int8, uint8, int16, uint16, int32, uint32, int64, uint64: fixed-width integers
    with overflow checking (`int` is an alias of int64).
  • list[K]: delimited lists of any non-list kind K.
  • any other callable (float, Decimal, Path, ...): generic fallback converter.

- Values
  • Value: immutable template (kind, default text, implicit text, binding) that
    can clone() itself into an independently mutable instance holding parsed data.
  • BooleanValue, StringValue, CharacterValue, IntegerValue, ListValue, GenericValue:
    one variant per parsing rule.
  • Binding: explicit output-binding handle; bound values write through to it.

- Factories
  • value(kind, ...): build the right template for a kind.
  • convert(kind, text, ...): one-shot conversion (used to re-read raw text).

Parsing rules (all failures raise ArgumentIncorrectTypeError)
- bool: t, true, 1 → True; f, false, 0, "" → False (case-insensitive).
- integers: (-)?(0x)?[alnum]+ | (0x)?0, base 16 with the 0x prefix, else base 10.
  digits accumulate in an unsigned accumulator of the target width; any overflow
  fails, then the signed range is checked. unsigned kinds reject a leading '-'.
- char: exactly one character.
- list[K]: split on the delimiter (segments are not trimmed, empty ones are still
  parsed); the whole token is converted before anything is stored.
- generic: kind(text); ValueError, TypeError and ArithmeticError fail.

Quick example:
    >>> from optkit.values import value, uint8, Binding
    >>> counter = value(uint8).default_value("1")
    >>> verbose = value(bool, binding=(seen := Binding(False)))
    >>> files = value(list[str], delimiter=";")
"""
import functools
import operator
import re
from types import GenericAlias
from typing import final

from .faults import ArgumentIncorrectTypeError, FaultCode, getdoc, trigger
from .utils import *

DEFAULT_DELIMITER = ","

_TRUTHY = frozenset(("t", "true", "1"))
_FALSY = frozenset(("f", "false", "0", ""))


@final
class IntegerKind:
    """
    Type tag for a fixed-width integer.

    The module exposes one instance per width/signedness (int8 … uint64); the
    instances are compared by identity and pickle by name.
    """
    __slots__ = ("_name", "_bits", "_signed")

    def __init__(self, name, bits, signed, /):
        self._name = name
        self._bits = bits
        self._signed = signed

    @property
    def name(self):
        return self._name

    @property
    def bits(self):
        return self._bits

    @property
    def signed(self):
        return self._signed

    @property
    def capacity(self):
        """
        Largest value the unsigned accumulator of this width can hold.
        """
        return (1 << self._bits) - 1

    @property
    def minimum(self):
        return -(1 << (self._bits - 1)) if self._signed else 0

    @property
    def maximum(self):
        return (1 << (self._bits - 1)) - 1 if self._signed else self.capacity

    def __repr__(self):
        return self._name

    def __reduce__(self):
        return self._name


@final
class CharacterKind:
    """
    Type tag for single-character values.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __repr__(self):
        return "char"

    def __reduce__(self):
        return "char"


int8 = IntegerKind("int8", 8, True)
uint8 = IntegerKind("uint8", 8, False)
int16 = IntegerKind("int16", 16, True)
uint16 = IntegerKind("uint16", 16, False)
int32 = IntegerKind("int32", 32, True)
uint32 = IntegerKind("uint32", 32, False)
int64 = IntegerKind("int64", 64, True)
uint64 = IntegerKind("uint64", 64, False)
char = CharacterKind()


class Binding[_T]:
    """
    Explicit output-binding handle.

    A value created with value(kind, binding=handle) writes every parsed result
    into handle.value, including after clone(). Lists are replaced by a new list
    object on every parse, never mutated in place.
    """
    __slots__ = ("value",)

    def __init__(self, value=None, /):
        self.value = value

    def __repr__(self):
        return f"binding({self.value!r})"


def _islist(kind):
    return isinstance(kind, GenericAlias) and kind.__origin__ is list


def normalize(kind, /):
    """
    Return the canonical type tag for 'kind'.

    - int → int64, list[int] → list[int64]
    - bare list, nested lists and non-callables are rejected with TypeError.
    """
    if kind is int:
        return int64
    if _islist(kind):
        if len(kind.__args__) != 1:
            raise TypeError("list kinds take exactly one element kind")
        if _islist(element := normalize(kind.__args__[0])):
            raise TypeError("nested list kinds are not supported")
        return list[element]
    if kind is list:
        raise TypeError("list kinds must name an element kind (e.g. list[str])")
    if kind is bool or kind is str or isinstance(kind, IntegerKind | CharacterKind):
        return kind
    if isinstance(kind, GenericAlias) or not callable(kind):
        raise TypeError("value kind must be a type tag or a callable converter")
    return kind


def describe(kind, /):
    """
    Human-friendly label for a kind ("uint8", "list[str]", "float", ...).
    """
    if _islist(kind):
        return "list[%s]" % describe(kind.__args__[0])
    if isinstance(kind, IntegerKind | CharacterKind):
        return repr(kind)
    return getattr(kind, "__name__", repr(kind))


def _incorrect(text, kind, hint):
    trigger(ArgumentIncorrectTypeError(
        "argument %r failed to parse as %s" % (text, describe(kind)),
        title="incorrect argument type",
        code=FaultCode.ARGUMENT_INCORRECT_TYPE,
        hint=hint,
        argument=text,
        kind=kind,
        docs=getdoc(FaultCode.ARGUMENT_INCORRECT_TYPE)
    ))


def _parse_boolean(text):
    if (folded := text.lower()) in _TRUTHY:
        return True
    if folded in _FALSY:
        return False
    _incorrect(text, bool, "use one of true, t, 1 or false, f, 0")


def _parse_character(text):
    if len(text) != 1:
        _incorrect(text, char, "use exactly one character")
    return text


def _parse_integer(text, kind):
    hint = "use a base-10 or 0x-prefixed base-16 integer between %d and %d" % (kind.minimum, kind.maximum)

    index = 0
    negative = text.startswith("-")
    if negative:
        index += 1

    base = 10
    if text.startswith("0x", index):
        base = 16
        index += 2

    if index == len(text):
        _incorrect(text, kind, hint)

    result = 0
    for character in text[index:]:
        if "0" <= character <= "9":
            digit = ord(character) - ord("0")
        elif base == 16 and "a" <= character <= "f":
            digit = ord(character) - ord("a") + 10
        elif base == 16 and "A" <= character <= "F":
            digit = ord(character) - ord("A") + 10
        else:
            _incorrect(text, kind, hint)

        # the accumulator is as wide as the target; it must never wrap
        if (result := result * base + digit) > kind.capacity:
            _incorrect(text, kind, hint)

    if kind.signed:
        if result > (-kind.minimum if negative else kind.maximum):
            _incorrect(text, kind, hint)
    elif negative:
        _incorrect(text, kind, hint)

    return -result if negative else result


def _parse_generic(text, kind):
    try:
        return kind(text)
    except (ValueError, TypeError, ArithmeticError):
        _incorrect(text, kind, "check the expected format of %s values" % describe(kind))


class ValueType(type):
    """
    Metaclass that gives value variants a stable, introspectable shape.

    - __typename__ is derived from the class name (camel-case split with hyphens).
    - every name listed in __introspectable__ becomes a read-only property
      mirroring the "_{name}" backing field.
    - __repr__/__rich_repr__ show the introspectable fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Value(metaclass=ValueType):
    """
    Immutable template describing how to parse one option's text.

    Templates never hold parsed data themselves: the registry keeps one template per
    option and every parse works on clone(), which starts with empty storage and
    keeps the default/implicit metadata and the binding.

    Builders (each returns a new template)
    - default_value(text): value used when the option is absent.
    - implicit_value(text): value used when the option is given without argument.
    - no_implicit_value(): require an explicit argument (e.g. for a boolean).
    """
    __introspectable__ = ("kind", "default", "implicit", "binding")

    is_container = False
    is_boolean = False

    def __init__(self, kind, /, *, default=Unset, implicit=Unset, binding=Unset):
        if not isinstance(default, str | UnsetType):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string")
        if not isinstance(implicit, str | UnsetType):
            raise TypeError(f"{type(self).__typename__} 'implicit' must be a string")
        if not isinstance(binding, Binding | UnsetType):
            raise TypeError(f"{type(self).__typename__} 'binding' must be a binding")
        self._kind = kind
        self._default = default
        self._implicit = implicit
        self._binding = binding
        self._store = Unset

    @property
    def has_default(self):
        return self._default is not Unset

    @property
    def has_implicit(self):
        return self._implicit is not Unset

    @property
    def has_value(self):
        return self._store is not Unset

    def default_value(self, text, /):
        return self.__replace__(default=text)

    def implicit_value(self, text, /):
        return self.__replace__(implicit=text)

    def no_implicit_value(self):
        return self.__replace__(implicit=Unset)

    def accepts(self, kind, /):
        """
        Whether 'kind' names the kind this value was declared with.
        """
        try:
            return normalize(kind) == self._kind
        except TypeError:
            return False

    def clone(self):
        """
        Return a fresh instance: same metadata and binding, empty storage.
        """
        return self.__replace__()

    def parse(self, text, /):
        self._assign(self._convert(text))

    def parse_default(self):
        if self._default is Unset:
            raise ValueError(f"{type(self).__typename__} has no default value")
        self.parse(self._default)

    def get(self):
        """
        Return the stored value (lists as a fresh copy), or None when empty.
        """
        if self._store is Unset:
            return None
        if isinstance(self._store, list):
            return list(self._store)
        return self._store

    def _assign(self, object):
        self._store = object
        if self._binding is not Unset:
            self._binding.value = object

    def _convert(self, text):
        raise NotImplementedError

    def _changes(self):
        return {"default": self._default, "implicit": self._implicit, "binding": self._binding}

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self._kind, **{**self._changes(), **overrides})


class BooleanValue(Value):
    is_boolean = True

    def _convert(self, text):
        return _parse_boolean(text)


class StringValue(Value):
    def _convert(self, text):
        return text


class CharacterValue(Value):
    def _convert(self, text):
        return _parse_character(text)


class IntegerValue(Value):
    def _convert(self, text):
        return _parse_integer(text, self._kind)


class GenericValue(Value):
    def _convert(self, text):
        return _parse_generic(text, self._kind)


class ListValue(Value):
    """
    Delimited list of an element kind.

    Each parse converts every segment of the token first and only then appends the
    elements to the accumulated list, so a bad segment leaves the storage untouched.
    Repeated occurrences (and positional fills) keep accumulating.
    """
    __introspectable__ = ("kind", "default", "implicit", "binding", "delimiter")

    is_container = True

    def __init__(self, kind, /, *, default=Unset, implicit=Unset, binding=Unset, delimiter=DEFAULT_DELIMITER):
        super().__init__(kind, default=default, implicit=implicit, binding=binding)
        if not isinstance(delimiter, str) or len(delimiter) != 1:
            raise TypeError(f"{type(self).__typename__} 'delimiter' must be a single character")
        self._delimiter = delimiter
        self._element = value(kind.__args__[0])

    def parse(self, text, /):
        elements = self._convert(text)
        # a new list object on every parse: bindings are replaced, not mutated
        self._assign(coalesce(self._store, []) + elements)

    def _convert(self, text):
        return [self._element._convert(segment) for segment in text.split(self._delimiter)]

    def _changes(self):
        return super()._changes() | {"delimiter": self._delimiter}


def value(kind=bool, /, *, binding=Unset, delimiter=Unset):
    """
    Build a value template for 'kind'.

    Parameters
    - kind: bool (default), str, char, int8 … uint64, int, list[K], or a callable.
    - binding: Binding that receives every parsed result.
    - delimiter: list separator (list kinds only, default ",").

    Notes
    - boolean templates come with default "false" and implicit "true", so a bare
      --flag sets True and an absent flag reads False.
    """
    kind = normalize(kind)

    if delimiter is not Unset and not _islist(kind):
        raise TypeError("only list values accept a 'delimiter'")

    if _islist(kind):
        return ListValue(kind, binding=binding, delimiter=coalesce(delimiter, DEFAULT_DELIMITER))
    if kind is bool:
        return BooleanValue(kind, default="false", implicit="true", binding=binding)
    if kind is str:
        return StringValue(kind, binding=binding)
    if kind is char:
        return CharacterValue(kind, binding=binding)
    if isinstance(kind, IntegerKind):
        return IntegerValue(kind, binding=binding)
    return GenericValue(kind, binding=binding)


def convert(kind, text, /, *, delimiter=Unset):
    """
    Convert 'text' to 'kind' once, with the same rules as value(kind).parse(text).
    """
    instance = value(kind, delimiter=delimiter)
    instance.parse(text)
    return instance.get()


__all__ = (
    # Kinds
    "int8",
    "uint8",
    "int16",
    "uint16",
    "int32",
    "uint32",
    "int64",
    "uint64",
    "char",
    "IntegerKind",
    "CharacterKind",

    # Values
    "Value",
    "BooleanValue",
    "StringValue",
    "CharacterValue",
    "IntegerValue",
    "GenericValue",
    "ListValue",
    "Binding",

    # Factories and helpers
    "value",
    "convert",
    "normalize",
    "describe",

    # Constants
    "DEFAULT_DELIMITER",
)

# Not part of the public API.
del ValueType
