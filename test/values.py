"""
Values module behavioral tests (kinds, templates, conversion rules, bindings).

Scope
- Validate the text conversion rules per kind (boolean, integers, char, lists, generic).
- Validate template immutability, clone() isolation and output bindings.
- Validate kind normalization and factory argument checks.

Conventions
- Test method names follow CamelCase per project convention.
- Conversions go through the public convert()/value() API.
"""
import unittest
from decimal import Decimal
from pathlib import Path
from unittest import TestCase

from optkit import (
    ArgumentIncorrectTypeError,
    Binding,
    BooleanValue,
    FaultCode,
    ListValue,
    StringValue,
    char,
    convert,
    int8,
    int64,
    int32,
    uint8,
    uint64,
    value,
)
from optkit.values import normalize, describe


class TestBooleanConversion(TestCase):
    """Booleans accept a small fixed vocabulary, case-insensitively."""

    def testTruthyWords(self):
        for text in ("t", "true", "1", "TRUE", "True", "T"):
            with self.subTest(text=text):
                self.assertIs(convert(bool, text), True)

    def testFalsyWords(self):
        for text in ("f", "false", "0", "", "FALSE", "F"):
            with self.subTest(text=text):
                self.assertIs(convert(bool, text), False)

    def testUnknownWordFails(self):
        for text in ("yes", "no", "2", " true"):
            with self.subTest(text=text):
                with self.assertRaises(ArgumentIncorrectTypeError):
                    convert(bool, text)

    def testBooleanTemplateDefaults(self):
        template = value()
        self.assertIsInstance(template, BooleanValue)
        self.assertEqual(template.default, "false")
        self.assertEqual(template.implicit, "true")
        self.assertTrue(template.is_boolean)


class TestIntegerConversion(TestCase):
    """Fixed-width integers: decimal or 0x-prefixed hexadecimal with overflow checks."""

    def testUnsignedBounds(self):
        self.assertEqual(convert(uint8, "255"), 255)
        self.assertEqual(convert(uint8, "0"), 0)
        with self.assertRaises(ArgumentIncorrectTypeError):
            convert(uint8, "256")

    def testUnsignedRejectsMinus(self):
        for text in ("-1", "-0"):
            with self.subTest(text=text):
                with self.assertRaises(ArgumentIncorrectTypeError):
                    convert(uint8, text)

    def testSignedBounds(self):
        self.assertEqual(convert(int8, "-128"), -128)
        self.assertEqual(convert(int8, "127"), 127)
        with self.assertRaises(ArgumentIncorrectTypeError):
            convert(int8, "-129")
        with self.assertRaises(ArgumentIncorrectTypeError):
            convert(int8, "128")

    def testHexadecimal(self):
        self.assertEqual(convert(uint8, "0x1F"), 31)
        self.assertEqual(convert(uint8, "0xff"), 255)
        self.assertEqual(convert(int8, "-0x10"), -16)
        with self.assertRaises(ArgumentIncorrectTypeError):
            convert(int8, "0x80")

    def testSixtyFourBitEdges(self):
        self.assertEqual(convert(int64, "-9223372036854775808"), -(2 ** 63))
        self.assertEqual(convert(uint64, "18446744073709551615"), 2 ** 64 - 1)
        with self.assertRaises(ArgumentIncorrectTypeError):
            convert(uint64, "18446744073709551616")

    def testMalformedText(self):
        for text in ("", "-", "0x", "12a", "1.5", " 1", "+1", "0xg"):
            with self.subTest(text=text):
                with self.assertRaises(ArgumentIncorrectTypeError):
                    convert(int32, text)

    def testIntIsSixtyFourBit(self):
        self.assertIs(normalize(int), int64)
        self.assertEqual(convert(int, "-42"), -42)

    def testFaultCarriesContext(self):
        with self.assertRaises(ArgumentIncorrectTypeError) as context:
            convert(uint8, "256")
        fault = context.exception
        self.assertIs(fault.options["code"], FaultCode.ARGUMENT_INCORRECT_TYPE)
        self.assertEqual(fault.options["argument"], "256")
        self.assertIs(fault.options["kind"], uint8)
        self.assertIn("uint8", str(fault))

    def testKindLimits(self):
        self.assertEqual(uint8.maximum, 255)
        self.assertEqual(int8.minimum, -128)
        self.assertEqual(repr(int32), "int32")


class TestOtherKinds(TestCase):

    def testCharacter(self):
        self.assertEqual(convert(char, "x"), "x")
        for text in ("", "xy"):
            with self.subTest(text=text):
                with self.assertRaises(ArgumentIncorrectTypeError):
                    convert(char, text)

    def testStringIsVerbatim(self):
        self.assertEqual(convert(str, "  spaced, text "), "  spaced, text ")

    def testGenericKinds(self):
        self.assertEqual(convert(float, "1.5"), 1.5)
        self.assertEqual(convert(Decimal, "2.25"), Decimal("2.25"))
        self.assertEqual(convert(Path, "a/b"), Path("a/b"))
        with self.assertRaises(ArgumentIncorrectTypeError):
            convert(float, "one")

    def testListSplitsOnDelimiter(self):
        self.assertEqual(convert(list[str], "a,b,c"), ["a", "b", "c"])
        self.assertEqual(convert(list[str], "a;b", delimiter=";"), ["a", "b"])
        self.assertEqual(convert(list[str], ""), [""])
        self.assertEqual(convert(list[int], "1,0x2,-3"), [1, 2, -3])

    def testListSegmentsAreNotTrimmed(self):
        self.assertEqual(convert(list[str], "a, b"), ["a", " b"])
        with self.assertRaises(ArgumentIncorrectTypeError):
            convert(list[int], "1, 2")

    def testListRejectsEmptyIntegerSegment(self):
        with self.assertRaises(ArgumentIncorrectTypeError):
            convert(list[uint8], "1,,2")


class TestTemplates(TestCase):
    """Templates are immutable; clones own their storage."""

    def testBuildersReturnNewTemplates(self):
        template = value(str)
        defaulted = template.default_value("x")
        self.assertIsNot(template, defaulted)
        self.assertFalse(template.has_default)
        self.assertTrue(defaulted.has_default)
        self.assertEqual(defaulted.default, "x")
        self.assertIsInstance(defaulted, StringValue)

    def testNoImplicitValue(self):
        template = value(bool).no_implicit_value()
        self.assertFalse(template.has_implicit)
        self.assertTrue(template.has_default)

    def testCloneHasFreshStorage(self):
        template = value(str).default_value("d")
        clone = template.clone()
        clone.parse("x")
        self.assertFalse(template.has_value)
        self.assertEqual(clone.get(), "x")
        self.assertEqual(clone.default, "d")

    def testParseDefault(self):
        clone = value(uint8).default_value("7").clone()
        clone.parse_default()
        self.assertEqual(clone.get(), 7)
        with self.assertRaises(ValueError):
            value(str).clone().parse_default()

    def testGetWithoutValue(self):
        self.assertIsNone(value(str).clone().get())

    def testBindingWritesThrough(self):
        binding = Binding()
        clone = value(int, binding=binding).clone()
        clone.parse("7")
        self.assertEqual(binding.value, 7)

    def testBoundListIsReplacedPerParse(self):
        binding = Binding()
        clone = value(list[str], binding=binding).clone()
        clone.parse("a")
        first = binding.value
        clone.parse("b,c")
        self.assertEqual(first, ["a"])
        self.assertEqual(binding.value, ["a", "b", "c"])
        self.assertIsNot(binding.value, first)

    def testListFailureLeavesStorageUntouched(self):
        clone = value(list[uint8]).clone()
        clone.parse("1,2")
        with self.assertRaises(ArgumentIncorrectTypeError):
            clone.parse("3,300")
        self.assertEqual(clone.get(), [1, 2])

    def testListGetReturnsCopy(self):
        clone = value(list[str]).clone()
        clone.parse("a")
        clone.get().append("b")
        self.assertEqual(clone.get(), ["a"])

    def testListTemplate(self):
        template = value(list[int], delimiter=":")
        self.assertIsInstance(template, ListValue)
        self.assertTrue(template.is_container)
        self.assertEqual(template.delimiter, ":")
        self.assertEqual(template.default_value("1:2").delimiter, ":")

    def testAccepts(self):
        self.assertTrue(value(int).accepts(int64))
        self.assertTrue(value(int).accepts(int))
        self.assertFalse(value(int).accepts(int32))
        self.assertTrue(value(list[int]).accepts(list[int64]))
        self.assertFalse(value(bool).accepts(str))
        self.assertFalse(value(bool).accepts(list))

    def testRepr(self):
        self.assertTrue(repr(value(str)).startswith("string-value("))
        self.assertIn("kind=uint8", repr(value(uint8)))


class TestFactoryChecks(TestCase):

    def testDelimiterOnlyForLists(self):
        with self.assertRaises(TypeError):
            value(str, delimiter=";")

    def testDelimiterMustBeOneCharacter(self):
        with self.assertRaises(TypeError):
            value(list[str], delimiter="::")

    def testRejectedKinds(self):
        for kind in (list, list[list[int]], 5, "str"):
            with self.subTest(kind=kind):
                with self.assertRaises(TypeError):
                    value(kind)

    def testDefaultMustBeText(self):
        with self.assertRaises(TypeError):
            value(str).default_value(5)

    def testBindingMustBeBinding(self):
        with self.assertRaises(TypeError):
            value(str, binding=[])

    def testDescribe(self):
        self.assertEqual(describe(list[uint8]), "list[uint8]")
        self.assertEqual(describe(float), "float")
        self.assertEqual(describe(char), "char")


if __name__ == "__main__":
    unittest.main()
