"""
Parse result tests (lookups, typed access, sequential record, outcomes).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from optkit import (
    KeyValue,
    OptionHasNoValueError,
    OptionNotPresentError,
    OptionTypeMismatchError,
    Options,
    OptionValue,
    Outcome,
    int64,
    uint8,
    uint16,
    value,
)


class TestParseResult(TestCase):

    def setUp(self):
        self.options = Options("prog")
        self.options.add_options()(
            "v,verbose", "verbosity"
        )(
            "p,port", "port", value(uint16)
        )(
            "name", "name", value(str)
        )(
            "tag", "tags", value(list[str])
        )
        self.result = self.options.parse(["prog", "-v", "--port", "8080", "--tag", "a,b", "rest"])

    def testCountUnknownIsZero(self):
        self.assertEqual(self.result.count("nope"), 0)
        self.assertEqual(self.result.count(""), 0)
        self.assertEqual(self.result.count(["verbose"]), 0)

    def testValueUnknownFails(self):
        with self.assertRaises(OptionNotPresentError) as context:
            self.result.value("nope")
        self.assertEqual(context.exception.options["option"], "nope")
        with self.assertRaises(OptionNotPresentError):
            self.result["nope"]  # NOQA
        with self.assertRaises(OptionNotPresentError):
            self.result.value(["port"])

    def testBothNamesReachSameValue(self):
        self.assertIs(self.result["port"], self.result.value("p"))
        self.assertIsInstance(self.result["port"], OptionValue)

    def testTypedAccess(self):
        self.assertEqual(self.result["port"].as_(uint16), 8080)
        self.assertIs(self.result["verbose"].as_(bool), True)

    def testTypeMismatch(self):
        with self.assertRaises(OptionTypeMismatchError):
            self.result["verbose"].as_(str)
        with self.assertRaises(OptionTypeMismatchError):
            self.result["port"].as_(uint8)
        with self.assertRaises(OptionTypeMismatchError):
            self.result["port"].as_(int)

    def testHasNoValue(self):
        self.assertEqual(self.result.count("name"), 0)
        self.assertIsNone(self.result["name"].value)
        with self.assertRaises(OptionHasNoValueError):
            self.result["name"].as_(str)

    def testRepeatedQueriesAreIdentical(self):
        self.assertEqual(self.result.count("port"), self.result.count("port"))
        self.assertEqual(self.result["port"].as_(uint16), self.result["port"].as_(uint16))
        self.assertEqual(self.result["tag"].as_(list[str]), self.result["tag"].as_(list[str]))

    def testListAccessReturnsCopies(self):
        self.result["tag"].as_(list[str]).append("c")
        self.assertEqual(self.result["tag"].as_(list[str]), ["a", "b"])
        self.assertEqual(self.result["tag"].value, ["a", "b"])

    def testUnmatched(self):
        self.assertEqual(self.result.unmatched, ("prog", "rest"))
        self.assertIsInstance(self.result.unmatched, tuple)

    def testArguments(self):
        self.assertEqual(self.result.arguments(), (
            KeyValue("verbose", "true"),
            KeyValue("port", "8080"),
            KeyValue("tag", "a,b"),
        ))

    def testKeyValueConvertsAgain(self):
        port = self.result.arguments()[1]
        self.assertEqual(port.key, "port")
        self.assertEqual(port.as_(int64), 8080)
        self.assertEqual(self.result.arguments()[2].as_(list[str]), ["a", "b"])

    def testIterationCoversEveryOption(self):
        self.assertEqual(len(self.result), 4)
        self.assertEqual([option.details.name for option in self.result], ["verbose", "port", "name", "tag"])

    def testDetails(self):
        self.assertIs(self.result["p"].details, self.options.lookup("port"))

    def testResultIsReadOnly(self):
        with self.assertRaises(RuntimeError):
            self.result["name"]._parse("x")

    def testRepr(self):
        self.assertIn("unmatched=('prog', 'rest')", repr(self.result))
        self.assertIn("option='port'", repr(self.result["port"]))


class TestOutcome(TestCase):

    def testFields(self):
        outcome = Outcome(None, OptionNotPresentError("missing"))
        self.assertFalse(outcome.ok)
        self.assertIsNone(outcome.result)
        with self.assertRaises(OptionNotPresentError):
            outcome.unwrap()

    def testUnwrapSuccess(self):
        result = Options("prog").parse(["prog"])
        outcome = Outcome(result, None)
        self.assertTrue(outcome.ok)
        self.assertIs(outcome.unwrap(), result)


if __name__ == "__main__":
    unittest.main()
