# python
"""
Validators behavioral tests.

Scope
- Validate argument validators in isolation: modes, accepted and rejected
  values, reasons and construction errors.
- Validate dependency validators (Requires, Prohibits) against a set of
  supplied names, and the RequiresAny schema validator.
- Validate immutability and repr of validator instances.

Conventions
- Test method names follow CamelCase per project convention.
- Validators are called directly; their integration with parsing is covered
  by the engine tests.
"""

from __future__ import annotations

import re
import unittest
from unittest import TestCase

from argentum import (
    ErrorCategory,
    ValidationMode,
    ValidateNotEmpty,
    ValidateStringLength,
    ValidatePattern,
    ValidateRange,
    ValidateNotNull,
    ValidateCount,
    Requires,
    Prohibits,
    RequiresAny,
)


class TestTextValidators(TestCase):

    def testNotEmpty(self):
        validator = ValidateNotEmpty()
        self.assertIs(validator.mode, ValidationMode.BEFORE_CONVERSION)
        self.assertTrue(validator.is_valid(None, "x"))
        self.assertFalse(validator.is_valid(None, ""))

    def testStringLength(self):
        validator = ValidateStringLength(2, 4)
        self.assertTrue(validator.is_valid(None, "abc"))
        self.assertFalse(validator.is_valid(None, "a"))
        self.assertFalse(validator.is_valid(None, "abcde"))
        self.assertEqual(validator.reason(None, "a"), "the value must be between 2 and 4 characters long")

    def testStringLengthOpenEnded(self):
        validator = ValidateStringLength(3)
        self.assertTrue(validator.is_valid(None, "x" * 100))
        self.assertEqual(validator.reason(None, "x"), "the value must be at least 3 characters long")

    def testStringLengthBounds(self):
        with self.assertRaises(ValueError):
            ValidateStringLength(5, 2)
        with self.assertRaises(TypeError):
            ValidateStringLength("1")

    def testPattern(self):
        validator = ValidatePattern(r"^\d+$")
        self.assertTrue(validator.is_valid(None, "123"))
        self.assertFalse(validator.is_valid(None, "12a"))
        self.assertEqual(validator.reason(None, "12a"), "the value must match '^\\\\d+$'")

    def testPatternCompiledAndMessage(self):
        validator = ValidatePattern(re.compile("^[a-z]+$"), message="only lowercase letters are allowed")
        self.assertFalse(validator.is_valid(None, "ABC"))
        self.assertEqual(validator.reason(None, "ABC"), "only lowercase letters are allowed")

    def testPatternType(self):
        with self.assertRaises(TypeError):
            ValidatePattern(42)


class TestValueValidators(TestCase):

    def testRange(self):
        validator = ValidateRange(1, 10)
        self.assertIs(validator.mode, ValidationMode.AFTER_CONVERSION)
        self.assertTrue(validator.is_valid(None, 5))
        self.assertFalse(validator.is_valid(None, 0))
        self.assertFalse(validator.is_valid(None, 11))
        self.assertTrue(validator.is_valid(None, None))
        self.assertEqual(validator.reason(None, 0), "the value must be between 1 and 10")

    def testRangeOneBound(self):
        self.assertEqual(ValidateRange(minimum=1).reason(None, 0), "the value must be at least 1")
        self.assertEqual(ValidateRange(maximum=9).reason(None, 10), "the value must be at most 9")

    def testRangeBounds(self):
        with self.assertRaises(ValueError):
            ValidateRange()
        with self.assertRaises(ValueError):
            ValidateRange(10, 1)

    def testNotNull(self):
        validator = ValidateNotNull()
        self.assertFalse(validator.is_valid(None, None))
        self.assertTrue(validator.is_valid(None, 0))

    def testCount(self):
        validator = ValidateCount(1, 2)
        self.assertIs(validator.mode, ValidationMode.AFTER_PARSING)
        self.assertTrue(validator.is_valid(None, ["a"]))
        self.assertFalse(validator.is_valid(None, []))
        self.assertFalse(validator.is_valid(None, ["a", "b", "c"]))
        self.assertTrue(validator.is_valid(None, {"k": "v"}))


class TestDependencies(TestCase):

    def testRequires(self):
        validator = Requires("User", "Host")
        self.assertIs(validator.category, ErrorCategory.DEPENDENCY_FAILED)
        self.assertIs(validator.mode, ValidationMode.AFTER_PARSING)
        self.assertEqual(validator.names, ("User", "Host"))
        self.assertTrue(validator.is_valid(None, "x", supplied=frozenset({"User", "Host"})))
        self.assertFalse(validator.is_valid(None, "x", supplied=frozenset({"User"})))
        self.assertEqual(validator.reason(None, "x"), "requires")

    def testProhibits(self):
        validator = Prohibits("Quiet")
        self.assertTrue(validator.is_valid(None, True, supplied=frozenset({"Verbose"})))
        self.assertFalse(validator.is_valid(None, True, supplied=frozenset({"Verbose", "Quiet"})))
        self.assertEqual(validator.reason(None, True), "cannot be used together with")

    def testNamesRequired(self):
        with self.assertRaises(TypeError):
            Requires()
        with self.assertRaises(TypeError):
            Prohibits("")

    def testRequiresAny(self):
        validator = RequiresAny("File", "Url")
        self.assertTrue(validator.is_valid({"Url": "x"}))
        self.assertFalse(validator.is_valid({}))
        self.assertEqual(validator.reason(), "at least one of 'File', 'Url' must be supplied")

    def testRequiresAnyNeedsTwoNames(self):
        with self.assertRaises(TypeError):
            RequiresAny("File")


class TestValidatorObjects(TestCase):

    def testImmutable(self):
        validator = ValidateRange(1, 2)
        with self.assertRaises(AttributeError):
            validator.minimum = 0

    def testRepr(self):
        self.assertEqual(repr(ValidateRange(1, 2)), "validate-range(minimum=1, maximum=2)")
        self.assertEqual(repr(Requires("A")), "requires(names=('A',))")
        self.assertEqual(repr(ValidateNotEmpty()), "validate-not-empty()")


if __name__ == "__main__":
    unittest.main()
