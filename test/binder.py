# python
"""
Argument binder behavioral tests.

Scope
- Validate binding per argument kind: single values (duplicate policy),
  multi values (separator splitting, order), dictionaries (key/value
  separator, duplicate keys), switches and method callbacks.
- Validate conversion and null failures, and the validators that run while
  binding (before and after conversion).
- Validate bind-then-commit: a failing bind leaves the state untouched.

Conventions
- Test method names follow CamelCase per project convention.
- The binder is driven directly with a fresh BindingState per test.
"""

from __future__ import annotations

import unittest
import warnings
from unittest import TestCase

from argentum import (
    Argument,
    ArgumentSchema,
    ArgumentValueConversionError,
    CallableConverter,
    CancelMode,
    DuplicateArgumentError,
    DuplicateArgumentWarning,
    ErrorCategory,
    ErrorMode,
    InvalidDictionaryValueError,
    NullArgumentValueError,
    ParseOptions,
    ValidateNotEmpty,
    ValidateRange,
    ValidationFailedError,
    dictionary,
    method,
    multi,
    switch,
)
from argentum.binder import ArgumentBinder, BindingState


def binder(*arguments, **options):
    return ArgumentBinder(ArgumentSchema(*arguments, options=ParseOptions(**options)))


class TestSingle(TestCase):

    def setUp(self):
        self.name = Argument("Name")
        self.state = BindingState()

    def testBind(self):
        binder(self.name).bind(self.state, self.name, "Alice", name="name")
        self.assertEqual(self.state.values[self.name], "Alice")
        self.assertEqual(self.state.supplied, {self.name: "name"})
        self.assertIn(self.name, self.state)

    def testPositionalBindHasNoName(self):
        binder(self.name).bind(self.state, self.name, "Alice")
        self.assertIsNone(self.state.supplied[self.name])

    def testDuplicateIsError(self):
        instance = binder(self.name)
        instance.bind(self.state, self.name, "Alice")
        with self.assertRaises(DuplicateArgumentError) as context:
            instance.bind(self.state, self.name, "Bob", token="-Name:Bob", index=1)
        self.assertEqual(self.state.values[self.name], "Alice")
        self.assertEqual(context.exception.argument, "Name")
        self.assertEqual(context.exception.token, "-Name:Bob")
        self.assertIs(context.exception.category, ErrorCategory.DUPLICATE_ARGUMENT)

    def testDuplicateAllowed(self):
        instance = binder(self.name, duplicates=ErrorMode.ALLOW)
        instance.bind(self.state, self.name, "Alice")
        instance.bind(self.state, self.name, "Bob")
        self.assertEqual(self.state.values[self.name], "Bob")

    def testDuplicateWarning(self):
        instance = binder(self.name, duplicates=ErrorMode.WARNING)
        instance.bind(self.state, self.name, "Alice")
        with self.assertWarns(DuplicateArgumentWarning) as context:
            instance.bind(self.state, self.name, "Bob")
        self.assertEqual(self.state.values[self.name], "Bob")
        self.assertEqual(context.warning.argument, "Name")

    def testDuplicateWarningAsError(self):
        instance = binder(self.name, duplicates=ErrorMode.WARNING)
        instance.bind(self.state, self.name, "Alice")
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            with self.assertRaises(DuplicateArgumentError) as context:
                instance.bind(self.state, self.name, "Bob", token="-Name", index=2)
        self.assertEqual(self.state.values[self.name], "Alice")
        self.assertEqual(context.exception.index, 2)

    def testConversionFailure(self):
        count = Argument("Count", type=int)
        with self.assertRaises(ArgumentValueConversionError) as context:
            binder(count).bind(self.state, count, "abc", index=2)
        self.assertEqual(context.exception.value, "abc")
        self.assertEqual(context.exception.expected, "integer")
        self.assertEqual(context.exception.index, 2)
        self.assertNotIn(count, self.state)

    def testNullable(self):
        count = Argument("Count", type=int | None)
        binder(count).bind(self.state, count, "")
        self.assertIsNone(self.state.values[count])

    def testNullNotAllowed(self):
        empty = Argument("Empty", converter=CallableConverter(lambda text: None, "nothing"))
        with self.assertRaises(NullArgumentValueError):
            binder(empty).bind(self.state, empty, "x")
        self.assertNotIn(empty, self.state)


class TestSwitch(TestCase):

    def setUp(self):
        self.verbose = switch("Verbose")
        self.state = BindingState()

    def testPresence(self):
        binder(self.verbose).bind(self.state, self.verbose, None)
        self.assertIs(self.state.values[self.verbose], True)

    def testExplicitValue(self):
        binder(self.verbose).bind(self.state, self.verbose, "false")
        self.assertIs(self.state.values[self.verbose], False)

    def testInvalidExplicitValue(self):
        with self.assertRaises(ArgumentValueConversionError):
            binder(self.verbose).bind(self.state, self.verbose, "maybe")


class TestMulti(TestCase):

    def setUp(self):
        self.state = BindingState()

    def testSeparatorAndOrder(self):
        tag = multi("Tag", separator=",")
        instance = binder(tag)
        instance.bind(self.state, tag, "a,b")
        instance.bind(self.state, tag, "c")
        self.assertEqual(self.state.values[tag], ["a", "b", "c"])

    def testWithoutSeparator(self):
        tag = multi("Tag")
        binder(tag).bind(self.state, tag, "a,b")
        self.assertEqual(self.state.values[tag], ["a,b"])

    def testAtomicFailure(self):
        number = multi("Number", type=int, separator=",")
        instance = binder(number)
        instance.bind(self.state, number, "1,2")
        with self.assertRaises(ArgumentValueConversionError):
            instance.bind(self.state, number, "3,x")
        self.assertEqual(self.state.values[number], [1, 2])

    def testRepeatedOccurrencesAreNotDuplicates(self):
        tag = multi("Tag")
        instance = binder(tag)
        for value in ("a", "b", "a"):
            instance.bind(self.state, tag, value)
        self.assertEqual(self.state.values[tag], ["a", "b", "a"])


class TestDictionary(TestCase):

    def setUp(self):
        self.state = BindingState()

    def testPairs(self):
        define = dictionary("Define")
        instance = binder(define)
        instance.bind(self.state, define, "K1=V1")
        instance.bind(self.state, define, "K2=V2")
        self.assertEqual(self.state.values[define], {"K1": "V1", "K2": "V2"})

    def testSplitOnce(self):
        define = dictionary("Define")
        binder(define).bind(self.state, define, "K=a=b")
        self.assertEqual(self.state.values[define], {"K": "a=b"})

    def testDuplicateKey(self):
        define = dictionary("Define")
        instance = binder(define)
        instance.bind(self.state, define, "K1=V1")
        with self.assertRaises(InvalidDictionaryValueError) as context:
            instance.bind(self.state, define, "K1=V3")
        self.assertEqual(self.state.values[define], {"K1": "V1"})
        self.assertIn("K1", context.exception.inner)

    def testDuplicateKeysAllowed(self):
        define = dictionary("Define", duplicate_keys=True)
        instance = binder(define)
        for pair in ("K1=V1", "K2=V2", "K1=V3"):
            instance.bind(self.state, define, pair)
        value = self.state.values[define]
        self.assertEqual(value, {"K1": "V3", "K2": "V2"})
        self.assertEqual(list(value), ["K1", "K2"])

    def testMissingSeparator(self):
        define = dictionary("Define")
        with self.assertRaises(InvalidDictionaryValueError) as context:
            binder(define).bind(self.state, define, "K1")
        self.assertIsNotNone(context.exception.inner)
        self.assertNotIn(define, self.state)

    def testTypedSlots(self):
        limit = dictionary("Limit", value_type=int, key_value_separator=":")
        binder(limit).bind(self.state, limit, "cpu:4")
        self.assertEqual(self.state.values[limit], {"cpu": 4})

    def testValueConversionFailure(self):
        limit = dictionary("Limit", value_type=int)
        with self.assertRaises(ArgumentValueConversionError):
            binder(limit).bind(self.state, limit, "cpu=many")

    def testSeparatorSplitsPairs(self):
        define = dictionary("Define", separator=",")
        binder(define).bind(self.state, define, "a=1,b=2")
        self.assertEqual(self.state.values[define], {"a": "1", "b": "2"})


class TestMethod(TestCase):

    def setUp(self):
        self.state = BindingState()
        self.calls = []

    def testSwitchCallback(self):
        @method("Version")
        def version():
            self.calls.append("version")

        self.assertIsNone(binder(version).bind(self.state, version, None))
        self.assertEqual(self.calls, ["version"])
        self.assertIn(version, self.state)
        self.assertNotIn(version, self.state.values)

    def testFalseCancels(self):
        @method("Version")
        def version():
            return False

        self.assertIs(binder(version).bind(self.state, version, None), CancelMode.ABORT)

    def testCancelModeReturned(self):
        @method("Help")
        def help():
            return CancelMode.ABORT_WITH_HELP

        self.assertIs(binder(help).bind(self.state, help, None), CancelMode.ABORT_WITH_HELP)

    def testValuedCallback(self):
        @method("Level", type=int)
        def level(value):
            self.calls.append(value)

        binder(level).bind(self.state, level, "3")
        self.assertEqual(self.calls, [3])

    def testExplicitFalseSkipsCallback(self):
        @method("Version")
        def version():
            self.calls.append("version")

        binder(version).bind(self.state, version, "false")
        self.assertEqual(self.calls, [])


class TestValidators(TestCase):

    def setUp(self):
        self.state = BindingState()

    def testBeforeConversion(self):
        name = Argument("Name", validators=[ValidateNotEmpty()])
        with self.assertRaises(ValidationFailedError) as context:
            binder(name).bind(self.state, name, "")
        self.assertIn("cannot be empty", context.exception.message)

    def testAfterConversion(self):
        count = Argument("Count", type=int, validators=[ValidateRange(1, 10)])
        instance = binder(count)
        with self.assertRaises(ValidationFailedError) as context:
            instance.bind(self.state, count, "11")
        self.assertIn("between 1 and 10", context.exception.message)
        self.assertEqual(context.exception.value, "11")
        instance.bind(self.state, count, "7")
        self.assertEqual(self.state.values[count], 7)

    def testAfterConversionOnEveryElement(self):
        number = multi("Number", type=int, separator=",", validators=[ValidateRange(minimum=0)])
        with self.assertRaises(ValidationFailedError):
            binder(number).bind(self.state, number, "1,-1")
        self.assertNotIn(number, self.state)


if __name__ == "__main__":
    unittest.main()
