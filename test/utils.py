# python
"""
Utilities module behavioral tests.

Scope
- Validate the Unset sentinel: singleton, falsey, printable, copy/pickle safe.
- Validate coalesce, rename, mirror, ordinal and identifier.
- Validate DescriptorType: mirrored read-only fields, typename, repr, sealing.

Conventions
- Test method names follow CamelCase per project convention.
- Only the public helpers listed in argentum.utils.__all__ are exercised.
"""

from __future__ import annotations

import copy
import pickle
import unittest
from unittest import TestCase

from argentum.utils import (
    Unset,
    UnsetType,
    DescriptorType,
    coalesce,
    rename,
    mirror,
    ordinal,
    identifier,
)


class TestUnset(TestCase):
    """Sentinel identity and protocol behavior."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCopyAndPicklePreserveSingleton(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnionWithType(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(None, str | Unset)


class TestCoalesce(TestCase):

    def testUnsetIsReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testFalseyValuesArePreserved(self):
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertEqual(coalesce(value, "fallback"), value)

    def testDefaultIsNone(self):
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):

    def testDirectForm(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(42, "renamed")

    def testRejectsWrongArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):

    def testReadOnlyCopy(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, [2]]

        holder = Holder()
        items = holder.items
        items.append(3)
        items[1].append(4)
        self.assertEqual(holder.items, [1, [2]])
        with self.assertRaises(AttributeError):
            holder.items = []

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestOrdinal(TestCase):

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(13), "13th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")

    def testRejectsNonInteger(self):
        with self.assertRaises(TypeError):
            ordinal("3")


class TestIdentifier(TestCase):

    def testNonWordCharacters(self):
        self.assertEqual(identifier("dry-run"), "dry_run")
        self.assertEqual(identifier("Output File"), "Output_File")

    def testLeadingDigit(self):
        self.assertEqual(identifier("1st"), "_1st")

    def testKeyword(self):
        self.assertEqual(identifier("class"), "class_")

    def testCaseIsKept(self):
        self.assertEqual(identifier("Name"), "Name")

    def testEmptyRejected(self):
        with self.assertRaises(ValueError):
            identifier("  ")


class TestDescriptorType(TestCase):

    def setUp(self):
        class SamplePoint(metaclass=DescriptorType):
            __introspectable__ = ("x", "y")

            def __init__(self, x, y):
                self._x = x
                self._y = y
                self._sealed = True

        self.cls = SamplePoint

    def testTypename(self):
        self.assertEqual(self.cls.__typename__, "sample-point")

    def testMirroredFields(self):
        point = self.cls(1, 2)
        self.assertEqual((point.x, point.y), (1, 2))

    def testRepr(self):
        self.assertEqual(repr(self.cls(1, "a")), "sample-point(x=1, y='a')")

    def testRichRepr(self):
        self.assertEqual(list(self.cls(1, 2).__rich_repr__()), [("x", 1), ("y", 2)])

    def testSealed(self):
        point = self.cls(1, 2)
        with self.assertRaises(AttributeError):
            point.x = 3
        with self.assertRaises(AttributeError):
            point.z = 3


if __name__ == "__main__":
    unittest.main()
