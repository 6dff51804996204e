"""
Tests for the internal helpers of argsmith.utils.

This module verifies:
- The Unset sentinel (singleton identity, falsy semantics, finality, unions).
- coalesce() preserving legitimate falsy values.
- rename() in both function and decorator forms.
- mirror() handing out detached copies of container fields.
- SpecType deriving type names, properties and representations.
"""
import copy
import unittest
from unittest import TestCase

from argsmith.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the module singleton on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFinal(self) -> None:
        """
        Subclassing the sentinel type is rejected.
        """
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionWithTypes(self) -> None:
        """
        The sentinel can be used in isinstance() unions next to real types.
        """
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | None | Unset))
        self.assertFalse(isinstance(1, str | None | Unset))


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testFalsyValuesArePreserved(self) -> None:
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, "fallback"), 0)

    def testDefaultIsNone(self) -> None:
        self.assertIsNone(coalesce(Unset))


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        def work(): ...
        self.assertIs(rename(work, "task"), work)
        self.assertEqual(work.__name__, "task")
        self.assertEqual(work.__qualname__, "task")

    def testDecoratorForm(self) -> None:
        @rename("task")
        def work(): ...
        self.assertEqual(work.__name__, "task")

    def testBuiltinRejected(self) -> None:
        with self.assertRaises(TypeError):
            rename(len, "size")

    def testArityChecked(self) -> None:
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):

    def testContainersAreDetached(self) -> None:
        """
        Lists become tuples, mappings fresh dicts and sets frozensets.
        """
        class Holder:
            items = mirror("items")
            table = mirror("table")
            names = mirror("names")

            def __init__(self):
                self._items = [1, [2, 3]]
                self._table = {"a": [1]}
                self._names = {"x"}

        holder = Holder()
        self.assertEqual(holder.items, (1, (2, 3)))
        self.assertEqual(holder.table, {"a": (1,)})
        self.assertEqual(holder.names, frozenset({"x"}))
        holder.table["b"] = 2
        self.assertNotIn("b", holder.table)

    def testNameMustBeString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class SpecTypeTest(TestCase):

    def setUp(self) -> None:
        class SampleSpec(metaclass=SpecType):
            __introspectable__ = ("name", "tags")
            __displayable__ = ("name",)

            def __init__(self, name, tags):
                self._name = name
                self._tags = tags

        self.SampleSpec = SampleSpec

    def testTypename(self) -> None:
        self.assertEqual(self.SampleSpec.__typename__, "sample-spec")

    def testReadOnlyProperties(self) -> None:
        sample = self.SampleSpec("x", ["a"])
        self.assertEqual(sample.tags, ("a",))
        with self.assertRaises(AttributeError):
            sample.name = "y"

    def testRepr(self) -> None:
        self.assertEqual(repr(self.SampleSpec("x", [])), "sample-spec(name='x')")

    def testDisplayableDefaultsToIntrospectable(self) -> None:
        """
        Without __displayable__ every introspectable field is listed.
        """
        class PlainSpec(metaclass=SpecType):
            __introspectable__ = ("name",)

            def __init__(self, name):
                self._name = name

        self.assertIs(SpecType.__displayable__, Unset)
        self.assertEqual(repr(PlainSpec("x")), "plain-spec(name='x')")


if __name__ == "__main__":
    unittest.main()
