"""
Groups module behavioral tests (construction and normalization).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argsmith import Group, GroupKind


class TestGroup(TestCase):
    """Behavioral tests for exclusive and conditional groups."""

    def testExclusiveNormalizesDashes(self):
        g = Group.exclusive("output", True, {"--json", "csv"})
        self.assertIs(g.kind, GroupKind.EXCLUSIVE)
        self.assertTrue(g.required)
        self.assertEqual(g.members, frozenset({"json", "csv"}))
        self.assertEqual(g.parents, frozenset())

    def testConditionalKeepsParents(self):
        g = Group.conditional("tls", False, ["--cert", "--key"], ["--secure"])
        self.assertIs(g.kind, GroupKind.CONDITIONAL)
        self.assertEqual(g.members, frozenset({"cert", "key"}))
        self.assertEqual(g.parents, frozenset({"secure"}))

    def testConditionalRequiresParents(self):
        with self.assertRaises(ValueError):
            Group.conditional("tls", False, {"cert"}, ())

    def testExclusiveRejectsParents(self):
        with self.assertRaises(ValueError):
            Group("output", GroupKind.EXCLUSIVE, False, {"json"}, {"format"})

    def testMembersCannotBeAString(self):
        with self.assertRaises(TypeError):
            Group.exclusive("output", False, "json")

    def testMembersCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Group.exclusive("output", False, ())

    def testMemberMadeOfDashesRejected(self):
        with self.assertRaises(ValueError):
            Group.exclusive("output", False, {"--"})

    def testNameCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Group.exclusive(" ", False, {"json"})

    def testKindMustBeGroupKind(self):
        with self.assertRaises(TypeError):
            Group("output", "exclusive", False, {"json"})

    def testRequiredIsCoercedToBool(self):
        self.assertIs(Group.exclusive("output", 1, {"json"}).required, True)


if __name__ == "__main__":
    unittest.main()
