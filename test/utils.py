"""
Utilities tests (Unset sentinel, coalesce, rename, mirror).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from keelson.utils import Unset, UnsetType, coalesce, rename, mirror


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalseyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        self.assertIsNot(Unset, None)

    def testUnion(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)
        self.assertNotIsInstance(None, str | Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # noqa
                pass


class TestHelpers(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "x"))
        self.assertEqual(coalesce("", "x"), "")
        self.assertEqual(coalesce(0, 1), 0)

    def testRename(self):
        def target():
            pass

        self.assertIs(rename(target, "renamed"), target)
        self.assertEqual(target.__name__, "renamed")
        self.assertEqual(target.__qualname__, "renamed")

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__name__, "decorated")

    def testRenameRejectsBadInput(self):
        with self.assertRaises(TypeError):
            rename("not callable", "name")
        with self.assertRaises(TypeError):
            rename(len, 42)
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self):
        class Node:
            items = mirror("items")
            table = mirror("table")
            label = mirror("label")

            def __init__(self):
                self._items = ([1, 2], (3,))
                self._table = {"a": [1]}
                self._label = "node"

        node = Node()
        self.assertEqual(node.items, [[1, 2], [3]])
        node.items[0].append(9)
        node.table["a"].append(9)
        self.assertEqual(node._items, ([1, 2], (3,)))
        self.assertEqual(node._table, {"a": [1]})
        self.assertEqual(node.label, "node")

        with self.assertRaises(AttributeError):
            node.label = "other"

    def testMirrorNeedsName(self):
        with self.assertRaises(TypeError):
            mirror(42)


if __name__ == "__main__":
    unittest.main()
