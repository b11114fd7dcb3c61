# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

from trackpg.errors import PersistenceError
from trackpg.kv import KeyLocks, SQLiteKeyValueStore


class TestSQLiteKeyValueStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="trackpg-test-"))
        self.store = SQLiteKeyValueStore(self._tmp / "data" / "trackpg.db")

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def test_get_set_delete(self) -> None:
        self.assertIsNone(self.store.get("waterGoal"))
        self.store.set("waterGoal", "2000")
        self.store.set("waterGoal", "2500")
        self.assertEqual(self.store.get("waterGoal"), "2500")
        self.store.delete("waterGoal")
        self.assertIsNone(self.store.get("waterGoal"))

    def test_keys_prefix_is_literal(self) -> None:
        for key in ("waterLog_2026-10-19", "waterLog_2026-10-20", "waterLogX", "foodLog_2026-10-19"):
            self.store.set(key, "[]")
        self.assertEqual(self.store.keys("waterLog_"), ["waterLog_2026-10-19", "waterLog_2026-10-20"])

    def test_values_survive_reopen(self) -> None:
        self.store.set("learningLog", '[{"topic": "x"}]')
        reopened = SQLiteKeyValueStore(self.store.db_path)
        self.assertEqual(reopened.get("learningLog"), '[{"topic": "x"}]')

    def test_unusable_path_raises_persistence_error(self) -> None:
        with self.assertRaises(PersistenceError):
            SQLiteKeyValueStore(self._tmp)


class TestKeyLocks(unittest.TestCase):
    def test_same_key_same_lock(self) -> None:
        locks = KeyLocks()
        self.assertIs(locks.for_key("foodLog_2026-10-19"), locks.for_key("foodLog_2026-10-19"))
        self.assertIsNot(locks.for_key("foodLog_2026-10-19"), locks.for_key("waterLog_2026-10-19"))


if __name__ == "__main__":
    unittest.main()
