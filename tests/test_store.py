# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import tempfile
import unittest
from typing import Any, List, Optional

from fitdash.core.database import Database
from fitdash.services.store import (
    MemoryDocumentStore,
    SqlDocumentStore,
    document_key,
    merge_documents,
)
from tests.fakes import FailingWriteStore

KEY = document_key("artifacts", "default-app-id", "u1")


class Recorder:
    def __init__(self) -> None:
        self.snapshots: List[Optional[dict[str, Any]]] = []
        self.errors: List[Exception] = []

    def on_change(self, snapshot: Optional[dict[str, Any]]) -> None:
        self.snapshots.append(snapshot)

    def on_error(self, error: Exception) -> None:
        self.errors.append(error)


class TestMergeDocuments(unittest.TestCase):
    def test_key_layout(self) -> None:
        self.assertEqual(KEY, "artifacts/default-app-id/users/u1")

    def test_nested_maps_merge_lists_replace(self) -> None:
        existing = {"goals": {"weight": 75, "type": "Fat Loss"}, "workouts": [1, 2], "extra": True}
        merged = merge_documents(existing, {"goals": {"weight": 70}, "workouts": [3]})
        self.assertEqual(merged, {
            "goals": {"weight": 70, "type": "Fat Loss"},
            "workouts": [3],
            "extra": True,
        })

    def test_inputs_not_mutated(self) -> None:
        existing = {"goals": {"weight": 75}}
        incoming = {"goals": {"bodyFat": 15}}
        merge_documents(existing, incoming)
        self.assertEqual(existing, {"goals": {"weight": 75}})
        self.assertEqual(incoming, {"goals": {"bodyFat": 15}})

    def test_no_existing_document(self) -> None:
        self.assertEqual(merge_documents(None, {"a": 1}), {"a": 1})


class TestMemoryDocumentStore(unittest.IsolatedAsyncioTestCase):
    async def test_get_missing(self) -> None:
        self.assertIsNone(await MemoryDocumentStore().get(KEY))

    async def test_set_merges_by_default(self) -> None:
        store = MemoryDocumentStore({KEY: {"profile": {"name": "Alex"}, "aiInsights": ["a"]}})
        self.assertTrue(await store.set(KEY, {"aiInsights": ["b"]}))
        self.assertEqual(await store.get(KEY), {"profile": {"name": "Alex"}, "aiInsights": ["b"]})

    async def test_set_without_merge_replaces(self) -> None:
        store = MemoryDocumentStore({KEY: {"profile": {"name": "Alex"}}})
        await store.set(KEY, {"aiInsights": ["b"]}, merge=False)
        self.assertEqual(await store.get(KEY), {"aiInsights": ["b"]})

    async def test_subscribe_delivers_immediately_and_on_write(self) -> None:
        store = MemoryDocumentStore()
        recorder = Recorder()
        await store.subscribe(KEY, recorder.on_change, recorder.on_error)
        self.assertEqual(recorder.snapshots, [None])

        await store.set(KEY, {"profile": {"name": "Alex"}})
        self.assertEqual(recorder.snapshots[-1], {"profile": {"name": "Alex"}})

    async def test_other_keys_do_not_notify(self) -> None:
        store = MemoryDocumentStore()
        recorder = Recorder()
        await store.subscribe(KEY, recorder.on_change, recorder.on_error)
        await store.set(document_key("artifacts", "default-app-id", "u2"), {"a": 1})
        self.assertEqual(recorder.snapshots, [None])

    async def test_unsubscribe(self) -> None:
        store = MemoryDocumentStore()
        recorder = Recorder()
        unsubscribe = await store.subscribe(KEY, recorder.on_change, recorder.on_error)
        unsubscribe()
        await store.set(KEY, {"a": 1})
        self.assertEqual(recorder.snapshots, [None])

    async def test_snapshots_are_copies(self) -> None:
        store = MemoryDocumentStore({KEY: {"aiInsights": ["a"]}})
        recorder = Recorder()
        await store.subscribe(KEY, recorder.on_change, recorder.on_error)
        recorder.snapshots[0]["aiInsights"].append("mutated")
        self.assertEqual(await store.get(KEY), {"aiInsights": ["a"]})

    async def test_failed_write_returns_false_and_does_not_notify(self) -> None:
        store = FailingWriteStore()
        recorder = Recorder()
        await store.subscribe(KEY, recorder.on_change, recorder.on_error)
        self.assertFalse(await store.set(KEY, {"a": 1}))
        self.assertEqual(recorder.snapshots, [None])

    async def test_read_failure_goes_to_error_callback(self) -> None:
        class BrokenReads(MemoryDocumentStore):
            async def get(self, key):
                raise ConnectionError("offline")

        recorder = Recorder()
        await BrokenReads().subscribe(KEY, recorder.on_change, recorder.on_error)
        self.assertEqual(recorder.snapshots, [])
        self.assertEqual(len(recorder.errors), 1)


class TestSqlDocumentStore(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        path = os.path.join(self.tmpdir.name, "fitdash.db")
        self.store = SqlDocumentStore(Database(f"sqlite+aiosqlite:///{path}"))
        await self.store.init()

    async def asyncTearDown(self) -> None:
        await self.store.dispose()
        self.tmpdir.cleanup()

    async def test_round_trip_and_merge(self) -> None:
        self.assertIsNone(await self.store.get(KEY))

        await self.store.set(KEY, {"profile": {"name": "Alex"}, "workouts": [{"id": "w1"}]})
        await self.store.set(KEY, {"workouts": [], "goals": {"weight": 75}})

        self.assertEqual(await self.store.get(KEY), {
            "profile": {"name": "Alex"},
            "workouts": [],
            "goals": {"weight": 75},
        })

    async def test_subscribers_see_writes(self) -> None:
        recorder = Recorder()
        await self.store.subscribe(KEY, recorder.on_change, recorder.on_error)
        await self.store.set(KEY, {"aiInsights": ["Hydrate."]})
        self.assertEqual(recorder.snapshots, [None, {"aiInsights": ["Hydrate."]}])


if __name__ == "__main__":
    unittest.main()
