"""Tests for the Firestore-backed cursor store.

The Firestore client is a ``MagicMock``; the document reference is reached
through ``client.collection(...).document(...)`` exactly as in production.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from google.api_core.exceptions import ServiceUnavailable
from google.cloud import firestore

from cal_notifier.calendar.store import (
    CURSOR_COLLECTION,
    CURSOR_DOCUMENT,
    CursorStore,
    FirestoreCursorStore,
)
from cal_notifier.config import Settings
from cal_notifier.exceptions import CursorStoreError
from tests.fakes import InMemoryCursorStore


def _make_store(snapshot: object | None = None) -> tuple[FirestoreCursorStore, MagicMock]:
    client = MagicMock()
    doc_ref = client.collection.return_value.document.return_value
    if snapshot is not None:
        doc_ref.get.return_value = snapshot
    return FirestoreCursorStore(client), doc_ref


def _snapshot(data: dict | None) -> SimpleNamespace:
    return SimpleNamespace(exists=data is not None, to_dict=lambda: data)


class TestGet:
    """Reading the cursor."""

    def test_get_returns_stored_value(self) -> None:
        store, _ = _make_store(_snapshot({"value": "sync-123"}))

        assert store.get() == "sync-123"

    def test_get_uses_fixed_document(self) -> None:
        client = MagicMock()
        client.collection.return_value.document.return_value.get.return_value = _snapshot(
            {"value": "x"}
        )

        FirestoreCursorStore(client).get()

        client.collection.assert_called_with(CURSOR_COLLECTION)
        client.collection.return_value.document.assert_called_with(CURSOR_DOCUMENT)

    def test_missing_document_is_none(self) -> None:
        """Not-found means 'no cursor', not an error."""
        store, _ = _make_store(_snapshot(None))

        assert store.get() is None

    def test_document_without_value_field_is_none(self) -> None:
        store, _ = _make_store(_snapshot({"updated_at": "yesterday"}))

        assert store.get() is None

    def test_read_failure_raises_store_error(self) -> None:
        store, doc_ref = _make_store()
        doc_ref.get.side_effect = ServiceUnavailable("firestore down")

        with pytest.raises(CursorStoreError, match="read"):
            store.get()


class TestSave:
    """Writing the cursor."""

    def test_save_overwrites_document(self) -> None:
        store, doc_ref = _make_store()

        store.save("sync-456")

        doc_ref.set.assert_called_once_with(
            {"value": "sync-456", "updated_at": firestore.SERVER_TIMESTAMP}
        )

    def test_save_empty_string(self) -> None:
        """An empty cursor is still written."""
        store, doc_ref = _make_store()

        store.save("")

        assert doc_ref.set.call_args.args[0]["value"] == ""

    def test_write_failure_raises_store_error(self) -> None:
        store, doc_ref = _make_store()
        doc_ref.set.side_effect = ServiceUnavailable("firestore down")

        with pytest.raises(CursorStoreError, match="save"):
            store.save("sync-456")


class TestClear:
    """Removing the cursor."""

    def test_clear_deletes_document(self) -> None:
        store, doc_ref = _make_store()

        store.clear()

        doc_ref.delete.assert_called_once_with()

    def test_clear_failure_raises_store_error(self) -> None:
        store, doc_ref = _make_store()
        doc_ref.delete.side_effect = ServiceUnavailable("firestore down")

        with pytest.raises(CursorStoreError, match="clear"):
            store.clear()


class TestFromSettings:
    """Construction from application settings."""

    def test_from_settings_uses_project_and_database(self) -> None:
        settings = Settings(
            google_client_id="id",
            google_client_secret="secret",
            google_refresh_token="refresh",
            calendar_id="primary",
            gcp_project="proj-1",
            webhook_url="https://example.com/hook",
            firestore_database="notifier",
        )

        with patch("google.cloud.firestore.Client") as mock_client_cls:
            store = FirestoreCursorStore.from_settings(settings)

        mock_client_cls.assert_called_once_with(project="proj-1", database="notifier")
        assert isinstance(store, FirestoreCursorStore)


class TestProtocol:
    """Both implementations satisfy the CursorStore capability."""

    def test_firestore_store_is_cursor_store(self) -> None:
        assert isinstance(FirestoreCursorStore(MagicMock()), CursorStore)

    def test_in_memory_store_is_cursor_store(self) -> None:
        assert isinstance(InMemoryCursorStore(), CursorStore)
