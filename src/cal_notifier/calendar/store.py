"""Durable storage for the calendar sync cursor.

The cursor (Google's ``nextSyncToken``) is a single opaque string per
deployment.  :class:`CursorStore` is the capability the sync engine needs;
:class:`FirestoreCursorStore` keeps the value in one Firestore document so
it survives restarts and redeploys.

A missing document is a normal state meaning "no cursor yet, run a full
sync" and is reported as ``None``, never as an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from google.api_core.exceptions import GoogleAPIError

from cal_notifier.exceptions import CursorStoreError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore import DocumentReference

    from cal_notifier.config import Settings

logger = logging.getLogger(__name__)

CURSOR_COLLECTION = "Token"
CURSOR_DOCUMENT = "SyncToken"
_VALUE_FIELD = "value"


@runtime_checkable
class CursorStore(Protocol):
    """Single-slot, last-writer-wins storage for the sync cursor."""

    def get(self) -> str | None:
        """Return the stored cursor, or ``None`` if none has been saved."""
        ...

    def save(self, value: str) -> None:
        """Replace the stored cursor with *value*."""
        ...

    def clear(self) -> None:
        """Remove the stored cursor so the next run performs a full sync."""
        ...


class FirestoreCursorStore:
    """Cursor store backed by a single Firestore document.

    Args:
        firestore_client: A ``google.cloud.firestore.Client``.
        collection: Collection holding the cursor document.
        document: Document ID of the cursor.
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str = CURSOR_COLLECTION,
        document: str = CURSOR_DOCUMENT,
    ) -> None:
        self._db = firestore_client
        self._collection = collection
        self._document = document

    @classmethod
    def from_settings(cls, settings: Settings) -> FirestoreCursorStore:
        """Create a store using the project and database from *settings*."""
        from google.cloud import firestore

        client = firestore.Client(
            project=settings.gcp_project,
            database=settings.firestore_database,
        )
        logger.info(
            "Firestore client created (project=%s, database=%s)",
            settings.gcp_project,
            settings.firestore_database,
        )
        return cls(client)

    def _ref(self) -> DocumentReference:
        return self._db.collection(self._collection).document(self._document)

    def get(self) -> str | None:
        """Return the stored cursor, or ``None`` if the document is absent.

        Raises:
            CursorStoreError: On any Firestore failure other than not-found.
        """
        try:
            snapshot = self._ref().get()
        except GoogleAPIError as exc:
            logger.error("Failed to read sync cursor: %s", exc)
            raise CursorStoreError(f"Failed to read sync cursor: {exc}") from exc

        if not snapshot.exists:
            logger.info("No sync cursor stored")
            return None

        data = snapshot.to_dict() or {}
        value = data.get(_VALUE_FIELD)
        if value is None:
            logger.warning("Sync cursor document has no %r field", _VALUE_FIELD)
            return None

        logger.info("Sync cursor loaded")
        return str(value)

    def save(self, value: str) -> None:
        """Overwrite the cursor document with *value*.

        Raises:
            CursorStoreError: If the write fails.
        """
        from google.cloud import firestore

        try:
            self._ref().set(
                {_VALUE_FIELD: value, "updated_at": firestore.SERVER_TIMESTAMP}
            )
        except GoogleAPIError as exc:
            logger.error("Failed to save sync cursor: %s", exc)
            raise CursorStoreError(f"Failed to save sync cursor: {exc}") from exc
        logger.info("Sync cursor saved")

    def clear(self) -> None:
        """Delete the cursor document.  Deleting an absent document succeeds.

        Raises:
            CursorStoreError: If the delete fails.
        """
        try:
            self._ref().delete()
        except GoogleAPIError as exc:
            logger.error("Failed to clear sync cursor: %s", exc)
            raise CursorStoreError(f"Failed to clear sync cursor: {exc}") from exc
        logger.info("Sync cursor cleared")
