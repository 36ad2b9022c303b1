"""
Valuation Repository - Storage for Saved Valuations

In-memory storage with optional JSON file persistence.
Records are owned by a user: listing, fetching and deleting are scoped
to the owner, and another user's record behaves as if it does not exist.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from core.history.schema import ValuationRecord
from core.valuation.models import ValuationInput, ValuationResult


logger = logging.getLogger(__name__)


# =============================================================================
# Repository
# =============================================================================


class ValuationRepository:
    """
    Repository for storing and retrieving valuation records.

    Provides save/list/delete keyed by user ID, newest first.
    """

    def __init__(self, persist_path: Optional[str] = None):
        """
        Initialise repository.

        Args:
            persist_path: Optional path to persist data to JSON file
        """
        self._records: dict[str, ValuationRecord] = {}
        self._persist_path = Path(persist_path) if persist_path else None

        if self._persist_path and self._persist_path.exists():
            self._load_from_file()

    def _save_to_file(self) -> None:
        """Persist data to file."""
        if not self._persist_path:
            return

        data = {
            "valuations": [record.to_dict() for record in self._records.values()],
            "saved_at": datetime.utcnow().isoformat(),
        }

        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        self._persist_path.write_text(json.dumps(data, indent=2))

    def _load_from_file(self) -> None:
        """Load data from file."""
        try:
            data = json.loads(self._persist_path.read_text())
            for item in data.get("valuations", []):
                record = ValuationRecord.from_dict(item)
                self._records[record.record_id] = record
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            # Start fresh rather than refuse to boot
            logger.warning("Could not load valuation data from %s: %s", self._persist_path, e)

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    def save(
        self,
        user_id: str,
        valuation_input: ValuationInput,
        result: ValuationResult,
        created_at: Optional[datetime] = None,
    ) -> str:
        """
        Store a valuation owned by user_id.

        Args:
            user_id: Opaque owner identifier
            valuation_input: Property attributes that were valued
            result: Computed valuation result
            created_at: Override timestamp (default: now, UTC)

        Returns:
            New record ID
        """
        record = ValuationRecord.create(user_id, valuation_input, result, created_at)
        self._records[record.record_id] = record
        self._save_to_file()

        logger.info("Saved valuation %s for user %s", record.record_id, record.user_id)
        return record.record_id

    def get(self, record_id: str, user_id: str) -> Optional[ValuationRecord]:
        """
        Get a record by ID if owned by user_id.

        Returns:
            ValuationRecord if found and owned, None otherwise
        """
        record = self._records.get(record_id)
        if record is None or record.user_id != user_id:
            return None
        return record

    def list(self, user_id: str) -> list[ValuationRecord]:
        """Get a user's valuations, newest first."""
        return sorted(
            (r for r in self._records.values() if r.user_id == user_id),
            key=lambda r: r.created_at,
            reverse=True,
        )

    def delete(self, record_id: str, user_id: str) -> bool:
        """
        Delete a record owned by user_id.

        Returns:
            True if deleted, False if not found or not owned
        """
        record = self._records.get(record_id)
        if record is None or record.user_id != user_id:
            return False

        del self._records[record_id]
        self._save_to_file()

        logger.info("Deleted valuation %s for user %s", record_id, user_id)
        return True

    # =========================================================================
    # Query Operations
    # =========================================================================

    def list_by_location(
        self,
        location: str,
        since: Optional[datetime] = None,
    ) -> list[ValuationRecord]:
        """Get all users' valuations for a location, newest first."""
        return sorted(
            (
                r for r in self._records.values()
                if r.location == location and (since is None or r.created_at >= since)
            ),
            key=lambda r: r.created_at,
            reverse=True,
        )

    def count(self) -> int:
        """Get total number of stored valuations."""
        return len(self._records)


# =============================================================================
# Singleton Instance
# =============================================================================

_repository_instance: Optional[ValuationRepository] = None


def get_valuation_repository(persist_path: Optional[str] = None) -> ValuationRepository:
    """
    Get the valuation repository singleton.

    Args:
        persist_path: Optional path for persistence (only used on first call)
    """
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = ValuationRepository(persist_path or "data/valuations.json")
    return _repository_instance
