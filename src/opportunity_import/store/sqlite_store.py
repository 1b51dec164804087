"""SQLite-backed staging queue for imported temp opportunities."""

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from opportunity_import.connectors.base import BaseStagingStore
from opportunity_import.errors import StagingWriteError
from opportunity_import.models.preview import RiskLevel
from opportunity_import.models.staging import StagedRecord, TempOpportunityCreate, TempStatus


def risk_level_from_score(score: Optional[float]) -> Optional[RiskLevel]:
    """Map a stored numeric risk score back to a label (>=70 high, >=40 medium)."""
    if score is None:
        return None
    if score >= 70:
        return RiskLevel.HIGH
    if score >= 40:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class TempOpportunityStore(BaseStagingStore):
    """
    SQLite store for temp opportunities awaiting review.
    Full payloads are kept as JSON; title/client/location/status are columns for querying.
    """

    def __init__(self, db_path: str | Path = "opportunity_import.db"):
        self._db_path = Path(db_path)
        self._ensure_schema()

    def _connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        with self._connection() as conn:
            conn.executescript(schema_path.read_text())

    def _deserialize(self, row: sqlite3.Row) -> StagedRecord:
        data = json.loads(row["data"])
        data.update(
            id=row["id"],
            temp_identifier=row["temp_identifier"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
        return StagedRecord.model_validate(data)

    def create_temp(self, payload: TempOpportunityCreate) -> StagedRecord:
        """Insert a new pending_review record. Returns the stored record."""
        now = datetime.now(timezone.utc).isoformat()
        temp_id = str(uuid.uuid4())
        temp_identifier = f"TMP-{uuid.uuid4().hex[:8].upper()}"
        data_str = json.dumps(payload.model_dump(mode="json"), default=str)
        try:
            with self._connection() as conn:
                conn.execute(
                    """
                    INSERT INTO temp_opportunities
                    (id, temp_identifier, project_title, client_name, location, status, data, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        temp_id,
                        temp_identifier,
                        payload.project_title,
                        payload.client_name,
                        payload.location,
                        TempStatus.PENDING_REVIEW.value,
                        data_str,
                        now,
                        now,
                    ),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StagingWriteError(f"Could not store '{payload.project_title}': {e}") from e
        record = self.get(temp_id)
        if record is None:
            raise StagingWriteError(f"Stored record {temp_id} could not be read back")
        return record

    def list_existing(self) -> list[StagedRecord]:
        """All records regardless of status; rejected leads still count as seen."""
        return self.list_records()

    def list_records(self, status: Optional[TempStatus | str] = None, limit: Optional[int] = None) -> list[StagedRecord]:
        """Records newest first, optionally filtered by status."""
        query = "SELECT * FROM temp_opportunities"
        params: list = []
        if status:
            query += " WHERE status = ?"
            params.append(TempStatus(status).value)
        query += " ORDER BY created_at DESC"
        if limit:
            query += " LIMIT ?"
            params.append(int(limit))
        with self._connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._deserialize(r) for r in rows]

    def count(self, status: Optional[TempStatus | str] = None) -> int:
        query = "SELECT COUNT(*) FROM temp_opportunities"
        params: list = []
        if status:
            query += " WHERE status = ?"
            params.append(TempStatus(status).value)
        with self._connection() as conn:
            return conn.execute(query, params).fetchone()[0]

    def get(self, temp_id: str) -> Optional[StagedRecord]:
        """Get single record by id."""
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM temp_opportunities WHERE id = ?", (temp_id,)).fetchone()
        return self._deserialize(row) if row else None

    def update_status(
        self,
        temp_id: str,
        status: TempStatus | str,
        reviewer_notes: Optional[str] = None,
    ) -> Optional[StagedRecord]:
        """Set review status (and notes). Returns the updated record, or None if unknown."""
        record = self.get(temp_id)
        if record is None:
            return None
        new_status = TempStatus(status)
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as conn:
            row = conn.execute("SELECT data FROM temp_opportunities WHERE id = ?", (temp_id,)).fetchone()
            data = json.loads(row["data"])
            if reviewer_notes is not None:
                data["reviewer_notes"] = reviewer_notes
            conn.execute(
                "UPDATE temp_opportunities SET status = ?, data = ?, updated_at = ? WHERE id = ?",
                (new_status.value, json.dumps(data, default=str), now, temp_id),
            )
            conn.commit()
        return self.get(temp_id)
