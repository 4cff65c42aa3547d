"""
Schema Migration Models

The single schema upgrade (adding the `date` column) is best-effort.
Instead of swallowing a failure, the schema manager reports what happened
as a MigrationOutcome and leaves logging to the caller.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MigrationStatus(str, Enum):
    """What ensure_schema did to the date column."""
    MIGRATED_OK = "migrated_ok"                      # Column added, legacy rows backfilled
    MIGRATED_WITH_WARNING = "migrated_with_warning"  # Upgrade failed, ledger still usable
    NOT_ATTEMPTED = "not_attempted"                  # Column already present


class MigrationOutcome(BaseModel):
    """Result of one ensure_schema call."""

    status: MigrationStatus
    reason: Optional[str] = Field(
        default=None,
        description="Why the upgrade failed (only for MIGRATED_WITH_WARNING)"
    )
    date_column_added: bool = False
    backfilled_rows: int = Field(default=0, ge=0)

    @property
    def is_degraded(self) -> bool:
        """True when week/month filtering may miss legacy rows."""
        return self.status == MigrationStatus.MIGRATED_WITH_WARNING

    @classmethod
    def ok(cls, backfilled_rows: int) -> "MigrationOutcome":
        return cls(
            status=MigrationStatus.MIGRATED_OK,
            date_column_added=True,
            backfilled_rows=backfilled_rows,
        )

    @classmethod
    def warning(
        cls,
        reason: str,
        date_column_added: bool = False,
    ) -> "MigrationOutcome":
        return cls(
            status=MigrationStatus.MIGRATED_WITH_WARNING,
            reason=reason,
            date_column_added=date_column_added,
        )

    @classmethod
    def not_attempted(cls) -> "MigrationOutcome":
        return cls(status=MigrationStatus.NOT_ATTEMPTED)
