"""
Row snapshot support for models that feed the row-change stream.

Models mixing in ``SnapshotModel`` remember the column values they were
loaded with, so a ``post_save`` receiver can publish both the old and the
new row without an extra query.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from django.db import models


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


class SnapshotModel(models.Model):
    """Abstract model keeping the loaded column values in ``_loaded_values``."""

    class Meta:
        abstract = True

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_values = {
            name: _jsonable(value)
            for name, value in zip(field_names, values)
            if value is not models.DEFERRED
        }
        return instance

    def row_snapshot(self) -> dict[str, Any]:
        """Current column values keyed by attname (``court_id``, ``status``...)."""
        return {
            field.attname: _jsonable(getattr(self, field.attname))
            for field in self._meta.concrete_fields
        }

    def loaded_snapshot(self) -> dict[str, Any] | None:
        return getattr(self, "_loaded_values", None)

    def refresh_snapshot(self) -> None:
        self._loaded_values = self.row_snapshot()
