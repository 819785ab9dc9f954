"""Shared store helpers."""

from typing import Any

from sqlalchemy import ColumnElement, and_
from sqlmodel import col


def active(model: Any, *conditions: ColumnElement[bool]) -> ColumnElement[bool]:
    """Combine ``conditions`` with the active-row predicate for ``model``.

    A row is active iff its ``deleted_at`` is NULL. Every store query goes
    through this helper so soft-deleted rows are never visible.
    """
    return and_(*conditions, col(model.deleted_at).is_(None))
