"""Shared response envelope and request helpers."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Success envelope: ``{"success": true, "data": ...}``."""

    success: Literal[True] = True
    data: T


def ok(data: T) -> Envelope[T]:
    return Envelope(data=data)


def changed_fields(
    request: BaseModel, nullable: frozenset[str] = frozenset()
) -> dict[str, Any]:
    """Fields the client actually sent.

    An explicit ``null`` is kept only for columns listed in ``nullable``;
    for required columns it means "leave unchanged".
    """
    return {
        key: value
        for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None or key in nullable
    }
