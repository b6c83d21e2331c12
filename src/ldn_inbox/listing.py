"""Ordering, paging and projection helpers for get_all listings."""

from typing import Any, Dict, List, Optional, Sequence, TypeVar

from sqlalchemy import Select, Table

from .schemas import ListOptions

T = TypeVar("T")


def apply_sort(stmt: Select, table: Table, options: ListOptions) -> Select:
    """Order by the requested timestamp, with the hashed id as tie-breaker.

    The tie-breaker keeps paging deterministic when several records share
    a millisecond timestamp.
    """
    column = table.c[options.sort_by]
    if options.descending:
        return stmt.order_by(column.desc(), table.c.id.desc())
    return stmt.order_by(column.asc(), table.c.id.asc())


def apply_window(stmt: Select, options: ListOptions) -> Select:
    """Push offset/limit down into SQL (only valid when no rows are filtered afterwards)."""
    if options.offset:
        stmt = stmt.offset(options.offset)
    if options.limit is not None:
        stmt = stmt.limit(options.limit)
    return stmt


def window(records: List[T], options: ListOptions) -> List[T]:
    """Apply offset/limit to records already filtered in Python."""
    end = None if options.limit is None else options.offset + options.limit
    return records[options.offset:end]


def project(document: Dict[str, Any], fields: Optional[Sequence[str]]) -> Dict[str, Any]:
    """Keep only the listed top-level document keys (all keys if fields is None)."""
    if fields is None:
        return dict(document)
    return {key: document[key] for key in fields if key in document}
