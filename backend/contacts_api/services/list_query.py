"""
Contacts API — List-Query Pipeline (Filter → Sort → Page)
===========================================================

What:  The three pure stages applied to GET /contacts results.
How:   ContactService fetches every contact once, then `run_list_query()`
       threads the records through filter_records → sort_records → paginate.
       A ListQuery value carries the parameters; a Page value comes out.
       No stage performs I/O or mutates its input.

Stage contracts:
    filter_records(records, field, operator, value)
        eq  → field equals value, compared in the field's natural type
        gte → value parsed as a date; field (a date) must be on/after it
        any other operator → InvalidFilterOperatorError
        unknown field → nothing matches

    sort_records(records, field="lname", direction="asc")
        stable; unknown direction means asc; unknown field keeps input order

    paginate(records, page, size)
        total = ceil(n / size); page outside [1, total] → PageOutOfRangeError
        (an empty collection is always satisfiable and yields total = 0)
"""

import math
from dataclasses import dataclass, field as dc_field
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence

from contacts_api.exceptions import InvalidFilterOperatorError, PageOutOfRangeError

# Attributes of a contact that may be filtered or sorted on
CONTACT_FIELDS = ("id", "fname", "lname", "email", "phone", "birthday")

SUPPORTED_OPERATORS = ("eq", "gte")

DEFAULT_SORT_FIELD = "lname"
DEFAULT_DIRECTION = "asc"
DIRECTIONS = ("asc", "desc")


# ══════════════════════════════════════════════════════════════════════════
# Query / Result Values
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FilterSpec:
    """A single (field, operator, value) predicate."""
    field: str
    operator: str
    value: str

    @classmethod
    def from_headers(
        cls,
        field: Optional[str],
        operator: Optional[str],
        value: Optional[str],
    ) -> Optional["FilterSpec"]:
        """Build a spec only when all three X-Filter-* headers are non-empty after trimming."""
        field, operator, value = (
            (part or "").strip() for part in (field, operator, value)
        )
        if field and operator and value:
            return cls(field=field, operator=operator, value=value)
        return None


@dataclass(frozen=True)
class SortSpec:
    field: str = DEFAULT_SORT_FIELD
    direction: str = DEFAULT_DIRECTION


@dataclass(frozen=True)
class PageSpec:
    page: int = 1
    size: int = 10


@dataclass(frozen=True)
class ListQuery:
    """Parameters threaded through the pipeline; filter is optional."""
    filter: Optional[FilterSpec] = None
    sort: SortSpec = dc_field(default_factory=SortSpec)
    page: PageSpec = dc_field(default_factory=PageSpec)


@dataclass(frozen=True)
class Page:
    """
    One page window over an ordered collection.

    Attributes:
        results:    Records on this page (at most `size`)
        total:      Number of pages (0 for an empty collection)
        page:       The requested page number
        size:       Maximum records per page
        count:      Records in the whole (filtered) collection
        next_page:  page + 1 if it exists, else None
        prev_page:  page - 1 if it is >= 1, else None
    """
    results: List[Any]
    total: int
    page: int
    size: int
    count: int
    next_page: Optional[int] = None
    prev_page: Optional[int] = None

    @property
    def has_next(self) -> bool:
        return self.next_page is not None

    @property
    def has_prev(self) -> bool:
        return self.prev_page is not None


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════


_MISSING = object()


def _field_value(record: Any, field: str) -> Any:
    """Read a contact attribute; unknown fields yield _MISSING."""
    if field not in CONTACT_FIELDS:
        return _MISSING
    if isinstance(record, dict):
        return record.get(field, _MISSING)
    return getattr(record, field, _MISSING)


def parse_date(value: str) -> Optional[date]:
    """
    Parse an ISO date, or an ISO datetime truncated to its date.

    Returns None when the value is not a recognizable date.
    """
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        # fromisoformat() only accepts a trailing Z from Python 3.11 on
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def _matches_eq(record_value: Any, value: str) -> bool:
    record_date = _as_date(record_value)
    if record_date is not None:
        return record_date == parse_date(value)
    return str(record_value) == value


def _matches_gte(record_value: Any, threshold: Optional[date]) -> bool:
    record_date = _as_date(record_value)
    if record_date is None or threshold is None:
        return False
    return record_date >= threshold


# ══════════════════════════════════════════════════════════════════════════
# Stages
# ══════════════════════════════════════════════════════════════════════════


def filter_records(
    records: Sequence[Any],
    field: Optional[str] = None,
    operator: Optional[str] = None,
    value: Optional[str] = None,
) -> List[Any]:
    """
    Select the records satisfying `field <operator> value`.

    With no filter parameters the input is returned unchanged (as a list).

    Raises:
        InvalidFilterOperatorError: operator is not one of SUPPORTED_OPERATORS
    """
    if not (field and operator and value):
        return list(records)

    op = operator.strip().lower()
    if op not in SUPPORTED_OPERATORS:
        raise InvalidFilterOperatorError(operator, supported=SUPPORTED_OPERATORS)

    threshold = parse_date(value) if op == "gte" else None

    selected = []
    for record in records:
        record_value = _field_value(record, field)
        if record_value is _MISSING or record_value is None:
            continue
        if op == "eq":
            matched = _matches_eq(record_value, value)
        else:
            matched = _matches_gte(record_value, threshold)
        if matched:
            selected.append(record)
    return selected


def sort_records(
    records: Sequence[Any],
    field: Optional[str] = None,
    direction: Optional[str] = None,
) -> List[Any]:
    """
    Return a new list ordered by `field`, stable for equal keys.

    Missing field defaults to last name; a missing or unrecognized direction
    means ascending. None values sort after present ones when ascending and
    before them when descending, since descending reverses the whole order.
    """
    field = field or DEFAULT_SORT_FIELD
    descending = (direction or "").strip().lower() == "desc"

    if field not in CONTACT_FIELDS:
        return list(records)

    def key(record: Any):
        record_value = _field_value(record, field)
        if record_value is _MISSING or record_value is None:
            return (1, "")
        if field == "id":
            return (0, str(record_value))
        return (0, record_value)

    # sorted() keeps equal elements in input order even with reverse=True
    return sorted(records, key=key, reverse=descending)


def paginate(records: Sequence[Any], page: int = 1, size: int = 10) -> Page:
    """
    Cut the page window `page` (1-indexed) of at most `size` records.

    Raises:
        PageOutOfRangeError: the collection is non-empty and page is not in [1, total]
        ValueError: size < 1
    """
    if size < 1:
        raise ValueError(f"Page size must be >= 1, got {size}")

    count = len(records)
    if count == 0:
        return Page(results=[], total=0, page=page, size=size, count=0)

    total = math.ceil(count / size)
    if page < 1 or page > total:
        raise PageOutOfRangeError(page=page, total=total)

    offset = (page - 1) * size
    return Page(
        results=list(records[offset:offset + size]),
        total=total,
        page=page,
        size=size,
        count=count,
        next_page=page + 1 if page < total else None,
        prev_page=page - 1 if page > 1 else None,
    )


def run_list_query(records: Iterable[Any], query: ListQuery) -> Page:
    """Apply filter, sort and paginate in sequence."""
    filtered = list(records)
    if query.filter is not None:
        filtered = filter_records(
            filtered, query.filter.field, query.filter.operator, query.filter.value
        )
    ordered = sort_records(filtered, query.sort.field, query.sort.direction)
    return paginate(ordered, query.page.page, query.page.size)
