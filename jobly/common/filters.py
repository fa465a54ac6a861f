"""
Job Search Filters

This module compiles an optional set of job search criteria into a
conjunctive WHERE fragment, and parses raw request parameters into those
criteria.

Predicates are emitted in a fixed order so placeholder numbering is
reproducible for the same criteria set:

    min_salary  →  salary >= $k
    has_equity  →  equity > 0          (constant, no placeholder)
    title       →  title ILIKE $k      (bound as '%<title>%', with LIKE
                                        metacharacters escaped)

Absent criteria are skipped entirely and do not consume a placeholder.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from .errors import BadRequestError
from .sql import FragmentBuilder, QueryFragment

# Request parameter name → FilterCriteria attribute
FILTER_PARAMS = {
    "minSalary": "min_salary",
    "hasEquity": "has_equity",
    "title": "title",
}

_DIGITS_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class FilterCriteria:
    """
    Optional job search criteria. Any member may be absent (None).

    Attributes:
        min_salary: Lower salary bound (non-negative integer), 0 is a real bound
        has_equity: True keeps jobs with equity > 0; False/None adds no constraint
        title: Case-insensitive substring of the job title
    """

    min_salary: Optional[int] = None
    has_equity: Optional[bool] = None
    title: Optional[str] = None


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters so `text` matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def sql_for_job_filters(
    criteria: Optional[FilterCriteria],
    start_index: int = 1,
) -> QueryFragment:
    """
    Build the WHERE predicates for a job search.

    `min_salary` must already be validated as a non-negative integer (see
    `parse_job_filters`); this function does not check it.

    Args:
        criteria: Criteria to apply; None behaves like empty criteria
        start_index: First placeholder number to use

    Returns:
        QueryFragment; an empty clause means "no filtering", not an error

    Example:
        >>> frag = sql_for_job_filters(
        ...     FilterCriteria(min_salary=20000, has_equity=True, title="J")
        ... )
        >>> frag.clause
        'salary >= $1 AND equity > 0 AND title ILIKE $2'
        >>> frag.values
        (20000, '%J%')
    """
    builder = FragmentBuilder(" AND ", start_index=start_index)
    if criteria is None:
        return builder.build()

    if criteria.min_salary is not None:
        builder.add(f"salary >= {builder.bind(criteria.min_salary)}")

    if criteria.has_equity is True:
        builder.add("equity > 0")

    if criteria.title:
        builder.add(f"title ILIKE {builder.bind(f'%{escape_like(criteria.title)}%')}")

    return builder.build()


def _parse_min_salary(value: Any) -> int:
    if isinstance(value, bool):
        raise BadRequestError("minSalary must be a non-negative integer")
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip()
        if not _DIGITS_RE.match(text):
            raise BadRequestError(
                f"minSalary must be a non-negative integer, got {value!r}"
            )
        parsed = int(text)

    if parsed < 0:
        raise BadRequestError("minSalary must be a non-negative integer")
    return parsed


def _parse_has_equity(value: Any) -> bool:
    if isinstance(value, bool):
        return value

    normalized = str(value).strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise BadRequestError(f"hasEquity must be true or false, got {value!r}")


def parse_job_filters(params: Optional[Mapping[str, Any]]) -> FilterCriteria:
    """
    Validate raw request parameters and convert them to FilterCriteria.

    Query strings deliver everything as text, so `minSalary=20000` and
    `hasEquity=true` are coerced here; anything that cannot be coerced is a
    bad request rather than undefined behavior further down.

    Args:
        params: Raw parameters, e.g. {"minSalary": "20000", "title": "eng"}

    Returns:
        FilterCriteria with only the supplied members set

    Raises:
        BadRequestError: On unknown keys or values that fail validation

    Example:
        >>> parse_job_filters({"minSalary": "20000", "hasEquity": "true"})
        FilterCriteria(min_salary=20000, has_equity=True, title=None)
    """
    if not params:
        return FilterCriteria()

    unknown = sorted(set(params) - set(FILTER_PARAMS))
    if unknown:
        raise BadRequestError(f"Unknown filter(s): {', '.join(unknown)}")

    min_salary = None
    if params.get("minSalary") is not None:
        min_salary = _parse_min_salary(params["minSalary"])

    has_equity = None
    if params.get("hasEquity") is not None:
        has_equity = _parse_has_equity(params["hasEquity"])

    title = params.get("title")
    if title is not None:
        title = str(title).strip() or None

    return FilterCriteria(min_salary=min_salary, has_equity=has_equity, title=title)


__all__ = [
    "FILTER_PARAMS",
    "FilterCriteria",
    "escape_like",
    "parse_job_filters",
    "sql_for_job_filters",
]
