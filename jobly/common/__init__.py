"""
Common utilities shared across Jobly data-access modules.

The query builders in this package are pure and dependency-light: they never
touch the network or the database, so they can be tested in isolation and
called concurrently without coordination.
"""

from .errors import BadRequestError, EmptyInputError, JoblyError, NotFoundError
from .filters import FilterCriteria, parse_job_filters, sql_for_job_filters
from .sql import (
    ColumnName,
    FragmentBuilder,
    NameMap,
    QueryFragment,
    quote_identifier,
    resolve_column,
    sql_for_partial_update,
)

__all__ = [
    "BadRequestError",
    "ColumnName",
    "EmptyInputError",
    "FilterCriteria",
    "FragmentBuilder",
    "JoblyError",
    "NameMap",
    "NotFoundError",
    "QueryFragment",
    "parse_job_filters",
    "quote_identifier",
    "resolve_column",
    "sql_for_job_filters",
    "sql_for_partial_update",
]
