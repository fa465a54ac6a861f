"""
Database Operations for Companies

Lookup, partial update and removal of company records. Updates go through
the shared partial-update builder with a camelCase → snake_case name map.
"""

import logging
from collections.abc import Mapping
from typing import Any

from jobly.common.errors import BadRequestError
from jobly.common.executor import QueryExecutor
from jobly.common.sql import NameMap, sql_for_partial_update

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = NameMap(
    {
        "numEmployees": "num_employees",
        "logoUrl": "logo_url",
    }
)

UPDATABLE_FIELDS = frozenset({"name", "description", "numEmployees", "logoUrl"})

_COMPANY_RETURNING = (
    'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'
)


class CompaniesDB:
    """Database interface for companies."""

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    def get(self, handle: str) -> dict[str, Any]:
        """
        Get a company with the ids and titles of its jobs.

        Raises:
            NotFoundError: If no company has this handle
        """
        company = self.executor.fetch_one(
            f"SELECT {_COMPANY_RETURNING} FROM companies WHERE handle = $1",
            [handle],
            not_found=f"No company: {handle}",
        )
        company["jobs"] = self.executor.fetch_all(
            "SELECT id, title, salary, equity FROM jobs WHERE company_handle = $1 ORDER BY id",
            [handle],
        )
        return company

    def update(self, handle: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Update only the supplied fields of a company.

        The handle itself cannot change.

        Args:
            handle: Company key
            data: Any of name, description, numEmployees, logoUrl

        Returns:
            The updated company

        Raises:
            EmptyInputError: If data is empty
            BadRequestError: If data contains a field that cannot be updated
            NotFoundError: If no company has this handle
        """
        rejected = sorted(set(data) - UPDATABLE_FIELDS)
        if rejected:
            raise BadRequestError(f"Cannot update company field(s): {', '.join(rejected)}")

        set_cols = sql_for_partial_update(data, COMPANY_COLUMNS)
        query = (
            f"UPDATE companies SET {set_cols.clause} "
            f"WHERE handle = ${set_cols.next_index} "
            f"RETURNING {_COMPANY_RETURNING}"
        )

        company = self.executor.fetch_one(
            query, [*set_cols.values, handle], not_found=f"No company: {handle}"
        )
        logger.info("Updated company", extra={"handle": handle, "fields": list(data)})
        return company

    def remove(self, handle: str) -> None:
        """
        Delete a company.

        Raises:
            NotFoundError: If no company has this handle
        """
        self.executor.fetch_one(
            "DELETE FROM companies WHERE handle = $1 RETURNING handle",
            [handle],
            not_found=f"No company: {handle}",
        )
        logger.info("Removed company", extra={"handle": handle})


__all__ = ["CompaniesDB", "COMPANY_COLUMNS", "UPDATABLE_FIELDS"]
