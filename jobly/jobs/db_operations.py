"""
Database Operations for Jobs

This module handles all job-table interactions:
- Searching jobs with optional salary / equity / title filters
- Creating a job for a company
- Fetching a single job together with its company
- Partially updating a job (only the fields supplied)
- Removing a job

Statements are assembled from the pure builders in `jobly.common` and run
through the shared QueryExecutor, which reports zero-row outcomes as
NotFoundError.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from jobly.common.errors import BadRequestError
from jobly.common.executor import QueryExecutor
from jobly.common.filters import FilterCriteria, sql_for_job_filters
from jobly.common.sql import NameMap, sql_for_partial_update

logger = logging.getLogger(__name__)

# Job fields already match their column names.
JOB_COLUMNS = NameMap({})

UPDATABLE_FIELDS = frozenset({"title", "salary", "equity"})

CREATE_FIELDS = frozenset({"title", "salary", "equity", "companyHandle"})

_SELECT_JOBS = """
    SELECT j.id,
           j.title,
           j.salary,
           j.equity,
           j.company_handle AS "companyHandle",
           c.name AS "companyName"
    FROM jobs j
    LEFT JOIN companies AS c ON c.handle = j.company_handle
"""

_JOB_RETURNING = 'id, title, salary, equity, company_handle AS "companyHandle"'


def _check_text(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise BadRequestError(f"{field} must be a non-empty string, got {value!r}")


def _check_salary(value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise BadRequestError(
            f"salary must be a non-negative integer or null, got {value!r}"
        )


def _check_equity(value: Any) -> None:
    message = f"equity must be a number between 0 and 1 or null, got {value!r}"
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise BadRequestError(message)

    try:
        equity = Decimal(str(value).strip())
    except InvalidOperation:
        raise BadRequestError(message) from None

    if not equity.is_finite() or not 0 <= equity <= 1:
        raise BadRequestError(message)


def _check_job_values(data: Mapping[str, Any]) -> None:
    """Type-check job values before any SQL is built."""
    if "title" in data:
        _check_text("title", data["title"])
    if "salary" in data:
        _check_salary(data["salary"])
    if "equity" in data:
        _check_equity(data["equity"])
    if "companyHandle" in data:
        _check_text("companyHandle", data["companyHandle"])


class JobsDB:
    """
    Database interface for job postings.

    Example:
        >>> jobs_db = JobsDB(executor)
        >>> jobs_db.find_all(FilterCriteria(min_salary=20000))
        [{'id': 2, 'title': 'J2', ...}, {'id': 3, 'title': 'J3', ...}]
    """

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a job.

        Args:
            data: "title" and "companyHandle" are required; "salary" and
                "equity" are optional and default to NULL

        Returns:
            The new job (id, title, salary, equity, companyHandle)

        Raises:
            BadRequestError: On unknown or missing fields, or invalid values
            DatabaseError: If the insert fails (e.g. unknown company handle)
        """
        unknown = sorted(set(data) - CREATE_FIELDS)
        if unknown:
            raise BadRequestError(f"Unknown job field(s): {', '.join(unknown)}")

        missing = [field for field in ("title", "companyHandle") if field not in data]
        if missing:
            raise BadRequestError(f"Missing job field(s): {', '.join(missing)}")

        _check_job_values(data)

        job = self.executor.fetch_one(
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
               VALUES ($1, $2, $3, $4)
               RETURNING {_JOB_RETURNING}""",
            [
                data["title"],
                data.get("salary"),
                data.get("equity"),
                data["companyHandle"],
            ],
            not_found="Job was not created",
        )

        logger.info(
            "Created job",
            extra={"job_id": job["id"], "company_handle": data["companyHandle"]},
        )
        return job

    def find_all(self, criteria: Optional[FilterCriteria] = None) -> list[dict[str, Any]]:
        """
        Find jobs, optionally narrowed by search criteria.

        Args:
            criteria: Salary floor, equity flag and title substring; None or
                empty criteria return every job

        Returns:
            Jobs ordered by title, each with `companyHandle` and `companyName`

        Raises:
            DatabaseError: If the query fails
        """
        where = sql_for_job_filters(criteria)

        query_parts = [_SELECT_JOBS.strip()]
        if not where.is_empty:
            query_parts.append(f"WHERE {where.clause}")
        query_parts.append("ORDER BY title")

        jobs = self.executor.fetch_all("\n".join(query_parts), where.values)

        logger.info(
            "Fetched jobs",
            extra={
                "count": len(jobs),
                "filtered": not where.is_empty,
                "params_count": len(where.values),
            },
        )
        return jobs

    def get(self, job_id: int) -> dict[str, Any]:
        """
        Get one job with its company nested under `company`.

        Raises:
            NotFoundError: If no job has this id
        """
        job = self.executor.fetch_one(
            """SELECT id, title, salary, equity, company_handle AS "companyHandle"
               FROM jobs
               WHERE id = $1""",
            [job_id],
            not_found=f"No job: {job_id}",
        )

        company = self.executor.fetch_one(
            """SELECT handle,
                      name,
                      description,
                      num_employees AS "numEmployees",
                      logo_url AS "logoUrl"
               FROM companies
               WHERE handle = $1""",
            [job.pop("companyHandle")],
            not_found=f"No company for job: {job_id}",
        )
        job["company"] = company
        return job

    def update(self, job_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Update only the supplied fields of a job.

        Only `title`, `salary` and `equity` may change; a job cannot move to
        another company. Explicit None sets salary or equity to NULL.

        Args:
            job_id: Job primary key
            data: Field → new value, e.g. {"title": "New", "salary": None}

        Returns:
            The updated job (id, title, salary, equity, companyHandle)

        Raises:
            EmptyInputError: If data is empty
            BadRequestError: If data contains a field that cannot be updated,
                or a value of the wrong type
            NotFoundError: If no job has this id
        """
        rejected = sorted(set(data) - UPDATABLE_FIELDS)
        if rejected:
            raise BadRequestError(f"Cannot update job field(s): {', '.join(rejected)}")
        _check_job_values(data)

        set_cols = sql_for_partial_update(data, JOB_COLUMNS)
        query = (
            f"UPDATE jobs SET {set_cols.clause} "
            f"WHERE id = ${set_cols.next_index} "
            f"RETURNING {_JOB_RETURNING}"
        )

        job = self.executor.fetch_one(
            query, [*set_cols.values, job_id], not_found=f"No job: {job_id}"
        )

        logger.info(
            "Updated job",
            extra={"job_id": job_id, "fields": list(data)},
        )
        return job

    def remove(self, job_id: int) -> None:
        """
        Delete a job.

        Raises:
            NotFoundError: If no job has this id
        """
        self.executor.fetch_one(
            "DELETE FROM jobs WHERE id = $1 RETURNING id",
            [job_id],
            not_found=f"No job: {job_id}",
        )
        logger.info("Removed job", extra={"job_id": job_id})


__all__ = ["JobsDB", "JOB_COLUMNS", "UPDATABLE_FIELDS", "CREATE_FIELDS"]
