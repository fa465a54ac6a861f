"""
Jobs

Data access for job postings and the `python -m jobly.jobs.main` CLI.

Key responsibilities:
- Search jobs with optional salary / equity / title filters
- Create jobs with type-checked salary and equity
- Partially update jobs through the shared fragment builder
- Translate zero-row outcomes into NotFoundError
"""

from .db_operations import CREATE_FIELDS, JOB_COLUMNS, UPDATABLE_FIELDS, JobsDB

__all__ = ["JobsDB", "JOB_COLUMNS", "UPDATABLE_FIELDS", "CREATE_FIELDS"]
