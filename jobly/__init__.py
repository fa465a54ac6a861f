"""Jobly Data-Access Package.

This package contains the PostgreSQL data-access layer for the Jobly API:
- common: Pure query builders, error types, config and the query executor
- jobs: Job postings (search, get, partial update, remove) and CLI
- companies: Company records (get, partial update, remove)
"""

__version__ = "0.1.0"
