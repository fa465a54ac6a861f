"""
Companies

Data access for company records: lookup, partial update and removal.
Company fields use camelCase (`numEmployees`, `logoUrl`) while the schema uses
snake_case columns; the mapping lives in `COMPANY_COLUMNS`.
"""

from .db_operations import COMPANY_COLUMNS, CompaniesDB

__all__ = ["CompaniesDB", "COMPANY_COLUMNS"]
