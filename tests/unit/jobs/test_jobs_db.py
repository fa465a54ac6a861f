"""
Unit tests for JobsDB.

Statements are captured by the FakeExecutor fixture, so these tests check the
SQL and bound values each operation sends, plus the not-found and
bad-request paths.
"""

from decimal import Decimal

import pytest

from jobly.common.errors import BadRequestError, EmptyInputError, NotFoundError
from jobly.common.filters import FilterCriteria
from jobly.jobs.db_operations import JobsDB


@pytest.mark.unit
class TestCreate:
    def test_create(self, fake_executor):
        created = {"id": 4, "title": "new", "salary": 100, "equity": "0.1", "companyHandle": "c1"}
        fake_executor.results.append([created])

        job = JobsDB(fake_executor).create(
            {"title": "new", "salary": 100, "equity": "0.1", "companyHandle": "c1"}
        )

        assert job == created
        statement, values = fake_executor.calls[0]
        assert statement.startswith("INSERT INTO jobs (title, salary, equity, company_handle)")
        assert "VALUES ($1, $2, $3, $4)" in statement
        assert 'RETURNING id, title, salary, equity, company_handle AS "companyHandle"' in statement
        assert values == ["new", 100, "0.1", "c1"]

    def test_salary_and_equity_default_to_null(self, fake_executor):
        fake_executor.results.append([{"id": 5}])

        JobsDB(fake_executor).create({"companyHandle": "c1", "title": "new"})

        assert fake_executor.calls[0][1] == ["new", None, None, "c1"]

    @pytest.mark.parametrize("field", ["title", "companyHandle"])
    def test_missing_required_field(self, fake_executor, field):
        data = {"title": "new", "companyHandle": "c1"}
        del data[field]
        with pytest.raises(BadRequestError, match=field):
            JobsDB(fake_executor).create(data)
        assert fake_executor.calls == []

    def test_unknown_field(self, fake_executor):
        with pytest.raises(BadRequestError, match="Unknown job field"):
            JobsDB(fake_executor).create({"title": "new", "companyHandle": "c1", "id": 9})
        assert fake_executor.calls == []

    @pytest.mark.parametrize(
        "data",
        [
            {"title": "", "companyHandle": "c1"},
            {"title": None, "companyHandle": "c1"},
            {"title": "new", "companyHandle": 3},
            {"title": "new", "companyHandle": "c1", "salary": "lots"},
            {"title": "new", "companyHandle": "c1", "equity": 2},
        ],
    )
    def test_invalid_values(self, fake_executor, data):
        with pytest.raises(BadRequestError):
            JobsDB(fake_executor).create(data)
        assert fake_executor.calls == []


@pytest.mark.unit
class TestFindAll:
    def test_no_filter(self, fake_executor, sample_jobs):
        fake_executor.results.append(sample_jobs)

        jobs = JobsDB(fake_executor).find_all()

        assert jobs == sample_jobs
        statement, values = fake_executor.calls[0]
        assert "WHERE" not in statement
        assert statement.rstrip().endswith("ORDER BY title")
        assert values == []

    def test_all_filters(self, fake_executor, sample_jobs):
        fake_executor.results.append([sample_jobs[1]])

        jobs = JobsDB(fake_executor).find_all(
            FilterCriteria(min_salary=20000, has_equity=True, title="J")
        )

        assert jobs == [sample_jobs[1]]
        statement, values = fake_executor.calls[0]
        assert "WHERE salary >= $1 AND equity > 0 AND title ILIKE $2\nORDER BY title" in statement
        assert values == [20000, "%J%"]

    def test_empty_criteria_means_no_where(self, fake_executor):
        JobsDB(fake_executor).find_all(FilterCriteria(has_equity=False))

        statement, values = fake_executor.calls[0]
        assert "WHERE" not in statement
        assert values == []


@pytest.mark.unit
class TestGet:
    def test_nests_company(self, fake_executor):
        fake_executor.results = [
            [{"id": 1, "title": "J1", "salary": 10000, "equity": "0.25", "companyHandle": "c1"}],
            [
                {
                    "handle": "c1",
                    "name": "C1",
                    "description": "Desc1",
                    "numEmployees": 1,
                    "logoUrl": "http://c1.img",
                }
            ],
        ]

        job = JobsDB(fake_executor).get(1)

        assert job == {
            "id": 1,
            "title": "J1",
            "salary": 10000,
            "equity": "0.25",
            "company": {
                "handle": "c1",
                "name": "C1",
                "description": "Desc1",
                "numEmployees": 1,
                "logoUrl": "http://c1.img",
            },
        }
        assert fake_executor.calls[0][1] == [1]
        assert fake_executor.calls[1][1] == ["c1"]

    def test_not_found(self, fake_executor):
        with pytest.raises(NotFoundError, match="No job: 10000"):
            JobsDB(fake_executor).get(10000)


@pytest.mark.unit
class TestUpdate:
    def test_update(self, fake_executor):
        updated = {"id": 1, "title": "New", "salary": 50000, "equity": "0.45", "companyHandle": "c1"}
        fake_executor.results.append([updated])

        job = JobsDB(fake_executor).update(1, {"title": "New", "salary": 50000, "equity": "0.45"})

        assert job == updated
        statement, values = fake_executor.calls[0]
        assert statement.startswith('UPDATE jobs SET "title"=$1, "salary"=$2, "equity"=$3 WHERE id = $4 ')
        assert "RETURNING" in statement
        assert values == ["New", 50000, "0.45", 1]

    def test_update_null_fields(self, fake_executor):
        fake_executor.results.append([{"id": 1}])

        JobsDB(fake_executor).update(1, {"title": "New", "salary": None, "equity": None})

        _, values = fake_executor.calls[0]
        assert values == ["New", None, None, 1]

    def test_not_found(self, fake_executor):
        with pytest.raises(NotFoundError, match="No job: 100000"):
            JobsDB(fake_executor).update(100000, {"title": "New"})

    def test_no_data(self, fake_executor):
        with pytest.raises(EmptyInputError):
            JobsDB(fake_executor).update(1, {})
        assert fake_executor.calls == []

    @pytest.mark.parametrize(
        "data",
        [
            {"salary": "abc"},
            {"salary": "50000"},
            {"salary": -1},
            {"salary": 1.5},
            {"salary": True},
            {"equity": "abc"},
            {"equity": "1.5"},
            {"equity": -0.1},
            {"equity": "NaN"},
            {"equity": False},
            {"equity": [0.1]},
            {"title": None},
            {"title": 42},
        ],
    )
    def test_rejects_values_of_the_wrong_type(self, fake_executor, data):
        with pytest.raises(BadRequestError):
            JobsDB(fake_executor).update(1, data)
        assert fake_executor.calls == []

    @pytest.mark.parametrize("equity", [0, 1, 0.5, "0.45", Decimal("0.25")])
    def test_accepts_numeric_equity(self, fake_executor, equity):
        fake_executor.results.append([{"id": 1}])

        JobsDB(fake_executor).update(1, {"equity": equity})

        assert fake_executor.calls[0][1] == [equity, 1]

    @pytest.mark.parametrize("field", ["companyHandle", "handle", "id"])
    def test_rejects_fields_that_cannot_change(self, fake_executor, field):
        with pytest.raises(BadRequestError, match=field):
            JobsDB(fake_executor).update(1, {field: "c1-new"})
        assert fake_executor.calls == []


@pytest.mark.unit
class TestRemove:
    def test_remove(self, fake_executor):
        fake_executor.results.append([{"id": 1}])

        JobsDB(fake_executor).remove(1)

        assert fake_executor.calls == [("DELETE FROM jobs WHERE id = $1 RETURNING id", [1])]

    def test_not_found(self, fake_executor):
        with pytest.raises(NotFoundError):
            JobsDB(fake_executor).remove(100000)
