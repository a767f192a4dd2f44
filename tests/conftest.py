"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Dict, Any

from companystore.company import CompanyRepository
from companystore.database import Database, init_database
from companystore.logger import get_logger, reset_logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh, console-less global logger for every test."""
    reset_logger()
    yield get_logger(enable_console=False)
    reset_logger()


@pytest.fixture
def database_url(tmp_path) -> str:
    """URL of an initialized SQLite database file."""
    url = f"sqlite:///{tmp_path / 'test.db'}"
    engine = init_database(url)
    engine.dispose()
    return url


@pytest.fixture
def db(database_url):
    """Persistence handle on an empty schema."""
    database = Database.from_url(database_url)
    yield database
    database.dispose()


@pytest.fixture
def seeded_db(db):
    """Four companies, two jobs on c1."""
    companies = [
        ("c1", "C1", 1, "Desc1", "http://c1.img"),
        ("c2", "C2", 2, "Desc2", "http://c2.img"),
        ("c3", "C3", 3, "Desc3", None),
        ("z0", "Zed Works", 0, "Nobody works here", None),
    ]
    for row in companies:
        db.query(
            "INSERT INTO companies (handle, name, num_employees, description, logo_url) "
            "VALUES ($1, $2, $3, $4, $5)",
            list(row),
        )
    db.query(
        "INSERT INTO jobs (id, title, salary, equity, company_handle) VALUES "
        "(1, 'Engineer', 100000, 0.1, 'c1'), (2, 'Manager', 120000, 0, 'c1')"
    )
    return db


@pytest.fixture
def repo(seeded_db) -> CompanyRepository:
    return CompanyRepository(seeded_db)


@pytest.fixture
def new_company() -> Dict[str, Any]:
    """Valid company payload."""
    return {
        "handle": "new",
        "name": "New",
        "description": "New Description",
        "numEmployees": 1,
        "logoUrl": "http://new.img",
    }


class FakeDatabase:
    """Test double returning canned row sets in order and recording calls."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def query(self, sql, params=None):
        self.calls.append((sql, list(params or [])))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_db_factory():
    return FakeDatabase
