"""
Company Repository.

Responsibilities:
- CRUD operations for the companies table.
- Dynamic filtering and partial updates through bound parameters.
- Collapsing a company's joined jobs into a positions list.

Non-Responsibilities:
- No transport concerns (HTTP, CLI).
- No payload type validation; see schema.py for that.
- No retries.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from .database import Database
from .errors import BadRequestError, NotFoundError, is_unique_violation
from .joins import collapse_company_jobs
from .logger import get_logger, track_operation
from .sql import build_set_clause, build_where_clause

logger = get_logger()

BASE_COLUMNS = ["handle", "name", "description", 'logo_url AS "logoUrl"']

RETURNING_COLUMNS = (
    'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

# Updatable field -> column; handle is the immutable key.
UPDATABLE_FIELDS = {
    "name": "name",
    "description": "description",
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


class CompanyRepository:
    def __init__(self, db: Database):
        self.db = db

    @track_operation("create")
    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a company and return the stored record.

        data should be {handle, name, description, numEmployees, logoUrl}

        Raises:
            BadRequestError: If the handle is already taken
        """
        handle = data.get("handle")

        duplicate_check = self.db.query(
            "SELECT handle FROM companies WHERE handle = $1",
            [handle],
        )
        if duplicate_check:
            raise BadRequestError(f"Duplicate company: {handle}", key=handle)

        try:
            rows = self.db.query(
                f"""INSERT INTO companies
                    (handle, name, description, num_employees, logo_url)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {RETURNING_COLUMNS}""",
                [
                    handle,
                    data.get("name"),
                    data.get("description"),
                    data.get("numEmployees"),
                    data.get("logoUrl"),
                ],
            )
        except IntegrityError as e:
            # Lost the race against a concurrent insert of the same handle
            if is_unique_violation(e):
                raise BadRequestError(f"Duplicate company: {handle}", key=handle) from e
            raise

        logger.info("Company created", handle=handle)
        return rows[0]

    @track_operation("find_all")
    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find companies, optionally filtered by name, minEmployees, maxEmployees.

        Employee filters also surface numEmployees in each record.
        Results are ordered by name.
        """
        clause = build_where_clause(filters or {})

        columns = list(BASE_COLUMNS)
        for column in clause.select_columns:
            if column not in columns:
                columns.append(column)
        where = clause.where_statement or "1 = 1"

        return self.db.query(
            f"""SELECT {", ".join(columns)}
                FROM companies
                WHERE {where}
                ORDER BY name""",
            clause.values,
        )

    @track_operation("get")
    def get(self, handle: str) -> Dict[str, Any]:
        """
        Return {"company": {...}, "positions": [{"id", "title"}, ...]}.

        Raises:
            NotFoundError: If no company has this handle
        """
        rows = self.db.query(
            """SELECT c.handle,
                      c.name,
                      c.description,
                      c.num_employees AS "numEmployees",
                      c.logo_url AS "logoUrl",
                      j.id AS "jobId",
                      j.title AS "jobTitle"
               FROM companies c
               LEFT JOIN jobs j ON j.company_handle = c.handle
               WHERE c.handle = $1
               ORDER BY j.id""",
            [handle],
        )
        return collapse_company_jobs(rows, handle)

    @track_operation("update")
    def update(self, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partial update: only the provided fields change.

        Data can include {name, description, numEmployees, logoUrl}.

        Raises:
            BadRequestError: If data is empty or names a field that can't change
            NotFoundError: If no company has this handle
        """
        unknown = [field for field in data if field not in UPDATABLE_FIELDS]
        if unknown:
            raise BadRequestError(
                f"Cannot update fields for company {handle}: {', '.join(unknown)}",
                key=handle,
            )

        set_cols, values = build_set_clause(data, UPDATABLE_FIELDS)
        handle_idx = f"${len(values) + 1}"

        rows = self.db.query(
            f"""UPDATE companies
                SET {set_cols}
                WHERE handle = {handle_idx}
                RETURNING {RETURNING_COLUMNS}""",
            [*values, handle],
        )
        if not rows:
            raise NotFoundError(f"No company: {handle}", key=handle)

        logger.info("Company updated", handle=handle, fields=list(data))
        return rows[0]

    @track_operation("remove")
    def remove(self, handle: str) -> None:
        """
        Delete a company.

        Raises:
            NotFoundError: If no company has this handle
        """
        rows = self.db.query(
            "DELETE FROM companies WHERE handle = $1 RETURNING handle",
            [handle],
        )
        if not rows:
            raise NotFoundError(f"No company: {handle}", key=handle)

        logger.info("Company removed", handle=handle)
