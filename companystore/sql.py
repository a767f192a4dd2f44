"""
Dynamic SQL fragments for company queries.

Both builders emit `$n` positional placeholders and return the values to
bind alongside them; user input never lands in the SQL text.
"""

from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional

from .errors import BadRequestError

LIKE_ESCAPE = "!"

EMPLOYEES_COLUMN = 'num_employees AS "numEmployees"'


def quote_identifier(name: str) -> str:
    """
    Quote a SQL identifier (column name), doubling embedded quotes.

    Examples:
        >>> quote_identifier("num_employees")
        '"num_employees"'
    """
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def contains_pattern(value: Any) -> str:
    """Wrap a value as a LIKE substring pattern with its own wildcards escaped."""
    escaped = str(value)
    for char in (LIKE_ESCAPE, "%", "_"):
        escaped = escaped.replace(char, LIKE_ESCAPE + char)
    return f"%{escaped}%"


class FilterField(NamedTuple):
    template: str  # "{}" is replaced by the placeholder
    column: str  # projection expression surfaced when filtered on
    transform: Optional[Callable[[Any], Any]] = None


FILTER_FIELDS: Dict[str, FilterField] = {
    "name": FilterField(
        template=f"LOWER(name) LIKE LOWER({{}}) ESCAPE '{LIKE_ESCAPE}'",
        column="name",
        transform=contains_pattern,
    ),
    "minEmployees": FilterField(template="num_employees >= {}", column=EMPLOYEES_COLUMN),
    "maxEmployees": FilterField(template="num_employees <= {}", column=EMPLOYEES_COLUMN),
}


class WhereClause(NamedTuple):
    select_columns: List[str]
    where_statement: str
    values: List[Any]


class SetClause(NamedTuple):
    set_cols: str
    values: List[Any]


def build_where_clause(filters: Mapping[str, Any]) -> WhereClause:
    """
    Build a WHERE predicate from optional filter parameters.

    Only keys in FILTER_FIELDS are read; anything else is ignored. A key
    counts as present when its value is not None, so 0 and "" filter.

    Args:
        filters: e.g. {"name": "net", "minEmployees": 10}

    Returns:
        WhereClause with the extra projection columns, the clauses joined
        by AND (empty string when nothing applies) and the bound values

    Example:
        build_where_clause({"name": "net", "maxEmployees": 0}) gives
        where_statement "LOWER(name) LIKE LOWER($1) ESCAPE '!' AND num_employees <= $2"
        with values ["%net%", 0]
    """
    clauses: List[str] = []
    columns: List[str] = []
    values: List[Any] = []

    for key, value in filters.items():
        field = FILTER_FIELDS.get(key)
        if field is None or value is None:
            continue

        values.append(field.transform(value) if field.transform else value)
        clauses.append(field.template.format(f"${len(values)}"))
        if field.column not in columns:
            columns.append(field.column)

    return WhereClause(
        select_columns=columns,
        where_statement=" AND ".join(clauses),
        values=values,
    )


def build_set_clause(data: Mapping[str, Any], column_names: Mapping[str, str]) -> SetClause:
    """
    Build the SET fragment of a partial UPDATE.

    Args:
        data: Fields to change, e.g. {"firstName": "Aliya", "age": 32}
        column_names: Field name -> column name where they differ,
            e.g. {"firstName": "first_name"}

    Returns:
        SetClause('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Raises:
        BadRequestError: If data is empty
    """
    if not data:
        raise BadRequestError("No data")

    cols = [
        f"{quote_identifier(column_names.get(field, field))}=${idx}"
        for idx, field in enumerate(data, start=1)
    ]

    return SetClause(set_cols=", ".join(cols), values=list(data.values()))
