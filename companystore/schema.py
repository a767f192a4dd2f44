from typing import Any, Dict, List
from urllib.parse import urlparse

HANDLE_MAX_LENGTH = 25

REQUIRED_STR_FIELDS = ["handle", "name", "description"]
UPDATABLE_FIELDS = ["name", "description", "numEmployees", "logoUrl"]
FILTER_FIELDS = ["name", "minEmployees", "maxEmployees"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_non_negative_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v >= 0


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def _check_optional_fields(data: Dict[str, Any], errors: List[str]) -> None:
    for f in ("name", "description"):
        if f in data and not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if data.get("numEmployees") is not None and not _is_non_negative_int(data["numEmployees"]):
        errors.append("Field 'numEmployees' must be a non-negative integer")

    logo_url = data.get("logoUrl")
    if logo_url is not None:
        if not isinstance(logo_url, str):
            errors.append("Field 'logoUrl' must be a string if provided")
        elif not _valid_url(logo_url):
            errors.append("Field 'logoUrl' must be a valid absolute URL (scheme + host)")


def validate_new_company(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if _is_non_empty_str(data.get("handle")) and len(data["handle"]) > HANDLE_MAX_LENGTH:
        errors.append(f"Field 'handle' must be at most {HANDLE_MAX_LENGTH} characters")

    for f in data:
        if f not in REQUIRED_STR_FIELDS and f not in UPDATABLE_FIELDS:
            errors.append(f"Unknown field: {f}")

    _check_optional_fields(data, errors)
    return errors


def validate_company_update(data: Dict[str, Any]) -> List[str]:
    """Validate a partial update payload. Empty list means valid."""
    if not data:
        return ["No data"]

    errors: List[str] = []
    for f in data:
        if f not in UPDATABLE_FIELDS:
            errors.append(f"Field '{f}' cannot be updated")

    _check_optional_fields(data, errors)
    return errors


def validate_filters(filters: Dict[str, Any]) -> List[str]:
    """Validate company search filters. Empty list means valid."""
    errors: List[str] = []

    for f in filters:
        if f not in FILTER_FIELDS:
            errors.append(f"Unknown filter: {f}")

    name = filters.get("name")
    if name is not None and not isinstance(name, str):
        errors.append("Filter 'name' must be a string")

    for f in ("minEmployees", "maxEmployees"):
        if filters.get(f) is not None and not _is_non_negative_int(filters[f]):
            errors.append(f"Filter '{f}' must be a non-negative integer")

    min_employees = filters.get("minEmployees")
    max_employees = filters.get("maxEmployees")
    if (
        _is_non_negative_int(min_employees)
        and _is_non_negative_int(max_employees)
        and min_employees > max_employees
    ):
        errors.append("Filter 'minEmployees' cannot be greater than 'maxEmployees'")

    return errors
