"""
Collapse a company LEFT JOIN jobs row set into one company record.
"""

from typing import Any, Dict, List, Tuple

from .errors import NotFoundError

COMPANY_FIELDS = ["handle", "name", "description", "logoUrl", "numEmployees"]


def collapse_company_jobs(rows: List[Dict[str, Any]], handle: str) -> Dict[str, Any]:
    """
    Reduce joined rows to {"company": {...}, "positions": [{"id", "title"}, ...]}.

    Rows carry the company columns plus "jobId" and "jobTitle". Positions
    are de-duplicated on the (id, title) value pair in first-seen order;
    rows with a null job id (company without jobs) add nothing.

    Raises:
        NotFoundError: If rows is empty
    """
    if not rows:
        raise NotFoundError(f"No company: {handle}", key=handle)

    first = rows[0]
    company = {field: first.get(field) for field in COMPANY_FIELDS}

    positions: Dict[Tuple[Any, Any], Dict[str, Any]] = {}
    for row in rows:
        job_id = row.get("jobId")
        if job_id is None:
            continue
        key = (job_id, row.get("jobTitle"))
        if key not in positions:
            positions[key] = {"id": job_id, "title": row.get("jobTitle")}

    return {"company": company, "positions": list(positions.values())}
