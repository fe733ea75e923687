import re
from typing import Any, List, Mapping, Optional, Tuple

from celebration_api.core.exceptions import ValidationError

DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
ALL_BRANCHES = "All"


def _param(params: Mapping[str, Any], name: str) -> Optional[str]:
    value = params.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def build_filter(params: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    """
    Turn optional query parameters into a WHERE fragment and its parameters.

    An exact `date` wins over `month` + `year`; `branch` applies on top of
    either unless it is "All". Placeholders and parameters come out in the
    same order.
    """
    clauses: List[str] = []
    values: List[Any] = []

    date = _param(params, "date")
    month = _param(params, "month")
    year = _param(params, "year")
    branch = _param(params, "branch")

    if date:
        if not DATE_PATTERN.match(date):
            raise ValidationError(ValidationError.INVALID_DATE, "Invalid date format: Use YYYY-MM-DD")
        clauses.append("eventDate = %s")
        values.append(date)
    elif month and year:
        try:
            month_num = int(month)
            year_num = int(year)
        except ValueError:
            raise ValidationError(ValidationError.INVALID_MONTH_YEAR, "Invalid month or year")
        if not 1 <= month_num <= 12 or year_num < 1000:
            raise ValidationError(ValidationError.INVALID_MONTH_YEAR, "Invalid month or year")
        clauses.append("MONTH(eventDate) = %s AND YEAR(eventDate) = %s")
        values.extend([month_num, year_num])

    if branch and branch != ALL_BRANCHES:
        clauses.append("branch = %s")
        values.append(branch)

    if not clauses:
        return "1=1", []

    return " AND ".join(clauses), values
