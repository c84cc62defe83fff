"""Search criteria <-> URL query parameters."""

import re
from typing import Mapping, Optional
from urllib.parse import parse_qsl, urlencode
from idrhub.models.search_criteria import CRITERIA_FIELDS, INTEGER_FIELDS, SearchCriteria

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(value: str) -> Optional[int]:
    """parseInt semantics: leading integer digits, anything else is None."""
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def parse_search_params(query: "Mapping[str, str] | str") -> SearchCriteria:
    """Build criteria from a query string or a mapping of query parameters.

    Empty and unparseable values are dropped.
    """
    if isinstance(query, str):
        query = dict(parse_qsl(query.lstrip("?")))

    values = {}
    for field in CRITERIA_FIELDS:
        raw = query.get(field)
        if not raw:
            continue
        if field in INTEGER_FIELDS:
            parsed = _parse_int(raw)
            if parsed is not None:
                values[field] = parsed
        else:
            values[field] = raw
    return SearchCriteria(**values)


def to_search_params(criteria: SearchCriteria) -> dict[str, str]:
    """Query parameters for the criteria, omitting unset and empty values."""
    params = {}
    for field in CRITERIA_FIELDS:
        value = getattr(criteria, field)
        if value is None or value == "":
            continue
        params[field] = str(value)
    return params


def build_query_string(criteria: SearchCriteria) -> str:
    return urlencode(to_search_params(criteria))
