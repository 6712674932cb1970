"""Query validation and classification."""

import re

from healthos_nutrition.domain.errors import ValidationError

_BARCODE_PATTERN = re.compile(r"[0-9]{8,13}")
MAX_QUERY_LENGTH = 200


def is_barcode(query: str) -> bool:
    """Return True when the query is an 8-13 digit product code."""
    return _BARCODE_PATTERN.fullmatch(query) is not None


def clean_query(raw: str | None) -> str:
    """Trim a search query and reject empty or oversized input."""
    query = (raw or "").strip()
    if not query:
        raise ValidationError("Query must not be empty")
    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(f"Query must be at most {MAX_QUERY_LENGTH} characters")
    return query
