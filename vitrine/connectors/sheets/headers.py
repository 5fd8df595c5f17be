"""VITRINE — Header Resolver.

Matches a tab's header row against the sales schema. Operators retype
headers with or without accents, in any case and with stray spaces; those
variants match. Synonyms, abbreviations and reordered words do not: such a
column counts as missing.
"""

import unicodedata
from typing import Any, Iterable, List, Optional, Sequence

from vitrine.core.sales_schema import SALES_SCHEMA, SchemaField
from vitrine.models.sales_models import ColumnMapping


def normalize_header(header: Any) -> str:
    """Trim, strip accents and case-fold a header cell."""
    text = str(header if header is not None else "").strip()
    text = unicodedata.normalize("NFD", text)
    text = "".join(c for c in text if unicodedata.category(c) != "Mn")
    return text.casefold()


def find_header_index(headers: Sequence[Any], target: str) -> Optional[int]:
    """Index of the first header equal to ``target`` after normalization."""
    wanted = normalize_header(target)
    for idx, header in enumerate(headers):
        if normalize_header(header) == wanted:
            return idx
    return None


def _resolve_field(headers: Sequence[Any], field: SchemaField) -> Optional[int]:
    """First spelling of ``field`` found in ``headers`` wins."""
    for name in field.header_names:
        idx = find_header_index(headers, name)
        if idx is not None:
            return idx
    return None


def resolve_columns(
    headers: Sequence[Any],
    schema: Iterable[SchemaField] = SALES_SCHEMA,
) -> ColumnMapping:
    """Build the column mapping for one header row."""
    indices = {field.attr: _resolve_field(headers, field) for field in schema}
    return ColumnMapping(**indices)


def missing_columns(
    mapping: ColumnMapping,
    schema: Iterable[SchemaField] = SALES_SCHEMA,
) -> List[str]:
    """Canonical names of expected columns the header row lacks."""
    return [
        f.canonical_name
        for f in schema
        if f.expected and getattr(mapping, f.attr, None) is None
    ]
