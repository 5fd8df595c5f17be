"""VITRINE — Sheet Rows → Canonical Sales Records.

Converts raw tab rows into ``SalesRecord`` using the sales schema for
column matching and parser selection. Malformed cells fall back to zero,
rows without a readable date are dropped, and nothing is raised.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from vitrine.core.sales_schema import SALES_SCHEMA, ParserKind, SchemaField
from vitrine.connectors.sheets.headers import missing_columns, resolve_columns
from vitrine.connectors.sheets.parsers import (
    parse_integer,
    parse_local_date,
    parse_money,
    parse_percent,
    parse_text,
)
from vitrine.models.sales_models import ColumnMapping, SalesRecord, SheetTab
from vitrine.core.logging import get_logger

logger = get_logger("sheets.transformer")

VALUE_PARSERS: Dict[ParserKind, Callable[[Any], Any]] = {
    ParserKind.MONEY: parse_money,
    ParserKind.PERCENT: parse_percent,
    ParserKind.INTEGER: parse_integer,
    ParserKind.TEXT: parse_text,
}


def _cell(row: Sequence[Any], index: Optional[int]) -> Any:
    """Cell at ``index``, or None when the column is missing or the row is short."""
    if index is None or index >= len(row):
        return None
    return row[index]


def normalize_row(
    row: Sequence[Any],
    mapping: ColumnMapping,
    channel: str,
    schema: Iterable[SchemaField] = SALES_SCHEMA,
) -> Optional[SalesRecord]:
    """Turn one data row into a record, or None when a required field fails."""
    values: Dict[str, Any] = {"channel": channel}

    for field in schema:
        index = getattr(mapping, field.attr, None)
        raw = _cell(row, index)

        if field.parser_kind == ParserKind.DATE:
            parsed = parse_local_date(raw)
            if parsed is None:
                if field.required:
                    return None
                continue
            values[field.attr] = parsed.value
            values["display_date"] = parsed.display_form
            values["date_key"] = parsed.iso_key
            continue

        if index is None and field.optional_column:
            # Sheet has no such column; keep the field unset (None)
            continue
        values[field.attr] = VALUE_PARSERS[field.parser_kind](raw)

    return SalesRecord(**values)


def normalize_tab(
    tab: SheetTab,
    schema: Sequence[SchemaField] = SALES_SCHEMA,
) -> List[SalesRecord]:
    """Resolve headers and normalize every data row of one tab."""
    if len(tab.rows) < 2:
        logger.info(f"Tab '{tab.name}' has no data rows", extra={"tab": tab.name})
        return []

    header_row, data_rows = tab.rows[0], tab.rows[1:]
    mapping = resolve_columns(header_row, schema)

    unresolved = missing_columns(mapping, schema)
    if unresolved:
        logger.warning(
            f"Tab '{tab.name}' is missing columns: {', '.join(unresolved)}",
            extra={"tab": tab.name},
        )

    records: List[SalesRecord] = []
    for row in data_rows:
        record = normalize_row(row or [], mapping, tab.name, schema)
        if record is not None:
            records.append(record)

    dropped = len(data_rows) - len(records)
    logger.info(
        f"Normalized tab '{tab.name}': {len(records)} records, {dropped} rows dropped",
        extra={"tab": tab.name, "rows": len(data_rows), "records": len(records), "dropped": dropped},
    )
    return records


def aggregate_tabs(
    tabs: Iterable[SheetTab],
    schema: Sequence[SchemaField] = SALES_SCHEMA,
) -> List[SalesRecord]:
    """Concatenate every tab's records, keeping tab order and row order.

    Each record's channel is the name of the tab it came from.
    """
    records: List[SalesRecord] = []
    tab_count = 0
    for tab in tabs:
        tab_count += 1
        records.extend(normalize_tab(tab, schema))

    logger.info(f"Aggregated {len(records)} records across {tab_count} tabs")
    return records
