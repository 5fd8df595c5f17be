"""VITRINE — Workbook Reader.

Splits downloaded .xlsx bytes into ``SheetTab`` objects, one per worksheet,
with cell values left raw for the locale parsers.
"""

import zipfile
from io import BytesIO
from typing import Any, List, Optional, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from vitrine.models.sales_models import SheetTab
from vitrine.core.logging import get_logger

logger = get_logger("sheets.workbook")

# Malformed archive members or sheet XML; XML parse errors subclass SyntaxError
_READ_ERRORS = (
    zipfile.BadZipFile,
    InvalidFileException,
    KeyError,
    ValueError,
    OSError,
    SyntaxError,
)


class WorkbookError(Exception):
    """Raised when the downloaded bytes are not a readable workbook."""


def _is_empty(row: Sequence[Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in row)


def _trim_row(row: Sequence[Any]) -> List[Any]:
    """Drop trailing empty cells so short rows look like the Sheets API's."""
    cells = list(row)
    while cells and (cells[-1] is None or cells[-1] == ""):
        cells.pop()
    return cells


def read_workbook(content: bytes, tabs: Optional[Sequence[str]] = None) -> List[SheetTab]:
    """Read every worksheet (or only ``tabs``, in that order) into SheetTabs."""
    try:
        wb = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except _READ_ERRORS as e:
        raise WorkbookError(f"Unreadable workbook: {e}") from e

    try:
        if tabs:
            wanted = [t.strip() for t in tabs if t.strip()]
            missing = [t for t in wanted if t not in wb.sheetnames]
            if missing:
                logger.warning(f"Tabs not found in workbook: {', '.join(missing)}")
            names = [t for t in wanted if t in wb.sheetnames]
        else:
            names = list(wb.sheetnames)

        result: List[SheetTab] = []
        for name in names:
            ws = wb[name]
            rows = [_trim_row(r) for r in ws.iter_rows(values_only=True)]
            while rows and _is_empty(rows[-1]):
                rows.pop()
            result.append(SheetTab(name=name, rows=rows))
            logger.info(
                f"Read tab '{name}' ({max(len(rows) - 1, 0)} data rows)",
                extra={"tab": name, "rows": max(len(rows) - 1, 0)},
            )
    except _READ_ERRORS as e:
        raise WorkbookError(f"Unreadable worksheet: {e}") from e
    finally:
        wb.close()

    return result
