import datetime as dt
import zipfile
from io import BytesIO

import pytest

from vitrine.connectors.sheets.workbook import WorkbookError, read_workbook

from conftest import build_workbook


def test_read_workbook_all_tabs_in_order():
    content = build_workbook(
        {
            "Shopee": [["Data", "Faturamento Dia (R$)"], ["01/03/2024", "R$ 10,00"]],
            "Amazon": [["Data"], [dt.datetime(2024, 3, 2)]],
        }
    )
    tabs = read_workbook(content)

    assert [t.name for t in tabs] == ["Shopee", "Amazon"]
    assert tabs[0].rows == [["Data", "Faturamento Dia (R$)"], ["01/03/2024", "R$ 10,00"]]
    assert tabs[1].rows[1][0] == dt.datetime(2024, 3, 2)


def test_read_workbook_selected_tabs_and_unknown_names():
    content = build_workbook({"A": [["Data"]], "B": [["Data"]], "C": [["Data"]]})
    tabs = read_workbook(content, ["C", "Missing", "A"])
    assert [t.name for t in tabs] == ["C", "A"]


def test_read_workbook_trims_trailing_empty_cells_and_rows():
    content = build_workbook(
        {"Loja": [["Data", "Faturamento Dia (R$)", None], ["01/03/2024", 5, None], [None, None, None]]}
    )
    rows = read_workbook(content)[0].rows
    assert rows == [["Data", "Faturamento Dia (R$)"], ["01/03/2024", 5]]


def test_read_workbook_rejects_garbage():
    with pytest.raises(WorkbookError):
        read_workbook(b"<html>not a workbook</html>")


def _replace_member(content: bytes, member: str, data: bytes) -> bytes:
    source = zipfile.ZipFile(BytesIO(content))
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w") as target:
        for item in source.infolist():
            target.writestr(item, data if item.filename == member else source.read(item))
    return buffer.getvalue()


def test_read_workbook_rejects_corrupt_worksheet():
    content = build_workbook({"Loja": [["Data"], ["01/03/2024"]]})
    broken = _replace_member(content, "xl/worksheets/sheet1.xml", b"<worksheet><sheetData><row")

    with pytest.raises(WorkbookError):
        read_workbook(broken)
