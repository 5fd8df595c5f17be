import pytest
from fastapi.testclient import TestClient

from vitrine.cache import SalesDataCache
from vitrine.main import create_app
from vitrine.analyzer import pipeline

from conftest import HEADER, build_workbook, make_record

RECORDS = [
    make_record("2024-03-01", "Amazon", revenue=100, sales=2, ticket=50, visits=100, conversion=2),
    make_record("2024-03-01", "Shopee", revenue=50, sales=1, ticket=50, visits=20, conversion=5),
    make_record("2024-03-02", "Amazon", revenue=300, sales=2, ticket=150, visits=100, conversion=2),
    make_record("2024-03-03", "Amazon", revenue=0, sales=0, ticket=0, visits=0, conversion=0),
]


@pytest.fixture
def cache():
    c = SalesDataCache()
    c.replace(RECORDS, source="test")
    return c


@pytest.fixture
def client(cache):
    with TestClient(create_app(cache)) as c:
        yield c


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["records"] == 4


def test_list_sales_with_filters(client):
    body = client.get("/sales", params={"channel": "Amazon", "start_date": "2024-03-02"}).json()
    assert body["total_records"] == 4
    assert body["count"] == 2
    assert [r["date_key"] for r in body["records"]] == ["2024-03-02", "2024-03-03"]
    assert body["records"][0]["date"] == "2024-03-02"


def test_list_sales_single_date_overrides_range(client):
    body = client.get(
        "/sales",
        params={"date": "2024-03-01", "start_date": "2024-03-02", "end_date": "2024-03-03"},
    ).json()
    assert [r["channel"] for r in body["records"]] == ["Amazon", "Shopee"]


def test_list_sales_last_n(client):
    body = client.get("/sales", params={"last": 1}).json()
    assert body["count"] == 1
    assert body["records"][0]["date_key"] == "2024-03-03"


def test_invalid_date_is_422(client):
    resp = client.get("/sales", params={"start_date": "31/01/2024"})
    assert resp.status_code == 422
    assert "start_date" in resp.json()["detail"]


def test_summary(client):
    body = client.get("/sales/summary", params={"channel": "Amazon"}).json()

    assert body["filtered_records"] == 3
    assert body["kpis"]["total_revenue"] == 400
    assert body["kpis"]["total_sales"] == 4
    assert body["kpis"]["avg_ticket"] == 100
    assert body["kpis"]["avg_conversion_rate"] == 2
    trends = {t["metric_name"]: t for t in body["trends"]}
    # First half is day 1 only; second half averages days 2 and 3
    assert trends["revenue"]["change_pct"] == 50
    assert trends["revenue"]["direction"] == "up"


def test_summary_single_record_has_no_trends(client):
    body = client.get("/sales/summary", params={"channel": "Amazon", "start_date": "2024-03-03"}).json()
    assert body["filtered_records"] == 1
    assert body["trends"] == []


def test_channels(client):
    assert client.get("/sales/channels").json()["channels"] == ["Amazon", "Shopee"]


class FakeSheetsClient:
    export_url = "https://sheets.test/export.xlsx"

    async def fetch_workbook(self):
        return build_workbook(
            {"Magalu": [HEADER, ["05/03/2024", "R$ 10,00", "", "1", "", "", "", "10", "", "10%", ""]]}
        )

    async def close(self):
        pass


def test_sync_replaces_records(client, cache, monkeypatch):
    monkeypatch.setattr(pipeline, "SheetsClient", FakeSheetsClient)

    resp = client.post("/sync", params={"force": True})

    assert resp.status_code == 200
    assert resp.json()["status"] == "refreshed"
    assert [r.channel for r in cache.records] == ["Magalu"]


def test_sync_respects_fresh_cache(client, monkeypatch):
    monkeypatch.setattr(pipeline, "SheetsClient", FakeSheetsClient)
    assert client.post("/sync").json()["status"] == "fresh"


def test_invalidate_then_sync(client, cache, monkeypatch):
    monkeypatch.setattr(pipeline, "SheetsClient", FakeSheetsClient)
    assert client.post("/sync/invalidate").json()["records"] == 4
    assert client.post("/sync").json()["status"] == "refreshed"
    assert len(cache.records) == 1
