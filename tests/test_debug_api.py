import pytest


@pytest.mark.asyncio
async def test_probe_keycrm(client, upstream):
    upstream.buyers = [{"id": i} for i in range(1, 131)]

    r = await client.get("/debug/keycrm")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["page1_count"] == 100
    assert body["page2_count"] == 30
    assert body["page1_meta"] == {"current_page": "1"}
    assert body["page1_sample"] == [{"id": 1}, {"id": 2}]


@pytest.mark.asyncio
async def test_probe_pages_stops_at_empty_page(client, upstream):
    upstream.buyers = [{"id": i} for i in range(1, 21)]

    body = (await client.get("/debug/pages")).json()
    assert body["pages_tested"] == [
        {"page": 1, "count": 15, "has_data": True},
        {"page": 2, "count": 5, "has_data": True},
        {"page": 3, "count": 0, "has_data": False},
    ]
    assert body["total_unique_buyers"] == 20
