import pytest


def _buyers(n: int, start: int = 1) -> list[dict]:
    return [{"id": i, "full_name": f"Buyer {i}", "phone": f"050{i:07d}"} for i in range(start, start + n)]


@pytest.mark.asyncio
async def test_buyers_passthrough_forwards_query(client, upstream):
    upstream.buyers = [{"id": 1, "name": "Olena", "phone": "0501234567", "email": "O@x.ua"}]

    r = await client.get("/buyers", params={"search": "+380501234567", "page": "1", "per_page": "100"})
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["count"] == 1
    assert body["raw"] == upstream.buyers
    assert body["data"][0] == {
        "id": 1,
        "name": "Olena",
        "phones": ["+380501234567"],
        "emails": ["o@x.ua"],
        "company_id": None,
        "dedupe_keys": ["tel:+380501234567", "email:o@x.ua"],
    }
    sent = upstream.requests[0].url.params
    assert sent["search"] == "+380501234567"
    assert sent["per_page"] == "100"


@pytest.mark.asyncio
async def test_buyers_raw_returns_upstream_json(client, upstream):
    upstream.buyers = _buyers(2)
    r = await client.get("/buyers/raw")
    assert r.status_code == 200
    body = r.json()
    assert body["data"] == upstream.buyers
    assert body["meta"] == {"current_page": "1"}


@pytest.mark.asyncio
async def test_buyers_all_collects_every_page(client, upstream):
    upstream.buyers = _buyers(40)

    r = await client.get("/buyers/all")
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["total"] == 40
    assert body["pages_processed"] == 3
    assert body["per_page"] == 15
    assert body["search"] is None
    assert [b["id"] for b in body["data"]] == list(range(1, 41))
    # three full-or-partial pages, then the empty one
    assert [req.url.params["page"] for req in upstream.requests] == ["1", "2", "3", "4"]


@pytest.mark.asyncio
async def test_buyers_all_truncates_to_max_and_passes_search(client, upstream):
    upstream.buyers = _buyers(100)

    r = await client.get("/buyers/all", params={"max": "20", "search": "Buyer"})
    body = r.json()

    assert body["total"] == 20
    assert body["pages_processed"] == 2
    assert body["search"] == "Buyer"
    assert len(upstream.requests) == 2
    assert all(req.url.params["search"] == "Buyer" for req in upstream.requests)


@pytest.mark.asyncio
async def test_buyers_all_invalid_max_uses_default(client, upstream):
    upstream.buyers = _buyers(3)
    r = await client.get("/buyers/all", params={"max": "lots"})
    assert r.status_code == 200
    assert r.json()["total"] == 3


@pytest.mark.asyncio
async def test_buyers_all_upstream_failure_is_500(client, upstream):
    upstream.buyers = _buyers(30)
    upstream.fail_status = 429

    r = await client.get("/buyers/all")
    assert r.status_code == 500
    assert r.json() == {"error": "KeyCRM GET /buyer -> 429: Too Many Requests"}


@pytest.mark.asyncio
async def test_local_and_international_phone_share_dedupe_key(client, upstream):
    upstream.buyers = [
        {"id": 1, "name": "A", "phone": "0501234567"},
        {"id": 2, "name": "B", "phone": "+380501234567"},
    ]

    body = (await client.get("/buyers/all")).json()
    keys = [b["dedupe_keys"] for b in body["data"]]
    assert keys == [["tel:+380501234567"], ["tel:+380501234567"]]

    dupes = (await client.get("/buyers/duplicates")).json()
    assert dupes["total"] == 2
    assert dupes["groups"] == [{"key": "tel:+380501234567", "ids": [1, 2]}]
