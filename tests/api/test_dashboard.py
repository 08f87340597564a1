"""Dashboard API tests: health, stats, flow list, detail and compare."""

import pytest
from httpx import AsyncClient


@pytest.fixture
async def seeded(make_client) -> dict[str, int]:
    """Three flows: one finished with drift, one interrupted, one active."""
    async with make_client(service_name="orders-api") as client:
        checkout = await client.start("order-checkout", "o-1")
        await checkout.create_point("order created", {"id": "o-1", "status": "NEW"})
        await checkout.create_point("payment", {"status": "APPROVED"})
        await checkout.add_assertion({"id": "o-1", "status": "NEW"})
        await checkout.add_assertion({"status": "DECLINED"})
        await checkout.add_assertion({"extra": True})
        await checkout.finish()

        interrupted = await client.start("refund", "r-1")
        active = await client.start("refund", "r-1")
        await active.create_point("refund issued", {"amount": 5})
    async with make_client(service_name="shipping-worker") as client:
        shipping = await client.start("shipment", "s-9")
    return {
        "checkout": checkout.get_flow_info().id,
        "interrupted": interrupted.get_flow_info().id,
        "active": active.get_flow_info().id,
        "shipping": shipping.get_flow_info().id,
    }


async def test_health(client: AsyncClient) -> None:
    """GET /api/v1/health returns ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_stats_empty(client: AsyncClient) -> None:
    response = await client.get("/api/v1/stats")
    assert response.status_code == 200
    assert response.json() == {
        "total_flows": 0,
        "active_flows": 0,
        "finished_flows": 0,
        "interrupted_flows": 0,
        "total_points": 0,
        "total_assertions": 0,
    }


async def test_stats(client: AsyncClient, seeded: dict[str, int]) -> None:
    data = (await client.get("/api/v1/stats")).json()
    assert data["total_flows"] == 4
    assert data["active_flows"] == 2
    assert data["finished_flows"] == 1
    assert data["interrupted_flows"] == 1
    assert data["total_points"] == 3
    assert data["total_assertions"] == 3


async def test_list_flows_newest_first_with_counts(
    client: AsyncClient, seeded: dict[str, int]
) -> None:
    response = await client.get("/api/v1/flows")
    assert response.status_code == 200
    body = response.json()
    assert body["meta"] == {"page": 1, "limit": 20, "total": 4, "pages": 1}
    ids = [f["id"] for f in body["data"]]
    assert ids == sorted(ids, reverse=True)
    checkout = next(f for f in body["data"] if f["id"] == seeded["checkout"])
    assert checkout["status"] == "FINISHED"
    assert checkout["point_count"] == 2
    assert checkout["assertion_count"] == 3
    assert checkout["service"] == "orders-api"


async def test_list_flows_pagination(client: AsyncClient, seeded: dict[str, int]) -> None:
    body = (await client.get("/api/v1/flows", params={"page": 2, "limit": 3})).json()
    assert body["meta"] == {"page": 2, "limit": 3, "total": 4, "pages": 2}
    assert len(body["data"]) == 1


async def test_list_flows_status_filter(client: AsyncClient, seeded: dict[str, int]) -> None:
    body = (await client.get("/api/v1/flows", params={"status": "INTERRUPTED"})).json()
    assert [f["id"] for f in body["data"]] == [seeded["interrupted"]]


@pytest.mark.parametrize(
    ("term", "expected"),
    [("REFUND", {"interrupted", "active"}), ("s-9", {"shipping"}), ("orders-api", {"checkout", "interrupted", "active"})],
)
async def test_list_flows_search(
    client: AsyncClient, seeded: dict[str, int], term: str, expected: set[str]
) -> None:
    """search matches name, identifier or service, case-insensitively."""
    body = (await client.get("/api/v1/flows", params={"search": term})).json()
    assert {f["id"] for f in body["data"]} == {seeded[k] for k in expected}
    assert body["meta"]["total"] == len(expected)


async def test_list_flows_rejects_bad_status(client: AsyncClient) -> None:
    response = await client.get("/api/v1/flows", params={"status": "DONE"})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_flow_detail_timeline(client: AsyncClient, seeded: dict[str, int]) -> None:
    response = await client.get(f"/api/v1/flows/{seeded['checkout']}")
    assert response.status_code == 200
    body = response.json()
    assert body["flow"]["name"] == "order-checkout"
    assert body["flow"]["identifier"] == "o-1"
    assert body["meta"]["total_points"] == 2
    assert body["meta"]["total_assertions"] == 3
    types = [e["type"] for e in body["data"]]
    assert types.count("POINT") == 2
    assert types.count("ASSERTION") == 3
    timestamps = [e["timestamp"] for e in body["data"]]
    assert timestamps == sorted(timestamps)
    point = next(e["data"] for e in body["data"] if e["type"] == "POINT")
    assert point["description"] == "order created"
    assert point["expected"] == {"id": "o-1", "status": "NEW"}


async def test_flow_detail_paginates_both_sides(
    client: AsyncClient, seeded: dict[str, int]
) -> None:
    body = (
        await client.get(f"/api/v1/flows/{seeded['checkout']}", params={"page": 2, "limit": 2})
    ).json()
    assert [e["type"] for e in body["data"]] == ["ASSERTION"]
    assert body["meta"]["pages"] == 2


async def test_flow_detail_not_found(client: AsyncClient) -> None:
    response = await client.get("/api/v1/flows/999999")
    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "RESOURCE_NOT_FOUND"
    assert body["details"]["resource_id"] == 999999


async def test_compare_flow(client: AsyncClient, seeded: dict[str, int]) -> None:
    response = await client.get(f"/api/v1/flows/{seeded['checkout']}/compare")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["matches"] == 1
    assert body["mismatches"] == 2
    assert body["success"] is False
    assert (body["total_points"], body["total_assertions"]) == (2, 3)
    assert [r["status"] for r in body["results"]] == [
        "match",
        "mismatch",
        "orphan_assertion",
    ]
    mismatch = body["results"][1]
    assert mismatch["match"] is False
    assert mismatch["diffs"] == [
        {
            "path": "$.status",
            "expected": "APPROVED",
            "actual": "DECLINED",
            "message": "path $.status: value mismatch expected APPROVED, got DECLINED",
        }
    ]


async def test_compare_active_flow_reports_missing(
    client: AsyncClient, seeded: dict[str, int]
) -> None:
    body = (await client.get(f"/api/v1/flows/{seeded['active']}/compare")).json()
    assert [r["status"] for r in body["results"]] == ["missing_assertion"]
    assert body["success"] is False


async def test_compare_not_found(client: AsyncClient) -> None:
    response = await client.get("/api/v1/flows/424242/compare")
    assert response.status_code == 404
