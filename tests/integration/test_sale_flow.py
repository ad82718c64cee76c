"""End-to-end sale lifecycle against a live database.

Uses seeded product BK-CUADERNO-A4 (large stock) so repeated runs keep working.
"""

import pytest
from httpx import AsyncClient

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]

PRODUCT_ID = "BK-CUADERNO-A4"


async def _create_sale(client: AsyncClient, headers: dict[str, str], **overrides) -> dict:
    body = {
        "items": [{"product_id": PRODUCT_ID, "quantity": 1}],
        "payment_method": "transfer",
        "delivery_method": "home_delivery",
        "delivery_address": {
            "street": "Av. Pellegrini 1200",
            "city": "Rosario",
            "postal_code": "2000",
            "country": "AR",
        },
        "shipping_cost_cents": 50000,
    }
    body.update(overrides)
    return (await client.post("/api/v1/sales", json=body, headers=headers)).json()


async def test_me(client: AsyncClient, client_headers: dict[str, str]) -> None:
    resp = await client.get("/api/v1/auth/me", headers=client_headers)
    assert resp.json()["data"]["role"] == "client"


async def test_create_sale_totals_and_defaults(
    client: AsyncClient, client_headers: dict[str, str]
) -> None:
    body = await _create_sale(client, client_headers)
    assert body["code"] == 0, body
    sale = body["data"]
    assert sale["total_cents"] == 349900 + 50000
    assert sale["status"] == "completed"
    assert sale["order_status"] == "En preparación"


async def test_staff_cannot_create_sale(
    client: AsyncClient, staff_headers: dict[str, str]
) -> None:
    body = await _create_sale(client, staff_headers)
    assert body["code"] == 3002


async def test_insufficient_stock(client: AsyncClient, client_headers: dict[str, str]) -> None:
    body = await _create_sale(
        client, client_headers, items=[{"product_id": PRODUCT_ID, "quantity": 10_000_000}]
    )
    assert body["code"] == 2002


async def test_client_sees_only_own_sales(
    client: AsyncClient, client_headers: dict[str, str]
) -> None:
    resp = await client.get("/api/v1/sales", headers=client_headers)
    data = resp.json()["data"]
    assert data["count"] >= 1
    assert len({s["user_id"] for s in data["items"]}) == 1


async def test_pickup_lifecycle_to_delivered(
    client: AsyncClient, client_headers: dict[str, str], staff_headers: dict[str, str]
) -> None:
    sale = (
        await _create_sale(
            client,
            client_headers,
            delivery_method="local_pickup",
            delivery_address=None,
            shipping_cost_cents=0,
        )
    )["data"]
    url = f"/api/v1/sales/{sale['id']}/status"

    wrong = await client.patch(url, json={"order_status": "En envío"}, headers=staff_headers)
    assert wrong.json()["code"] == 4009

    ready = await client.patch(url, json={"order_status": "Preparado"}, headers=staff_headers)
    assert ready.json()["data"]["order_status"] == "Preparado"

    done = await client.patch(
        url, json={"order_status": "Entregado", "status": "completed"}, headers=staff_headers
    )
    assert done.status_code == 200
    assert done.json()["data"]["order_status"] == "Entregado"


async def test_statistics(client: AsyncClient, staff_headers: dict[str, str]) -> None:
    resp = await client.get("/api/v1/sales/statistics", headers=staff_headers)
    stats = resp.json()["data"]
    assert stats["total_sales"] >= 1
    assert stats["total_sales"] == stats["home_delivery_sales"] + stats["local_pickup_sales"]
