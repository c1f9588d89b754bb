"""Tests for saved-items endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_save_and_list(client: AsyncClient, seller, buyer, create_listing):
    _, seller_headers = seller
    _, buyer_headers = buyer
    first = await create_listing(seller_headers, title="Tiles")
    second = await create_listing(seller_headers, title="Paint")

    await client.post(f"/api/saved/{first}", headers=buyer_headers)
    await client.post(f"/api/saved/{second}", headers=buyer_headers)

    response = await client.get("/api/saved", headers=buyer_headers)

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [second, first]


@pytest.mark.asyncio
async def test_save_is_idempotent(client: AsyncClient, seller, buyer, create_listing):
    _, seller_headers = seller
    _, buyer_headers = buyer
    listing_id = await create_listing(seller_headers)

    first = await client.post(f"/api/saved/{listing_id}", headers=buyer_headers)
    second = await client.post(f"/api/saved/{listing_id}", headers=buyer_headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json() == {"listing_id": listing_id, "is_saved": True}
    assert len((await client.get("/api/saved", headers=buyer_headers)).json()) == 1


@pytest.mark.asyncio
async def test_saved_status_and_unsave(client: AsyncClient, seller, buyer, create_listing):
    _, seller_headers = seller
    _, buyer_headers = buyer
    listing_id = await create_listing(seller_headers)

    before = await client.get(f"/api/saved/{listing_id}", headers=buyer_headers)
    await client.post(f"/api/saved/{listing_id}", headers=buyer_headers)
    during = await client.get(f"/api/saved/{listing_id}", headers=buyer_headers)
    removed = await client.delete(f"/api/saved/{listing_id}", headers=buyer_headers)
    after = await client.get(f"/api/saved/{listing_id}", headers=buyer_headers)

    assert before.json()["is_saved"] is False
    assert during.json()["is_saved"] is True
    assert removed.json()["is_saved"] is False
    assert after.json()["is_saved"] is False


@pytest.mark.asyncio
async def test_save_missing_listing(client: AsyncClient, buyer):
    _, headers = buyer

    response = await client.post("/api/saved/404", headers=headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_saved_sets_are_per_user(client: AsyncClient, seller, buyer, create_listing):
    _, seller_headers = seller
    _, buyer_headers = buyer
    listing_id = await create_listing(seller_headers)

    await client.post(f"/api/saved/{listing_id}", headers=buyer_headers)

    assert (await client.get("/api/saved", headers=seller_headers)).json() == []


@pytest.mark.asyncio
async def test_saved_requires_auth(client: AsyncClient):
    response = await client.get("/api/saved")

    assert response.status_code == 401
