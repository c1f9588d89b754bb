"""Tests for conversation and message endpoints."""

import pytest
from httpx import AsyncClient


async def open_conversation(client: AsyncClient, listing_id: int, headers: dict):
    return await client.post("/api/conversations", json={"listing_id": listing_id}, headers=headers)


@pytest.mark.asyncio
async def test_start_conversation_get_or_create(client: AsyncClient, seller, buyer, create_listing):
    seller_user, seller_headers = seller
    buyer_user, buyer_headers = buyer
    listing_id = await create_listing(seller_headers)

    created = await open_conversation(client, listing_id, buyer_headers)
    reopened = await open_conversation(client, listing_id, buyer_headers)

    assert created.status_code == 201
    assert reopened.status_code == 200
    assert created.json()["id"] == reopened.json()["id"]
    assert created.json()["buyer_id"] == buyer_user.id
    assert created.json()["seller_id"] == seller_user.id


@pytest.mark.asyncio
async def test_cannot_chat_with_yourself(client: AsyncClient, seller, create_listing):
    _, headers = seller
    listing_id = await create_listing(headers)

    response = await open_conversation(client, listing_id, headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "You cannot start a conversation with yourself."


@pytest.mark.asyncio
async def test_start_conversation_unknown_listing(client: AsyncClient, buyer):
    _, headers = buyer

    response = await open_conversation(client, 12345, headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_send_message_sets_receiver(client: AsyncClient, seller, buyer, create_listing):
    seller_user, seller_headers = seller
    buyer_user, buyer_headers = buyer
    listing_id = await create_listing(seller_headers)
    conversation_id = (await open_conversation(client, listing_id, buyer_headers)).json()["id"]

    from_buyer = await client.post("/api/messages", headers=buyer_headers, json={
        "conversation_id": conversation_id,
        "content": "Can you deliver to Bole?",
    })
    from_seller = await client.post("/api/messages", headers=seller_headers, json={
        "conversation_id": conversation_id,
        "content": "Yes, delivery is 300 birr.",
    })

    assert from_buyer.status_code == 201
    assert from_buyer.json()["sender_id"] == buyer_user.id
    assert from_buyer.json()["receiver_id"] == seller_user.id
    assert from_seller.json()["receiver_id"] == buyer_user.id
    assert from_buyer.json()["created_at"]


@pytest.mark.asyncio
async def test_blank_message_rejected(client: AsyncClient, seller, buyer, create_listing):
    _, seller_headers = seller
    _, buyer_headers = buyer
    listing_id = await create_listing(seller_headers)
    conversation_id = (await open_conversation(client, listing_id, buyer_headers)).json()["id"]

    response = await client.post("/api/messages", headers=buyer_headers, json={
        "conversation_id": conversation_id,
        "content": "   ",
    })

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_transcript_is_ordered(client: AsyncClient, seller, buyer, create_listing):
    _, seller_headers = seller
    _, buyer_headers = buyer
    listing_id = await create_listing(seller_headers)
    conversation_id = (await open_conversation(client, listing_id, buyer_headers)).json()["id"]

    for i, headers in enumerate([buyer_headers, seller_headers, buyer_headers, seller_headers]):
        await client.post("/api/messages", headers=headers, json={
            "conversation_id": conversation_id,
            "content": f"message {i}",
        })

    response = await client.get(f"/api/conversations/{conversation_id}/messages", headers=seller_headers)

    assert response.status_code == 200
    messages = response.json()
    assert [m["content"] for m in messages] == [f"message {i}" for i in range(4)]


@pytest.mark.asyncio
async def test_non_participant_is_forbidden(client: AsyncClient, seller, buyer, make_user, create_listing):
    _, seller_headers = seller
    _, buyer_headers = buyer
    _, outsider_headers = await make_user("outsider@tumbi.et", name="Outsider")
    listing_id = await create_listing(seller_headers)
    conversation_id = (await open_conversation(client, listing_id, buyer_headers)).json()["id"]

    read = await client.get(f"/api/conversations/{conversation_id}/messages", headers=outsider_headers)
    write = await client.post("/api/messages", headers=outsider_headers, json={
        "conversation_id": conversation_id,
        "content": "hello?",
    })

    assert read.status_code == 403
    assert write.status_code == 403


@pytest.mark.asyncio
async def test_messages_for_unknown_conversation(client: AsyncClient, buyer):
    _, headers = buyer

    response = await client.get("/api/conversations/77/messages", headers=headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_inbox_previews_ordered_by_activity(client: AsyncClient, seller, buyer, make_user, create_listing):
    seller_user, seller_headers = seller
    buyer_user, buyer_headers = buyer
    _, other_headers = await make_user("second.buyer@tumbi.et", name="Meron")
    cement = await create_listing(seller_headers, title="Cement")
    steel = await create_listing(seller_headers, title="Steel")

    cement_chat = (await open_conversation(client, cement, buyer_headers)).json()["id"]
    steel_chat = (await open_conversation(client, steel, other_headers)).json()["id"]

    await client.post("/api/messages", headers=buyer_headers, json={
        "conversation_id": cement_chat, "content": "How many bags in stock?",
    })
    await client.post("/api/messages", headers=other_headers, json={
        "conversation_id": steel_chat, "content": "Price for 2 tons?",
    })
    await client.post("/api/messages", headers=seller_headers, json={
        "conversation_id": cement_chat, "content": "About 200 bags.",
    })

    seller_inbox = (await client.get("/api/conversations", headers=seller_headers)).json()
    buyer_inbox = (await client.get("/api/conversations", headers=buyer_headers)).json()

    assert [c["conversation_id"] for c in seller_inbox] == [cement_chat, steel_chat]
    assert seller_inbox[0]["last_message"] == "About 200 bags."
    assert seller_inbox[0]["other_user_id"] == buyer_user.id
    assert seller_inbox[0]["listing_title"] == "Cement"
    assert seller_inbox[1]["other_user_name"] == "Meron"

    assert len(buyer_inbox) == 1
    assert buyer_inbox[0]["other_user_id"] == seller_user.id
    assert buyer_inbox[0]["listing_image"].endswith("cement.jpg")


@pytest.mark.asyncio
async def test_inbox_includes_threads_without_messages(client: AsyncClient, seller, buyer, create_listing):
    _, seller_headers = seller
    _, buyer_headers = buyer
    listing_id = await create_listing(seller_headers)
    await open_conversation(client, listing_id, buyer_headers)

    inbox = (await client.get("/api/conversations", headers=buyer_headers)).json()

    assert len(inbox) == 1
    assert inbox[0]["last_message"] is None
    assert inbox[0]["last_message_at"] is None
