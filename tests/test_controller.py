"""End-to-end tests for the client controller against the in-process app."""

import json

import pytest
import pytest_asyncio
from httpx import ASGITransport

from tumbi.client.api import TumbiClient
from tumbi.client.controller import AppController
from tumbi.client.session import SessionContext
from tumbi.client.views import View, ViewKind


@pytest.fixture
def session_path(tmp_path):
    return tmp_path / "session.json"


@pytest_asyncio.fixture
async def controller(app, session_path):
    api = TumbiClient(
        "http://test/api",
        SessionContext(session_path),
        transport=ASGITransport(app=app),
    )
    # Long interval: only the immediate fetch on open runs during a test
    ctl = AppController(api, page_size=5, poll_interval=60)
    yield ctl
    await ctl.shutdown()
    await api.aclose()


async def register(controller: AppController, email: str = "hana@tumbi.et"):
    return await controller.register(
        name="Hana Girma", email=email, password="secret123", phone="+251911000099"
    )


@pytest.mark.asyncio
async def test_startup_loads_first_page(controller, seller, create_listing):
    _, headers = seller
    listing_id = await create_listing(headers)

    await controller.startup()

    assert [item.id for item in controller.feed.items] == [listing_id]
    assert controller.session.is_authenticated is False
    assert controller.view == View.home()


@pytest.mark.asyncio
async def test_register_and_create_listing_refreshes_feed(controller, session_path, listing_payload):
    await controller.startup()

    user = await register(controller)
    created = await controller.create_listing(listing_payload())

    assert user.name == "Hana Girma"
    assert session_path.exists()
    assert created.listing_id in [item.id for item in controller.feed.items]


@pytest.mark.asyncio
async def test_rejected_listing_sets_notice(controller, listing_payload):
    await controller.startup()
    await register(controller)

    created = await controller.create_listing(listing_payload(image_urls=[]))

    assert created is None
    assert controller.notice
    assert controller.feed.items == []


@pytest.mark.asyncio
async def test_invalid_token_clears_session(controller, session_path, listing_payload):
    controller.session.save("not-a-token", {"id": 1})

    created = await controller.create_listing(listing_payload())

    assert created is None
    assert controller.auth_prompt is True
    assert controller.session.is_authenticated is False
    assert not session_path.exists()


@pytest.mark.asyncio
async def test_stored_session_rejected_at_startup(controller, session_path):
    session_path.write_text(json.dumps({"token": "expired", "user": {"id": 1}}), encoding="utf-8")

    await controller.startup()

    assert controller.session.is_authenticated is False


@pytest.mark.asyncio
async def test_stored_session_restored_at_startup(
    controller, session_path, client, buyer, seller, create_listing
):
    user, buyer_headers = buyer
    _, seller_headers = seller
    listing_id = await create_listing(seller_headers)
    await client.post(f"/api/saved/{listing_id}", headers=buyer_headers)
    session_path.write_text(json.dumps({
        "token": buyer_headers["x-access-token"],
        "user": {"id": user.id},
    }), encoding="utf-8")

    await controller.startup()

    assert controller.session.is_authenticated is True
    assert controller.session.user["name"] == "Dawit Haile"
    assert listing_id in controller.saved


@pytest.mark.asyncio
async def test_deep_links(controller, seller, listing_payload, client):
    _, headers = seller
    created = (await client.post("/api/listings", json=listing_payload(), headers=headers)).json()

    await controller.startup(deep_link=created["share_slug"])
    assert controller.view == View.details(created["listing_id"])

    assert await controller.resolve_deep_link(str(created["listing_id"])) is True
    assert controller.listing.id == created["listing_id"]

    assert await controller.resolve_deep_link("gone-forever-abc123") is False
    assert controller.view == View.home()


@pytest.mark.parametrize("ref", ["", "/", "?", "²", "a/b", "../listings", "%"])
@pytest.mark.asyncio
async def test_malformed_deep_links_land_home(controller, ref):
    await controller.startup()

    assert await controller.resolve_deep_link(ref) is False
    assert controller.view == View.home()


@pytest.mark.asyncio
async def test_chat_flow(controller, seller, create_listing):
    _, headers = seller
    listing_id = await create_listing(headers)
    await controller.startup()
    await register(controller)

    assert await controller.open_listing(listing_id) is True
    assert await controller.open_chat(listing_id) is True
    assert controller.view.kind == ViewKind.CONVERSATION
    assert controller.poller.running is True

    assert await controller.send_message("Is this still available?") is True
    assert [m.content for m in controller.poller.messages] == ["Is this still available?"]

    view = await controller.back()
    assert view.kind == ViewKind.MESSAGES
    assert controller.poller is None

    inbox = await controller.client.conversations()
    assert inbox[0].last_message == "Is this still available?"


@pytest.mark.asyncio
async def test_toggle_save_signed_out(controller):
    assert controller.toggle_save(1) is None
    assert controller.auth_prompt is True


@pytest.mark.asyncio
async def test_toggle_save_and_saved_tab(controller, seller, create_listing):
    _, headers = seller
    listing_id = await create_listing(headers)
    await controller.startup()
    await register(controller)

    await controller.toggle_save(listing_id)
    controller.saved.ids.clear()
    await controller.navigate(View(ViewKind.SAVED))

    assert listing_id in controller.saved
    assert await controller.client.is_saved(listing_id) is True


@pytest.mark.asyncio
async def test_delete_listing_refreshes_feed(controller, listing_payload):
    await controller.startup()
    await register(controller)
    created = await controller.create_listing(listing_payload())

    assert await controller.delete_listing(created.listing_id) is True
    assert controller.feed.items == []

    assert await controller.delete_listing(created.listing_id) is False
    assert controller.notice


@pytest.mark.asyncio
async def test_logout(controller):
    await controller.startup()
    await register(controller)

    await controller.logout()

    assert controller.session.is_authenticated is False
    assert controller.view == View.home()
