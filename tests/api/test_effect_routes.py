"""Effect Routes - HTTP contract of /effect.

Tests cover:
    - create: 201 with Location, status forced to InStock, duplicate id -> 409
    - prices beyond 12 digits or 2 decimal places -> 400
    - a failed create leaves no image behind
    - read/list/filter routes, invalid status -> 400
    - update: id mismatch -> 400, unknown or concurrently deleted -> 404,
      image kept or replaced
    - delete: 204 then 404, image removed
    - transitions: 200 on success, 400 with reason on precondition, 404 on unknown id
    - auction draft and health probes
"""

from decimal import Decimal
from uuid import uuid4

from effect_service.api.dependencies import get_effect_store
from effect_service.core.effect import Effect
from effect_service.infrastructure.effect_store import SqlAlchemyEffectStore
from effect_service.main import app
from tests.services.fake_store import FakeEffectStore, UnavailableSession


def _form(**overrides) -> dict:
    fields = {
        "title": "Vase",
        "description": "Royal Copenhagen, blue fluted",
        "seller": str(uuid4()),
        "minimumPrice": "1000",
    }
    fields.update(overrides)
    return fields


async def _create(client, **overrides) -> dict:
    response = await client.post("/effect", data=_form(**overrides))
    assert response.status_code == 201
    return response.json()


# ─── create ──────────────────────────────────────────────────────

async def test_create_returns_201_with_location(client):
    response = await client.post("/effect", data=_form(status="Sold"))

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "InStock"
    assert body["title"] == "Vase"
    assert Decimal(body["minimumPrice"]) == Decimal("1000")
    assert body["buyer"] is None
    assert body["soldFor"] is None
    assert response.headers["location"] == f"http://test/effect/{body['id']}"


async def test_create_keeps_caller_id(client):
    effect_id = str(uuid4())
    body = await _create(client, id=effect_id)
    assert body["id"] == effect_id


async def test_create_duplicate_id_returns_409(client):
    effect_id = str(uuid4())
    await _create(client, id=effect_id, title="Original")

    response = await client.post("/effect", data=_form(id=effect_id, title="Impostor"))

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_EFFECT"
    assert (await client.get(f"/effect/{effect_id}")).json()["title"] == "Original"


async def test_create_with_image_stores_file(client, image_store):
    response = await client.post(
        "/effect", data=_form(),
        files={"image": ("vase.PNG", b"\x89PNG fake", "image/png")},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["image"] == f"/images/effect/{body['id']}.png"
    assert (image_store.root / f"{body['id']}.png").read_bytes() == b"\x89PNG fake"


async def test_create_with_negative_price_returns_400(client):
    response = await client.post("/effect", data=_form(minimumPrice="-1"))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_with_sub_cent_price_returns_400(client):
    response = await client.post("/effect", data=_form(minimumPrice="1000.125"))
    assert response.status_code == 400
    assert (await client.get("/effect")).json() == []


async def test_create_with_price_over_column_size_returns_400(client):
    response = await client.post("/effect", data=_form(minimumPrice="12345678901.00"))
    assert response.status_code == 400


async def test_create_price_round_trips_exactly(client):
    created = await _create(client, minimumPrice="1000.12")
    stored = (await client.get(f"/effect/{created['id']}")).json()
    assert Decimal(stored["minimumPrice"]) == Decimal("1000.12")
    assert Decimal(created["minimumPrice"]) == Decimal("1000.12")


async def test_failed_create_removes_uploaded_image(client, image_store):
    app.dependency_overrides[get_effect_store] = lambda: SqlAlchemyEffectStore(
        UnavailableSession(), failure_mode="raise",
    )

    response = await client.post(
        "/effect", data=_form(), files={"image": ("a.png", b"png", "image/png")},
    )

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "DATABASE_ERROR"
    assert list(image_store.root.iterdir()) == []


# ─── read ────────────────────────────────────────────────────────

async def test_get_effect(client):
    created = await _create(client)
    response = await client.get(f"/effect/{created['id']}")
    assert response.status_code == 200
    body = response.json()
    assert {k: body[k] for k in ("id", "title", "seller", "status")} == {
        k: created[k] for k in ("id", "title", "seller", "status")
    }
    assert Decimal(body["minimumPrice"]) == Decimal(created["minimumPrice"])


async def test_get_unknown_effect_returns_404(client):
    response = await client.get(f"/effect/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_list_effects(client):
    first = await _create(client)
    second = await _create(client)
    response = await client.get("/effect")
    assert response.status_code == 200
    assert {e["id"] for e in response.json()} == {first["id"], second["id"]}


async def test_filter_by_status(client):
    stocked = await _create(client)
    auctioned = await _create(client)
    await client.post(f"/effect/{auctioned['id']}/transfer-to-auction")

    in_stock = (await client.get("/effect/status/InStock")).json()
    on_auction = (await client.get("/effect/status/OnAuction")).json()

    assert [e["id"] for e in in_stock] == [stocked["id"]]
    assert [e["id"] for e in on_auction] == [auctioned["id"]]


async def test_filter_by_unknown_status_returns_400(client):
    response = await client.get("/effect/status/Lost")
    assert response.status_code == 400


async def test_filter_by_seller(client):
    seller = str(uuid4())
    mine = await _create(client, seller=seller)
    await _create(client)

    response = await client.get(f"/effect/seller/{seller}")

    assert [e["id"] for e in response.json()] == [mine["id"]]


# ─── update ──────────────────────────────────────────────────────

async def test_update_replaces_fields(client):
    created = await _create(client)
    buyer = str(uuid4())

    response = await client.put(
        f"/effect/{created['id']}",
        data=_form(
            id=created["id"], title="Chair", status="Sold",
            buyer=buyer, soldFor="1500",
        ),
    )

    assert response.status_code == 204
    stored = (await client.get(f"/effect/{created['id']}")).json()
    assert stored["title"] == "Chair"
    assert stored["status"] == "Sold"
    assert stored["buyer"] == buyer
    assert Decimal(stored["soldFor"]) == Decimal("1500")


async def test_update_with_mismatched_id_returns_400(client):
    created = await _create(client)
    response = await client.put(
        f"/effect/{created['id']}", data=_form(id=str(uuid4())),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_update_unknown_effect_returns_404(client):
    effect_id = str(uuid4())
    response = await client.put(f"/effect/{effect_id}", data=_form(id=effect_id))
    assert response.status_code == 404


async def test_update_sold_without_buyer_returns_400(client):
    created = await _create(client)
    response = await client.put(
        f"/effect/{created['id']}", data=_form(id=created["id"], status="Sold"),
    )
    assert response.status_code == 400
    assert (await client.get(f"/effect/{created['id']}")).json()["status"] == "InStock"


async def test_update_without_image_keeps_existing_image(client):
    response = await client.post(
        "/effect", data=_form(), files={"image": ("a.jpg", b"jpg", "image/jpeg")},
    )
    created = response.json()

    await client.put(
        f"/effect/{created['id']}", data=_form(id=created["id"], title="Renamed"),
    )

    stored = (await client.get(f"/effect/{created['id']}")).json()
    assert stored["image"] == created["image"]
    assert stored["title"] == "Renamed"


async def test_update_with_new_image_replaces_file(client, image_store):
    response = await client.post(
        "/effect", data=_form(), files={"image": ("a.jpg", b"old", "image/jpeg")},
    )
    created = response.json()

    await client.put(
        f"/effect/{created['id']}", data=_form(id=created["id"]),
        files={"image": ("b.png", b"new", "image/png")},
    )

    stored = (await client.get(f"/effect/{created['id']}")).json()
    assert stored["image"] == f"/images/effect/{created['id']}.png"
    assert not (image_store.root / f"{created['id']}.jpg").exists()
    assert (image_store.root / f"{created['id']}.png").read_bytes() == b"new"


class _DeletedDuringUpdateStore(FakeEffectStore):
    async def update(self, effect):
        self.effects.pop(effect.effect_id, None)
        return False


async def test_update_of_effect_deleted_concurrently_returns_404(client, image_store):
    effect_id = uuid4()
    old_image = image_store.save(effect_id, "a.jpg", b"old")
    store = _DeletedDuringUpdateStore([
        Effect(effect_id=effect_id, title="Vase", image=old_image),
    ])
    app.dependency_overrides[get_effect_store] = lambda: store

    response = await client.put(
        f"/effect/{effect_id}", data=_form(id=str(effect_id)),
        files={"image": ("b.png", b"new", "image/png")},
    )

    assert response.status_code == 404
    assert not (image_store.root / f"{effect_id}.png").exists()


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_removes_effect_and_image(client, image_store):
    response = await client.post(
        "/effect", data=_form(), files={"image": ("a.jpg", b"jpg", "image/jpeg")},
    )
    created = response.json()

    assert (await client.delete(f"/effect/{created['id']}")).status_code == 204
    assert (await client.get(f"/effect/{created['id']}")).status_code == 404
    assert not (image_store.root / f"{created['id']}.jpg").exists()
    assert (await client.delete(f"/effect/{created['id']}")).status_code == 404


# ─── transitions ─────────────────────────────────────────────────

async def test_transfer_to_auction(client):
    created = await _create(client)

    response = await client.post(f"/effect/{created['id']}/transfer-to-auction")

    assert response.status_code == 200
    assert response.json() == {
        "id": created["id"],
        "status": "OnAuction",
        "message": "Effect successfully transferred to auction",
    }


async def test_transfer_twice_returns_400_with_reason(client):
    created = await _create(client)
    await client.post(f"/effect/{created['id']}/transfer-to-auction")

    response = await client.post(f"/effect/{created['id']}/transfer-to-auction")

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "PRECONDITION_FAILED"
    assert "in stock" in error["message"]
    assert error["context"]["current_status"] == "OnAuction"


async def test_transfer_unknown_effect_returns_404(client):
    response = await client.post(f"/effect/{uuid4()}/transfer-to-auction")
    assert response.status_code == 404


async def test_mark_as_sold(client):
    created = await _create(client)
    await client.post(f"/effect/{created['id']}/transfer-to-auction")
    buyer = str(uuid4())

    response = await client.post(
        f"/effect/{created['id']}/mark-as-sold",
        json={"buyerId": buyer, "soldFor": "1500"},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Sold"
    stored = (await client.get(f"/effect/{created['id']}")).json()
    assert stored["buyer"] == buyer
    assert Decimal(stored["soldFor"]) == Decimal("1500")


async def test_mark_as_sold_in_stock_returns_400(client):
    created = await _create(client)

    response = await client.post(
        f"/effect/{created['id']}/mark-as-sold",
        json={"buyerId": str(uuid4()), "soldFor": "1500"},
    )

    assert response.status_code == 400
    stored = (await client.get(f"/effect/{created['id']}")).json()
    assert stored["status"] == "InStock"
    assert stored["buyer"] is None


async def test_mark_as_sold_with_sub_cent_price_returns_400(client):
    created = await _create(client)
    await client.post(f"/effect/{created['id']}/transfer-to-auction")

    response = await client.post(
        f"/effect/{created['id']}/mark-as-sold",
        json={"buyerId": str(uuid4()), "soldFor": "1500.005"},
    )

    assert response.status_code == 400
    stored = (await client.get(f"/effect/{created['id']}")).json()
    assert stored["status"] == "OnAuction"


async def test_mark_as_sold_without_buyer_returns_400(client):
    created = await _create(client)
    response = await client.post(
        f"/effect/{created['id']}/mark-as-sold", json={"soldFor": "10"},
    )
    assert response.status_code == 400


# ─── auction draft ───────────────────────────────────────────────

async def test_auction_draft_for_in_stock_effect(client):
    created = await _create(client, minimumPrice="750")

    response = await client.get(f"/effect/{created['id']}/auction-draft")

    assert response.status_code == 200
    draft = response.json()
    assert draft["effectId"] == created["id"]
    assert draft["auctionTitle"] == "Vase"
    assert Decimal(draft["startingPrice"]) == Decimal("750")
    assert draft["userId"] == created["seller"]


async def test_auction_draft_for_auctioned_effect_returns_400(client):
    created = await _create(client)
    await client.post(f"/effect/{created['id']}/transfer-to-auction")
    response = await client.get(f"/effect/{created['id']}/auction-draft")
    assert response.status_code == 400


async def test_auction_draft_for_unknown_effect_returns_404(client):
    response = await client.get(f"/effect/{uuid4()}/auction-draft")
    assert response.status_code == 404
