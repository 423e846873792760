import pytest
from fastapi.testclient import TestClient

from conftest import ALICE, BOB, bearer, create_wishlist


@pytest.fixture
def store(stack):
    return TestClient(stack.wishlist)


def actor(user_id):
    return {"X-User-Id": str(user_id)}


def test_store_requires_acting_user_for_writes(store):
    resp = store.post("/wishlists", json={"name": "Books"})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_store_items_ordered_by_priority_then_id(store):
    wishlist = store.post("/wishlists", json={"name": "Books"}, headers=actor(ALICE)).json()
    assert wishlist["owner_id"] == ALICE
    assert wishlist["privacy"] == "Private"

    created = []
    for priority in (2, 0, 1, 0):
        resp = store.post(
            f"/wishlists/{wishlist['id']}/items",
            json={"product_id": 10, "priority": priority},
            headers=actor(ALICE),
        )
        assert resp.status_code == 201
        created.append(resp.json()["id"])

    items = store.get(f"/wishlists/{wishlist['id']}/items").json()
    assert [i["id"] for i in items] == [created[1], created[3], created[2], created[0]]
    assert [i["priority"] for i in items] == [0, 0, 1, 2]


def test_store_bulk_lookup_omits_unknown_ids(store):
    first = store.post("/wishlists", json={"name": "A"}, headers=actor(ALICE)).json()
    second = store.post("/wishlists", json={"name": "B"}, headers=actor(BOB)).json()

    found = store.get("/wishlists/byIds", params={"ids": f"{second['id']},999,{first['id']}"}).json()
    assert sorted(w["id"] for w in found) == sorted([first["id"], second["id"]])


def test_store_unknown_wishlist_and_item(store):
    assert store.get("/wishlists/999").json() == {"error": "wishlist not found"}

    wishlist = store.post("/wishlists", json={"name": "A"}, headers=actor(ALICE)).json()
    resp = store.delete(f"/wishlists/{wishlist['id']}/items/999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "item not found"}


@pytest.mark.parametrize("body", [{"name": "   "}, {"name": "x", "privacy": "Secret"}, {"name": "x", "owner_id": 2}])
def test_create_rejects_bad_payloads(client, stack, body):
    resp = client.post("/wishlists", json=body, headers=bearer(stack.settings, ALICE))
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_mine_lists_only_own_wishlists_with_owner(client, stack):
    alice, bob = bearer(stack.settings, ALICE), bearer(stack.settings, BOB)
    create_wishlist(client, alice, "Birthday")
    create_wishlist(client, alice, "Christmas", privacy="Shared")
    create_wishlist(client, bob, "Bob's list")

    mine = client.get("/wishlists/mine", headers=alice).json()
    assert [w["name"] for w in mine] == ["Birthday", "Christmas"]
    assert all(w["owner"]["public_name"] == "Alice Johnson" for w in mine)
    assert mine[1]["privacy"] == "Shared"


def test_add_item_snapshots_catalog_title(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)

    snap = client.post(f"/wishlists/{wishlist['id']}/items", json={"product_id": 7}, headers=alice)
    assert snap.status_code == 201
    assert snap.json()["title"] == "Lego Classic Creative Box"
    assert snap.json()["added_by"] == ALICE

    custom = client.post(
        f"/wishlists/{wishlist['id']}/items",
        json={"product_id": 7, "title": "The big Lego box"},
        headers=alice,
    )
    assert custom.json()["title"] == "The big Lego box"


def test_dangling_product_gets_placeholder(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    item = client.post(
        f"/wishlists/{wishlist['id']}/items",
        json={"product_id": 999, "title": "Discontinued thing"},
        headers=alice,
    ).json()

    resp = client.get(f"/wishlists/{wishlist['id']}", headers=alice)
    assert resp.status_code == 200
    [enriched] = resp.json()["items"]
    assert enriched["id"] == item["id"]
    assert enriched["title"] == "Discontinued thing"
    assert enriched["product"]["id"] == 999
    assert enriched["product"]["title"] == "Product not found"


def test_detail_shape(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    client.post(f"/wishlists/{wishlist['id']}/items", json={"product_id": 4, "priority": 1}, headers=alice)
    client.post(f"/wishlists/{wishlist['id']}/items", json={"product_id": 7}, headers=alice)

    body = client.get(f"/wishlists/{wishlist['id']}", headers=alice).json()
    assert body["role"] == "owner"
    assert body["owner"]["id"] == ALICE
    assert [i["product"]["title"] for i in body["items"]] == [
        "Lego Classic Creative Box",
        "Cast Iron Skillet",
    ]

    items = client.get(f"/wishlists/{wishlist['id']}/items", headers=alice).json()
    assert items == body["items"]


def test_unknown_wishlist_through_gateway(client, stack):
    resp = client.get("/wishlists/999", headers=bearer(stack.settings, ALICE))
    assert resp.status_code == 404
    assert resp.json() == {"error": "wishlist not found"}


def test_delete_item(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    item = client.post(f"/wishlists/{wishlist['id']}/items", json={"product_id": 1}, headers=alice).json()

    resp = client.delete(f"/wishlists/{wishlist['id']}/items/{item['id']}", headers=alice)
    assert resp.status_code == 204
    assert resp.content == b""
    assert client.get(f"/wishlists/{wishlist['id']}/items", headers=alice).json() == []
