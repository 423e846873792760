from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from wishlist_hub.models.access import Invitation

from conftest import ALICE, BOB, CAROL, bearer, create_wishlist, invite

T0 = datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def collaborator_rows(client, headers, wishlist_id):
    resp = client.get(f"/wishlists/{wishlist_id}/access", headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_invitation_defaults(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    created = invite(client, alice, wishlist["id"])

    assert created["role"] == "view_only"
    assert created["wishlist_id"] == wishlist["id"]
    assert created["created_by"] == ALICE
    assert len(created["token"]) >= 32
    assert created["invite_link"] == f"http://localhost:5173/wishlist/friends/invite/{created['token']}"


def test_invitation_without_body_grants_view_only(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)

    resp = client.post(f"/wishlists/{wishlist['id']}/invites", headers=alice)
    assert resp.status_code == 201, resp.text
    assert resp.json()["role"] == "view_only"
    assert resp.json()["invite_link"].endswith(resp.json()["token"])


def test_store_invitation_without_body_grants_view_only(stack):
    store = TestClient(stack.collaboration)
    resp = store.post("/wishlists/1/invites", headers={"X-User-Id": str(ALICE)})
    assert resp.status_code == 201, resp.text
    assert resp.json()["role"] == "view_only"
    assert resp.json()["created_by"] == ALICE


def test_preview_without_recorded_creator_names_owner(client, stack):
    wishlist = create_wishlist(client, bearer(stack.settings, ALICE), "Housewarming")
    with Session(stack.collaboration.state.engine) as session:
        session.add(
            Invitation(
                token="creatorless-token",
                wishlist_id=wishlist["id"],
                role="view_only",
                created_by=None,
                expires_at=datetime.now(timezone.utc) + timedelta(days=1),
            )
        )
        session.commit()

    body = client.get("/invites/creatorless-token").json()
    assert body["wishlist_name"] == "Housewarming"
    assert body["created_by"] is None
    assert body["inviter"]["id"] == ALICE
    assert body["inviter"]["public_name"] == "Alice Johnson"


def test_access_type_is_accepted_as_role_alias(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    resp = client.post(
        f"/wishlists/{wishlist['id']}/invites", json={"access_type": "view_edit"}, headers=alice
    )
    assert resp.status_code == 201
    assert resp.json()["role"] == "view_edit"


@pytest.mark.parametrize("role", ["owner", "none", "admin"])
def test_invitation_role_must_be_grantable(client, stack, role):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    resp = client.post(f"/wishlists/{wishlist['id']}/invites", json={"role": role}, headers=alice)
    assert resp.status_code == 400


def test_only_owner_can_invite(client, stack):
    wishlist = create_wishlist(client, bearer(stack.settings, ALICE))
    resp = client.post(
        f"/wishlists/{wishlist['id']}/invites", json={}, headers=bearer(stack.settings, BOB)
    )
    assert resp.status_code == 403
    assert resp.json() == {"error": "owner required"}


def test_preview_is_public_and_enriched(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice, "Wedding")
    token = invite(client, alice, wishlist["id"])["token"]

    resp = client.get(f"/invites/{token}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["wishlist_name"] == "Wedding"
    assert body["inviter"]["public_name"] == "Alice Johnson"
    assert body["role"] == "view_only"


def test_unknown_token(client, stack):
    assert client.get("/invites/nope").json() == {"error": "invite not found or expired"}
    resp = client.post("/invites/nope/accept", json={}, headers=bearer(stack.settings, BOB))
    assert resp.status_code == 404


def test_expiry_boundary(client, stack):
    stack.set_clock(lambda: T0)
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    created = invite(client, alice, wishlist["id"])
    token = created["token"]
    expires_at = T0 + timedelta(hours=168)

    stack.set_clock(lambda: expires_at - timedelta(seconds=1))
    assert client.get(f"/invites/{token}").status_code == 200

    stack.set_clock(lambda: expires_at)
    assert client.get(f"/invites/{token}").status_code == 404
    at_deadline = client.post(f"/invites/{token}/accept", json={}, headers=bearer(stack.settings, BOB))
    assert at_deadline.status_code == 404
    assert at_deadline.json() == {"error": "invite not found or expired"}

    stack.set_clock(lambda: expires_at + timedelta(seconds=1))
    resp = client.post(f"/invites/{token}/accept", json={}, headers=bearer(stack.settings, BOB))
    assert resp.status_code == 404
    assert resp.json() == {"error": "invite not found or expired"}


def test_accept_grants_invitation_role(client, stack):
    alice, bob = bearer(stack.settings, ALICE), bearer(stack.settings, BOB)
    wishlist = create_wishlist(client, alice)
    token = invite(client, alice, wishlist["id"], role="view_edit")["token"]

    resp = client.post(f"/invites/{token}/accept", json={"display_name": " Bobby "}, headers=bob)
    assert resp.status_code == 200
    assert resp.json() == {
        "wishlist_id": wishlist["id"],
        "user_id": BOB,
        "role": "view_edit",
        "display_name": "Bobby",
    }


def test_accept_without_body(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    token = invite(client, alice, wishlist["id"])["token"]

    resp = client.post(f"/invites/{token}/accept", headers=bearer(stack.settings, BOB))
    assert resp.status_code == 200
    assert resp.json()["display_name"] is None


def test_accept_requires_token(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    token = invite(client, alice, wishlist["id"])["token"]
    assert client.post(f"/invites/{token}/accept", json={}).status_code == 401


def test_link_is_shareable(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    token = invite(client, alice, wishlist["id"])["token"]

    for user in (BOB, CAROL):
        resp = client.post(f"/invites/{token}/accept", json={}, headers=bearer(stack.settings, user))
        assert resp.status_code == 200

    assert sorted(c["user_id"] for c in collaborator_rows(client, alice, wishlist["id"])) == [BOB, CAROL]


def test_owner_accepting_own_invitation_writes_nothing(client, stack):
    alice = bearer(stack.settings, ALICE)
    wishlist = create_wishlist(client, alice)
    token = invite(client, alice, wishlist["id"])["token"]

    resp = client.post(f"/invites/{token}/accept", json={}, headers=alice)
    assert resp.status_code == 200
    assert resp.json()["role"] == "owner"
    assert collaborator_rows(client, alice, wishlist["id"]) == []


def test_reaccept_updates_role_and_keeps_name(client, stack):
    alice, bob = bearer(stack.settings, ALICE), bearer(stack.settings, BOB)
    wishlist = create_wishlist(client, alice)
    view_only = invite(client, alice, wishlist["id"])["token"]
    view_edit = invite(client, alice, wishlist["id"], role="view_edit")["token"]

    first = client.post(f"/invites/{view_only}/accept", json={"display_name": "Bobby"}, headers=bob)
    again = client.post(f"/invites/{view_only}/accept", json={"display_name": "Bobby"}, headers=bob)
    assert first.json() == again.json()

    upgraded = client.post(f"/invites/{view_edit}/accept", json={}, headers=bob)
    assert upgraded.status_code == 200
    assert upgraded.json()["role"] == "view_edit"
    assert upgraded.json()["display_name"] == "Bobby"

    [row] = collaborator_rows(client, alice, wishlist["id"])
    assert row["user_id"] == BOB
    assert row["role"] == "view_edit"


def test_reject_policy_refuses_second_acceptance(make_stack):
    stack = make_stack(ACCEPT_POLICY="reject")
    with TestClient(stack.gateway) as client:
        alice, bob = bearer(stack.settings, ALICE), bearer(stack.settings, BOB)
        wishlist = create_wishlist(client, alice)
        token = invite(client, alice, wishlist["id"])["token"]

        assert client.post(f"/invites/{token}/accept", json={}, headers=bob).status_code == 200

        resp = client.post(f"/invites/{token}/accept", json={}, headers=bob)
        assert resp.status_code == 400
        assert resp.json() == {"error": "user already has access to this wishlist"}
        assert len(collaborator_rows(client, alice, wishlist["id"])) == 1
