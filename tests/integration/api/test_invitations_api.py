from datetime import timedelta
from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlmodel import select

from gatepass.domain.entities import Invitation
from tests.utils.builders import NOW


@pytest.mark.asyncio
async def test_resident_creates_invitation(client: AsyncClient, seed, db_session):
    """Resident issues a single-use invitation for their own unit"""
    response = await client.post(
        "/api/invitations",
        json={"visitor_name": "Carlos Ruiz", "visitor_phone": "555-0199"},
        headers=seed.headers("resident"),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["kind"] == "single"
    assert data["max_uses"] == 1
    assert data["current_uses"] == 0
    assert data["status"] == "active"
    assert data["unit_id"] == str(seed.units["101"])
    assert data["organization_id"] == str(seed.organizations["norte"])
    assert data["valid_from"] == NOW.isoformat() + "Z"
    assert len(data["short_code"]) == 6
    assert data["qr_data"].startswith(f"GATEPASS:{data['id']}:")

    stmt = select(Invitation).where(Invitation.id == UUID(data["id"]))
    result = await db_session.exec(stmt)
    stored = result.one()
    assert stored.created_by == seed.users["resident"]


@pytest.mark.asyncio
async def test_create_validation_errors(client: AsyncClient, seed):
    headers = seed.headers("resident")

    short_name = await client.post(
        "/api/invitations", json={"visitor_name": "X"}, headers=headers
    )
    multiple_without_uses = await client.post(
        "/api/invitations",
        json={"visitor_name": "Carlos Ruiz", "kind": "multiple"},
        headers=headers,
    )
    past_window = await client.post(
        "/api/invitations",
        json={
            "visitor_name": "Carlos Ruiz",
            "kind": "temporary",
            "valid_until": (NOW - timedelta(hours=1)).isoformat(),
        },
        headers=headers,
    )

    assert short_name.status_code == 400
    assert short_name.json()["error"]["code"] == "INVALID_VISITOR_NAME"
    assert multiple_without_uses.status_code == 400
    assert multiple_without_uses.json()["error"]["code"] == "INVALID_MAX_USES"
    assert past_window.status_code == 400
    assert past_window.json()["error"]["code"] == "INVALID_VALIDITY_WINDOW"


@pytest.mark.asyncio
async def test_resident_cannot_invite_to_neighbours_unit(client: AsyncClient, seed):
    response = await client.post(
        "/api/invitations",
        json={"visitor_name": "Carlos Ruiz", "unit_id": str(seed.units["102"])},
        headers=seed.headers("resident"),
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "UNIT_NOT_ALLOWED"


@pytest.mark.asyncio
async def test_guard_cannot_create_invitation(client: AsyncClient, seed):
    response = await client.post(
        "/api/invitations",
        json={"visitor_name": "Carlos Ruiz"},
        headers=seed.headers("guard"),
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client: AsyncClient, seed):
    response = await client.post("/api/invitations", json={"visitor_name": "Carlos Ruiz"})

    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: AsyncClient, seed):
    response = await client.get(
        "/api/invitations", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_invitations_by_unit(client: AsyncClient, seed):
    await client.post(
        "/api/invitations", json={"visitor_name": "Carlos Ruiz"}, headers=seed.headers("resident")
    )
    await client.post(
        "/api/invitations", json={"visitor_name": "Dora Vega"}, headers=seed.headers("neighbour")
    )

    own = await client.get("/api/invitations", headers=seed.headers("resident"))
    everything = await client.get("/api/invitations", headers=seed.headers("admin"))

    assert own.status_code == 200
    assert [i["visitor_name"] for i in own.json()["invitations"]] == ["Carlos Ruiz"]
    assert len(everything.json()["invitations"]) == 2


@pytest.mark.asyncio
async def test_list_filters_on_derived_status(client: AsyncClient, seed, clock):
    headers = seed.headers("resident")
    await client.post(
        "/api/invitations",
        json={
            "visitor_name": "Short Stay",
            "kind": "temporary",
            "valid_until": (NOW + timedelta(hours=1)).isoformat(),
        },
        headers=headers,
    )
    await client.post(
        "/api/invitations",
        json={"visitor_name": "Family Member", "kind": "permanent"},
        headers=headers,
    )

    clock.advance(hours=2)
    response = await client.get(
        "/api/invitations", params={"status": "expired"}, headers=headers
    )

    assert response.status_code == 200
    names = [i["visitor_name"] for i in response.json()["invitations"]]
    assert names == ["Short Stay"]


@pytest.mark.asyncio
async def test_get_invitation_scoping(client: AsyncClient, seed):
    created = await client.post(
        "/api/invitations", json={"visitor_name": "Carlos Ruiz"}, headers=seed.headers("resident")
    )
    invitation_id = created.json()["id"]

    own = await client.get(f"/api/invitations/{invitation_id}", headers=seed.headers("resident"))
    neighbour = await client.get(
        f"/api/invitations/{invitation_id}", headers=seed.headers("neighbour")
    )
    outsider = await client.get(
        f"/api/invitations/{invitation_id}", headers=seed.headers("sur_guard")
    )
    malformed = await client.get("/api/invitations/not-a-uuid", headers=seed.headers("resident"))

    assert own.status_code == 200
    assert neighbour.status_code == 404
    assert outsider.status_code == 404
    assert malformed.status_code == 400
    assert malformed.json()["error"]["code"] == "INVALID_INVITATION_ID"


@pytest.mark.asyncio
async def test_cancel_twice_then_admit_is_denied(client: AsyncClient, seed):
    created = await client.post(
        "/api/invitations", json={"visitor_name": "Carlos Ruiz"}, headers=seed.headers("resident")
    )
    invitation = created.json()

    first = await client.post(
        f"/api/invitations/{invitation['id']}/cancel", headers=seed.headers("resident")
    )
    second = await client.post(
        f"/api/invitations/{invitation['id']}/cancel", headers=seed.headers("resident")
    )
    admit = await client.post(
        "/api/access/admit",
        json={"code": invitation["short_code"]},
        headers=seed.headers("guard"),
    )

    assert first.status_code == 200
    assert first.json()["status"] == "cancelled"
    assert second.status_code == 200
    assert second.json()["status"] == "cancelled"
    assert admit.status_code == 403
    assert admit.json()["error"] == {
        "code": "ACCESS_DENIED",
        "message": "Invitation has been cancelled",
        "reason": "cancelled",
    }


@pytest.mark.asyncio
async def test_neighbour_cannot_cancel(client: AsyncClient, seed):
    created = await client.post(
        "/api/invitations", json={"visitor_name": "Carlos Ruiz"}, headers=seed.headers("resident")
    )

    response = await client.post(
        f"/api/invitations/{created.json()['id']}/cancel", headers=seed.headers("neighbour")
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_lookup_does_not_consume(client: AsyncClient, seed):
    created = await client.post(
        "/api/invitations", json={"visitor_name": "Carlos Ruiz"}, headers=seed.headers("resident")
    )
    code = created.json()["short_code"].lower()

    lookup = await client.get(
        "/api/invitations/lookup", params={"code": code}, headers=seed.headers("guard")
    )
    detail = await client.get(
        f"/api/invitations/{created.json()['id']}", headers=seed.headers("resident")
    )

    assert lookup.status_code == 200
    assert lookup.json()["admissible"] is True
    assert detail.json()["current_uses"] == 0
