"""User-role assignment, permission listing and the /authorize decision endpoint."""

from httpx import AsyncClient

from conftest import Seeded


def _as(user_id: str) -> dict[str, str]:
    return {"X-User-ID": user_id}


async def test_assign_and_revoke_flow(client: AsyncClient, seeded: Seeded) -> None:
    url = f"/api/v1/users/{seeded.staff_a}/roles"
    assigned = await client.post(
        url,
        json={"role_code": "manager-operasional", "tenant_id": seeded.tenant_a},
        headers=_as(seeded.admin_a),
    )
    assert assigned.status_code == 201
    assert assigned.json()["assigned_by"] == seeded.admin_a

    check = await client.post(
        "/api/v1/authorize",
        json={
            "user_id": seeded.staff_a,
            "permission": "menu.approve",
            "tenant_id": seeded.tenant_a,
        },
    )
    assert check.json()["decision"] == "authorized"
    assert check.json()["allowed"] is True

    roles = await client.get(url, headers=_as(seeded.staff_a))
    assert [r["code"] for r in roles.json()] == ["manager-operasional"]

    revoked = await client.delete(
        f"{url}/manager-operasional",
        params={"tenant_id": seeded.tenant_a},
        headers=_as(seeded.admin_a),
    )
    assert revoked.json() == {
        "user_id": seeded.staff_a,
        "role_code": "manager-operasional",
        "revoked": True,
    }
    check = await client.post(
        "/api/v1/authorize",
        json={"user_id": seeded.staff_a, "permission": "menu.approve"},
    )
    assert check.json()["decision"] == "forbidden"


async def test_cross_tenant_assign_is_rejected(client: AsyncClient, seeded: Seeded) -> None:
    """admin_a cannot manage a user of tenant B."""
    response = await client.post(
        f"/api/v1/users/{seeded.user_b}/roles",
        json={"role_code": "staff-dapur", "tenant_id": seeded.tenant_b},
        headers=_as(seeded.admin_a),
    )
    assert response.status_code == 403


async def test_tenant_mismatch_is_403(client: AsyncClient, seeded: Seeded) -> None:
    """Role from another tenant than the user's."""
    response = await client.post(
        f"/api/v1/users/{seeded.staff_a}/roles",
        json={"role_code": "staff-dapur", "tenant_id": seeded.tenant_b},
        headers=_as(seeded.platform_admin),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "TENANT_MISMATCH"


async def test_system_role_assignment(client: AsyncClient, seeded: Seeded) -> None:
    body = {"role_code": "superadmin"}
    by_tenant_admin = await client.post(
        f"/api/v1/users/{seeded.staff_a}/roles", json=body, headers=_as(seeded.admin_a)
    )
    assert by_tenant_admin.status_code == 403
    to_tenant_user = await client.post(
        f"/api/v1/users/{seeded.staff_a}/roles",
        json=body,
        headers=_as(seeded.platform_admin),
    )
    assert to_tenant_user.status_code == 400
    assert to_tenant_user.json()["error"] == "INVALID_SCOPE"


async def test_unknown_user_is_404(client: AsyncClient, seeded: Seeded) -> None:
    response = await client.get("/api/v1/users/ghost/roles", headers=_as(seeded.admin_a))
    assert response.status_code == 404
    assert response.json()["error"] == "IDENTITY_NOT_FOUND"


async def test_user_permissions(client: AsyncClient, seeded: Seeded) -> None:
    own = await client.get(
        f"/api/v1/users/{seeded.platform_admin}/permissions",
        headers=_as(seeded.platform_admin),
    )
    assert own.status_code == 200
    data = own.json()
    assert data["is_platform_admin"] is True
    assert "sppg.create" in data["permissions"]
    assert "menu.approve" not in data["permissions"]

    other = await client.get(
        f"/api/v1/users/{seeded.admin_a}/permissions", headers=_as(seeded.staff_a)
    )
    assert other.status_code == 403


async def test_authorize_unknown_user(client: AsyncClient, seeded: Seeded) -> None:
    response = await client.post(
        "/api/v1/authorize", json={"user_id": "ghost", "permission": "menu.read"}
    )
    assert response.status_code == 200
    assert response.json()["decision"] == "unauthenticated"
    assert response.json()["allowed"] is False


async def test_provisioning_requires_platform_admin(
    client: AsyncClient, seeded: Seeded
) -> None:
    denied = await client.post(
        "/api/v1/provisioning", json={}, headers=_as(seeded.admin_a)
    )
    assert denied.status_code == 403
    response = await client.post(
        "/api/v1/provisioning",
        json={"all_tenants": True},
        headers=_as(seeded.platform_admin),
    )
    assert response.status_code == 200
    assert response.json()["changed"] is False
    assert sorted(response.json()["tenants"]) == sorted(
        [seeded.tenant_a, seeded.tenant_b]
    )
