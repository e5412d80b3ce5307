"""Authorization tests.

Tests role-based access control: role hierarchy helpers, feature access,
and which roles may reach admin-only and report endpoints.
"""

import pytest

from laundry.core.rbac import (
    ROLE_PERMISSIONS,
    UserRole,
    get_accessible_features,
    has_minimum_role,
    has_permission,
)


class TestRoleHelpers:
    def test_admin_outranks_everyone(self):
        for role in UserRole:
            assert has_minimum_role(UserRole.ADMIN, role)

    def test_staff_is_lowest(self):
        assert has_minimum_role(UserRole.STAFF, UserRole.STAFF)
        assert not has_minimum_role(UserRole.STAFF, UserRole.DEPARTMENT)

    def test_string_roles_are_accepted(self):
        assert has_minimum_role("manager", "supervisor")
        assert not has_minimum_role("technician", "inventory")

    def test_unknown_role_has_no_level(self):
        assert not has_minimum_role("janitor", UserRole.STAFF)

    def test_feature_access(self):
        assert has_permission(UserRole.BILLING, "billing")
        assert has_permission("department", "reports")
        assert not has_permission(UserRole.STAFF, "reports")
        assert not has_permission(UserRole.SUPERVISOR, "users")

    def test_unknown_role_has_no_features(self):
        assert not has_permission("janitor", "dashboard")
        assert get_accessible_features("janitor") == []

    def test_every_role_sees_dashboard_and_tasks(self):
        for role in UserRole:
            features = get_accessible_features(role)
            assert "dashboard" in features
            assert "tasks" in features

    def test_only_admin_manages_users(self):
        assert [role for role, features in ROLE_PERMISSIONS.items() if "users" in features] == [UserRole.ADMIN]


class TestAdminOnlyEndpoints:
    """Non-admin roles are denied admin-only operations."""

    @pytest.mark.parametrize("role", [UserRole.MANAGER, UserRole.SUPERVISOR, UserRole.STAFF])
    def test_non_admin_cannot_manage_users(self, client, make_user, auth_for, role):
        headers = auth_for(make_user(role))
        assert client.get("/api/users/", headers=headers).status_code == 403
        resp = client.post(
            "/api/users/",
            json={"username": "x", "name": "X", "password": "secret1", "confirm_password": "secret1"},
            headers=headers,
        )
        assert resp.status_code == 403

    def test_non_admin_cannot_create_department(self, client, make_user, auth_for):
        headers = auth_for(make_user(UserRole.MANAGER))
        resp = client.post("/api/departments/", json={"name": "Radiology"}, headers=headers)
        assert resp.status_code == 403
        assert "admin" in resp.json()["detail"]

    def test_non_admin_cannot_write_processes(self, client, staff_headers):
        resp = client.post("/api/laundry-processes/", json={"name": "Hot wash", "duration": 60}, headers=staff_headers)
        assert resp.status_code == 403

    def test_admin_can_do_all_of_the_above(self, client, admin_headers):
        assert client.get("/api/users/", headers=admin_headers).status_code == 200
        assert client.post("/api/departments/", json={"name": "Radiology"}, headers=admin_headers).status_code == 201
        resp = client.post(
            "/api/laundry-processes/", json={"name": "Hot wash", "duration": 60}, headers=admin_headers
        )
        assert resp.status_code == 201


class TestUnauthenticatedDenied:
    """No token should be rejected on protected endpoints."""

    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/api/tasks/"),
            ("get", "/api/inventory/"),
            ("get", "/api/equipment/"),
            ("get", "/api/departments/"),
            ("get", "/api/laundry-processes/"),
            ("get", "/api/cost-allocations/"),
            ("get", "/api/users/1"),
            ("delete", "/api/tasks/1"),
        ],
    )
    def test_protected_routes(self, client, method, path):
        resp = getattr(client, method)(path)
        assert resp.status_code == 401
        assert resp.headers.get("www-authenticate") == "Bearer"


class TestInvalidToken:
    """Invalid/tampered tokens should be rejected."""

    def test_garbage_token(self, client):
        headers = {"Authorization": "Bearer invalid.token.here"}
        assert client.get("/api/tasks/", headers=headers).status_code == 401

    def test_token_with_unknown_role(self, client, staff_user):
        from laundry.core.security import create_access_token

        token = create_access_token({"sub": str(staff_user.id), "role": "janitor"})
        resp = client.get("/api/tasks/", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid role in token"

    def test_role_comes_from_database(self, client, staff_user):
        from laundry.core.security import create_access_token

        # A token claiming admin does not elevate a staff account
        token = create_access_token({"sub": str(staff_user.id), "role": "admin"})
        resp = client.get("/api/users/", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403
