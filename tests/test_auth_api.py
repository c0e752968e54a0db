"""Authentication, account lifecycle and error shape tests."""

from conftest import TEST_PASSWORD, auth_headers, create_user
from vendorvault_api.models.domain.user import UserRole, UserStatus
from vendorvault_api.security.auth import create_password_reset_token

REGISTER_PAYLOAD = {
    "name": "sita devi",
    "email": "Sita@VendorVault.in",
    "phone": "9812345678",
    "password": "Chai2Garam",
    "address": "Platform Road",
    "state": "Delhi",
    "pincode": "110006",
}

MANAGER_APPLICATION = {
    "name": "Vikram Singh",
    "email": "vikram@vendorvault.in",
    "phone": "9811122233",
    "password": "Manage1Station",
    "aadhaar_number": "1234 5678 9012",
    "pan_number": "abcde1234f",
    "railway_employee_id": "NR-1042",
    "designation": "Station Superintendent",
    "pincode": "110001",
    "station_name": "Hazrat Nizamuddin",
    "station_code": "nzm",
    "railway_zone": "Northern Railway",
    "station_category": "NSG-2",
    "platforms_count": 7,
}


class TestRegistration:
    """Vendor self-registration."""

    async def test_register_creates_active_vendor(self, client) -> None:
        response = await client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["email"] == "sita@vendorvault.in"
        assert body["user"]["name"] == "Sita Devi"
        assert body["user"]["role"] == "VENDOR"
        assert body["user"]["status"] == "ACTIVE"
        assert body["user"]["address"] == "Platform Road, Delhi - 110006"
        assert body["token"]
        assert "token" in response.cookies

    async def test_register_duplicate_email_rejected(self, client) -> None:
        await client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)
        response = await client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)

        assert response.status_code == 400
        assert response.json()["error"] == "Email already registered"

    async def test_register_other_roles_forbidden(self, client) -> None:
        payload = {**REGISTER_PAYLOAD, "role": "RAILWAY_ADMIN"}
        response = await client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 403

    async def test_invalid_input_lists_fields(self, client) -> None:
        payload = {**REGISTER_PAYLOAD, "email": "not-an-email"}
        response = await client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid input data"
        assert any(field["field"] == "email" for field in body["fields"])


class TestLogin:
    """Email and password login."""

    async def test_login_returns_token(self, client, vendor_user) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": vendor_user.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == str(vendor_user.id)
        assert body["user"]["last_login_at"] is not None
        assert body["token"]

    async def test_wrong_password_rejected(self, client, vendor_user) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": vendor_user.email, "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    async def test_pending_account_cannot_login(self, client, db_session) -> None:
        user = await create_user(
            db_session,
            UserRole.STATION_MANAGER,
            "pending@vendorvault.in",
            "Pending Manager",
            status=UserStatus.PENDING,
        )
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 403

    async def test_logout_clears_cookie(self, client) -> None:
        response = await client.post("/api/v1/auth/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Logout successful"


class TestCurrentUser:
    """Resolving the signed-in user."""

    async def test_me_requires_authentication(self, client) -> None:
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "Authentication required"

    async def test_me_rejects_garbage_token(self, client) -> None:
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401

    async def test_me_returns_user(self, client, vendor_user) -> None:
        response = await client.get("/api/v1/auth/me", headers=auth_headers(vendor_user))

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == vendor_user.email
        assert body["vendor"] is None

    async def test_role_guard_reports_required_roles(self, client, vendor_user) -> None:
        response = await client.get("/api/v1/railway-admin/stats", headers=auth_headers(vendor_user))

        assert response.status_code == 403
        body = response.json()
        assert body["error"] == "Insufficient role"
        assert body["required_roles"] == ["RAILWAY_ADMIN"]


class TestStationManagerOnboarding:
    """Station manager application and admin approval."""

    async def test_application_then_approval(self, client, admin_user) -> None:
        response = await client.post("/api/v1/auth/station-manager-application", json=MANAGER_APPLICATION)
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PENDING"
        user_id = body["user_id"]

        login = {"email": MANAGER_APPLICATION["email"], "password": MANAGER_APPLICATION["password"]}
        assert (await client.post("/api/v1/auth/login", json=login)).status_code == 403

        pending = await client.get("/api/v1/railway-admin/pending-managers", headers=auth_headers(admin_user))
        assert pending.status_code == 200

        approved = await client.post(
            f"/api/v1/railway-admin/managers/{user_id}/approve",
            headers=auth_headers(admin_user),
        )
        assert approved.status_code == 200
        decision = approved.json()
        assert decision["user"]["status"] == "ACTIVE"
        assert decision["station"]["station_code"] == "NZM"
        assert decision["station"]["approval_status"] == "APPROVED"

        assert (await client.post("/api/v1/auth/login", json=login)).status_code == 200

    async def test_weak_password_rejected(self, client) -> None:
        payload = {**MANAGER_APPLICATION, "password": "alllowercase"}
        response = await client.post("/api/v1/auth/station-manager-application", json=payload)

        assert response.status_code == 400
        assert response.json()["field"] == "password"

    async def test_invalid_pan_rejected(self, client) -> None:
        payload = {**MANAGER_APPLICATION, "pan_number": "12345ABCDE"}
        response = await client.post("/api/v1/auth/station-manager-application", json=payload)

        assert response.status_code == 400
        assert response.json()["field"] == "pan_number"


class TestPasswordReset:
    """Forgot and reset password."""

    async def test_forgot_password_does_not_leak_accounts(self, client, vendor_user) -> None:
        known = await client.post("/api/v1/auth/forgot-password", json={"email": vendor_user.email})
        unknown = await client.post("/api/v1/auth/forgot-password", json={"email": "nobody@vendorvault.in"})

        assert known.status_code == unknown.status_code == 200
        assert known.json()["message"] == unknown.json()["message"]
        assert known.json()["reset_token"] is None

    async def test_reset_password_with_token(self, client, vendor_user) -> None:
        token = create_password_reset_token(vendor_user.id, vendor_user.email)
        response = await client.post(
            "/api/v1/auth/reset-password",
            json={"token": token, "new_password": "N3wPassword!"},
        )
        assert response.status_code == 200

        login = await client.post(
            "/api/v1/auth/login",
            json={"email": vendor_user.email, "password": "N3wPassword!"},
        )
        assert login.status_code == 200

    async def test_access_token_cannot_reset_password(self, client, vendor_user) -> None:
        token = auth_headers(vendor_user)["Authorization"].removeprefix("Bearer ")
        response = await client.post(
            "/api/v1/auth/reset-password",
            json={"token": token, "new_password": "N3wPassword!"},
        )

        assert response.status_code == 400
