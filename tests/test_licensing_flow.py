"""End-to-end licensing workflow tests.

Covers a vendor applying for a shop, document verification by the station
manager, approval into a license with agreement and dues, public
verification, payment recording and inspection.
"""

from conftest import SHOP_ID, TEST_PASSWORD, auth_headers

REQUIRED_DOCUMENTS = [
    "AADHAAR",
    "PAN",
    "BANK_STATEMENT",
    "POLICE_VERIFICATION",
    "RAILWAY_DECLARATION",
]

APPLICATION = {
    "station_code": "NDLS",
    "platform_number": "1",
    "shop_id": SHOP_ID,
    "shop_name": "Chai Point",
    "proposed_monthly_rent": "12000",
}


async def _apply(client, vendor_user) -> str:
    response = await client.post("/api/v1/vendor/apply", json=APPLICATION, headers=auth_headers(vendor_user))
    assert response.status_code == 201
    return response.json()["application_id"]


async def _verify_all_documents(client, vendor_user, manager_user) -> None:
    for document_type in REQUIRED_DOCUMENTS:
        uploaded = await client.post(
            "/api/v1/vendor/documents",
            json={
                "document_type": document_type,
                "file_url": f"/api/v1/upload/files/documents/{document_type.lower()}.pdf",
                "file_name": f"{document_type.lower()}.pdf",
            },
            headers=auth_headers(vendor_user),
        )
        assert uploaded.status_code == 201
        verified = await client.patch(
            f"/api/v1/station-manager/documents/{uploaded.json()['id']}/verify",
            json={"verified": True, "notes": "Checked against original"},
            headers=auth_headers(manager_user),
        )
        assert verified.status_code == 200
        assert verified.json()["verified"] is True


async def _approve(client, vendor_user, manager_user) -> dict:
    application_id = await _apply(client, vendor_user)
    await _verify_all_documents(client, vendor_user, manager_user)
    response = await client.post(
        f"/api/v1/station-manager/applications/{application_id}/approve",
        json={},
        headers=auth_headers(manager_user),
    )
    assert response.status_code == 200
    return response.json()


class TestStationBrowsing:
    """Public station listing and layouts."""

    async def test_approved_station_is_listed(self, client, station) -> None:
        response = await client.get("/api/v1/stations")

        assert response.status_code == 200
        codes = [s["station_code"] for s in response.json()["stations"]]
        assert codes == ["NDLS"]

    async def test_search_by_name(self, client, station) -> None:
        response = await client.get("/api/v1/stations/search", params={"q": "delhi"})

        assert response.status_code == 200
        assert response.json()["total"] == 1

    async def test_public_layout_shows_availability(self, client, station) -> None:
        response = await client.get("/api/v1/stations/NDLS/layout")

        assert response.status_code == 200
        shops = response.json()["platforms"][0]["shops"]
        assert {shop["id"] for shop in shops} == {SHOP_ID, "P1-S2"}
        assert all(shop["is_available"] for shop in shops)

    async def test_unknown_station_layout(self, client, station) -> None:
        response = await client.get("/api/v1/stations/XYZ/layout")

        assert response.status_code == 404
        assert response.json()["error"] == "Station not found"


class TestApplications:
    """Vendor applications."""

    async def test_apply_is_idempotent_per_shop(self, client, station, vendor_user) -> None:
        application_id = await _apply(client, vendor_user)

        again = await client.post("/api/v1/vendor/apply", json=APPLICATION, headers=auth_headers(vendor_user))

        assert again.status_code == 200
        assert again.json()["created"] is False
        assert again.json()["application_id"] == application_id

    async def test_apply_reports_missing_fields(self, client, station, vendor_user) -> None:
        response = await client.post(
            "/api/v1/vendor/apply",
            json={"station_code": "NDLS"},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert set(response.json()["missing_fields"]) == {
            "platform_number",
            "shop_id",
            "shop_name",
            "proposed_monthly_rent",
        }

    async def test_apply_sets_deposit_and_notifies_manager(
        self, client, station, vendor_user, manager_user
    ) -> None:
        application_id = await _apply(client, vendor_user)

        detail = await client.get(
            f"/api/v1/station-manager/applications/{application_id}",
            headers=auth_headers(manager_user),
        )
        assert detail.status_code == 200
        body = detail.json()["application"]
        assert detail.json()["vendor"]["name"] == "Ravi Kumar"
        assert body["status"] == "SUBMITTED"
        assert body["quoted_rent"] == 12000
        assert body["security_deposit"] == 36000

        notifications = await client.get("/api/v1/notifications", headers=auth_headers(manager_user))
        assert notifications.json()["unread_count"] == 1

    async def test_vendor_lists_own_applications(self, client, station, vendor_user) -> None:
        await _apply(client, vendor_user)

        response = await client.get("/api/v1/vendor/applications", headers=auth_headers(vendor_user))

        assert response.status_code == 200
        assert response.json()["pagination"]["total"] == 1

    async def test_manager_rejects_application(self, client, station, vendor_user, manager_user) -> None:
        application_id = await _apply(client, vendor_user)

        response = await client.post(
            f"/api/v1/station-manager/applications/{application_id}/reject",
            json={"rejection_reason": "Shop reserved for catering unit"},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 200
        detail = await client.get(
            f"/api/v1/vendor/applications/{application_id}",
            headers=auth_headers(vendor_user),
        )
        assert detail.json()["status"] == "REJECTED"
        assert detail.json()["rejection_reason"] == "Shop reserved for catering unit"


class TestApproval:
    """Approving an application into a license."""

    async def test_approval_requires_verified_documents(
        self, client, station, vendor_user, manager_user
    ) -> None:
        application_id = await _apply(client, vendor_user)

        response = await client.post(
            f"/api/v1/station-manager/applications/{application_id}/approve",
            json={},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 400
        assert set(response.json()["missing_verifications"]) == set(REQUIRED_DOCUMENTS)

    async def test_manager_cannot_verify_unrelated_vendor(
        self, client, station, vendor_user, manager_user
    ) -> None:
        uploaded = await client.post(
            "/api/v1/vendor/documents",
            json={"document_type": "PAN", "file_url": "/files/pan.pdf"},
            headers=auth_headers(vendor_user),
        )

        response = await client.patch(
            f"/api/v1/station-manager/documents/{uploaded.json()['id']}/verify",
            json={"verified": True},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 403

    async def test_approval_issues_license_agreement_and_dues(
        self, client, station, vendor_user, manager_user
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)

        license_data = approval["license"]
        assert license_data["status"] == "ACTIVE"
        assert license_data["license_type"] == "PERMANENT"
        assert license_data["station_code"] == "NDLS"
        assert license_data["monthly_rent"] == 12000
        assert license_data["qr_code_data"].startswith("data:image/png;base64,")
        assert approval["agreement"]["license_number"] == license_data["license_number"]
        assert approval["agreement"]["security_deposit"] == 36000

        payments = await client.get("/api/v1/station-manager/payments", headers=auth_headers(manager_user))
        assert payments.status_code == 200
        by_type = {p["payment_type"]: p for p in payments.json()["payments"]}
        assert by_type["SECURITY_DEPOSIT"]["amount"] == 36000
        assert by_type["RENT"]["amount"] == 12000

        layout = await client.get("/api/v1/stations/NDLS/layout")
        shops = {shop["id"]: shop for shop in layout.json()["platforms"][0]["shops"]}
        assert shops[SHOP_ID]["is_available"] is False
        assert shops["P1-S2"]["is_available"] is True

        licenses = await client.get("/api/v1/vendor/license", headers=auth_headers(vendor_user))
        assert [lic["license_number"] for lic in licenses.json()["licenses"]] == [license_data["license_number"]]

    async def test_approved_application_cannot_be_approved_again(
        self, client, station, vendor_user, manager_user
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)

        response = await client.post(
            f"/api/v1/station-manager/applications/{approval['application_id']}/approve",
            json={},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 400


class TestLicenseVerification:
    """Public verification and inspection of issued licenses."""

    async def test_public_verification(self, client, station, vendor_user, manager_user) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        number = approval["license"]["license_number"]

        response = await client.get(f"/api/v1/verify/{number}")

        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"] is True
        assert body["station_code"] == "NDLS"
        assert body["shop_id"] == SHOP_ID

    async def test_unknown_license(self, client) -> None:
        response = await client.get("/api/v1/verify/LIC-UNKNOWN")

        assert response.status_code == 404

    async def test_inspector_scans_and_logs_inspection(
        self, client, station, vendor_user, manager_user
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        number = approval["license"]["license_number"]

        created = await client.post(
            "/api/v1/station-manager/inspectors",
            json={
                "name": "meena iyer",
                "email": "inspector@vendorvault.in",
                "phone": "9988776655",
                "password": TEST_PASSWORD,
                "employee_id": "INS-07",
            },
            headers=auth_headers(manager_user),
        )
        assert created.status_code == 201

        login = await client.post(
            "/api/v1/auth/login",
            json={"email": "inspector@vendorvault.in", "password": TEST_PASSWORD},
        )
        inspector_headers = {"Authorization": f"Bearer {login.json()['token']}"}

        scan = await client.get(
            "/api/v1/inspector/scan",
            params={"qr": f"http://localhost:3000/verify/{number}"},
            headers=inspector_headers,
        )
        assert scan.status_code == 200
        assert scan.json()["license"]["license_number"] == number
        assert len(scan.json()["payments"]) == 2

        inspection = await client.post(
            "/api/v1/inspector/inspections",
            json={"license_number": number, "compliance_status": "requires_attention", "notes": "Menu card missing"},
            headers=inspector_headers,
        )
        assert inspection.status_code == 201
        assert inspection.json()["compliance_status"] == "REQUIRES_ATTENTION"

        stats = await client.get("/api/v1/inspector/stats", headers=inspector_headers)
        assert stats.json()["requires_attention"] == 1
        assert stats.json()["my_total_inspections"] == 1

    async def test_vendor_cannot_scan(self, client, vendor_user) -> None:
        response = await client.get(
            "/api/v1/inspector/scan",
            params={"license_number": "LIC-ANY"},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 403


class TestPayments:
    """Recording payments against dues."""

    async def test_full_rent_payment_marks_paid(self, client, station, vendor_user, manager_user) -> None:
        await _approve(client, vendor_user, manager_user)
        payments = await client.get(
            "/api/v1/station-manager/payments",
            params={"type": "RENT"},
            headers=auth_headers(manager_user),
        )
        rent = payments.json()["payments"][0]

        response = await client.post(
            f"/api/v1/station-manager/payments/{rent['id']}/record",
            json={"paid_amount": "12000", "mode": "UPI", "reference": "UPI-REF-1"},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "PAID"
        assert body["balance"] == 0
        assert body["payment_records"][0]["mode"] == "UPI"

        again = await client.post(
            f"/api/v1/station-manager/payments/{rent['id']}/record",
            json={"paid_amount": "1", "mode": "CASH"},
            headers=auth_headers(manager_user),
        )
        assert again.status_code == 400

    async def test_partial_deposit_payment(self, client, station, vendor_user, manager_user) -> None:
        await _approve(client, vendor_user, manager_user)
        payments = await client.get(
            "/api/v1/station-manager/payments",
            params={"type": "SECURITY_DEPOSIT"},
            headers=auth_headers(manager_user),
        )
        deposit = payments.json()["payments"][0]

        response = await client.post(
            f"/api/v1/station-manager/payments/{deposit['id']}/record",
            json={"paid_amount": "10000", "mode": "NEFT"},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 200
        assert response.json()["paid_amount"] == 10000
        assert response.json()["balance"] == 26000

        vendor_view = await client.get("/api/v1/vendor/payments", headers=auth_headers(vendor_user))
        assert vendor_view.json()["total_paid"] == 10000
