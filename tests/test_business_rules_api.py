"""Business rule API tests.

Limits and state checks around negotiation, renewal, document rejection,
layouts, dashboards, payments, license administration and expiry.
"""

from datetime import timedelta
from uuid import UUID

from sqlalchemy import update

from conftest import SHOP_ID, TEST_PASSWORD, auth_headers, create_user
from vendorvault_api.models.domain.user import UserRole
from vendorvault_api.models.orm.license import LicenseORM
from vendorvault_api.models.orm.payment import VendorPaymentORM
from vendorvault_api.models.orm.station import StationLayoutORM
from vendorvault_api.services.license_service import LicenseService
from vendorvault_api.utils.dates import utcnow

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


def _layout(*shops: dict) -> dict:
    return {
        "platforms": [{"id": "platform-1", "name": "Platform 1", "number": 1, "shops": list(shops)}],
        "infrastructure_blocks": [],
        "canvas_settings": {"width": 2000, "height": 1200, "grid_size": 20},
    }


async def _apply(client, vendor) -> str:
    response = await client.post("/api/v1/vendor/apply", json=APPLICATION, headers=auth_headers(vendor))
    assert response.status_code == 201
    return response.json()["application_id"]


async def _upload(client, vendor, document_type: str) -> str:
    response = await client.post(
        "/api/v1/vendor/documents",
        json={
            "document_type": document_type,
            "file_url": f"/api/v1/upload/files/documents/{document_type.lower()}.pdf",
        },
        headers=auth_headers(vendor),
    )
    assert response.status_code == 201
    return response.json()["id"]


async def _approve(client, vendor, manager) -> dict:
    application_id = await _apply(client, vendor)
    for document_type in REQUIRED_DOCUMENTS:
        document_id = await _upload(client, vendor, document_type)
        verified = await client.patch(
            f"/api/v1/station-manager/documents/{document_id}/verify",
            json={"verified": True},
            headers=auth_headers(manager),
        )
        assert verified.status_code == 200
    response = await client.post(
        f"/api/v1/station-manager/applications/{application_id}/approve",
        json={},
        headers=auth_headers(manager),
    )
    assert response.status_code == 200
    return response.json()


async def _admin_action(client, admin, license_id: str, action: str, reason: str | None = None):
    return await client.post(
        f"/api/v1/railway-admin/licenses/{license_id}/action",
        json={"action": action, "reason": reason},
        headers=auth_headers(admin),
    )


async def _payment(client, manager, payment_type: str) -> dict:
    response = await client.get(
        "/api/v1/station-manager/payments",
        params={"type": payment_type},
        headers=auth_headers(manager),
    )
    return response.json()["payments"][0]


class TestNegotiationLimits:
    """Counter-offer cap of a negotiation room."""

    async def test_eleventh_counter_offer_rejected(self, client, station, vendor_user) -> None:
        application_id = await _apply(client, vendor_user)
        headers = auth_headers(vendor_user)

        for round_number in range(10):
            offer = await client.post(
                f"/api/v1/vendor/negotiation/{application_id}",
                json={"proposed_rent": str(10000 + round_number * 100)},
                headers=headers,
            )
            assert offer.status_code == 200
        assert offer.json()["counter_offer_count"] == 10

        response = await client.post(
            f"/api/v1/vendor/negotiation/{application_id}",
            json={"proposed_rent": "11500"},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Maximum number of counter offers reached"
        assert response.json()["max_counter_offers"] == 10

        # Plain messages are still accepted once the cap is reached
        message = await client.post(
            f"/api/v1/vendor/negotiation/{application_id}",
            json={"message": "Final offer stands"},
            headers=headers,
        )
        assert message.status_code == 200
        assert message.json()["counter_offer_count"] == 10


class TestRenewal:
    """Vendor license renewal requests."""

    async def test_renewal_creates_pending_license_once(
        self, client, station, vendor_user, manager_user
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        license_id = approval["license"]["id"]

        renewed = await client.post(
            "/api/v1/vendor/renew",
            json={"license_id": license_id},
            headers=auth_headers(vendor_user),
        )
        assert renewed.status_code == 201
        body = renewed.json()
        assert body["status"] == "PENDING"
        assert body["license_type"] == "TEMPORARY"
        assert body["renewed_from_id"] == license_id
        assert body["license_number"] != approval["license"]["license_number"]

        again = await client.post(
            "/api/v1/vendor/renew",
            json={"license_id": license_id},
            headers=auth_headers(vendor_user),
        )
        assert again.status_code == 400
        assert again.json()["error"] == "A license renewal is already pending"

    async def test_revoked_license_cannot_be_renewed(
        self, client, station, vendor_user, manager_user, admin_user
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        license_id = approval["license"]["id"]
        revoked = await _admin_action(client, admin_user, license_id, "REVOKE", "Subletting detected")
        assert revoked.status_code == 200

        response = await client.post(
            "/api/v1/vendor/renew",
            json={"license_id": license_id},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert response.json()["current_status"] == "REVOKED"

    async def test_other_vendors_license_not_found(
        self, client, station, vendor_user, manager_user, db_session
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        other = await create_user(db_session, UserRole.VENDOR, "other@vendorvault.in", "Other Vendor")

        response = await client.post(
            "/api/v1/vendor/renew",
            json={"license_id": approval["license"]["id"]},
            headers=auth_headers(other),
        )

        assert response.status_code == 404


class TestDocumentRejection:
    """Rejecting a document closes the vendor's open applications."""

    async def test_rejected_document_rejects_application(
        self, client, station, vendor_user, manager_user
    ) -> None:
        application_id = await _apply(client, vendor_user)
        opened = await client.post(
            f"/api/v1/vendor/negotiation/{application_id}",
            json={"proposed_rent": "11000"},
            headers=auth_headers(vendor_user),
        )
        assert opened.status_code == 200
        document_id = await _upload(client, vendor_user, "PAN")

        response = await client.patch(
            f"/api/v1/station-manager/documents/{document_id}/verify",
            json={"verified": False, "notes": "Blurred scan"},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 200
        assert response.json()["verified"] is False

        application = await client.get(
            f"/api/v1/vendor/applications/{application_id}",
            headers=auth_headers(vendor_user),
        )
        assert application.json()["status"] == "REJECTED"
        assert application.json()["rejection_reason"] == "Document rejected: PAN"

        room = await client.get(
            f"/api/v1/vendor/negotiation/{application_id}",
            headers=auth_headers(vendor_user),
        )
        assert room.json()["status"] == "CANCELLED"

        notifications = (await client.get("/api/v1/notifications", headers=auth_headers(vendor_user))).json()
        types = {n["type"] for n in notifications["notifications"]}
        assert {"DOCUMENT_REJECTED", "APPLICATION_REJECTED"} <= types


class TestLayoutRules:
    """Locking, zero-sized shops and allocation fields on layout saves."""

    async def test_locked_layout_cannot_be_saved(self, client, station, manager_user, db_session) -> None:
        await db_session.execute(
            update(StationLayoutORM).where(StationLayoutORM.station_id == station.id).values(is_locked=True)
        )
        await db_session.commit()

        response = await client.put(
            "/api/v1/station-manager/layout",
            json=_layout({"id": SHOP_ID, "width": 100, "height": 100}),
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Layout is locked"

    async def test_zero_height_shop_rejected(self, client, station, manager_user) -> None:
        response = await client.put(
            "/api/v1/station-manager/layout",
            json=_layout({"id": "flat", "width": 100, "height": 0}),
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 400
        assert [o["shop_id"] for o in response.json()["offenders"]] == ["flat"]

    async def test_client_cannot_allocate_shops(self, client, station, manager_user) -> None:
        response = await client.put(
            "/api/v1/station-manager/layout",
            json=_layout(
                {"id": SHOP_ID, "width": 100, "height": 100, "is_allocated": True, "vendor_id": "someone"},
            ),
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 200
        shop = response.json()["platforms"][0]["shops"][0]
        assert shop["is_allocated"] is False
        assert shop["vendor_id"] is None

        public = await client.get("/api/v1/stations/NDLS/layout")
        assert public.json()["platforms"][0]["shops"][0]["is_available"] is True

    async def test_existing_allocation_survives_save(
        self, client, station, vendor_user, manager_user
    ) -> None:
        await _approve(client, vendor_user, manager_user)

        response = await client.put(
            "/api/v1/station-manager/layout",
            json=_layout(
                {"id": SHOP_ID, "width": 100, "height": 100},
                {"id": "P1-S3", "x": 300, "width": 120, "height": 120},
            ),
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 200
        shops = {shop["id"]: shop for shop in response.json()["platforms"][0]["shops"]}
        assert shops[SHOP_ID]["is_allocated"] is True
        assert shops[SHOP_ID]["vendor_id"] == str(vendor_user.id)
        assert shops["P1-S3"]["is_allocated"] is False


class TestNotificationsReadAll:
    """Marking every notification read."""

    async def test_read_all(self, client, station, vendor_user, manager_user) -> None:
        await _apply(client, vendor_user)
        headers = auth_headers(manager_user)

        response = await client.patch("/api/v1/notifications/read-all", headers=headers)

        assert response.status_code == 200
        assert response.json()["updated"] == 1

        listing = await client.get("/api/v1/notifications", headers=headers)
        assert listing.json()["unread_count"] == 0

        again = await client.patch("/api/v1/notifications/read-all", headers=headers)
        assert again.json()["updated"] == 0


class TestDashboards:
    """Vendor analytics, station analytics and manager counts."""

    async def test_vendor_analytics(self, client, station, vendor_user, manager_user) -> None:
        await _approve(client, vendor_user, manager_user)

        response = await client.get("/api/v1/vendor/analytics", headers=auth_headers(vendor_user))

        assert response.status_code == 200
        body = response.json()
        assert body["total_applications"] == 1
        assert body["active_applications"] == 1
        assert body["total_revenue"] == 12000
        assert body["pending_payments"] == 48000
        assert body["next_payment_due"] is not None

    async def test_station_analytics(self, client, station, vendor_user, manager_user) -> None:
        await _approve(client, vendor_user, manager_user)
        rent = await _payment(client, manager_user, "RENT")
        await client.post(
            f"/api/v1/station-manager/payments/{rent['id']}/record",
            json={"paid_amount": "12000", "mode": "CASH"},
            headers=auth_headers(manager_user),
        )

        response = await client.get("/api/v1/station-manager/analytics", headers=auth_headers(manager_user))

        assert response.status_code == 200
        body = response.json()
        assert body["revenue_collected"] == 12000
        assert body["pending_dues"] == 36000
        assert body["total_shops"] == 2
        assert body["allocated_shops"] == 1
        assert body["occupancy_rate"] == 50.0
        assert body["applications_by_status"] == {"APPROVED": 1}
        assert len(body["monthly_collections"]) == 6
        assert body["monthly_collections"][-1]["collected"] == 12000

    async def test_manager_stats(self, client, station, vendor_user, manager_user) -> None:
        application_id = await _apply(client, vendor_user)

        response = await client.get("/api/v1/station-manager/stats", headers=auth_headers(manager_user))

        assert response.status_code == 200
        body = response.json()
        assert body["applications_by_status"] == {"SUBMITTED": 1}
        assert body["total_applications"] == 1
        assert body["active_licenses"] == 0
        assert [a["id"] for a in body["recent_applications"]] == [application_id]

    async def test_manager_stats_count_licenses(self, client, station, vendor_user, manager_user) -> None:
        await _approve(client, vendor_user, manager_user)

        response = await client.get("/api/v1/station-manager/stats", headers=auth_headers(manager_user))

        body = response.json()
        assert body["licenses_by_status"] == {"ACTIVE": 1}
        assert body["active_licenses"] == 1
        assert body["recent_applications"] == []


class TestShopName:
    """Renaming the shop of an application."""

    async def test_rename_open_application(self, client, station, vendor_user) -> None:
        application_id = await _apply(client, vendor_user)

        response = await client.patch(
            f"/api/v1/vendor/applications/{application_id}/shop-name",
            json={"shop_name": "  Masala Chai Point  "},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 200
        assert response.json()["shop_name"] == "Masala Chai Point"

    async def test_rename_refused_after_rejection(self, client, station, vendor_user, manager_user) -> None:
        application_id = await _apply(client, vendor_user)
        await client.post(
            f"/api/v1/station-manager/applications/{application_id}/reject",
            json={"rejection_reason": "Shop reserved"},
            headers=auth_headers(manager_user),
        )

        response = await client.patch(
            f"/api/v1/vendor/applications/{application_id}/shop-name",
            json={"shop_name": "New Name"},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert response.json()["current_status"] == "REJECTED"

    async def test_rename_refused_after_approval(self, client, station, vendor_user, manager_user) -> None:
        approval = await _approve(client, vendor_user, manager_user)

        response = await client.patch(
            f"/api/v1/vendor/applications/{approval['application_id']}/shop-name",
            json={"shop_name": "New Name"},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert response.json()["current_status"] == "APPROVED"


class TestInspectionRules:
    """Inspections are only logged against valid licenses."""

    async def test_revoked_license_cannot_be_inspected(
        self, client, station, vendor_user, manager_user, admin_user
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        await client.post(
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
        login = await client.post(
            "/api/v1/auth/login",
            json={"email": "inspector@vendorvault.in", "password": TEST_PASSWORD},
        )
        inspector_headers = {"Authorization": f"Bearer {login.json()['token']}"}
        await _admin_action(client, admin_user, approval["license"]["id"], "REVOKE", "Unpaid dues")

        response = await client.post(
            "/api/v1/inspector/inspections",
            json={"license_number": approval["license"]["license_number"], "compliance_status": "COMPLIANT"},
            headers=inspector_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Can only inspect approved licenses"


class TestPaymentRules:
    """Closed payments accept no further records."""

    async def test_paid_payment_rejects_records(self, client, station, vendor_user, manager_user) -> None:
        await _approve(client, vendor_user, manager_user)
        rent = await _payment(client, manager_user, "RENT")
        await client.post(
            f"/api/v1/station-manager/payments/{rent['id']}/record",
            json={"paid_amount": "12000", "mode": "UPI"},
            headers=auth_headers(manager_user),
        )

        response = await client.post(
            f"/api/v1/station-manager/payments/{rent['id']}/record",
            json={"paid_amount": "100", "mode": "CASH"},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 400
        assert response.json()["current_status"] == "PAID"

    async def test_waived_payment_rejects_records(
        self, client, station, vendor_user, manager_user, db_session
    ) -> None:
        await _approve(client, vendor_user, manager_user)
        deposit = await _payment(client, manager_user, "SECURITY_DEPOSIT")
        await db_session.execute(
            update(VendorPaymentORM).where(VendorPaymentORM.id == UUID(deposit["id"])).values(status="WAIVED")
        )
        await db_session.commit()

        response = await client.post(
            f"/api/v1/station-manager/payments/{deposit['id']}/record",
            json={"paid_amount": "100", "mode": "CASH"},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 400
        assert response.json()["current_status"] == "WAIVED"


class TestLicenseAdministration:
    """Railway admin revoking and reactivating licenses."""

    async def test_revoke_then_reactivate(
        self, client, station, vendor_user, manager_user, admin_user
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        license_id = approval["license"]["id"]
        number = approval["license"]["license_number"]

        revoked = await _admin_action(client, admin_user, license_id, "REVOKE", "  Subletting detected ")
        assert revoked.status_code == 200
        assert revoked.json()["status"] == "REVOKED"
        assert revoked.json()["revocation_reason"] == "Subletting detected"
        assert (await client.get(f"/api/v1/verify/{number}")).json()["is_valid"] is False

        reactivated = await _admin_action(client, admin_user, license_id, "REACTIVATE")
        assert reactivated.status_code == 200
        assert reactivated.json()["status"] == "APPROVED"
        assert reactivated.json()["revocation_reason"] is None
        assert (await client.get(f"/api/v1/verify/{number}")).json()["is_valid"] is True

    async def test_revoke_requires_reason(self, client, station, vendor_user, manager_user, admin_user) -> None:
        approval = await _approve(client, vendor_user, manager_user)

        response = await _admin_action(client, admin_user, approval["license"]["id"], "REVOKE", "   ")

        assert response.status_code == 400
        assert response.json()["field"] == "reason"

    async def test_manager_cannot_revoke(self, client, station, vendor_user, manager_user) -> None:
        approval = await _approve(client, vendor_user, manager_user)

        response = await _admin_action(client, manager_user, approval["license"]["id"], "REVOKE", "No")

        assert response.status_code == 403


class TestLicenseExpiry:
    """Expiry on read and expiry warnings."""

    async def test_verification_expires_overdue_license(
        self, client, station, vendor_user, manager_user, db_session
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        number = approval["license"]["license_number"]
        await db_session.execute(
            update(LicenseORM)
            .where(LicenseORM.license_number == number)
            .values(expires_at=utcnow() - timedelta(days=1))
        )
        await db_session.commit()

        response = await client.get(f"/api/v1/verify/{number}")

        assert response.status_code == 200
        assert response.json()["status"] == "EXPIRED"
        assert response.json()["is_valid"] is False

        licenses = await client.get("/api/v1/vendor/license", headers=auth_headers(vendor_user))
        assert licenses.json()["licenses"][0]["status"] == "EXPIRED"

    async def test_expiry_warning_sent_once(
        self, client, station, vendor_user, manager_user, db_session
    ) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        await db_session.execute(
            update(LicenseORM)
            .where(LicenseORM.id == UUID(approval["license"]["id"]))
            .values(expires_at=utcnow() + timedelta(days=10))
        )
        await db_session.commit()

        service = LicenseService(db_session)
        assert await service.warn_expiring_licenses() == 1
        await db_session.commit()
        assert await service.warn_expiring_licenses() == 0
        await db_session.commit()

        notifications = (await client.get("/api/v1/notifications", headers=auth_headers(vendor_user))).json()
        warnings = [n for n in notifications["notifications"] if n["title"] == "License Expiring Soon"]
        assert len(warnings) == 1


class TestPublicVerificationViewer:
    """Vendor contact details on the verification page."""

    async def test_phone_shown_to_staff_only(self, client, station, vendor_user, manager_user) -> None:
        approval = await _approve(client, vendor_user, manager_user)
        url = f"/api/v1/verify/{approval['license']['license_number']}"

        staff = await client.get(url, headers=auth_headers(manager_user))
        assert staff.json()["vendor_phone"] == "9876543210"

        anonymous = await client.get(url)
        assert anonymous.json()["vendor_phone"] is None

        vendor = await client.get(url, headers=auth_headers(vendor_user))
        assert vendor.json()["vendor_phone"] is None

    async def test_bad_token_treated_as_anonymous(self, client, station, vendor_user, manager_user) -> None:
        approval = await _approve(client, vendor_user, manager_user)

        response = await client.get(
            f"/api/v1/verify/{approval['license']['license_number']}",
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 200
        assert response.json()["vendor_phone"] is None


class TestShopAllocation:
    """A shop holds at most one valid license."""

    async def test_second_vendor_cannot_take_licensed_shop(
        self, client, station, vendor_user, manager_user, db_session
    ) -> None:
        await _approve(client, vendor_user, manager_user)
        other = await create_user(db_session, UserRole.VENDOR, "other@vendorvault.in", "Other Vendor")

        response = await client.post(
            "/api/v1/station-manager/applications/"
            f"{await _apply(client, other)}/approve",
            json={},
            headers=auth_headers(manager_user),
        )
        assert response.status_code == 400
        assert "missing_verifications" in response.json()

        for document_type in REQUIRED_DOCUMENTS:
            document_id = await _upload(client, other, document_type)
            await client.patch(
                f"/api/v1/station-manager/documents/{document_id}/verify",
                json={"verified": True},
                headers=auth_headers(manager_user),
            )
        applications = await client.get("/api/v1/vendor/applications", headers=auth_headers(other))
        application_id = applications.json()["applications"][0]["id"]

        response = await client.post(
            f"/api/v1/station-manager/applications/{application_id}/approve",
            json={},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Shop is already allocated to a licensed vendor"
        assert response.json()["shop_id"] == SHOP_ID
