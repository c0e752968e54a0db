"""Station manager, negotiation, notification and railway admin API tests."""

from conftest import SHOP_ID, auth_headers

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
        "infrastructure_blocks": [{"type": "STAIRS", "x": 400, "y": 0}],
        "canvas_settings": {"width": 2000, "height": 1200, "grid_size": 20},
    }


async def _apply(client, vendor_user) -> str:
    response = await client.post("/api/v1/vendor/apply", json=APPLICATION, headers=auth_headers(vendor_user))
    assert response.status_code == 201
    return response.json()["application_id"]


class TestStationLayout:
    """Saving the station layout."""

    async def test_manager_reads_station_summary(self, client, station, manager_user) -> None:
        response = await client.get("/api/v1/station-manager/station", headers=auth_headers(manager_user))

        assert response.status_code == 200
        body = response.json()
        assert body["station"]["station_code"] == "NDLS"
        assert body["layout"]["total_shops"] == 2
        assert body["layout"]["available_shops"] == 2

    async def test_save_replaces_existing_layout(self, client, station, manager_user) -> None:
        layout = _layout(
            {"id": SHOP_ID, "x": 0, "width": 100, "height": 100},
            {"id": "P1-S3", "x": 300, "width": 150, "height": 120},
        )
        response = await client.put(
            "/api/v1/station-manager/layout",
            json=layout,
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 200
        body = response.json()
        assert [shop["id"] for shop in body["platforms"][0]["shops"]] == [SHOP_ID, "P1-S3"]
        assert body["infrastructure_blocks"][0]["type"] == "STAIRS"

    async def test_oversized_shops_rejected(self, client, station, manager_user) -> None:
        layout = _layout(
            {"id": "huge", "x": 0, "width": 300, "height": 100},
            {"id": "tiny", "x": 400, "width": 20, "height": 20},
            {"id": "ok", "x": 500, "width": 100, "height": 100},
        )
        response = await client.put(
            "/api/v1/station-manager/layout",
            json=layout,
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["total_offenders"] == 2
        assert {o["shop_id"] for o in body["offenders"]} == {"huge", "tiny"}

    async def test_vendor_cannot_edit_layout(self, client, station, vendor_user) -> None:
        response = await client.put(
            "/api/v1/station-manager/layout",
            json=_layout(),
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 403

    async def test_manager_without_station(self, client, db_session) -> None:
        from conftest import create_user
        from vendorvault_api.models.domain.user import UserRole

        manager = await create_user(db_session, UserRole.STATION_MANAGER, "nostation@vendorvault.in", "No Station")
        response = await client.get("/api/v1/station-manager/station", headers=auth_headers(manager))

        assert response.status_code == 404


class TestNegotiation:
    """Rent negotiation between vendor and station manager."""

    async def test_counter_offer_then_agreement(self, client, station, vendor_user, manager_user) -> None:
        application_id = await _apply(client, vendor_user)

        offer = await client.post(
            f"/api/v1/vendor/negotiation/{application_id}",
            json={"message": "Footfall on platform 1 is low", "proposed_rent": "10000"},
            headers=auth_headers(vendor_user),
        )
        assert offer.status_code == 200
        room = offer.json()
        assert room["status"] == "ACTIVE"
        assert room["counter_offer_count"] == 1
        assert room["current_offer"]["rent"] == 10000
        assert room["current_offer"]["proposed_by"] == "VENDOR"

        application = await client.get(
            f"/api/v1/vendor/applications/{application_id}",
            headers=auth_headers(vendor_user),
        )
        assert application.json()["status"] == "NEGOTIATION"

        agreed = await client.post(
            f"/api/v1/station-manager/negotiation/{application_id}",
            json={"action": "AGREE", "proposed_rent": "11000"},
            headers=auth_headers(manager_user),
        )
        assert agreed.status_code == 200
        assert agreed.json()["status"] == "AGREED"
        assert agreed.json()["final_agreement"]["agreed_rent"] == 11000

        closed = await client.post(
            f"/api/v1/vendor/negotiation/{application_id}",
            json={"message": "One more thing"},
            headers=auth_headers(vendor_user),
        )
        assert closed.status_code == 400

        application = await client.get(
            f"/api/v1/vendor/applications/{application_id}",
            headers=auth_headers(vendor_user),
        )
        assert application.json()["final_agreed_rent"] == 11000

    async def test_empty_message_rejected(self, client, station, vendor_user) -> None:
        application_id = await _apply(client, vendor_user)

        response = await client.post(
            f"/api/v1/vendor/negotiation/{application_id}",
            json={},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "message"

    async def test_agree_requires_rent(self, client, station, vendor_user, manager_user) -> None:
        application_id = await _apply(client, vendor_user)

        response = await client.post(
            f"/api/v1/station-manager/negotiation/{application_id}",
            json={"action": "AGREE"},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 400

    async def test_other_vendor_cannot_open_room(self, client, station, vendor_user, db_session) -> None:
        from conftest import create_user
        from vendorvault_api.models.domain.user import UserRole

        application_id = await _apply(client, vendor_user)
        other = await create_user(db_session, UserRole.VENDOR, "other@vendorvault.in", "Other Vendor")

        response = await client.get(
            f"/api/v1/vendor/negotiation/{application_id}",
            headers=auth_headers(other),
        )

        assert response.status_code == 404


class TestNotifications:
    """In-app notifications."""

    async def test_read_and_delete(self, client, station, vendor_user, manager_user) -> None:
        await _apply(client, vendor_user)
        headers = auth_headers(manager_user)

        listing = await client.get("/api/v1/notifications", headers=headers)
        assert listing.status_code == 200
        notification = listing.json()["notifications"][0]
        assert notification["read"] is False
        assert notification["type"] == "APPLICATION_SUBMITTED"

        marked = await client.patch(f"/api/v1/notifications/{notification['id']}/read", headers=headers)
        assert marked.status_code == 200

        unread = await client.get("/api/v1/notifications", params={"unread_only": True}, headers=headers)
        assert unread.json()["unread_count"] == 0
        assert unread.json()["notifications"] == []

        deleted = await client.delete(f"/api/v1/notifications/{notification['id']}", headers=headers)
        assert deleted.status_code == 204

        missing = await client.delete(f"/api/v1/notifications/{notification['id']}", headers=headers)
        assert missing.status_code == 404

    async def test_cannot_read_others_notifications(self, client, station, vendor_user, manager_user) -> None:
        await _apply(client, vendor_user)
        listing = await client.get("/api/v1/notifications", headers=auth_headers(manager_user))
        notification_id = listing.json()["notifications"][0]["id"]

        response = await client.patch(
            f"/api/v1/notifications/{notification_id}/read",
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 404


class TestRailwayAdmin:
    """Platform administration."""

    async def test_lists_stations_and_users(self, client, station, admin_user) -> None:
        headers = auth_headers(admin_user)

        stations = await client.get("/api/v1/railway-admin/stations", headers=headers)
        assert stations.status_code == 200
        assert stations.json()["pagination"]["total"] == 1

        managers = await client.get(
            "/api/v1/railway-admin/users",
            params={"role": "STATION_MANAGER"},
            headers=headers,
        )
        assert managers.status_code == 200
        assert [u["email"] for u in managers.json()["users"]] == ["manager@vendorvault.in"]

    async def test_station_update(self, client, station, admin_user) -> None:
        response = await client.patch(
            f"/api/v1/railway-admin/stations/{station.id}",
            json={"operational_status": "RENOVATION"},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        assert response.json()["operational_status"] == "RENOVATION"

        public = await client.get("/api/v1/stations")
        assert public.json()["stations"] == []

    async def test_unknown_station(self, client, admin_user) -> None:
        response = await client.get(
            "/api/v1/railway-admin/stations/00000000-0000-0000-0000-000000000000",
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 404

    async def test_invalid_uuid_rejected(self, client, admin_user) -> None:
        response = await client.get(
            "/api/v1/railway-admin/stations/'; DROP TABLE stations; --",
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 400

    async def test_manager_cannot_use_admin_routes(self, client, station, manager_user) -> None:
        response = await client.get("/api/v1/railway-admin/stations", headers=auth_headers(manager_user))

        assert response.status_code == 403


class TestHealth:
    """Liveness and response headers."""

    async def test_health(self, client) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
