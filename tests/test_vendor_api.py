"""Vendor profile, verification section and upload API tests."""

from conftest import SHOP_ID, auth_headers

BANK_SECTION = {
    "account_holder_name": "Ravi Kumar",
    "account_number": "123456789012",
    "ifsc_code": "sbin0001234",
    "bank_name": "State Bank of India",
}

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestVendorProfile:
    """Business profile and personal details."""

    async def test_profile_missing_until_created(self, client, vendor_user) -> None:
        response = await client.get("/api/v1/vendor/profile", headers=auth_headers(vendor_user))

        assert response.status_code == 404

    async def test_create_profile_requires_business_name(self, client, vendor_user) -> None:
        response = await client.put(
            "/api/v1/vendor/profile",
            json={"business_type": "tea"},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "business_name"

    async def test_personal_details_normalized(self, client, vendor_user) -> None:
        response = await client.put(
            "/api/v1/vendor/profile/personal",
            json={"aadhaar_number": "1234 5678 9012", "pan_number": "abcde1234f", "address": "  Paharganj  "},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["aadhaar_number"] == "123456789012"
        assert body["pan_number"] == "ABCDE1234F"
        assert body["address"] == "Paharganj"
        assert body["aadhaar_verified"] is False

    async def test_invalid_aadhaar_rejected(self, client, vendor_user) -> None:
        response = await client.put(
            "/api/v1/vendor/profile/personal",
            json={"aadhaar_number": "12345"},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400


class TestVerificationSections:
    """Submitting sections and tracking verification progress."""

    async def test_new_vendor_status(self, client, vendor_user) -> None:
        response = await client.get("/api/v1/vendor/verification-status", headers=auth_headers(vendor_user))

        assert response.status_code == 200
        body = response.json()
        assert body["total_required"] == 6
        assert body["completed_count"] == 0
        assert body["can_apply"] is False
        assert body["sections"]["food_license"]["status"] == "NOT_REQUIRED"
        assert body["sections"]["bank"]["status"] == "INCOMPLETE"

    async def test_submit_bank_section(self, client, vendor_user) -> None:
        headers = auth_headers(vendor_user)
        response = await client.put("/api/v1/vendor/profile/sections/bank", json=BANK_SECTION, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["section"] == "BANK"
        assert body["data"]["ifsc_code"] == "SBIN0001234"
        assert body["verified"] is False

        status = (await client.get("/api/v1/vendor/verification-status", headers=headers)).json()
        assert status["sections"]["bank"]["status"] == "PENDING"
        assert status["completed_count"] == 1

    async def test_invalid_ifsc_rejected(self, client, vendor_user) -> None:
        payload = {**BANK_SECTION, "ifsc_code": "NOTANIFSC"}
        response = await client.put(
            "/api/v1/vendor/profile/sections/bank",
            json=payload,
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "ifsc_code"

    async def test_unknown_section_rejected(self, client, vendor_user) -> None:
        response = await client.put(
            "/api/v1/vendor/profile/sections/horoscope",
            json={},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "section"

    async def test_business_section_creates_profile(self, client, vendor_user) -> None:
        headers = auth_headers(vendor_user)
        response = await client.put(
            "/api/v1/vendor/profile/sections/business",
            json={
                "business_name": "Ravi Tea Stall",
                "business_type": "tea",
                "business_category": "FOOD",
                "years_of_experience": 4,
            },
            headers=headers,
        )
        assert response.status_code == 200

        profile = await client.get("/api/v1/vendor/profile", headers=headers)
        assert profile.status_code == 200
        assert profile.json()["business_name"] == "Ravi Tea Stall"

        status = (await client.get("/api/v1/vendor/verification-status", headers=headers)).json()
        assert status["total_required"] == 7
        assert status["sections"]["food_license"]["status"] == "INCOMPLETE"

    async def test_can_apply_lists_missing_sections(self, client, vendor_user) -> None:
        response = await client.get("/api/v1/vendor/can-apply", headers=auth_headers(vendor_user))

        assert response.status_code == 200
        body = response.json()
        assert body["can_apply"] is False
        assert "personal" in body["missing"]
        assert "food_license" not in body["missing"]


class TestManagerVerification:
    """Station managers verifying vendor sections."""

    async def test_manager_verifies_applicant_section(self, client, station, vendor_user, manager_user) -> None:
        vendor_headers = auth_headers(vendor_user)
        await client.put("/api/v1/vendor/profile/sections/bank", json=BANK_SECTION, headers=vendor_headers)
        applied = await client.post(
            "/api/v1/vendor/apply",
            json={
                "station_code": "NDLS",
                "platform_number": "1",
                "shop_id": SHOP_ID,
                "shop_name": "Chai Point",
                "proposed_monthly_rent": "12000",
            },
            headers=vendor_headers,
        )
        assert applied.status_code == 201

        response = await client.patch(
            "/api/v1/station-manager/vendor-verification",
            json={"vendor_id": str(vendor_user.id), "verification_type": "bank", "verified": True},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 200
        assert response.json()["sections"]["bank"]["status"] == "VERIFIED"

        notifications = (await client.get("/api/v1/notifications", headers=vendor_headers)).json()
        assert any(n["type"] == "DOCUMENT_VERIFIED" for n in notifications["notifications"])

    async def test_manager_cannot_verify_non_applicant(self, client, station, vendor_user, manager_user) -> None:
        await client.put(
            "/api/v1/vendor/profile/sections/bank",
            json=BANK_SECTION,
            headers=auth_headers(vendor_user),
        )

        response = await client.patch(
            "/api/v1/station-manager/vendor-verification",
            json={"vendor_id": str(vendor_user.id), "verification_type": "bank", "verified": True},
            headers=auth_headers(manager_user),
        )

        assert response.status_code == 403


class TestUploads:
    """Local file uploads."""

    async def test_upload_and_download(self, client, vendor_user) -> None:
        response = await client.post(
            "/api/v1/upload",
            files={"file": ("receipt.png", PNG_BYTES, "image/png")},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["file_name"] == "receipt.png"
        assert body["size"] == len(PNG_BYTES)
        assert body["url"].startswith("/api/v1/upload/files/documents/")

        download = await client.get(body["url"])
        assert download.status_code == 200
        assert download.content == PNG_BYTES
        assert download.headers["content-type"] == "image/png"

    async def test_upload_requires_authentication(self, client) -> None:
        response = await client.post(
            "/api/v1/upload",
            files={"file": ("receipt.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 401

    async def test_disallowed_type_rejected(self, client, vendor_user) -> None:
        response = await client.post(
            "/api/v1/upload",
            files={"file": ("notes.txt", b"plain text", "text/plain")},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "file"

    async def test_content_must_match_type(self, client, vendor_user) -> None:
        response = await client.post(
            "/api/v1/upload",
            files={"file": ("fake.png", b"definitely not a png", "image/png")},
            headers=auth_headers(vendor_user),
        )

        assert response.status_code == 400

    async def test_unknown_file_not_found(self, client) -> None:
        response = await client.get("/api/v1/upload/files/documents/missing.png")

        assert response.status_code == 404
