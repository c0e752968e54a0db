"""Tests for the pure business rules behind the services."""

import base64
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from vendorvault_api.constants.validation import DEFAULT_UNIT_TO_METERS
from vendorvault_api.exceptions import ValidationError
from vendorvault_api.models.domain.application import RiskLevel
from vendorvault_api.models.domain.document import SectionStatus
from vendorvault_api.models.domain.payment import PaymentStatus
from vendorvault_api.models.orm.license import LicenseORM
from vendorvault_api.models.orm.user import UserORM
from vendorvault_api.models.orm.vendor import VerificationSectionORM
from vendorvault_api.services.analytics_service import percentage_change
from vendorvault_api.services.inspection_service import parse_compliance_status, parse_license_reference
from vendorvault_api.services.layout_service import (
    effective_max_units,
    find_layout_offenders,
    summarize_layout,
)
from vendorvault_api.services.license_service import (
    build_qr,
    days_to_expiry,
    generate_qr_data_uri,
    is_license_valid,
)
from vendorvault_api.services.payment_service import compute_payment_status
from vendorvault_api.services.verification_service import (
    assess_risk,
    build_verification_status,
    compute_profile_completion,
    is_food_business,
)
from vendorvault_api.utils.dates import add_months
from vendorvault_api.utils.validation import (
    capitalize_name,
    format_address,
    is_valid_fssai,
    is_valid_gst,
    is_valid_ifsc,
    is_valid_mobile,
    is_valid_pincode,
    normalize_station_code,
    password_strength_errors,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _platform(*shops: dict) -> dict:
    return {"id": "p1", "name": "Platform 1", "number": 1, "shops": list(shops)}


def _vendor(verified: bool = True, with_identity: bool = True) -> UserORM:
    return UserORM(
        name="Ravi Kumar",
        aadhaar_number="123456789012" if with_identity else None,
        pan_number="ABCDE1234F" if with_identity else None,
        aadhaar_verified=verified,
        pan_verified=verified,
    )


def _section(name: str, verified: bool = True, **data) -> VerificationSectionORM:
    return VerificationSectionORM(section=name, data=data, verified=verified, rejection_reason=None)


def _sections(*rows: VerificationSectionORM) -> dict[str, VerificationSectionORM]:
    return {row.section: row for row in rows}


class TestShopSizeBounds:
    """Shop size validation of station layouts."""

    def test_default_scale_allows_full_range(self) -> None:
        assert effective_max_units(DEFAULT_UNIT_TO_METERS) == 200

    def test_coarse_scale_shrinks_max_side(self) -> None:
        assert effective_max_units(0.02) == 158

    def test_max_side_never_below_min(self) -> None:
        assert effective_max_units(1.0) == 50

    def test_shops_within_bounds_pass(self) -> None:
        platforms = [
            _platform(
                {"id": "s1", "width": 50, "height": 50},
                {"id": "s2", "width": 200, "height": 200},
                {"id": "s3", "width": 120},
            )
        ]
        assert find_layout_offenders(platforms, DEFAULT_UNIT_TO_METERS) == []

    def test_too_small_and_too_large_shops_reported(self) -> None:
        platforms = [
            _platform(
                {"id": "tiny", "width": 40, "height": 60},
                {"id": "ok", "width": 100, "height": 100},
                {"id": "wide", "width": 201, "height": 100},
            )
        ]
        offenders = find_layout_offenders(platforms, DEFAULT_UNIT_TO_METERS)
        assert [o["shop_id"] for o in offenders] == ["tiny", "wide"]
        assert offenders[0]["platform"] == "Platform 1"

    def test_side_above_scaled_max_reported(self) -> None:
        platforms = [_platform({"id": "s1", "width": 100, "height": 160})]
        offenders = find_layout_offenders(platforms, 0.02)
        assert len(offenders) == 1
        assert offenders[0]["height"] == 160

    def test_missing_height_uses_width(self) -> None:
        platforms = [_platform({"id": "s1", "width": 30})]
        offenders = find_layout_offenders(platforms, DEFAULT_UNIT_TO_METERS)
        assert offenders[0]["height"] == 30

    def test_zero_side_is_not_replaced(self) -> None:
        platforms = [_platform({"id": "flat", "width": 100, "height": 0}, {"id": "thin", "width": 0, "height": 100})]
        offenders = find_layout_offenders(platforms, DEFAULT_UNIT_TO_METERS)
        assert [o["shop_id"] for o in offenders] == ["flat", "thin"]
        assert offenders[0]["height"] == 0
        assert offenders[1]["width"] == 0

    @pytest.mark.parametrize("scale", [0, -0.5])
    def test_non_positive_scale_rejected(self, scale: float) -> None:
        with pytest.raises(ValidationError):
            find_layout_offenders([], scale)

    def test_summary_counts_allocations(self) -> None:
        platforms = [
            _platform({"id": "s1", "is_allocated": True}, {"id": "s2"}),
            _platform({"id": "s3"}),
        ]
        summary = summarize_layout(platforms)
        assert summary.platforms == 2
        assert summary.total_shops == 3
        assert summary.allocated_shops == 1
        assert summary.available_shops == 2


class TestVerificationStatus:
    """Aggregation of vendor verification sections."""

    def test_new_vendor_must_complete_sections(self) -> None:
        status = build_verification_status(_vendor(verified=False, with_identity=False), {})

        assert status.total_required == 6
        assert status.completed_count == 0
        assert status.sections["personal"].status == SectionStatus.INCOMPLETE
        assert status.sections["food_license"].status == SectionStatus.NOT_REQUIRED
        assert status.can_apply is False
        assert status.next_step == "Complete all sections"

    def test_fully_verified_retail_vendor_can_apply(self) -> None:
        sections = _sections(
            _section("BANK"),
            _section("BUSINESS", business_category="RETAIL"),
            _section("POLICE"),
            _section("FINANCIAL"),
            _section("RAILWAY_DECLARATION"),
        )
        status = build_verification_status(_vendor(), sections)

        assert status.all_verified is True
        assert status.can_apply is True
        assert status.verification_percentage == 100
        assert status.next_step == "You can now apply for shops!"

    def test_food_business_requires_food_license(self) -> None:
        sections = _sections(
            _section("BANK"),
            _section("BUSINESS", business_category="FOOD"),
            _section("POLICE"),
            _section("FINANCIAL"),
            _section("RAILWAY_DECLARATION"),
        )
        status = build_verification_status(_vendor(), sections)

        assert is_food_business(sections) is True
        assert status.total_required == 7
        assert status.sections["food_license"].status == SectionStatus.INCOMPLETE
        assert status.verification_percentage == 86
        assert status.can_apply is False

    def test_submitted_but_unverified_waits(self) -> None:
        sections = _sections(
            _section("BANK", verified=False),
            _section("BUSINESS", verified=False, business_category="SERVICE"),
            _section("POLICE", verified=False),
            _section("FINANCIAL", verified=False),
            _section("RAILWAY_DECLARATION", verified=False),
        )
        status = build_verification_status(_vendor(verified=False), sections)

        assert status.all_submitted is True
        assert status.sections["bank"].status == SectionStatus.PENDING
        assert status.next_step == "Wait for verification"

    def test_profile_completion_is_weighted(self) -> None:
        sections = _sections(_section("BUSINESS", business_category="RETAIL"))
        assert compute_profile_completion(_vendor(), sections) == 53

    def test_profile_completion_empty(self) -> None:
        assert compute_profile_completion(_vendor(with_identity=False), {}) == 0


class TestRiskAssessment:
    """Vendor risk scoring."""

    def test_experienced_solvent_vendor_is_low_risk(self) -> None:
        sections = _sections(
            _section("BUSINESS", years_of_experience=5),
            _section("FINANCIAL", annual_turnover="500000", can_pay_security_deposit=True),
        )
        assert assess_risk(sections, fully_verified=True) == RiskLevel.LOW

    def test_unverified_low_turnover_is_medium_risk(self) -> None:
        sections = _sections(
            _section("BUSINESS", years_of_experience=3),
            _section("FINANCIAL", annual_turnover=50000, can_pay_security_deposit=True),
        )
        assert assess_risk(sections, fully_verified=False) == RiskLevel.MEDIUM

    def test_missing_data_is_high_risk(self) -> None:
        assert assess_risk({}, fully_verified=False) == RiskLevel.HIGH


class TestPaymentStatus:
    """Payment status derivation."""

    @pytest.mark.parametrize(
        "paid,due_offset_days,expected",
        [
            (Decimal("0"), 5, PaymentStatus.PENDING),
            (Decimal("0"), -1, PaymentStatus.OVERDUE),
            (Decimal("400"), 5, PaymentStatus.PARTIAL),
            (Decimal("400"), -1, PaymentStatus.OVERDUE),
            (Decimal("1000"), -1, PaymentStatus.PAID),
            (Decimal("1200"), 5, PaymentStatus.PAID),
        ],
    )
    def test_status_from_amounts_and_due_date(
        self, paid: Decimal, due_offset_days: int, expected: PaymentStatus
    ) -> None:
        due = NOW + timedelta(days=due_offset_days)
        assert compute_payment_status(Decimal("1000"), paid, due, "PENDING", NOW) == expected

    def test_waived_is_kept(self) -> None:
        due = NOW - timedelta(days=30)
        assert compute_payment_status(Decimal("1000"), Decimal("0"), due, "WAIVED", NOW) == PaymentStatus.WAIVED


class TestLicenseHelpers:
    """License validity and QR codes."""

    def test_active_license_before_expiry_is_valid(self) -> None:
        license_orm = LicenseORM(status="ACTIVE", expires_at=NOW + timedelta(days=10))
        assert is_license_valid(license_orm, NOW) is True
        assert days_to_expiry(license_orm, NOW) == 10

    def test_expired_date_is_invalid(self) -> None:
        license_orm = LicenseORM(status="ACTIVE", expires_at=NOW - timedelta(days=1))
        assert is_license_valid(license_orm, NOW) is False
        assert days_to_expiry(license_orm, NOW) == -1

    @pytest.mark.parametrize("status", ["PENDING", "REVOKED", "SUSPENDED", "EXPIRED"])
    def test_non_trading_status_is_invalid(self, status: str) -> None:
        license_orm = LicenseORM(status=status, expires_at=None)
        assert is_license_valid(license_orm, NOW) is False

    def test_license_without_expiry(self) -> None:
        license_orm = LicenseORM(status="APPROVED", expires_at=None)
        assert is_license_valid(license_orm, NOW) is True
        assert days_to_expiry(license_orm, NOW) is None

    def test_qr_is_png_data_uri(self) -> None:
        uri = generate_qr_data_uri("https://vendorvault.in/verify/LIC-NDLS-0001")
        prefix = "data:image/png;base64,"
        assert uri.startswith(prefix)
        assert base64.b64decode(uri[len(prefix):]).startswith(b"\x89PNG")

    def test_qr_metadata_points_at_verification_url(self) -> None:
        _, metadata = build_qr("LIC-NDLS-0001")
        assert metadata["license_number"] == "LIC-NDLS-0001"
        assert metadata["verification_url"].endswith("/verify/LIC-NDLS-0001")


class TestInspectionParsing:
    """Scanner input parsing."""

    def test_license_number_is_uppercased(self) -> None:
        assert parse_license_reference(" lic-ndls-0001 ", None) == "LIC-NDLS-0001"

    def test_qr_url_resolves_to_number(self) -> None:
        qr = "https://vendorvault.in/verify/LIC-NDLS-0001?src=qr"
        assert parse_license_reference(None, qr) == "LIC-NDLS-0001"

    def test_missing_reference_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_license_reference(None, "  ")

    def test_compliance_status_is_case_insensitive(self) -> None:
        assert parse_compliance_status("non_compliant") == "NON_COMPLIANT"


class TestValidationUtils:
    """Indian identity and address formats."""

    def test_mobile_numbers(self) -> None:
        assert is_valid_mobile("98765 43210") is True
        assert is_valid_mobile("5876543210") is False
        assert is_valid_mobile("98765") is False

    def test_bank_and_business_identifiers(self) -> None:
        assert is_valid_ifsc("sbin0001234") is True
        assert is_valid_ifsc("SBIN1001234") is False
        assert is_valid_gst("07ABCDE1234F1Z5") is True
        assert is_valid_fssai("12345678901234") is True
        assert is_valid_fssai("1234567890123") is False
        assert is_valid_pincode("110001") is True
        assert is_valid_pincode("11001") is False

    def test_station_code_normalized(self) -> None:
        assert normalize_station_code(" ndls ") == "NDLS"

    def test_password_strength(self) -> None:
        assert password_strength_errors("Str0ngPassword") == []
        assert len(password_strength_errors("weak")) == 3

    def test_name_and_address_formatting(self) -> None:
        assert capitalize_name("ravi  KUMAR") == "Ravi Kumar"
        assert format_address("12 MG Road", "Delhi", "110001") == "12 MG Road, Delhi - 110001"
        assert format_address(None, None, "110001") == "110001"
        assert format_address(None, " ", None) is None

    def test_add_months_clamps_day(self) -> None:
        start = datetime(2025, 1, 31, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2025, 2, 28, tzinfo=timezone.utc)
        assert add_months(start, 12) == datetime(2026, 1, 31, tzinfo=timezone.utc)

    def test_percentage_change(self) -> None:
        assert percentage_change(150, 100) == 50.0
        assert percentage_change(50, 100) == -50.0
        assert percentage_change(10, 0) == 0.0


class TestPasswordService:
    """Bcrypt hashing."""

    def test_hash_and_verify(self) -> None:
        from vendorvault_api.security.password import PasswordService

        service = PasswordService()
        hashed = service.hash_password("Chai2Garam")

        assert service.verify_password("Chai2Garam", hashed) is True
        assert service.verify_password("wrong", hashed) is False
        assert service.needs_rehash(hashed) is False

    def test_missing_hash_never_matches(self) -> None:
        from vendorvault_api.security.password import PasswordService

        assert PasswordService().verify_password("vendorvault-dummy-password", None) is False

    def test_low_cost_hash_needs_rehash(self) -> None:
        import bcrypt

        from vendorvault_api.security.password import PasswordService

        weak = bcrypt.hashpw(b"Chai2Garam", bcrypt.gensalt(rounds=4)).decode()

        assert PasswordService.needs_rehash(weak) is True
        assert PasswordService.needs_rehash("not-a-hash") is True
        assert PasswordService().verify_password("Chai2Garam", "not-a-hash") is False
