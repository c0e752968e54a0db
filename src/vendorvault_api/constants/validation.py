"""Centralized validation constants for the VendorVault API.

This module provides a single source of truth for validation patterns,
limits and business defaults used across routers and services.
"""

import math
import re
from typing import Final

# =============================================================================
# Identity Patterns
# =============================================================================

AADHAAR_LENGTH: Final[int] = 12
PAN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
PHONE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[6-9]\d{9}$")
PHONE_DIGITS_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d{10}$")
PINCODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d{6}$")
IFSC_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")
GST_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\d{2}[A-Z]{5}\d{4}[A-Z][1-9A-Z]Z[0-9A-Z]$"
)
FSSAI_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d{14}$")
STATION_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z]{2,5}$")

MIN_PASSWORD_LENGTH: Final[int] = 8

# =============================================================================
# Pagination
# =============================================================================

DEFAULT_PAGE_SIZE: Final[int] = 10
MAX_PAGE_SIZE: Final[int] = 100
DEFAULT_NOTIFICATION_LIMIT: Final[int] = 50
STATION_SEARCH_LIMIT: Final[int] = 20

# =============================================================================
# Licensing
# =============================================================================

LICENSE_NUMBER_PREFIX: Final[str] = "RVL"
DEFAULT_LICENSE_VALIDITY_MONTHS: Final[int] = 12
LICENSE_EXPIRY_WARNING_DAYS: Final[int] = 30
SECURITY_DEPOSIT_MONTHS: Final[int] = 3
APPLICATION_TERM_DAYS: Final[int] = 365
FIRST_RENT_DUE_DAYS: Final[int] = 30
MAX_COUNTER_OFFERS: Final[int] = 10

STANDARD_AGREEMENT_TERMS: Final[tuple[str, ...]] = (
    "Monthly rent is payable on or before the due date of each billing month.",
    "The security deposit is refundable at the end of the agreement, less any dues.",
    "The vendor shall not encroach beyond the allotted shop area.",
    "Subletting of the shop is not permitted.",
    "The shop is open to inspection by railway officials at any time.",
    "The vendor shall comply with all railway rules and regulations.",
)

# =============================================================================
# Profile Completion and Risk
# =============================================================================

PROFILE_COMPLETION_WEIGHTS: Final[dict[str, int]] = {
    "PERSONAL": 20,
    "BUSINESS": 25,
    "BANK": 15,
    "FINANCIAL": 10,
    "FOOD_LICENSE": 15,
    "POLICE": 10,
    "RAILWAY_DECLARATION": 5,
}

LOW_TURNOVER_THRESHOLD: Final[int] = 100_000

# =============================================================================
# Station Layout
# =============================================================================

MAX_SHOP_AREA_M2: Final[float] = 10.0
MIN_SHOP_UNITS: Final[int] = 50
MAX_SHOP_UNITS: Final[int] = 200
MAX_LAYOUT_OFFENDER_SAMPLES: Final[int] = 5
AREA_TOLERANCE: Final[float] = 1e-9

DEFAULT_UNIT_TO_METERS: Final[float] = math.sqrt(10) / 200
DEFAULT_CANVAS_SETTINGS: Final[dict[str, int]] = {"width": 2000, "height": 1200, "grid_size": 20}
DEFAULT_LAYOUT_PRICING: Final[dict[str, float]] = {
    "unit_to_meters": DEFAULT_UNIT_TO_METERS,
    "price_per_100x100_single": 5000,
    "price_per_100x100_dual": 7500,
    "security_deposit_rate": 3,
}
LAYOUT_VERSION: Final[str] = "1.0.0"

# =============================================================================
# Uploads
# =============================================================================

ALLOWED_UPLOAD_CONTENT_TYPES: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/webp", "application/pdf"}
)
DEFAULT_UPLOAD_FOLDER: Final[str] = "documents"
PUBLIC_UPLOAD_FOLDER: Final[str] = "applications"
ALLOWED_UPLOAD_FOLDERS: Final[frozenset[str]] = frozenset(
    {"documents", "profiles", "applications", "verification"}
)
