"""Document and verification domain enums."""

from enum import StrEnum


class DocumentType(StrEnum):
    """Uploaded vendor document types."""

    AADHAAR = "AADHAAR"
    PAN = "PAN"
    BANK_STATEMENT = "BANK_STATEMENT"
    FSSAI = "FSSAI"
    POLICE_VERIFICATION = "POLICE_VERIFICATION"
    RAILWAY_DECLARATION = "RAILWAY_DECLARATION"
    BUSINESS_PHOTO = "BUSINESS_PHOTO"
    ID_PROOF = "ID_PROOF"
    PHOTO = "PHOTO"
    EXISTING_LICENSE = "EXISTING_LICENSE"
    OTHER = "OTHER"


# Documents that must be verified before a station manager can approve
REQUIRED_DOCUMENT_TYPES: tuple[DocumentType, ...] = (
    DocumentType.AADHAAR,
    DocumentType.PAN,
    DocumentType.BANK_STATEMENT,
    DocumentType.POLICE_VERIFICATION,
    DocumentType.RAILWAY_DECLARATION,
)


class DocumentStatus(StrEnum):
    """Document review status."""

    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class VerificationSection(StrEnum):
    """Vendor profile sections submitted for verification."""

    BANK = "BANK"
    BUSINESS = "BUSINESS"
    FINANCIAL = "FINANCIAL"
    FOOD_LICENSE = "FOOD_LICENSE"
    POLICE = "POLICE"
    RAILWAY_DECLARATION = "RAILWAY_DECLARATION"


class VerificationType(StrEnum):
    """Items a station manager can verify on a vendor profile."""

    BANK = "bank"
    BUSINESS = "business"
    FOOD_LICENSE = "food_license"
    POLICE = "police"
    FINANCIAL = "financial"
    RAILWAY_DECLARATION = "railway_declaration"
    AADHAAR = "aadhaar"
    PAN = "pan"


class SectionStatus(StrEnum):
    """Aggregated status of one verification section."""

    VERIFIED = "VERIFIED"
    PENDING = "PENDING"
    INCOMPLETE = "INCOMPLETE"
    NOT_REQUIRED = "NOT_REQUIRED"


class BusinessCategory(StrEnum):
    """Business category, FOOD requires an FSSAI license."""

    FOOD = "FOOD"
    RETAIL = "RETAIL"
    SERVICE = "SERVICE"


class BusinessType(StrEnum):
    """Vendor business type."""

    TEA = "tea"
    FOOD = "food"
    RETAIL = "retail"
    BOOKS = "books"
    SERVICES = "services"
    OTHER = "other"
