"""Domain-specific exceptions for the VendorVault API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses, avoiding string matching in routers. Each family
carries the HTTP status code the error handler maps it to.
"""

from typing import Any


class VendorVaultError(Exception):
    """Base exception for all VendorVault API errors."""

    status_code: int = 500

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Bad Request Errors (400)
# =============================================================================


class BadRequestError(VendorVaultError):
    """Base class for invalid request errors."""

    status_code = 400


class ValidationError(BadRequestError):
    """Raised when input fails a business validation rule."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, details)


class MissingFieldsError(BadRequestError):
    """Raised when required fields are absent from a request."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__("All fields are required.", {"missing_fields": fields})


class InvalidStatusTransitionError(BadRequestError):
    """Raised when an entity is not in a state that allows the operation."""

    def __init__(self, entity: str, current_status: str, action: str) -> None:
        message = f"Cannot {action} {entity} with status {current_status}"
        super().__init__(message, {"current_status": current_status})


class MissingVerificationsError(BadRequestError):
    """Raised when a vendor lacks verified documents required for approval."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            "Vendor documents are not fully verified",
            {"missing_verifications": missing},
        )


class LayoutValidationError(BadRequestError):
    """Raised when a station layout contains out-of-bounds shops."""

    def __init__(self, message: str, offenders: list[dict[str, Any]], total: int) -> None:
        super().__init__(message, {"offenders": offenders, "total_offenders": total})


class ShopAlreadyLicensedError(BadRequestError):
    """Raised when approving an application for a shop that already holds a valid license."""

    def __init__(self, shop_id: str) -> None:
        super().__init__("Shop is already allocated to a licensed vendor", {"shop_id": shop_id})


class EmailAlreadyRegisteredError(BadRequestError):
    """Raised when registering with an email that is already in use."""

    def __init__(self, email: str | None = None) -> None:
        super().__init__("Email already registered")


# =============================================================================
# Authentication Errors (401)
# =============================================================================


class UnauthorizedError(VendorVaultError):
    """Base class for authentication failures."""

    status_code = 401

    def __init__(self, message: str = "Authentication required", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)


class InvalidCredentialsError(UnauthorizedError):
    """Raised when email or password do not match."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class InvalidTokenError(UnauthorizedError):
    """Raised when a JWT cannot be decoded or has expired."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired token")


# =============================================================================
# Authorization Errors (403)
# =============================================================================


class ForbiddenError(VendorVaultError):
    """Base class for authorization failures."""

    status_code = 403

    def __init__(self, message: str = "Access denied", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)


class InsufficientRoleError(ForbiddenError):
    """Raised when the user's role does not grant access."""

    def __init__(self, required: list[str] | None = None) -> None:
        details = {"required_roles": required} if required else {}
        super().__init__("Insufficient role", details)


class AccountInactiveError(ForbiddenError):
    """Raised when a non-active account tries to authenticate."""

    def __init__(self, pending: bool = False) -> None:
        message = "Account is pending approval" if pending else "Account is not active"
        super().__init__(message)


class LayoutLockedError(ForbiddenError):
    """Raised when saving a locked station layout."""

    def __init__(self) -> None:
        super().__init__("Layout is locked")


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(VendorVaultError):
    """Base class for resource not found errors."""

    status_code = 404

    def __init__(self, message: str = "Resource not found", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)


class UserNotFoundError(NotFoundError):
    """Raised when a user cannot be found."""

    def __init__(self, user_id: str | None = None) -> None:
        details = {"user_id": str(user_id)} if user_id else {}
        super().__init__("User not found", details)


class VendorProfileNotFoundError(NotFoundError):
    """Raised when a vendor has no business profile yet."""

    def __init__(self) -> None:
        super().__init__("Vendor profile not found")


class StationNotFoundError(NotFoundError):
    """Raised when a station cannot be found."""

    def __init__(self, station: str | None = None) -> None:
        details = {"station": str(station)} if station else {}
        super().__init__("Station not found", details)


class LayoutNotFoundError(NotFoundError):
    """Raised when a station has no saved layout."""

    def __init__(self) -> None:
        super().__init__("Layout not found")


class ApplicationNotFoundError(NotFoundError):
    """Raised when a shop application cannot be found."""

    def __init__(self, application_id: str | None = None) -> None:
        details = {"application_id": str(application_id)} if application_id else {}
        super().__init__("Application not found", details)


class LicenseNotFoundError(NotFoundError):
    """Raised when a license cannot be found."""

    def __init__(self, license_ref: str | None = None) -> None:
        details = {"license": str(license_ref)} if license_ref else {}
        super().__init__("License not found", details)


class DocumentNotFoundError(NotFoundError):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: str | None = None) -> None:
        details = {"document_id": str(document_id)} if document_id else {}
        super().__init__("Document not found", details)


class VerificationSectionNotFoundError(NotFoundError):
    """Raised when a vendor has not submitted a verification section."""

    def __init__(self, section: str) -> None:
        super().__init__("Verification section not found", {"section": section})


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment cannot be found."""

    def __init__(self, payment_id: str | None = None) -> None:
        details = {"payment_id": str(payment_id)} if payment_id else {}
        super().__init__("Payment not found", details)


class NotificationNotFoundError(NotFoundError):
    """Raised when a notification cannot be found for the user."""

    def __init__(self, notification_id: str | None = None) -> None:
        details = {"notification_id": str(notification_id)} if notification_id else {}
        super().__init__("Notification not found", details)


class InspectorNotFoundError(NotFoundError):
    """Raised when an inspector record cannot be found."""

    def __init__(self) -> None:
        super().__init__("Inspector profile not found")
