"""SQLAlchemy ORM models package."""

from vendorvault_api.models.orm.base import Base
from vendorvault_api.models.orm.user import UserORM
from vendorvault_api.models.orm.vendor import VendorORM, VerificationSectionORM
from vendorvault_api.models.orm.station import StationLayoutORM, StationORM
from vendorvault_api.models.orm.application import ShopApplicationORM
from vendorvault_api.models.orm.license import LicenseORM
from vendorvault_api.models.orm.document import DocumentORM
from vendorvault_api.models.orm.inspector import InspectorORM
from vendorvault_api.models.orm.payment import VendorAgreementORM, VendorPaymentORM
from vendorvault_api.models.orm.negotiation import NegotiationRoomORM
from vendorvault_api.models.orm.notification import NotificationORM

__all__ = [
    "Base",
    "DocumentORM",
    "InspectorORM",
    "LicenseORM",
    "NegotiationRoomORM",
    "NotificationORM",
    "ShopApplicationORM",
    "StationLayoutORM",
    "StationORM",
    "UserORM",
    "VendorAgreementORM",
    "VendorORM",
    "VendorPaymentORM",
    "VerificationSectionORM",
]
