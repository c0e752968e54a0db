"""Station domain enums."""

from enum import StrEnum


class OperationalStatus(StrEnum):
    """Day-to-day operating state of a station."""

    ACTIVE = "ACTIVE"
    RENOVATION = "RENOVATION"
    PENDING_APPROVAL = "PENDING_APPROVAL"


class ApprovalStatus(StrEnum):
    """Railway admin approval state of a station."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class StationCategory(StrEnum):
    """Indian Railways station categories."""

    NSG_1 = "NSG-1"
    NSG_2 = "NSG-2"
    NSG_3 = "NSG-3"
    NSG_4 = "NSG-4"
    NSG_5 = "NSG-5"
    NSG_6 = "NSG-6"
    SG_1 = "SG-1"
    SG_2 = "SG-2"
    SG_3 = "SG-3"
    HG_1 = "HG-1"
    HG_2 = "HG-2"
    HG_3 = "HG-3"
