"""Lifecycle status enumerations."""

from enum import Enum


class EntityType(str, Enum):
    """Entity types that own a status transition table."""

    SPAC = "SPAC"
    FILING = "FILING"


class SpacStatus(str, Enum):
    SEARCHING = "SEARCHING"
    LOI_SIGNED = "LOI_SIGNED"
    DA_ANNOUNCED = "DA_ANNOUNCED"
    SEC_REVIEW = "SEC_REVIEW"
    SHAREHOLDER_VOTE = "SHAREHOLDER_VOTE"
    CLOSING = "CLOSING"
    COMPLETED = "COMPLETED"
    LIQUIDATING = "LIQUIDATING"
    LIQUIDATED = "LIQUIDATED"
    TERMINATED = "TERMINATED"


class FilingStatus(str, Enum):
    DRAFTING = "DRAFTING"
    INTERNAL_REVIEW = "INTERNAL_REVIEW"
    LEGAL_REVIEW = "LEGAL_REVIEW"
    BOARD_APPROVAL = "BOARD_APPROVAL"
    FILED = "FILED"
    SEC_COMMENT = "SEC_COMMENT"
    RESPONSE_FILED = "RESPONSE_FILED"
    AMENDED = "AMENDED"
    EFFECTIVE = "EFFECTIVE"
    WITHDRAWN = "WITHDRAWN"


class ComplianceStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT = "NON_COMPLIANT"


class TargetStatus(str, Enum):
    """Deal pipeline stage of a target tracked against a SPAC."""

    IDENTIFIED = "IDENTIFIED"
    PRELIMINARY = "PRELIMINARY"
    NDA_SIGNED = "NDA_SIGNED"
    DUE_DILIGENCE = "DUE_DILIGENCE"
    TERM_SHEET = "TERM_SHEET"
    LOI = "LOI"
    DEFINITIVE = "DEFINITIVE"
    CLOSED = "CLOSED"
    PASSED = "PASSED"
    TERMINATED = "TERMINATED"


class OrganizationType(str, Enum):
    PE_FIRM = "PE_FIRM"
    IB = "IB"
    TARGET_COMPANY = "TARGET_COMPANY"
    SERVICE_PROVIDER = "SERVICE_PROVIDER"
    LAW_FIRM = "LAW_FIRM"
    ACCOUNTING_FIRM = "ACCOUNTING_FIRM"
    OTHER = "OTHER"
