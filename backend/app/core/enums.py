"""Core enums for type safety across the application."""

from enum import Enum


class FundingType(str, Enum):
    """Kind of funding deal."""

    NEW = "NEW"
    RENEWAL = "RENEWAL"
    REFINANCE = "REFINANCE"
    BUYOUT = "BUYOUT"
    OTHER = "OTHER"


class ApplicationType(str, Enum):
    """Kind of funding application."""

    NEW = "NEW"
    RENEWAL = "RENEWAL"
    RESUBMISSION = "RESUBMISSION"
    RENEWAL_RESUBMISSION = "RENEWAL_RESUBMISSION"


class StipulationStatus(str, Enum):
    """Application stipulation workflow states."""

    REQUESTED = "REQUESTED"
    RECEIVED = "RECEIVED"
    VERIFIED = "VERIFIED"
    WAIVED = "WAIVED"


class PaymentMethod(str, Enum):
    """How money moves between counterparties."""

    ACH = "ACH"
    WIRE = "WIRE"
    CHECK = "CHECK"
    OTHER = "OTHER"


class PaybackFrequency(str, Enum):
    """Payback plan debit frequency."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class PaybackStatus(str, Enum):
    """Individual payback states."""

    SUBMITTED = "SUBMITTED"
    PROCESSING = "PROCESSING"
    BOUNCED = "BOUNCED"
    SUCCEED = "SUCCEED"
    FAILED = "FAILED"
    DISPUTED = "DISPUTED"


class PaybackPlanStatus(str, Enum):
    """Payback plan lifecycle states."""

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    STOPPED = "STOPPED"


class DistributionPriority(str, Enum):
    """Which balance a payback pays down first."""

    FUND = "FUND"
    FEE = "FEE"
    BOTH = "BOTH"


class IntentStatus(str, Enum):
    """Disbursement and commission intent states."""

    SCHEDULED = "SCHEDULED"
    SUBMITTED = "SUBMITTED"
    SUCCEED = "SUCCEED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class TransferStatus(str, Enum):
    """Execution states shared by disbursements and commissions."""

    SUBMITTED = "SUBMITTED"
    PROCESSING = "PROCESSING"
    SUCCEED = "SUCCEED"
    FAILED = "FAILED"


class SyndicationOfferStatus(str, Enum):
    """Syndication offer states."""

    SUBMITTED = "SUBMITTED"
    DECLINED = "DECLINED"
    ACCEPTED = "ACCEPTED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class SyndicationStatus(str, Enum):
    """Syndication lifecycle states."""

    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
