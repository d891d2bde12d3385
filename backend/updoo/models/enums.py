from __future__ import annotations

import enum


class Role(str, enum.Enum):
    CLIENT = "CLIENT"
    FREELANCER = "FREELANCER"
    ADMIN = "ADMIN"


class Language(str, enum.Enum):
    POLISH = "POLISH"
    ENGLISH = "ENGLISH"


class ListingStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING_REVIEW = "PENDING_REVIEW"
    PUBLISHED = "PUBLISHED"
    CLOSED = "CLOSED"
    REJECTED = "REJECTED"


EDITABLE_STATUSES = frozenset({ListingStatus.DRAFT, ListingStatus.PUBLISHED})


class ListingOrigin(str, enum.Enum):
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"
    PROPOSAL = "PROPOSAL"


class BillingType(str, enum.Enum):
    FIXED = "FIXED"
    HOURLY = "HOURLY"


class HoursPerWeek(str, enum.Enum):
    LESS_THAN_10 = "LESS_THAN_10"
    FROM_11_TO_20 = "FROM_11_TO_20"
    FROM_21_TO_30 = "FROM_21_TO_30"
    MORE_THAN_30 = "MORE_THAN_30"


class ExperienceLevel(str, enum.Enum):
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"


class ProjectType(str, enum.Enum):
    ONE_TIME = "ONE_TIME"
    CONTINUOUS = "CONTINUOUS"


class ApplicantType(str, enum.Enum):
    ANY = "ANY"
    FREELANCER_NO_B2B = "FREELANCER_NO_B2B"
    FREELANCER_B2B = "FREELANCER_B2B"
    COMPANY = "COMPANY"


class ProposalStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class ProposalReason(str, enum.Enum):
    NO_ACCOUNT = "NO_ACCOUNT"
    INACTIVE_ACCOUNT = "INACTIVE_ACCOUNT"
    OTHER = "OTHER"


class MailStatus(str, enum.Enum):
    SENT = "SENT"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


ALLOWED_OFFER_DAYS = (7, 14, 21, 30)
MAX_LISTING_SKILLS = 5
