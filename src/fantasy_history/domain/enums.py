from __future__ import annotations

from enum import StrEnum


class ApiVersionEnum(StrEnum):
    LEGACY = "legacy"
    MODERN = "modern"


class ScoringFormatEnum(StrEnum):
    STANDARD = "standard"
    PPR = "ppr"
    HALF_PPR = "half-ppr"
    CUSTOM = "custom"


class BracketKindEnum(StrEnum):
    SINGLE = "single"
    DOUBLE = "double"


class StreakTypeEnum(StrEnum):
    WIN = "WIN"
    LOSS = "LOSS"
    TIE = "TIE"


class DraftTypeEnum(StrEnum):
    SNAKE = "snake"
    AUCTION = "auction"
    LINEAR = "linear"


class HighlightTypeEnum(StrEnum):
    RECORD = "record"
    MILESTONE = "milestone"
    UPSET = "upset"
    STREAK = "streak"


class RuleChangeCategoryEnum(StrEnum):
    SCORING = "scoring"
    ROSTER = "roster"
    PLAYOFFS = "playoffs"
    DRAFT = "draft"
    TRADES = "trades"
    WAIVERS = "waivers"


class RuleChangeImpactEnum(StrEnum):
    MAJOR = "major"
    MINOR = "minor"
    COSMETIC = "cosmetic"


class FailureKindEnum(StrEnum):
    AUTH_REQUIRED = "AuthRequired"
    NOT_FOUND = "NotFound"
    TRANSPORT_ERROR = "TransportError"
    ADAPTATION_ERROR = "AdaptationError"


class RecordCategoryEnum(StrEnum):
    GAME = "game"
    SEASON = "season"
    CAREER = "career"
