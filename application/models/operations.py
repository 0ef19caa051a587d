"""Domain models for AI operations and their usage history.

Matches the `operation_history` and `users` tables in Supabase.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Operation kinds
# ---------------------------------------------------------------------------


class OperationKind(str, Enum):
    """The eight AI tools. Values are the wire names used by the front end."""

    generate_business_names = "generateBusinessNames"
    generate_email_templates = "generateEmailTemplates"
    generate_logo = "generateLogo"
    generate_pitch_deck = "generatePitchDeck"
    analyze_market = "analyzeMarket"
    generate_content_calendar = "generateContentCalendar"
    generate_legal_docs = "generateLegalDocs"
    generate_financials = "generateFinancials"

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["OperationKind"]:
        """Return the kind for a wire name, or None if it is not recognized."""
        for kind in cls:
            if kind.value == name:
                return kind
        return None


SUPPORTED_OPERATIONS: List[str] = [kind.value for kind in OperationKind]

REQUIRED_PARAMS: Dict[OperationKind, Tuple[str, ...]] = {
    OperationKind.generate_business_names: ("industry", "keywords"),
    OperationKind.generate_email_templates: ("purpose", "business", "sequence"),
    OperationKind.generate_logo: ("style", "industry"),
    OperationKind.generate_pitch_deck: ("type", "industry"),
    OperationKind.analyze_market: ("industry", "region"),
    OperationKind.generate_content_calendar: ("business", "audience"),
    OperationKind.generate_legal_docs: ("business", "docType"),
    OperationKind.generate_financials: ("business", "timeframe"),
}


@dataclass(frozen=True)
class GenerationSettings:
    """Sampling parameters sent to the generation backend for one kind."""

    temperature: float
    max_tokens: int


GENERATION_SETTINGS: Dict[OperationKind, GenerationSettings] = {
    OperationKind.generate_business_names: GenerationSettings(0.9, 300),
    OperationKind.generate_email_templates: GenerationSettings(0.5, 600),
    OperationKind.generate_logo: GenerationSettings(0.7, 500),
    OperationKind.generate_pitch_deck: GenerationSettings(0.6, 800),
    OperationKind.analyze_market: GenerationSettings(0.3, 700),
    OperationKind.generate_content_calendar: GenerationSettings(0.6, 800),
    OperationKind.generate_legal_docs: GenerationSettings(0.3, 1000),
    OperationKind.generate_financials: GenerationSettings(0.4, 800),
}


def missing_params(kind: OperationKind, params: Optional[Dict[str, Any]]) -> List[str]:
    """Required parameters that are absent or null, in declaration order."""
    params = params or {}
    return [name for name in REQUIRED_PARAMS[kind] if params.get(name) is None]


# ---------------------------------------------------------------------------
# Quota
# ---------------------------------------------------------------------------

FREE_TRIAL_STATUS = "free_trial"

FREE_TRIAL_LIMIT_MESSAGE = (
    "Free trial limit reached for this tool today. "
    "You can use each AI tool once per day. Upgrade to unlock unlimited usage!"
)


class QuotaDecision(BaseModel):
    """Outcome of a quota evaluation."""

    allowed: bool
    message: Optional[str] = None

    @classmethod
    def allow(cls) -> "QuotaDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str = FREE_TRIAL_LIMIT_MESSAGE) -> "QuotaDecision":
        return cls(allowed=False, message=message)


# ---------------------------------------------------------------------------
# Persisted rows
# ---------------------------------------------------------------------------


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OperationRecord(BaseModel):
    """One completed generation, as stored in operation_history."""

    user_id: str
    operation_type: OperationKind
    input_params: Dict[str, Any] = Field(default_factory=dict)
    output_result: str
    created_at: datetime = Field(default_factory=_utcnow)

    def to_row(self) -> Dict[str, Any]:
        """Serialize for insertion."""
        return {
            "user_id": self.user_id,
            "operation_type": self.operation_type.value,
            "input_params": self.input_params,
            "output_result": self.output_result,
            "created_at": self.created_at.isoformat(),
        }
