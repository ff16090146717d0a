from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

LOW_RISK_CEILING = 40
HIGH_RISK_FLOOR = 70


class RiskLevel(str, Enum):
    """Risk classification shared by documents and clauses."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def risk_level_for_score(score: int) -> RiskLevel:
    """Map a 0-100 risk score onto its band: <40 Low, 40-70 Medium, >70 High."""
    if score < LOW_RISK_CEILING:
        return RiskLevel.LOW
    if score > HIGH_RISK_FLOOR:
        return RiskLevel.HIGH
    return RiskLevel.MEDIUM


@dataclass(frozen=True)
class ClauseExchange:
    """One question asked about a clause and the answer it received."""

    question: str
    answer: str
    timestamp: datetime


@dataclass(frozen=True)
class Clause:
    """A contractual provision extracted from a document."""

    id: str
    text: str
    explanation: str
    risk_level: RiskLevel
    risky_keywords: list[str] = field(default_factory=list)
    reason: str = ""
    conversation_history: list[ClauseExchange] = field(default_factory=list)

    def with_exchange(self, exchange: ClauseExchange) -> "Clause":
        return replace(
            self, conversation_history=[*self.conversation_history, exchange]
        )


@dataclass(frozen=True)
class Analysis:
    """Structured output of the document analysis call."""

    summary: str
    overall_risk: RiskLevel
    risk_score: int
    full_text: str = ""
    clauses: list[Clause] = field(default_factory=list)


@dataclass(frozen=True)
class ChatMessage:
    """A role-tagged chat turn; role is 'user' or 'model'."""

    role: str
    text: str


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing several analyzed documents."""

    recommended_id: str
    reasoning: str
    key_differences: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class InlineData:
    """Transport-encoded (base64) file content attached to a prompt."""

    media_type: str
    data: str
    file_name: str | None = None


@dataclass(frozen=True)
class PromptMessage:
    """Provider-neutral message passed to a completion client."""

    role: str
    text: str
    attachment: InlineData | None = None
