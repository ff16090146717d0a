import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from legallens.analysis.models import Analysis, Clause, RiskLevel


def new_id() -> str:
    """Generate a globally unique identifier for a stored record."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Document:
    """An analyzed document as persisted in the documents table.

    ``file_data`` holds the base64 transport encoding of the original file and
    may be absent when the store had to degrade the record to fit its quota.
    """

    id: str
    user_id: str
    file_name: str
    upload_date: datetime
    mime_type: str
    analysis: Analysis
    file_data: str | None = None

    def without_file_data(self) -> "Document":
        return replace(self, file_data=None)

    def find_clause(self, clause_id: str) -> Clause | None:
        return next((c for c in self.analysis.clauses if c.id == clause_id), None)

    def with_clause(self, clause: Clause) -> "Document":
        """Return a copy with the clause of the same id replaced."""
        clauses = [clause if c.id == clause.id else c for c in self.analysis.clauses]
        return replace(self, analysis=replace(self.analysis, clauses=clauses))


@dataclass(frozen=True)
class RecentAnalysisEntry:
    """Lightweight cache projection of a Document for recency browsing."""

    id: str
    name: str
    created_at: datetime
    risk_score: int
    risk_summary: RiskLevel
    source_type: str = "file"
    file_name: str | None = None
    raw_text: str = ""
    summary: list[str] = field(default_factory=list)
    clauses: list[Clause] = field(default_factory=list)

    @classmethod
    def from_document(cls, document: Document) -> "RecentAnalysisEntry":
        analysis = document.analysis
        return cls(
            id=document.id,
            name=document.file_name,
            created_at=document.upload_date,
            risk_score=analysis.risk_score,
            risk_summary=analysis.overall_risk,
            source_type="file",
            file_name=document.file_name,
            raw_text=analysis.full_text,
            summary=[analysis.summary],
            clauses=list(analysis.clauses),
        )


@dataclass(frozen=True)
class UserRecord:
    """A local user account; the id is the normalized e-mail address."""

    id: str
    email: str
    name: str = ""
