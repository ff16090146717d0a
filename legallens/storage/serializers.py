"""Conversion between stored JSON rows and domain records.

Builders raise KeyError, TypeError or ValueError on malformed rows; the
repositories translate those into StorageCorruptionError.
"""

from datetime import datetime, timezone
from typing import Any

from legallens.analysis.models import Analysis, Clause, ClauseExchange, RiskLevel
from legallens.storage.models import Document, RecentAnalysisEntry, UserRecord


def _parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp; rows written without an offset are read as UTC."""
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def clause_to_dict(clause: Clause) -> dict[str, Any]:
    return {
        "id": clause.id,
        "text": clause.text,
        "explanation": clause.explanation,
        "risk_level": clause.risk_level.value,
        "risky_keywords": list(clause.risky_keywords),
        "reason": clause.reason,
        "conversation_history": [
            {
                "question": exchange.question,
                "answer": exchange.answer,
                "timestamp": exchange.timestamp.isoformat(),
            }
            for exchange in clause.conversation_history
        ],
    }


def clause_from_dict(row: dict[str, Any]) -> Clause:
    return Clause(
        id=str(row["id"]),
        text=row["text"],
        explanation=row["explanation"],
        risk_level=RiskLevel(row["risk_level"]),
        risky_keywords=list(row.get("risky_keywords", [])),
        reason=row.get("reason", ""),
        conversation_history=[
            ClauseExchange(
                question=item["question"],
                answer=item["answer"],
                timestamp=_parse_timestamp(item["timestamp"]),
            )
            for item in row.get("conversation_history", [])
        ],
    )


def analysis_to_dict(analysis: Analysis) -> dict[str, Any]:
    return {
        "summary": analysis.summary,
        "overall_risk": analysis.overall_risk.value,
        "risk_score": analysis.risk_score,
        "full_text": analysis.full_text,
        "clauses": [clause_to_dict(c) for c in analysis.clauses],
    }


def analysis_from_dict(row: dict[str, Any]) -> Analysis:
    return Analysis(
        summary=row["summary"],
        overall_risk=RiskLevel(row["overall_risk"]),
        risk_score=int(row["risk_score"]),
        full_text=row.get("full_text", ""),
        clauses=[clause_from_dict(c) for c in row.get("clauses", [])],
    )


def document_to_dict(document: Document) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": document.id,
        "user_id": document.user_id,
        "file_name": document.file_name,
        "upload_date": document.upload_date.isoformat(),
        "mime_type": document.mime_type,
        "analysis": analysis_to_dict(document.analysis),
    }
    if document.file_data is not None:
        row["file_data"] = document.file_data
    return row


def document_from_dict(row: dict[str, Any]) -> Document:
    return Document(
        id=row["id"],
        user_id=row["user_id"],
        file_name=row["file_name"],
        upload_date=_parse_timestamp(row["upload_date"]),
        mime_type=row["mime_type"],
        analysis=analysis_from_dict(row["analysis"]),
        file_data=row.get("file_data"),
    )


def recent_entry_to_dict(entry: RecentAnalysisEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "name": entry.name,
        "created_at": entry.created_at.isoformat(),
        "source_type": entry.source_type,
        "file_name": entry.file_name,
        "raw_text": entry.raw_text,
        "risk_score": entry.risk_score,
        "risk_summary": entry.risk_summary.value,
        "summary": list(entry.summary),
        "clauses": [clause_to_dict(c) for c in entry.clauses],
    }


def recent_entry_from_dict(row: dict[str, Any]) -> RecentAnalysisEntry:
    return RecentAnalysisEntry(
        id=row["id"],
        name=row["name"],
        created_at=_parse_timestamp(row["created_at"]),
        risk_score=int(row["risk_score"]),
        risk_summary=RiskLevel(row["risk_summary"]),
        source_type=row.get("source_type", "file"),
        file_name=row.get("file_name"),
        raw_text=row.get("raw_text", ""),
        summary=list(row.get("summary", [])),
        clauses=[clause_from_dict(c) for c in row.get("clauses", [])],
    )


def user_to_dict(user: UserRecord) -> dict[str, Any]:
    return {"id": user.id, "email": user.email, "name": user.name}


def user_from_dict(row: dict[str, Any]) -> UserRecord:
    return UserRecord(id=row["id"], email=row["email"], name=row.get("name", ""))
