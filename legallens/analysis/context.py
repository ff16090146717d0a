"""Plain-text renderings of stored documents for prompt context."""

import json
from collections.abc import Sequence

from legallens.storage.models import Document

_SEPARATOR = "\n\n----------------\n\n"


def build_document_context(document: Document) -> str:
    """Render one document for grounded chat: name, risk, summary, clauses, full text."""
    analysis = document.analysis
    clauses = "\n".join(
        f"- [{clause.id}] ({clause.risk_level.value}) {clause.explanation}"
        for clause in analysis.clauses
    )
    return (
        f"Document: {document.file_name}\n"
        f"Overall risk: {analysis.overall_risk.value} (score {analysis.risk_score})\n"
        f"Summary: {analysis.summary}\n"
        f"Key clauses:\n{clauses or '- none identified'}\n"
        f"Full Text:\n{analysis.full_text}"
    )


def build_comparison_context(documents: Sequence[Document]) -> str:
    """Render documents for comparison, each labelled by its exact file name."""
    blocks = []
    for document in documents:
        analysis = document.analysis
        data = json.dumps({
            "id": document.id,
            "name": document.file_name,
            "riskScore": analysis.risk_score,
            "overallRisk": analysis.overall_risk.value,
            "summary": analysis.summary,
            "keyClauses": [
                {"risk": c.risk_level.value, "explanation": c.explanation}
                for c in analysis.clauses
            ],
        }, ensure_ascii=False)
        blocks.append(f'DOCUMENT NAME: "{document.file_name}"\nDATA: {data}')
    return _SEPARATOR.join(blocks)


def build_difference_context(documents: Sequence[Document]) -> str:
    """Condensed per-document context for follow-ups on a comparison."""
    blocks = []
    for document in documents:
        analysis = document.analysis
        clauses = "; ".join(
            f"{c.explanation} ({c.risk_level.value})" for c in analysis.clauses
        )
        blocks.append(
            f'DOCUMENT: "{document.file_name}"\n'
            f"SUMMARY: {analysis.summary}\n"
            f"RISK: {analysis.overall_risk.value} (Score: {analysis.risk_score})\n"
            f"CLAUSES: {clauses}"
        )
    return "\n\n".join(blocks)
