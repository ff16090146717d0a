"""Validates parsed provider JSON against analysis domain invariants."""

from collections.abc import Collection
from typing import Any

from legallens.analysis.exceptions import AnalysisValidationError
from legallens.analysis.models import (
    Analysis,
    Clause,
    ComparisonResult,
    RiskLevel,
    risk_level_for_score,
)
from legallens.logging.logger import Log

_VALID_RISK_LEVELS = frozenset(level.value for level in RiskLevel)


def validate_and_build_analysis(data: dict[str, Any]) -> Analysis:
    """Validate a raw analysis payload and build an Analysis.

    An overall risk that disagrees with the score band is replaced by the
    band's level so the stored pair is always consistent.

    Raises:
        AnalysisValidationError: on any validation failure.
    """
    _require_fields(data, ("summary", "overallRisk", "riskScore", "clauses", "fullText"))
    summary = _require_string(data["summary"], "summary")
    full_text = _require_string(data["fullText"], "fullText")
    overall_risk = _build_risk_level(data["overallRisk"], "overallRisk")
    risk_score = _build_risk_score(data["riskScore"])
    clauses = _build_clauses(data["clauses"])

    banded = risk_level_for_score(risk_score)
    if banded is not overall_risk:
        Log.warning(
            f"Overall risk {overall_risk.value} disagrees with score {risk_score}, "
            f"using {banded.value}"
        )
        overall_risk = banded

    return Analysis(
        summary=summary,
        overall_risk=overall_risk,
        risk_score=risk_score,
        full_text=full_text,
        clauses=clauses,
    )


def validate_and_build_comparison(
    data: dict[str, Any], document_ids: Collection[str]
) -> ComparisonResult:
    """Validate a raw comparison payload against the compared document ids.

    Raises:
        AnalysisValidationError: on any validation failure.
    """
    _require_fields(data, ("recommendedId", "reasoning", "keyDifferences"))
    recommended_id = _require_string(data["recommendedId"], "recommendedId")
    if recommended_id not in document_ids:
        raise AnalysisValidationError(
            f"'recommendedId' {recommended_id!r} is not one of the compared documents"
        )
    reasoning = _require_string(data["reasoning"], "reasoning")
    differences = data["keyDifferences"]
    if not isinstance(differences, list) or not all(isinstance(d, str) for d in differences):
        raise AnalysisValidationError("'keyDifferences' must be a list of strings")
    return ComparisonResult(
        recommended_id=recommended_id,
        reasoning=reasoning,
        key_differences=differences,
    )


def _require_fields(data: dict[str, Any], fields: tuple[str, ...]) -> None:
    for field in fields:
        if field not in data:
            raise AnalysisValidationError(f"Missing required field: {field}")


def _require_string(raw: Any, name: str) -> str:
    if not isinstance(raw, str):
        raise AnalysisValidationError(f"'{name}' must be a string")
    return raw


def _build_risk_level(raw: Any, name: str) -> RiskLevel:
    if raw not in _VALID_RISK_LEVELS:
        raise AnalysisValidationError(
            f"'{name}' must be one of {sorted(_VALID_RISK_LEVELS)}, got {raw!r}"
        )
    return RiskLevel(raw)


def _build_risk_score(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise AnalysisValidationError("'riskScore' must be an integer")
    if isinstance(raw, float) and not raw.is_integer():
        raise AnalysisValidationError("'riskScore' must be an integer")
    score = int(raw)
    if not 0 <= score <= 100:
        raise AnalysisValidationError(f"'riskScore' must be between 0 and 100, got {score}")
    return score


def _build_clauses(raw: Any) -> list[Clause]:
    if not isinstance(raw, list):
        raise AnalysisValidationError("'clauses' must be a list")
    seen_ids: set[str] = set()
    clauses: list[Clause] = []
    for i, item in enumerate(raw):
        clause = _build_clause(item, i)
        if clause.id in seen_ids:
            raise AnalysisValidationError(f"Duplicate clause id: {clause.id}")
        seen_ids.add(clause.id)
        clauses.append(clause)
    return clauses


def _build_clause(raw: Any, index: int) -> Clause:
    if not isinstance(raw, dict):
        raise AnalysisValidationError(f"Clause at index {index} must be an object")
    for field in ("id", "text", "explanation", "riskLevel", "riskyKeywords", "reason"):
        if field not in raw:
            raise AnalysisValidationError(f"Clause at index {index}: missing '{field}'")
    clause_id = raw["id"]
    if not clause_id or not isinstance(clause_id, str):
        raise AnalysisValidationError(
            f"Clause at index {index}: 'id' must be a non-empty string"
        )
    for field in ("text", "explanation", "reason"):
        if not isinstance(raw[field], str):
            raise AnalysisValidationError(
                f"Clause at index {index}: '{field}' must be a string"
            )
    keywords = raw["riskyKeywords"]
    if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
        raise AnalysisValidationError(
            f"Clause at index {index}: 'riskyKeywords' must be a list of strings"
        )
    return Clause(
        id=clause_id,
        text=raw["text"],
        explanation=raw["explanation"],
        risk_level=_build_risk_level(raw["riskLevel"], f"clauses[{index}].riskLevel"),
        risky_keywords=keywords,
        reason=raw["reason"],
    )
