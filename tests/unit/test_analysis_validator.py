from typing import Any
from unittest.mock import patch

import pytest

from legallens.analysis.exceptions import AnalysisValidationError
from legallens.analysis.models import RiskLevel
from legallens.analysis.validator import (
    validate_and_build_analysis,
    validate_and_build_comparison,
)


def _clause(clause_id: str = "c1", **overrides: Any) -> dict[str, Any]:
    clause = {
        "id": clause_id,
        "text": "The tenant waives all claims.",
        "explanation": "You give up your right to sue.",
        "riskLevel": "High",
        "riskyKeywords": ["waives"],
        "reason": "Broad waiver of rights.",
    }
    clause.update(overrides)
    return clause


def _payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "summary": "A residential lease.",
        "overallRisk": "High",
        "riskScore": 85,
        "clauses": [_clause()],
        "fullText": "The tenant waives all claims.",
    }
    payload.update(overrides)
    return payload


class TestValidAnalysis:
    def test_builds_analysis(self) -> None:
        analysis = validate_and_build_analysis(_payload())
        assert analysis.summary == "A residential lease."
        assert analysis.overall_risk is RiskLevel.HIGH
        assert analysis.risk_score == 85
        assert analysis.full_text == "The tenant waives all claims."
        assert len(analysis.clauses) == 1
        clause = analysis.clauses[0]
        assert clause.id == "c1"
        assert clause.risk_level is RiskLevel.HIGH
        assert clause.risky_keywords == ["waives"]
        assert clause.conversation_history == []

    def test_accepts_integral_float_score(self) -> None:
        assert validate_and_build_analysis(_payload(riskScore=85.0)).risk_score == 85

    def test_accepts_empty_clause_list(self) -> None:
        analysis = validate_and_build_analysis(
            _payload(clauses=[], overallRisk="Low", riskScore=0)
        )
        assert analysis.clauses == []

    def test_reconciles_overall_risk_with_score_band(self) -> None:
        with patch("legallens.analysis.validator.Log") as mock_log:
            analysis = validate_and_build_analysis(_payload(overallRisk="Low", riskScore=85))
        assert analysis.overall_risk is RiskLevel.HIGH
        mock_log.warning.assert_called_once()


class TestInvalidAnalysis:
    @pytest.mark.parametrize("field", ["summary", "overallRisk", "riskScore", "clauses", "fullText"])
    def test_missing_field(self, field: str) -> None:
        payload = _payload()
        del payload[field]
        with pytest.raises(AnalysisValidationError, match=f"Missing required field: {field}"):
            validate_and_build_analysis(payload)

    @pytest.mark.parametrize("score", ["85", True, 85.5, None])
    def test_non_integer_score(self, score: Any) -> None:
        with pytest.raises(AnalysisValidationError, match="must be an integer"):
            validate_and_build_analysis(_payload(riskScore=score))

    @pytest.mark.parametrize("score", [-1, 101])
    def test_score_out_of_range(self, score: int) -> None:
        with pytest.raises(AnalysisValidationError, match="between 0 and 100"):
            validate_and_build_analysis(_payload(riskScore=score))

    def test_unknown_overall_risk(self) -> None:
        with pytest.raises(AnalysisValidationError, match="'overallRisk' must be one of"):
            validate_and_build_analysis(_payload(overallRisk="Critical"))

    def test_duplicate_clause_ids(self) -> None:
        with pytest.raises(AnalysisValidationError, match="Duplicate clause id: c1"):
            validate_and_build_analysis(_payload(clauses=[_clause("c1"), _clause("c1")]))

    def test_clause_missing_field(self) -> None:
        clause = _clause()
        del clause["reason"]
        with pytest.raises(AnalysisValidationError, match="Clause at index 0: missing 'reason'"):
            validate_and_build_analysis(_payload(clauses=[clause]))

    def test_clause_invalid_risk_level(self) -> None:
        with pytest.raises(AnalysisValidationError, match="riskLevel"):
            validate_and_build_analysis(_payload(clauses=[_clause(riskLevel="Severe")]))

    def test_clause_keywords_must_be_strings(self) -> None:
        with pytest.raises(AnalysisValidationError, match="riskyKeywords"):
            validate_and_build_analysis(_payload(clauses=[_clause(riskyKeywords=[1])]))

    def test_clause_must_be_object(self) -> None:
        with pytest.raises(AnalysisValidationError, match="Clause at index 0 must be an object"):
            validate_and_build_analysis(_payload(clauses=["text"]))

    def test_clauses_must_be_list(self) -> None:
        with pytest.raises(AnalysisValidationError, match="'clauses' must be a list"):
            validate_and_build_analysis(_payload(clauses={}))


class TestComparison:
    def _payload(self, **overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "recommendedId": "doc-a",
            "reasoning": "a.pdf has fewer high-risk clauses.",
            "keyDifferences": ["a.pdf has no penalty clause"],
        }
        payload.update(overrides)
        return payload

    def test_builds_result(self) -> None:
        result = validate_and_build_comparison(self._payload(), ["doc-a", "doc-b"])
        assert result.recommended_id == "doc-a"
        assert result.key_differences == ["a.pdf has no penalty clause"]

    def test_rejects_unknown_recommended_id(self) -> None:
        with pytest.raises(AnalysisValidationError, match="not one of the compared documents"):
            validate_and_build_comparison(self._payload(recommendedId="x"), ["doc-a", "doc-b"])

    def test_rejects_non_string_differences(self) -> None:
        with pytest.raises(AnalysisValidationError, match="list of strings"):
            validate_and_build_comparison(self._payload(keyDifferences="one"), ["doc-a"])
