"""Extraction of structured reviews from free-text model replies.

Model output is untrusted: it may be wrapped in a code fence, surrounded by
prose, use a nested schema, or omit fields. Everything is coerced into a
``ProviderReview`` here so nothing untyped leaves the provider layer.
"""

import re
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from contractrisk.schemas.risk import ProviderReview, RiskFinding, RiskType, Severity

logger = logging.getLogger(__name__)

CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)

FINDINGS_KEYS = ("keyRisks", "findings", "risks")
DEFAULT_CATEGORY = "AI Review"
DEFAULT_LOCATION = "unspecified"

RISK_TYPE_ALIASES = {
    "intellectual_property": RiskType.IP,
    "intellectual property": RiskType.IP,
    "financial": RiskType.COMMERCIAL,
}


@dataclass(frozen=True)
class ExtractionResult:
    """Either a parsed review or the reason parsing failed."""
    review: Optional[ProviderReview] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.review is not None


def review_overall_risk(findings: List[RiskFinding]) -> Severity:
    """Overall risk of a single review from its high and medium counts."""
    high = sum(1 for f in findings if f.severity == Severity.HIGH)
    medium = sum(1 for f in findings if f.severity == Severity.MEDIUM)
    if high >= 2:
        return Severity.HIGH
    if high >= 1 or medium >= 2:
        return Severity.MEDIUM
    return Severity.LOW


def extract_json_object(content: str) -> str:
    """Strip an optional code fence and slice the outermost JSON object."""
    fenced = CODE_FENCE.search(content)
    body = fenced.group(1) if fenced else content
    start = body.find("{")
    end = body.rfind("}")
    if start == -1 or end < start:
        raise ValueError("no JSON object found in response")
    return body[start:end + 1]


def _first_str(data: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _coerce_severity(value: Any) -> Severity:
    if isinstance(value, str):
        try:
            return Severity(value.strip().lower())
        except ValueError:
            pass
    return Severity.MEDIUM


def _coerce_risk_type(value: Any) -> RiskType:
    if isinstance(value, str):
        key = value.strip().lower()
        if key in RISK_TYPE_ALIASES:
            return RISK_TYPE_ALIASES[key]
        try:
            return RiskType(key)
        except ValueError:
            pass
    return RiskType.LEGAL


def _coerce_score(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return None
    return max(0, min(100, score))


def _flatten(data: Dict[str, Any]) -> Dict[str, Any]:
    """Lift fields of the nested ``overallAssessment`` schema to the top level."""
    assessment = data.get("overallAssessment")
    if not isinstance(assessment, dict):
        return data
    flat = dict(data)
    for nested_key, flat_key in (
        ("overallRisk", "overallRisk"),
        ("riskLevel", "overallRisk"),
        ("riskScore", "riskScore"),
        ("score", "riskScore"),
        ("summary", "thinking"),
    ):
        if flat_key not in flat and nested_key in assessment:
            flat[flat_key] = assessment[nested_key]
    return flat


def normalize_findings(raw_findings: Any, excerpt_length: int) -> List[RiskFinding]:
    """Coerce a model's finding list into canonical findings."""
    if not isinstance(raw_findings, list):
        return []

    findings: List[RiskFinding] = []
    for raw in raw_findings:
        if not isinstance(raw, dict):
            logger.debug(f"Skipping non-object finding: {raw!r}")
            continue
        clause = _first_str(raw, "clause", "clauseExcerpt", "clause_excerpt") or ""
        findings.append(
            RiskFinding(
                id=f"ai-risk-{len(findings) + 1}",
                clause_excerpt=clause[:excerpt_length],
                location=_first_str(raw, "location") or DEFAULT_LOCATION,
                risk_type=_coerce_risk_type(raw.get("riskType")),
                severity=_coerce_severity(raw.get("severity")),
                explanation=_first_str(raw, "explanation", "description", "issue") or "",
                suggestion=_first_str(raw, "suggestion", "recommendation") or "",
                category=_first_str(raw, "category") or DEFAULT_CATEGORY,
                law_citation=_first_str(raw, "law", "lawCitation", "law_citation"),
            )
        )
    return findings


def extract_review(content: str, provider: str, excerpt_length: int = 100) -> ExtractionResult:
    """Parse a model reply into a review.

    Args:
        content: Raw message content returned by the model
        provider: Name recorded on the resulting review
        excerpt_length: Maximum length of a finding's clause excerpt

    Returns:
        An ok result with the review, or an error result with the reason
    """
    try:
        data = json.loads(extract_json_object(content or ""))
    except ValueError as e:
        return ExtractionResult(error=f"unparseable review: {str(e)}")

    if not isinstance(data, dict):
        return ExtractionResult(error="review is not a JSON object")

    data = _flatten(data)

    raw_findings = None
    for key in FINDINGS_KEYS:
        if key in data:
            raw_findings = data[key]
            break
    findings = normalize_findings(raw_findings, excerpt_length)

    overall = data.get("overallRisk")
    if isinstance(overall, str) and overall.strip().lower() in {s.value for s in Severity}:
        overall_risk = Severity(overall.strip().lower())
    else:
        overall_risk = review_overall_risk(findings)

    missing = data.get("missingClauses")
    missing_clauses = [str(m) for m in missing if m] if isinstance(missing, list) else None

    review = ProviderReview(
        provider=provider,
        overall_risk=overall_risk,
        risk_score=_coerce_score(data.get("riskScore")),
        findings=findings,
        missing_clauses=missing_clauses,
        rationale=_first_str(data, "thinking", "rationale", "summary") or "",
    )
    return ExtractionResult(review=review)
