import logging
from typing import List, Optional

from contractrisk.agents.heuristics import (
    ATTACHMENT_SCHEDULE,
    CONFIDENTIALITY_CLAUSE,
    FORCE_MAJEURE_CLAUSE,
    LIABILITY_LIMITATION_CLAUSE,
    NOTICE_CLAUSE,
    detect_signals,
    heuristic_findings,
)
from contractrisk.core.config import settings
from contractrisk.core.llm import ReviewProvider
from contractrisk.core.review_parser import review_overall_risk
from contractrisk.schemas.risk import ProviderReview, RiskCategory, RiskFinding, RiskType, Severity

logger = logging.getLogger(__name__)

FALLBACK_PROVIDER = "fallback"
SHORT_TEXT_SCORE = 85


def short_text_review(min_length: int = 10) -> ProviderReview:
    """Minimal review for empty or too-short contract text."""
    return ProviderReview(
        provider=FALLBACK_PROVIDER,
        overall_risk=Severity.LOW,
        risk_score=SHORT_TEXT_SCORE,
        findings=[
            RiskFinding(
                id="fallback-short-text",
                clause_excerpt="Contract text is empty or too short",
                location="Entire contract",
                risk_type=RiskType.OPERATIONAL,
                severity=Severity.LOW,
                explanation=(
                    f"The contract has fewer than {min_length} characters, "
                    "so no full risk analysis is possible."
                ),
                suggestion="Upload the complete contract text to get an accurate risk assessment.",
                category=RiskCategory.ADVISORY.value,
            )
        ],
        missing_clauses=["complete contract text"],
        rationale="The contract text is too short for anything beyond a basic check. "
                  "Upload the complete contract for a full assessment.",
    )


class FallbackReviewer(ReviewProvider):
    """Deterministic offline reviewer used when no AI provider is available."""

    name = FALLBACK_PROVIDER

    def __init__(self, excerpt_length: Optional[int] = None, min_text_length: Optional[int] = None):
        """Initialize the fallback reviewer."""
        self.excerpt_length = excerpt_length or settings.EXCERPT_LENGTH
        self.min_text_length = min_text_length or settings.MIN_TEXT_LENGTH

    async def review(self, text: str) -> ProviderReview:
        return self.review_sync(text)

    def review_sync(self, text: Optional[str]) -> ProviderReview:
        """Review a contract with keyword heuristics only.

        Args:
            text: Plain contract text

        Returns:
            Review with a score of 100 minus 25 per high and 15 per medium
            finding
        """
        if not text or len(text) < self.min_text_length:
            return short_text_review(self.min_text_length)

        findings = heuristic_findings(text, FALLBACK_PROVIDER, self.excerpt_length)
        signals = detect_signals(text)

        high_count = sum(1 for f in findings if f.severity == Severity.HIGH)
        medium_count = sum(1 for f in findings if f.severity == Severity.MEDIUM)
        risk_score = max(0, 100 - high_count * 25 - medium_count * 15)

        missing_clauses: List[str] = []
        if not signals.has_confidentiality:
            missing_clauses.append(CONFIDENTIALITY_CLAUSE)
        if not signals.has_force_majeure:
            missing_clauses.append(FORCE_MAJEURE_CLAUSE)
        if not signals.has_notice:
            missing_clauses.append(NOTICE_CLAUSE)
        if not signals.has_attachments:
            missing_clauses.append(ATTACHMENT_SCHEDULE)
        if not signals.has_liability_limitation:
            missing_clauses.append(LIABILITY_LIMITATION_CLAUSE)

        rationale = f"The review found {len(findings)} main risk points."
        if high_count:
            rationale += f" {high_count} of them are high risk and need attention first."
        if medium_count:
            rationale += f" {medium_count} medium risk items should be improved."
        rationale += " Prioritize amending the jurisdiction and breach liability clauses."

        logger.info(f"Fallback review produced {len(findings)} findings, score {risk_score}")
        return ProviderReview(
            provider=FALLBACK_PROVIDER,
            overall_risk=review_overall_risk(findings),
            risk_score=risk_score,
            findings=findings,
            missing_clauses=missing_clauses,
            rationale=rationale,
        )
