import logging
from typing import Iterable, List, Optional, Set, Tuple

from contractrisk.agents.clause_presence_agent import ClausePresenceAgent
from contractrisk.agents.fallback_reviewer_agent import FallbackReviewer, short_text_review
from contractrisk.agents.risk_review_agent import RiskReviewAgent
from contractrisk.agents.rule_engine_agent import RuleEngine
from contractrisk.core.config import settings
from contractrisk.schemas.risk import (
    AnnotationDraft,
    RiskFinding,
    RiskGrade,
    RiskReport,
    RiskStats,
    Severity,
)

logger = logging.getLogger(__name__)

PER_FINDING_PENALTY = 2


def deduplicate(findings: Iterable[RiskFinding]) -> List[RiskFinding]:
    """Keep the first occurrence of every finding.

    A later finding is dropped when its explanation, or its clause excerpt
    together with its category, was already seen.
    """
    seen_explanations: Set[str] = set()
    seen_clauses: Set[Tuple[str, str]] = set()
    unique: List[RiskFinding] = []

    for finding in findings:
        clause_key = (finding.clause_excerpt, finding.category)
        if finding.explanation in seen_explanations or clause_key in seen_clauses:
            continue
        seen_explanations.add(finding.explanation)
        seen_clauses.add(clause_key)
        unique.append(finding)
    return unique


def severity_counts(findings: List[RiskFinding]) -> RiskStats:
    """Count findings per severity."""
    return RiskStats(
        total=len(findings),
        high=sum(1 for f in findings if f.severity == Severity.HIGH),
        medium=sum(1 for f in findings if f.severity == Severity.MEDIUM),
        low=sum(1 for f in findings if f.severity == Severity.LOW),
    )


def classify_overall_risk(high_count: int, medium_count: int) -> Severity:
    """Overall risk of a merged report.

    Two or more high findings make it high; one high finding or three medium
    ones make it medium; everything else is low.
    """
    if high_count >= 2:
        return Severity.HIGH
    if high_count >= 1 or medium_count >= 3:
        return Severity.MEDIUM
    return Severity.LOW


def risk_grade(high_count: int, medium_count: int) -> RiskGrade:
    """Letter risk level from A (highest) to D."""
    if high_count >= 1:
        return RiskGrade.A
    if medium_count >= 3:
        return RiskGrade.B
    if medium_count >= 1:
        return RiskGrade.C
    return RiskGrade.D


def final_score(base_score: int, unique_count: int) -> int:
    """Apply the per-finding penalty and clip to [0, 100]."""
    return max(0, min(100, base_score - PER_FINDING_PENALTY * unique_count))


def build_annotations(report: RiskReport, limit: Optional[int] = None) -> List[AnnotationDraft]:
    """Annotation drafts for the medium and high findings of a report.

    Args:
        report: Merged risk report
        limit: Maximum number of drafts, defaults to MAX_ANNOTATIONS

    Returns:
        One draft per medium or high finding, in report order
    """
    limit = settings.MAX_ANNOTATIONS if limit is None else limit
    drafts: List[AnnotationDraft] = []
    for finding in report.findings:
        if finding.severity == Severity.LOW:
            continue
        if len(drafts) >= limit:
            break
        content = f"{finding.explanation}\n\nSuggestion: {finding.suggestion}"
        if finding.law_citation:
            content += f"\n\nLegal reference: {finding.law_citation}"
        drafts.append(
            AnnotationDraft(
                finding_id=finding.id,
                selected_text=finding.clause_excerpt,
                severity=finding.severity,
                content=content,
            )
        )
    return drafts


class HybridAnalyzer:
    """Combines rule, clause-presence and AI review findings into one report."""

    def __init__(
        self,
        rule_engine: Optional[RuleEngine] = None,
        clause_agent: Optional[ClausePresenceAgent] = None,
        review_agent: Optional[RiskReviewAgent] = None,
        fallback: Optional[FallbackReviewer] = None,
        min_text_length: Optional[int] = None,
    ):
        """Initialize the hybrid analyzer.

        The rule engine may be shared between analyzers and requests since
        its catalog is immutable after construction.
        """
        self.rule_engine = rule_engine or RuleEngine()
        self.clause_agent = clause_agent or ClausePresenceAgent()
        self.fallback = fallback or FallbackReviewer()
        self.review_agent = review_agent or RiskReviewAgent(fallback=self.fallback)
        self.min_text_length = min_text_length or settings.MIN_TEXT_LENGTH

    async def analyze(self, text: Optional[str], use_ai: bool = True) -> RiskReport:
        """Analyze a contract.

        Args:
            text: Plain contract text
            use_ai: Whether to call the AI provider; when false the fallback
                reviewer's output stands in for it

        Returns:
            Complete risk report
        """
        if not text or len(text) < self.min_text_length:
            logger.info("Contract text too short, returning default analysis")
            review = short_text_review(self.min_text_length)
            return RiskReport(
                overall_risk=Severity.LOW,
                risk_score=review.risk_score,
                findings=review.findings,
                missing_clauses=review.missing_clauses or [],
                rationale=review.rationale,
                provider="none",
            )

        rule_result = self.rule_engine.evaluate(text)
        scan_result = self.clause_agent.scan(text)
        logger.info(
            f"Rule engine found {len(rule_result.findings)} rule risks, "
            f"clause scan found {len(scan_result.findings)} clause risks"
        )

        if use_ai:
            review = await self.review_agent.analyze(text)
        else:
            logger.info("AI analysis disabled, using fallback reviewer")
            review = self.fallback.review_sync(text)

        all_findings = rule_result.findings + scan_result.findings + review.findings
        unique_findings = deduplicate(all_findings)
        logger.info(f"Findings before deduplication: {len(all_findings)}, after: {len(unique_findings)}")

        stats = severity_counts(unique_findings)
        overall_risk = classify_overall_risk(stats.high, stats.medium)

        if use_ai and review.risk_score is not None:
            base_score = review.risk_score
        else:
            base_score = rule_result.score
        score = final_score(base_score, len(unique_findings))

        missing_clauses = review.missing_clauses if review.missing_clauses is not None else scan_result.missing_clauses
        rationale = review.rationale or f"Rule-based analysis found {len(unique_findings)} risk points"

        logger.info(
            f"Risk calculation: overall={overall_risk.value}, score={score}, "
            f"high={stats.high}, medium={stats.medium}, provider={review.provider}"
        )
        return RiskReport(
            overall_risk=overall_risk,
            risk_score=score,
            findings=unique_findings,
            missing_clauses=missing_clauses,
            recommendations=scan_result.recommendations,
            rationale=rationale,
            provider=review.provider,
        )

    def grade(self, report: RiskReport) -> RiskGrade:
        """Letter risk level of a report."""
        stats = severity_counts(report.findings)
        return risk_grade(stats.high, stats.medium)
