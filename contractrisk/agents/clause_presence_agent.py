import logging
from typing import List, Optional

from contractrisk.agents.heuristics import (
    CONFIDENTIALITY_CLAUSE,
    FORCE_MAJEURE_CLAUSE,
    LIABILITY_LIMITATION_CLAUSE,
    NOTICE_CLAUSE,
    WHOLE_CONTRACT,
    WHOLE_CONTRACT_LOCATION,
    detect_signals,
    heuristic_findings,
)
from contractrisk.core.config import settings
from contractrisk.schemas.risk import ClauseScanResult, RiskCategory, RiskFinding, RiskType, Severity

logger = logging.getLogger(__name__)


class ClausePresenceAgent:
    """Agent for checking which clause categories a contract contains."""

    def __init__(self, excerpt_length: Optional[int] = None):
        """Initialize the clause presence agent."""
        self.excerpt_length = excerpt_length or settings.EXCERPT_LENGTH

    def scan(self, text: str) -> ClauseScanResult:
        """Check a contract for risky and missing clauses.

        Args:
            text: Plain contract text

        Returns:
            Heuristic findings, names of missing clauses and remediation
            recommendations
        """
        findings = heuristic_findings(text, "clause", self.excerpt_length)
        signals = detect_signals(text)
        recommendations: List[str] = []

        def add_missing(risk_id: str, risk_type: RiskType, severity: Severity,
                        explanation: str, suggestion: str, category: RiskCategory) -> None:
            findings.append(
                RiskFinding(
                    id=f"clause-{risk_id}",
                    clause_excerpt=WHOLE_CONTRACT,
                    location=WHOLE_CONTRACT_LOCATION,
                    risk_type=risk_type,
                    severity=severity,
                    explanation=explanation,
                    suggestion=suggestion,
                    category=category.value,
                )
            )

        if not signals.has_termination:
            add_missing(
                "termination", RiskType.LEGAL, Severity.MEDIUM,
                "Conditions for rescinding or terminating the contract are not specified",
                "Add a termination clause setting out each party's termination rights and procedure",
                RiskCategory.LEGAL,
            )
            recommendations.append("Add a termination clause")

        if not signals.has_force_majeure:
            add_missing(
                "force-majeure", RiskType.LEGAL, Severity.LOW,
                "Force majeure clause is missing",
                "Add a force majeure clause listing qualifying events and their consequences",
                RiskCategory.LEGAL,
            )
            recommendations.append("Add a force majeure clause")

        if not signals.has_notice:
            add_missing(
                "notice", RiskType.OPERATIONAL, Severity.LOW,
                "No method for serving notices is agreed",
                "Add a notice clause with service addresses and delivery methods",
                RiskCategory.OPERATIONAL,
            )
            recommendations.append("Add a notice and delivery clause")

        if not signals.has_liability_limitation:
            recommendations.append("Consider adding a limitation of liability clause")

        missing_clauses: List[str] = []
        if not signals.has_confidentiality:
            missing_clauses.append(CONFIDENTIALITY_CLAUSE)
        if not signals.has_force_majeure:
            missing_clauses.append(FORCE_MAJEURE_CLAUSE)
        if not signals.has_notice:
            missing_clauses.append(NOTICE_CLAUSE)
        if not signals.has_liability_limitation:
            missing_clauses.append(LIABILITY_LIMITATION_CLAUSE)

        logger.debug(f"Clause scan produced {len(findings)} findings, {len(missing_clauses)} missing clauses")
        return ClauseScanResult(
            findings=findings,
            missing_clauses=missing_clauses,
            recommendations=recommendations,
        )
