import re
import logging
from typing import List, Optional, Pattern, Sequence, Tuple

from contractrisk.core.config import settings
from contractrisk.core.rules import CATEGORY_RISK_TYPE, DEFAULT_RULES, SEVERITY_WEIGHT
from contractrisk.schemas.risk import RiskFinding, RiskType, Rule, RuleEngineResult

logger = logging.getLogger(__name__)

# Clause numbering such as "第十二条", "第3条" or "Article 7"
CLAUSE_MARKER_PATTERN = re.compile(r"第[一二三四五六七八九十百千零\d]+条|Article\s+\d+", re.IGNORECASE)
UNSPECIFIED_LOCATION = "unspecified"

CONFIDENTIALITY_MARKER = re.compile(r"保密|confidential", re.IGNORECASE)
FORCE_MAJEURE_MARKER = re.compile(r"不可抗力|force\s+majeure", re.IGNORECASE)
IP_OWNERSHIP_MARKER = re.compile(r"知识产权|intellectual\s+property", re.IGNORECASE)
TECHNOLOGY_VOCABULARY = re.compile(r"技术|开发|设计|technolog|develop|design|software", re.IGNORECASE)

MISSING_CONFIDENTIALITY_PENALTY = 5
MISSING_FORCE_MAJEURE_PENALTY = 3
MISSING_IP_OWNERSHIP_PENALTY = 8


class RuleConfigurationError(ValueError):
    """Raised when a rule in the catalog cannot be compiled."""


class RuleEngine:
    """Evaluates the rule catalog against contract text."""

    def __init__(self, rules: Sequence[Rule] = DEFAULT_RULES, excerpt_length: Optional[int] = None):
        """Compile the catalog.

        Args:
            rules: Rules to evaluate, in reporting order
            excerpt_length: Maximum length of a finding's clause excerpt

        Raises:
            RuleConfigurationError: If any rule pattern is malformed
        """
        self.excerpt_length = excerpt_length or settings.EXCERPT_LENGTH
        self._compiled: List[Tuple[Rule, Pattern[str]]] = []
        for rule in rules:
            try:
                compiled = re.compile(rule.pattern, re.IGNORECASE)
            except re.error as e:
                raise RuleConfigurationError(f"Rule '{rule.id}' has an invalid pattern: {str(e)}") from e
            self._compiled.append((rule, compiled))
        logger.info(f"Rule engine loaded with {len(self._compiled)} rules")

    @property
    def rules(self) -> List[Rule]:
        """Rules known to this engine."""
        return [rule for rule, _ in self._compiled]

    def evaluate(self, text: str) -> RuleEngineResult:
        """Run every rule against the contract text.

        Args:
            text: Plain contract text

        Returns:
            Findings in catalog order and the rule-based score
        """
        findings: List[RiskFinding] = []

        for rule, pattern in self._compiled:
            for n, match in enumerate(pattern.finditer(text), start=1):
                findings.append(
                    RiskFinding(
                        id=f"rule-{rule.id}-{n}",
                        clause_excerpt=match.group(0)[:self.excerpt_length],
                        location=self._locate(text, match.start()),
                        risk_type=CATEGORY_RISK_TYPE.get(rule.category, RiskType.LEGAL),
                        severity=rule.severity,
                        explanation=rule.message,
                        suggestion=rule.suggestion,
                        category=rule.category,
                        law_citation=rule.law_citation,
                    )
                )

        score = self.calculate_score(text, findings)
        logger.debug(f"Rule engine produced {len(findings)} findings, score {score}")
        return RuleEngineResult(findings=findings, score=score)

    def calculate_score(self, text: str, findings: List[RiskFinding]) -> int:
        """Score the contract from 100 down, lower meaning riskier."""
        score = 100

        for finding in findings:
            score -= SEVERITY_WEIGHT[finding.severity] * 10

        # Critical clauses missing from the whole text
        if not CONFIDENTIALITY_MARKER.search(text):
            score -= MISSING_CONFIDENTIALITY_PENALTY
        if not FORCE_MAJEURE_MARKER.search(text):
            score -= MISSING_FORCE_MAJEURE_PENALTY
        if not IP_OWNERSHIP_MARKER.search(text) and TECHNOLOGY_VOCABULARY.search(text):
            score -= MISSING_IP_OWNERSHIP_PENALTY

        return max(0, score)

    @staticmethod
    def _locate(text: str, offset: int) -> str:
        """Find the nearest clause number before the given offset."""
        location = UNSPECIFIED_LOCATION
        for marker in CLAUSE_MARKER_PATTERN.finditer(text, 0, offset):
            location = marker.group(0)
        return location
