from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from enum import Enum


class Severity(str, Enum):
    """Severity of a risk finding."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskType(str, Enum):
    """Kind of exposure a finding represents."""
    LEGAL = "legal"
    COMMERCIAL = "commercial"
    OPERATIONAL = "operational"
    IP = "ip"


class RiskGrade(str, Enum):
    """Letter risk level stored alongside a contract record."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class RiskCategory(str, Enum):
    """Display categories used by the rule catalog and the heuristics."""
    LEGAL = "Legal Risk"
    FINANCIAL = "Financial Risk"
    COMMERCIAL = "Commercial Risk"
    OPERATIONAL = "Operational Risk"
    INTELLECTUAL_PROPERTY = "Intellectual Property"
    ADVISORY = "Advisory"


class Rule(BaseModel):
    """A named pattern-based detector with fixed severity and remediation text."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    pattern: str
    severity: Severity
    message: str
    suggestion: str
    category: str
    law_citation: Optional[str] = None


class RiskFinding(BaseModel):
    """One detected risk instance tied to a location in the contract."""
    id: str
    clause_excerpt: str
    location: str
    risk_type: RiskType
    severity: Severity
    explanation: str
    suggestion: str
    category: str
    law_citation: Optional[str] = None


class RuleEngineResult(BaseModel):
    """Findings and self-contained score produced by the rule engine."""
    findings: List[RiskFinding] = []
    score: int = Field(ge=0, le=100)


class ClauseScanResult(BaseModel):
    """Output of the clause-presence analyzer."""
    findings: List[RiskFinding] = []
    missing_clauses: List[str] = []
    recommendations: List[str] = []


class ProviderReview(BaseModel):
    """Structured review returned by an AI provider or the fallback reviewer."""
    provider: str
    overall_risk: Severity
    risk_score: Optional[int] = Field(default=None, ge=0, le=100)
    findings: List[RiskFinding] = []
    missing_clauses: Optional[List[str]] = None
    rationale: str = ""


class RiskReport(BaseModel):
    """Merged risk report, the unit of output of the hybrid analyzer."""
    overall_risk: Severity
    risk_score: int = Field(ge=0, le=100)
    findings: List[RiskFinding] = []
    missing_clauses: List[str] = []
    recommendations: List[str] = []
    rationale: str = ""
    provider: str = Field(
        default="none",
        description="Which review path produced the AI-side findings",
    )


class RiskStats(BaseModel):
    """Severity counts of a report."""
    total: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


class AnnotationDraft(BaseModel):
    """Annotation payload for one medium or high finding."""
    finding_id: str
    selected_text: str
    severity: Severity
    content: str


class AnalyzeRequest(BaseModel):
    """Request model for the analyze endpoint."""
    text: Optional[str] = None
    use_ai: bool = True


class AnalysisResponse(BaseModel):
    """Response model for the analyze endpoint."""
    review: RiskReport
    risk_level: RiskGrade
    stats: RiskStats
    annotations: List[AnnotationDraft] = []


class ProviderStatus(BaseModel):
    """Which review provider an analysis would use right now."""
    provider: str
    configured: List[str] = []
