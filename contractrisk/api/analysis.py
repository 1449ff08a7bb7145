from fastapi import APIRouter, HTTPException
from typing import List
import logging

from contractrisk.schemas.risk import (
    AnalysisResponse,
    AnalyzeRequest,
    ProviderStatus,
    Rule,
)
from contractrisk.agents.hybrid_analysis_agent import (
    HybridAnalyzer,
    build_annotations,
    severity_counts,
)
from contractrisk.agents.risk_review_agent import configured_providers, resolve_provider_name
from contractrisk.core.config import get_settings

router = APIRouter()
logger = logging.getLogger(__name__)

# Initialize the analyzer; its rule catalog is read-only and shared by all requests
hybrid_analyzer = HybridAnalyzer()


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_contract(request: AnalyzeRequest):
    """Run the hybrid risk analysis on plain contract text."""
    try:
        logger.info(f"Analysis request: text length {len(request.text or '')}, use_ai={request.use_ai}")
        report = await hybrid_analyzer.analyze(request.text, use_ai=request.use_ai)
        return AnalysisResponse(
            review=report,
            risk_level=hybrid_analyzer.grade(report),
            stats=severity_counts(report.findings),
            annotations=build_annotations(report),
        )

    except Exception as e:
        logger.error(f"Error analyzing contract: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error analyzing contract: {str(e)}")


@router.get("/rules", response_model=List[Rule])
async def list_rules():
    """List the rules in the catalog."""
    return hybrid_analyzer.rule_engine.rules


@router.get("/provider", response_model=ProviderStatus)
async def get_provider_status():
    """Report which review provider an analysis would use right now."""
    config = get_settings()
    name = resolve_provider_name(config)
    return ProviderStatus(
        provider=name or "fallback",
        configured=configured_providers(config),
    )
