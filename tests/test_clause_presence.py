import pytest

from contractrisk.agents.clause_presence_agent import ClausePresenceAgent
from contractrisk.agents.heuristics import chinese_percent, penalty_percent
from contractrisk.core.rules import CIVIL_CODE_ART_585, CIVIL_PROCEDURE_LAW_ART_34
from contractrisk.schemas.risk import RiskType, Severity


@pytest.fixture
def agent():
    return ClausePresenceAgent()


def test_long_payment_term(agent, procurement_contract):
    result = agent.scan(procurement_contract)

    payment = [f for f in result.findings if f.explanation.startswith("Payment term of")]
    assert len(payment) == 1
    assert "45" in payment[0].explanation
    assert payment[0].severity == Severity.MEDIUM
    assert payment[0].risk_type == RiskType.COMMERCIAL

    prepayment = [f for f in result.findings if "prepayment" in f.explanation]
    assert len(prepayment) == 1
    assert prepayment[0].severity == Severity.LOW


def test_short_payment_term_and_prepayment_are_fine(agent):
    text = "第一条 付款\n预付款为合同金额的30%，余款在验收后15天内付清。保密。不可抗力。通知。"
    result = agent.scan(text)

    assert not [f for f in result.findings if f.category == "Financial Risk"]


def test_unfavorable_jurisdiction(agent, jurisdiction_contract):
    result = agent.scan(jurisdiction_contract)

    cited = [f for f in result.findings if f.law_citation == CIVIL_PROCEDURE_LAW_ART_34]
    assert len(cited) == 1
    assert cited[0].severity == Severity.HIGH
    assert cited[0].risk_type == RiskType.LEGAL


def test_excessive_penalty(agent):
    text = "第七条 违约责任\n违约方应向守约方支付违约金，违约金为合同金额的百分之三十。"
    result = agent.scan(text)

    penalty = [f for f in result.findings if f.law_citation == CIVIL_CODE_ART_585]
    assert len(penalty) == 1
    assert penalty[0].severity == Severity.HIGH
    assert "百分之三十" in penalty[0].explanation


def test_moderate_penalty_is_not_flagged(agent):
    text = "第七条 违约责任\n违约方应支付违约金，违约金为合同金额的5%。"
    result = agent.scan(text)

    assert not [f for f in result.findings if f.law_citation == CIVIL_CODE_ART_585]


def test_later_excessive_penalty_is_flagged(agent):
    text = "违约金为合同金额的5%，逾期交货违约金为合同金额的30%。本合同为服务合同。"
    result = agent.scan(text)

    penalty = [f for f in result.findings if f.law_citation == CIVIL_CODE_ART_585]
    assert len(penalty) == 1
    assert "30%" in penalty[0].explanation


def test_only_first_excessive_penalty_is_reported(agent):
    text = "违约金为合同金额的30%，逾期交货违约金为合同金额的50%。"
    result = agent.scan(text)

    penalty = [f for f in result.findings if f.law_citation == CIVIL_CODE_ART_585]
    assert len(penalty) == 1
    assert "30%" in penalty[0].explanation


def test_missing_clauses(agent, bare_contract):
    result = agent.scan(bare_contract)

    assert result.missing_clauses == [
        "confidentiality clause",
        "force-majeure clause",
        "notice and delivery clause",
        "liability limitation clause",
    ]
    assert result.recommendations == [
        "Add a termination clause",
        "Add a force majeure clause",
        "Add a notice and delivery clause",
        "Consider adding a limitation of liability clause",
    ]
    assert [f.id for f in result.findings] == [
        "clause-1",
        "clause-termination",
        "clause-force-majeure",
        "clause-notice",
    ]


def test_context_dependent_absences(agent):
    text = "乙方为甲方提供软件开发服务，并负责采购相关设备。保密。不可抗力。通知。终止。"
    result = agent.scan(text)
    explanations = " ".join(f.explanation for f in result.findings)

    assert "IP ownership" in explanations
    assert "warranty" in explanations
    assert "limitation of liability" in explanations


def test_english_contract(agent):
    text = (
        "Payment shall be made within 60 days of invoice. "
        "Disputes shall be submitted to the court at the defendant's domicile. "
        "Either party may terminate on notice. Force majeure applies. Confidential."
    )
    result = agent.scan(text)

    assert any("60" in f.explanation for f in result.findings)
    assert any(f.law_citation == CIVIL_PROCEDURE_LAW_ART_34 for f in result.findings)
    assert result.missing_clauses == ["liability limitation clause"]


@pytest.mark.parametrize("numeral,expected", [("五", 5), ("十", 10), ("十五", 15), ("二十", 20), ("三十五", 35)])
def test_chinese_percent(numeral, expected):
    assert chinese_percent(numeral) == expected


def test_penalty_percent():
    assert penalty_percent("25%") == 25.0
    assert penalty_percent("12.5 %") == 12.5
    assert penalty_percent("百分之五十") == 50.0
