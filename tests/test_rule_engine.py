import pytest

from contractrisk.agents.rule_engine_agent import RuleConfigurationError, RuleEngine
from contractrisk.core.rules import DEFAULT_RULES
from contractrisk.schemas.risk import RiskType, Rule, Severity


@pytest.fixture
def engine():
    return RuleEngine()


def test_catalog_compiles():
    engine = RuleEngine(DEFAULT_RULES)
    assert len(engine.rules) == len(DEFAULT_RULES)
    assert len({rule.id for rule in engine.rules}) == len(DEFAULT_RULES)


def test_malformed_pattern_fails_at_construction():
    broken = Rule(
        id="broken",
        name="Broken",
        pattern=r"(unclosed",
        severity=Severity.LOW,
        message="never",
        suggestion="never",
        category="Legal Risk",
    )
    with pytest.raises(RuleConfigurationError):
        RuleEngine([broken])


def test_finding_located_at_nearest_clause_number(engine):
    text = (
        "第一条 甲方应赔偿乙方全部损失。\n"
        "第二条 本合同包含保密条款。\n"
        "第三条 不可抗力条款适用。"
    )
    result = engine.evaluate(text)

    assert len(result.findings) == 1
    finding = result.findings[0]
    assert finding.id == "rule-unlimited-liability-1"
    assert finding.location == "第一条"
    assert finding.severity == Severity.HIGH
    assert finding.risk_type == RiskType.LEGAL
    assert result.score == 70


def test_english_article_marker(engine):
    text = "Article 2 Liability\nThe Supplier shall compensate all losses suffered by the Buyer."
    result = engine.evaluate(text)

    liability = [f for f in result.findings if f.id.startswith("rule-unlimited-liability")]
    assert len(liability) == 1
    assert liability[0].location == "Article 2"


def test_score_deducts_for_findings_and_missing_clauses(engine):
    text = "The Supplier shall compensate all losses suffered."
    result = engine.evaluate(text)

    ids = sorted(f.id for f in result.findings)
    assert ids == [
        "rule-no-confidentiality-1",
        "rule-no-force-majeure-1",
        "rule-unlimited-liability-1",
    ]
    assert all(f.location == "unspecified" for f in result.findings)
    # 100 - 30 (high) - 20 (medium) - 10 (low) - 5 (confidentiality) - 3 (force majeure)
    assert result.score == 32


def test_missing_ip_penalty_requires_technology_vocabulary(engine):
    base = "本合同包含保密条款和不可抗力条款，双方友好合作。"
    with_tech = base + "乙方负责软件开发。"

    assert engine.evaluate(base).score - engine.evaluate(with_tech).score == 8


def test_every_match_becomes_a_finding(engine):
    text = (
        "第一条 乙方应承担全部损失。\n"
        "第二条 乙方应赔偿一切损失。\n"
        "保密 不可抗力"
    )
    result = engine.evaluate(text)

    liability = [f for f in result.findings if f.explanation.startswith("Unlimited compensation")]
    assert [f.location for f in liability] == ["第一条", "第二条"]
    assert [f.id for f in liability] == ["rule-unlimited-liability-1", "rule-unlimited-liability-2"]


def test_clause_excerpt_is_bounded(engine):
    text = "乙方应承担" + "因违约造成的" * 40 + "全部损失。保密。不可抗力。"
    result = engine.evaluate(text)

    assert result.findings
    assert all(len(f.clause_excerpt) <= 100 for f in result.findings)


def test_score_never_negative(engine):
    text = "\n".join(["乙方应赔偿甲方全部损失。管辖法院为被告所在地法院。"] * 10)
    assert engine.evaluate(text).score == 0


def test_evaluate_is_pure(engine):
    text = "第五条 本合同期满自动续约。"
    first = engine.evaluate(text)
    second = engine.evaluate(text)
    assert first.model_dump() == second.model_dump()
