import pytest

PROVIDER_ENV_VARS = ("AI_PROVIDER", "QWEN_API_KEY", "DEEPSEEK_API_KEY", "GROQ_API_KEY")


@pytest.fixture(autouse=True)
def no_provider_credentials(monkeypatch):
    """Keep tests offline regardless of the developer's environment."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def procurement_contract():
    """Procurement contract with a 45 day payment term and no prepayment."""
    return (
        "采购合同\n"
        "第一条 付款\n买方应于验收合格后付款，付款期限为45天。\n"
        "第二条 保密\n双方对本合同内容负有保密义务。\n"
        "第三条 不可抗力\n因不可抗力导致合同不能履行的，双方互不承担责任。\n"
        "第四条 通知\n所有通知应以书面形式送达对方。\n"
    )


@pytest.fixture
def jurisdiction_contract():
    """Contract sending disputes to the defendant's domicile."""
    return (
        "第一条 保密\n双方对本合同内容负有保密义务。\n"
        "第二条 不可抗力\n因不可抗力导致合同不能履行的，双方互不承担责任。\n"
        "第三条 争议解决\n因本合同引起的争议，由被告所在地人民法院管辖。\n"
    )


@pytest.fixture
def bare_contract():
    """Contract without confidentiality, force majeure or notice language."""
    return "本合同由双方签订，自双方签字盖章之日起生效。"
