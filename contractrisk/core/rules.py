"""Contract rule catalog.

Each rule is an independent detector. Patterns are matched case-insensitively
and cover both Chinese and English contract wording. The catalog is a tuple of
frozen models built at import time and never mutated afterwards, which is what
makes sharing one engine instance across requests safe.
"""

from typing import Dict, Tuple

from contractrisk.schemas.risk import RiskCategory, RiskType, Rule, Severity

CIVIL_PROCEDURE_LAW_ART_34 = "PRC Civil Procedure Law, Article 34"
CIVIL_CODE_ART_585 = "PRC Civil Code, Article 585"

# Points deducted per finding, multiplied by ten in the rule engine score
SEVERITY_WEIGHT: Dict[Severity, int] = {
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}

CATEGORY_RISK_TYPE: Dict[str, RiskType] = {
    RiskCategory.LEGAL.value: RiskType.LEGAL,
    RiskCategory.FINANCIAL.value: RiskType.COMMERCIAL,
    RiskCategory.COMMERCIAL.value: RiskType.COMMERCIAL,
    RiskCategory.OPERATIONAL.value: RiskType.OPERATIONAL,
    RiskCategory.INTELLECTUAL_PROPERTY.value: RiskType.IP,
}

UNFAVORABLE_JURISDICTION_MESSAGE = (
    "Disputes are referred to the court where the defendant or the counterparty "
    "is domiciled, which is unfavorable to us and raises litigation cost"
)
UNFAVORABLE_JURISDICTION_SUGGESTION = (
    "Change to \"the court where the plaintiff is domiciled or where the contract "
    "was signed\", or agree on arbitration"
)

DEFAULT_RULES: Tuple[Rule, ...] = (
    Rule(
        id="payment-term-30-60-90",
        name="Long payment term",
        pattern=r"付款.*(30|60|90).*(天|日|工作日)"
                r"|payment.*\b(30|60|90)\s*(calendar\s+|business\s+|working\s+)?days",
        severity=Severity.MEDIUM,
        message="Long payment term; assess the working capital tied up",
        suggestion="Negotiate a prepayment or shorten the payment term to 15 days",
        category=RiskCategory.FINANCIAL.value,
    ),
    Rule(
        id="jurisdiction-defendant",
        name="Unfavorable jurisdiction",
        pattern=r"管辖.*(被告|甲方|对方).*所在地"
                r"|jurisdiction.*(defendant|party a|counterparty|other party).{0,20}(domicile|location|seat)",
        severity=Severity.HIGH,
        message=UNFAVORABLE_JURISDICTION_MESSAGE,
        suggestion=UNFAVORABLE_JURISDICTION_SUGGESTION,
        category=RiskCategory.LEGAL.value,
        law_citation=CIVIL_PROCEDURE_LAW_ART_34,
    ),
    Rule(
        id="high-penalty",
        name="Excessive liquidated damages",
        pattern=r"违约金.*(20%|30%|50%|百分之二十|百分之三十|百分之五十).*合同金额"
                r"|(liquidated damages|penalty).*\b(20|30|50)\s?%.*contract (price|amount|value)",
        severity=Severity.HIGH,
        message="Liquidated damages rate may be excessive and at risk of reduction by a court",
        suggestion="Cap liquidated damages at 130% of actual loss or agree on a fixed amount",
        category=RiskCategory.LEGAL.value,
        law_citation=CIVIL_CODE_ART_585,
    ),
    Rule(
        id="no-termination-clause",
        name="Missing termination right",
        pattern=r"解除.*(无法|不能|不得)|无.*(单方|任意).*解除"
                r"|(may not|cannot|shall not)\s+(be\s+)?terminated?",
        severity=Severity.MEDIUM,
        message="Termination mechanism is incomplete",
        suggestion="Specify the circumstances and procedure for unilateral termination",
        category=RiskCategory.LEGAL.value,
    ),
    Rule(
        id="ip-ownership-unclear",
        name="Unclear IP ownership",
        pattern=r"知识产权.*(共有|共享|未约定)|归属.*不明"
                r"|intellectual property.*(jointly owned|shared|not (specified|agreed))",
        severity=Severity.MEDIUM,
        message="Ownership of intellectual property is not clearly agreed",
        suggestion="State who owns the intellectual property and the permitted scope of use",
        category=RiskCategory.INTELLECTUAL_PROPERTY.value,
    ),
    Rule(
        id="unlimited-liability",
        name="Unlimited liability",
        pattern=r"(承担|赔偿).*(全部|所有|一切|无限).*损失"
                r"|(bear|indemnify|compensate).*(all|any and all|unlimited).*(loss|losses|damages)",
        severity=Severity.HIGH,
        message="Unlimited compensation liability exposes us to excessive risk",
        suggestion="Limit liability to direct losses or set a liability cap",
        category=RiskCategory.LEGAL.value,
    ),
    Rule(
        id="auto-renewal",
        name="Automatic renewal",
        pattern=r"(自动|默示|期满|到期).*续约|自动.*延期|automatic(ally)?\s+(renew|extend)",
        severity=Severity.MEDIUM,
        message="Automatic renewal may leave the contract term uncontrolled",
        suggestion="Remove automatic renewal or set up a reminder before expiry",
        category=RiskCategory.COMMERCIAL.value,
    ),
    Rule(
        id="unilateral-amendment",
        name="Unilateral amendment right",
        pattern=r"甲方.*(有权|可以|可).*修改.*(无需|不须).*通知"
                r"|(may|is entitled to)\s+(unilaterally\s+)?(amend|modify).*without (prior )?notice",
        severity=Severity.MEDIUM,
        message="The counterparty reserves the right to amend the contract unilaterally",
        suggestion="Require written confirmation by both parties for material changes",
        category=RiskCategory.LEGAL.value,
    ),
    Rule(
        id="exclusivity-without-limit",
        name="Unlimited exclusivity",
        pattern=r"排他|独家|独占.*(合作|代理|经销)|\bexclusiv(e|ity)\b",
        severity=Severity.LOW,
        message="Exclusivity may restrict business expansion",
        suggestion="Define the term and territory of any exclusivity",
        category=RiskCategory.COMMERCIAL.value,
    ),
    Rule(
        id="no-confidentiality",
        name="Missing confidentiality clause",
        pattern=r"(?s)^(?!.*(保密|confidential)).*$",
        severity=Severity.MEDIUM,
        message="No confidentiality clause detected",
        suggestion="Add a confidentiality clause covering scope and duration",
        category=RiskCategory.LEGAL.value,
    ),
    Rule(
        id="no-force-majeure",
        name="Missing force majeure clause",
        pattern=r"(?s)^(?!.*(不可抗力|force majeure)).*$",
        severity=Severity.LOW,
        message="No force majeure clause detected",
        suggestion="Add a force majeure clause",
        category=RiskCategory.LEGAL.value,
    ),
    Rule(
        id="warranty-period-short",
        name="Short warranty period",
        pattern=r"质保.*(3|三).*(月|个月)|质保期.*(少于|不足).*半年"
                r"|warranty.*\b(3|three)\s+months",
        severity=Severity.LOW,
        message="Warranty period is short",
        suggestion="Negotiate a warranty period of at least 12 months",
        category=RiskCategory.COMMERCIAL.value,
    ),
    Rule(
        id="arbitration-unclear",
        name="Unclear arbitration",
        pattern=r"仲裁.*(由|由双方|协商)|仲裁机构.*未指定"
                r"|arbitration.*(to be agreed|not specified|by negotiation)",
        severity=Severity.MEDIUM,
        message="Arbitration clause is not specific",
        suggestion="Name a specific arbitration commission",
        category=RiskCategory.LEGAL.value,
    ),
    Rule(
        id="oral-modification",
        name="Oral modification allowed",
        pattern=r"(口头|电话|邮件).*变更.*有效|可以.*(口头|非书面).*修改"
                r"|(oral|verbal|telephone|e-?mail).*(amendment|modification|change).*(valid|effective)",
        severity=Severity.MEDIUM,
        message="The contract may be changed in non-written form",
        suggestion="Require that every change is confirmed in writing",
        category=RiskCategory.LEGAL.value,
    ),
)
