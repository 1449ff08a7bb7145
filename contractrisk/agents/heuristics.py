"""Keyword heuristics shared by the clause-presence analyzer and the fallback reviewer.

Both detectors emit the same wording for the same risk so that the hybrid
analyzer's deduplication collapses them into one finding.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from contractrisk.core.rules import (
    CIVIL_CODE_ART_585,
    CIVIL_PROCEDURE_LAW_ART_34,
    UNFAVORABLE_JURISDICTION_MESSAGE,
    UNFAVORABLE_JURISDICTION_SUGGESTION,
)
from contractrisk.schemas.risk import RiskCategory, RiskFinding, RiskType, Severity

WHOLE_CONTRACT = "Full contract"
WHOLE_CONTRACT_LOCATION = "Entire contract"

# Human-readable names of clauses reported as missing
CONFIDENTIALITY_CLAUSE = "confidentiality clause"
FORCE_MAJEURE_CLAUSE = "force-majeure clause"
NOTICE_CLAUSE = "notice and delivery clause"
LIABILITY_LIMITATION_CLAUSE = "liability limitation clause"
ATTACHMENT_SCHEDULE = "attachment schedule"

PAYMENT_TERMS = re.compile(r"付款|支付|账期|预付款|尾款|payment|invoice", re.IGNORECASE)
PAYMENT_PERIOD = re.compile(r"(?:付款|payment).*?(\d+).*?(?:天|日|工作日|days?)", re.IGNORECASE)
PREPAYMENT = re.compile(
    r"预付款.*?(\d+)%|首付.*?(\d+)%|(?:prepayment|advance payment|down payment).*?(\d+)\s?%",
    re.IGNORECASE,
)
JURISDICTION = re.compile(r"管辖|仲裁|争议解决|法院|诉讼|jurisdiction|arbitration|dispute|court|litigation", re.IGNORECASE)
UNFAVORABLE_JURISDICTION = re.compile(
    r"被告所在地|甲方所在地|对方所在地"
    r"|(?:defendant|counterparty|party a)'?s?\s+domicile|domicile of the (?:defendant|counterparty)",
    re.IGNORECASE,
)
PENALTY = re.compile(
    r"违约金.*?(\d+(?:\.\d+)?\s?%|百分之[零一二三四五六七八九十]+)"
    r"|(?:liquidated damages|penalty).*?(\d+(?:\.\d+)?\s?%)",
    re.IGNORECASE,
)
TERMINATION = re.compile(r"解除|终止|提前.*结束|terminat", re.IGNORECASE)
FORCE_MAJEURE = re.compile(r"不可抗力|不能预见|不能避免|force\s+majeure|act\s+of\s+god", re.IGNORECASE)
CONFIDENTIALITY = re.compile(r"保密|商业秘密|confidential|trade\s+secret", re.IGNORECASE)
INTELLECTUAL_PROPERTY = re.compile(
    r"知识产权|专利|商标|著作权|技术成果|intellectual\s+property|patent|trademark|copyright",
    re.IGNORECASE,
)
TECHNICAL_VOCABULARY = re.compile(r"技术|开发|设计|创作|软件|系统|technolog|develop|design|software|system", re.IGNORECASE)
WARRANTY = re.compile(r"质保|保修|质量保证|售后服务|warrant|guarantee", re.IGNORECASE)
PROCUREMENT_VOCABULARY = re.compile(r"采购|供货|设备|产品|procure|purchase|supply|equipment|product", re.IGNORECASE)
LIABILITY_LIMITATION = re.compile(
    r"责任限制|赔偿限额|免责|最高赔偿|limitation\s+of\s+liability|liability\s+cap|exclusion\s+of\s+liability",
    re.IGNORECASE,
)
SERVICE_VOCABULARY = re.compile(r"服务|承包|委托|service|contractor|engage", re.IGNORECASE)
NOTICE = re.compile(r"通知|送达|notice|notif", re.IGNORECASE)
ATTACHMENT = re.compile(r"附件|annex|appendix|exhibit", re.IGNORECASE)

LONG_PAYMENT_DAYS = 30
PENALTY_LIMIT_PERCENT = 20.0

CHINESE_DIGITS = {"零": 0, "一": 1, "二": 2, "三": 3, "四": 4, "五": 5, "六": 6, "七": 7, "八": 8, "九": 9}


@dataclass(frozen=True)
class ContractSignals:
    """Presence of the clause categories the heuristics look for."""
    has_payment_terms: bool
    has_jurisdiction: bool
    has_termination: bool
    has_force_majeure: bool
    has_confidentiality: bool
    has_ip: bool
    has_warranty: bool
    has_liability_limitation: bool
    has_notice: bool
    has_attachments: bool


def detect_signals(text: str) -> ContractSignals:
    """Test every clause-presence predicate against the text."""
    return ContractSignals(
        has_payment_terms=bool(PAYMENT_TERMS.search(text)),
        has_jurisdiction=bool(JURISDICTION.search(text)),
        has_termination=bool(TERMINATION.search(text)),
        has_force_majeure=bool(FORCE_MAJEURE.search(text)),
        has_confidentiality=bool(CONFIDENTIALITY.search(text)),
        has_ip=bool(INTELLECTUAL_PROPERTY.search(text)),
        has_warranty=bool(WARRANTY.search(text)),
        has_liability_limitation=bool(LIABILITY_LIMITATION.search(text)),
        has_notice=bool(NOTICE.search(text)),
        has_attachments=bool(ATTACHMENT.search(text)),
    )


def chinese_percent(numeral: str) -> int:
    """Convert a Chinese numeral below one hundred, e.g. 二十五, to an int."""
    if "十" not in numeral:
        return CHINESE_DIGITS.get(numeral, 0)
    tens, _, units = numeral.partition("十")
    return CHINESE_DIGITS.get(tens, 1) * 10 + CHINESE_DIGITS.get(units, 0)


def penalty_percent(raw: str) -> float:
    """Percentage value of a matched liquidated damages rate."""
    if raw.startswith("百分之"):
        return float(chinese_percent(raw[len("百分之"):]))
    return float(raw.rstrip("%").strip())


def heuristic_findings(text: str, id_prefix: str, excerpt_length: int) -> List[RiskFinding]:
    """Run the keyword heuristics over a contract.

    Args:
        text: Plain contract text
        id_prefix: Prefix for the generated finding ids
        excerpt_length: Maximum length of a clause excerpt

    Returns:
        Findings in a fixed order: payment, jurisdiction, penalty, then
        missing confidentiality, IP, warranty and liability limitation
    """
    signals = detect_signals(text)
    findings: List[RiskFinding] = []

    def add(clause: str, location: str, risk_type: RiskType, severity: Severity,
            explanation: str, suggestion: str, category: RiskCategory,
            law_citation: Optional[str] = None) -> None:
        findings.append(
            RiskFinding(
                id=f"{id_prefix}-{len(findings) + 1}",
                clause_excerpt=clause[:excerpt_length],
                location=location,
                risk_type=risk_type,
                severity=severity,
                explanation=explanation,
                suggestion=suggestion,
                category=category.value,
                law_citation=law_citation,
            )
        )

    if signals.has_payment_terms:
        period = PAYMENT_PERIOD.search(text)
        if period and int(period.group(1)) > LONG_PAYMENT_DAYS:
            add(
                period.group(0), "Payment terms", RiskType.COMMERCIAL, Severity.MEDIUM,
                f"Payment term of {period.group(1)} days is long and ties up working capital",
                "Negotiate a prepayment, shorten the term to 15-30 days, or agree on instalments",
                RiskCategory.FINANCIAL,
            )
        if not PREPAYMENT.search(text):
            add(
                "Payment terms", "Payment method", RiskType.COMMERCIAL, Severity.LOW,
                "No prepayment percentage is agreed, which increases funding risk",
                "Agree on a 30% prepayment with the balance due after acceptance",
                RiskCategory.FINANCIAL,
            )

    if signals.has_jurisdiction and UNFAVORABLE_JURISDICTION.search(text):
        add(
            "Dispute resolution clause", "Dispute resolution", RiskType.LEGAL, Severity.HIGH,
            UNFAVORABLE_JURISDICTION_MESSAGE, UNFAVORABLE_JURISDICTION_SUGGESTION,
            RiskCategory.LEGAL, CIVIL_PROCEDURE_LAW_ART_34,
        )

    # Only the first rate above the limit is reported
    for penalty in PENALTY.finditer(text):
        rate = penalty.group(1) or penalty.group(2)
        if penalty_percent(rate) > PENALTY_LIMIT_PERCENT:
            add(
                penalty.group(0), "Liability for breach", RiskType.LEGAL, Severity.HIGH,
                f"Liquidated damages of {rate} may be found excessive and reduced by a court",
                "Cap liquidated damages at 130% of actual loss or set a fixed amount",
                RiskCategory.LEGAL, CIVIL_CODE_ART_585,
            )
            break

    if not signals.has_confidentiality:
        add(
            WHOLE_CONTRACT, WHOLE_CONTRACT_LOCATION, RiskType.LEGAL, Severity.MEDIUM,
            "No confidentiality clause found; business information is not protected",
            "Add a confidentiality clause defining confidential information, duration and remedies",
            RiskCategory.LEGAL,
        )

    if not signals.has_ip and TECHNICAL_VOCABULARY.search(text):
        add(
            WHOLE_CONTRACT, WHOLE_CONTRACT_LOCATION, RiskType.IP, Severity.MEDIUM,
            "The contract involves technical or creative work but does not settle IP ownership",
            "State ownership of intellectual property, its scope of use and rights to improvements",
            RiskCategory.INTELLECTUAL_PROPERTY,
        )

    if not signals.has_warranty and PROCUREMENT_VOCABULARY.search(text):
        add(
            WHOLE_CONTRACT, WHOLE_CONTRACT_LOCATION, RiskType.COMMERCIAL, Severity.LOW,
            "No quality warranty or warranty period is agreed",
            "Agree on a warranty period (usually 12 months) and repair or replacement duties",
            RiskCategory.COMMERCIAL,
        )

    if not signals.has_liability_limitation and SERVICE_VOCABULARY.search(text):
        add(
            WHOLE_CONTRACT, WHOLE_CONTRACT_LOCATION, RiskType.LEGAL, Severity.MEDIUM,
            "No limitation of liability is agreed, which may lead to unlimited compensation",
            "Cap compensation at the contract amount or another fixed ceiling",
            RiskCategory.LEGAL,
        )

    return findings
