from typing import List
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

TRUNCATION_MARKER = "\n\n[... contract text truncated ...]"

SYSTEM_INSTRUCTION = (
    "You are a legal contract review assistant. Always respond in valid JSON format."
)

# Braces are doubled because the template is formatted with str.format semantics
REVIEW_TASK = """You are a senior corporate counsel with ten years of contract review experience. Review the following contract professionally.

Review focus:
1. Balance of rights and obligations (clearly one-sided terms)
2. Allocation of risk (force majeure, change of circumstances)
3. Exit mechanisms (termination conditions, liability for breach)
4. Ownership of intellectual property (especially for technical or creative work)
5. Confidentiality and non-compete (scope, duration, compensation)
6. Payment and delivery (payment terms, acceptance criteria)
7. Dispute resolution (jurisdiction, governing law)

Output format:
Return strict JSON only, without markdown code fences:
{{
  "overallRisk": "high/medium/low",
  "riskScore": 78,
  "keyRisks": [
    {{
      "clause": "summary of the original clause",
      "location": "Article X",
      "riskType": "legal/commercial/operational/ip",
      "severity": "high/medium/low",
      "explanation": "what the risk is",
      "suggestion": "how to amend it",
      "category": "risk category",
      "law": "statute relied on, if any"
    }}
  ],
  "missingClauses": ["clauses that should be added"],
  "thinking": "reasoning to share with the legal team"
}}

Contract text:
"""

review_prompt = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_INSTRUCTION),
    ("user", REVIEW_TASK + "{contract_text}"),
])


def truncate_contract(text: str, max_chars: int) -> str:
    """Cap the contract text sent to a provider, marking any cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def build_review_messages(text: str, max_chars: int) -> List[BaseMessage]:
    """Build the system and user messages for a contract review request.

    Args:
        text: Plain contract text
        max_chars: Hard cap on the contract characters included

    Returns:
        Messages ready to be converted to a provider's chat format
    """
    return review_prompt.format_messages(contract_text=truncate_contract(text, max_chars))
