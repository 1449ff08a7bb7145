"""
ContractRisk - Contract Risk Analysis Engine

Detects risky clauses in contract text with a pattern rule catalog and keyword
heuristics, optionally asks an AI provider for a structured review, and merges
everything into one scored risk report.
"""

__version__ = "1.0.0"
