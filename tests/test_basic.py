import pytest
from fastapi.testclient import TestClient

from contractrisk.main import app

client = TestClient(app)

def test_read_root():
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["app"] == "ContractRisk"
    assert "version" in response.json()

def test_api_structure():
    """Test that the API structure is correct."""
    # Test OpenAPI schema
    response = client.get("/openapi.json")
    assert response.status_code == 200
    schema = response.json()

    # Check that the main endpoints are defined
    assert "/api/analysis/analyze" in schema["paths"]
    assert "/api/analysis/rules" in schema["paths"]
    assert "/api/analysis/provider" in schema["paths"]

def test_analyze_contract(procurement_contract):
    """Test a rule-only analysis through the API."""
    response = client.post("/api/analysis/analyze", json={"text": procurement_contract, "use_ai": False})
    assert response.status_code == 200
    body = response.json()

    assert body["review"]["risk_score"] == 92
    assert body["review"]["overall_risk"] == "low"
    assert body["review"]["provider"] == "fallback"
    assert body["risk_level"] == "C"
    assert body["review"]["recommendations"] == [
        "Add a termination clause",
        "Consider adding a limitation of liability clause",
    ]
    assert body["stats"] == {"total": 4, "high": 0, "medium": 2, "low": 2}
    assert len(body["annotations"]) == 2
    assert all(a["severity"] == "medium" for a in body["annotations"])

@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "太短"}])
def test_analyze_short_text(payload):
    """Test that empty or short text gets the default analysis."""
    response = client.post("/api/analysis/analyze", json=payload)
    assert response.status_code == 200
    body = response.json()

    assert body["review"]["risk_score"] == 85
    assert body["review"]["provider"] == "none"
    assert body["risk_level"] == "D"
    assert body["annotations"] == []

def test_analyze_rejects_invalid_payload():
    """Test request validation."""
    response = client.post("/api/analysis/analyze", json={"text": ["not", "a", "string"]})
    assert response.status_code == 422

def test_list_rules():
    """Test the rule catalog endpoint."""
    response = client.get("/api/analysis/rules")
    assert response.status_code == 200
    rules = response.json()
    assert len(rules) == 14
    assert "jurisdiction-defendant" in [rule["id"] for rule in rules]

def test_provider_status(monkeypatch):
    """Test provider resolution reflects the environment per request."""
    response = client.get("/api/analysis/provider")
    assert response.json() == {"provider": "fallback", "configured": []}

    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    response = client.get("/api/analysis/provider")
    assert response.json() == {"provider": "groq", "configured": ["groq"]}
