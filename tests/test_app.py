# tests/test_app.py
"""
Tests for the Flask routes: the truth table page and the JSON API.
"""

import pytest

import app as app_module
from app import create_app


class TestIndexPage:

    def test_get(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"Truth table calculator" in resp.data

    def test_post_builds_table(self, client):
        resp = client.post("/", data={"expr": "p ∧ (q ∨ r)"})
        assert resp.status_code == 200
        html = resp.get_data(as_text=True)
        assert "contingency" in html
        assert "<th>q∨r</th>" in html
        assert html.count("<tr>") == 1 + 8

    def test_multiple_expressions(self, client):
        resp = client.post("/", data={"expr": "p ∨ ¬p\np ∧ ¬p"})
        html = resp.get_data(as_text=True)
        assert "tautology" in html
        assert "contradiction" in html

    def test_bare_variable_has_no_duplicate_column(self, client):
        html = client.post("/", data={"expr": "p"}).get_data(as_text=True)
        assert html.count("<th>p</th>") == 1
        assert '<th class="result">p</th>' not in html

    def test_invalid_expression_shows_message(self, client):
        resp = client.post("/", data={"expr": "p ∧"})
        assert resp.status_code == 200
        assert "Expression ends with an operator" in resp.get_data(as_text=True)


class TestEvaluateApi:

    def test_result(self, client):
        resp = client.post("/api/evaluate", json={"expression": "p → q", "values": {"p": True, "q": False}})
        assert resp.status_code == 200
        assert resp.get_json() == {"success": True, "result": False, "steps": []}

    def test_trace(self, client):
        resp = client.post(
            "/api/evaluate",
            json={"expression": "p ∧ (q ∨ r)", "values": {"p": 1, "q": 0, "r": 1}, "trace": True},
        )
        data = resp.get_json()
        assert data["result"] is True
        assert data["expression"] == "p ∧ (q ∨ r)"
        assert data["steps"][1]["sub_steps"][0]["description"] == "F ∨ T = T (OR)"
        assert [s["operation"] for s in data["substitution_steps"]] == [
            "Original expression",
            "Substitution: p",
            "Substitution: q",
            "Substitution: r",
        ]

    def test_missing_value(self, client):
        resp = client.post("/api/evaluate", json={"expression": "p ∧ q", "values": {"p": True}})
        assert resp.status_code == 400
        data = resp.get_json()
        assert data["success"] is False
        assert "q" in data["message"]

    def test_malformed(self, client):
        resp = client.post("/api/evaluate", json={"expression": "p ∧ ∧ q", "values": {}})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Two binary operators in a row"

    def test_expression_required(self, client):
        resp = client.post("/api/evaluate", json={})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "expression is required"

    def test_bad_value_type(self, client):
        resp = client.post("/api/evaluate", json={"expression": "p", "values": {"p": "yes"}})
        assert resp.status_code == 400

    def test_body_must_be_an_object(self, client):
        resp = client.post("/api/evaluate", json=[1, 2])
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "request body must be a JSON object"

    def test_validate_body_must_be_an_object(self, client):
        resp = client.post("/api/validate", json="p")
        assert resp.status_code == 400


class TestTableApis:

    def test_truth_table(self, client):
        resp = client.post("/api/truth-table", json={"expression": "p ∧ q"})
        data = resp.get_json()
        assert data["variables"] == ["p", "q"]
        assert data["results"] == [False, False, False, True]

    def test_variable_limit(self):
        client = create_app({"TESTING": True, "MAX_VARIABLES": 2}).test_client()
        resp = client.post("/api/truth-table", json={"expression": "p ∧ q ∧ r"})
        assert resp.status_code == 400
        assert "Too many variables" in resp.get_json()["message"]

    def test_properties(self, client):
        data = client.post("/api/properties", json={"expression": "p ∨ ¬p"}).get_json()
        assert data["classification"] == "tautology"
        assert data["cnf"] == "1"
        assert data["dnf"] == "¬p ∨ p"

    def test_equivalence(self, client):
        data = client.post("/api/equivalence", json={"left": "p → q", "right": "q → p"}).get_json()
        assert data["equivalent"] is False
        assert data["counterexample"] == {"p": False, "q": True}

    def test_equivalence_requires_both(self, client):
        resp = client.post("/api/equivalence", json={"left": "p"})
        assert resp.status_code == 400


class TestValidateApi:

    def test_valid(self, client):
        data = client.post("/api/validate", json={"expression": "¬(p ∧ q)"}).get_json()
        assert data == {"valid": True, "message": None, "position": None}

    def test_invalid(self, client):
        data = client.post("/api/validate", json={"expression": "(p ∧ q"}).get_json()
        assert data["valid"] is False
        assert data["message"] == "Unclosed parenthesis"
        assert data["position"] == 4


class TestErrorHandlers:
    """Error handling outside testing mode"""

    @pytest.fixture
    def live_client(self):
        return create_app({"TESTING": False}).test_client()

    def test_unexpected_error_is_500(self, live_client, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("table store unavailable")

        monkeypatch.setattr(app_module, "build_truth_table", boom)
        resp = live_client.post("/api/truth-table", json={"expression": "p ∧ q"})
        assert resp.status_code == 500
        assert resp.get_json() == {"success": False, "message": "An unexpected server error occurred."}

    def test_not_found_is_kept(self, live_client):
        assert live_client.get("/no-such-page").status_code == 404

    def test_non_object_body_is_400(self, live_client):
        resp = live_client.post("/api/truth-table", json=[1, 2])
        assert resp.status_code == 400
        assert resp.get_json()["success"] is False
