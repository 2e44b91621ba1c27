"""HTTP-level tests against the FastAPI app with fake collaborators."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from agents.composition_orchestrator import CompositionOrchestrator
from agents.orchestrator import ReviewOrchestrator
from api.dependencies import get_composition_orchestrator, get_review_orchestrator
from main import app
from services.session_store import get_review_store, get_workspace_store
from fakes import FakeLLM, FakeScholar, SAMPLE_DRAFT

REVIEWS = "/api/v1/reviews"


@pytest.fixture
def llm():
    return FakeLLM(
        texts=["**Summary** of sources", "Synthesis text", SAMPLE_DRAFT],
        json_replies=[{"methodology": "Survey", "findings": ["F1"], "citation": "C (2020)"}],
    )


@pytest.fixture
def client(llm):
    app.dependency_overrides[get_review_orchestrator] = lambda: ReviewOrchestrator(
        llm, get_review_store(), FakeScholar()
    )
    app.dependency_overrides[get_composition_orchestrator] = lambda: CompositionOrchestrator(
        llm, get_workspace_store()
    )
    with TestClient(app) as c:
        c.delete("/api/v1/preferences")
        yield c
    app.dependency_overrides.clear()


def _create(client) -> str:
    return client.post(REVIEWS, json={}).json()["session"]["id"]


def _finished_review(client) -> str:
    sid = _create(client)
    client.post(f"{REVIEWS}/{sid}/search", json={"query": "Flood preparedness", "review_type": "Scoping Review"})
    client.post(f"{REVIEWS}/{sid}/synthesize")
    client.post(f"{REVIEWS}/{sid}/write")
    client.post(f"{REVIEWS}/{sid}/finalize")
    return sid


class TestReviewWorkflow:

    def test_new_review_starts_at_plan(self, client):
        response = client.post(REVIEWS, json={}, follow_redirects=False)
        assert response.status_code == 200
        body = response.json()
        assert body["stage"]["id"] == 1
        assert body["stage"]["label"] == "PLAN"
        assert body["actions"] == ["search"]
        assert body["report"]["missing_sections"]

    def test_walk_to_finish(self, client):
        sid = _create(client)

        searched = client.post(f"{REVIEWS}/{sid}/search", json={"query": "Flood preparedness"}).json()
        assert searched["status"] == "success"
        assert searched["stage"]["label"] == "EXTRACT"
        assert searched["session"]["search_summary"] == "Summary of sources"

        captured = client.post(f"{REVIEWS}/{sid}/papers/paper-0/capture").json()
        assert captured["paper"]["captured_data"]["methodology"] == "Survey"

        assert client.post(f"{REVIEWS}/{sid}/synthesize").json()["stage"]["label"] == "SYNTHESIZE"
        written = client.post(f"{REVIEWS}/{sid}/write").json()
        assert written["report"]["hasil_kajian"] == "Tiga tema dikenal pasti."
        assert written["report"]["missing_sections"] == []

        finished = client.post(f"{REVIEWS}/{sid}/finalize").json()
        assert finished["stage"]["label"] == "FINISH"
        assert finished["stage"]["progress_percent"] == 100

    def test_blank_query_is_ignored(self, client, llm):
        sid = _create(client)
        body = client.post(f"{REVIEWS}/{sid}/search", json={"query": "   "}).json()
        assert body["status"] == "skipped"
        assert body["stage"]["label"] == "PLAN"
        assert llm.calls == []

    def test_failed_search_reports_generic_error(self, client, llm):
        llm.error = RuntimeError("API key invalid")
        sid = _create(client)
        body = client.post(f"{REVIEWS}/{sid}/search", json={"query": "Flood"}).json()
        assert body["status"] == "failed"
        assert "API key" not in body["error"]
        assert body["session"]["loading"] is False

    def test_out_of_order_action_conflicts(self, client):
        sid = _create(client)
        assert client.post(f"{REVIEWS}/{sid}/write").status_code == 409
        assert client.post(f"{REVIEWS}/{sid}/finalize").status_code == 409

    def test_unknown_session_and_paper(self, client):
        assert client.get(f"{REVIEWS}/nope").status_code == 404
        sid = _create(client)
        client.post(f"{REVIEWS}/{sid}/search", json={"query": "Flood"})
        assert client.post(f"{REVIEWS}/{sid}/papers/paper-99/capture").status_code == 404

    def test_reset(self, client):
        sid = _finished_review(client)
        body = client.post(f"{REVIEWS}/{sid}/reset").json()
        assert body["stage"]["label"] == "PLAN"
        assert body["session"]["papers"] == []

    def test_delete_review(self, client):
        sid = _create(client)
        assert client.delete(f"{REVIEWS}/{sid}").json() == {"status": "deleted", "id": sid}
        assert client.get(f"{REVIEWS}/{sid}").status_code == 404
        assert client.delete(f"{REVIEWS}/{sid}").status_code == 404


class TestExports:

    def test_export_requires_finish(self, client):
        sid = _create(client)
        assert client.get(f"{REVIEWS}/{sid}/export/text").status_code == 409

    def test_text_export(self, client):
        sid = _finished_review(client)
        response = client.get(f"{REVIEWS}/{sid}/export/text")
        assert response.status_code == 200
        assert "Report_Flood_preparedness.txt" in response.headers["content-disposition"]
        assert response.text.startswith("Topic: Flood preparedness\nReview Type: Scoping Review\n\n[TAJUK]")

    def test_word_export(self, client):
        sid = _finished_review(client)
        response = client.get(f"{REVIEWS}/{sid}/export/doc")
        assert response.headers["content-type"].startswith("application/msword")
        assert "Report_Flood_preparedness.doc" in response.headers["content-disposition"]
        assert "KANDUNGAN LAPORAN" in response.text


class TestTransferAndPreferences:

    def test_default_view(self, client):
        body = client.get("/api/v1/preferences/view").json()
        assert body == {"view": "LITERATURE_REVIEW", "title": "Literature Review Workspace"}

    def test_set_view_persists(self, client):
        client.put("/api/v1/preferences/view", json={"view": "DATA_ANALYSIS"})
        assert client.get("/api/v1/preferences/view").json()["view"] == "DATA_ANALYSIS"

    def test_unknown_view_rejected(self, client):
        assert client.put("/api/v1/preferences/view", json={"view": "SETTINGS"}).status_code == 422

    def test_transfer_switches_to_studio(self, client):
        sid = _finished_review(client)
        body = client.post(f"{REVIEWS}/{sid}/transfer", json={}).json()
        assert body["view"] == "COMPOSITION"
        assert body["workspace"]["sections"]["lr"].startswith("[TAJUK]")
        assert client.get("/api/v1/preferences/view").json()["view"] == "COMPOSITION"

    def test_reset_storage_clears_sessions(self, client):
        sid = _create(client)
        body = client.delete("/api/v1/preferences").json()
        assert body["view"] == "LITERATURE_REVIEW"
        assert client.get(f"{REVIEWS}/{sid}").status_code == 404


class TestComposition:

    def test_delete_workspace(self, client):
        ws = client.post("/api/v1/composition/workspaces", json={}).json()["workspace"]["id"]
        assert client.delete(f"/api/v1/composition/workspaces/{ws}").status_code == 200
        assert client.get(f"/api/v1/composition/workspaces/{ws}").status_code == 404

    def test_compose_and_insert(self, client, llm):
        llm.texts = ["New paragraph"]
        ws = client.post("/api/v1/composition/workspaces", json={}).json()["workspace"]["id"]
        base = f"/api/v1/composition/workspaces/{ws}"

        client.put(f"{base}/sections/intro", json={"text": "Opening"})
        client.post(f"{base}/quartile", json={"quartile": "Q2"})
        body = client.post(f"{base}/compose", json={"prompt": "Add background"}).json()

        assert body["workspace"]["sections"]["intro"] == "Opening\n\nNew paragraph"
        assert "[TARGET: Scopus Q2]" in llm.calls[-1]["prompt"]

        inserted = client.post(f"{base}/insert", json={"text": "Moreover,"}).json()
        assert inserted["workspace"]["sections"]["intro"].endswith("New paragraph Moreover,")

    def test_rewrite_tool(self, client, llm):
        llm.texts = ["Teks baharu"]
        ws = client.post("/api/v1/composition/workspaces", json={}).json()["workspace"]["id"]
        base = f"/api/v1/composition/workspaces/{ws}"
        client.put(f"{base}/sections/intro", json={"text": "Old text"})

        body = client.post(f"{base}/tools/translate", json={"language": "Malay"}).json()

        assert body["workspace"]["sections"]["intro"] == "Teks baharu"

    def test_attach_analysis(self, client):
        ws = client.post("/api/v1/composition/workspaces", json={}).json()["workspace"]["id"]
        body = client.post(
            f"/api/v1/composition/workspaces/{ws}/analysis",
            json={"summary": "Trend up", "insights": ["a"]},
        ).json()
        assert body["workspace"]["sections"]["analysis"] == "ANALISIS DATA:\nSummary: Trend up\nInsights: a"
        assert body["workspace"]["context"]["topic"] == "Research Data Analysis"


class TestAnalysis:

    def test_empty_data_rejected(self, client):
        assert client.post("/api/v1/analysis", json={"data": " "}).status_code == 400

    def test_analysis_result(self, client):
        fake = FakeLLM(json_replies=[{"summary": "**S**", "insights": [], "chart_data": [], "chart_type": "bar"}])
        with patch("api.routes.analysis.get_llm_service", return_value=fake):
            body = client.post("/api/v1/analysis", json={"data": "a,b\n1,2"}).json()
        assert body["summary"] == "S"
        assert body["chart_type"] == "bar"

    def test_upload(self, client):
        fake = FakeLLM(json_replies=[{"summary": "From file"}])
        with patch("api.routes.analysis.get_llm_service", return_value=fake):
            response = client.post("/api/v1/analysis/upload", files={"file": ("data.csv", b"x,y\n1,2")})
        assert response.json()["summary"] == "From file"
        assert "x,y" in fake.calls[0]["prompt"]

    def test_failure_is_bad_gateway(self, client):
        fake = FakeLLM(error=RuntimeError("quota"))
        with patch("api.routes.analysis.get_llm_service", return_value=fake):
            response = client.post("/api/v1/analysis", json={"data": "a,b"})
        assert response.status_code == 502
        assert "quota" not in response.text


class TestFailureBoundary:

    def test_unexpected_error_offers_recovery(self, llm):
        class Broken(ReviewOrchestrator):
            def get_session(self, session_id):
                raise RuntimeError("corrupted state")

        app.dependency_overrides[get_review_orchestrator] = lambda: Broken(llm, get_review_store(), FakeScholar())
        try:
            with TestClient(app, raise_server_exceptions=False) as c:
                response = c.get(f"{REVIEWS}/anything")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        body = response.json()
        assert body["detail"] == "Module failed to load."
        assert "reset" in body["recovery"]

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"
