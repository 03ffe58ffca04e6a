"""
Integration tests for the ShiftSense API.

All endpoints tested:
- System: health, request tracing
- Dashboard: summary
- Predictions: query, list all, detail, save
- Analysis: live risk, analyze
- Batch: upload, streamed upload
- Settings: webhook URL, risk thresholds
"""

import inspect
import json

from shiftsense.routers import settings as settings_router
from tests.conftest import DEFAULT_WEBHOOK_URL

SEED_COUNT = 10
SYNTHETIC_COUNT = 40
STORE_SIZE = SEED_COUNT + SYNTHETIC_COUNT


def prediction_payload(**overrides):
    payload = {
        "employee_id": "EMP500",
        "employee_name": "Priya Nair",
        "shift_date": "2025-02-14",
        "adherence_pct": 81,
        "tardiness_count": 2,
        "aux_time_pct": 19,
        "calls_handled": 104,
        "unplanned_absences": 1,
        "calculated_risk_score": 77,
        "risk_factors": "AI-generated risk factors based on input.",
        "needs_shift_coverage": True,
        "ai_prediction": "Trend requires attention.",
        "ai_recommendation": "Follow up this week.",
        "ot_strategy": "Pre-book overtime.",
        "aux_strategy": "Review AUX usage.",
    }
    payload.update(overrides)
    return payload


# ============================================================================
# System
# ============================================================================


class TestSystemEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["predictions"] == STORE_SIZE

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-abc-123"})
        assert response.headers["X-Request-ID"] == "req-abc-123"

    def test_request_id_generated(self, client):
        response = client.get("/health")
        assert response.headers.get("X-Request-ID")


# ============================================================================
# Dashboard
# ============================================================================


class TestDashboardEndpoints:
    def test_summary_shape(self, client):
        response = client.get("/api/v1/dashboard/summary")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True

        data = body["data"]
        assert data["total_employees"] == 120
        assert data["avg_team_adherence"] == 88.0
        assert data["team_health_status"] in ("At Risk", "Good")
        assert [entry["name"] for entry in data["risk_distribution"]] == [
            "Critical", "Warning", "Monitor", "Good",
        ]

    def test_summary_counts_cover_store(self, client):
        data = client.get("/api/v1/dashboard/summary").json()["data"]
        assert sum(entry["value"] for entry in data["risk_distribution"]) == STORE_SIZE
        assert data["critical_risk_count"] == data["risk_distribution"][0]["value"]
        assert data["warning_count"] == data["risk_distribution"][1]["value"]

    def test_summary_lists(self, client):
        data = client.get("/api/v1/dashboard/summary").json()["data"]
        assert len(data["recent_alerts"]) <= 10
        for alert in data["recent_alerts"]:
            assert alert["risk_level"] == "Critical"
            assert alert["action_status"] in ("Pending", "Complete")

        scores = [p["calculated_risk_score"] for p in data["high_risk_employees"]]
        assert scores == sorted(scores, reverse=True)
        assert all(p["calculated_risk_level"] in ("Critical", "Warning") for p in data["high_risk_employees"])


# ============================================================================
# Predictions
# ============================================================================


class TestPredictionEndpoints:
    def test_query_default_page(self, client):
        response = client.get("/api/v1/predictions/")
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 10
        assert body["pagination"]["total_count"] == STORE_SIZE
        assert body["pagination"]["total_pages"] == 5
        assert body["pagination"]["has_next"] is True

        timestamps = [p["analysis_timestamp"] for p in body["data"]]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_query_search(self, client):
        body = client.get("/api/v1/predictions/", params={"search": "jessica"}).json()
        assert [p["employee_name"] for p in body["data"]] == ["Jessica Torres"]

    def test_query_filter_level(self, client):
        body = client.get("/api/v1/predictions/", params={"risk_level": "Critical", "page_size": 100}).json()
        assert body["data"]
        assert all(p["calculated_risk_level"] == "Critical" for p in body["data"])

    def test_query_sort_by_score_asc(self, client):
        body = client.get(
            "/api/v1/predictions/",
            params={"sort_key": "calculated_risk_score", "direction": "asc", "page_size": 100},
        ).json()
        scores = [p["calculated_risk_score"] for p in body["data"]]
        assert scores == sorted(scores)

    def test_query_unknown_sort_key(self, client):
        response = client.get("/api/v1/predictions/", params={"sort_key": "ai_prediction"})
        assert response.status_code == 422

    def test_query_unknown_level(self, client):
        response = client.get("/api/v1/predictions/", params={"risk_level": "Severe"})
        assert response.status_code == 422

    def test_query_page_past_end(self, client):
        body = client.get("/api/v1/predictions/", params={"page": 99}).json()
        assert body["data"] == []
        assert body["pagination"]["has_next"] is False

    def test_list_all(self, client):
        body = client.get("/api/v1/predictions/all").json()
        assert body["total_count"] == STORE_SIZE
        assert len(body["data"]) == STORE_SIZE

    def test_get_seed_prediction(self, client):
        response = client.get("/api/v1/predictions/EMP201/2024-11-16")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["employee_name"] == "Jessica Torres"
        assert data["calculated_risk_score"] == 100
        assert data["calculated_risk_level"] == "Critical"
        assert data["needs_shift_coverage"] is True

    def test_get_missing_prediction(self, client):
        response = client.get("/api/v1/predictions/EMP000/2024-11-16")
        assert response.status_code == 404

    def test_save_inserts_new(self, client):
        response = client.post("/api/v1/predictions/", json=prediction_payload())
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["calculated_risk_level"] == "Critical"

        all_body = client.get("/api/v1/predictions/all").json()
        assert all_body["total_count"] == STORE_SIZE + 1
        assert all_body["data"][0]["employee_id"] == "EMP500"

    def test_save_replaces_same_key(self, client):
        client.post("/api/v1/predictions/", json=prediction_payload())
        client.post("/api/v1/predictions/", json=prediction_payload(calculated_risk_score=12))

        all_body = client.get("/api/v1/predictions/all").json()
        assert all_body["total_count"] == STORE_SIZE + 1
        saved = client.get("/api/v1/predictions/EMP500/2025-02-14").json()["data"]
        assert saved["calculated_risk_score"] == 12
        assert saved["calculated_risk_level"] == "Good"

    def test_save_ignores_supplied_level(self, client):
        payload = prediction_payload(calculated_risk_score=25, calculated_risk_level="Critical")
        data = client.post("/api/v1/predictions/", json=payload).json()["data"]
        assert data["calculated_risk_level"] == "Monitor"

    def test_save_rejects_out_of_range_score(self, client):
        response = client.post("/api/v1/predictions/", json=prediction_payload(calculated_risk_score=150))
        assert response.status_code == 422


# ============================================================================
# Analysis
# ============================================================================


class TestAnalysisEndpoints:
    def test_live_risk_all_signals(self, client):
        response = client.post(
            "/api/v1/analysis/live-risk",
            json={
                "adherence_pct": 42,
                "tardiness_count": 6,
                "aux_time_pct": 58,
                "calls_handled": 38,
                "unplanned_absences": 3,
            },
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["score"] == 100
        assert data["level"] == "Critical"
        assert data["breakdown"] == {
            "adherence_pct": 35,
            "tardiness_count": 25,
            "aux_time_pct": 20,
            "calls_handled": 15,
            "unplanned_absences": 25,
        }

    def test_live_risk_empty_form_uses_defaults(self, client):
        data = client.post("/api/v1/analysis/live-risk", json={}).json()["data"]
        assert data["score"] == 0
        assert data["level"] == "Good"
        assert data["risk_factors"] == "No significant risk factors"

    def test_live_risk_rejects_negative(self, client):
        response = client.post("/api/v1/analysis/live-risk", json={"tardiness_count": -1})
        assert response.status_code == 422

    def test_analyze_returns_prediction(self, client):
        response = client.post(
            "/api/v1/analysis/analyze",
            json={"employee_id": "EMP321", "employee_name": "Nina Patel", "shift_date": "2025-03-02"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["employee_id"] == "EMP321"
        assert data["shift_date"] == "2025-03-02"
        assert 0 <= data["calculated_risk_score"] <= 99
        assert data["needs_shift_coverage"] == (data["calculated_risk_level"] == "Critical")
        assert "Nina Patel" in data["ai_prediction"]

    def test_analyze_generates_employee_id(self, client):
        data = client.post("/api/v1/analysis/analyze", json={"employee_name": "Nina Patel"}).json()["data"]
        assert data["employee_id"].startswith("E")
        assert len(data["employee_id"]) == 5

    def test_analyze_does_not_save(self, client):
        client.post("/api/v1/analysis/analyze", json={"employee_name": "Nina Patel"})
        assert client.get("/api/v1/predictions/all").json()["total_count"] == STORE_SIZE

    def test_analyze_requires_name(self, client):
        response = client.post("/api/v1/analysis/analyze", json={"employee_name": "   "})
        assert response.status_code == 422
        assert response.json()["detail"] == "Please enter an employee name."


# ============================================================================
# Batch
# ============================================================================


def upload(client, content: bytes, filename: str = "team.csv", path: str = "/api/v1/batch/upload"):
    return client.post(path, files={"file": (filename, content, "text/csv")})


class TestBatchEndpoints:
    def test_upload_counts(self, client):
        content = (
            b"employee_name,adherence_pct,tardiness_count\n"
            b"Ana Ruiz,88,0\n"
            b",75,2\n"
            b"Ben Ode,,1\n"
            b"Cleo Wu,61,4\n"
        )
        response = upload(client, content)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_rows"] == 4
        assert data["success"] == 2
        assert data["failed"] == 2
        assert data["progress"] == 100.0
        assert data["completed"] is True
        assert [o["valid"] for o in data["row_outcomes"]] == [True, False, False, True]

    def test_upload_tsv(self, client):
        response = upload(client, b"employee_name\tadherence_pct\nAna\t88\n", filename="team.tsv")
        assert response.json()["data"]["success"] == 1

    def test_upload_empty_file(self, client):
        response = upload(client, b"")
        assert response.status_code == 400
        assert response.json()["detail"] == "No data to process."

    def test_upload_header_only(self, client):
        response = upload(client, b"employee_name,adherence_pct\n")
        assert response.status_code == 400
        assert response.json()["detail"] == "No data to process."

    def test_upload_trailing_fields_keep_columns(self, client):
        response = upload(client, b"employee_name,adherence_pct\nAna Ruiz,88,note\n,88,note\n")
        assert response.status_code == 200
        data = response.json()["data"]
        assert (data["success"], data["failed"]) == (1, 1)
        assert data["row_outcomes"][1]["missing_fields"] == ["employee_name"]

    def test_upload_malformed(self, client):
        response = upload(client, b"employee_name,adherence_pct\n\"Ana,88\nBen,70\n")
        assert response.status_code == 400
        assert response.json()["detail"].startswith("CSV parsing error:")

    def test_upload_does_not_touch_store(self, client):
        upload(client, b"employee_name,adherence_pct\nAna,88\n")
        assert client.get("/api/v1/predictions/all").json()["total_count"] == STORE_SIZE

    def test_upload_stream(self, client):
        content = b"employee_name,adherence_pct\nAna,88\n,70\nBen,65\nCleo,\n"
        response = upload(client, content, path="/api/v1/batch/upload/stream")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")

        lines = [json.loads(line) for line in response.text.splitlines() if line]
        progress_lines, final = lines[:-1], lines[-1]
        assert [line["processed"] for line in progress_lines] == [1, 2, 3, 4]
        assert [line["progress"] for line in progress_lines] == [25.0, 50.0, 75.0, 100.0]
        assert final == {"done": True, "success": 2, "failed": 2, "progress": 100.0}

    def test_upload_stream_empty_rejected(self, client):
        response = upload(client, b"", path="/api/v1/batch/upload/stream")
        assert response.status_code == 400


# ============================================================================
# Settings
# ============================================================================


class TestSettingsEndpoints:
    def test_webhook_handlers_run_in_threadpool(self):
        # FastAPI runs plain def handlers off the event loop
        assert not inspect.iscoroutinefunction(settings_router.get_webhook)
        assert not inspect.iscoroutinefunction(settings_router.save_webhook)

    def test_webhook_default(self, client):
        data = client.get("/api/v1/settings/webhook").json()["data"]
        assert data == {"key": "n8nWebhookUrl", "url": DEFAULT_WEBHOOK_URL, "is_default": True}

    def test_webhook_save_and_read(self, client, mock_settings_store):
        response = client.put("/api/v1/settings/webhook", json={"url": "https://hooks.example.com/intake"})
        assert response.status_code == 200
        assert response.json()["data"]["url"] == "https://hooks.example.com/intake"

        data = client.get("/api/v1/settings/webhook").json()["data"]
        assert data["url"] == "https://hooks.example.com/intake"
        assert data["is_default"] is False
        assert mock_settings_store.values["n8nWebhookUrl"] == "https://hooks.example.com/intake"

    def test_webhook_invalid_rejected(self, client, mock_settings_store):
        response = client.put("/api/v1/settings/webhook", json={"url": "not a url"})
        assert response.status_code == 422
        assert response.json()["detail"] == "Invalid Webhook URL provided."
        assert mock_settings_store.writes == 0

    def test_risk_thresholds(self, client):
        data = client.get("/api/v1/settings/risk-thresholds").json()["data"]
        assert data == [
            {"level": "Critical", "min_score": 70, "max_score": 100},
            {"level": "Warning", "min_score": 40, "max_score": 69},
            {"level": "Monitor", "min_score": 20, "max_score": 39},
            {"level": "Good", "min_score": 0, "max_score": 19},
        ]
