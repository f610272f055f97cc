"""Tests for the JSON API and health blueprints."""

import pytest

from revenue_pacing.services.container import get_container

TARGETS = {"dailyTargets": {"austin": 1000, "charlotte": 2000}, "monthlyAdjustments": []}
MARCH_DAYS = (1, 4, 5, 6, 7, 8, 11, 12, 13, 14)


@pytest.fixture
def payload():
    return {
        "records": [
            {"date": f"2024-03-{day:02d}", "austin": 1000, "charlotte": 2000} for day in MARCH_DAYS
        ],
        "targets": TARGETS,
        "asOf": "2024-03-15",
    }


def post(client, path, body):
    return client.post(path, json=body)


class TestTargetsApi:
    def test_default_targets(self, client):
        response = client.get("/api/targets/default")
        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["data"]["dailyTargets"] == {"austin": 53000.0, "charlotte": 62500.0}

    def test_resolve_target(self, client):
        body = {
            "date": "2024-03-11",
            "targets": {
                "dailyTargets": {"austin": 1000, "charlotte": 2000},
                "monthlyAdjustments": [{"month": 2, "year": 2024, "workingDays": [4, 5]}],
            },
        }
        data = post(client, "/api/targets/resolve", body).get_json()["data"]
        assert data == {"date": "2024-03-11", "austin": 0.0, "charlotte": 0.0, "combined": 0.0}

    def test_resolve_target_requires_date(self, client):
        response = post(client, "/api/targets/resolve", {})
        assert response.status_code == 400
        assert response.get_json()["error_code"] == "VALIDATION_ERROR"

    def test_business_days(self, client):
        data = post(client, "/api/business-days", {"year": 2024, "month": 3, "asOf": "2024-03-15"}).get_json()
        assert data["data"]["total"] == 21
        assert data["data"]["elapsed"] == 10

    @pytest.mark.parametrize("body", [{"year": 2024}, {"year": 2024, "month": 13}, {"year": "x", "month": 1}])
    def test_business_days_bad_input(self, client, body):
        assert post(client, "/api/business-days", body).status_code == 400


class TestMetricsApi:
    def test_filter_records(self, client, payload):
        payload.update({"timeFrame": "custom", "startDate": "2024-03-04", "endDate": "2024-03-08"})
        data = post(client, "/api/records/filter", payload).get_json()["data"]
        assert data["count"] == 5
        assert data["records"][0] == {"date": "2024-03-04", "austin": 1000.0, "charlotte": 2000.0}

    def test_location_metrics(self, client, payload):
        data = post(client, "/api/metrics/location", payload).get_json()["data"]
        assert data["total"]["revenue"] == 30000.0
        assert data["total"]["attainment_percent"] == pytest.approx(100.0)
        assert data["period_info"]["working_days_in_period"] == 21

    def test_period_metrics(self, client, payload):
        payload["timeFrame"] = "last30"
        data = post(client, "/api/metrics/period", payload).get_json()["data"]
        assert data["austin"]["revenue"] == 10000.0

    def test_unknown_time_frame(self, client, payload):
        payload["timeFrame"] = "fortnight"
        response = post(client, "/api/metrics/location", payload)
        assert response.status_code == 400
        assert response.get_json()["error_code"] == "INVALID_INPUT"

    def test_bad_record(self, client, payload):
        payload["records"].append({"date": "not-a-date", "austin": 1, "charlotte": 1})
        assert post(client, "/api/metrics/location", payload).status_code == 400

    def test_records_must_be_list(self, client):
        response = post(client, "/api/summary/period", {"records": "nope"})
        assert response.status_code == 400

    def test_invalid_json_body(self, client):
        response = client.post("/api/summary/period", data="{not json", content_type="application/json")
        assert response.status_code == 400


class TestReportsApi:
    def test_weekly_anomalies(self, client, payload):
        payload["records"].append({"date": "2024-03-15", "austin": 1000, "charlotte": 2000})
        payload["asOf"] = "2024-03-16"
        data = post(client, "/api/anomalies/weekly", payload).get_json()["data"]
        assert data["has_alerts"] is False

    def test_validate_broken_targets(self, client, payload):
        payload["targets"] = {"dailyTargets": [1000, 2000]}
        response = post(client, "/api/validate", payload)
        assert response.status_code == 200
        assert response.get_json()["data"]["is_valid"] is False

    def test_filter_rejects_scalar_threshold(self, client, payload):
        payload["attainmentThreshold"] = "50"
        response = post(client, "/api/records/filter", payload)
        assert response.status_code == 400
        assert response.get_json()["error_code"] == "INVALID_INPUT"

    def test_missing_data(self, client, payload):
        payload["records"] = payload["records"][:-2]
        data = post(client, "/api/missing-data", payload).get_json()["data"]
        assert data["missing_dates"] == ["2024-03-13", "2024-03-14"]

    def test_validate_reports_findings(self, client, payload):
        payload["records"].append({"date": "2024-03-14", "austin": 1, "charlotte": 1})
        response = post(client, "/api/validate", payload)
        assert response.status_code == 200
        assert response.get_json()["data"]["is_valid"] is False

    def test_insights(self, client, payload):
        data = post(client, "/api/insights", payload).get_json()["data"]
        assert data["ok"] is True
        assert data["insights"]["executive_summary"]["risk_level"] == "low"

    def test_insights_without_data(self, client):
        data = post(client, "/api/insights", {"records": [], "targets": TARGETS}).get_json()["data"]
        assert data == {"ok": False, "reason": "NO_DATA", "message": data["message"]}

    def test_summaries(self, client, payload):
        assert post(client, "/api/summary/period", payload).get_json()["data"]["total_days"] == 10
        weekly = post(client, "/api/summary/time-periods", payload).get_json()["data"]["weekly"]
        assert len(weekly) == 2

    def test_trends(self, client, payload):
        trends = post(client, "/api/trends/monthly", payload).get_json()["data"]
        assert [t["label"] for t in trends] == ["Mar"]
        payload["periods"] = 0
        assert post(client, "/api/trends/moving-average", payload).status_code == 400

    def test_business_intelligence(self, client, payload):
        data = post(client, "/api/business-intelligence", payload).get_json()["data"]
        assert data["performance_metrics"]["efficiency"] == pytest.approx(100.0)

    def test_consistency(self, client, payload):
        data = post(client, "/api/consistency", payload).get_json()["data"]
        assert data["is_valid"] is True
        assert data["summary"]["filtered_records"] == 10


class TestHealthApi:
    def test_health(self, client):
        response = client.get("/health/")
        assert response.status_code == 200
        assert response.get_json()["data"]["overall_status"] == "healthy"

    def test_health_degraded(self, client):
        def broken():
            raise RuntimeError("unavailable")

        get_container().register_singleton("revenue_file_service", broken)
        assert client.get("/health/").status_code == 206

    def test_services(self, client):
        data = client.get("/health/services").get_json()["data"]
        assert data["environment"] == "test"
        assert data["services"]["dashboard_service"] == "singleton_factory"

    def test_system(self, client):
        data = client.get("/health/system").get_json()["data"]
        assert "memory_percent" in data["system"]

    def test_info(self, client):
        data = client.get("/info").get_json()
        assert data["environment"] == "test"
        assert data["locations"] == ["Austin", "Charlotte"]
