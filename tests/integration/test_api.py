"""Integration tests for the HTTP API."""

import base64


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "0.1.0"}


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class TestReports:
    def test_catalog(self, client):
        body = client.get("/api/reports/catalog").json()
        assert body["dataSources"] == ["Financials", "Risks", "Milestones", "KPIs", "Goals"]
        assert "Risk: Level" in body["sourceMetrics"]["Risks"]
        assert "Risk: Level" not in body["sourceMetrics"]["Financials"]

    def test_resolve_drops_orphaned_metrics(self, client):
        response = client.post(
            "/api/reports/resolve",
            json={"metrics": ["Risk: Level", "Financial: ROI (%)"], "dataSources": ["Financials"]},
        )
        assert response.status_code == 200
        body = response.json()
        assert "Risk: Level" not in body["resolvedMetrics"]
        assert body["config"]["metrics"] == ["Financial: ROI (%)"]
        assert body["config"]["dataSources"] == ["Financials"]

    def test_generate_rejects_empty_selection(self, client):
        response = client.post("/api/reports/generate", json={"metrics": []})
        assert response.status_code == 422
        assert response.json()["detail"] == "select at least one metric"

    def test_generate_bar_chart(self, client):
        response = client.post(
            "/api/reports/generate",
            json={"metrics": ["Budget Utilization", "Task Completion"], "visualization": "Bar Chart"},
        )
        assert response.status_code == 200
        body = response.json()
        assert len(body["labels"]) == 7
        assert [d["label"] for d in body["datasets"]] == ["Budget Utilization", "Task Completion"]
        assert all(len(d["data"]) == 7 for d in body["datasets"])
        assert "backgroundColor" not in body["datasets"][0]

    def test_generate_styled_pie(self, client):
        response = client.post(
            "/api/reports/generate?styled=true",
            json={"metrics": ["Risk Mitigation", "Risk: Score"], "visualization": "Pie Chart"},
        )
        body = response.json()
        assert len(body["datasets"]) == 1
        assert len(body["datasets"][0]["backgroundColor"]) == len(body["labels"])

    def test_batch(self, client):
        response = client.post(
            "/api/reports/batch",
            json=[
                {"id": "1", "name": "Budget", "metrics": ["Budget Utilization"]},
                {"id": "2", "name": "Empty", "metrics": []},
            ],
        )
        assert response.status_code == 200
        body = response.json()
        assert [r["status"] for r in body] == ["completed", "pending"]
        assert body[0]["result"]["datasets"][0]["label"] == "Budget Utilization"

    def test_export_csv(self, client):
        response = client.post(
            "/api/reports/export/csv",
            json={
                "title": "Budget Report",
                "data": {"labels": ["Jan", "Feb"], "datasets": [{"label": "X", "data": [1, 2]}]},
            },
        )
        assert response.status_code == 200
        assert response.text == "Category,X\nJan,1\nFeb,2"
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="Budget Report.csv"' in response.headers["content-disposition"]

    def test_export_csv_without_data(self, client):
        response = client.post("/api/reports/export/csv", json={"title": "Empty"})
        assert response.status_code == 409
        assert response.json()["detail"] == "no data to export"

    def test_export_png_without_data(self, client):
        response = client.post("/api/reports/export/png", json={"title": "Empty"})
        assert response.status_code == 409
        assert response.json()["detail"] == "no data to export"

    def test_export_png_without_chart(self, client):
        response = client.post(
            "/api/reports/export/png",
            json={"title": "Empty", "data": {"labels": [], "datasets": []}},
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "no chart to export"

    def test_export_png_renders_chart(self, client, monkeypatch):
        monkeypatch.setattr(
            "src.services.export.surface.PlotlyChartSurface.capture", lambda self: b"png-bytes"
        )
        response = client.post(
            "/api/reports/export/png",
            json={
                "title": "Budget Report",
                "data": {"labels": ["Jan"], "datasets": [{"label": "X", "data": [1]}]},
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["filename"] == "Budget Report.png"
        encoded = body["dataUri"].split(",", 1)[1]
        assert base64.b64decode(encoded) == b"png-bytes"

    def test_schedule(self, client):
        response = client.post(
            "/api/reports/schedule",
            json={
                "config": {"metrics": ["Risk: Score"]},
                "frequency": "Monthly",
                "time": "08:30",
                "recipients": ["pm@example.com"],
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Risk: Score Report"
        assert body["frequency"] == "Monthly"

    def test_schedule_rejects_empty_selection(self, client):
        response = client.post("/api/reports/schedule", json={"config": {"metrics": []}})
        assert response.status_code == 422

    def test_share(self, client):
        response = client.post(
            "/api/reports/share",
            json={"emails": ["a@example.com"], "config": {"metrics": ["Risk: Score"]}},
        )
        assert response.status_code == 200
        assert response.json() == {"status": "success", "id": "Risk: Score Report"}

    def test_share_requires_emails(self, client):
        response = client.post("/api/reports/share", json={"emails": [], "config": {"metrics": []}})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Widgets
# ---------------------------------------------------------------------------


class TestWidgets:
    def test_list(self, client):
        body = client.get("/api/widgets/").json()
        assert [w["id"] for w in body] == [1, 2, 3, 4]
        assert body[2]["chartKind"] == "pie"

    def test_move(self, client):
        response = client.post("/api/widgets/move", json={"sourceId": 1, "targetId": 3})
        assert response.status_code == 200
        assert [w["id"] for w in response.json()] == [2, 3, 1, 4]
        assert [w["id"] for w in client.get("/api/widgets/").json()] == [2, 3, 1, 4]

    def test_move_onto_itself_keeps_order(self, client):
        response = client.post("/api/widgets/move", json={"sourceId": 2, "targetId": 2})
        assert response.status_code == 200
        assert [w["id"] for w in response.json()] == [1, 2, 3, 4]

    def test_move_unknown_widget(self, client):
        response = client.post("/api/widgets/move", json={"sourceId": 1, "targetId": 99})
        assert response.status_code == 404

    def test_resize(self, client):
        response = client.patch("/api/widgets/2/size", json={"size": "large"})
        assert response.status_code == 200
        assert response.json()["size"] == "large"

    def test_resize_invalid_size(self, client):
        response = client.patch("/api/widgets/2/size", json={"size": "huge"})
        assert response.status_code == 422

    def test_resize_unknown_widget(self, client):
        response = client.patch("/api/widgets/99/size", json={"size": "large"})
        assert response.status_code == 404

    def test_preview(self, client):
        body = client.get("/api/widgets/4/preview").json()
        assert [d["label"] for d in body["datasets"]] == ["Task Completion"]
        assert len(body["labels"]) == 12
        assert "borderColor" in body["datasets"][0]


# ---------------------------------------------------------------------------
# Documents, insights and notifications
# ---------------------------------------------------------------------------


def test_documents_upload_and_list(client):
    response = client.post(
        "/api/documents/",
        files={"file": ("Roadmap.pptx", b"x" * 1024, "application/octet-stream")},
    )
    assert response.status_code == 201
    document = response.json()
    assert document["id"] == 5
    assert document["type"] == "pptx"
    assert document["size"] == "0.0MB"

    names = [d["name"] for d in client.get("/api/documents/").json()]
    assert names[-1] == "Roadmap.pptx"


def test_insights(client):
    body = client.get("/api/insights").json()
    assert len(body) == 4
    assert body[0]["summary"] == "Budget exceeding 80% utilization."
    assert body[0]["timestamp"] is not None


def test_notifications_listed_and_dismissed(client):
    notifications = client.app.state.notifications
    note = notifications.notify("success", "Report scheduled")

    listed = client.get("/api/notifications").json()
    assert [n["id"] for n in listed] == [note.id]

    assert client.delete(f"/api/notifications/{note.id}").status_code == 204
    assert client.get("/api/notifications").json() == []


def test_export_csv_with_non_latin_title(client):
    response = client.post(
        "/api/reports/export/csv",
        json={
            "title": 'Q3 报告 "final"',
            "data": {"labels": ["Jan"], "datasets": [{"label": "X", "data": [1]}]},
        },
    )
    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert "filename*=UTF-8''Q3%20%E6%8A%A5%E5%91%8A%20%22final%22.csv" in disposition
    assert "filename=\"Q3 ?? 'final'.csv\"" in disposition


def test_generate_failure_posts_notification(client, monkeypatch):
    async def failing(config):
        raise RuntimeError("backend down")

    monkeypatch.setattr(client.app.state.client, "generate_report", failing)
    response = client.post("/api/reports/generate", json={"metrics": ["Risk: Score"]})
    assert response.status_code == 502
    messages = [n["message"] for n in client.get("/api/notifications").json()]
    assert messages == ["Failed to generate report"]


# ---------------------------------------------------------------------------
# Report builder session
# ---------------------------------------------------------------------------


class TestReportSession:
    def test_initial_state(self, client):
        body = client.get("/api/reports/session").json()
        assert body["resolvedMetrics"] == []
        assert body["canSubmit"] is False
        assert body["submitHint"] == "select at least one metric"
        assert body["title"] == "Report"
        assert body["chartData"] is None

    def test_selection_reconciles(self, client):
        client.put("/api/reports/session/data-sources", json={"dataSources": ["Financials", "Risks"]})
        client.post("/api/reports/session/metrics/toggle", json={"metric": "Risk: Level"})
        body = client.post(
            "/api/reports/session/metrics/toggle", json={"metric": "Budget Utilization"}
        ).json()
        assert body["config"]["metrics"] == ["Risk: Level", "Budget Utilization"]

        body = client.put("/api/reports/session/data-sources", json={"dataSources": ["Financials"]}).json()
        assert "Risk: Level" not in body["resolvedMetrics"]
        assert body["config"]["metrics"] == ["Budget Utilization"]
        assert body["config"]["dataSources"] == ["Financials"]

    def test_visualization_and_date_range(self, client):
        client.put("/api/reports/session/visualization", json={"visualization": "Pie Chart"})
        body = client.put("/api/reports/session/date-range", json={"dateRange": "Last 7 Days"}).json()
        assert body["config"]["visualization"] == "Pie Chart"
        assert body["config"]["dateRange"] == "Last 7 Days"

    def test_generate_and_export_csv(self, client):
        client.put("/api/reports/session/data-sources", json={"dataSources": ["Risks"]})
        client.post("/api/reports/session/metrics/toggle", json={"metric": "Risk: Score"})

        body = client.post("/api/reports/session/generate").json()
        assert body["isGenerating"] is False
        assert [d["label"] for d in body["chartData"]["datasets"]] == ["Risk: Score"]

        response = client.post("/api/reports/session/export", json={"format": "csv"})
        assert response.status_code == 200
        assert response.text.startswith("Category,Risk: Score\n")
        assert "Risk%3A%20Score%20Report.csv" in response.headers["content-disposition"]

    def test_generate_without_metrics_warns(self, client):
        body = client.post("/api/reports/session/generate").json()
        assert body["chartData"] is None
        notes = client.get("/api/notifications").json()
        assert [(n["type"], n["message"]) for n in notes] == [
            ("warning", "select at least one metric")
        ]

    def test_export_without_chart(self, client):
        response = client.post("/api/reports/session/export", json={"format": "png"})
        assert response.status_code == 409
        assert response.json()["detail"] == "no data to export"
        assert client.get("/api/notifications").json()[0]["message"] == "no data to export"

    def test_export_unknown_format_rejected(self, client):
        response = client.post("/api/reports/session/export", json={"format": "pdf"})
        assert response.status_code == 422
