"""
Test suite for reporting.

Tests cover:
- Template creation and filtering
- Report generation lifecycle (generating -> completed/failed)
- Download counting and deletion
- Schedules and the periodic schedule runner
"""

import csv
import io
import json
import os
import re
from datetime import datetime, timedelta, timezone

import pytest

from app.core.database import utcnow
from app.crud import report as report_crud
from app.models.audit import AuditTrailEntry
from app.models.candidate import CandidateProfile, CandidateStatus
from app.models.report import (
    GeneratedReport,
    ReportFormat,
    ReportFrequency,
    ReportSchedule,
    ReportStatus,
    ReportTemplate,
    ReportType,
)
from app.tasks.report_tasks import generate_report_task, run_due_report_schedules


def create_template(client, **overrides):
    body = {
        "name": "Weekly Hiring Summary",
        "description": "Candidate pipeline overview",
        "type": "candidate",
        "frequency": "weekly",
        "format": "csv",
    }
    body.update(overrides)
    response = client.post("/api/v1/reports/templates", json=body)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def candidates(db_session):
    db_session.add_all([
        CandidateProfile(name="Sarah Johnson", email="sarah@example.com", overall_score=9.1,
                         completed_assessments=4, success_rate=92, rank=1, status=CandidateStatus.ACTIVE),
        CandidateProfile(name="Mike Chen", email="mike@example.com", overall_score=7.4,
                         completed_assessments=3, success_rate=75.5, rank=2, status=CandidateStatus.ACTIVE),
    ])
    db_session.commit()


class TestTemplates:

    def test_create_template_defaults(self, client):
        response = client.post("/api/v1/reports/templates", json={"name": "Ad hoc", "type": "custom"})

        assert response.status_code == 201
        data = response.json()
        assert data["frequency"] == "on_demand"
        assert data["format"] == "csv"
        assert data["is_active"] is True

    def test_filter_templates_by_active(self, client):
        create_template(client, name="Active")
        create_template(client, name="Retired", is_active=False)

        active = client.get("/api/v1/reports/templates", params={"is_active": "true"}).json()
        everything = client.get("/api/v1/reports/templates").json()

        assert [t["name"] for t in active] == ["Active"]
        assert len(everything) == 2


class TestReportGeneration:

    def test_generate_csv_report(self, client, db_session, mock_celery, candidates):
        template = create_template(client)

        response = client.post("/api/v1/reports/generate", json={"template_id": template["id"]})

        assert response.status_code == 202
        report = response.json()
        assert report["status"] == "completed"
        assert report["template_name"] == "Weekly Hiring Summary"
        assert re.fullmatch(r"Weekly Hiring Summary - [A-Z][a-z]+ \d{2}, \d{4}", report["title"])
        assert report["file_size"] > 0
        assert report["download_count"] == 0

        generated_at = datetime.fromisoformat(report["generated_at"])
        expires_at = datetime.fromisoformat(report["expires_at"])
        assert expires_at - generated_at == timedelta(days=30)

    def test_generate_records_audit_entry(self, client, db_session, mock_celery):
        template = create_template(client)

        report = client.post("/api/v1/reports/generate", json={"template_id": template["id"]}).json()

        entry = db_session.query(AuditTrailEntry).filter_by(target_id=report["id"]).one()
        assert entry.action == "Generated report"
        assert entry.user_id == "system"

    def test_download_streams_file_and_counts(self, client, mock_celery, candidates):
        template = create_template(client)
        report = client.post("/api/v1/reports/generate", json={"template_id": template["id"]}).json()

        response = client.get(f"/api/v1/reports/{report['id']}/download")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0] == ["Name", "Email", "Overall Score", "Status", "Assessments Completed", "Success Rate", "Rank"]
        assert rows[1] == ["Sarah Johnson", "sarah@example.com", "9.10", "active", "4", "92%", "#1"]

        client.get(f"/api/v1/reports/{report['id']}/download")
        assert client.get(f"/api/v1/reports/{report['id']}").json()["download_count"] == 2

    def test_json_report(self, client, mock_celery, candidates):
        template = create_template(client, name="Pipeline JSON", format="json")
        report = client.post("/api/v1/reports/generate", json={"template_id": template["id"]}).json()

        response = client.get(f"/api/v1/reports/{report['id']}/download")

        document = json.loads(response.content)
        assert document["title"] == report["title"]
        assert document["row_count"] == 2
        assert document["rows"][0]["Name"] == "Sarah Johnson"

    def test_pdf_report_fails_with_message(self, client, mock_celery):
        template = create_template(client, format="pdf")

        report = client.post("/api/v1/reports/generate", json={"template_id": template["id"]}).json()

        assert report["status"] == "failed"
        assert "pdf" in report["error_message"]
        download = client.get(f"/api/v1/reports/{report['id']}/download")
        assert download.status_code == 409
        assert download.json()["detail"] == "Report is not ready for download"

    def test_queue_failure_marks_report_failed(self, client, db_session, monkeypatch):
        def broker_down(self, *args, **kwargs):
            raise ConnectionError("redis down")

        monkeypatch.setattr("celery.Task.delay", broker_down)
        template = create_template(client)

        response = client.post("/api/v1/reports/generate", json={"template_id": template["id"]})

        assert response.status_code == 500
        reports = client.get("/api/v1/reports").json()
        assert len(reports) == 1
        assert reports[0]["status"] == "failed"
        assert reports[0]["error_message"] == "Report could not be queued: redis down"

    def test_generating_report_not_downloadable(self, client, db_session):
        template = ReportTemplate(name="Pending", type=ReportType.CUSTOM, format=ReportFormat.CSV)
        db_session.add(template)
        db_session.commit()
        report = GeneratedReport(
            template_id=template.id, template_name=template.name, title="Pending - January 01, 2024",
            type=template.type, format=template.format, status=ReportStatus.GENERATING,
        )
        db_session.add(report)
        db_session.commit()

        response = client.get(f"/api/v1/reports/{report.id}/download")

        assert response.status_code == 409

    def test_unknown_template(self, client, mock_celery):
        response = client.post("/api/v1/reports/generate", json={"template_id": "missing"})

        assert response.status_code == 404

    def test_inactive_template(self, client, mock_celery):
        template = create_template(client, is_active=False)

        response = client.post("/api/v1/reports/generate", json={"template_id": template["id"]})

        assert response.status_code == 400

    def test_list_reports_newest_first(self, client, db_session):
        template = ReportTemplate(name="Audit", type=ReportType.CUSTOM, format=ReportFormat.CSV)
        db_session.add(template)
        db_session.commit()
        base = utcnow()
        for offset, title in ((0, "Older"), (1, "Newer")):
            db_session.add(GeneratedReport(
                template_id=template.id, template_name="Audit", title=title, type=ReportType.CUSTOM,
                format=ReportFormat.CSV, status=ReportStatus.COMPLETED,
                generated_at=base + timedelta(minutes=offset),
            ))
        db_session.commit()

        titles = [r["title"] for r in client.get("/api/v1/reports").json()]

        assert titles == ["Newer", "Older"]


class TestReportDeletion:

    def test_delete_removes_file_and_audits(self, client, db_session, mock_celery, report_storage):
        template = create_template(client)
        report = client.post("/api/v1/reports/generate", json={"template_id": template["id"]}).json()
        assert os.path.exists(report["file_url"])

        response = client.delete(f"/api/v1/reports/{report['id']}")

        assert response.status_code == 204
        assert not os.path.exists(report["file_url"])
        assert client.get(f"/api/v1/reports/{report['id']}").status_code == 404
        actions = [e.action for e in db_session.query(AuditTrailEntry).filter_by(target_id=report["id"])]
        assert sorted(actions) == ["Deleted report", "Generated report"]

    def test_delete_unknown(self, client):
        assert client.delete("/api/v1/reports/missing").status_code == 404


class TestSchedules:

    def test_create_schedule_uses_template_frequency(self, client):
        template = create_template(client, frequency="weekly")
        before = utcnow().replace(tzinfo=None)

        response = client.post("/api/v1/reports/schedules", json={
            "template_id": template["id"],
            "recipients": ["ops@example.com"],
        })

        assert response.status_code == 201
        schedule = response.json()
        assert schedule["frequency"] == "weekly"
        next_run = datetime.fromisoformat(schedule["next_run"]).replace(tzinfo=None)
        assert timedelta(days=7) <= next_run - before < timedelta(days=7, minutes=1)

    def test_on_demand_cannot_be_scheduled(self, client):
        template = create_template(client, frequency="on_demand")

        response = client.post("/api/v1/reports/schedules", json={"template_id": template["id"]})

        assert response.status_code == 400

    def test_explicit_frequency_overrides_on_demand(self, client):
        template = create_template(client, frequency="on_demand")

        response = client.post("/api/v1/reports/schedules", json={
            "template_id": template["id"], "frequency": "daily",
        })

        assert response.status_code == 201
        assert response.json()["frequency"] == "daily"

    def test_schedule_unknown_template(self, client):
        response = client.post("/api/v1/reports/schedules", json={"template_id": "missing"})

        assert response.status_code == 404

    def test_invalid_recipient(self, client):
        template = create_template(client)

        response = client.post("/api/v1/reports/schedules", json={
            "template_id": template["id"], "recipients": ["not-an-email"],
        })

        assert response.status_code == 422


class TestScheduleRunner:
    """Tests for the run_due_report_schedules periodic task"""

    def test_due_schedule_runs_and_advances(self, db_session, mock_celery, sent_emails, candidates):
        template = ReportTemplate(
            name="Daily Pipeline", type=ReportType.CANDIDATE,
            frequency=ReportFrequency.DAILY, format=ReportFormat.CSV,
        )
        db_session.add(template)
        db_session.commit()
        due_at = utcnow() - timedelta(minutes=5)
        schedule = ReportSchedule(
            template_id=template.id, template_name=template.name, frequency=ReportFrequency.DAILY,
            next_run=due_at, recipients=["ops@example.com"],
        )
        future = ReportSchedule(
            template_id=template.id, template_name=template.name, frequency=ReportFrequency.DAILY,
            next_run=utcnow() + timedelta(hours=6), recipients=["later@example.com"],
        )
        db_session.add_all([schedule, future])
        db_session.commit()
        schedule_id = schedule.id

        result = run_due_report_schedules()

        assert len(result["processed"]) == 1
        assert result["processed"][0]["status"] == "completed"

        db_session.expire_all()
        ran = db_session.get(ReportSchedule, schedule_id)
        assert ran.last_run is not None
        assert ran.next_run.replace(tzinfo=None) == (due_at + timedelta(days=1)).replace(tzinfo=None)

        reports = db_session.query(GeneratedReport).all()
        assert len(reports) == 1
        assert reports[0].status == ReportStatus.COMPLETED

        assert len(sent_emails) == 1
        assert sent_emails[0]["to"] == ["ops@example.com"]
        assert sent_emails[0]["subject"].startswith("Report Ready: Daily Pipeline - ")

    def test_nothing_due(self, db_session, mock_celery, sent_emails):
        assert run_due_report_schedules() == {"processed": []}
        assert sent_emails == []

    def test_advance_keeps_cadence_and_skips_missed_runs(self, db_session):
        template = ReportTemplate(name="Weekly", type=ReportType.CUSTOM, frequency=ReportFrequency.WEEKLY)
        db_session.add(template)
        db_session.commit()
        schedule = ReportSchedule(
            template_id=template.id, template_name=template.name, frequency=ReportFrequency.WEEKLY,
            next_run=datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc), recipients=[],
        )
        db_session.add(schedule)
        db_session.commit()

        ran_at = datetime(2024, 1, 15, 8, 12, tzinfo=timezone.utc)
        report_crud.advance_schedule(db_session, schedule, ran_at=ran_at)

        assert schedule.next_run.replace(tzinfo=None) == datetime(2024, 1, 22, 8, 0)
        assert schedule.last_run.replace(tzinfo=None) == datetime(2024, 1, 15, 8, 12)


class TestGenerateReportTask:

    def test_unknown_report(self, db_session, mock_celery):
        with pytest.raises(ValueError):
            generate_report_task("missing")

    def test_completed_report_is_not_rerendered(self, client, db_session, mock_celery):
        template = create_template(client)
        report = client.post("/api/v1/reports/generate", json={"template_id": template["id"]}).json()

        result = generate_report_task(report["id"])

        assert result == {"report_id": report["id"], "status": "completed"}
