"""
Test suite for interview grading.

Tests cover:
- POST/OPTIONS /api/grade-interview
- Score normalization (clamping, overall score math)
- Diagram rendering and the grading client's retry behaviour
"""

import asyncio
import json
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from app.crud import assessment as assessment_crud
from app.models.assessment import DesignAssessmentResult
from app.schemas.grading import DiagramGraph, GradeInterviewRequest, GradingResult
from app.services.grading_service import (
    GradingService,
    GradingServiceError,
    build_grading_messages,
    clamp_score,
    get_grading_service,
    normalize_grading_result,
    render_diagram,
)
from main import app


class FakeGrader:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.requests = []

    async def grade_interview(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def graded_result():
    return normalize_grading_result({
        "reliability": 8,
        "scalability": 7,
        "availability": 9,
        "communication": 6,
        "trade_off_analysis": 7.5,
        "suspicion": 1,
        "summary": "Solid design with good sharding strategy.",
        "strengths": ["Sharding"],
        "weaknesses": ["No caching layer"],
    })


@pytest.fixture
def override_grader():
    def _override(grader):
        app.dependency_overrides[get_grading_service] = lambda: grader
        return grader
    return _override


class TestGradeInterviewEndpoint:
    """Tests for POST /api/grade-interview"""

    def test_grade_interview_success(self, client, db_session, sample_grading_request, graded_result, override_grader):
        grader = override_grader(FakeGrader(result=graded_result))

        response = client.post("/api/grade-interview", json=sample_grading_request)

        assert response.status_code == 200
        data = response.json()
        assert data["overall_score"] == 7.5
        assert data["reliability"] == 8
        assert data["summary"] == "Solid design with good sharding strategy."
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type"
        assert grader.requests[0].assessment_id == "assessment-123"

    def test_grade_interview_persists_result(self, client, db_session, sample_grading_request, graded_result, override_grader):
        override_grader(FakeGrader(result=graded_result))

        client.post("/api/grade-interview", json=sample_grading_request)

        stored = db_session.query(DesignAssessmentResult).filter_by(assessment_id="assessment-123").one()
        assert stored.overall_score == 7.5
        assert stored.transcript == sample_grading_request["transcript"]
        assert len(stored.diagram["nodes"]) == 3

    def test_grade_interview_missing_field(self, client, sample_grading_request, override_grader):
        override_grader(FakeGrader())
        del sample_grading_request["rubric"]

        response = client.post("/api/grade-interview", json=sample_grading_request)

        assert response.status_code == 422

    def test_grade_interview_grader_failure(self, client, sample_grading_request, override_grader):
        override_grader(FakeGrader(error=GradingServiceError("Grading service unavailable")))

        response = client.post("/api/grade-interview", json=sample_grading_request)

        assert response.status_code == 500
        assert response.json() == {"error": "Grading service unavailable"}
        assert response.headers["access-control-allow-origin"] == "*"

    def test_grade_interview_failure_default_message(self, client, sample_grading_request, override_grader):
        override_grader(FakeGrader(error=RuntimeError()))

        response = client.post("/api/grade-interview", json=sample_grading_request)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to grade interview"}

    def test_preflight(self, client):
        response = client.options("/api/grade-interview")

        assert response.status_code == 200
        assert response.json() == {}
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"

    def test_browser_preflight_from_any_origin(self, client):
        response = client.options(
            "/api/grade-interview",
            headers={
                "Origin": "https://candidate-portal.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-headers"] == "Content-Type"

    def test_post_from_any_origin(self, client, sample_grading_request, graded_result, override_grader):
        override_grader(FakeGrader(result=graded_result))

        response = client.post(
            "/api/grade-interview",
            json=sample_grading_request,
            headers={"Origin": "https://candidate-portal.example.com"},
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_dashboard_routes_keep_origin_allow_list(self, client):
        response = client.options(
            "/api/v1/reports",
            headers={
                "Origin": "https://candidate-portal.example.com",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers

    def test_grade_returned_when_storing_fails(self, client, db_session, sample_grading_request, graded_result,
                                               override_grader, monkeypatch):
        override_grader(FakeGrader(result=graded_result))

        def failing_save(*args, **kwargs):
            raise OperationalError("INSERT INTO design_assessment_results", {}, Exception("database is locked"))

        monkeypatch.setattr(assessment_crud, "save_result", failing_save)

        response = client.post("/api/grade-interview", json=sample_grading_request)

        assert response.status_code == 200
        assert response.json()["overall_score"] == 7.5
        assert db_session.query(DesignAssessmentResult).count() == 0


class TestNormalization:
    """Tests for score clamping and the overall score math"""

    def test_overall_is_mean_of_pillars(self):
        result = normalize_grading_result({
            "reliability": 10, "scalability": 8, "availability": 6,
            "communication": 4, "trade_off_analysis": 7,
            "overall_score": 2,  # ignored
        })

        assert result.overall_score == 7.0

    def test_overall_rounded_to_one_decimal(self):
        result = normalize_grading_result({
            "reliability": 7, "scalability": 7, "availability": 7,
            "communication": 7, "trade_off_analysis": 8,
        })

        assert result.overall_score == 7.2

    def test_out_of_range_scores_are_clamped(self):
        result = normalize_grading_result({
            "reliability": 14, "scalability": -3, "availability": "9",
            "communication": "n/a", "trade_off_analysis": {"score": 6},
            "suspicion": 42,
        })

        assert result.reliability == 10.0
        assert result.scalability == 0.0
        assert result.availability == 9.0
        assert result.communication == 0.0
        assert result.trade_off_analysis == 6.0
        assert result.suspicion == 10.0

    def test_missing_fields_get_defaults(self):
        result = normalize_grading_result({"tradeoff_analysis": 5})

        assert result.trade_off_analysis == 5.0
        assert result.reliability == 0.0
        assert result.summary == "No summary available"
        assert result.strengths == []
        assert result.weaknesses == []

    def test_non_object_response_rejected(self):
        with pytest.raises(GradingServiceError):
            normalize_grading_result(["not", "an", "object"])

    def test_clamp_score_handles_nan(self):
        assert clamp_score(float("nan")) == 0.0
        assert clamp_score(None) == 0.0
        assert clamp_score(6.66) == 6.7


class TestPromptBuilding:
    """Tests for diagram rendering and the chat payload"""

    def test_render_diagram(self):
        diagram = DiagramGraph(
            nodes=[{"id": "api", "label": "API", "type": "service"}, {"id": "db", "label": "Postgres"}],
            edges=[{"source": "api", "target": "db", "label": "SQL"}],
        )

        rendered = render_diagram(diagram)

        assert "- api: API [service]" in rendered
        assert "- db: Postgres" in rendered
        assert "- api -> db (SQL)" in rendered

    def test_render_empty_diagram(self):
        assert "did not draw a diagram" in render_diagram(DiagramGraph())

    def test_messages_embed_inputs(self, sample_grading_request):
        request = GradeInterviewRequest(**sample_grading_request)

        messages = build_grading_messages(request)

        assert messages[0]["role"] == "system"
        assert sample_grading_request["problemDescription"] in messages[1]["content"]
        assert sample_grading_request["rubric"] in messages[1]["content"]
        assert "Load Balancer" in messages[1]["content"]


def fake_openai_client(*contents):
    """Async OpenAI stand-in returning the given message contents in order"""
    replies = list(contents)
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        content = replies.pop(0)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


class TestGradingService:
    """Tests for the grading client against a fake OpenAI client"""

    def test_grade_interview_uses_json_mode(self, sample_grading_request):
        client, calls = fake_openai_client(json.dumps({
            "reliability": 6, "scalability": 6, "availability": 6,
            "communication": 6, "trade_off_analysis": 6, "summary": "Average",
        }))
        service = GradingService(client=client, model="gpt-4o", temperature=0.0, max_attempts=1)

        result = asyncio.run(service.grade_interview(GradeInterviewRequest(**sample_grading_request)))

        assert isinstance(result, GradingResult)
        assert result.overall_score == 6.0
        assert calls[0]["response_format"] == {"type": "json_object"}
        assert calls[0]["model"] == "gpt-4o"

    def test_malformed_response_single_attempt(self, sample_grading_request):
        client, _ = fake_openai_client("not json")
        service = GradingService(client=client, max_attempts=1)

        with pytest.raises(GradingServiceError):
            asyncio.run(service.grade_interview(GradeInterviewRequest(**sample_grading_request)))

    def test_malformed_response_is_retried(self, sample_grading_request, monkeypatch):
        async def no_sleep(seconds):
            return None

        monkeypatch.setattr("app.services.grading_service.asyncio.sleep", no_sleep)
        client, calls = fake_openai_client("{broken", json.dumps({"reliability": 9, "summary": "Good"}))
        service = GradingService(client=client, max_attempts=2)

        result = asyncio.run(service.grade_interview(GradeInterviewRequest(**sample_grading_request)))

        assert len(calls) == 2
        assert result.reliability == 9.0
