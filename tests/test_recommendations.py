"""
Test suite for the AI recommendations dashboard endpoints.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.models.recommendation import (
    AIInsight,
    AIPrediction,
    AIRecommendation,
    InsightCategory,
    PredictionType,
    Priority,
    RecommendationType,
)


@pytest.fixture
def seeded_ai_data(db_session):
    base = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
    recommendations = [
        AIRecommendation(
            type=RecommendationType.CANDIDATE, title="Fast-track Sarah", description="Top scorer",
            confidence=0.9, priority=Priority.HIGH, is_applied=True, created_at=base,
        ),
        AIRecommendation(
            type=RecommendationType.SKILL_GAP, title="Add React assessment", description="Gap in frontend",
            confidence=0.7, priority=Priority.MEDIUM, created_at=base + timedelta(hours=1),
        ),
        AIRecommendation(
            type=RecommendationType.IMPROVEMENT, title="Shorten coding test", description="High drop-off",
            confidence=0.5, priority=Priority.LOW, created_at=base + timedelta(hours=2),
        ),
    ]
    insight = AIInsight(
        category=InsightCategory.TREND, title="Scores rising", description="Average up 8%",
        metrics={"average_score": 7.8}, recommendations=["Raise the bar"], confidence=0.8,
    )
    prediction = AIPrediction(
        prediction_type=PredictionType.CANDIDATE_SUCCESS, target_id="c1", target_name="Sarah",
        prediction=0.87, confidence=0.75,
        factors=[{"factor": "Technical Score", "weight": 0.35, "value": 9.2}],
    )
    db_session.add_all(recommendations + [insight, prediction])
    db_session.commit()
    return recommendations


class TestAIAnalytics:
    """Tests for GET /api/v1/ai/analytics"""

    def test_analytics_statistics(self, client, seeded_ai_data):
        response = client.get("/api/v1/ai/analytics")

        assert response.status_code == 200
        data = response.json()
        assert data["statistics"] == {
            "total_recommendations": 3,
            "applied_recommendations": 1,
            "average_confidence": 0.7,
            "application_rate": 0.33,
        }
        assert len(data["insights"]) == 1
        assert data["predictions"][0]["factors"][0]["factor"] == "Technical Score"

    def test_analytics_empty(self, client):
        response = client.get("/api/v1/ai/analytics")

        assert response.status_code == 200
        data = response.json()
        assert data["recommendations"] == []
        assert data["statistics"]["total_recommendations"] == 0
        assert data["statistics"]["application_rate"] == 0.0


class TestRecommendations:
    """Tests for recommendation listing, creation and apply"""

    def test_list_newest_first(self, client, seeded_ai_data):
        response = client.get("/api/v1/ai/recommendations")

        titles = [r["title"] for r in response.json()]
        assert titles == ["Shorten coding test", "Add React assessment", "Fast-track Sarah"]

    def test_filter_by_priority_and_applied(self, client, seeded_ai_data):
        high = client.get("/api/v1/ai/recommendations", params={"priority": "high"}).json()
        pending = client.get("/api/v1/ai/recommendations", params={"is_applied": "false"}).json()

        assert [r["title"] for r in high] == ["Fast-track Sarah"]
        assert len(pending) == 2

    def test_create_recommendation(self, client):
        response = client.post("/api/v1/ai/recommendations", json={
            "type": "assessment",
            "title": "Add a system design round",
            "description": "Senior candidates are under-tested on architecture",
            "confidence": 0.82,
            "priority": "high",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["is_applied"] is False
        assert data["data"] == {}

    def test_create_recommendation_invalid_confidence(self, client):
        response = client.post("/api/v1/ai/recommendations", json={
            "type": "assessment", "title": "x", "description": "y", "confidence": 1.5,
        })

        assert response.status_code == 422

    def test_apply_persists(self, client, db_session, seeded_ai_data):
        target = seeded_ai_data[1]

        response = client.post(f"/api/v1/ai/recommendations/{target.id}/apply")

        assert response.status_code == 200
        assert response.json()["is_applied"] is True
        stats = client.get("/api/v1/ai/analytics").json()["statistics"]
        assert stats["applied_recommendations"] == 2

    def test_apply_unknown(self, client):
        response = client.post("/api/v1/ai/recommendations/does-not-exist/apply")

        assert response.status_code == 404


class TestInsightsAndPredictions:

    def test_filter_insights_by_category(self, client, seeded_ai_data):
        assert len(client.get("/api/v1/ai/insights", params={"category": "trend"}).json()) == 1
        assert client.get("/api/v1/ai/insights", params={"category": "anomaly"}).json() == []

    def test_filter_predictions_by_type(self, client, seeded_ai_data):
        response = client.get("/api/v1/ai/predictions", params={"prediction_type": "candidate_success"})

        assert response.status_code == 200
        assert response.json()[0]["target_name"] == "Sarah"
