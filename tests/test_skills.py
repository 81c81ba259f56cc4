"""
Test suite for the skill assessment matrix.
"""

from datetime import date

import pytest


@pytest.fixture
def categories(client):
    created = {}
    for name in ("Frontend", "Backend"):
        response = client.post("/api/v1/skills/categories", json={"name": name, "color": "#620045"})
        assert response.status_code == 201
        created[name] = response.json()
    return created


def assess(client, category, skill, candidate, score, level, recommendations=None, last_assessed=None):
    body = {
        "skill_id": skill.lower(),
        "skill_name": skill,
        "category_id": category["id"],
        "candidate_id": candidate.lower(),
        "candidate_name": candidate,
        "assessment_type": "technical",
        "score": score,
        "level": level,
        "recommendations": recommendations or [],
    }
    if last_assessed:
        body["last_assessed"] = last_assessed
    response = client.post("/api/v1/skills/assessments", json=body)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def matrix(client, categories):
    assess(client, categories["Frontend"], "React", "Sarah", 9.0, "expert", last_assessed="2024-01-15T10:00:00")
    assess(client, categories["Frontend"], "React", "Mike", 6.0, "intermediate", last_assessed="2024-01-14T10:00:00")
    assess(client, categories["Frontend"], "CSS", "Mike", 4.0, "beginner", ["Pair with a designer"],
           last_assessed="2024-01-13T10:00:00")
    assess(client, categories["Frontend"], "CSS", "Ana", 5.0, "intermediate",
           ["Take the layout course", "Pair with a designer"], last_assessed="2024-01-12T10:00:00")
    assess(client, categories["Backend"], "Python", "Ana", 8.0, "advanced", last_assessed="2024-01-11T10:00:00")
    return categories


class TestSkillMatrix:

    def test_matrix_aggregates(self, client, matrix):
        response = client.get("/api/v1/skills/matrix")

        assert response.status_code == 200
        data = response.json()
        assert len(data["categories"]) == 2
        assert len(data["assessments"]) == 5
        assert data["average_scores"] == {"Frontend": 6.0, "Backend": 8.0}
        assert data["skill_distribution"]["Frontend"] == {
            "beginner": 25.0, "intermediate": 50.0, "advanced": 0.0, "expert": 25.0,
        }
        assert data["skill_distribution"]["Backend"]["advanced"] == 100.0

    def test_top_performers(self, client, matrix):
        top = client.get("/api/v1/skills/matrix").json()["top_performers"]

        assert top == [
            {"skill_name": "React", "candidate_name": "Sarah", "score": 9.0},
            {"skill_name": "Python", "candidate_name": "Ana", "score": 8.0},
            {"skill_name": "CSS", "candidate_name": "Ana", "score": 5.0},
        ]

    def test_skill_gaps(self, client, matrix):
        gaps = client.get("/api/v1/skills/matrix").json()["skill_gaps"]

        # CSS mean 4.5 vs target 7.0; React (7.5) and Python (8.0) meet it
        assert gaps == [
            {"skill_name": "CSS", "gap_percentage": 36, "recommended_action": "Pair with a designer"},
        ]

    def test_filters(self, client, matrix):
        backend = client.get("/api/v1/skills/matrix", params={"category_id": matrix["Backend"]["id"]}).json()
        mike = client.get("/api/v1/skills/matrix", params={"candidate_id": "mike"}).json()

        assert [a["skill_name"] for a in backend["assessments"]] == ["Python"]
        assert [a["skill_name"] for a in mike["assessments"]] == ["React", "CSS"]
        assert mike["skill_gaps"][0]["skill_name"] == "CSS"

    def test_assessment_unknown_category(self, client):
        response = client.post("/api/v1/skills/assessments", json={
            "skill_id": "go", "skill_name": "Go", "category_id": "missing",
            "candidate_id": "c1", "candidate_name": "Sam", "assessment_type": "technical",
            "score": 7, "level": "advanced",
        })

        assert response.status_code == 404

    def test_assessment_stores_category_name(self, client, categories):
        created = assess(client, categories["Backend"], "Go", "Sam", 7.5, "advanced")

        assert created["category_name"] == "Backend"
        assert created["trend"] == "stable"

    def test_export_csv(self, client, matrix):
        response = client.get("/api/v1/skills/matrix/export", params={"candidate_id": "sarah"})

        assert response.status_code == 200
        assert f"skill_assessment_matrix_{date.today().isoformat()}.csv" in response.headers["content-disposition"]
        lines = response.text.strip().split("\n")
        assert lines[0] == "Skill,Category,Candidate,Score,Level,Trend,Last Assessed"
        assert lines[1] == "React,Frontend,Sarah,9,expert,stable,2024-01-15"
