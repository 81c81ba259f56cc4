"""
Dashboard analytics.

Deterministic aggregate math behind the recommendations, scoring, skill
matrix and assessment overview dashboards. Functions take ORM rows (or
anything with the same attributes) and return plain dicts/lists ready for
the response schemas.
"""

import logging
from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from app.models.skill import SkillLevel

logger = logging.getLogger(__name__)

SCORE_BUCKETS = ("9.0-10.0", "8.0-8.9", "7.0-7.9", "6.0-6.9", "Below 6.0")

# Lower bound of each assessment score range, highest first
ASSESSMENT_SCORE_RANGES = (
    ("Excellent (8-10)", 8.0),
    ("Good (6-7)", 6.0),
    ("Average (4-5)", 4.0),
    ("Poor (<4)", None),
)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ============================================================
# AI recommendations
# ============================================================

def recommendation_statistics(recommendations: Sequence) -> Dict[str, float]:
    total = len(recommendations)
    applied = sum(1 for r in recommendations if r.is_applied)
    return {
        "total_recommendations": total,
        "applied_recommendations": applied,
        "average_confidence": round(_mean([r.confidence for r in recommendations]), 2),
        "application_rate": round(applied / total, 2) if total else 0.0,
    }


# ============================================================
# Candidate scoring
# ============================================================

def score_bucket(score: float) -> str:
    if score >= 9.0:
        return "9.0-10.0"
    if score >= 8.0:
        return "8.0-8.9"
    if score >= 7.0:
        return "7.0-7.9"
    if score >= 6.0:
        return "6.0-6.9"
    return "Below 6.0"


def weighted_overall_score(detailed_scores: Iterable[Dict], scale: float = 10.0) -> float:
    """
    Weighted average of per-criterion scores on a common scale.

    overall = sum(score / max_score * scale * weight) / sum(weight)
    """
    total_weighted = 0.0
    total_weight = 0.0

    for detail in detailed_scores:
        weight = float(detail.get("weight") or 0)
        max_score = float(detail.get("max_score") or scale)
        if weight <= 0 or max_score <= 0:
            continue
        total_weighted += float(detail.get("score") or 0) / max_score * scale * weight
        total_weight += weight

    if total_weight == 0:
        return 0.0
    return round(total_weighted / total_weight, 2)


def apply_criteria_weights(detailed_scores: Iterable[Dict], criteria: Sequence) -> List[Dict]:
    """
    Refresh each detailed score from the current criteria (matched by id, then
    case-insensitive name) and recompute weighted_score = score * weight.
    """
    by_id = {c.id: c for c in criteria}
    by_name = {c.name.lower(): c for c in criteria}

    refreshed = []
    for detail in detailed_scores:
        detail = dict(detail)
        criterion = by_id.get(detail.get("criteria_id")) or by_name.get(str(detail.get("criteria_name", "")).lower())
        if criterion is not None:
            detail["criteria_id"] = criterion.id
            detail["criteria_name"] = criterion.name
            detail["weight"] = criterion.weight
            detail["max_score"] = criterion.max_score
        else:
            logger.warning(f"No scoring criteria matches '{detail.get('criteria_name')}', keeping stored weight")
        detail["weighted_score"] = round(float(detail.get("score") or 0) * float(detail.get("weight") or 0), 2)
        refreshed.append(detail)
    return refreshed


def rank_scores(scores: Sequence[float]) -> List[Dict[str, float]]:
    """
    Competition ranking (1 = highest, ties share a rank) and percentile for
    each score, in input order.

    percentile = round(100 * (below + 0.5 * equal) / n)
    """
    n = len(scores)
    ranked = []
    for score in scores:
        above = sum(1 for other in scores if other > score)
        below = sum(1 for other in scores if other < score)
        equal = n - above - below
        ranked.append({
            "rank": above + 1,
            "percentile": float(round(100 * (below + 0.5 * equal) / n)),
        })
    return ranked


def scoring_statistics(candidates: Sequence) -> Dict:
    scores = [c.overall_score for c in candidates]

    distribution = {bucket: 0 for bucket in SCORE_BUCKETS}
    for score in scores:
        distribution[score_bucket(score)] += 1

    category_values: Dict[str, List[float]] = defaultdict(list)
    for candidate in candidates:
        for category, value in (candidate.category_scores or {}).items():
            category_values[category].append(float(value))

    return {
        "total_candidates": len(candidates),
        "average_score": round(_mean(scores), 2),
        "highest_score": max(scores) if scores else 0.0,
        "lowest_score": min(scores) if scores else 0.0,
        "score_distribution": distribution,
        "category_averages": {
            category: round(_mean(values), 2) for category, values in category_values.items()
        },
    }


# ============================================================
# Skill matrix
# ============================================================

def average_scores_by_category(assessments: Sequence) -> Dict[str, float]:
    grouped: Dict[str, List[float]] = defaultdict(list)
    for assessment in assessments:
        grouped[assessment.category_name].append(assessment.score)
    return {category: round(_mean(values), 2) for category, values in grouped.items()}


def level_distribution(assessments: Sequence) -> Dict[str, Dict[str, float]]:
    """Percentage of each category's assessments at each skill level"""
    grouped: Dict[str, Counter] = defaultdict(Counter)
    for assessment in assessments:
        level = assessment.level.value if hasattr(assessment.level, "value") else str(assessment.level)
        grouped[assessment.category_name][level] += 1

    distribution = {}
    for category, counts in grouped.items():
        total = sum(counts.values())
        distribution[category] = {
            level.value: round(counts[level.value] / total * 100, 1) for level in SkillLevel
        }
    return distribution


def top_performers(assessments: Sequence, limit: int = 10) -> List[Dict]:
    """Highest-scoring assessment for each skill, best first"""
    best: Dict[str, object] = {}
    for assessment in assessments:
        current = best.get(assessment.skill_name)
        if current is None or assessment.score > current.score:
            best[assessment.skill_name] = assessment

    ordered = sorted(best.values(), key=lambda a: (-a.score, a.skill_name))
    return [
        {"skill_name": a.skill_name, "candidate_name": a.candidate_name, "score": a.score}
        for a in ordered[:limit]
    ]


def skill_gaps(assessments: Sequence, target_score: float) -> List[Dict]:
    """
    Skills whose mean score falls below target_score, largest gap first.

    gap_percentage = round((target - mean) / target * 100)
    """
    if target_score <= 0:
        return []

    scores: Dict[str, List[float]] = defaultdict(list)
    suggestions: Dict[str, Counter] = defaultdict(Counter)
    for assessment in assessments:
        scores[assessment.skill_name].append(assessment.score)
        suggestions[assessment.skill_name].update(assessment.recommendations or [])

    gaps = []
    for skill_name, values in scores.items():
        mean = _mean(values)
        if mean >= target_score:
            continue
        gaps.append({
            "skill_name": skill_name,
            "gap_percentage": round((target_score - mean) / target_score * 100),
            "recommended_action": _most_common(suggestions[skill_name]) or f"Targeted {skill_name} training",
        })

    return sorted(gaps, key=lambda g: (-g["gap_percentage"], g["skill_name"]))


def _most_common(counter: Counter) -> Optional[str]:
    if not counter:
        return None
    # Ties go to the alphabetically first suggestion
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))[0][0]


# ============================================================
# Assessment overview
# ============================================================

def assessment_score_range(score: float) -> str:
    for label, lower in ASSESSMENT_SCORE_RANGES:
        if lower is None or score >= lower:
            return label


def assessment_activity(assessments: Sequence, today: date, days: int = 7) -> List[Dict]:
    """Assessments started (created) per day over the last `days` days, oldest first"""
    started: Counter = Counter()
    completed: Counter = Counter()
    for assessment in assessments:
        created_on = assessment.created_at.date()
        started[created_on] += 1
        if assessment.ended_at is not None:
            completed[created_on] += 1

    activity = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        activity.append({
            "date": day.isoformat(),
            "day": day.strftime("%a"),
            "started": started[day],
            "completed": completed[day],
        })
    return activity


def assessment_overview(assessments: Sequence, latest_scores: Dict[str, float], today: date,
                        top_limit: int = 5) -> Dict:
    """
    Headline numbers for the admin assessment dashboard.

    An assessment counts as completed once it has an end time; only graded
    assessments (present in latest_scores) contribute to score figures.
    """
    total = len(assessments)
    completed = sum(1 for a in assessments if a.ended_at is not None)
    graded = [a for a in assessments if a.id in latest_scores]
    scores = [latest_scores[a.id] for a in graded]

    range_counts = Counter(assessment_score_range(score) for score in scores)

    performers = sorted(graded, key=lambda a: (-latest_scores[a.id], a.applicant_email))
    return {
        "total_assessments": total,
        "completed_assessments": completed,
        "completion_rate": round(completed / total * 100) if total else 0,
        "average_score": round(_mean(scores), 1),
        "score_distribution": [
            {"range": label, "count": range_counts[label]} for label, _ in ASSESSMENT_SCORE_RANGES
        ],
        "recent_activity": assessment_activity(assessments, today),
        "top_performers": [
            {"email": a.applicant_email, "score": latest_scores[a.id], "date": a.ended_at}
            for a in performers[:top_limit]
        ],
    }
