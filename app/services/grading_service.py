"""
Interview grading client.

Builds a structured grading request from the problem statement, rubric,
transcript and diagram graph, sends it to the LLM grading service and
normalizes the answer:
- AI: grades each system design pillar (0-10) and writes the narrative
- Python: clamps the pillar scores and calculates overall_score itself
"""

import json
import logging
import asyncio
from typing import Any, Dict, List, Optional
from openai import AsyncOpenAI
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.grading import DiagramGraph, GradeInterviewRequest, GradingResult

logger = logging.getLogger(__name__)

PILLARS = ("reliability", "scalability", "availability", "communication", "trade_off_analysis")

# Alternate spellings the model sometimes uses for a pillar
PILLAR_ALIASES = {
    "trade_off_analysis": ("tradeoff_analysis", "tradeoffs", "trade_offs"),
}

SYSTEM_PROMPT = """You are a Staff Engineer grading a system design interview.
You grade each pillar independently. You do NOT calculate an overall score.

GRADING SCALE (per pillar):
- 0-2: Not addressed or fundamentally wrong.
- 3-4: Mentioned but shallow, major gaps.
- 5-6: Reasonable approach with notable weaknesses.
- 7-8: Solid, well-justified design choices.
- 9-10: Exceptional depth, anticipates failure modes and trade-offs.

Also rate "suspicion" (0-10): how likely the answers were read from an
external source or AI assistant rather than reasoned live. 0 = clearly
original, 10 = almost certainly assisted.

Output strictly valid JSON:
{
    "reliability": (number 0-10),
    "scalability": (number 0-10),
    "availability": (number 0-10),
    "communication": (number 0-10),
    "trade_off_analysis": (number 0-10),
    "suspicion": (number 0-10),
    "summary": "3-4 sentence assessment of the candidate's design",
    "strengths": ["specific strength 1", "specific strength 2"],
    "weaknesses": ["specific gap 1", "specific gap 2"]
}

IMPORTANT: Do NOT include an "overall_score" field."""


class GradingServiceError(Exception):
    """Raised when the grading service cannot produce a usable result"""
    pass


def render_diagram(diagram: DiagramGraph) -> str:
    """Render the candidate's diagram graph as plain text for the prompt"""
    if not diagram.nodes and not diagram.edges:
        return "(The candidate did not draw a diagram.)"

    lines = ["Components:"]
    for node in diagram.nodes:
        kind = f" [{node.type}]" if node.type else ""
        lines.append(f"- {node.id}: {node.label}{kind}")

    lines.append("Connections:")
    if not diagram.edges:
        lines.append("- (none)")
    for edge in diagram.edges:
        label = f" ({edge.label})" if edge.label else ""
        lines.append(f"- {edge.source} -> {edge.target}{label}")

    return "\n".join(lines)


def build_grading_messages(request: GradeInterviewRequest) -> List[Dict[str, str]]:
    """Assemble the fixed chat payload sent to the grading model"""
    user_prompt = f"""PROBLEM STATEMENT:
{request.problemDescription}

--------------------------------------------------------
RUBRIC:
{request.rubric}

--------------------------------------------------------
INTERVIEW TRANSCRIPT:
{request.transcript or "(empty transcript)"}

--------------------------------------------------------
CANDIDATE DIAGRAM:
{render_diagram(request.diagramJson)}

--------------------------------------------------------
Grade every pillar and cite evidence from the transcript and diagram."""

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def clamp_score(value: Any) -> float:
    """Coerce a model-provided score to a float in [0, 10]"""
    if isinstance(value, dict):
        value = value.get("score")
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score:  # NaN
        return 0.0
    return round(min(max(score, 0.0), 10.0), 1)


def _string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if str(item).strip()]


def _pillar_value(raw: Dict[str, Any], pillar: str) -> Any:
    if pillar in raw:
        return raw[pillar]
    for alias in PILLAR_ALIASES.get(pillar, ()):
        if alias in raw:
            return raw[alias]
    logger.warning(f"Grading response missing pillar '{pillar}', defaulting to 0")
    return 0


def normalize_grading_result(raw: Dict[str, Any]) -> GradingResult:
    """
    Turn the model's JSON into a GradingResult.

    overall_score is the mean of the five pillars, rounded to one decimal.
    Any overall score the model returned is ignored.
    """
    if not isinstance(raw, dict):
        raise GradingServiceError("Grading response is not a JSON object")

    pillar_scores = {pillar: clamp_score(_pillar_value(raw, pillar)) for pillar in PILLARS}
    overall_score = round(sum(pillar_scores.values()) / len(PILLARS), 1)

    summary = raw.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = "No summary available"

    return GradingResult(
        **pillar_scores,
        suspicion=clamp_score(raw.get("suspicion", 0)),
        overall_score=overall_score,
        summary=summary.strip(),
        strengths=_string_list(raw.get("strengths")),
        weaknesses=_string_list(raw.get("weaknesses")),
    )


class GradingService:
    """Sends interview material to the LLM grader and returns normalized scores"""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_attempts: Optional[int] = None
    ):
        self.client = client or AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        self.model = model or settings.OPENAI_MODEL
        self.temperature = settings.OPENAI_TEMPERATURE if temperature is None else temperature
        self.max_attempts = max(1, max_attempts or settings.GRADING_MAX_ATTEMPTS)

    async def grade_interview(self, request: GradeInterviewRequest) -> GradingResult:
        """
        Grade one interview.

        Args:
            request: Validated grading input

        Returns:
            GradingResult with clamped pillar scores and computed overall_score

        Raises:
            GradingServiceError: If no usable result is produced within max_attempts
        """
        messages = build_grading_messages(request)

        for attempt in range(self.max_attempts):
            try:
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    response_format={"type": "json_object"},
                    temperature=self.temperature
                )

                content = response.choices[0].message.content
                if not content:
                    raise GradingServiceError("Empty response from grading service")

                result = normalize_grading_result(json.loads(content))
                logger.info(
                    f"Graded assessment {request.assessment_id}: overall {result.overall_score}/10"
                )
                return result

            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning(f"Attempt {attempt + 1}/{self.max_attempts}: Malformed grading response: {e}")
                if attempt == self.max_attempts - 1:
                    raise GradingServiceError(f"Invalid grading response after {self.max_attempts} attempt(s): {e}")

            except GradingServiceError as e:
                logger.warning(f"Attempt {attempt + 1}/{self.max_attempts}: {e}")
                if attempt == self.max_attempts - 1:
                    raise

            except Exception as e:
                logger.warning(f"Attempt {attempt + 1}/{self.max_attempts}: Grading error: {e}")
                if attempt == self.max_attempts - 1:
                    raise GradingServiceError(f"Grading failed after {self.max_attempts} attempt(s): {e}")

            # Exponential backoff: 1s, 2s, 4s...
            wait_time = 2 ** attempt
            logger.info(f"Retrying grading in {wait_time} seconds...")
            await asyncio.sleep(wait_time)

        raise GradingServiceError(f"Failed to grade interview after {self.max_attempts} attempt(s)")


def get_grading_service() -> GradingService:
    """FastAPI dependency returning the configured grading client"""
    return GradingService()
