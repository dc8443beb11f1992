# =============================================================================
# core/models/analysis.py - Skin Analysis Schemas
# =============================================================================
# These models define the API contract for the analysis flow:
# - QualityCheck: photo hints shown after upload
# - DailyLimit: scans used / remaining today
# - AnalysisQueued: response to an upload (poll the task for the result)
# - ConcernResult: one scored concern on the report (may be locked)
# - AISummary / Routine: the report's premium sections
# - SkinReport: the full report page payload
#
# Flow:
# 1. POST /analysis (image) -> AnalysisQueued with task_id
# 2. GET /tasks/{task_id} until SUCCESS -> result has analysis_id
# 3. GET /analysis/{analysis_id}/report -> SkinReport
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ScoreBand(str, Enum):
    """
    Colour band for a 0-100 score.

    - good: 70 and above
    - fair: 40 to 69
    - attention: below 40
    """
    GOOD = "good"
    FAIR = "fair"
    ATTENTION = "attention"


def score_band(score: int) -> ScoreBand:
    """Band for a score (see ScoreBand)."""
    if score >= 70:
        return ScoreBand.GOOD
    if score >= 40:
        return ScoreBand.FAIR
    return ScoreBand.ATTENTION


class QualityCheck(BaseModel):
    """
    Photo quality hints.

    These are simulated; they never block an analysis.
    """

    good_lighting: bool
    clear_photo: bool
    face_forward: bool

    @property
    def passed(self) -> bool:
        return self.good_lighting and self.clear_photo and self.face_forward


class DailyLimit(BaseModel):
    """Scan allowance for the current UTC day."""

    scans_today: int = Field(..., ge=0)
    max_scans: int = Field(..., ge=0)
    remaining: int = Field(..., ge=0)
    limit_reached: bool
    message: str


class AnalysisQueued(BaseModel):
    """Response to an upload; the analysis runs in the background."""

    task_id: str
    status: str = "PENDING"
    quality: QualityCheck
    limit: DailyLimit
    message: str = "Analyzing your skin..."


class ConcernResult(BaseModel):
    """
    One scored concern.

    When `locked` is True and the viewer has no active subscription,
    score, level and description are withheld (None).
    """

    name: str
    score: int | None = Field(default=None, ge=0, le=100)
    level: str | None = None
    description: str | None = None
    band: ScoreBand | None = None
    locked: bool = False


class AISummary(BaseModel):
    """Score-based narrative for the report."""

    locked: bool = False
    skin_type: str
    title: str = "AI Analysis Summary"
    subtitle: str
    improvements: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    encouragement: str | None = None


class RoutineStep(BaseModel):
    step: int = Field(..., ge=1)
    name: str
    description: str
    reason: str


class RoutineSection(BaseModel):
    time: str = Field(..., description="AM or PM")
    title: str
    subtitle: str
    steps: list[RoutineStep] = Field(default_factory=list)


class Routine(BaseModel):
    """Morning and evening routine recommendations."""

    locked: bool = False
    morning: RoutineSection | None = None
    evening: RoutineSection | None = None


class SkinReport(BaseModel):
    """The report page payload."""

    analysis_id: str
    overall_score: int = Field(..., ge=0, le=100)
    skin_type: str
    score_band: ScoreBand
    concerns: list[ConcernResult]
    summary: AISummary
    routine: Routine
    is_subscribed: bool
    analyzed_at: datetime | None = None
