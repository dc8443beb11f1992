# =============================================================================
# core/services/report_builder.py - Skin Report Assembly
# =============================================================================
# Turns a stored analysis row into the report page payload:
#
#   row (overall_score, skin_type, concerns[]) + is_subscribed
#       -> SkinReport (concerns, AI summary, AM/PM routine)
#
# Premium parts (locked concerns, summary, routine) are withheld for users
# without an active subscription.
# =============================================================================

from typing import Any

from core.models.analysis import (
    AISummary,
    ConcernResult,
    Routine,
    RoutineSection,
    RoutineStep,
    SkinReport,
    score_band,
)
from lib.utils import parse_timestamp


# =============================================================================
# Simulated Analysis Result
# =============================================================================

MOCK_OVERALL_SCORE = 72
MOCK_SKIN_TYPE = "Combination"

MOCK_CONCERNS: list[dict[str, Any]] = [
    {
        "name": "Acne",
        "score": 35,
        "level": "Moderate",
        "description": "Some active breakouts detected on T-zone area.",
        "locked": False,
    },
    {
        "name": "Pigmentation",
        "score": 45,
        "level": "Mild",
        "description": "Minor dark spots visible around cheek area.",
        "locked": False,
    },
    {
        "name": "Wrinkles",
        "score": 20,
        "level": "Low",
        "description": "Minimal fine lines detected around eyes.",
        "locked": True,
    },
    {
        "name": "Dark Circles",
        "score": 55,
        "level": "Moderate",
        "description": "Noticeable darkness under eye area.",
        "locked": True,
    },
    {
        "name": "Hydration",
        "score": 65,
        "level": "Good",
        "description": "Skin hydration levels are within normal range.",
        "locked": True,
    },
    {
        "name": "Elasticity",
        "score": 78,
        "level": "Excellent",
        "description": "Skin shows good firmness and bounce.",
        "locked": True,
    },
]


def simulate_analysis() -> dict[str, Any]:
    """
    Result of the simulated analysis.

    Always the same report; returns fresh copies so callers may mutate.
    """
    return {
        "overall_score": MOCK_OVERALL_SCORE,
        "skin_type": MOCK_SKIN_TYPE,
        "concerns": [dict(c) for c in MOCK_CONCERNS],
    }


# =============================================================================
# AI Summary
# =============================================================================

def summary_improvements(score: int) -> list[str]:
    if score >= 70:
        return [
            "Hydration levels are well-maintained",
            "Good elasticity indicates healthy collagen",
            "Minimal signs of UV damage",
        ]
    if score >= 50:
        return [
            "Some areas show good moisture retention",
            "Skin barrier is functioning adequately",
            "Natural oil balance is improving",
        ]
    return [
        "Focus areas have been identified for improvement",
        "Basic skin care routine is showing initial results",
    ]


def summary_warnings(score: int) -> list[str]:
    if score < 50:
        return [
            "Consider increasing water intake for better hydration",
            "Sun protection may need to be more consistent",
        ]
    if score < 70:
        return [
            "Some areas may benefit from extra attention",
            "Consider adjusting product routine for better results",
        ]
    return ["Continue current routine for maintenance"]


def summary_encouragement(score: int) -> str:
    if score >= 70:
        return (
            "Your skin is looking great! Keep up the excellent work with your "
            "skincare routine. Consistency is key to maintaining these results."
        )
    if score >= 50:
        return (
            "You're on the right track! With a few adjustments to your routine, "
            "you'll see noticeable improvements. Every step counts toward healthier skin."
        )
    return (
        "Every skincare journey starts somewhere. Focus on the basics—cleanse, "
        "moisturize, protect—and you'll see progress. Be patient and kind to your skin!"
    )


def build_summary(score: int, skin_type: str, locked: bool = False) -> AISummary:
    """Score-based narrative; only the header is returned when locked."""
    subtitle = f"Personalized insights for {skin_type} skin"
    if locked:
        return AISummary(locked=True, skin_type=skin_type, subtitle=subtitle)

    return AISummary(
        skin_type=skin_type,
        subtitle=subtitle,
        improvements=summary_improvements(score),
        warnings=summary_warnings(score),
        encouragement=summary_encouragement(score),
    )


# =============================================================================
# Routine
# =============================================================================

MORNING_ROUTINE = RoutineSection(
    time="AM",
    title="Morning Routine",
    subtitle="Cleanse • Treat • Hydrate • Protect",
    steps=[
        RoutineStep(
            step=1,
            name="Gentle Cleanser",
            description="Start with a mild, hydrating cleanser to remove overnight buildup.",
            reason="Prepares skin for product absorption without stripping natural oils.",
        ),
        RoutineStep(
            step=2,
            name="Vitamin C Serum",
            description="Apply antioxidant serum to protect and brighten.",
            reason="Fights free radical damage and helps fade pigmentation over time.",
        ),
        RoutineStep(
            step=3,
            name="Lightweight Moisturizer",
            description="Lock in hydration with a non-greasy formula.",
            reason="Maintains skin barrier function and prevents transepidermal water loss.",
        ),
        RoutineStep(
            step=4,
            name="Sunscreen SPF 30+",
            description="Finish with broad-spectrum sun protection.",
            reason="Prevents UV damage, premature aging, and dark spot formation.",
        ),
    ],
)

EVENING_ROUTINE = RoutineSection(
    time="PM",
    title="Evening Routine",
    subtitle="Cleanse • Actives • Repair",
    steps=[
        RoutineStep(
            step=1,
            name="Oil Cleanser / Micellar",
            description="Remove makeup and sunscreen thoroughly.",
            reason="First cleanse dissolves oil-based impurities for deeper clean.",
        ),
        RoutineStep(
            step=2,
            name="Gentle Cleanser",
            description="Follow with water-based cleanser for double cleansing.",
            reason="Ensures all residue is removed without over-stripping skin.",
        ),
        RoutineStep(
            step=3,
            name="Active Treatment",
            description="Apply retinol, AHA/BHA, or targeted treatment.",
            reason="Night is optimal for actives as skin repairs while you sleep.",
        ),
        RoutineStep(
            step=4,
            name="Night Cream / Repair",
            description="Seal everything with a nourishing night cream.",
            reason="Supports overnight cell regeneration and deep hydration.",
        ),
    ],
)


def build_routine(locked: bool = False) -> Routine:
    if locked:
        return Routine(locked=True)
    return Routine(
        morning=MORNING_ROUTINE.model_copy(deep=True),
        evening=EVENING_ROUTINE.model_copy(deep=True),
    )


# =============================================================================
# Report
# =============================================================================

def build_concern(data: dict[str, Any], is_subscribed: bool) -> ConcernResult:
    """One concern; a locked concern keeps only its name for non-subscribers."""
    locked = bool(data.get("locked", False))
    name = data["name"]

    if locked and not is_subscribed:
        return ConcernResult(name=name, locked=True)

    score = data.get("score")
    return ConcernResult(
        name=name,
        score=score,
        level=data.get("level"),
        description=data.get("description"),
        band=score_band(score) if score is not None else None,
        locked=locked,
    )


def build_report(row: dict[str, Any], is_subscribed: bool) -> SkinReport:
    """
    Build the report page payload from a skin_analysis_history row.

    Args:
        row: Stored analysis (id, overall_score, skin_type, concerns, analyzed_at)
        is_subscribed: Whether the viewer has an active subscription
    """
    score = int(row.get("overall_score") or 0)
    skin_type = row.get("skin_type") or MOCK_SKIN_TYPE
    locked = not is_subscribed

    return SkinReport(
        analysis_id=str(row["id"]),
        overall_score=score,
        skin_type=skin_type,
        score_band=score_band(score),
        concerns=[build_concern(c, is_subscribed) for c in row.get("concerns") or []],
        summary=build_summary(score, skin_type, locked=locked),
        routine=build_routine(locked=locked),
        is_subscribed=is_subscribed,
        analyzed_at=parse_timestamp(row.get("analyzed_at")),
    )
