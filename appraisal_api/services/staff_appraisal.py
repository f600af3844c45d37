"""
Staff appraisal calculator.

Scores six 1-5 KPI ratings and goal completion into a percentage, a letter
grade, a performance tier and an ordered list of recommendations. Pure and
deterministic: the same input always yields an identical result.
"""
from typing import List, Sequence

from appraisal_api.schemas.appraisal import (
    PerformanceLevel,
    StaffAppraisalInput,
    StaffAppraisalResult,
)
from appraisal_api.services.utils import mean, round_half_up

KPI_WEIGHT = 0.7
GOAL_WEIGHT = 0.3
MAX_RATING = 5

# Inclusive lower bounds, checked in order
GRADE_THRESHOLDS = [
    (95, "A+"),
    (90, "A"),
    (85, "B+"),
    (80, "B"),
    (75, "C+"),
    (70, "C"),
    (65, "D+"),
    (60, "D"),
]

PERFORMANCE_THRESHOLDS = [
    (90, PerformanceLevel.OUTSTANDING),
    (80, PerformanceLevel.EXCEEDS),
    (70, PerformanceLevel.MEETS),
    (60, PerformanceLevel.BELOW),
]

KPI_DEFICIENCY_THRESHOLD = 3
GOAL_COMPLETION_THRESHOLD = 70

KPI_RECOMMENDATIONS = [
    ("productivity", "Focus on improving productivity through better time management and prioritization."),
    ("quality", "Pay closer attention to detail and review work before delivery to raise quality."),
    ("communication", "Work on communication skills, both written and verbal, with the team and stakeholders."),
    ("teamwork", "Collaborate more actively with colleagues and contribute to shared team goals."),
    ("initiative", "Take more initiative by proposing improvements and acting without waiting for direction."),
    ("reliability", "Improve reliability by meeting deadlines consistently and following through on commitments."),
]

GOALS_RECOMMENDATION = "Set clearer milestones and track progress regularly to improve goal completion."

OUTSTANDING_RECOMMENDATIONS = [
    "Continue the excellent work and keep setting a high standard for the team.",
    "Explore leadership opportunities such as mentoring colleagues or leading projects.",
]
EXCEEDS_RECOMMENDATIONS = [
    "Maintain the strong performance and look for stretch assignments to keep growing.",
]
LOW_SCORE_RECOMMENDATIONS = [
    "Schedule regular check-ins with your supervisor to review progress and obstacles.",
    "Identify training or development programs that address the areas needing improvement.",
]
DEFAULT_RECOMMENDATION = "Continue current performance and keep building on existing strengths."

def kpi_average(ratings: Sequence[int]) -> float:
    """Plain mean of a set of 1-5 ratings."""
    return mean(ratings)

def goal_completion_rate(goals_achieved: int, total_goals: int) -> float:
    if total_goals > 0:
        return goals_achieved / total_goals * 100
    return 0.0

def overall_score(average: float, completion_rate: float, total_goals: int) -> int:
    kpi_percent = average / MAX_RATING * 100
    if total_goals == 0:
        # No goals were set for the period: the KPIs carry the whole score
        return round_half_up(kpi_percent)
    return round_half_up(KPI_WEIGHT * kpi_percent + GOAL_WEIGHT * completion_rate)

def grade_for(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"

def performance_level_for(score: int) -> PerformanceLevel:
    for threshold, level in PERFORMANCE_THRESHOLDS:
        if score >= threshold:
            return level
    return PerformanceLevel.UNSATISFACTORY

def build_recommendations(data: StaffAppraisalInput, score: int, completion_rate: float) -> List[str]:
    recommendations = []

    for field, message in KPI_RECOMMENDATIONS:
        if getattr(data, field) < KPI_DEFICIENCY_THRESHOLD:
            recommendations.append(message)

    if completion_rate < GOAL_COMPLETION_THRESHOLD:
        recommendations.append(GOALS_RECOMMENDATION)

    if score >= 90:
        recommendations.extend(OUTSTANDING_RECOMMENDATIONS)
    elif score >= 80:
        recommendations.extend(EXCEEDS_RECOMMENDATIONS)
    elif score < 70:
        recommendations.extend(LOW_SCORE_RECOMMENDATIONS)

    if not recommendations:
        recommendations.append(DEFAULT_RECOMMENDATION)

    return recommendations

def calculate_staff_appraisal(data: StaffAppraisalInput) -> StaffAppraisalResult:
    average = kpi_average(data.kpi_ratings())
    completion_rate = goal_completion_rate(data.goals_achieved, data.total_goals)
    score = overall_score(average, completion_rate, data.total_goals)

    return StaffAppraisalResult(
        overall_score=score,
        overall_grade=grade_for(score),
        kpi_average=average,
        goal_completion_rate=completion_rate,
        performance_level=performance_level_for(score),
        recommendations=build_recommendations(data, score, completion_rate),
    )
