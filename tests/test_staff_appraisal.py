import pytest
from appraisal_api.schemas.appraisal import PerformanceLevel, StaffAppraisalInput, STAFF_KPI_FIELDS
from appraisal_api.services.staff_appraisal import (
    DEFAULT_RECOMMENDATION,
    EXCEEDS_RECOMMENDATIONS,
    GOALS_RECOMMENDATION,
    KPI_RECOMMENDATIONS,
    LOW_SCORE_RECOMMENDATIONS,
    OUTSTANDING_RECOMMENDATIONS,
    calculate_staff_appraisal,
    grade_for,
    performance_level_for,
)
from appraisal_api.services.utils import round_half_up


def uniform(rating, **overrides):
    data = {field: rating for field in STAFF_KPI_FIELDS}
    data.update(overrides)
    return StaffAppraisalInput(employee_name="Test Employee", **data)


def test_average_ratings_without_goals():
    result = calculate_staff_appraisal(uniform(3, total_goals=0))
    assert result.overall_score == 60
    assert result.overall_grade == "D"
    assert result.performance_level == PerformanceLevel.BELOW
    assert result.goal_completion_rate == 0
    assert result.recommendations == [GOALS_RECOMMENDATION, *LOW_SCORE_RECOMMENDATIONS]

def test_perfect_ratings_and_goals():
    result = calculate_staff_appraisal(uniform(5, goals_achieved=10, total_goals=10))
    assert result.kpi_average == 5
    assert result.goal_completion_rate == 100
    assert result.overall_score == 100
    assert result.overall_grade == "A+"
    assert result.performance_level == PerformanceLevel.OUTSTANDING
    assert result.recommendations == OUTSTANDING_RECOMMENDATIONS

def test_lowest_ratings_collect_every_recommendation_in_order():
    result = calculate_staff_appraisal(uniform(1, total_goals=0))
    expected = [message for _, message in KPI_RECOMMENDATIONS]
    expected.append(GOALS_RECOMMENDATION)
    expected.extend(LOW_SCORE_RECOMMENDATIONS)

    assert result.overall_score == 20
    assert result.overall_grade == "F"
    assert result.performance_level == PerformanceLevel.UNSATISFACTORY
    assert len(result.recommendations) == 9
    assert result.recommendations == expected

def test_weighted_score_with_goals():
    data = StaffAppraisalInput(
        productivity=4, quality=4, communication=5, teamwork=4, initiative=3, reliability=4,
        goals_achieved=4, total_goals=5,
    )
    result = calculate_staff_appraisal(data)
    assert result.kpi_average == pytest.approx(4.0)
    assert result.goal_completion_rate == pytest.approx(80.0)
    assert result.overall_score == 80
    assert result.overall_grade == "B"
    assert result.performance_level == PerformanceLevel.EXCEEDS
    assert result.recommendations == EXCEEDS_RECOMMENDATIONS

def test_meets_expectations_band_gets_default_message():
    result = calculate_staff_appraisal(uniform(4, goals_achieved=7, total_goals=10))
    assert result.overall_score == 77
    assert result.overall_grade == "C+"
    assert result.performance_level == PerformanceLevel.MEETS
    assert result.recommendations == [DEFAULT_RECOMMENDATION]

def test_single_weak_kpi_is_called_out():
    result = calculate_staff_appraisal(uniform(5, teamwork=2, goals_achieved=10, total_goals=10))
    assert result.recommendations[0] == dict(KPI_RECOMMENDATIONS)["teamwork"]

def test_over_achieved_goals_are_not_capped():
    result = calculate_staff_appraisal(uniform(5, goals_achieved=15, total_goals=10))
    assert result.goal_completion_rate == pytest.approx(150.0)
    assert result.overall_score == 115
    assert result.overall_grade == "A+"

def test_recomputing_gives_identical_results():
    data = uniform(4, communication=2, goals_achieved=3, total_goals=6)
    first = calculate_staff_appraisal(data)
    second = calculate_staff_appraisal(data)
    assert first.model_dump_json() == second.model_dump_json()

@pytest.mark.parametrize("score,grade", [
    (100, "A+"), (95, "A+"), (94, "A"), (90, "A"), (85, "B+"), (80, "B"),
    (75, "C+"), (70, "C"), (65, "D+"), (60, "D"), (59, "F"), (0, "F"),
])
def test_grade_thresholds(score, grade):
    assert grade_for(score) == grade

@pytest.mark.parametrize("score,level", [
    (90, PerformanceLevel.OUTSTANDING),
    (89, PerformanceLevel.EXCEEDS),
    (70, PerformanceLevel.MEETS),
    (60, PerformanceLevel.BELOW),
    (59, PerformanceLevel.UNSATISFACTORY),
])
def test_performance_thresholds(score, level):
    assert performance_level_for(score) == level

def test_halves_round_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2

def test_ratings_outside_scale_are_rejected():
    with pytest.raises(ValueError):
        uniform(6)
