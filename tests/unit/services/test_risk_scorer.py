"""
Unit tests for the Risk Scorer
"""

import pytest
from datetime import timedelta

from src.app.services.risk_scorer import (
    RiskPolicy,
    calculate_registration_risk,
    calculate_risk_score,
    count_irregular_gaps,
    determine_risk_level,
)
from src.domain.base import utcnow
from src.domain.entities import RiskLevel
from tests.factories import make_audit_event, make_user


def factor_names(assessment):
    return {f.name for f in assessment.contributing_factors}


def test_new_account_without_activity_stacks_both_age_signals(policy):
    """10-day-old account, clean activity: 3 + 2 = 5, MEDIUM"""
    now = utcnow()
    user = make_user(age_days=10)
    events = [
        make_audit_event(
            "LOGIN_ATTEMPT",
            id=1,
            success=True,
            details={"location": "Berlin", "user_agent": "Firefox"},
            created_at=now - timedelta(hours=3),
        )
    ]

    assessment = calculate_risk_score(user, events, policy, now)

    assert assessment.score == 5
    assert assessment.level == RiskLevel.MEDIUM
    assert factor_names(assessment) == {"new_account", "young_account"}


def test_account_between_30_and_60_days_gets_young_signal_only(policy):
    assessment = calculate_risk_score(make_user(age_days=45), [], policy)

    assert assessment.score == 2
    assert assessment.level == RiskLevel.LOW
    assert factor_names(assessment) == {"young_account"}


def test_old_account_with_no_events_scores_zero(policy):
    assessment = calculate_risk_score(make_user(age_days=400), [], policy)

    assert assessment.score == 0
    assert assessment.level == RiskLevel.LOW
    assert assessment.contributing_factors == []


def test_failed_logins_are_weighted_and_capped(policy):
    user = make_user(age_days=400)
    now = utcnow()

    def failures(count):
        # an hour apart, so the login cadence stays regular
        return [
            make_audit_event(
                "LOGIN_FAILURE", id=i, success=False, created_at=now - timedelta(hours=i)
            )
            for i in range(count)
        ]

    three_failures = failures(3)
    ten_failures = failures(10)

    assert calculate_risk_score(user, three_failures, policy).score == 1.5
    assert calculate_risk_score(user, ten_failures, policy).score == 2


def test_successful_logins_and_other_failures_are_not_failed_logins(policy):
    user = make_user(age_days=400)
    events = [
        make_audit_event("LOGIN_ATTEMPT", id=1, success=True),
        make_audit_event("EVENT_REGISTRATION", id=2, success=False),
    ]

    assert calculate_risk_score(user, events, policy).score == 0


def test_location_and_device_spread_above_three(policy):
    user = make_user(age_days=400)
    now = utcnow()
    events = [
        make_audit_event(
            "API_ACCESS",
            id=i,
            details={"location": f"city-{i}", "user_agent": f"agent-{i}"},
            created_at=now - timedelta(minutes=i),
        )
        for i in range(4)
    ]

    assessment = calculate_risk_score(user, events, policy, now)

    assert factor_names(assessment) == {"many_locations", "many_devices"}
    assert assessment.score == 2


def test_exactly_three_locations_do_not_fire(policy):
    user = make_user(age_days=400)
    events = [
        make_audit_event("API_ACCESS", id=i, details={"location": f"city-{i}"})
        for i in range(3)
    ]

    assert calculate_risk_score(user, events, policy).score == 0


def test_device_falls_back_to_user_agent_column(policy):
    user = make_user(age_days=400)
    events = [make_audit_event("API_ACCESS", id=i, user_agent=f"agent-{i}") for i in range(4)]

    assert "many_devices" in factor_names(calculate_risk_score(user, events, policy))


def test_irregular_login_gaps(policy):
    base = utcnow() - timedelta(days=1)
    # four logins seconds apart: three short gaps
    bursty = [base + timedelta(seconds=10 * i) for i in range(4)]
    # two short gaps only
    calm = [base, base + timedelta(seconds=10), base + timedelta(seconds=20)]

    assert count_irregular_gaps(bursty, policy) == 3
    assert count_irregular_gaps(calm, policy) == 2
    assert count_irregular_gaps([base], policy) == 0
    assert count_irregular_gaps([], policy) == 0


def test_irregular_gaps_add_one_when_more_than_two(policy):
    user = make_user(age_days=400)
    now = utcnow()
    events = [
        make_audit_event("LOGIN_ATTEMPT", id=i, created_at=now - timedelta(seconds=10 * i))
        for i in range(4)
    ]

    assessment = calculate_risk_score(user, events, policy, now)

    assert factor_names(assessment) == {"irregular_login_times"}
    assert assessment.score == 1


def test_login_outcomes_count_towards_login_cadence(policy):
    user = make_user(age_days=400)
    now = utcnow()
    events = [
        make_audit_event(action, id=i, created_at=now - timedelta(seconds=10 * i))
        for i, action in enumerate(
            ["LOGIN_SUCCESS", "LOGIN_FAILURE", "LOGIN_SUCCESS", "LOGIN_SUCCESS"]
        )
    ]

    assessment = calculate_risk_score(user, events, policy, now)

    assert "irregular_login_times" in factor_names(assessment)


def test_score_is_clamped_to_max():
    policy = RiskPolicy(new_account_weight=9, young_account_weight=9)

    assessment = calculate_risk_score(make_user(age_days=1), [], policy)

    assert assessment.score == 10
    assert assessment.level == RiskLevel.CRITICAL


@pytest.mark.parametrize(
    "score,level",
    [
        (0, RiskLevel.LOW),
        (2, RiskLevel.LOW),
        (2.5, RiskLevel.MEDIUM),
        (5, RiskLevel.MEDIUM),
        (6, RiskLevel.HIGH),
        (7, RiskLevel.HIGH),
        (7.5, RiskLevel.CRITICAL),
        (10, RiskLevel.CRITICAL),
    ],
)
def test_level_thresholds(policy, score, level):
    assert determine_risk_level(score, policy) == level


def test_level_is_monotonic_in_score(policy):
    scores = [x / 2 for x in range(0, 21)]
    levels = [determine_risk_level(s, policy) for s in scores]

    assert levels == sorted(levels)


def test_policy_overrides_thresholds():
    policy = RiskPolicy(low_max=0)

    assert determine_risk_level(1, policy) == RiskLevel.MEDIUM


def test_registration_risk_for_established_user(policy):
    assessment = calculate_registration_risk(
        make_user(age_days=400), past_registrations=5, participant_count=10, capacity=100, policy=policy
    )

    assert assessment.score == 0
    assert assessment.level == RiskLevel.LOW


def test_registration_risk_for_new_user_on_full_event(policy):
    assessment = calculate_registration_risk(
        make_user(age_days=5), past_registrations=0, participant_count=95, capacity=100, policy=policy
    )

    assert assessment.score == 4
    assert assessment.level == RiskLevel.HIGH
    assert factor_names(assessment) == {
        "new_account",
        "few_past_registrations",
        "event_nearly_full",
    }


def test_registration_risk_medium_band(policy):
    assessment = calculate_registration_risk(
        make_user(age_days=5), past_registrations=10, participant_count=0, capacity=None, policy=policy
    )

    assert assessment.score == 2
    assert assessment.level == RiskLevel.MEDIUM
