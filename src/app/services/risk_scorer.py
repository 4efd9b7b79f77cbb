"""
Risk Scorer

Pure scoring functions. Turn account metadata plus a window of audit
events into a bounded score and a RiskLevel. No I/O happens here; the
fraud and registration use cases fetch the inputs and persist findings.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Set

from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.domain.base import utcnow
from src.domain.entities import ActionKind, AuditEvent, RiskLevel, User

SECONDS_PER_DAY = 86400


class RiskPolicy(BaseModel):
    """
    Weights and thresholds for every risk signal.

    Defaults are the production policy; any field can be overridden
    through ApplicationConfig.RISK_POLICY.
    """

    # Account age (both rules fire for the youngest accounts)
    new_account_days: int = 30
    new_account_weight: float = 3
    young_account_days: int = 60
    young_account_weight: float = 2

    # Failed logins
    failed_login_weight: float = 0.5
    failed_login_cap: float = 2

    # Location / device spread used by the score
    location_threshold: int = 3
    location_weight: float = 1
    device_threshold: int = 3
    device_weight: float = 1

    # Contextual flags reported alongside the score
    contextual_device_threshold: int = 2
    contextual_location_threshold: int = 2

    # Login cadence
    min_login_gap_seconds: int = 60
    max_login_gap_seconds: int = SECONDS_PER_DAY
    irregular_gap_threshold: int = 2
    irregular_gap_weight: float = 1

    # Score bounds and level thresholds (score <= threshold)
    min_score: float = 0
    max_score: float = 10
    low_max: float = 2
    medium_max: float = 5
    high_max: float = 7

    # Registration risk
    registration_new_account_days: int = 30
    registration_new_account_weight: float = 2
    registration_min_past_events: int = 3
    registration_few_past_events_weight: float = 1
    registration_capacity_ratio: float = 0.9
    registration_capacity_weight: float = 1
    registration_medium_above: float = 1
    registration_high_above: float = 3

    # Detection windows and gates
    activity_window_hours: int = 24
    anomaly_window_days: int = 30
    ip_failed_attempts_threshold: int = 10
    ip_distinct_users_threshold: int = 3
    login_deviation_threshold: float = 3
    event_deviation_threshold: float = 2
    registration_rate_limit: int = 10
    registration_ip_cluster_threshold: int = 5
    failure_burst_threshold: int = 5

    failed_login_actions: Set[ActionKind] = Field(
        default_factory=lambda: {ActionKind.LOGIN_ATTEMPT, ActionKind.LOGIN_FAILURE}
    )
    login_cadence_actions: Set[ActionKind] = Field(
        default_factory=lambda: {
            ActionKind.LOGIN_ATTEMPT,
            ActionKind.LOGIN_SUCCESS,
            ActionKind.LOGIN_FAILURE,
        }
    )


class RiskFactor(BaseModel):
    """A signal that fired and what it added to the score"""

    name: str
    contribution: float


class RiskAssessment(BaseModel):
    """Freshly computed risk for one subject; never cached"""

    subject_id: str
    score: float
    level: RiskLevel
    contributing_factors: List[RiskFactor]
    computed_at: datetime


def load_risk_policy() -> RiskPolicy:
    return RiskPolicy(**ApplicationConfig.RISK_POLICY)


def account_age_days(user: User, now: datetime) -> float:
    return (now - user.created_at).total_seconds() / SECONDS_PER_DAY


def clamp_score(score: float, policy: RiskPolicy) -> float:
    return min(max(score, policy.min_score), policy.max_score)


def determine_risk_level(score: float, policy: Optional[RiskPolicy] = None) -> RiskLevel:
    policy = policy or load_risk_policy()
    if score <= policy.low_max:
        return RiskLevel.LOW
    if score <= policy.medium_max:
        return RiskLevel.MEDIUM
    if score <= policy.high_max:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def event_location(event: AuditEvent) -> Optional[str]:
    return (event.details or {}).get("location")


def event_device(event: AuditEvent) -> Optional[str]:
    return (event.details or {}).get("user_agent") or event.user_agent


def distinct_locations(events: Iterable[AuditEvent]) -> Set[str]:
    return {loc for loc in (event_location(e) for e in events) if loc}


def distinct_devices(events: Iterable[AuditEvent]) -> Set[str]:
    return {dev for dev in (event_device(e) for e in events) if dev}


def count_irregular_gaps(timestamps: Sequence[datetime], policy: RiskPolicy) -> int:
    """Count consecutive login gaps that are too short or too long."""
    ordered = sorted(timestamps)
    irregular = 0
    for previous, current in zip(ordered, ordered[1:]):
        gap = (current - previous).total_seconds()
        if gap < policy.min_login_gap_seconds or gap > policy.max_login_gap_seconds:
            irregular += 1
    return irregular


def calculate_risk_score(
    user: User,
    events: Sequence[AuditEvent],
    policy: Optional[RiskPolicy] = None,
    now: Optional[datetime] = None,
) -> RiskAssessment:
    """
    Score an account from its metadata and recent audit events.

    Every signal is additive; the total is clamped to
    [policy.min_score, policy.max_score]. An empty event list only
    leaves the account-age signals.
    """
    policy = policy or load_risk_policy()
    now = now or utcnow()
    factors: List[RiskFactor] = []

    age_days = account_age_days(user, now)
    if age_days < policy.new_account_days:
        factors.append(RiskFactor(name="new_account", contribution=policy.new_account_weight))
    if age_days < policy.young_account_days:
        factors.append(
            RiskFactor(name="young_account", contribution=policy.young_account_weight)
        )

    failed_logins = [
        e
        for e in events
        if e.action in {a.value for a in policy.failed_login_actions} and not e.success
    ]
    if failed_logins:
        factors.append(
            RiskFactor(
                name="failed_logins",
                contribution=min(
                    len(failed_logins) * policy.failed_login_weight, policy.failed_login_cap
                ),
            )
        )

    if len(distinct_locations(events)) > policy.location_threshold:
        factors.append(RiskFactor(name="many_locations", contribution=policy.location_weight))

    if len(distinct_devices(events)) > policy.device_threshold:
        factors.append(RiskFactor(name="many_devices", contribution=policy.device_weight))

    login_times = [
        e.created_at
        for e in events
        if e.action in {a.value for a in policy.login_cadence_actions}
    ]
    if count_irregular_gaps(login_times, policy) > policy.irregular_gap_threshold:
        factors.append(
            RiskFactor(name="irregular_login_times", contribution=policy.irregular_gap_weight)
        )

    score = clamp_score(sum(f.contribution for f in factors), policy)
    return RiskAssessment(
        subject_id=str(user.id),
        score=score,
        level=determine_risk_level(score, policy),
        contributing_factors=factors,
        computed_at=now,
    )


def determine_registration_risk_level(score: float, policy: RiskPolicy) -> RiskLevel:
    if score > policy.registration_high_above:
        return RiskLevel.HIGH
    if score > policy.registration_medium_above:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_registration_risk(
    user: User,
    past_registrations: int,
    participant_count: int,
    capacity: Optional[int],
    policy: Optional[RiskPolicy] = None,
    now: Optional[datetime] = None,
) -> RiskAssessment:
    """Score a (user, event) registration attempt."""
    policy = policy or load_risk_policy()
    now = now or utcnow()
    factors: List[RiskFactor] = []

    if account_age_days(user, now) < policy.registration_new_account_days:
        factors.append(
            RiskFactor(
                name="new_account", contribution=policy.registration_new_account_weight
            )
        )

    if past_registrations < policy.registration_min_past_events:
        factors.append(
            RiskFactor(
                name="few_past_registrations",
                contribution=policy.registration_few_past_events_weight,
            )
        )

    if capacity and participant_count / capacity > policy.registration_capacity_ratio:
        factors.append(
            RiskFactor(
                name="event_nearly_full", contribution=policy.registration_capacity_weight
            )
        )

    score = clamp_score(sum(f.contribution for f in factors), policy)
    return RiskAssessment(
        subject_id=str(user.id),
        score=score,
        level=determine_registration_risk_level(score, policy),
        contributing_factors=factors,
        computed_at=now,
    )
