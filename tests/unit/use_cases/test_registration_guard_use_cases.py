"""
Unit tests for the registration guard and event access token use cases
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from src.app.repositories.event_repository import RegistrationIPGroup
from src.app.services.event_access_token import EventAccessTokenIssuer
from src.app.use_cases.events import (
    AssessRegistrationRiskUseCase,
    CheckRegistrationRateLimitUseCase,
    DetectSuspiciousRegistrationsUseCase,
    EventAccessTokenUseCase,
    PerformEventSecurityCheckUseCase,
)
from src.app.use_cases.events.check_registration_rate_limit_use_case import RATE_LIMIT_MESSAGE
from src.domain.entities import ActionKind, RiskLevel
from tests.factories import make_event, make_user


def setup_directory(mock_uow, user=None, event=None, recent=0, past=5, participants=0, groups=None):
    user = user or make_user(age_days=400)
    event = event or make_event(capacity=100)
    mock_uow.users.get_by_id = AsyncMock(return_value=user)
    mock_uow.events.get_by_id = AsyncMock(return_value=event)
    mock_uow.events.count_registrations_since = AsyncMock(return_value=recent)
    mock_uow.events.count_registrations_by_user = AsyncMock(return_value={user.id: past})
    mock_uow.events.count_participants = AsyncMock(return_value=participants)
    mock_uow.events.group_participants_by_ip = AsyncMock(return_value=groups or [])
    return user, event


# ============================================================================
# Rate limit
# ============================================================================


@pytest.mark.asyncio
async def test_rate_limit_allows_below_limit(mock_uow, mock_audit_log, policy):
    user, event = setup_directory(mock_uow, recent=9)

    result = await CheckRegistrationRateLimitUseCase(
        mock_uow, mock_audit_log, policy
    ).execute(user.id, event.id)

    assert result.value.allowed is True
    assert result.value.registration_count == 9
    mock_audit_log.record.assert_not_called()


@pytest.mark.asyncio
async def test_rate_limit_denies_at_limit(mock_uow, mock_audit_log, policy):
    user, event = setup_directory(mock_uow, recent=10)

    result = await CheckRegistrationRateLimitUseCase(
        mock_uow, mock_audit_log, policy
    ).execute(user.id, event.id)

    assert result.value.allowed is False
    assert result.value.message == RATE_LIMIT_MESSAGE
    call = mock_audit_log.record.call_args
    assert call.args[0] == ActionKind.REGISTRATION_RATE_LIMIT_EXCEEDED
    assert call.kwargs["success"] is False


# ============================================================================
# Registration risk
# ============================================================================


@pytest.mark.asyncio
async def test_registration_risk_requires_verification_above_low(mock_uow, mock_audit_log, policy):
    user, event = setup_directory(mock_uow, user=make_user(age_days=5), past=10)

    result = await AssessRegistrationRiskUseCase(
        mock_uow, mock_audit_log, policy
    ).execute(user.id, event.id)

    assert result.value.risk_level == RiskLevel.MEDIUM
    assert result.value.requires_additional_verification is True
    assert mock_audit_log.record.call_args.args[0] == ActionKind.REGISTRATION_RISK_ASSESSMENT


@pytest.mark.asyncio
async def test_registration_risk_unknown_event(mock_uow, mock_audit_log, policy):
    user, _ = setup_directory(mock_uow)
    mock_uow.events.get_by_id = AsyncMock(return_value=None)

    result = await AssessRegistrationRiskUseCase(
        mock_uow, mock_audit_log, policy
    ).execute(user.id, uuid4())

    assert result.error.code == "EVENT_NOT_FOUND"


# ============================================================================
# Suspicious registrations
# ============================================================================


@pytest.mark.asyncio
async def test_suspicious_registrations_ignore_missing_ip(mock_uow, policy):
    _, event = setup_directory(
        mock_uow,
        groups=[
            RegistrationIPGroup(ip_address="10.0.0.9", registration_count=6, users=[]),
            RegistrationIPGroup(ip_address="10.0.0.8", registration_count=5, users=[]),
            RegistrationIPGroup(ip_address=None, registration_count=40, users=[]),
        ],
    )

    result = await DetectSuspiciousRegistrationsUseCase(mock_uow, policy).execute(event.id)

    assert result.value.potential_fraud is True
    assert [g.ip_address for g in result.value.suspicious_registrations] == ["10.0.0.9"]


# ============================================================================
# Composed guard
# ============================================================================


@pytest.mark.asyncio
async def test_guard_allows_medium_risk_with_verification(
    mock_uow, uow_factory, mock_audit_log, policy
):
    user, event = setup_directory(mock_uow, user=make_user(age_days=5), past=10)

    result = await PerformEventSecurityCheckUseCase(
        uow_factory, mock_audit_log, policy, timeout=1
    ).execute(user.id, event.id)

    decision = result.value
    assert decision.allowed is True
    assert decision.requires_additional_verification is True
    assert decision.risk_assessment.risk_level == RiskLevel.MEDIUM
    assert decision.failures == []


@pytest.mark.asyncio
async def test_guard_denies_eleventh_registration_regardless_of_risk(
    mock_uow, uow_factory, mock_audit_log, policy
):
    user, event = setup_directory(mock_uow, recent=10)

    result = await PerformEventSecurityCheckUseCase(
        uow_factory, mock_audit_log, policy, timeout=1
    ).execute(user.id, event.id)

    decision = result.value
    assert decision.allowed is False
    assert decision.rate_limit.message == RATE_LIMIT_MESSAGE
    assert decision.risk_assessment.risk_level == RiskLevel.LOW
    actions = [c.args[0] for c in mock_audit_log.record.call_args_list]
    assert ActionKind.EVENT_SECURITY_CHECK in actions


@pytest.mark.asyncio
async def test_guard_denies_on_ip_cluster(mock_uow, uow_factory, mock_audit_log, policy):
    user, event = setup_directory(
        mock_uow,
        groups=[RegistrationIPGroup(ip_address="10.0.0.9", registration_count=7, users=[])],
    )

    result = await PerformEventSecurityCheckUseCase(
        uow_factory, mock_audit_log, policy, timeout=1
    ).execute(user.id, event.id)

    assert result.value.allowed is False
    assert result.value.suspicious_registrations.potential_fraud is True


@pytest.mark.asyncio
async def test_guard_fails_closed_when_rate_check_fails(
    mock_uow, uow_factory, mock_audit_log, policy
):
    user, event = setup_directory(mock_uow)
    mock_uow.events.count_registrations_since = AsyncMock(
        side_effect=OperationalError("SELECT", {}, Exception("timeout"))
    )

    result = await PerformEventSecurityCheckUseCase(
        uow_factory, mock_audit_log, policy, timeout=1
    ).execute(user.id, event.id)

    decision = result.value
    assert decision.allowed is False
    assert decision.rate_limit is None
    assert [(f.check, f.code) for f in decision.failures] == [
        ("rate_limit", "UPSTREAM_UNAVAILABLE")
    ]


@pytest.mark.asyncio
async def test_guard_risk_failure_only_drops_annotation(
    mock_uow, uow_factory, mock_audit_log, policy
):
    user, event = setup_directory(mock_uow)
    mock_uow.events.count_participants = AsyncMock(side_effect=ZeroDivisionError())

    result = await PerformEventSecurityCheckUseCase(
        uow_factory, mock_audit_log, policy, timeout=1
    ).execute(user.id, event.id)

    decision = result.value
    assert decision.allowed is True
    assert decision.risk_assessment is None
    assert decision.requires_additional_verification is True


@pytest.mark.asyncio
async def test_guard_unknown_user(mock_uow, uow_factory, mock_audit_log, policy):
    _, event = setup_directory(mock_uow)
    mock_uow.users.get_by_id = AsyncMock(return_value=None)

    result = await PerformEventSecurityCheckUseCase(
        uow_factory, mock_audit_log, policy, timeout=1
    ).execute(uuid4(), event.id)

    assert result.error.code == "USER_NOT_FOUND"


# ============================================================================
# Access tokens
# ============================================================================


@pytest.mark.asyncio
async def test_issue_and_verify_access_token(mock_uow):
    user, event = setup_directory(mock_uow)
    use_case = EventAccessTokenUseCase(mock_uow, EventAccessTokenIssuer(secret="s"))

    issued = await use_case.issue(event.id, user.id)
    verified = await use_case.verify(issued.value.token, event.id, user.id)
    mismatched = await use_case.verify(issued.value.token, event.id, uuid4())

    assert verified.value.valid is True
    assert mismatched.value.valid is False


@pytest.mark.asyncio
async def test_issue_access_token_unknown_event(mock_uow):
    user, _ = setup_directory(mock_uow)
    mock_uow.events.get_by_id = AsyncMock(return_value=None)

    result = await EventAccessTokenUseCase(mock_uow).issue(uuid4(), user.id)

    assert result.error.code == "EVENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_verify_empty_token(mock_uow):
    result = await EventAccessTokenUseCase(mock_uow).verify("", uuid4(), uuid4())

    assert result.error.code == "VALIDATION_FAILED"
