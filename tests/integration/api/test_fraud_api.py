import pytest
from datetime import timedelta
from httpx import AsyncClient
from uuid import uuid4

from src.domain.base import utcnow
from tests.factories import auth_headers, make_audit_event, make_user


@pytest.mark.asyncio
async def test_ip_with_many_failures_is_flagged(client: AsyncClient, seed):
    """12 failed logins from 2 accounts on one IP flag the IP"""
    alice, bob = make_user(), make_user()
    await seed(alice, bob)
    await seed(
        *[
            make_audit_event(
                "LOGIN_ATTEMPT",
                actor_id=(alice if i % 2 else bob).id,
                ip_address="10.0.0.5",
                success=False,
                details={},
            )
            for i in range(12)
        ],
        *[
            make_audit_event(
                "LOGIN_ATTEMPT", actor_id=alice.id, ip_address="10.0.0.6", success=False, details={}
            )
            for _ in range(10)
        ],
    )
    headers = auth_headers(uuid4(), "admin")

    response = await client.get("/fraud/ip", headers=headers)

    assert response.status_code == 200
    suspicious = response.json()["suspicious_ips"]
    assert [ip["ip_address"] for ip in suspicious] == ["10.0.0.5"]
    assert suspicious[0]["failed_attempts"] == 12
    assert len(suspicious[0]["unique_users"]) == 2

    diagnostics = await client.get(
        "/audit/events?action=IP_FRAUD_DETECTION", headers=headers
    )
    assert len(diagnostics.json()["events"]) == 1

    # detector output never feeds back into the next scan
    again = await client.get("/fraud/ip", headers=headers)
    assert again.json()["suspicious_ips"][0]["failed_attempts"] == 12


@pytest.mark.asyncio
async def test_user_activity_for_new_account(client: AsyncClient, seed):
    user = make_user(age_days=10)
    await seed(user)

    response = await client.get(f"/fraud/users/{user.id}", headers=auth_headers(uuid4(), "admin"))

    assert response.status_code == 200
    data = response.json()
    assert data["risk_score"] == 5
    assert data["risk_level"] == "MEDIUM"
    factors = {f["name"] for f in data["assessment"]["contributing_factors"]}
    assert factors == {"new_account", "young_account"}


@pytest.mark.asyncio
async def test_user_activity_unknown_user(client: AsyncClient):
    response = await client.get(f"/fraud/users/{uuid4()}", headers=auth_headers(uuid4(), "admin"))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_fraud_endpoints_require_admin(client: AsyncClient):
    response = await client.get("/fraud/anomalies", headers=auth_headers(uuid4()))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_anomalies_on_empty_population(client: AsyncClient):
    response = await client.get("/fraud/anomalies", headers=auth_headers(uuid4(), "admin"))

    assert response.status_code == 200
    data = response.json()
    assert data["anomalies"] == []
    assert data["baseline"]["population_size"] == 0


@pytest.mark.asyncio
async def test_comprehensive_check(client: AsyncClient, seed):
    user = make_user(age_days=400)
    await seed(user)

    response = await client.get(
        f"/fraud/users/{user.id}/comprehensive", headers=auth_headers(uuid4(), "admin")
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_activity_risk"] == "LOW"
    assert data["ip_fraud_risk"] == "LOW"
    assert data["anomaly_risk"] == "LOW"
    assert data["failures"] == []


@pytest.mark.asyncio
async def test_diagnostic_failures_are_not_grouped_by_ip(client: AsyncClient, seed):
    """Failed diagnostic entries carrying an IP never reach the IP scan"""
    await seed(
        *[
            make_audit_event(
                "REGISTRATION_RATE_LIMIT_EXCEEDED",
                actor_id=uuid4(),
                ip_address="10.0.0.7",
                success=False,
                details={"event_id": str(uuid4()), "registration_count": 10},
            )
            for _ in range(12)
        ]
    )

    response = await client.get("/fraud/ip", headers=auth_headers(uuid4(), "admin"))

    assert response.status_code == 200
    assert response.json()["suspicious_ips"] == []


@pytest.mark.asyncio
async def test_user_activity_scores_recent_failures(client: AsyncClient, seed):
    user = make_user(age_days=400)
    await seed(user)
    now = utcnow()
    await seed(
        *[
            make_audit_event(
                "LOGIN_FAILURE",
                actor_id=user.id,
                success=False,
                details={"location": f"city-{i}"},
                created_at=now - timedelta(hours=2 * i + 1),
            )
            for i in range(4)
        ],
        make_audit_event(
            "ADVANCED_RISK_ASSESSMENT",
            actor_id=user.id,
            details={"risk_score": 9, "risk_level": "CRITICAL"},
            created_at=now - timedelta(minutes=5),
        ),
    )

    response = await client.get(f"/fraud/users/{user.id}", headers=auth_headers(uuid4(), "admin"))

    assert response.status_code == 200
    data = response.json()
    assert data["risk_score"] == 3
    assert data["risk_level"] == "MEDIUM"
    factors = {f["name"] for f in data["assessment"]["contributing_factors"]}
    assert factors == {"failed_logins", "many_locations"}
    assert len(data["suspicious_activities"]) == 4
    assert data["contextual_risks"]["geographical_inconsistency"] is True
    assert data["contextual_risks"]["multiple_devices"] is False


@pytest.mark.asyncio
async def test_anomalies_flag_outlier_in_active_population(client: AsyncClient, seed):
    yesterday = utcnow() - timedelta(days=1)
    regulars = [make_user(login_count=2, last_login_at=yesterday) for _ in range(9)]
    outlier = make_user(login_count=12, last_login_at=yesterday)
    dormant = make_user(login_count=100, last_login_at=utcnow() - timedelta(days=40))
    await seed(*regulars, outlier, dormant)

    response = await client.get("/fraud/anomalies", headers=auth_headers(uuid4(), "admin"))

    assert response.status_code == 200
    data = response.json()
    assert data["baseline"]["population_size"] == 10
    assert data["baseline"]["avg_login_count"] == 3
    assert [a["username"] for a in data["anomalies"]] == [outlier.username]
    assert data["anomalies"][0]["login_deviation"] == 9


@pytest.mark.asyncio
async def test_comprehensive_check_with_anomalous_population(client: AsyncClient, seed):
    yesterday = utcnow() - timedelta(days=1)
    user = make_user(age_days=10, login_count=1, last_login_at=yesterday)
    others = [make_user(login_count=1, last_login_at=yesterday) for _ in range(3)]
    outlier = make_user(login_count=30, last_login_at=yesterday)
    await seed(user, *others, outlier)

    response = await client.get(
        f"/fraud/users/{user.id}/comprehensive", headers=auth_headers(uuid4(), "admin")
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_activity_risk"] == "MEDIUM"
    assert data["ip_fraud_risk"] == "LOW"
    assert data["anomaly_risk"] == "MEDIUM"
    assert data["failures"] == []
