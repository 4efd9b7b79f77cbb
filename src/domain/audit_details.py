"""
Audit Detail Payloads

Action-specific shapes for AuditEvent.details, keyed by ActionKind.
Kinds without a registered shape (SYSTEM_ERROR included) keep an open map.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict

from src.domain.entities.enums import ActionKind


class LoginDetails(BaseModel):
    """LOGIN_* / OAUTH_LOGIN / LOGOUT"""

    model_config = ConfigDict(extra="allow")

    location: Optional[str] = None
    user_agent: Optional[str] = None
    reason: Optional[str] = None


class EventActionDetails(BaseModel):
    """EVENT_* actions"""

    model_config = ConfigDict(extra="allow")

    event_id: str


class RoleChangeDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    target_user_id: str
    old_role: Optional[str] = None
    new_role: str


class PermissionDeniedDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    resource: Optional[str] = None
    required_role: Optional[str] = None


class ApiRequestDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    method: str
    path: str
    status_code: int
    response_time_ms: Optional[float] = None


class RiskAssessmentDetails(BaseModel):
    risk_score: float
    risk_level: str
    contextual_risks: Dict[str, bool]
    suspicious_activities_count: int


class IPFraudDetails(BaseModel):
    suspicious_ips: List[str]
    total_suspicious_ips: int


class AnomalyDetails(BaseModel):
    anomalous_users: List[str]
    total_anomalies: int


class ComprehensiveCheckDetails(BaseModel):
    user_activity_risk: Optional[str] = None
    ip_fraud_risk: Optional[str] = None
    anomaly_risk: Optional[str] = None
    failures: List[str] = []


class RegistrationRiskDetails(BaseModel):
    event_id: str
    risk_score: float
    risk_level: str


class RateLimitDetails(BaseModel):
    event_id: str
    registration_count: int


class SecurityCheckDetails(BaseModel):
    event_id: str
    allowed: bool
    failures: List[str] = []


class ThreatCollectionDetails(BaseModel):
    total_threats: int
    high_severity_threats: int


DETAIL_SHAPES: Dict[ActionKind, Type[BaseModel]] = {
    ActionKind.LOGIN_ATTEMPT: LoginDetails,
    ActionKind.LOGIN_SUCCESS: LoginDetails,
    ActionKind.LOGIN_FAILURE: LoginDetails,
    ActionKind.LOGOUT: LoginDetails,
    ActionKind.OAUTH_LOGIN: LoginDetails,
    ActionKind.EVENT_CREATE: EventActionDetails,
    ActionKind.EVENT_UPDATE: EventActionDetails,
    ActionKind.EVENT_DELETE: EventActionDetails,
    ActionKind.EVENT_REGISTRATION: EventActionDetails,
    ActionKind.EVENT_CANCELLATION: EventActionDetails,
    ActionKind.USER_ROLE_CHANGE: RoleChangeDetails,
    ActionKind.PERMISSION_DENIED: PermissionDeniedDetails,
    ActionKind.API_REQUEST: ApiRequestDetails,
    ActionKind.ADVANCED_RISK_ASSESSMENT: RiskAssessmentDetails,
    ActionKind.IP_FRAUD_DETECTION: IPFraudDetails,
    ActionKind.ANOMALY_DETECTION: AnomalyDetails,
    ActionKind.COMPREHENSIVE_FRAUD_CHECK: ComprehensiveCheckDetails,
    ActionKind.REGISTRATION_RISK_ASSESSMENT: RegistrationRiskDetails,
    ActionKind.REGISTRATION_RATE_LIMIT_EXCEEDED: RateLimitDetails,
    ActionKind.EVENT_SECURITY_CHECK: SecurityCheckDetails,
    ActionKind.THREAT_INTELLIGENCE_COLLECTION: ThreatCollectionDetails,
}


def parse_details(action: ActionKind, raw: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate a raw detail payload against the shape registered for action.

    Returns the normalized dict to store. Raises pydantic.ValidationError
    when the payload does not fit the shape.
    """
    raw = raw or {}
    shape = DETAIL_SHAPES.get(action)
    if shape is None:
        return dict(raw)
    return shape.model_validate(raw).model_dump(mode="json", exclude_none=True)
