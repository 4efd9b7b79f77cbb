"""
Event Platform Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Account role on the platform"""

    user = "user"
    organizer = "organizer"
    admin = "admin"


class EventStatus(str, Enum):
    """Event lifecycle status"""

    draft = "draft"
    published = "published"
    cancelled = "cancelled"
    completed = "completed"


class RiskLevel(str, Enum):
    """Ordered risk bucket derived from a risk score"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_RANK = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


class ActionKind(str, Enum):
    """
    Closed registry of audit action kinds.

    Adding a kind means adding it here; the audit_events.action column
    only ever holds these values.
    """

    # Authentication
    LOGIN_ATTEMPT = "LOGIN_ATTEMPT"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILURE = "LOGIN_FAILURE"
    LOGOUT = "LOGOUT"
    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    PASSWORD_RESET = "PASSWORD_RESET"

    # User management
    USER_REGISTRATION = "USER_REGISTRATION"
    USER_PROFILE_UPDATE = "USER_PROFILE_UPDATE"
    USER_ROLE_CHANGE = "USER_ROLE_CHANGE"

    # Two-factor authentication
    TWO_FACTOR_ENABLE = "2FA_ENABLE"
    TWO_FACTOR_DISABLE = "2FA_DISABLE"
    TWO_FACTOR_VERIFY = "2FA_VERIFY"

    OAUTH_LOGIN = "OAUTH_LOGIN"

    # Events
    EVENT_CREATE = "EVENT_CREATE"
    EVENT_UPDATE = "EVENT_UPDATE"
    EVENT_DELETE = "EVENT_DELETE"
    EVENT_REGISTRATION = "EVENT_REGISTRATION"
    EVENT_CANCELLATION = "EVENT_CANCELLATION"

    # System
    API_ACCESS = "API_ACCESS"
    API_REQUEST = "API_REQUEST"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    SYSTEM_ERROR = "SYSTEM_ERROR"

    # Diagnostic entries written by the detectors themselves
    ADVANCED_RISK_ASSESSMENT = "ADVANCED_RISK_ASSESSMENT"
    IP_FRAUD_DETECTION = "IP_FRAUD_DETECTION"
    ANOMALY_DETECTION = "ANOMALY_DETECTION"
    COMPREHENSIVE_FRAUD_CHECK = "COMPREHENSIVE_FRAUD_CHECK"
    REGISTRATION_RISK_ASSESSMENT = "REGISTRATION_RISK_ASSESSMENT"
    REGISTRATION_RATE_LIMIT_EXCEEDED = "REGISTRATION_RATE_LIMIT_EXCEEDED"
    EVENT_SECURITY_CHECK = "EVENT_SECURITY_CHECK"
    THREAT_INTELLIGENCE_COLLECTION = "THREAT_INTELLIGENCE_COLLECTION"


# Never used as detection input, otherwise detector output would feed itself.
DIAGNOSTIC_ACTIONS = frozenset(
    {
        ActionKind.ADVANCED_RISK_ASSESSMENT,
        ActionKind.IP_FRAUD_DETECTION,
        ActionKind.ANOMALY_DETECTION,
        ActionKind.COMPREHENSIVE_FRAUD_CHECK,
        ActionKind.REGISTRATION_RISK_ASSESSMENT,
        ActionKind.REGISTRATION_RATE_LIMIT_EXCEEDED,
        ActionKind.EVENT_SECURITY_CHECK,
        ActionKind.THREAT_INTELLIGENCE_COLLECTION,
    }
)
