"""
User Entity

Represents an account on the event platform (attendee, organizer or admin).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - the account directory consumed by the risk checks.

    Business Rules:
    - Email and username are unique
    - created_at drives the account-age risk signals
    - login_count / last_login_at feed the population anomaly baseline
    - ip_address is the address recorded at signup, used to group registrations
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=50)
    email: str = Field(unique=True, index=True, max_length=255)
    role: UserRole = Field(default=UserRole.user)
    is_active: bool = Field(default=True)

    # Login tracking
    login_count: int = Field(default=0)
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_login_location: Optional[str] = Field(default=None, max_length=255)

    ip_address: Optional[str] = Field(default=None, max_length=64)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_user_last_login_at", "last_login_at"),
        Index("idx_user_created_at", "created_at"),
    )
