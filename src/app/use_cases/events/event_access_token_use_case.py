"""
Event Access Token Use Case

Issues and verifies short-lived event access grants.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.event_access_token import EventAccessToken, EventAccessTokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from .dtos import VerifyAccessTokenResponse


class EventAccessTokenUseCase:
    """
    Use case for event access tokens.

    Business Rules:
    - Tokens are only issued for existing events and users
    - Verification binds the token to the same (event, user) pair
      and to its embedded issuance time; expired tokens are invalid
    """

    def __init__(self, uow: UnitOfWork, issuer: Optional[EventAccessTokenIssuer] = None):
        self.uow = uow
        self.issuer = issuer or EventAccessTokenIssuer()

    async def issue(self, event_id: UUID, user_id: UUID) -> Result[EventAccessToken]:
        async with self.uow:
            event = await self.uow.events.get_by_id(event_id)
            if event is None:
                return Return.err(Error("EVENT_NOT_FOUND", "Event not found"))

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

        return Return.ok(self.issuer.issue(event_id, user_id))

    async def verify(
        self, token: str, event_id: UUID, user_id: UUID
    ) -> Result[VerifyAccessTokenResponse]:
        if not token:
            return Return.err(Error("VALIDATION_FAILED", "Token is required"))

        return Return.ok(
            VerifyAccessTokenResponse(valid=self.issuer.verify(token, event_id, user_id))
        )
