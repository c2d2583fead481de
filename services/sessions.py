"""
Refresh-token persistence.

One refresh token per user, stored verbatim on the user row. Rotating
overwrites it (last write wins), logging out clears it, and a presented
token is only accepted when it is byte-for-byte the stored one.
"""
from __future__ import annotations

import logging

from models.user import User
from utils.exceptions import InvalidTokenError, NotFoundError, StaleTokenError
from utils.security import TokenIssuer, TokenPair

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, session, issuer: TokenIssuer):
        self.session = session
        self.issuer = issuer

    def rotate(self, identity_id) -> TokenPair:
        """Issue a fresh access/refresh pair and make the refresh token the only valid one."""
        user = self.session.get(User, str(identity_id))
        if user is None:
            raise NotFoundError("User does not exist")

        pair = TokenPair(
            access_token=self.issuer.issue_access(user),
            refresh_token=self.issuer.issue_refresh(user),
        )
        user.refresh_token = pair.refresh_token
        self.session.commit()
        logger.debug("Rotated session for user %s", user.id)
        return pair

    def invalidate(self, identity_id) -> None:
        user = self.session.get(User, str(identity_id))
        if user is None or user.refresh_token is None:
            return
        user.refresh_token = None
        self.session.commit()

    def validate_refresh(self, token: str) -> User:
        decoded = self.issuer.decode_refresh(token)
        user = self.session.get(User, str(decoded["sub"]))
        if user is None:
            raise InvalidTokenError("Invalid refresh token")
        if user.refresh_token is None or user.refresh_token != token:
            raise StaleTokenError()
        return user
