"""Credentials provider: look up users and check their passwords."""

import logging
from typing import Any, Mapping, MutableMapping, Optional

from pydantic import BaseModel, EmailStr, Field, ValidationError

from auth.passwords import verify_password
from dashboard.errors import AuthError, DataFetchError, StoreError
from dashboard.models import User
from dashboard.store import DashboardStore

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"


class Credentials(BaseModel):
    """Submitted login form."""

    email: EmailStr
    password: str = Field(..., min_length=6)


class CredentialsProvider:
    """
    Authorizes email/password pairs against the users table.

    Session handling is left to the caller: ``sign_in`` only writes the
    user reference into whatever mapping it is given.
    """

    def __init__(self, store: DashboardStore):
        self.store = store

    def get_user(self, email: str) -> Optional[User]:
        """
        Look up a user by email.

        Returns:
            The user, or None when no user has this email.

        Raises:
            DataFetchError: The store failed.
        """
        try:
            return self.store.get_user_by_email(email)
        except StoreError as e:
            logger.error(f"Failed to fetch user: {e}")
            raise DataFetchError("Failed to fetch user.") from e

    def authorize(self, credentials: Mapping[str, Any]) -> Optional[User]:
        """Return the user when the credentials are well formed and match."""
        try:
            parsed = Credentials.model_validate(
                {"email": credentials.get("email"), "password": credentials.get("password")}
            )
        except ValidationError:
            return None

        user = self.get_user(parsed.email)
        if user is None:
            return None

        if verify_password(parsed.password, user.password):
            return user

        logger.info(f"Password mismatch for {parsed.email}")
        return None

    def sign_in(
        self,
        credentials: Mapping[str, Any],
        session: MutableMapping[str, Any],
    ) -> User:
        """
        Authorize and record the user in ``session``.

        Raises:
            AuthError: With kind ``CredentialsSignin`` when authorization fails,
                ``CallbackRouteError`` when the user lookup itself failed.
        """
        try:
            user = self.authorize(credentials)
        except DataFetchError as e:
            raise AuthError(AuthError.CALLBACK_ROUTE_ERROR, str(e)) from e

        if user is None:
            raise AuthError(AuthError.CREDENTIALS_SIGNIN)

        session[SESSION_USER_KEY] = {"id": user.id, "name": user.name, "email": user.email}
        logger.info(f"User {user.email} signed in")
        return user

    def sign_out(self, session: MutableMapping[str, Any]) -> None:
        """Forget the signed-in user."""
        session.pop(SESSION_USER_KEY, None)


def current_user(session: Mapping[str, Any]) -> Optional[dict[str, Any]]:
    """User reference stored by ``sign_in``, if any."""
    return session.get(SESSION_USER_KEY)
