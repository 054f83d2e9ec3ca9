"""Authentication utilities for the species catalog.

Provides session-based authentication using Starlette's built-in
authentication system with cookie-backed sessions.
"""

import logging
from collections.abc import Awaitable, Callable
from functools import wraps

from passlib.context import CryptContext
from starlette.authentication import (
    AuthCredentials,
    AuthenticationBackend,
    BaseUser,
)
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse, RedirectResponse
from starsessions import load_session

from biocatalog.database.store import DataStore, PersistenceError
from biocatalog.profiles.models import Profile

logger = logging.getLogger(__name__)

# Password hashing context using Argon2
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

SESSION_USER_ID = "user_id"
SESSION_DISPLAY_NAME = "display_name"


def require_user_relative(
    redirect_path: str = "/",
) -> Callable[[Callable[..., Awaitable[object]]], Callable[..., Awaitable[object]]]:
    """Create an authentication decorator that redirects anonymous visitors.

    Args:
        redirect_path: Relative path to redirect to if not authenticated

    Returns:
        Decorator function that wraps route handlers
    """

    def decorator(
        func: Callable[..., Awaitable[object]],
    ) -> Callable[..., Awaitable[object]]:
        @wraps(func)
        async def wrapper(request: HTTPConnection, *args: object, **kwargs: object) -> object:
            if "authenticated" not in request.auth.scopes:
                return RedirectResponse(url=redirect_path, status_code=303)
            return await func(request, *args, **kwargs)

        return wrapper

    return decorator


# Usage: @require_user on view routes that need a signed-in user
require_user = require_user_relative()


class SessionUser(BaseUser):
    """A signed-in user, rebuilt from the session on every request."""

    def __init__(self, user_id: str, display_name: str | None = None) -> None:
        self.user_id = user_id
        self.name = display_name or ""

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self.name or "Anonymous"

    @property
    def identity(self) -> str:
        return self.user_id


class RegistrationError(Exception):
    """Raised when a new profile cannot be created."""


class AuthService:
    """Registers profiles and checks their credentials."""

    def __init__(self, store: DataStore) -> None:
        """Initialize auth service.

        Args:
            store: Data store holding the profiles table
        """
        self.store = store

    def hash_password(self, password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify password against hash.

        Args:
            password: Plain text password to verify
            password_hash: Argon2 hash to verify against

        Returns:
            True if password matches, False otherwise
        """
        return pwd_context.verify(password, password_hash)

    async def find_by_email(self, email: str) -> Profile | None:
        profiles = await self.store.list(Profile, "email", email=email.strip().lower())
        return profiles[0] if profiles else None

    async def register(
        self, email: str, password: str, display_name: str, biography: str | None = None
    ) -> Profile:
        """Create a profile with a hashed password.

        Raises:
            RegistrationError: If the email is taken or the insert fails
        """
        email = email.strip().lower()
        if await self.find_by_email(email) is not None:
            raise RegistrationError("An account with this email already exists.")

        try:
            profile = await self.store.create(
                Profile,
                {
                    "email": email,
                    "display_name": display_name.strip(),
                    "biography": (biography or "").strip() or None,
                    "password_hash": self.hash_password(password),
                },
            )
        except PersistenceError as e:
            raise RegistrationError(e.message) from e

        logger.info("Registered profile %s", profile.id)
        return profile

    async def authenticate(self, email: str, password: str) -> Profile | None:
        """Return the profile for valid credentials, otherwise None."""
        profile = await self.find_by_email(email)
        if profile is None or not self.verify_password(password, profile.password_hash):
            logger.info("Failed sign-in attempt for %s", email)
            return None
        return profile


class SessionAuthBackend(AuthenticationBackend):
    """Session-based authentication backend for Starlette.

    Checks for a user id in the session and returns appropriate credentials.
    """

    async def authenticate(self, conn: HTTPConnection) -> tuple[AuthCredentials, SessionUser] | None:
        """Authenticate request based on session data.

        Called by AuthenticationMiddleware on every request. Explicitly loads
        session from starsessions middleware before accessing it.
        """
        await load_session(conn)

        user_id = conn.session.get(SESSION_USER_ID)
        if not user_id:
            return None

        return AuthCredentials(["authenticated"]), SessionUser(
            user_id, conn.session.get(SESSION_DISPLAY_NAME)
        )


def require_user_api(
    func: Callable[..., Awaitable[object]],
) -> Callable[..., Awaitable[object]]:
    """Reject anonymous API callers with 401 instead of redirecting them."""

    @wraps(func)
    async def wrapper(request: HTTPConnection, *args: object, **kwargs: object) -> object:
        if "authenticated" not in request.auth.scopes:
            return JSONResponse({"detail": "Not authenticated"}, status_code=401)
        return await func(request, *args, **kwargs)

    return wrapper
