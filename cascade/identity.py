"""Email/password identity over the Firebase Identity Toolkit REST API.

`FirebaseIdentityProvider` talks to the provider and announces every change of
the signed-in user on an `EventBus` as a SESSION_CHANGED event.
`IdentitySession` is built once at startup, listens to those events and is the
only place the screens read the authenticated flag and user from.
"""

import asyncio
import logging
import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import requests

from cascade.config import Settings
from cascade.domain import AuthSession, User
from cascade.events import SESSION_CHANGED, Event, EventBus, Handler

logger = logging.getLogger(__name__)

RESET_EMAIL_SENT = "Password reset email sent. Please check your inbox."
MISSING_EMAIL = "Please enter your email address"

# provider error code -> (classification, user-facing message)
PROVIDER_ERRORS: Dict[str, Tuple[str, str]] = {
    "EMAIL_EXISTS": ("email-already-in-use", "The email address is already in use by another account."),
    "WEAK_PASSWORD": ("weak-password", "The password must be 6 characters long or more."),
    "INVALID_EMAIL": ("invalid-email", "The email address is badly formatted."),
    "MISSING_EMAIL": ("invalid-email", "An email address must be provided."),
    "MISSING_PASSWORD": ("wrong-password", "A password must be provided."),
    "EMAIL_NOT_FOUND": ("user-not-found", "There is no user record corresponding to this identifier. The user may have been deleted."),
    "INVALID_PASSWORD": ("wrong-password", "The password is invalid or the user does not have a password."),
    "INVALID_LOGIN_CREDENTIALS": ("invalid-credential", "The supplied auth credential is malformed or has expired."),
    "USER_DISABLED": ("user-disabled", "The user account has been disabled by an administrator."),
    "TOO_MANY_ATTEMPTS_TRY_LATER": ("too-many-requests", "We have blocked all requests from this device due to unusual activity. Try again later."),
    "OPERATION_NOT_ALLOWED": ("operation-not-allowed", "The given sign-in provider is disabled for this Firebase project."),
    "INVALID_ID_TOKEN": ("user-token-expired", "The user's credential is no longer valid. The user must sign in again."),
    "TOKEN_EXPIRED": ("user-token-expired", "The user's credential is no longer valid. The user must sign in again."),
    "USER_NOT_FOUND": ("user-not-found", "There is no user record corresponding to this identifier. The user may have been deleted."),
    "INVALID_REFRESH_TOKEN": ("user-token-expired", "The user's credential is no longer valid. The user must sign in again."),
}

NETWORK_ERROR = "Network error (such as timeout, interrupted connection or unreachable host) has occurred."

# lookups or token refreshes failing with these mean the session is gone, not that the call failed
SESSION_ENDED_CODES = frozenset({"user-token-expired", "user-not-found", "user-disabled"})


class AuthError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @classmethod
    def from_provider(cls, raw: str) -> "AuthError":
        # e.g. "WEAK_PASSWORD : Password should be at least 6 characters"
        key, _, detail = raw.partition(" : ")
        key = key.strip()
        if key in PROVIDER_ERRORS:
            code, message = PROVIDER_ERRORS[key]
            return cls(code, message)
        return cls("internal-error", detail.strip() or raw or "An internal error has occurred.")

    @classmethod
    def network(cls) -> "AuthError":
        return cls("network-request-failed", NETWORK_ERROR)


class FirebaseIdentityProvider:
    def __init__(self, settings: Settings, bus: EventBus):
        self._api_key = settings.require_api_key()
        self._base_url = settings.identity_base_url
        self._token_url = settings.token_base_url
        self._timeout = settings.request_timeout
        self._bus = bus
        self._expires_at: Optional[float] = None
        self.current_user: Optional[User] = None

    def _post(self, url: str, **body: Any) -> Dict[str, Any]:
        try:
            r = requests.post(url, params={"key": self._api_key}, timeout=self._timeout, **body)
        except requests.RequestException as e:
            raise AuthError.network() from e

        try:
            data = r.json()
        except ValueError:
            data = {}
        if r.status_code != 200:
            raise AuthError.from_provider(data.get("error", {}).get("message", ""))
        return data

    async def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self._post, f"{self._base_url}/accounts:{method}", json=payload)

    def _set_user(self, user: Optional[User], expires_in: Optional[str] = None) -> None:
        self.current_user = user
        self._expires_at = time.monotonic() + float(expires_in) if (user and expires_in) else None
        self._bus.publish(SESSION_CHANGED, {"user": user})

    def _user_from(self, data: Dict[str, Any], email: str) -> User:
        if "localId" not in data:
            raise AuthError.from_provider("")
        return User(
            uid=data["localId"],
            email=data.get("email", email),
            id_token=data.get("idToken", ""),
            refresh_token=data.get("refreshToken", ""),
        )

    def add_state_listener(self, handler: Handler) -> None:
        """Subscribe to session changes; the handler is called right away with the current user."""
        self._bus.subscribe(SESSION_CHANGED, handler)
        payload = {"user": self.current_user}
        handler(Event(SESSION_CHANGED, datetime.now().isoformat(), payload), payload)

    def remove_state_listener(self, handler: Handler) -> None:
        self._bus.unsubscribe(SESSION_CHANGED, handler)

    async def create_account(self, email: str, password: str) -> User:
        data = await self._call("signUp", {"email": email, "password": password, "returnSecureToken": True})
        user = self._user_from(data, email)
        self._set_user(user, data.get("expiresIn"))
        return user

    async def sign_in(self, email: str, password: str) -> User:
        data = await self._call(
            "signInWithPassword", {"email": email, "password": password, "returnSecureToken": True}
        )
        user = self._user_from(data, email)
        self._set_user(user, data.get("expiresIn"))
        return user

    async def sign_out(self) -> None:
        # tokens are client-side only, nothing to revoke remotely
        self._set_user(None)

    async def send_password_reset(self, email: str) -> None:
        await self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    async def _refresh_tokens(self, user: User) -> Optional[User]:
        """Swap an expired id token for a new one; only a rejected refresh token ends the session."""
        try:
            data = await asyncio.to_thread(
                self._post,
                f"{self._token_url}/token",
                data={"grant_type": "refresh_token", "refresh_token": user.refresh_token},
            )
        except AuthError as e:
            if e.code not in SESSION_ENDED_CODES:
                raise
            logger.info("refresh for %s rejected (%s)", user.email, e.code)
            self._set_user(None)
            return None
        if "id_token" not in data:
            raise AuthError.from_provider("")

        refreshed = replace(
            user,
            id_token=data["id_token"],
            refresh_token=data.get("refresh_token", user.refresh_token),
        )
        logger.debug("id token for %s refreshed", user.email)
        self._set_user(refreshed, data.get("expires_in"))
        return refreshed

    async def verify_session(self) -> Optional[User]:
        """Re-check the stored credential and sign out locally if the provider no longer accepts it."""
        user = self.current_user
        if user is None:
            return None

        if self._expires_at is not None and time.monotonic() >= self._expires_at:
            return await self._refresh_tokens(user)

        try:
            await self._call("lookup", {"idToken": user.id_token})
        except AuthError as e:
            if e.code not in SESSION_ENDED_CODES:
                raise
            logger.info("session for %s ended by provider (%s)", user.email, e.code)
            self._set_user(None)
            return None
        return user


class IdentitySession:
    def __init__(self, provider: FirebaseIdentityProvider):
        self._provider = provider
        self._state = AuthSession.signed_out()
        provider.add_state_listener(self._on_session_changed)

    def _on_session_changed(self, event: Event, payload: dict) -> None:
        user = payload.get("user")
        self._state = AuthSession.signed_in(user) if user is not None else AuthSession.signed_out()

    @property
    def state(self) -> AuthSession:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def current_user(self) -> Optional[User]:
        return self._state.user

    @property
    def error_message(self) -> str:
        return self._state.error_message

    def clear_error(self) -> None:
        self._state = self._state.with_error("")

    def _fail(self, action: str, err: AuthError) -> None:
        logger.warning("%s failed: %s", action, err.code)
        self._state = self._state.with_error(err.message)

    async def sign_up(self, email: str, password: str) -> User:
        try:
            user = await self._provider.create_account(email, password)
        except AuthError as e:
            self._fail("sign up", e)
            raise
        logger.info("created account for %s", user.email)
        return user

    async def sign_in(self, email: str, password: str) -> User:
        try:
            user = await self._provider.sign_in(email, password)
        except AuthError as e:
            self._fail("sign in", e)
            raise
        logger.info("signed in %s", user.email)
        return user

    async def sign_out(self) -> None:
        try:
            await self._provider.sign_out()
        except AuthError as e:
            self._fail("sign out", e)
            raise
        logger.info("signed out")

    async def reset_password(self, email: str) -> str:
        if not email.strip():
            err = AuthError("missing-email", MISSING_EMAIL)
            self._fail("password reset", err)
            raise err
        try:
            await self._provider.send_password_reset(email)
        except AuthError as e:
            self._fail("password reset", e)
            raise
        self.clear_error()
        logger.info("password reset requested for %s", email)
        return RESET_EMAIL_SENT

    async def refresh(self) -> Optional[User]:
        try:
            await self._provider.verify_session()
        except AuthError as e:
            self._fail("session check", e)
            raise
        return self.current_user


def build_identity(settings: Settings) -> IdentitySession:
    """Wire a provider and its session together. Call once per process."""
    bus = EventBus()
    return IdentitySession(FirebaseIdentityProvider(settings, bus))
