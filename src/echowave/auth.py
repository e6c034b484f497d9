"""
Authentication boundary.

The lifecycle never authenticates anyone itself. Callers obtain a
Session from an Authenticator and pass the session's user id into the
owner operations. Credential checking sits behind the narrow
CredentialVerifier interface, so a real identity provider can replace
the in-memory one without touching anything else.
"""

import hashlib
import hmac
import logging
import secrets
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from echowave.errors import AuthError
from echowave.model import User


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
_PBKDF2_ITERATIONS = 100_000


@dataclass(frozen=True)
class Identity:
    """A verified user identity."""

    user_id: str
    email: str


@dataclass(frozen=True)
class Session:
    """Explicit authentication context handed to owner operations."""

    identity: Identity
    token: str

    @property
    def user_id(self) -> str:
        return self.identity.user_id


class CredentialVerifier(ABC):
    """Narrow interface to whatever checks credentials."""

    @abstractmethod
    def verify_credentials(self, email: str, password: str) -> Identity:
        """Return the Identity for valid credentials, or raise AuthError."""
        ...

    @abstractmethod
    def register(self, email: str, password: str) -> Identity:
        """Create credentials for a new user, or raise AuthError."""
        ...


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)


class InMemoryCredentialVerifier(CredentialVerifier):
    """Keeps salted password hashes in memory. Suitable for tests and demos."""

    def __init__(self):
        self._accounts: Dict[str, Tuple[Identity, bytes, bytes]] = {}
        self._lock = threading.Lock()

    def register(self, email: str, password: str) -> Identity:
        email = _normalize_email(email)
        if "@" not in email:
            raise AuthError("Please enter a valid email")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        salt = secrets.token_bytes(16)
        digest = _hash_password(password, salt)
        with self._lock:
            if email in self._accounts:
                raise AuthError("An account with this email already exists")
            identity = Identity(user_id=str(uuid.uuid4()), email=email)
            self._accounts[email] = (identity, salt, digest)
        return identity

    def verify_credentials(self, email: str, password: str) -> Identity:
        with self._lock:
            account = self._accounts.get(_normalize_email(email))
        if account is None:
            raise AuthError("Invalid email or password")
        identity, salt, digest = account
        if not hmac.compare_digest(digest, _hash_password(password or "", salt)):
            raise AuthError("Invalid email or password")
        return identity


class Authenticator:
    """
    Issues and tracks sessions on top of a CredentialVerifier.

    Session tokens are random and URL-safe; signing out revokes them.
    """

    def __init__(self, verifier: CredentialVerifier):
        self.verifier = verifier
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def _open_session(self, identity: Identity) -> Session:
        session = Session(identity=identity, token=secrets.token_urlsafe(32))
        with self._lock:
            self._sessions[session.token] = session
        logger.info("Opened session for user %s", identity.user_id)
        return session

    def sign_up(self, email: str, password: str, display_name: Optional[str] = None) -> Tuple[Session, User]:
        """
        Register a new account and sign it in.

        Returns:
            (Session, User) where the user's display name defaults to the
            local part of the email address
        """
        identity = self.verifier.register(email, password)
        user = User(
            id=identity.user_id,
            email=identity.email,
            display_name=display_name or identity.email.split("@")[0],
        )
        return self._open_session(identity), user

    def sign_in(self, email: str, password: str) -> Session:
        return self._open_session(self.verifier.verify_credentials(email, password))

    def sign_out(self, session: Session) -> None:
        with self._lock:
            self._sessions.pop(session.token, None)

    def resolve(self, token: str) -> Session:
        """Look up a live session by token, or raise AuthError."""
        with self._lock:
            session = self._sessions.get(token)
        if session is None:
            raise AuthError("Session is not valid")
        return session


__all__ = [
    "MIN_PASSWORD_LENGTH",
    "Identity",
    "Session",
    "CredentialVerifier",
    "InMemoryCredentialVerifier",
    "Authenticator",
]
