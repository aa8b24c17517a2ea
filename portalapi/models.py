"""Database tables and token claim structures."""

import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import BigInteger, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _unix_now() -> int:
    return int(time.time())


_ZERO_UUID = uuid.UUID(int=0)


class Base(DeclarativeBase):
    """Declarative base shared by every table."""


def _id_column() -> Mapped[uuid.UUID]:
    return mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


class _Timestamps:
    created_at: Mapped[int] = mapped_column(BigInteger, default=_unix_now)
    updated_at: Mapped[int] = mapped_column(BigInteger, default=_unix_now, onupdate=_unix_now)


class ActivityLog(Base):
    """A record of an action a user took on an entity."""

    __tablename__ = "activity_logs"

    id: Mapped[uuid.UUID] = _id_column()
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    action: Mapped[str] = mapped_column(String)
    entity: Mapped[str] = mapped_column(String)
    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    created_at: Mapped[int] = mapped_column(BigInteger, default=_unix_now)


class Invite(_Timestamps, Base):
    """An invitation that lets one e-mail address register with a role."""

    __tablename__ = "invites"

    id: Mapped[uuid.UUID] = _id_column()
    email: Mapped[str] = mapped_column(String, unique=True)
    role: Mapped[str] = mapped_column(String)
    token: Mapped[str] = mapped_column(String, unique=True)
    expires_at: Mapped[int] = mapped_column(BigInteger)
    used: Mapped[bool] = mapped_column(default=False)
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid)

    def to_dict(self) -> Dict[str, Any]:
        """Return the invite as the JSON object the API emits."""
        return {
            "ID": str(self.id or _ZERO_UUID),
            "Email": self.email or "",
            "Role": self.role or "",
            "Token": self.token or "",
            "ExpiresAt": self.expires_at or 0,
            "Used": bool(self.used),
            "CreatedBy": str(self.created_by or _ZERO_UUID),
            "CreatedAt": self.created_at or 0,
            "UpdatedAt": self.updated_at or 0,
        }


class Milestone(_Timestamps, Base):
    __tablename__ = "milestones"

    id: Mapped[uuid.UUID] = _id_column()
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    name: Mapped[str] = mapped_column(String)
    due_date: Mapped[str] = mapped_column(String, default="")
    progress: Mapped[int] = mapped_column(default=0)


class Notification(_Timestamps, Base):
    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = _id_column()
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    message: Mapped[str] = mapped_column(String, default="")
    read: Mapped[bool] = mapped_column(default=False)


class Project(_Timestamps, Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = _id_column()
    title: Mapped[str] = mapped_column(String)
    description: Mapped[str] = mapped_column(String, default="")
    domain: Mapped[str] = mapped_column(String, default="")
    status: Mapped[str] = mapped_column(String, default="")
    repo_url: Mapped[str] = mapped_column(String, default="")
    start_date: Mapped[str] = mapped_column(String, default="")
    end_date: Mapped[str] = mapped_column(String, default="")
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid)


class ProjectMember(Base):
    """Membership of a user in a project: maintainer, member or viewer."""

    __tablename__ = "project_members"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    role: Mapped[str] = mapped_column(String, default="")


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = _id_column()
    name: Mapped[str] = mapped_column(String, unique=True)


class Task(_Timestamps, Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = _id_column()
    milestone_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    title: Mapped[str] = mapped_column(String)
    description: Mapped[str] = mapped_column(String, default="")
    assigned_to: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    priority: Mapped[str] = mapped_column(String, default="")
    status: Mapped[str] = mapped_column(String, default="")


class User(_Timestamps, Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = _id_column()
    email: Mapped[str] = mapped_column(String, unique=True)
    password_hash: Mapped[str] = mapped_column(String)
    name: Mapped[str] = mapped_column(String)
    status: Mapped[str] = mapped_column(String, default="active")


class UserRole(Base):
    __tablename__ = "user_roles"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)


@dataclass
class UserRefreshToken:
    """A refresh token issued to a user."""

    user_id: str
    refresh_token: str


_REGISTERED = (
    ("issuer", "iss", str),
    ("subject", "sub", str),
    ("audience", "aud", list),
    ("expires_at", "exp", int),
    ("not_before", "nbf", int),
    ("issued_at", "iat", int),
    ("token_id", "jti", str),
)


def _claim(payload: Mapping[str, Any], key: str, kind: type, default: Any = None) -> Any:
    value = payload.get(key, default)
    if value is None:
        return None
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"claim {key!r} must be a number")
        return int(value)
    if isinstance(value, str):
        return value
    if kind is list and isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ValueError(f"claim {key!r} has the wrong type")


@dataclass
class _RegisteredClaims:
    issuer: Optional[str] = None
    subject: Optional[str] = None
    audience: Union[str, List[str], None] = None
    expires_at: Optional[int] = None
    not_before: Optional[int] = None
    issued_at: Optional[int] = None
    token_id: Optional[str] = None

    def _registered_payload(self) -> Dict[str, Any]:
        values = ((key, getattr(self, attr)) for attr, key, _ in _REGISTERED)
        return {key: value for key, value in values if value is not None}

    @staticmethod
    def _registered_from(payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {attr: _claim(payload, key, kind) for attr, key, kind in _REGISTERED}


@dataclass
class RefreshTokenClaims(_RegisteredClaims):
    """Claims carried by a refresh token."""

    user_id: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RefreshTokenClaims":
        """Build claims from a decoded token payload."""
        return cls(user_id=_claim(payload, "user_id", str, ""), **cls._registered_from(payload))

    def to_payload(self) -> Dict[str, Any]:
        """Return the payload to encode, leaving out unset claims."""
        return {"user_id": self.user_id, **self._registered_payload()}


@dataclass
class AccessTokenClaims(_RegisteredClaims):
    """Claims carried by an access token."""

    user_id: str = ""
    role: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AccessTokenClaims":
        """Build claims from a decoded token payload."""
        return cls(
            user_id=_claim(payload, "user_id", str, ""),
            role=_claim(payload, "role", str, ""),
            **cls._registered_from(payload),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Return the payload to encode, leaving out unset claims."""
        return {"user_id": self.user_id, "role": self.role, **self._registered_payload()}