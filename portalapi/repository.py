"""Data access for users, roles and invites."""

import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, List, TypeVar

from sqlalchemy import Select, delete, select
from sqlalchemy.orm import Session

from .models import Invite, Role, User, UserRole

_T = TypeVar("_T")


class RecordNotFound(LookupError):
    """Raised when a lookup matches no row."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


@contextmanager
def _committing(session: Session) -> Iterator[None]:
    try:
        yield
        session.commit()
    except Exception:
        session.rollback()
        raise


def _first(session: Session, statement: "Select[tuple[_T]]") -> _T:
    found = session.scalars(statement.limit(1)).first()
    if found is None:
        raise RecordNotFound()
    return found


class AuthRepo:
    """Users and their roles."""

    def __init__(self, session: Session, logger: logging.Logger) -> None:
        self.session = session
        self.logger = logger

    def create_user(self, user: User) -> None:
        with _committing(self.session):
            self.session.add(user)

    def get_user_by_email(self, email: str) -> User:
        return _first(
            self.session, select(User).where(User.email == email).order_by(User.id)
        )

    def get_user_by_id(self, user_uuid: uuid.UUID) -> User:
        return _first(self.session, select(User).where(User.id == user_uuid))

    def get_user_role(self, user_uuid: uuid.UUID) -> str:
        """Return the name of the user's role."""
        link = _first(
            self.session,
            select(UserRole)
            .where(UserRole.user_id == user_uuid)
            .order_by(UserRole.user_id, UserRole.role_id),
        )
        role = _first(self.session, select(Role).where(Role.id == link.role_id))
        self.logger.info(
            "got role for user",
            extra={
                "fields": {
                    "user_uuid": str(user_uuid),
                    "role_name": role.name,
                    "role_id": str(role.id),
                }
            },
        )
        return role.name

    def create_role_reference(self, user_uuid: uuid.UUID, role_name: str) -> None:
        """Give the user the role with this name."""
        role = _first(self.session, select(Role).where(Role.name == role_name).order_by(Role.id))
        with _committing(self.session):
            self.session.add(UserRole(user_id=user_uuid, role_id=role.id))


class InviteRepo:
    """Stored invites."""

    def __init__(self, session: Session, logger: logging.Logger) -> None:
        self.session = session
        self.logger = logger

    def create_invite(self, invite: Invite) -> None:
        with _committing(self.session):
            self.session.add(invite)

    def delete_invite(self, invite_uuid: uuid.UUID) -> None:
        with _committing(self.session):
            self.session.execute(delete(Invite).where(Invite.id == invite_uuid))
        self.session.expire_all()

    def get_invite_by_id(self, invite_uuid: uuid.UUID) -> Invite:
        return _first(self.session, select(Invite).where(Invite.id == invite_uuid))

    def get_invite_by_token(self, invite_token: str) -> Invite:
        return _first(
            self.session,
            select(Invite).where(Invite.token == invite_token).order_by(Invite.id),
        )

    def get_invites(self) -> List[Invite]:
        return list(self.session.scalars(select(Invite)))

    def update_invite(self, invite: Invite) -> None:
        with _committing(self.session):
            self.session.merge(invite)