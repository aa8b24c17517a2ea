"""Creating, checking and consuming invites."""

import time
import uuid
from datetime import timedelta
from typing import List

from .models import Invite
from .repository import InviteRepo

INVITE_LIFETIME = timedelta(hours=48)


class InviteError(ValueError):
    """Raised when an invite cannot be used."""


class InviteService:
    """Business rules for invites."""

    def __init__(self, repo: InviteRepo) -> None:
        self.repo = repo

    def validate_invite_token(self, email: str, token: str) -> str:
        """Return the role the invite grants, or raise if it cannot be used."""
        invite = self.repo.get_invite_by_token(token)
        if int(time.time()) > invite.expires_at:
            raise InviteError("invite expired")
        if invite.used:
            raise InviteError("invite already used")
        if invite.email != email:
            raise InviteError("invite email mismatch")
        return invite.role

    def use_invite_token(self, token: str) -> None:
        """Mark the invite with this token as used."""
        invite = self.repo.get_invite_by_token(token)
        invite.used = True
        self.repo.update_invite(invite)

    def create_invite(self, email: str, role: str, admin_uuid: uuid.UUID) -> Invite:
        """Store a new invite that expires after the invite lifetime."""
        token = str(uuid.uuid4())
        invite = Invite(
            email=email,
            role=role,
            token=token,
            expires_at=int(time.time() + INVITE_LIFETIME.total_seconds()),
            created_by=admin_uuid,
        )
        self.repo.create_invite(invite)
        self.repo.logger.info(
            "Created new invite",
            extra={
                "fields": {
                    "email": email,
                    "role": role,
                    "token": token,
                    "created_by": str(admin_uuid),
                }
            },
        )
        return invite

    def delete_invite(self, invite_uuid: uuid.UUID) -> None:
        self.repo.delete_invite(invite_uuid)

    def get_invites(self) -> List[Invite]:
        return self.repo.get_invites()