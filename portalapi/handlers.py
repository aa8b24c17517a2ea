"""HTTP handlers for invites and the route table."""

import json
import logging
import uuid
from typing import Any, Dict, Sequence, Tuple

from flask import Flask, g, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .invites import InviteError, InviteService
from .middleware import admin_only
from .repository import InviteRepo, RecordNotFound

_SERVICE_ERRORS = (SQLAlchemyError, RecordNotFound, InviteError)


class _BadBody(ValueError):
    pass


def _match_field(names: Sequence[str], key: str) -> Any:
    if key in names:
        return key
    folded = key.casefold()
    return next((name for name in names if name.casefold() == folded), None)


def _bind_strings(names: Sequence[str]) -> Dict[str, str]:
    """Read string fields from a JSON request body; absent fields are empty."""
    values = {name: "" for name in names}
    raw = request.get_data(cache=True)
    if not raw:
        return values
    if request.mimetype != "application/json":
        raise _BadBody()
    try:
        data = json.loads(raw)
    except ValueError:
        raise _BadBody() from None
    if data is None:
        return values
    if not isinstance(data, dict):
        raise _BadBody()
    for key, value in data.items():
        name = _match_field(names, key)
        if name is None or value is None:
            continue
        if not isinstance(value, str):
            raise _BadBody()
        values[name] = value
    return values


def _error(status: int, message: str) -> Tuple[Any, int]:
    return jsonify({"error": message}), status


class InviteHandler:
    """Views for creating, listing and deleting invites."""

    def __init__(self, service: InviteService, logger: logging.Logger) -> None:
        self.service = service
        self.logger = logger

    def create_invite(self) -> Tuple[Any, int]:
        try:
            body = _bind_strings(("email", "role"))
        except _BadBody:
            return _error(400, "bad body parameters")
        admin_uuid = uuid.UUID(g.admin_uuid)
        try:
            invite = self.service.create_invite(body["email"], body["role"], admin_uuid)
        except _SERVICE_ERRORS as err:
            return _error(500, str(err))
        return (
            jsonify(
                {
                    "id": str(invite.id),
                    "token": invite.token,
                    "role": invite.role,
                    "expires_at": invite.expires_at,
                }
            ),
            201,
        )

    def get_invites(self) -> Tuple[Any, int]:
        try:
            invites = self.service.get_invites()
        except _SERVICE_ERRORS as err:
            return jsonify(str(err)), 400
        return jsonify({"invites": [invite.to_dict() for invite in invites]}), 200

    def delete_invite(self, invite_id: str) -> Tuple[Any, int]:
        invite_uuid = uuid.UUID(invite_id)
        try:
            self.service.delete_invite(invite_uuid)
        except _SERVICE_ERRORS as err:
            return _error(400, str(err))
        return "", 204


def init_routes(app: Flask, session: Session, logger: logging.Logger) -> None:
    """Wire repositories, services and handlers into the application."""
    invite_repo = InviteRepo(session, logger)
    invite_service = InviteService(invite_repo)
    invites = InviteHandler(invite_service, logger)

    app.add_url_rule(
        "/invites",
        endpoint="create_invite",
        view_func=admin_only(invites.create_invite),
        methods=["POST"],
    )
    app.add_url_rule(
        "/invites",
        endpoint="get_invites",
        view_func=admin_only(invites.get_invites),
        methods=["GET"],
    )
    app.add_url_rule(
        "/invites/<invite_id>",
        endpoint="delete_invite",
        view_func=admin_only(invites.delete_invite),
        methods=["DELETE"],
    )