import time
import uuid

import jwt
import pytest
from flask import Flask, g, jsonify

from portalapi.middleware import (
    InvalidAccessToken,
    admin_only,
    logged_in,
    parse_access_token,
)
from portalapi.models import AccessTokenClaims

SECRET = "secret"
USER_ID = str(uuid.UUID(int=7))


def _encode(role="admin", user_id=USER_ID, lifetime=600, key=SECRET, algorithm="HS256"):
    claims = AccessTokenClaims(
        user_id=user_id, role=role, expires_at=int(time.time()) + lifetime
    )
    return jwt.encode(claims.to_payload(), key, algorithm=algorithm)


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", SECRET)
    app = Flask(__name__)

    @app.route("/admin")
    @admin_only
    def admin_view():
        return jsonify(admin=g.admin_uuid)

    @app.route("/me")
    @logged_in
    def me_view():
        return jsonify(user=g.user_uuid)

    return app.test_client()


def test_parse_valid_token_returns_claims():
    claims = parse_access_token("Bearer " + _encode(role="member"), SECRET)
    assert claims.user_id == USER_ID
    assert claims.role == "member"


def test_parse_accepts_other_hmac_algorithm():
    claims = parse_access_token("Bearer " + _encode(algorithm="HS512"), SECRET)
    assert claims.role == "admin"


def test_parse_ignores_audience():
    payload = {"user_id": USER_ID, "role": "admin", "aud": "portal"}
    encoded = jwt.encode(payload, SECRET, algorithm="HS256")
    assert parse_access_token("Bearer " + encoded, SECRET).audience == "portal"


@pytest.mark.parametrize("header", ["", "token", "Bearer a b", "Bearer  token"])
def test_parse_rejects_malformed_header(header):
    with pytest.raises(InvalidAccessToken):
        parse_access_token(header, SECRET)


def test_parse_rejects_wrong_secret():
    with pytest.raises(InvalidAccessToken):
        parse_access_token("Bearer " + _encode(), "other")


def test_parse_rejects_expired_token():
    with pytest.raises(InvalidAccessToken):
        parse_access_token("Bearer " + _encode(lifetime=-60), SECRET)


def test_parse_rejects_unsigned_token():
    encoded = jwt.encode({"user_id": USER_ID, "role": "admin"}, None, algorithm="none")
    with pytest.raises(InvalidAccessToken):
        parse_access_token("Bearer " + encoded, SECRET)


def test_parse_rejects_non_string_role():
    encoded = jwt.encode({"user_id": USER_ID, "role": 5}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidAccessToken):
        parse_access_token("Bearer " + encoded, SECRET)


def test_invalid_access_token_message():
    assert str(InvalidAccessToken()) == "invalid access token"


def test_admin_only_passes_admin(client):
    response = client.get("/admin", headers={"Authorization": "Bearer " + _encode()})
    assert response.status_code == 200
    assert response.get_json() == {"admin": USER_ID}


def test_admin_only_rejects_missing_header(client):
    with pytest.raises(InvalidAccessToken):
        parse_access_token("", SECRET)
    response = client.get("/admin")
    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid access token"}


def test_admin_only_rejects_other_role(client):
    headers = {"Authorization": "Bearer " + _encode(role="member")}
    response = client.get("/admin", headers=headers)
    assert response.status_code == 401
    assert response.get_json() == {
        "error": "insufficient role permissions",
        "role": "member",
    }


def test_admin_only_rejects_bad_token(client):
    with pytest.raises(InvalidAccessToken):
        parse_access_token("Bearer token", SECRET)
    response = client.get("/admin", headers={"Authorization": "Bearer token"})
    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid access token"


def test_logged_in_passes_any_role(client):
    headers = {"Authorization": "Bearer " + _encode(role="member")}
    response = client.get("/me", headers=headers)
    assert response.status_code == 200
    assert response.get_json() == {"user": USER_ID}


def test_logged_in_rejects_expired_token(client):
    headers = {"Authorization": "Bearer " + _encode(lifetime=-60)}
    response = client.get("/me", headers=headers)
    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid access token"}