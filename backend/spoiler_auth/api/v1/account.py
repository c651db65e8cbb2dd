"""Account endpoints: login, refresh-token and revoke-token."""

from __future__ import annotations

from flask import Blueprint, Response

from spoiler_auth.api.deps import (
    get_access_token,
    json_body,
    json_response,
    service_context,
    timing,
)
from spoiler_auth.core.extensions import get_auth
from spoiler_auth.schemas import AuthResultSchema, LoginSchema, RefreshTokenSchema
from spoiler_auth.services._shared.ports import Identity
from spoiler_auth.services.auth.dto import RefreshIn, RevokeIn

bp = Blueprint("account", __name__)

login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
auth_result_schema = AuthResultSchema()


@bp.post("/login")
@timing
def login():
    """Issue an access/refresh token pair for the given username.

    Credentials are not checked against a user store: the username doubles
    as the user id.
    """

    data = login_schema.load(json_body())
    identity = Identity(user_id=data["username"], username=data["username"])
    result = get_auth().session_service(service_context()).login(identity)
    return json_response(auth_result_schema.dump(result))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token; the access token may already be expired."""

    data = refresh_token_schema.load(json_body())
    dto = RefreshIn(access_token=get_access_token(), refresh_token=data["refresh_token"])
    result = get_auth().session_service(service_context()).refresh(dto)
    return json_response(auth_result_schema.dump(result))


@bp.post("/revoke-token")
@timing
def revoke_token():
    """Revoke the user's refresh token; requires a valid access token."""

    data = refresh_token_schema.load(json_body())
    dto = RevokeIn(access_token=get_access_token(), refresh_token=data["refresh_token"])
    get_auth().session_service(service_context()).revoke(dto)
    return Response(status=204)
