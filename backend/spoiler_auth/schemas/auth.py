"""Account-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    username = fields.String(
        required=True,
        validate=validate.Length(min=1, max=100),
        error_messages={"required": "username is required"},
    )
    password = fields.String(
        required=True,
        validate=validate.Length(min=1, max=128),
        error_messages={"required": "password is required"},
    )


class RefreshTokenSchema(Schema):
    """Input payload carrying the refresh token to rotate or revoke."""

    refresh_token = fields.String(
        required=True,
        data_key="refreshToken",
        validate=validate.Length(min=1),
        error_messages={"required": "Refresh token is required."},
    )


class AuthResultSchema(Schema):
    """Response payload with the token pair and their expiries."""

    access_token = fields.String(required=True, data_key="accessToken")
    expires_at = fields.DateTime(required=True, data_key="expiryDate")
    refresh_token = fields.String(required=True, data_key="refreshToken")
    refresh_token_expires_at = fields.DateTime(required=True, data_key="refreshTokenExpiryDate")
