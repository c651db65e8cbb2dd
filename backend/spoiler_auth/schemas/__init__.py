"""Marshmallow schemas for request binding and response serialization."""

from __future__ import annotations

from .auth import AuthResultSchema, LoginSchema, RefreshTokenSchema

__all__ = ["LoginSchema", "RefreshTokenSchema", "AuthResultSchema"]
