"""Shared test helpers (tokens, clocks, assertions)."""
