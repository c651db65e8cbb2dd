"""Test suite for the spoiler_auth service."""
