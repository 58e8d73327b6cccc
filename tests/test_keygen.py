"""Tests for secret generation."""

import string

import pytest

from github_webhooks.keygen import generate_secret


class TestGenerateSecret:
    def test_default_length(self):
        assert len(generate_secret()) == 32

    def test_alphanumeric(self):
        allowed = set(string.ascii_letters + string.digits)
        assert set(generate_secret(256)) <= allowed

    def test_random(self):
        assert generate_secret() != generate_secret()

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            generate_secret(0)
