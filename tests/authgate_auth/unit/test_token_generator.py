"""Unit tests for TokenGenerator."""

import hashlib
from unittest.mock import AsyncMock

import pytest

from authgate_auth import TokenCollisionError, TokenGenerator, token_digest
from authgate_auth.services import BASE62_ALPHABET


class TestTokenGenerate:
    def setup_method(self):
        self.generator = TokenGenerator()

    def test_alphabet_has_62_symbols(self):
        assert len(BASE62_ALPHABET) == 62
        assert len(set(BASE62_ALPHABET)) == 62

    @pytest.mark.parametrize("length", [1, 6, 32])
    def test_generates_requested_length(self, length):
        token = self.generator.generate(length)

        assert len(token) == length
        assert set(token) <= set(BASE62_ALPHABET)

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError, match="positive"):
            self.generator.generate(0)

    def test_tokens_are_independent(self):
        """Consecutive tokens are drawn independently."""
        tokens = {self.generator.generate(32) for _ in range(50)}

        assert len(tokens) == 50

    def test_symbols_are_spread_over_alphabet(self):
        """All symbol classes show up over many draws."""
        sample = self.generator.generate(5000)

        assert any(c.isdigit() for c in sample)
        assert any(c.isupper() for c in sample)
        assert any(c.islower() for c in sample)


class TestTokenGenerateUnique:
    def setup_method(self):
        self.generator = TokenGenerator()

    async def test_returns_first_free_token(self):
        is_taken = AsyncMock(return_value=False)

        token = await self.generator.generate_unique(6, is_taken)

        assert len(token) == 6
        is_taken.assert_awaited_once_with(token_digest(token))

    async def test_retries_after_collision(self):
        is_taken = AsyncMock(side_effect=[True, True, False])

        token = await self.generator.generate_unique(6, is_taken, max_attempts=5)

        assert len(token) == 6
        assert is_taken.await_count == 3

    async def test_raises_after_max_attempts(self):
        is_taken = AsyncMock(return_value=True)

        with pytest.raises(TokenCollisionError) as exc_info:
            await self.generator.generate_unique(6, is_taken, max_attempts=3)

        assert is_taken.await_count == 3
        assert exc_info.value.details == {"attempts": 3, "length": 6}


class TestTokenDigest:
    def test_digest_is_sha256_hex(self):
        assert token_digest("abc123") == hashlib.sha256(b"abc123").hexdigest()
        assert len(token_digest("abc123")) == 64

    def test_digest_is_deterministic(self):
        assert token_digest("Xy9") == token_digest("Xy9")
        assert token_digest("Xy9") != token_digest("xy9")
