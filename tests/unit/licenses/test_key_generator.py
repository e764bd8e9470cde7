"""
Unit tests for LicenseKeyGenerator.
"""

import re

import pytest

from licenses.domain.key_generator import KeyGeneratorConfig, LicenseKeyGenerator

SECRET_PATTERN = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")


class TestLicenseKeyGenerator:
    """Tests for secret generation and verification."""

    def test_secret_format(self, key_generator):
        """Test secrets use four dash-separated groups of four."""
        generated = key_generator.generate()
        assert SECRET_PATTERN.match(generated.raw_secret)

    def test_hash_is_not_the_secret(self, key_generator):
        """Test only a salted hash is produced for storage."""
        generated = key_generator.generate()
        assert generated.verification_hash != generated.raw_secret
        assert generated.verification_hash.startswith("$2")

    def test_verify(self, key_generator):
        """Test verifying a secret against its hash."""
        generated = key_generator.generate()
        assert key_generator.verify(generated.raw_secret, generated.verification_hash) is True
        assert key_generator.verify("AAAA-BBBB-CCCC-DDDD", generated.verification_hash) is False

    def test_same_secret_hashes_differently(self, key_generator):
        """Test hashes are salted."""
        first = key_generator.hash_secret("AAAA-BBBB-CCCC-DDDD")
        second = key_generator.hash_secret("AAAA-BBBB-CCCC-DDDD")
        assert first != second
        assert key_generator.verify("AAAA-BBBB-CCCC-DDDD", first)
        assert key_generator.verify("AAAA-BBBB-CCCC-DDDD", second)

    def test_verify_rejects_missing_or_malformed_input(self, key_generator):
        """Test verification fails closed."""
        assert key_generator.verify("", "$2b$04$abc") is False
        assert key_generator.verify(None, "$2b$04$abc") is False
        assert key_generator.verify("AAAA-BBBB-CCCC-DDDD", "") is False
        assert key_generator.verify("AAAA-BBBB-CCCC-DDDD", "not-a-hash") is False

    def test_custom_layout(self):
        """Test a custom alphabet and group layout."""
        generator = LicenseKeyGenerator(
            KeyGeneratorConfig(hash_rounds=4, alphabet="AB", group_count=2, group_length=3, separator=".")
        )
        secret = generator.generate_secret()
        assert re.match(r"^[AB]{3}\.[AB]{3}$", secret)

    def test_invalid_rounds(self):
        """Test bcrypt rounds outside 4..31 are rejected."""
        with pytest.raises(ValueError):
            KeyGeneratorConfig(hash_rounds=3)
