"""
License secret generation and verification.

Secrets are short, human-readable strings such as ``AB3F-9K2Q-7Z1M-XC44``.
Only a salted bcrypt hash of the secret is stored on the LicenseKey.
"""

import secrets
import string
from dataclasses import dataclass

import bcrypt


@dataclass(frozen=True)
class KeyGeneratorConfig:
    """Settings for secret generation and hashing."""

    hash_rounds: int = 12
    alphabet: str = string.ascii_uppercase + string.digits
    group_count: int = 4
    group_length: int = 4
    separator: str = "-"

    def __post_init__(self):
        """Validate configuration."""
        if not 4 <= self.hash_rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        if not self.alphabet:
            raise ValueError("Alphabet cannot be empty")
        if self.group_count < 1 or self.group_length < 1:
            raise ValueError("Secret layout must have at least one character")


@dataclass(frozen=True)
class GeneratedKey:
    """Raw secret and its verification hash."""

    raw_secret: str
    verification_hash: str


class LicenseKeyGenerator:
    """
    Produces license secrets and verifies them against stored hashes.

    Uniqueness is not guaranteed by construction; the repository rejects
    a colliding secret and the caller generates again.
    """

    def __init__(self, config: KeyGeneratorConfig = None):
        self.config = config or KeyGeneratorConfig()

    def generate(self) -> GeneratedKey:
        """
        Generate a new secret and hash it.

        Returns:
            GeneratedKey with the raw secret and its bcrypt hash
        """
        raw_secret = self.generate_secret()
        return GeneratedKey(raw_secret=raw_secret, verification_hash=self.hash_secret(raw_secret))

    def generate_secret(self) -> str:
        """Draw a secret from the configured alphabet and group layout."""
        config = self.config
        groups = [
            "".join(secrets.choice(config.alphabet) for _ in range(config.group_length))
            for _ in range(config.group_count)
        ]
        return config.separator.join(groups)

    def hash_secret(self, raw_secret: str) -> str:
        """Return the salted bcrypt hash of a secret."""
        salt = bcrypt.gensalt(rounds=self.config.hash_rounds)
        return bcrypt.hashpw(raw_secret.encode("utf-8"), salt).decode("utf-8")

    def verify(self, raw_secret: str, verification_hash: str) -> bool:
        """
        Verify a raw secret against a stored hash.

        Args:
            raw_secret: Secret supplied by the caller
            verification_hash: Stored bcrypt hash

        Returns:
            True if the secret matches, False otherwise (including malformed hashes)
        """
        if not raw_secret or not verification_hash:
            return False
        try:
            return bcrypt.checkpw(raw_secret.encode("utf-8"), verification_hash.encode("utf-8"))
        except ValueError:
            return False
