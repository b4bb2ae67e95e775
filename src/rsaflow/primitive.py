"""The contract rsaflow expects from the underlying RSA primitive.

The core never performs RSA mathematics itself. It hands opaque PEM text and payloads to a provider satisfying
`PrimitiveProvider` and interprets the empty string as the provider's sole failure signal.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import typing


class KeyRole(enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class Direction(enum.Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


class PrimitiveProvider(typing.Protocol):
    """Anything able to generate RSA key pairs and run raw transforms over PEM keys."""

    def generate_key_pair(self, modulus_bits: int) -> tuple[str, str]:
        """Generates a key pair.

        Args:
            modulus_bits: The modulus size of the key pair.

        Returns:
            A tuple of (private PEM, public PEM). Both are empty strings if generation failed.
        """
        ...

    def transform(self, key_pem: str, key_role: KeyRole, payload: str, direction: Direction) -> str:
        """Encrypts or decrypts the payload with the given key.

        Args:
            key_pem: PEM encoded key text.
            key_role: Whether `key_pem` is the public or the private half.
            payload: Plaintext when encrypting, Base64 ciphertext when decrypting.
            direction: The transform to run.

        Returns:
            Base64 ciphertext or recovered plaintext. An empty string if the transform failed.
        """
        ...
