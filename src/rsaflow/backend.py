"""Primitive Provider backed by pyca/cryptography.

Key generation, PEM serialization and the public-key side of every transform are left to `cryptography`. The one
operation the library does not expose, a raw PKCS#1 v1.5 private-key operation over arbitrary data, is assembled
here from the key's own CRT components.

Typical usage example:

    provider = CryptographyProvider()
    priv, pub = provider.generate_key_pair(2048)
    c = provider.transform(priv, KeyRole.PRIVATE, "Hi there!", Direction.ENCRYPT)
    r = provider.transform(pub, KeyRole.PUBLIC, c, Direction.DECRYPT)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import logging

from cryptography.exceptions import InvalidSignature
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric import rsa

from rsaflow.codec import PKCS1_OVERHEAD
from rsaflow.primitive import Direction
from rsaflow.primitive import KeyRole

PUBLIC_EXPONENT = 65537

logger = logging.getLogger(__name__)


class CryptographyProvider:
    """Implements `rsaflow.primitive.PrimitiveProvider` with pyca/cryptography.

    Attributes:
        public_exponent: Exponent used for newly generated keys.
    """

    def __init__(self, public_exponent: int = PUBLIC_EXPONENT) -> None:
        self.public_exponent = public_exponent

    def generate_key_pair(self, modulus_bits: int) -> tuple[str, str]:
        """Generates an RSA key pair as PEM text.

        The private half is exported as PKCS#8, the public half as SubjectPublicKeyInfo.

        Args:
            modulus_bits: The size of the modulus.

        Returns:
            A tuple of (private PEM, public PEM), or two empty strings if the library refused the parameters.
        """
        try:
            key = rsa.generate_private_key(public_exponent=self.public_exponent, key_size=modulus_bits)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            logger.warning("Key generation failed for %s bits: %s", modulus_bits, exc)
            return "", ""
        private_pem = key.private_bytes(serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8,
                                        serialization.NoEncryption())
        public_pem = key.public_key().public_bytes(serialization.Encoding.PEM,
                                                   serialization.PublicFormat.SubjectPublicKeyInfo)
        return private_pem.decode("ascii"), public_pem.decode("ascii")

    def transform(self, key_pem: str, key_role: KeyRole, payload: str, direction: Direction) -> str:
        """Runs a single-block transform.

        Private-key encryption and public-key decryption use PKCS#1 v1.5 block type 1 (the signature layout), so
        the public key recovers exactly what the private key transformed. The conventional pairing uses PKCS#1 v1.5
        encryption padding.

        Args:
            key_pem: PEM encoded key text.
            key_role: Which half of the pair `key_pem` holds.
            payload: Plaintext when encrypting, Base64 ciphertext when decrypting.
            direction: The transform to run.

        Returns:
            Base64 ciphertext or UTF-8 plaintext. An empty string on any failure.
        """
        try:
            if key_role is KeyRole.PRIVATE:
                priv = load_private_key(key_pem)
                if direction is Direction.ENCRYPT:
                    return b64_enc(private_encrypt(priv, payload.encode("utf-8")))
                return priv.decrypt(b64_dec(payload), padding.PKCS1v15()).decode("utf-8")
            pub = load_public_key(key_pem)
            if direction is Direction.ENCRYPT:
                return b64_enc(pub.encrypt(payload.encode("utf-8"), padding.PKCS1v15()))
            return pub.recover_data_from_signature(b64_dec(payload), padding.PKCS1v15(), None).decode("utf-8")
        except (ValueError, TypeError, UnsupportedAlgorithm, InvalidSignature) as exc:
            logger.warning("%s with %s key failed: %s", direction.value.capitalize(), key_role.value,
                           type(exc).__name__)
            return ""


def load_private_key(key_pem: str) -> rsa.RSAPrivateKey:
    """Loads an unencrypted PKCS#1 or PKCS#8 RSA private key.

    Raises:
        TypeError: If the key is not an RSA private key, or is password protected.
        ValueError: If the PEM cannot be parsed.
    """
    key = serialization.load_pem_private_key(key_pem.encode("ascii"), password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise TypeError("Key is not an RSA private key.")
    return key


def load_public_key(key_pem: str) -> rsa.RSAPublicKey:
    """Loads a SubjectPublicKeyInfo or PKCS#1 RSA public key.

    Raises:
        TypeError: If the key is not an RSA public key.
        ValueError: If the PEM cannot be parsed.
    """
    key = serialization.load_pem_public_key(key_pem.encode("ascii"))
    if not isinstance(key, rsa.RSAPublicKey):
        raise TypeError("Key is not an RSA public key.")
    return key


def private_encrypt(key: rsa.RSAPrivateKey, message: bytes) -> bytes:
    """Pads the message with PKCS#1 v1.5 block type 1 and applies the private-key operation.

    Uses the CRT components of the key to speed up exponentiation.

    Args:
        key: The private key.
        message: Octets to transform.

    Returns:
        The transformed block, exactly as long as the modulus in bytes.

    Raises:
        ValueError: If the message does not fit into a single block.
    """
    numbers = key.private_numbers()
    mod = numbers.public_numbers.n
    bsize = (mod.bit_length() + 7) // 8
    if len(message) > bsize - PKCS1_OVERHEAD:
        raise ValueError("Message too long for the current key.")
    ps = b"\xFF" * (bsize - len(message) - 3)
    em = bytes_to_integer(b"\x00\x01" + ps + b"\x00" + message)
    m_1 = pow(em, numbers.dmp1, numbers.p)
    m_2 = pow(em, numbers.dmq1, numbers.q)
    h = ((m_1 - m_2) * numbers.iqmp) % numbers.p
    return integer_to_bytes(m_2 + numbers.q * h, bsize)


def bytes_to_integer(msg: bytes) -> int:
    return int.from_bytes(msg, byteorder="big", signed=False)


def integer_to_bytes(msg: int, fixedlen: int) -> bytes:
    return msg.to_bytes(fixedlen, byteorder="big", signed=False)


def b64_enc(msg: bytes) -> str:
    return base64.b64encode(msg).decode("ascii")


def b64_dec(msg: str) -> bytes:
    """Decodes Base64 text, ignoring embedded whitespace such as line wraps.

    Raises:
        binascii.Error: If the text is not valid Base64.
    """
    return base64.b64decode("".join(msg.split()), validate=True)
