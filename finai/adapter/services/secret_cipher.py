"""
AES-256-GCM secret cipher.

Envelope format: base64(nonce):base64(tag):base64(ciphertext)
"""

import base64
import binascii
import os
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from finai.app.services.secret_cipher import (
    CipherConfigError,
    CipherFormatError,
    CipherIntegrityError,
    ISecretCipher,
)

KEY_HEX_LENGTH = 64
NONCE_LENGTH = 12
TAG_LENGTH = 16
DELIMITER = ":"


@dataclass(frozen=True)
class CipherKey:
    """256-bit key, loaded once at startup and never mutated"""

    material: bytes

    @classmethod
    def from_hex(cls, key_hex: str) -> "CipherKey":
        if not key_hex:
            raise CipherConfigError("TOKEN_ENCRYPTION_KEY is not set")
        if len(key_hex) != KEY_HEX_LENGTH:
            raise CipherConfigError(
                f"TOKEN_ENCRYPTION_KEY must be {KEY_HEX_LENGTH} hex characters (32 bytes), "
                f"got {len(key_hex)}"
            )
        try:
            material = bytes.fromhex(key_hex)
        except ValueError as exc:
            raise CipherConfigError("TOKEN_ENCRYPTION_KEY must be hexadecimal") from exc
        return cls(material=material)


def _b64decode(part: str) -> bytes:
    try:
        return base64.b64decode(part, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CipherFormatError("Invalid encrypted data format: bad base64 component") from exc


class AesGcmSecretCipher(ISecretCipher):
    """ISecretCipher backed by the cryptography AESGCM primitive"""

    def __init__(self, key: CipherKey):
        self._aead = AESGCM(key.material)

    @classmethod
    def from_hex(cls, key_hex: str) -> "AesGcmSecretCipher":
        return cls(CipherKey.from_hex(key_hex))

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(NONCE_LENGTH)
        # AESGCM appends the 16-byte tag to the ciphertext
        sealed = self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return DELIMITER.join(
            base64.b64encode(part).decode("ascii") for part in (nonce, tag, ciphertext)
        )

    def decrypt(self, envelope: str) -> str:
        parts = envelope.split(DELIMITER)
        if len(parts) != 3:
            raise CipherFormatError(
                "Invalid encrypted data format: expected iv:authTag:ciphertext"
            )

        nonce, tag, ciphertext = (_b64decode(part) for part in parts)
        if len(nonce) != NONCE_LENGTH or len(tag) != TAG_LENGTH:
            raise CipherFormatError("Invalid encrypted data format: bad nonce or tag length")

        try:
            plaintext = self._aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as exc:
            raise CipherIntegrityError("Encrypted data failed authentication") from exc

        return plaintext.decode("utf-8")
