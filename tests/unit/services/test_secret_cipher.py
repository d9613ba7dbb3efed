import base64

import pytest

from finai.adapter.services.secret_cipher import AesGcmSecretCipher
from finai.app.services.secret_cipher import (
    CipherConfigError,
    CipherFormatError,
    CipherIntegrityError,
)

TEST_KEY = "0123456789abcdef" * 4
OTHER_KEY = "fedcba9876543210" * 4


@pytest.fixture
def cipher():
    return AesGcmSecretCipher.from_hex(TEST_KEY)


@pytest.mark.parametrize(
    "plaintext",
    ["access-sandbox-1234", "", "with:colons:inside", "unicodé ✓", "x" * 4096],
)
def test_round_trip(cipher, plaintext):
    assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext


def test_envelope_layout(cipher):
    envelope = cipher.encrypt("secret")
    nonce, tag, ciphertext = envelope.split(":")

    assert len(base64.b64decode(nonce)) == 12
    assert len(base64.b64decode(tag)) == 16
    assert len(base64.b64decode(ciphertext)) == len("secret")
    assert "secret" not in envelope


def test_fresh_nonce_per_encryption(cipher):
    assert cipher.encrypt("same") != cipher.encrypt("same")


@pytest.mark.parametrize("part", [0, 1, 2])
def test_tampering_is_detected(cipher, part):
    pieces = cipher.encrypt("access-sandbox-1234").split(":")
    raw = bytearray(base64.b64decode(pieces[part]))
    raw[0] ^= 0x01
    pieces[part] = base64.b64encode(bytes(raw)).decode()

    with pytest.raises(CipherIntegrityError):
        cipher.decrypt(":".join(pieces))


def test_wrong_key_is_detected(cipher):
    envelope = cipher.encrypt("access-sandbox-1234")

    with pytest.raises(CipherIntegrityError):
        AesGcmSecretCipher.from_hex(OTHER_KEY).decrypt(envelope)


@pytest.mark.parametrize(
    "envelope",
    ["", "onlyone", "a:b", "a:b:c:d", "!!!:???:###"],
)
def test_malformed_envelope(cipher, envelope):
    with pytest.raises(CipherFormatError):
        cipher.decrypt(envelope)


@pytest.mark.parametrize("key", ["", "abc", "0" * 63, "0" * 65, "z" * 64])
def test_invalid_key_fails_at_construction(key):
    with pytest.raises(CipherConfigError):
        AesGcmSecretCipher.from_hex(key)
