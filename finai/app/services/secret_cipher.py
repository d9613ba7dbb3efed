from abc import ABC, abstractmethod


class CipherError(Exception):
    """Base class for secret cipher failures; never recovered from"""


class CipherConfigError(CipherError):
    """Encryption key missing or malformed"""


class CipherFormatError(CipherError):
    """Stored envelope is not nonce:tag:ciphertext"""


class CipherIntegrityError(CipherError):
    """Authentication tag did not verify"""


class ISecretCipher(ABC):
    """Symmetric protection of secrets at rest (bank access tokens)"""

    @abstractmethod
    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext into a self-contained envelope string"""
        pass

    @abstractmethod
    def decrypt(self, envelope: str) -> str:
        """Decrypt an envelope produced by encrypt, or raise CipherError"""
        pass
