"""
Wallet Crypto - Password-based encryption of wallet keys.

Industry-standard security:
- PBKDF2-HMAC-SHA256 key derivation (100,000 iterations)
- AES-256-GCM authenticated encryption
- Fresh random salt and IV for every encryption

Keys never exist unencrypted on disk.
"""

import secrets
from dataclasses import dataclass

# Cryptography
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from exceptions import EntropySourceFailure, KeystoreError, WrongPasswordOrCorrupted


# ============================================
# Security Constants
# ============================================

# PBKDF2 parameters (brute-force cost; must not be lowered)
PBKDF2_ITERATIONS = 100_000
PBKDF2_HASH = hashes.SHA256
SALT_SIZE = 32

# AES-GCM constants
AES_KEY_SIZE = 32  # 256 bits
AES_IV_SIZE = 16
AES_TAG_SIZE = 16


# ============================================
# Data Classes
# ============================================

@dataclass(frozen=True)
class EncryptedKey:
    """An encrypted private key. All fields are hex strings."""
    encrypted: str
    salt: str
    iv: str
    auth_tag: str

    def to_dict(self) -> dict:
        return {
            "encrypted": self.encrypted,
            "salt": self.salt,
            "iv": self.iv,
            "authTag": self.auth_tag,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EncryptedKey":
        """
        Parse the persisted form.

        Raises:
            KeystoreError: If a field is missing or not a hex string
        """
        values = {}
        for attr, key in (("encrypted", "encrypted"), ("salt", "salt"),
                          ("iv", "iv"), ("auth_tag", "authTag")):
            value = data.get(key) if isinstance(data, dict) else None
            if not isinstance(value, str):
                raise KeystoreError(f"Invalid keystore: missing '{key}' field")
            try:
                bytes.fromhex(value)
            except ValueError as e:
                raise KeystoreError(f"Invalid keystore: '{key}' is not hex") from e
            values[attr] = value
        return cls(**values)


# ============================================
# Key Derivation
# ============================================

def derive_key(password: str, salt: bytes) -> bytes:
    """
    Derive an encryption key from password using PBKDF2-HMAC-SHA256.

    The fixed iteration count makes every password guess cost 100,000
    HMAC rounds.
    """
    kdf = PBKDF2HMAC(
        algorithm=PBKDF2_HASH(),
        length=AES_KEY_SIZE,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(password.encode('utf-8'))


def _random_bytes(size: int) -> bytes:
    try:
        return secrets.token_bytes(size)
    except (OSError, NotImplementedError) as e:
        raise EntropySourceFailure(f"Secure random source unavailable: {e}") from e


# ============================================
# Encryption
# ============================================

def encrypt_key(plain_key_hex: str, password: str) -> EncryptedKey:
    """
    Encrypt a hex-encoded private key with a password.

    Returns: EncryptedKey(encrypted, salt, iv, auth_tag), all hex
    """
    salt = _random_bytes(SALT_SIZE)
    iv = _random_bytes(AES_IV_SIZE)
    key = derive_key(password, salt)

    aesgcm = AESGCM(key)
    ciphertext_and_tag = aesgcm.encrypt(iv, plain_key_hex.encode('utf-8'), None)

    ciphertext = ciphertext_and_tag[:-AES_TAG_SIZE]
    tag = ciphertext_and_tag[-AES_TAG_SIZE:]

    return EncryptedKey(
        encrypted=ciphertext.hex(),
        salt=salt.hex(),
        iv=iv.hex(),
        auth_tag=tag.hex(),
    )


def decrypt_key(entry: EncryptedKey, password: str) -> str:
    """
    Decrypt a private key with a password.

    Raises:
        WrongPasswordOrCorrupted: If the password is wrong or the data is
            tampered (the two cases cannot be told apart)
    """
    try:
        salt = bytes.fromhex(entry.salt)
        iv = bytes.fromhex(entry.iv)
        ciphertext_and_tag = bytes.fromhex(entry.encrypted) + bytes.fromhex(entry.auth_tag)
    except ValueError as e:
        raise WrongPasswordOrCorrupted() from e

    if len(bytes.fromhex(entry.auth_tag)) != AES_TAG_SIZE:
        raise WrongPasswordOrCorrupted()

    key = derive_key(password, salt)
    aesgcm = AESGCM(key)
    try:
        plaintext = aesgcm.decrypt(iv, ciphertext_and_tag, None)
    except (InvalidTag, ValueError) as e:
        raise WrongPasswordOrCorrupted() from e

    return plaintext.decode('utf-8')
