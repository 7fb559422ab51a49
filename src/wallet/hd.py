"""
HD derivation - SLIP-10 ed25519 key derivation and Solana keypairs.

Only hardened derivation exists for ed25519, so every path segment must
carry the ' marker. The wallet always uses account 0 on the fixed
Solana path.
"""

import hashlib
import hmac
import re
import struct
from dataclasses import dataclass, field

from nacl.signing import SigningKey

from exceptions import InvalidKeyFormat, InvalidKeyLength


# BIP-44 derivation path for Solana (account 0)
SOLANA_DERIVATION_PATH = "m/44'/501'/0'/0'"

ED25519_CURVE_KEY = b"ed25519 seed"
HARDENED_OFFSET = 0x80000000

SEED_LENGTH = 32
PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 64  # seed || public key

_PATH_RE = re.compile(r"^m(/\d+')+$")


@dataclass(frozen=True)
class DerivedKey:
    """A SLIP-10 node: private key material plus chain code."""
    key: bytes = field(repr=False)
    chain_code: bytes = field(repr=False)


@dataclass(frozen=True)
class Keypair:
    """An ed25519 keypair in Solana layout (64-byte secret key)."""
    public_key: bytes
    secret_key: bytes = field(repr=False)

    @property
    def seed(self) -> bytes:
        return self.secret_key[:SEED_LENGTH]


def parse_path(path: str) -> list[int]:
    """
    Parse a hardened derivation path into segment indices.

    Returns the indices without the hardened offset applied.

    Raises:
        ValueError: If the path is malformed or has a non-hardened segment
    """
    if not _PATH_RE.match(path):
        raise ValueError(f"Invalid derivation path: {path}")

    indices = [int(part[:-1]) for part in path.split("/")[1:]]
    for index in indices:
        if index >= HARDENED_OFFSET:
            raise ValueError(f"Path segment out of range: {index}")
    return indices


def master_key(seed: bytes) -> DerivedKey:
    """Derive the SLIP-10 master node from a seed."""
    digest = hmac.new(ED25519_CURVE_KEY, seed, hashlib.sha512).digest()
    return DerivedKey(key=digest[:32], chain_code=digest[32:])


def derive_child(parent: DerivedKey, index: int) -> DerivedKey:
    """Derive the hardened child at index."""
    data = b"\x00" + parent.key + struct.pack(">L", index + HARDENED_OFFSET)
    digest = hmac.new(parent.chain_code, data, hashlib.sha512).digest()
    return DerivedKey(key=digest[:32], chain_code=digest[32:])


def derive_path(path: str, seed_hex: str) -> DerivedKey:
    """
    Walk a hardened derivation path from a hex-encoded master seed.

    Args:
        path: Derivation path, e.g. "m/44'/501'/0'/0'"
        seed_hex: BIP-39 seed as hex

    Returns:
        DerivedKey for the final path segment
    """
    node = master_key(bytes.fromhex(seed_hex))
    for index in parse_path(path):
        node = derive_child(node, index)
    return node


def keypair_from_seed(seed: bytes) -> Keypair:
    """
    Build the ed25519 keypair for a 32-byte seed.

    Deterministic: the same seed always yields the same keypair.
    """
    if len(seed) != SEED_LENGTH:
        raise InvalidKeyLength(len(seed), SEED_LENGTH)

    signing_key = SigningKey(bytes(seed))
    public_key = bytes(signing_key.verify_key)
    return Keypair(public_key=public_key, secret_key=bytes(seed) + public_key)


def keypair_from_secret_key(secret_key: bytes) -> Keypair:
    """
    Rebuild a keypair from a 64-byte Solana secret key.

    Raises:
        InvalidKeyLength: If secret_key is not 64 bytes
        InvalidKeyFormat: If the public half does not match the seed half
    """
    if len(secret_key) != SECRET_KEY_LENGTH:
        raise InvalidKeyLength(len(secret_key), SECRET_KEY_LENGTH)

    keypair = keypair_from_seed(secret_key[:SEED_LENGTH])
    if not hmac.compare_digest(keypair.public_key, bytes(secret_key[SEED_LENGTH:])):
        raise InvalidKeyFormat("Invalid private key: public key does not match secret key")
    return keypair
