"""
Seed phrases - BIP-39 mnemonic generation, validation and seed derivation.

The phrase is the only recovery path for a wallet, so nothing here logs,
caches or writes it.
"""

import secrets
from typing import Optional

from mnemonic import Mnemonic

from exceptions import EntropySourceFailure, InvalidMnemonic


WORDLIST_LANGUAGE = "english"

# Entropy sizes BIP-39 allows (12, 15, 18, 21, 24 words)
VALID_STRENGTHS = (128, 160, 192, 224, 256)
VALID_WORD_COUNTS = (12, 15, 18, 21, 24)
DEFAULT_STRENGTH = 128

_engine: Optional[Mnemonic] = None


def _mnemo() -> Mnemonic:
    global _engine
    if _engine is None:
        _engine = Mnemonic(WORDLIST_LANGUAGE)
    return _engine


def normalize_phrase(phrase: str) -> str:
    """Lower-case a phrase and collapse whitespace to single spaces."""
    return " ".join(phrase.strip().lower().split())


def generate_mnemonic(strength: int = DEFAULT_STRENGTH) -> str:
    """
    Generate a fresh, checksum-valid mnemonic.

    Args:
        strength: Entropy bits (128 gives 12 words, 256 gives 24)

    Raises:
        ValueError: If strength is not a BIP-39 size
        EntropySourceFailure: If the OS random source fails
    """
    if strength not in VALID_STRENGTHS:
        raise ValueError(f"strength must be one of {VALID_STRENGTHS}")

    try:
        entropy = secrets.token_bytes(strength // 8)
    except (OSError, NotImplementedError) as e:
        raise EntropySourceFailure(f"Secure random source unavailable: {e}") from e

    return _mnemo().to_mnemonic(entropy)


def mnemonic_problem(phrase: str) -> Optional[str]:
    """
    Explain why a phrase is not a valid mnemonic.

    Returns None for a valid phrase, otherwise a user-facing reason.
    """
    words = normalize_phrase(phrase).split()
    if len(words) not in VALID_WORD_COUNTS:
        return f"Expected 12, 15, 18, 21 or 24 words, got {len(words)}"

    wordlist = set(_mnemo().wordlist)
    unknown = [w for w in words if w not in wordlist]
    if unknown:
        return f"Unknown word(s): {', '.join(unknown)}"

    if not _mnemo().check(" ".join(words)):
        return "Checksum mismatch. Check the word order for typos."

    return None


def validate_mnemonic(phrase: str) -> bool:
    """Check wordlist membership of every word and the checksum."""
    return mnemonic_problem(phrase) is None


def mnemonic_to_seed(phrase: str) -> bytes:
    """
    Derive the 64-byte BIP-39 seed (empty passphrase).

    Raises:
        InvalidMnemonic: If the phrase does not validate
    """
    problem = mnemonic_problem(phrase)
    if problem:
        raise InvalidMnemonic(f"Invalid seed phrase: {problem}")

    return Mnemonic.to_seed(normalize_phrase(phrase), passphrase="")
