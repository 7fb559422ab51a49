"""
Key encoding - base58 and hex text forms of raw key bytes.

Base58 is the form Solana wallets export (Phantom, solana-keygen pubkeys);
hex is accepted as a fallback for copy/paste imports.
"""

import base58

from exceptions import InvalidEncoding, InvalidKeyFormat, InvalidKeyLength
from .hd import SECRET_KEY_LENGTH


def encode_base58(data: bytes) -> str:
    """Encode bytes as a base58 (Bitcoin alphabet) string."""
    return base58.b58encode(bytes(data)).decode("ascii")


def decode_base58(text: str) -> bytes:
    """
    Decode a base58 string.

    Raises:
        InvalidEncoding: If the text is empty or has characters outside
            the base58 alphabet
    """
    text = text.strip()
    if not text:
        raise InvalidEncoding("Empty base58 string")
    try:
        return base58.b58decode(text)
    except ValueError as e:
        raise InvalidEncoding(f"Invalid base58: {e}") from e


def encode_hex(data: bytes) -> str:
    """Encode bytes as lowercase hex."""
    return bytes(data).hex()


def decode_hex(text: str) -> bytes:
    """
    Decode a hex string (0x prefix optional).

    Raises:
        InvalidEncoding: If the text is empty, odd-length or not hex
    """
    text = text.strip()
    if text.startswith("0x") or text.startswith("0X"):
        text = text[2:]
    if not text:
        raise InvalidEncoding("Empty hex string")
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise InvalidEncoding(f"Invalid hex: {e}") from e


def decode_secret_key(text: str, expected_length: int = SECRET_KEY_LENGTH) -> bytes:
    """
    Decode a user-supplied private key, base58 first, then hex.

    Raises:
        InvalidKeyFormat: If the text is neither base58 nor hex
        InvalidKeyLength: If it decodes, but not to expected_length bytes
    """
    decoded = []
    for decoder in (decode_base58, decode_hex):
        try:
            raw = decoder(text)
        except InvalidEncoding:
            continue
        if len(raw) == expected_length:
            return raw
        decoded.append(raw)

    if not decoded:
        raise InvalidKeyFormat("Invalid private key format. Expected base58 or hex.")
    raise InvalidKeyLength(len(decoded[0]), expected_length)
