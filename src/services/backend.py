"""
Crypto backend check - verify the wallet's cryptographic libraries once.

The wallet package is only imported after this check passes. There is no
fallback cipher or signer: a broken backend stops wallet setup with
install instructions.
"""

import importlib
import logging
from typing import Optional

from exceptions import MissingDependency

logger = logging.getLogger(__name__)


# import name -> distribution name on PyPI
REQUIRED_MODULES = {
    "cryptography": "cryptography",
    "nacl": "PyNaCl",
    "base58": "base58",
    "mnemonic": "mnemonic",
}

_UNCHECKED = object()
_result = _UNCHECKED


def _self_test() -> None:
    """Exercise AES-256-GCM and ed25519 the way the wallet uses them."""
    from cryptography.hazmat.primitives.ciphers.aead import AESGCM
    from nacl.signing import SigningKey

    aesgcm = AESGCM(b"\x01" * 32)
    iv = b"\x02" * 16
    sample = b"openclaw-backend-check"
    if aesgcm.decrypt(iv, aesgcm.encrypt(iv, sample, None), None) != sample:
        raise RuntimeError("AES-256-GCM round trip failed")

    verify_key = SigningKey(b"\x03" * 32).verify_key
    if len(bytes(verify_key)) != 32:
        raise RuntimeError("ed25519 public key has unexpected length")


def check_crypto_backend(refresh: bool = False) -> Optional[MissingDependency]:
    """
    Check the crypto backend, caching the result.

    Returns:
        None if the backend works, otherwise the MissingDependency to report
    """
    global _result
    if _result is not _UNCHECKED and not refresh:
        return _result

    missing = []
    for module, dist in REQUIRED_MODULES.items():
        try:
            importlib.import_module(module)
        except ImportError:
            missing.append(dist)

    if missing:
        _result = MissingDependency(missing)
    else:
        try:
            _self_test()
            _result = None
        except Exception as e:
            _result = MissingDependency(["cryptography", "PyNaCl"], reason=str(e))

    if _result is None:
        logger.debug("Crypto backend available")
    else:
        logger.error("Crypto backend unavailable: %s", _result)
    return _result

