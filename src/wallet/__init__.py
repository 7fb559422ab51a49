"""
Wallet package - Credential lifecycle for the OpenClaw Solana wallet.

Contains:
- seed: BIP-39 mnemonic generation and validation
- hd: SLIP-10 ed25519 derivation and keypairs
- encoding: base58 / hex key encodings
- crypto: PBKDF2 + AES-256-GCM key encryption
- lifecycle: create / import / hardware setup paths
- WalletStore: keystore file persistence

Importing this package requires the crypto backend; check it with
services.backend.check_crypto_backend() first.
"""

from .seed import (
    generate_mnemonic,
    validate_mnemonic,
    mnemonic_problem,
    mnemonic_to_seed,
    normalize_phrase,
)
from .hd import (
    SOLANA_DERIVATION_PATH,
    DerivedKey,
    Keypair,
    derive_path,
    keypair_from_seed,
    keypair_from_secret_key,
)
from .encoding import (
    encode_base58,
    decode_base58,
    encode_hex,
    decode_hex,
    decode_secret_key,
)
from .crypto import (
    EncryptedKey,
    encrypt_key,
    decrypt_key,
    PBKDF2_ITERATIONS,
)
from .lifecycle import (
    WALLET_TYPE_LOCAL,
    WALLET_TYPE_IMPORTED,
    WALLET_TYPE_HARDWARE,
    MIN_PASSWORD_LENGTH,
    CreateWallet,
    ImportPrivateKey,
    ImportSeedPhrase,
    ConnectHardware,
    WalletIntent,
    WalletRecord,
    KeystoreEntry,
    build_wallet,
    secure_wallet,
    unlock_entry,
    reencrypt_entry,
    provision_wallet,
    check_password,
)
from .manager import WalletStore

__all__ = [
    # Seed phrases
    "generate_mnemonic",
    "validate_mnemonic",
    "mnemonic_problem",
    "mnemonic_to_seed",
    "normalize_phrase",
    # Derivation
    "SOLANA_DERIVATION_PATH",
    "DerivedKey",
    "Keypair",
    "derive_path",
    "keypair_from_seed",
    "keypair_from_secret_key",
    # Encoding
    "encode_base58",
    "decode_base58",
    "encode_hex",
    "decode_hex",
    "decode_secret_key",
    # Crypto
    "EncryptedKey",
    "encrypt_key",
    "decrypt_key",
    "PBKDF2_ITERATIONS",
    # Lifecycle
    "WALLET_TYPE_LOCAL",
    "WALLET_TYPE_IMPORTED",
    "WALLET_TYPE_HARDWARE",
    "MIN_PASSWORD_LENGTH",
    "CreateWallet",
    "ImportPrivateKey",
    "ImportSeedPhrase",
    "ConnectHardware",
    "WalletIntent",
    "WalletRecord",
    "KeystoreEntry",
    "build_wallet",
    "secure_wallet",
    "unlock_entry",
    "reencrypt_entry",
    "provision_wallet",
    "check_password",
    # Store
    "WalletStore",
]
