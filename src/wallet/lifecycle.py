"""
Wallet Lifecycle - Create, import and secure the setup wallet.

Every setup path is one WalletIntent:
- CreateWallet: fresh 12-word mnemonic on the Solana path
- ImportPrivateKey: base58 or hex 64-byte secret key
- ImportSeedPhrase: existing mnemonic on the Solana path
- ConnectHardware: public key only, nothing to encrypt

build_wallet() turns an intent into a WalletRecord; secure_wallet() turns
the record into the KeystoreEntry that is written to disk and consumes
the record's secret.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from exceptions import InvalidKeyFormat, InvalidKeyLength, KeystoreError
from networks import DEFAULT_NETWORK, is_valid_network
from utils import MIN_PASSWORD_LENGTH
from .crypto import EncryptedKey, encrypt_key, decrypt_key
from .encoding import decode_base58, decode_secret_key, encode_base58, encode_hex
from .hd import (
    SOLANA_DERIVATION_PATH,
    PUBLIC_KEY_LENGTH,
    Keypair,
    derive_path,
    keypair_from_secret_key,
    keypair_from_seed,
)
from .seed import DEFAULT_STRENGTH, generate_mnemonic, mnemonic_to_seed

logger = logging.getLogger(__name__)


WALLET_TYPE_LOCAL = "local"
WALLET_TYPE_IMPORTED = "imported"
WALLET_TYPE_HARDWARE = "hardware"
WALLET_TYPES = (WALLET_TYPE_LOCAL, WALLET_TYPE_IMPORTED, WALLET_TYPE_HARDWARE)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with a Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# ============================================
# Intents
# ============================================

@dataclass(frozen=True)
class CreateWallet:
    """Generate a new wallet from a fresh mnemonic."""
    strength: int = DEFAULT_STRENGTH


@dataclass(frozen=True)
class ImportPrivateKey:
    """Import a base58 or hex encoded 64-byte secret key."""
    private_key: str = field(repr=False)


@dataclass(frozen=True)
class ImportSeedPhrase:
    """Restore a wallet from an existing mnemonic."""
    phrase: str = field(repr=False)


@dataclass(frozen=True)
class ConnectHardware:
    """Record a hardware wallet by its public key."""
    public_key: str


WalletIntent = Union[CreateWallet, ImportPrivateKey, ImportSeedPhrase, ConnectHardware]


# ============================================
# Records
# ============================================

@dataclass
class WalletRecord:
    """
    In-memory result of a setup path.

    secret_key is a bytearray so discard_secret() can zero it. The
    mnemonic is only set for freshly created wallets and can be read
    exactly once through reveal_mnemonic().
    """
    public_key: str
    wallet_type: str
    network: str = DEFAULT_NETWORK
    secret_key: Optional[bytearray] = field(default=None, repr=False)
    mnemonic: Optional[str] = field(default=None, repr=False)

    @property
    def has_secret(self) -> bool:
        return self.secret_key is not None

    def secret_key_hex(self) -> str:
        if self.secret_key is None:
            raise ValueError("Wallet secret has already been consumed")
        return encode_hex(self.secret_key)

    def reveal_mnemonic(self) -> Optional[str]:
        """Return the mnemonic once, then drop it."""
        phrase, self.mnemonic = self.mnemonic, None
        return phrase

    def discard_secret(self) -> None:
        """Zero and drop the raw secret key."""
        if self.secret_key is not None:
            for i in range(len(self.secret_key)):
                self.secret_key[i] = 0
            self.secret_key = None


@dataclass
class KeystoreEntry:
    """The persisted wallet: public metadata plus the encrypted key."""
    public_key: str
    network: str
    created_at: str
    wallet_type: str
    encrypted_key: Optional[EncryptedKey] = None

    @property
    def is_hardware(self) -> bool:
        return self.wallet_type == WALLET_TYPE_HARDWARE

    def to_dict(self) -> dict:
        return {
            "publicKey": self.public_key,
            "network": self.network,
            "createdAt": self.created_at,
            "type": self.wallet_type,
            "encryptedKey": self.encrypted_key.to_dict() if self.encrypted_key else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "KeystoreEntry":
        """
        Parse a keystore file's JSON.

        Raises:
            KeystoreError: If required fields are missing or inconsistent
        """
        if not isinstance(data, dict):
            raise KeystoreError("Invalid keystore: expected a JSON object")

        public_key = data.get("publicKey")
        if not isinstance(public_key, str) or not public_key:
            raise KeystoreError("Invalid keystore: missing 'publicKey' field")

        wallet_type = data.get("type", WALLET_TYPE_LOCAL)
        if wallet_type not in WALLET_TYPES:
            raise KeystoreError(f"Invalid keystore: unknown wallet type '{wallet_type}'")

        raw_encrypted = data.get("encryptedKey")
        encrypted_key = EncryptedKey.from_dict(raw_encrypted) if raw_encrypted else None
        if encrypted_key is None and wallet_type != WALLET_TYPE_HARDWARE:
            raise KeystoreError("Invalid keystore: missing 'encryptedKey' field")

        return cls(
            public_key=public_key,
            network=data.get("network", DEFAULT_NETWORK),
            created_at=data.get("createdAt", ""),
            wallet_type=wallet_type,
            encrypted_key=encrypted_key,
        )

    def summary(self) -> dict:
        """Public metadata for the setup config (no key material)."""
        return {
            "publicKey": self.public_key,
            "network": self.network,
            "createdAt": self.created_at,
            "type": self.wallet_type,
        }


# ============================================
# Building Records
# ============================================

def keypair_from_phrase(phrase: str) -> Keypair:
    """Derive the account-0 Solana keypair for a mnemonic."""
    seed = mnemonic_to_seed(phrase)
    derived = derive_path(SOLANA_DERIVATION_PATH, seed.hex())
    return keypair_from_seed(derived.key)


def validate_public_key(text: str) -> str:
    """
    Check that text is a base58 ed25519 public key.

    Raises:
        InvalidKeyFormat: If it is not base58
        InvalidKeyLength: If it does not decode to 32 bytes
    """
    text = text.strip()
    try:
        raw = decode_base58(text)
    except ValueError as e:
        raise InvalidKeyFormat("Invalid public key: expected base58") from e
    if len(raw) != PUBLIC_KEY_LENGTH:
        raise InvalidKeyLength(len(raw), PUBLIC_KEY_LENGTH)
    return text


def _record_from_keypair(keypair: Keypair, wallet_type: str, network: str,
                         mnemonic: Optional[str] = None) -> WalletRecord:
    return WalletRecord(
        public_key=encode_base58(keypair.public_key),
        wallet_type=wallet_type,
        network=network,
        secret_key=bytearray(keypair.secret_key),
        mnemonic=mnemonic,
    )


def build_wallet(intent: WalletIntent, network: str = DEFAULT_NETWORK) -> WalletRecord:
    """
    Run one setup path and return the resulting wallet record.

    Raises:
        InvalidMnemonic, InvalidKeyFormat, InvalidKeyLength: Bad user input
        EntropySourceFailure: If a new mnemonic cannot be generated
    """
    if not is_valid_network(network):
        raise ValueError(f"Unknown network: {network}")

    if isinstance(intent, CreateWallet):
        phrase = generate_mnemonic(intent.strength)
        record = _record_from_keypair(
            keypair_from_phrase(phrase), WALLET_TYPE_LOCAL, network, mnemonic=phrase
        )
    elif isinstance(intent, ImportPrivateKey):
        secret = decode_secret_key(intent.private_key)
        record = _record_from_keypair(
            keypair_from_secret_key(secret), WALLET_TYPE_IMPORTED, network
        )
    elif isinstance(intent, ImportSeedPhrase):
        record = _record_from_keypair(
            keypair_from_phrase(intent.phrase), WALLET_TYPE_IMPORTED, network
        )
    elif isinstance(intent, ConnectHardware):
        record = WalletRecord(
            public_key=validate_public_key(intent.public_key),
            wallet_type=WALLET_TYPE_HARDWARE,
            network=network,
        )
    else:
        raise TypeError(f"Unknown wallet intent: {intent!r}")

    logger.info("Built %s wallet %s on %s", record.wallet_type, record.public_key, network)
    return record


# ============================================
# Securing Records
# ============================================

def check_password(password: str) -> None:
    """Raise ValueError if a wallet password is too short."""
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def secure_wallet(record: WalletRecord, password: Optional[str] = None) -> KeystoreEntry:
    """
    Encrypt a record's secret key and produce its keystore entry.

    The record's secret is discarded whether or not encryption succeeds.
    Hardware records carry no secret and are stored with encrypted_key=None.
    """
    if record.wallet_type == WALLET_TYPE_HARDWARE:
        encrypted = None
    else:
        try:
            check_password(password)
            encrypted = encrypt_key(record.secret_key_hex(), password)
        finally:
            record.discard_secret()

    return KeystoreEntry(
        public_key=record.public_key,
        network=record.network,
        created_at=utc_timestamp(),
        wallet_type=record.wallet_type,
        encrypted_key=encrypted,
    )


def unlock_entry(entry: KeystoreEntry, password: str) -> Keypair:
    """
    Decrypt a keystore entry back into its keypair.

    Raises:
        WrongPasswordOrCorrupted: If decryption fails
        KeystoreError: If the entry is a hardware wallet or its public key
            does not match the decrypted secret
    """
    if entry.encrypted_key is None:
        raise KeystoreError("Hardware wallets have no local key to unlock")

    secret = bytes.fromhex(decrypt_key(entry.encrypted_key, password))
    keypair = keypair_from_secret_key(secret)
    if encode_base58(keypair.public_key) != entry.public_key:
        raise KeystoreError("Keystore public key does not match the encrypted key")
    return keypair


def reencrypt_entry(entry: KeystoreEntry, old_password: str, new_password: str) -> KeystoreEntry:
    """
    Change a keystore's password: decrypt with the old, then encrypt with the new.

    Returns a new entry; the original is left untouched.
    """
    check_password(new_password)
    keypair = unlock_entry(entry, old_password)
    record = WalletRecord(
        public_key=entry.public_key,
        wallet_type=entry.wallet_type,
        network=entry.network,
        secret_key=bytearray(keypair.secret_key),
    )
    try:
        encrypted = encrypt_key(record.secret_key_hex(), new_password)
    finally:
        record.discard_secret()

    return KeystoreEntry(
        public_key=entry.public_key,
        network=entry.network,
        created_at=entry.created_at,
        wallet_type=entry.wallet_type,
        encrypted_key=encrypted,
    )


def provision_wallet(
    record: WalletRecord,
    collect_password: Callable[[], str],
    persist: Callable[[KeystoreEntry], None],
    show_mnemonic: Optional[Callable[[str], None]] = None,
) -> KeystoreEntry:
    """
    Encrypt and persist a built wallet record.

    This is the shared tail of every setup path. collect_password is called
    exactly once, and only when there is a secret to protect. The mnemonic
    of a created wallet is handed to show_mnemonic after the keystore has
    been persisted, then dropped.
    """
    try:
        password = collect_password() if record.has_secret else None
        entry = secure_wallet(record, password)
        persist(entry)
    finally:
        record.discard_secret()

    phrase = record.reveal_mnemonic()
    if phrase and show_mnemonic is not None:
        show_mnemonic(phrase)
    del phrase

    return entry
