"""
Wallet Manager - Keystore file persistence.

Setup keeps a single wallet: wallets/wallet.json. Creating or importing a
new wallet overwrites it wholesale.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from exceptions import KeystoreError
from utils import write_json_atomic
from .hd import Keypair
from .lifecycle import KeystoreEntry, reencrypt_entry, unlock_entry

logger = logging.getLogger(__name__)


WALLET_FILENAME = "wallet.json"


class WalletStore:
    """
    Reads and writes the encrypted wallet keystore.

    Only KeystoreEntry values are ever written, so raw key material has no
    path to disk.
    """

    def __init__(self, wallet_dir: str | Path):
        """
        Initialize wallet store.

        Args:
            wallet_dir: Directory holding the keystore file
        """
        self.wallet_dir = Path(wallet_dir)
        self.wallet_path = self.wallet_dir / WALLET_FILENAME

    def exists(self) -> bool:
        """Check if a keystore file exists."""
        return self.wallet_path.exists()

    def load(self) -> Optional[KeystoreEntry]:
        """
        Load the keystore entry, or None if there is no wallet yet.

        Raises:
            KeystoreError: If the file is not a valid keystore
        """
        if not self.wallet_path.exists():
            return None

        try:
            with open(self.wallet_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise KeystoreError(f"Invalid keystore JSON: {e}") from e

        return KeystoreEntry.from_dict(data)

    def save(self, entry: KeystoreEntry) -> Path:
        """Atomically replace the keystore file with entry."""
        if not isinstance(entry, KeystoreEntry):
            raise TypeError("Only KeystoreEntry values can be persisted")

        write_json_atomic(self.wallet_path, entry.to_dict(), secure=True)
        logger.info("Saved %s wallet %s to %s", entry.wallet_type, entry.public_key, self.wallet_path)
        return self.wallet_path

    def unlock(self, password: str) -> Keypair:
        """
        Decrypt the stored wallet.

        Raises:
            FileNotFoundError: If no wallet is stored
            WrongPasswordOrCorrupted: If the password is wrong
        """
        entry = self.load()
        if entry is None:
            raise FileNotFoundError(f"Wallet not found: {self.wallet_path}")
        return unlock_entry(entry, password)

    def change_password(self, old_password: str, new_password: str) -> KeystoreEntry:
        """
        Re-encrypt the stored wallet under a new password.

        The file is only replaced after the new entry is fully encrypted.
        """
        entry = self.load()
        if entry is None:
            raise FileNotFoundError(f"Wallet not found: {self.wallet_path}")

        updated = reencrypt_entry(entry, old_password, new_password)
        self.save(updated)
        logger.info("Changed password for wallet %s", updated.public_key)
        return updated

    def delete(self) -> bool:
        """
        Delete the keystore file.

        Returns:
            True if deleted, False if not found.
        """
        if self.wallet_path.exists():
            self.wallet_path.unlink()
            logger.info("Deleted wallet keystore %s", self.wallet_path)
            return True
        return False
