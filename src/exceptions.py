"""Custom exceptions for OpenClaw Setup."""


# =============================================================================
# Wizard Exceptions
# =============================================================================


class SetupError(Exception):
    """Base exception for setup wizard errors."""

    pass


class DependencyError(SetupError):
    """Raised when a required system dependency (node, npm) is missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            f"Missing required dependencies: {', '.join(self.missing)}"
        )


class InstallError(SetupError):
    """Raised when installing the OpenClaw CLI fails."""

    pass


class SetupCancelled(SetupError):
    """Raised when the user declines to start the wizard."""

    pass


# =============================================================================
# Wallet Exceptions
# =============================================================================


class WalletError(Exception):
    """Base exception for wallet credential errors."""

    pass


class InvalidMnemonic(WalletError, ValueError):
    """Raised when a seed phrase fails wordlist or checksum validation."""

    pass


class InvalidEncoding(WalletError, ValueError):
    """Raised when text is not valid base58 or hex."""

    pass


class InvalidKeyFormat(WalletError, ValueError):
    """Raised when a private key is neither base58 nor hex, or is inconsistent."""

    pass


class InvalidKeyLength(WalletError, ValueError):
    """Raised when a decoded key has the wrong number of bytes.

    Attributes:
        actual: Decoded length in bytes.
        expected: Length the signature scheme requires.
    """

    def __init__(self, actual: int, expected: int) -> None:
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"Invalid key length: expected {expected} bytes, got {actual}"
        )


class WrongPasswordOrCorrupted(WalletError):
    """Raised when authenticated decryption fails.

    A wrong password and a tampered keystore are indistinguishable.
    """

    def __init__(self, message: str = "Wrong password or corrupted keystore") -> None:
        super().__init__(message)


class EntropySourceFailure(WalletError):
    """Raised when the OS random source cannot provide bytes."""

    pass


class MissingDependency(WalletError):
    """Raised when the cryptographic backend cannot be loaded.

    Attributes:
        missing: Distribution names that failed to import or self-test.
        reason: Underlying error message, if any.
    """

    def __init__(self, missing: list[str], reason: str = "") -> None:
        self.missing = list(missing)
        self.reason = reason
        message = (
            f"Cryptographic backend unavailable ({', '.join(self.missing)}). "
            f"Install it with: {self.install_hint}"
        )
        if reason:
            message = f"{message} [{reason}]"
        super().__init__(message)

    @property
    def install_hint(self) -> str:
        return f"pip install {' '.join(self.missing)}"


class KeystoreError(WalletError):
    """Raised when a keystore file is malformed or inconsistent."""

    pass


# Errors the wizard recovers from by asking the same question again
USER_CORRECTABLE_ERRORS = (
    InvalidMnemonic,
    InvalidEncoding,
    InvalidKeyFormat,
    InvalidKeyLength,
)
