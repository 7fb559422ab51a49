"""Tests for SLIP-10 ed25519 derivation."""

import pytest

from exceptions import InvalidKeyFormat, InvalidKeyLength
from wallet.hd import (
    SOLANA_DERIVATION_PATH,
    derive_path,
    master_key,
    keypair_from_secret_key,
    keypair_from_seed,
    parse_path,
)


# SLIP-0010 test vector 1 for ed25519
VECTOR_SEED = "000102030405060708090a0b0c0d0e0f"


class TestDerivePath:
    """Tests against the published SLIP-10 vectors."""

    def test_vector_master_public_key(self) -> None:
        node = master_key(bytes.fromhex(VECTOR_SEED))
        assert node.key.hex() == "2b4be7f19ee27bbf30c667b642d5f4aa69fd169872f8fc3059c08ebae2eb19e7"
        assert node.chain_code.hex() == "90046a93de5380a72b5e45010748567d5ea02bbf6522f979e05c0d8d8ca9fffb"
        assert keypair_from_seed(node.key).public_key.hex() == (
            "a4b2856bfec510abab89753fac1ac0e1112364e7d250545963f135f2a33188ed"
        )

    def test_vector_first_hardened_child(self) -> None:
        node = derive_path("m/0'", VECTOR_SEED)
        assert node.key.hex() == "68e0fe46dfb67e368c75379acec591dad19df3cde26e63b93a8e704f1dade7a3"
        assert node.chain_code.hex() == "8b59aa11380b624e81507a27fedda59fea6d0b779a778918a2fd3590e16e9c69"
        assert keypair_from_seed(node.key).public_key.hex() == (
            "8c8a13df77a28f3445213a0f432fde644acaa215fc72dcdf300d5efaa85d350c"
        )

    def test_deterministic(self) -> None:
        seed_hex = "ab" * 64
        first = derive_path(SOLANA_DERIVATION_PATH, seed_hex)
        second = derive_path(SOLANA_DERIVATION_PATH, seed_hex)
        assert first == second

    def test_different_paths_differ(self) -> None:
        seed_hex = "ab" * 64
        assert derive_path("m/44'/501'/0'/0'", seed_hex) != derive_path("m/44'/501'/1'/0'", seed_hex)


class TestParsePath:
    """Tests for derivation path parsing."""

    def test_solana_path(self) -> None:
        assert parse_path(SOLANA_DERIVATION_PATH) == [44, 501, 0, 0]

    @pytest.mark.parametrize("path", ["m", "m/44'/501/0'", "44'/501'", "m/44'/abc'", ""])
    def test_rejects_malformed_or_unhardened(self, path: str) -> None:
        with pytest.raises(ValueError):
            parse_path(path)

    def test_rejects_out_of_range_segment(self) -> None:
        with pytest.raises(ValueError):
            parse_path("m/2147483648'")


class TestKeypairs:
    """Tests for keypair construction."""

    def test_secret_key_layout(self) -> None:
        keypair = keypair_from_seed(b"\x07" * 32)
        assert len(keypair.secret_key) == 64
        assert keypair.secret_key[:32] == b"\x07" * 32
        assert keypair.secret_key[32:] == keypair.public_key
        assert keypair.seed == b"\x07" * 32

    def test_round_trip_through_secret_key(self) -> None:
        keypair = keypair_from_seed(b"\x07" * 32)
        assert keypair_from_secret_key(keypair.secret_key) == keypair

    def test_seed_length_checked(self) -> None:
        with pytest.raises(InvalidKeyLength) as exc_info:
            keypair_from_seed(b"\x07" * 31)
        assert exc_info.value.actual == 31
        assert exc_info.value.expected == 32

    def test_secret_key_length_checked(self) -> None:
        with pytest.raises(InvalidKeyLength):
            keypair_from_secret_key(b"\x07" * 63)

    def test_mismatched_public_half(self) -> None:
        keypair = keypair_from_seed(b"\x07" * 32)
        forged = keypair.seed + bytes(32)
        with pytest.raises(InvalidKeyFormat):
            keypair_from_secret_key(forged)

    def test_repr_hides_secret(self) -> None:
        keypair = keypair_from_seed(b"\x07" * 32)
        assert keypair.secret_key.hex() not in repr(keypair)
