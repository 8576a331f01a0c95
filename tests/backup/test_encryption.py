"""Tests for backup payload encryption."""

import pytest

from disaster_recovery.backup.encryption import NONCE_SIZE, BackupCipher
from disaster_recovery.backup.errors import EncryptionError

KEY = "11" * 32


@pytest.mark.parametrize("payload", [b"", b"x", b"CREATE TABLE t (id int);" * 1000, bytes(range(256))])
def test_round_trip(payload):
    cipher = BackupCipher(KEY)
    assert cipher.decrypt(cipher.encrypt(payload)) == payload


def test_fresh_nonce_per_encryption():
    cipher = BackupCipher(KEY)
    first = cipher.encrypt(b"same payload")
    second = cipher.encrypt(b"same payload")

    assert first != second
    assert first[:NONCE_SIZE] != second[:NONCE_SIZE]


def test_tampered_payload_is_rejected():
    cipher = BackupCipher(KEY)
    sealed = bytearray(cipher.encrypt(b"database dump"))
    sealed[-1] ^= 0x01

    with pytest.raises(EncryptionError):
        cipher.decrypt(bytes(sealed))


def test_wrong_key_is_rejected():
    sealed = BackupCipher(KEY).encrypt(b"database dump")

    with pytest.raises(EncryptionError):
        BackupCipher("22" * 32).decrypt(sealed)


def test_truncated_payload_is_rejected():
    with pytest.raises(EncryptionError, match="truncated"):
        BackupCipher(KEY).decrypt(b"short")


def test_file_round_trip(tmp_path):
    cipher = BackupCipher(bytes.fromhex(KEY))
    source = tmp_path / "dump.sql"
    source.write_text("CREATE TABLE t (id int);")

    cipher.encrypt_file(source, tmp_path / "dump.sql.enc")
    cipher.decrypt_file(tmp_path / "dump.sql.enc", tmp_path / "dump.out")

    assert (tmp_path / "dump.sql.enc").read_bytes() != source.read_bytes()
    assert (tmp_path / "dump.out").read_text() == "CREATE TABLE t (id int);"


def test_ephemeral_key_when_none_configured():
    cipher = BackupCipher()
    assert cipher.decrypt(cipher.encrypt(b"payload")) == b"payload"


def test_invalid_key_length():
    with pytest.raises(ValueError, match="32 bytes"):
        BackupCipher("aa" * 16)
