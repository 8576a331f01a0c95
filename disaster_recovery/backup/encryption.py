"""Authenticated encryption of backup payloads.

Payloads are sealed with AES-256-GCM. Every encryption draws a fresh 12-byte
nonce which is stored in front of the ciphertext, so an encrypted file is
``nonce || ciphertext || tag``. Tampering with any byte makes decryption fail
instead of yielding garbage.
"""

import os
from pathlib import Path
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .._utils import logger
from .errors import EncryptionError

NONCE_SIZE = 12
ENCRYPTED_SUFFIX = ".enc"


class BackupCipher:
    """Encrypt and decrypt backup payloads with a single symmetric key."""

    def __init__(self, key: Optional[Union[str, bytes]] = None):
        """Initialize cipher.

        Args:
            key: 32-byte key, raw or hex encoded. When omitted a random key is
                generated for this process, and anything encrypted with it can
                only be decrypted while the process lives.
        """
        if key is None:
            logger.warning(
                "No backup encryption key configured, generating an ephemeral key; "
                "set BACKUP_ENCRYPTION_KEY to keep encrypted backups restorable"
            )
            key = AESGCM.generate_key(bit_length=256)
        elif isinstance(key, str):
            key = bytes.fromhex(key)

        if len(key) != 32:
            raise ValueError(f"encryption key must be 32 bytes, got {len(key)}")

        self._aead = AESGCM(key)

    def encrypt(self, plaintext: bytes) -> bytes:
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aead.encrypt(nonce, plaintext, None)

    def decrypt(self, payload: bytes) -> bytes:
        if len(payload) < NONCE_SIZE:
            raise EncryptionError("encrypted payload is truncated")
        nonce, ciphertext = payload[:NONCE_SIZE], payload[NONCE_SIZE:]
        try:
            return self._aead.decrypt(nonce, ciphertext, None)
        except InvalidTag as exc:
            raise EncryptionError("encrypted payload failed authentication") from exc

    def encrypt_file(self, input_path: Path, output_path: Path) -> Path:
        """Encrypt a file into ``output_path``; the input is left untouched."""
        with open(input_path, "rb") as f:
            data = f.read()
        with open(output_path, "wb") as f:
            f.write(self.encrypt(data))
        return output_path

    def decrypt_file(self, input_path: Path, output_path: Path) -> Path:
        """Decrypt a file into ``output_path``; the input is left untouched."""
        with open(input_path, "rb") as f:
            data = f.read()
        with open(output_path, "wb") as f:
            f.write(self.decrypt(data))
        return output_path
