"""Cryptographic primitives (passphrase-derived key/nonce + AES-256-GCM-SIV).

Key and nonce are both derived from the passphrase alone; nothing is stored
next to the ciphertext. Reusing a passphrase therefore reuses the (key, nonce)
pair, which GCM-SIV tolerates by revealing only plaintext equality.
"""
from __future__ import annotations
from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCMSIV
from config.settings import KEY_LENGTH, NONCE_LENGTH, TAG_LENGTH, NONCE_TAG, KEY_TAG

class CryptoError(Exception):
	pass

class AuthenticationError(CryptoError):
	pass

class PassCrypto:
	def __init__(self, algorithm: hashes.HashAlgorithm | None = None):
		self._algorithm = algorithm or hashes.SHA256()
		if self._algorithm.digest_size < KEY_LENGTH:
			raise CryptoError(f"Digest {self._algorithm.name} too short for a {KEY_LENGTH}-byte key")

	def _digest(self, passphrase: str, tag: bytes) -> bytes:
		h = hashes.Hash(self._algorithm)
		h.update(passphrase.encode('utf-8'))
		h.update(tag)
		return h.finalize()

	def derive_nonce(self, passphrase: str) -> bytes:
		return self._digest(passphrase, NONCE_TAG)[:NONCE_LENGTH]

	def derive_key(self, passphrase: str) -> bytes:
		return self._digest(passphrase, KEY_TAG)[:KEY_LENGTH]

	def _cipher(self, passphrase: str) -> AESGCMSIV:
		try:
			return AESGCMSIV(self.derive_key(passphrase))
		except UnsupportedAlgorithm as e:
			raise CryptoError(f"AES-GCM-SIV unavailable: {e}") from e

	def encrypt(self, data: bytes, passphrase: str) -> bytes:
		"""Encrypt `data`; the returned blob is ciphertext followed by the tag."""
		cipher = self._cipher(passphrase)
		try:
			return cipher.encrypt(self.derive_nonce(passphrase), data, None)
		except (ValueError, OverflowError) as e:
			raise CryptoError(f"Encrypt failed: {e}") from e

	def decrypt(self, blob: bytes, passphrase: str) -> bytes:
		"""Verify and decrypt `blob`.

		Any verification failure, wrong passphrase or tampered data alike, is
		reported as AuthenticationError without further detail.
		"""
		if len(blob) < TAG_LENGTH:
			raise AuthenticationError("Authentication failed")
		cipher = self._cipher(passphrase)
		try:
			return cipher.decrypt(self.derive_nonce(passphrase), blob, None)
		except InvalidTag:
			raise AuthenticationError("Authentication failed") from None
