"""Key derivation and authenticated encryption primitives.

Each on-disk format version pins one KeyDerivation and one Cipher (see
`fileformat.PROFILES`); the classes here never pick parameters on their own.
"""
from __future__ import annotations
import secrets
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from cryptography.hazmat.primitives.ciphers import Cipher as _HazmatCipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from config.settings import (
	SALT_LENGTH, KEY_LENGTH, AUTH_TAG_LENGTH, LEGACY_IV_LENGTH, NONCE_LENGTH,
	PBKDF2_ITERATIONS, SCRYPT_N, SCRYPT_R, SCRYPT_P
)
from .errors import AuthenticationError, EncryptError
from .secure import SecureBuffer


def generate_salt() -> bytes:
	try:
		return secrets.token_bytes(SALT_LENGTH)
	except (OSError, NotImplementedError) as e:
		raise EncryptError(f'Entropy source unavailable: {e}') from e


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

class KeyDerivation:
	name = ''

	def _kdf(self, salt: bytes):
		raise NotImplementedError

	def derive(self, passphrase: SecureBuffer, salt: bytes) -> SecureBuffer:
		"""Deterministic: the same passphrase and salt always give the same key."""
		if len(salt) != SALT_LENGTH:
			raise ValueError(f'Salt must be {SALT_LENGTH} bytes')
		return SecureBuffer(self._kdf(salt).derive(passphrase.reveal()))

	def __repr__(self) -> str:
		return f'{type(self).__name__}()'


class Pbkdf2Derivation(KeyDerivation):
	name = 'pbkdf2-sha256'

	def __init__(self, iterations: int = PBKDF2_ITERATIONS):
		self.iterations = iterations

	def _kdf(self, salt: bytes):
		return PBKDF2HMAC(algorithm=hashes.SHA256(), length=KEY_LENGTH, salt=salt, iterations=self.iterations)


class ScryptDerivation(KeyDerivation):
	name = 'scrypt'

	def __init__(self, n: int = SCRYPT_N, r: int = SCRYPT_R, p: int = SCRYPT_P):
		self.n, self.r, self.p = n, r, p

	def _kdf(self, salt: bytes):
		return Scrypt(salt=salt, length=KEY_LENGTH, n=self.n, r=self.r, p=self.p)


# ---------------------------------------------------------------------------
# Authenticated encryption
# ---------------------------------------------------------------------------

class Cipher:
	name = ''
	nonce_length = 0
	tag_length = AUTH_TAG_LENGTH

	def generate_nonce(self) -> bytes:
		try:
			return secrets.token_bytes(self.nonce_length)
		except (OSError, NotImplementedError) as e:
			raise EncryptError(f'Entropy source unavailable: {e}') from e

	def _check(self, key: SecureBuffer, nonce: bytes):
		if len(key) != KEY_LENGTH: raise ValueError('Bad key length')
		if len(nonce) != self.nonce_length: raise ValueError('Bad nonce length')

	def encrypt(self, key: SecureBuffer, nonce: bytes, plaintext: bytes, associated_data: bytes | None = None) -> bytes:
		raise NotImplementedError

	def decrypt(self, key: SecureBuffer, nonce: bytes, blob: bytes, associated_data: bytes | None = None) -> bytes:
		raise NotImplementedError


class LegacyGcmCipher(Cipher):
	"""AES-256-GCM with a 16-byte IV via the hazmat Cipher API; formats 1 and 2."""
	name = 'aes256gcm-iv16'
	nonce_length = LEGACY_IV_LENGTH

	def encrypt(self, key, nonce, plaintext, associated_data=None):
		self._check(key, nonce)
		try:
			enc = _HazmatCipher(algorithms.AES(key.reveal()), modes.GCM(nonce)).encryptor()
			if associated_data:
				enc.authenticate_additional_data(associated_data)
			return enc.update(plaintext) + enc.finalize() + enc.tag
		except (ValueError, OverflowError) as e:
			raise EncryptError(f'Encryption failed: {e}') from e

	def decrypt(self, key, nonce, blob, associated_data=None):
		self._check(key, nonce)
		if len(blob) < self.tag_length:
			raise AuthenticationError()
		ct, tag = blob[:-self.tag_length], blob[-self.tag_length:]
		dec = _HazmatCipher(algorithms.AES(key.reveal()), modes.GCM(nonce, tag)).decryptor()
		if associated_data:
			dec.authenticate_additional_data(associated_data)
		try:
			return dec.update(ct) + dec.finalize()
		except InvalidTag:
			raise AuthenticationError() from None


class AeadCipher(Cipher):
	"""AES-256-GCM through the one-shot AEAD API with a 12-byte nonce; format 3."""
	name = 'aes256gcm'
	nonce_length = NONCE_LENGTH

	def encrypt(self, key, nonce, plaintext, associated_data=None):
		self._check(key, nonce)
		try:
			return AESGCM(key.reveal()).encrypt(nonce, plaintext, associated_data)
		except (ValueError, OverflowError) as e:
			raise EncryptError(f'Encryption failed: {e}') from e

	def decrypt(self, key, nonce, blob, associated_data=None):
		self._check(key, nonce)
		if len(blob) < self.tag_length:
			raise AuthenticationError()
		try:
			return AESGCM(key.reveal()).decrypt(nonce, blob, associated_data)
		except InvalidTag:
			raise AuthenticationError() from None
