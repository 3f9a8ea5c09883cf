"""On-disk envelope: [version 1B][salt 32B][nonce][ciphertext + tag].

The version byte selects a Profile, which fixes the key derivation, the
cipher (and therefore the nonce length) and whether the header is bound
into the ciphertext as associated data.
"""
from __future__ import annotations
from dataclasses import dataclass
from config.settings import SALT_LENGTH, AUTH_TAG_LENGTH
from .crypto import KeyDerivation, Cipher, Pbkdf2Derivation, ScryptDerivation, LegacyGcmCipher, AeadCipher
from .errors import FormatError, UnsupportedFormatError

CURRENT_VERSION = 3


@dataclass(frozen=True)
class Profile:
	version: int
	kdf: KeyDerivation
	cipher: Cipher
	bind_header: bool


PROFILES = {
	1: Profile(1, Pbkdf2Derivation(), LegacyGcmCipher(), bind_header=False),
	2: Profile(2, Pbkdf2Derivation(), LegacyGcmCipher(), bind_header=False),
	3: Profile(3, ScryptDerivation(), AeadCipher(), bind_header=True),
}


def profile_for(version: int) -> Profile:
	try:
		return PROFILES[version]
	except KeyError:
		raise UnsupportedFormatError(version) from None


@dataclass(frozen=True)
class Envelope:
	version: int
	salt: bytes
	nonce: bytes
	ciphertext: bytes

	@property
	def profile(self) -> Profile:
		return profile_for(self.version)

	@property
	def header(self) -> bytes:
		return bytes([self.version]) + self.salt

	@property
	def associated_data(self) -> bytes | None:
		return self.header if self.profile.bind_header else None


def peek_version(data: bytes) -> int:
	if not data:
		raise FormatError('Empty password file')
	return data[0]


def unpack(data: bytes) -> Envelope:
	"""Split file bytes into an Envelope; raises FormatError on unknown versions or short input."""
	version = peek_version(data)
	profile = profile_for(version)
	nonce_end = 1 + SALT_LENGTH + profile.cipher.nonce_length
	if len(data) < nonce_end + AUTH_TAG_LENGTH:
		raise FormatError(f'Password file too short for format version {version}')
	return Envelope(version, bytes(data[1:1 + SALT_LENGTH]), bytes(data[1 + SALT_LENGTH:nonce_end]), bytes(data[nonce_end:]))


def pack(envelope: Envelope) -> bytes:
	profile = envelope.profile
	if len(envelope.salt) != SALT_LENGTH or len(envelope.nonce) != profile.cipher.nonce_length:
		raise ValueError('Envelope fields have the wrong length')
	return envelope.header + envelope.nonce + envelope.ciphertext
