"""Format upgrades: open an older file and walk it forward to CURRENT_VERSION.

The file is decrypted once, under the profile of the version it was written
with. Transitions then rewrite the records and, when the key derivation
changed between versions, re-derive the key from the passphrase and the
file's original salt. Nothing is written back; the caller decides whether to
sync the migrated store.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List
from . import serializer
from .entries import PasswordEntry
from .errors import FormatError, UnsupportedFormatError
from .fileformat import CURRENT_VERSION, PROFILES, unpack
from .secure import SecureBuffer

log = logging.getLogger(__name__)


@dataclass
class Migration:
	version: int
	salt: bytes
	key: SecureBuffer
	records: List[Dict[str, Any]]

	def wipe(self):
		self.key.wipe()
		for r in self.records:
			r.pop('password', None)
		self.records = []


def _iso_to_epoch(value: Any, name: str) -> int:
	if not isinstance(value, str):
		raise FormatError(f'Entry {name!r}: timestamp must be an ISO-8601 string')
	try:
		ts = int(datetime.fromisoformat(value).timestamp())
	except (ValueError, OverflowError, OSError):
		raise FormatError(f'Entry {name!r}: bad timestamp') from None
	if ts < 0:
		raise FormatError(f'Entry {name!r}: bad timestamp')
	return ts


def _v1_to_v2(m: Migration, passphrase: SecureBuffer) -> Migration:
	"""Rename app_name to name, add an empty username and switch to epoch seconds."""
	out = []
	for r in m.records:
		name = r.get('app_name')
		if not isinstance(name, str):
			raise FormatError('Entry is missing its app_name')
		created = _iso_to_epoch(r.get('created'), name)
		# Clocks can step backwards between writes; clamp instead of rejecting.
		updated = max(created, _iso_to_epoch(r.get('modified'), name))
		out.append({'name': name, 'username': '', 'password': r.get('password'), 'created_at': created, 'updated_at': updated})
	return Migration(2, m.salt, m.key, out)


def _v2_to_v3(m: Migration, passphrase: SecureBuffer) -> Migration:
	"""PBKDF2 -> scrypt: same passphrase, same salt, new key."""
	key = PROFILES[3].kdf.derive(passphrase, m.salt)
	m.key.wipe()
	return Migration(3, m.salt, key, m.records)


TRANSITIONS: Dict[int, Callable[[Migration, SecureBuffer], Migration]] = {
	1: _v1_to_v2,
	2: _v2_to_v3,
}


def open_legacy(passphrase: SecureBuffer, data: bytes) -> Migration:
	"""Decrypt a file of any known version under that version's own profile."""
	env = unpack(data)
	profile = env.profile
	key = profile.kdf.derive(passphrase, env.salt)
	try:
		plaintext = profile.cipher.decrypt(key, env.nonce, env.ciphertext, env.associated_data)
		records = serializer.parse(plaintext, env.version)
	except Exception:
		key.wipe()
		raise
	return Migration(env.version, env.salt, key, records)


def upgrade(passphrase: SecureBuffer, data: bytes) -> tuple[Migration, List[PasswordEntry]]:
	"""Return the migrated state and its validated entries, or raise FormatError/AuthenticationError.

	A file that is already at CURRENT_VERSION comes back unchanged.
	"""
	m = open_legacy(passphrase, data)
	start = m.version
	try:
		while m.version != CURRENT_VERSION:
			step = TRANSITIONS.get(m.version)
			if step is None:
				raise UnsupportedFormatError(m.version)
			log.info('Upgrading password file from format v%d to v%d', m.version, m.version + 1)
			m = step(m, passphrase)
		entries = serializer.entries_from_records(m.records)
	except Exception:
		m.wipe()
		raise
	if start != CURRENT_VERSION:
		log.info('Password file upgraded from format v%d (%d entries)', start, len(entries))
	return m, entries
