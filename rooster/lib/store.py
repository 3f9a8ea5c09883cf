"""PasswordStore: the decrypted, in-memory view of one password file.

The encrypted file is the only source of truth. A store is opened with
`new`, `from_input` or `upgrade` (or `load`, which picks between them),
mutated in memory, and written back only by an explicit `sync`.
"""
from __future__ import annotations
import enum
import logging
from typing import Any, Callable, Dict, Iterable, List, Tuple
from . import serializer, upgrade as _upgrade
from .crypto import generate_salt
from .entries import PasswordEntry, now
from .errors import DuplicateNameError, InvalidNameError, NotFoundError, FormatError, StoreIOError
from .fileformat import CURRENT_VERSION, Envelope, pack, profile_for, unpack
from .secure import SecureBuffer

log = logging.getLogger(__name__)


def check_name(name: Any) -> None:
	"""Names are stored as given but must be non-empty strings to load back."""
	if not isinstance(name, str) or not name:
		raise InvalidNameError(name)


class StoreState(enum.Enum):
	FRESH = 'fresh'
	LOADED = 'loaded'
	MIGRATED = 'migrated'
	DIRTY = 'dirty'
	SYNCED = 'synced'


class PasswordStore:
	def __init__(self, salt: bytes, key: SecureBuffer, entries: Iterable[PasswordEntry] = (), state: StoreState = StoreState.FRESH):
		self.format_version = CURRENT_VERSION
		self.salt = salt
		self._key = key
		self._entries: Dict[str, PasswordEntry] = {}
		for e in entries:
			if e.name in self._entries:
				raise DuplicateNameError(e.name)
			self._entries[e.name] = e
		self.state = state

	# -- construction ------------------------------------------------------

	@classmethod
	def new(cls, passphrase: SecureBuffer) -> 'PasswordStore':
		salt = generate_salt()
		key = profile_for(CURRENT_VERSION).kdf.derive(passphrase, salt)
		return cls(salt, key)

	@classmethod
	def from_input(cls, passphrase: SecureBuffer, data: bytes) -> 'PasswordStore':
		"""Open a current-format file.

		Raises FormatError when the file is of another version (the caller may
		then try `upgrade`) and AuthenticationError on a wrong passphrase or
		damaged ciphertext.
		"""
		env = unpack(data)
		if env.version != CURRENT_VERSION:
			raise FormatError(f'Password file is format version {env.version}, expected {CURRENT_VERSION}')
		profile = env.profile
		key = profile.kdf.derive(passphrase, env.salt)
		try:
			plaintext = profile.cipher.decrypt(key, env.nonce, env.ciphertext, env.associated_data)
			entries = serializer.decode(plaintext)
		except Exception:
			key.wipe()
			raise
		log.debug('Loaded password file (%d entries)', len(entries))
		return cls(env.salt, key, entries, StoreState.LOADED)

	@classmethod
	def upgrade(cls, passphrase: SecureBuffer, data: bytes) -> 'PasswordStore':
		"""Open a file of any supported version, migrating it in memory.

		Does not write anything; `sync` the result to commit the new format.
		A file that is already current loads as if through `from_input`.
		"""
		migration, entries = _upgrade.upgrade(passphrase, data)
		return cls(migration.salt, migration.key, entries, StoreState.MIGRATED)

	# -- queries -----------------------------------------------------------

	def __len__(self) -> int:
		return len(self._entries)

	def __contains__(self, name: str) -> bool:
		return name in self._entries

	def __repr__(self) -> str:
		return f'<PasswordStore v{self.format_version} {len(self._entries)} entries {self.state.value}>'

	@property
	def needs_sync(self) -> bool:
		return self.state in (StoreState.FRESH, StoreState.DIRTY)

	def get(self, name: str) -> PasswordEntry:
		try:
			return self._entries[name]
		except KeyError:
			raise NotFoundError(name) from None

	def list(self) -> List[Tuple[str, str]]:
		return [(e.name, e.username) for e in self._entries.values()]

	def search(self, query: str) -> List[PasswordEntry]:
		q = query.casefold()
		hits = [e for e in self._entries.values() if q in e.name.casefold() or q in e.username.casefold()]
		return sorted(hits, key=lambda e: e.name)

	def export(self) -> List[Dict[str, Any]]:
		"""Every entry as a plain dict, passwords in clear text. Insecure by nature."""
		return [e.to_record() for e in self._entries.values()]

	# -- mutations ---------------------------------------------------------

	def _dirty(self):
		self.state = StoreState.DIRTY

	def add(self, entry: PasswordEntry) -> None:
		check_name(entry.name)
		if entry.name in self._entries:
			raise DuplicateNameError(entry.name)
		entry.created_at = entry.updated_at = now()
		self._entries[entry.name] = entry
		self._dirty()

	def change_password(self, name: str, transform: Callable[[PasswordEntry], PasswordEntry]) -> PasswordEntry:
		"""Replace entry `name` with `transform(copy_of_entry)`.

		The result keeps the original name and created_at, and its updated_at
		is set here so it never goes backwards whatever the transform did.
		"""
		old = self.get(name)
		draft = old.clone()
		try:
			new = transform(draft)
		except BaseException:
			draft.wipe()
			raise
		new.name = name
		new.created_at = old.created_at
		new.updated_at = old.updated_at
		new.touch()
		self._entries[name] = new
		old.wipe()
		self._dirty()
		return new

	def rename(self, old_name: str, new_name: str) -> None:
		entry = self.get(old_name)
		if new_name == old_name:
			return
		check_name(new_name)
		if new_name in self._entries:
			raise DuplicateNameError(new_name)
		entry.name = new_name
		entry.touch()
		# rebuild to keep the entry's listing position
		self._entries = {(new_name if k == old_name else k): v for k, v in self._entries.items()}
		self._dirty()

	def delete(self, name: str) -> PasswordEntry:
		entry = self.get(name)
		del self._entries[name]
		self._dirty()
		return entry

	def change_master_password(self, new_passphrase: SecureBuffer) -> None:
		"""Re-derive the key from `new_passphrase` and the existing salt."""
		key = profile_for(CURRENT_VERSION).kdf.derive(new_passphrase, self.salt)
		self._key.wipe()
		self._key = key
		self._dirty()

	# -- persistence -------------------------------------------------------

	def to_bytes(self) -> bytes:
		"""Encrypt the current entries under a fresh nonce and pack the file."""
		profile = profile_for(CURRENT_VERSION)
		nonce = profile.cipher.generate_nonce()
		env = Envelope(CURRENT_VERSION, self.salt, nonce, b'')
		ciphertext = profile.cipher.encrypt(self._key, nonce, serializer.encode(self._entries.values()), env.associated_data)
		return pack(Envelope(CURRENT_VERSION, self.salt, nonce, ciphertext))

	def sync(self, writer) -> None:
		"""Encrypt and hand the bytes to `writer.write`, which must be all-or-nothing.

		On failure the in-memory state is kept as is; the caller should retry
		or abort, not assume anything was persisted.
		"""
		data = self.to_bytes()
		try:
			writer.write(data)
		except OSError as e:
			raise StoreIOError(f'Could not write the password file: {e.strerror or e}') from e
		self.state = StoreState.SYNCED
		log.info('Password file synced (%d entries)', len(self._entries))

	# -- disposal ----------------------------------------------------------

	def close(self) -> None:
		self._key.wipe()
		for e in self._entries.values():
			e.wipe()

	def __enter__(self) -> 'PasswordStore':
		return self

	def __exit__(self, *exc) -> None:
		self.close()


def load(passphrase: SecureBuffer, data: bytes) -> PasswordStore:
	"""Open `data`, trying the current format first and upgrading only on FormatError.

	Empty input means there is no store yet and yields a fresh one.
	AuthenticationError from the first attempt is raised as is, so a wrong
	passphrase is never reported as a failed migration.
	"""
	if not data:
		return PasswordStore.new(passphrase)
	try:
		return PasswordStore.from_input(passphrase, data)
	except FormatError as e:
		log.info('Could not open as current format (%s); trying upgrade', e)
		return PasswordStore.upgrade(passphrase, data)
