"""PasswordEntry: one named credential record."""
from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Any, Dict
from .errors import FormatError
from .secure import SecureBuffer

RECORD_FIELDS = ('name', 'username', 'password', 'created_at', 'updated_at')


def now() -> int:
	return int(time.time())


@dataclass
class PasswordEntry:
	name: str
	username: str
	password: SecureBuffer = field(default_factory=SecureBuffer)
	created_at: int = 0
	updated_at: int = 0

	def __post_init__(self):
		if isinstance(self.password, str):
			self.password = SecureBuffer.from_str(self.password)

	def touch(self, at: int | None = None):
		"""Advance updated_at, never moving it backwards."""
		self.updated_at = max(now() if at is None else at, self.updated_at, self.created_at)

	def clone(self) -> 'PasswordEntry':
		return PasswordEntry(self.name, self.username, self.password.copy(), self.created_at, self.updated_at)

	def wipe(self):
		self.password.wipe()

	def to_record(self) -> Dict[str, Any]:
		return {
			'name': self.name,
			'username': self.username,
			'password': self.password.text(),
			'created_at': self.created_at,
			'updated_at': self.updated_at,
		}

	@classmethod
	def from_record(cls, record: Any) -> 'PasswordEntry':
		if not isinstance(record, dict):
			raise FormatError('Entry is not an object')
		missing = [f for f in RECORD_FIELDS if f not in record]
		if missing:
			raise FormatError(f"Entry is missing field(s): {', '.join(missing)}")
		unknown = sorted(set(record) - set(RECORD_FIELDS))
		if unknown:
			raise FormatError(f"Entry has unknown field(s): {', '.join(unknown)}")
		name, username = record['name'], record['username']
		if not isinstance(name, str) or not name:
			raise FormatError('Entry name must be a non-empty string')
		if not isinstance(username, str):
			raise FormatError(f'Entry {name!r}: username must be a string')
		if not isinstance(record['password'], str):
			raise FormatError(f'Entry {name!r}: password must be a string')
		created, updated = record['created_at'], record['updated_at']
		for ts in (created, updated):
			# bool is an int subclass; reject it explicitly
			if isinstance(ts, bool) or not isinstance(ts, int) or ts < 0:
				raise FormatError(f'Entry {name!r}: bad timestamp')
		if updated < created:
			raise FormatError(f'Entry {name!r}: updated_at precedes created_at')
		return cls(name, username, SecureBuffer.from_str(record['password']), created, updated)
