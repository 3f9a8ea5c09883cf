"""Scrubbable container for secret bytes.

Best-effort hygiene: the bytearray we own is zeroed in place, but
immutable copies handed out by `reveal()`/`text()` or made inside
libraries (json, cryptography) are outside our reach.
"""
from __future__ import annotations
import hmac


class SecureBuffer:
	__slots__ = ('_buf',)

	def __init__(self, data: bytes | bytearray | memoryview = b''):
		self._buf = bytearray(data)

	@classmethod
	def from_str(cls, text: str) -> 'SecureBuffer':
		return cls(text.encode('utf-8'))

	def reveal(self) -> bytes:
		return bytes(self._buf)

	def text(self) -> str:
		return self._buf.decode('utf-8')

	def copy(self) -> 'SecureBuffer':
		return SecureBuffer(self._buf)

	__copy__ = copy

	def __deepcopy__(self, memo) -> 'SecureBuffer':
		return self.copy()

	def replace(self, data: bytes | bytearray | memoryview) -> None:
		"""Zero the current payload, then take a copy of `data`."""
		self.wipe()
		self._buf.extend(data)

	def wipe(self) -> None:
		# Zero before shrinking; shrinking may release the block without clearing it.
		self._buf[:] = bytes(len(self._buf))
		del self._buf[:]

	@property
	def wiped(self) -> bool:
		return not self._buf

	def __len__(self) -> int:
		return len(self._buf)

	def __bool__(self) -> bool:
		return bool(self._buf)

	def __eq__(self, other) -> bool:
		if not isinstance(other, SecureBuffer):
			return NotImplemented
		return hmac.compare_digest(self._buf, other._buf)

	__hash__ = None  # mutable

	def __repr__(self) -> str:
		return f'SecureBuffer(<redacted {len(self._buf)} bytes>)'

	__str__ = __repr__

	def __reduce__(self):
		raise TypeError('SecureBuffer cannot be pickled')

	def __enter__(self) -> 'SecureBuffer':
		return self

	def __exit__(self, *exc) -> None:
		self.wipe()

	def __del__(self):
		buf = getattr(self, '_buf', None)
		if buf:
			buf[:] = bytes(len(buf))
