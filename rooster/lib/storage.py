"""Password file access: read the raw bytes and replace them atomically."""
from __future__ import annotations
import os, logging, tempfile
from pathlib import Path

log = logging.getLogger(__name__)


class AtomicWriter:
	"""All-or-nothing replacement of one file.

	Data goes to a temporary file in the same directory, is fsynced, then
	renamed over the target with os.replace. Readers see either the old or the
	new content; a failure at any step leaves the target untouched.
	"""

	def __init__(self, path: Path):
		# write next to the real file so a symlinked path stays a symlink
		self.path = Path(path).resolve()

	def write(self, data: bytes) -> None:
		directory = self.path.parent
		fd, tmp_name = tempfile.mkstemp(prefix=f'.{self.path.name}.', suffix='.tmp', dir=directory)
		tmp = Path(tmp_name)
		try:
			with os.fdopen(fd, 'wb') as f:
				f.write(data)
				f.flush()
				os.fsync(f.fileno())
			if self.path.exists():
				os.chmod(tmp, self.path.stat().st_mode & 0o777)
			os.replace(tmp, self.path)
		except BaseException:
			tmp.unlink(missing_ok=True)
			raise
		try:
			self._sync_directory(directory)
		except OSError as e:
			# the new content is already in place
			log.warning('Could not fsync %s after replacing %s: %s', directory, self.path.name, e)
		log.debug('Wrote %d bytes to %s', len(data), self.path)

	@staticmethod
	def _sync_directory(directory: Path) -> None:
		if os.name != 'posix':
			return
		dfd = os.open(directory, os.O_RDONLY)
		try:
			os.fsync(dfd)
		finally:
			os.close(dfd)


class StoreFile:
	def __init__(self, path: Path):
		self.path = Path(path)

	def exists(self) -> bool:
		return self.path.exists()

	def read(self) -> bytes:
		"""Raw file bytes; a missing or empty file both read as b''."""
		if not self.path.exists():
			return b''
		return self.path.read_bytes()

	def writer(self) -> AtomicWriter:
		return AtomicWriter(self.path)
