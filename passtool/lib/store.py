"""Entry store: the in-memory password table and its persistence.

Each entry holds a ciphertext encrypted under a key derived from that entry's
own passphrase, plus clear-text metadata (description, affiliated apps) so
lists can be shown before anything is decrypted.

The table is not thread-safe. Callers sharing it between threads should go
through LockedTable.
"""
from __future__ import annotations
import logging, os, stat, struct, threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, KeysView, List, Optional, Set
from config.settings import TEMP_SUFFIX
from .crypto import PassCrypto, AuthenticationError
from .fileformat import encode_table, decode_table

log = logging.getLogger(__name__)

class TableError(Exception): ...

class AlreadyExists(TableError):
	def __init__(self, name: str):
		super().__init__(f'Password "{name}" already exists')
		self.name = name

class NotFound(TableError):
	def __init__(self, name: str):
		super().__init__(f'Password "{name}" not found')
		self.name = name

class IncorrectPassphrase(TableError):
	def __init__(self):
		super().__init__('Incorrect passphrase')

class DecodeFailure(TableError): ...
class InvalidInput(TableError): ...
class StorageError(TableError): ...
class FormatError(StorageError): ...


@dataclass
class Metadata:
	description: str = ''
	apps: Set[str] = field(default_factory=set)

	def __post_init__(self):
		self.apps = set(self.apps)

@dataclass
class Entry:
	name: str
	ciphertext: bytes
	metadata: Metadata = field(default_factory=Metadata)


class PassTable:
	def __init__(self, crypto: PassCrypto | None = None):
		self.crypto = crypto or PassCrypto()
		self._entries: Dict[str, Entry] = {}

	def __len__(self) -> int:
		return len(self._entries)

	def __contains__(self, name: object) -> bool:
		return name in self._entries

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, PassTable):
			return NotImplemented
		return self._entries == other._entries

	def __repr__(self) -> str:
		return f"PassTable({len(self)} entries)"

	def _check_text(self, **fields: str) -> None:
		for label, text in fields.items():
			try:
				text.encode('utf-8')
			except UnicodeEncodeError as e:
				raise InvalidInput(f"{label} is not encodable as UTF-8") from e

	def _check_metadata(self, metadata: Metadata) -> None:
		self._check_text(description=metadata.description)
		for app in metadata.apps:
			self._check_text(app=app)

	def _entry(self, name: str) -> Entry:
		entry = self._entries.get(name)
		if entry is None: raise NotFound(name)
		return entry

	def contains(self, name: str) -> bool:
		return name in self._entries

	def names(self) -> KeysView[str]:
		"""Live view of all entry names, in no particular order."""
		return self._entries.keys()

	def sorted_names(self) -> List[str]:
		return sorted(self._entries)

	def add_password(self, name: str, password: str, key: str, metadata: Optional[Metadata] = None) -> None:
		"""Encrypt `password` under `key` and store it as `name`.

		CryptoError from the cipher itself is left to propagate.
		"""
		self._check_text(name=name, password=password, passphrase=key)
		if metadata is not None: self._check_metadata(metadata)
		if name in self._entries: raise AlreadyExists(name)
		ciphertext = self.crypto.encrypt(password.encode('utf-8'), key)
		self._entries[name] = Entry(name, ciphertext, metadata if metadata is not None else Metadata())
		log.debug("Added entry %r", name)

	def get_password(self, name: str, key: str) -> str:
		self._check_text(passphrase=key)
		entry = self._entry(name)
		try:
			raw = self.crypto.decrypt(entry.ciphertext, key)
		except AuthenticationError:
			log.warning("Authentication failed for entry %r", name)
			raise IncorrectPassphrase() from None
		try:
			return raw.decode('utf-8')
		except UnicodeDecodeError as e:
			raise DecodeFailure(f'Password "{name}" is not valid text') from e

	def get_metadata(self, name: str) -> Metadata:
		return self._entry(name).metadata

	def update_metadata(self, name: str, metadata: Metadata) -> None:
		entry = self._entry(name)
		self._check_metadata(metadata)
		entry.metadata = metadata
		log.debug("Updated metadata of %r", name)

	def remove(self, name: str) -> None:
		self._entry(name)
		del self._entries[name]
		log.debug("Removed entry %r", name)

	# --- persistence ---

	def to_bytes(self) -> bytes:
		records = [(e.name, e.ciphertext, e.metadata.description, e.metadata.apps) for e in self._entries.values()]
		try:
			return encode_table(records)
		except (struct.error, UnicodeEncodeError) as e:
			raise FormatError(f"Cannot encode table: {e}") from e

	@classmethod
	def from_bytes(cls, data: bytes, crypto: PassCrypto | None = None) -> 'PassTable':
		try:
			records = decode_table(data)
		except ValueError as e:
			raise FormatError(str(e)) from e
		table = cls(crypto)
		for name, ciphertext, description, apps in records:
			table._entries[name] = Entry(name, ciphertext, Metadata(description, set(apps)))
		return table

	def save(self, path: Path | str) -> None:
		"""Write the whole table to `path` via a temp file and atomic replace."""
		path = Path(path)
		data = self.to_bytes()
		tmp = path.with_name(path.name + TEMP_SUFFIX)
		try:
			path.parent.mkdir(parents=True, exist_ok=True)
			fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, stat.S_IRUSR | stat.S_IWUSR)
			with os.fdopen(fd, 'wb') as f:
				f.write(data)
			os.chmod(tmp, stat.S_IRUSR | stat.S_IWUSR)
			os.replace(tmp, path)
		except OSError as e:
			log.error("Failed to save table %s: %s", path, e)
			tmp.unlink(missing_ok=True)
			raise StorageError(f"Failed to save {path}: {e.strerror or e}") from e
		log.info("Table saved (%d entries) -> %s", len(self), path)

	@classmethod
	def load(cls, path: Path | str, crypto: PassCrypto | None = None) -> 'PassTable':
		path = Path(path)
		try:
			data = path.read_bytes()
		except OSError as e:
			raise StorageError(f"Failed to read {path}: {e.strerror or e}") from e
		table = cls.from_bytes(data, crypto)
		log.info("Table loaded (%d entries) <- %s", len(table), path)
		return table

	@classmethod
	def open(cls, path: Path | str, crypto: PassCrypto | None = None) -> 'PassTable':
		"""Load `path`, creating an empty table file first if none exists."""
		path = Path(path)
		if not path.exists():
			log.info("No table at %s; creating an empty one", path)
			cls(crypto).save(path)
		return cls.load(path, crypto)


class LockedTable:
	"""Exclusive-access wrapper around a PassTable.

	Usage:
		guard = LockedTable(PassTable.open(path))
		with guard as table:
			table.add_password(...)
			table.save(path)
	"""

	def __init__(self, table: PassTable):
		self._table = table
		self._lock = threading.Lock()

	def __enter__(self) -> PassTable:
		self._lock.acquire()
		return self._table

	def __exit__(self, *exc) -> None:
		self._lock.release()
