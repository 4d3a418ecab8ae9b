"""Binary layout of the password table file.

File format (v1), all integers little-endian u32:
	[magic 'PTBL'][version][entry count]
	per entry: [name][ciphertext][description][app count][app]*
where every string/bytes field is a u32 length followed by the raw bytes
(strings are UTF-8).

Records are plain tuples (name, ciphertext, description, apps) so this module
stays independent of the table classes. Malformed input raises ValueError.
"""
from __future__ import annotations
import struct
from typing import Iterable, List, Tuple
from config.settings import FILE_MAGIC, FORMAT_VERSION

Record = Tuple[str, bytes, str, List[str]]

_U32 = struct.Struct('<I')

def _pack_bytes(raw: bytes) -> bytes:
	return _U32.pack(len(raw)) + raw

def _pack_str(text: str) -> bytes:
	return _pack_bytes(text.encode('utf-8'))

def encode_table(records: Iterable[Record]) -> bytes:
	records = list(records)
	parts = [FILE_MAGIC, _U32.pack(FORMAT_VERSION), _U32.pack(len(records))]
	for name, ciphertext, description, apps in records:
		apps = sorted(apps)
		parts.append(_pack_str(name))
		parts.append(_pack_bytes(bytes(ciphertext)))
		parts.append(_pack_str(description))
		parts.append(_U32.pack(len(apps)))
		parts.extend(_pack_str(app) for app in apps)
	return b''.join(parts)


class _Reader:
	def __init__(self, data: bytes):
		self.data = memoryview(data)
		self.pos = 0

	def take(self, n: int) -> bytes:
		end = self.pos + n
		if end > len(self.data):
			raise ValueError(f"Truncated table data at offset {self.pos}")
		chunk = self.data[self.pos:end].tobytes()
		self.pos = end
		return chunk

	def u32(self) -> int:
		return _U32.unpack(self.take(_U32.size))[0]

	def blob(self) -> bytes:
		return self.take(self.u32())

	def text(self) -> str:
		try:
			return self.blob().decode('utf-8')
		except UnicodeDecodeError as e:
			raise ValueError(f"Invalid UTF-8 string in table data: {e}") from e

	def done(self) -> bool:
		return self.pos == len(self.data)

def decode_table(data: bytes) -> List[Record]:
	r = _Reader(data)
	magic = r.take(len(FILE_MAGIC))
	if magic != FILE_MAGIC:
		raise ValueError(f"Not a password table (magic {magic!r})")
	version = r.u32()
	if version != FORMAT_VERSION:
		raise ValueError(f"Unsupported table version {version}")
	records: List[Record] = []
	seen = set()
	for _ in range(r.u32()):
		name = r.text()
		if name in seen:
			raise ValueError(f"Duplicate entry name {name!r}")
		seen.add(name)
		ciphertext = r.blob()
		description = r.text()
		apps = [r.text() for _ in range(r.u32())]
		records.append((name, ciphertext, description, apps))
	if not r.done():
		raise ValueError("Trailing bytes after table data")
	return records
