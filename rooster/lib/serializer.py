"""Schema-tagged JSON encoding of the entry collection.

Every document is `{"schema": <version>, "passwords": [<record>, ...]}`.
Schema 1 records are `{app_name, password, created, modified}` with ISO-8601
timestamps; schemas 2 and 3 use the PasswordEntry record layout.
"""
from __future__ import annotations
import json
from typing import Any, Dict, Iterable, List
from .entries import PasswordEntry
from .errors import FormatError
from .fileformat import CURRENT_VERSION


def _reject_duplicate_keys(pairs):
	obj = {}
	for k, v in pairs:
		if k in obj:
			raise FormatError(f'Duplicate key {k!r} in document')
		obj[k] = v
	return obj


def parse(data: bytes, version: int) -> List[Dict[str, Any]]:
	"""Return the raw records of a document, checking only its outer structure."""
	try:
		doc = json.loads(bytes(data).decode('utf-8'), object_pairs_hook=_reject_duplicate_keys)
	except (ValueError, RecursionError) as e:
		raise FormatError(f'Malformed document ({type(e).__name__})') from None
	if not isinstance(doc, dict):
		raise FormatError('Document is not an object')
	tag = doc.get('schema')
	if isinstance(tag, bool) or tag != version:
		raise FormatError(f'Document schema {tag!r} is not version {version}')
	records = doc.get('passwords')
	if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
		raise FormatError("Document 'passwords' must be a list of objects")
	return records


def encode_records(records: Iterable[Dict[str, Any]], version: int) -> bytes:
	return json.dumps({'schema': version, 'passwords': list(records)}, separators=(',', ':')).encode('utf-8')


def encode(entries: Iterable[PasswordEntry]) -> bytes:
	return encode_records((e.to_record() for e in entries), CURRENT_VERSION)


def entries_from_records(records: Iterable[Dict[str, Any]]) -> List[PasswordEntry]:
	entries: List[PasswordEntry] = []
	seen = set()
	try:
		for record in records:
			entry = PasswordEntry.from_record(record)
			if entry.name in seen:
				entry.wipe()
				raise FormatError(f'Duplicate entry name {entry.name!r}')
			seen.add(entry.name)
			entries.append(entry)
	except FormatError:
		for e in entries: e.wipe()
		raise
	return entries


def decode(data: bytes) -> List[PasswordEntry]:
	return entries_from_records(parse(data, CURRENT_VERSION))
