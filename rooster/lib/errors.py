"""Error taxonomy for the store engine.

Every failure leaves the engine as one of these; the CLI layer alone turns
them into messages and exit codes. Messages never include secret material.
"""
from __future__ import annotations


class StoreError(Exception): ...

class StoreIOError(StoreError): ...

class AuthenticationError(StoreError):
	"""Integrity check failed: wrong passphrase or damaged file, deliberately indistinguishable."""

	def __init__(self, message: str = 'Unable to decrypt the password file'):
		super().__init__(message)

class EncryptError(StoreError): ...

class FormatError(StoreError): ...

class UnsupportedFormatError(FormatError):
	def __init__(self, version: int):
		super().__init__(f'No upgrade path from format version {version}')
		self.version = version

class DuplicateNameError(StoreError):
	def __init__(self, name: str):
		super().__init__(f'There is already an app named {name!r}')
		self.name = name

class NotFoundError(StoreError):
	def __init__(self, name: str):
		super().__init__(f'There is no app named {name!r}')
		self.name = name

class InvalidNameError(StoreError):
	def __init__(self, name):
		super().__init__(f'{name!r} is not a valid app name')
		self.name = name
