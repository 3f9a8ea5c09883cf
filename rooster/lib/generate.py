"""Random password generation."""
from __future__ import annotations
import secrets, string
from config.settings import DEFAULT_PASSWORD_LENGTH, PASSWORD_SYMBOLS
from .secure import SecureBuffer


def generate_password(length: int = DEFAULT_PASSWORD_LENGTH, alnum: bool = False) -> SecureBuffer:
	"""Return a random password with at least one character of each class when length allows.

	Classes are lowercase, uppercase, digits and, unless `alnum`, symbols.
	"""
	if length < 1:
		raise ValueError('Password length must be at least 1')
	classes = [string.ascii_lowercase, string.ascii_uppercase, string.digits]
	if not alnum:
		classes.append(PASSWORD_SYMBOLS)
	alphabet = ''.join(classes)
	while True:
		buf = SecureBuffer(bytes(ord(secrets.choice(alphabet)) for _ in range(length)))
		if length < len(classes) or all(any(chr(b) in cls for b in buf.reveal()) for cls in classes):
			return buf
		buf.wipe()
