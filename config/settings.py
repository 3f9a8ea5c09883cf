"""Project configuration settings.

Crypto constants are tied to on-disk format versions; changing one means
adding a new format version, not editing the value in place.
"""

from pathlib import Path
import os

# Security / crypto
SALT_LENGTH = 32
KEY_LENGTH = 32  # AES-256
AUTH_TAG_LENGTH = 16  # GCM tag length
LEGACY_IV_LENGTH = 16  # formats 1 and 2
NONCE_LENGTH = 12  # format 3
PBKDF2_ITERATIONS = 100_000
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1

# Store file
ROOSTER_FILE_ENV_VAR = "ROOSTER_FILE"
ROOSTER_FILE_DEFAULT = ".passwords.rooster"

# Password generator
DEFAULT_PASSWORD_LENGTH = 32
PASSWORD_SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

# Logging
LOG_LEVEL_ENV_VAR = "ROOSTER_LOG_LEVEL"
LOG_LEVEL = "WARNING"


class ConfigError(Exception):
	pass


def resolve_store_path(environ=None, home: Path | None = None) -> Path:
	"""Return the password file path: $ROOSTER_FILE, else ~/.passwords.rooster."""
	environ = os.environ if environ is None else environ
	override = environ.get(ROOSTER_FILE_ENV_VAR)
	if override:
		return Path(override)
	if home is None:
		raise ConfigError(
			f"Could not determine your home directory; set ${ROOSTER_FILE_ENV_VAR} "
			"to the absolute path of your password file"
		)
	return Path(home) / ROOSTER_FILE_DEFAULT


def resolve_log_level(environ=None) -> str:
	environ = os.environ if environ is None else environ
	return environ.get(LOG_LEVEL_ENV_VAR, LOG_LEVEL).upper()


__all__ = [
	'SALT_LENGTH','KEY_LENGTH','AUTH_TAG_LENGTH','LEGACY_IV_LENGTH','NONCE_LENGTH',
	'PBKDF2_ITERATIONS','SCRYPT_N','SCRYPT_R','SCRYPT_P',
	'ROOSTER_FILE_ENV_VAR','ROOSTER_FILE_DEFAULT','DEFAULT_PASSWORD_LENGTH','PASSWORD_SYMBOLS',
	'LOG_LEVEL_ENV_VAR','LOG_LEVEL','ConfigError','resolve_store_path','resolve_log_level'
]
