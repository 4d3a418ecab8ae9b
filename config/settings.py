"""Project configuration settings.

Crypto sizes, file format constants and the few environment-driven
settings used by the CLI live here.
"""

from pathlib import Path
import os
import string

# Security / crypto
KEY_LENGTH = 32    # AES-256
NONCE_LENGTH = 12  # 96-bit GCM-SIV nonce
TAG_LENGTH = 16    # GCM-SIV tag length
NONCE_TAG = b"nonce"
KEY_TAG = b"password"

# Table file
FILE_MAGIC = b"PTBL"
FORMAT_VERSION = 1
DEFAULT_STORE_PATH = Path(os.environ.get("PASSTOOL_PATH", "passwords.pt"))
TEMP_SUFFIX = ".tmp"

# Password generator
GENERATOR_DEFAULT_LENGTH = 16
GENERATOR_LETTERS = string.ascii_letters
GENERATOR_DIGITS = string.digits
GENERATOR_SPECIAL = string.punctuation

# Logging
LOG_LEVEL = os.environ.get("PASSTOOL_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

__all__ = [
	'KEY_LENGTH','NONCE_LENGTH','TAG_LENGTH','NONCE_TAG','KEY_TAG',
	'FILE_MAGIC','FORMAT_VERSION','DEFAULT_STORE_PATH','TEMP_SUFFIX',
	'GENERATOR_DEFAULT_LENGTH','GENERATOR_LETTERS','GENERATOR_DIGITS','GENERATOR_SPECIAL',
	'LOG_LEVEL','LOG_FORMAT'
]
