"""Random password generation."""
from __future__ import annotations
import secrets
from config.settings import (
	GENERATOR_DEFAULT_LENGTH, GENERATOR_LETTERS, GENERATOR_DIGITS, GENERATOR_SPECIAL
)

def generate_password(length: int = GENERATOR_DEFAULT_LENGTH, letters: bool = True, digits: bool = True, special: bool = False) -> str:
	if length < 0: raise ValueError('Length must not be negative')
	chars = ''
	if letters: chars += GENERATOR_LETTERS
	if digits: chars += GENERATOR_DIGITS
	if special: chars += GENERATOR_SPECIAL
	if not chars: raise ValueError('Select at least one character class')
	return ''.join(secrets.choice(chars) for _ in range(length))
