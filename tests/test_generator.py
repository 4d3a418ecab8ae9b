import string
import pytest
from passtool.lib.generator import generate_password

def test_generate_letters():
	pw = generate_password(10, letters=True, digits=False, special=False)
	assert len(pw) == 10
	assert all(c in string.ascii_letters for c in pw)

def test_generate_digits():
	pw = generate_password(10, letters=False, digits=True, special=False)
	assert len(pw) == 10
	assert pw.isdigit()

def test_generate_special():
	pw = generate_password(10, letters=False, digits=False, special=True)
	assert len(pw) == 10
	assert all(c in string.punctuation for c in pw)

def test_generate_default():
	pw = generate_password()
	assert len(pw) == 16
	assert all(c in string.ascii_letters + string.digits for c in pw)

def test_generate_zero_length():
	assert generate_password(0) == ''

@pytest.mark.parametrize('kwargs', [
	dict(length=-1),
	dict(length=8, letters=False, digits=False, special=False),
])
def test_generate_invalid(kwargs):
	with pytest.raises(ValueError):
		generate_password(**kwargs)
