import os
import stat
import pytest
from pathlib import Path
from passtool.lib.store import PassTable, Metadata, StorageError, FormatError, NotFound

def build_table():
    pt = PassTable()
    pt.add_password('pass1', 'test1', 'password1')
    pt.add_password('pass2', 'test2', 'password2', Metadata('bank', {'chrome', 'app'}))
    pt.add_password('pass3', 'test3', 'password3')
    pt.add_password('gone', 'x', 'k')
    pt.update_metadata('pass1', Metadata('mail', {'thunderbird'}))
    pt.remove('gone')
    return pt

def test_bytes_roundtrip():
    pt = build_table()
    decoded = PassTable.from_bytes(pt.to_bytes())
    assert decoded == pt
    assert decoded.get_password('pass2', 'password2') == 'test2'
    assert decoded.get_metadata('pass2').apps == {'app', 'chrome'}
    with pytest.raises(NotFound):
        decoded.get_password('gone', 'k')

def test_empty_roundtrip():
    assert PassTable.from_bytes(PassTable().to_bytes()) == PassTable()

def test_save_and_load(tmp_path: Path):
    path = tmp_path / 'passwords.pt'
    pt = build_table()
    pt.save(path)
    assert path.exists()
    assert not (tmp_path / 'passwords.pt.tmp').exists()
    loaded = PassTable.load(path)
    assert loaded == pt
    for name, message, key in [('pass1', 'test1', 'password1'), ('pass3', 'test3', 'password3')]:
        assert loaded.get_password(name, key) == message

@pytest.mark.skipif(os.name == 'nt', reason='POSIX permissions')
def test_save_owner_only(tmp_path: Path):
    path = tmp_path / 'passwords.pt'
    PassTable().save(path)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600

def test_save_overwrites(tmp_path: Path):
    path = tmp_path / 'passwords.pt'
    pt = build_table()
    pt.save(path)
    pt.remove('pass1')
    pt.save(path)
    assert sorted(PassTable.load(path).names()) == ['pass2', 'pass3']

def test_save_creates_parent(tmp_path: Path):
    path = tmp_path / 'nested' / 'dir' / 'passwords.pt'
    PassTable().save(path)
    assert path.exists()

def test_load_missing(tmp_path: Path):
    with pytest.raises(StorageError):
        PassTable.load(tmp_path / 'missing.pt')

def test_load_corrupt(tmp_path: Path):
    path = tmp_path / 'passwords.pt'
    path.write_bytes(b'not a table at all')
    with pytest.raises(FormatError):
        PassTable.load(path)

def test_format_error_is_storage_error():
    assert issubclass(FormatError, StorageError)

def test_save_to_directory_fails(tmp_path: Path):
    with pytest.raises(StorageError):
        PassTable().save(tmp_path)

def test_open_creates_empty(tmp_path: Path):
    path = tmp_path / 'passwords.pt'
    pt = PassTable.open(path)
    assert len(pt) == 0
    assert path.exists()
    build_table().save(path)
    assert len(PassTable.open(path)) == 3

def test_save_owner_only_under_permissive_umask(tmp_path: Path):
    path = tmp_path / 'passwords.pt'
    old = os.umask(0o022)
    try:
        build_table().save(path)
    finally:
        os.umask(old)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert not (tmp_path / 'passwords.pt.tmp').exists()

def test_save_replaces_stale_temp_file(tmp_path: Path):
    path = tmp_path / 'passwords.pt'
    stale = tmp_path / 'passwords.pt.tmp'
    stale.write_bytes(b'leftover' * 100)
    os.chmod(stale, 0o644)
    build_table().save(path)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert PassTable.load(path) == build_table()
