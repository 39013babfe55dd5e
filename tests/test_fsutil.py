import os

from ctxstore.fsutil import atomic_write


def test_writes_content(tmp_path):
    target = tmp_path / "a.md"
    atomic_write(target, b"hello")
    assert target.read_bytes() == b"hello"


def test_overwrites_existing_file(tmp_path):
    target = tmp_path / "a.md"
    atomic_write(target, b"first")
    atomic_write(target, b"second")
    assert target.read_bytes() == b"second"


def test_creates_parent_directories(tmp_path):
    target = tmp_path / "x" / "y" / "file"
    atomic_write(target, b"nested")
    assert target.read_bytes() == b"nested"


def test_leaves_no_temp_file(tmp_path):
    atomic_write(tmp_path / "a.md", b"data")
    atomic_write(tmp_path / "HEAD", b"data")
    assert sorted(os.listdir(tmp_path)) == ["HEAD", "a.md"]


def test_accepts_string_path(tmp_path):
    target = str(tmp_path / "plain")
    atomic_write(target, b"")
    assert os.path.getsize(target) == 0