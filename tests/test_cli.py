import json
import os
import struct
import subprocess
import sys
from pathlib import Path

from xattrfile import create

REPO_ROOT = Path(__file__).resolve().parent.parent


def run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "xattrfile", *args],
        cwd=cwd, env=env, capture_output=True, text=True)


def test_create_default_output_path(tmp_path):
    proc = run_cli(tmp_path, "photos/IMG_0001.JPG", "-a", "user.note=hello", "-x", "com.apple.FinderInfo=0a0B")
    assert proc.returncode == 0, proc.stdout + proc.stderr

    out = tmp_path / "._IMG_0001.JPG"
    assert out.read_bytes() == create({"user.note": b"hello", "com.apple.FinderInfo": b"\x0a\x0b"})
    assert "._IMG_0001.JPG" in proc.stdout


def test_create_explicit_output_from_json(tmp_path):
    attrs_path = tmp_path / "attrs.json"
    attrs_path.write_text(json.dumps({"user.a": "one", "user.b": {"data": "FF"}}), encoding="utf-8")

    proc = run_cli(tmp_path, "whatever.txt", "-j", str(attrs_path), "-a", "user.a=override", "-o", "out.bin")
    assert proc.returncode == 0, proc.stdout + proc.stderr
    assert (tmp_path / "out.bin").read_bytes() == create({"user.a": b"override", "user.b": b"\xff"})


def test_encoding_switch(tmp_path):
    proc = run_cli(tmp_path, "f", "--encoding", "latin-1", "-a", "user.a=é", "-o", "out.bin")
    assert proc.returncode == 0, proc.stdout + proc.stderr
    assert (tmp_path / "out.bin").read_bytes()[-1:] == b"\xe9"


def test_list(tmp_path):
    proc = run_cli(tmp_path, "f", "-t", "-a", "com.apple.test=hello")
    assert proc.returncode == 0, proc.stdout + proc.stderr
    assert "com.apple.test" in proc.stdout
    assert "Total: 153 bytes" in proc.stdout
    assert not (tmp_path / "._f").exists()


def test_empty_attribute_set(tmp_path):
    proc = run_cli(tmp_path, "f")
    assert proc.returncode == 0, proc.stdout + proc.stderr
    blob = (tmp_path / "._f").read_bytes()
    assert len(blob) == 120
    assert struct.unpack_from(">H", blob, 118) == (0,)


def test_invalid_name(tmp_path):
    proc = run_cli(tmp_path, "f", "-a", "=value")
    assert proc.returncode == 1
    assert proc.stdout.startswith("Invalid attributes:")
    assert not (tmp_path / "._f").exists()


def test_invalid_base16(tmp_path):
    proc = run_cli(tmp_path, "f", "-x", "user.a=xyz")
    assert proc.returncode == 1
    assert proc.stdout.startswith("Invalid input:")


def test_missing_equals(tmp_path):
    proc = run_cli(tmp_path, "f", "-a", "user.a")
    assert proc.returncode == 1
    assert proc.stdout.startswith("Invalid input:")
