#!/usr/bin/env python3

"""
Pytest coverage for single-frame nona reprojection.
"""

# Standard Library
import os
import subprocess
import sys

# PIP3 modules
import PIL.Image
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from cylvidlib.media import nona

#============================================

def _make_input_frame(temp_dir, index: int = 1) -> str:
	path = os.path.join(str(temp_dir), f"clip_{index:08d}_input.png")
	PIL.Image.new("RGB", (32, 18)).save(path)
	return path

#============================================

def _fake_nona(seen: dict, returncode: int = 0, size: tuple = (64, 34)):
	"""
	Build a runCmd replacement that records the script and writes a frame.
	"""
	def fake_run(cmd: list, show: bool = True) -> subprocess.CompletedProcess:
		seen["cmd"] = cmd
		with open(cmd[-1], "r", encoding="utf-8") as handle:
			seen["script"] = handle.read()
		if returncode == 0 and size is not None:
			PIL.Image.new("RGB", size).save(cmd[2], "PNG")
		return subprocess.CompletedProcess(cmd, returncode, "", "nona: boom")
	return fake_run

#============================================

def test_build_pto_script(tmp_path) -> None:
	in_frame = str(tmp_path / "clip_00000001_input.png")
	script = nona.build_pto_script(1920, 1038, 39.6, in_frame)
	lines = script.splitlines()
	assert lines[0] == "p f1 v39.6 nPNG w1920 h1038"
	assert lines[1] == f"o f0 r0 p0 y0 v39.6 n\"{os.path.realpath(in_frame)}\""
	assert lines[2] == "*"

#============================================

def test_reproject_success_removes_input(tmp_path, monkeypatch) -> None:
	"""
	Ensure the input frame is deleted once a valid output frame exists.
	"""
	seen = {}
	monkeypatch.setattr(nona.utils, "runCmd", _fake_nona(seen))
	in_frame = _make_input_frame(tmp_path)
	ok, message = nona.reprojectFrame(in_frame, 64, 34, 39.6)
	out_frame = str(tmp_path / "clip_00000001_output.png")
	assert ok
	assert message == out_frame
	assert not os.path.exists(in_frame)
	assert os.path.isfile(out_frame)
	assert seen["cmd"][:3] == ["nona", "-o", out_frame]
	assert "p f1 v39.6 nPNG w64 h34" in seen["script"]
	# per-frame script is removed after nona returns
	assert not os.path.exists(str(tmp_path / "clip_00000001.pto"))

#============================================

def test_reproject_failure_keeps_input(tmp_path, monkeypatch) -> None:
	seen = {}
	monkeypatch.setattr(nona.utils, "runCmd", _fake_nona(seen, returncode=1))
	in_frame = _make_input_frame(tmp_path)
	ok, message = nona.reprojectFrame(in_frame, 64, 34, 39.6)
	assert not ok
	assert "nona exited 1" in message
	assert "boom" in message
	assert os.path.isfile(in_frame)
	assert not os.path.exists(str(tmp_path / "clip_00000001.pto"))

#============================================

def test_reproject_wrong_size_keeps_input(tmp_path, monkeypatch) -> None:
	seen = {}
	monkeypatch.setattr(nona.utils, "runCmd", _fake_nona(seen, size=(10, 10)))
	in_frame = _make_input_frame(tmp_path)
	ok, message = nona.reprojectFrame(in_frame, 64, 34, 39.6)
	assert not ok
	assert os.path.isfile(in_frame)

#============================================

def test_reproject_missing_output_keeps_input(tmp_path, monkeypatch) -> None:
	seen = {}
	monkeypatch.setattr(nona.utils, "runCmd", _fake_nona(seen, size=None))
	in_frame = _make_input_frame(tmp_path)
	ok, message = nona.reprojectFrame(in_frame, 64, 34, 39.6)
	assert not ok
	assert os.path.isfile(in_frame)

#============================================

def test_frame_is_valid_rejects_garbage(tmp_path) -> None:
	path = tmp_path / "clip_00000001_output.png"
	path.write_bytes(b"not a png")
	assert not nona.frame_is_valid(str(path), 64, 34)
	assert not nona.frame_is_valid(str(tmp_path / "missing.png"), 64, 34)

#============================================

def test_frame_is_valid_rejects_truncated_png(tmp_path) -> None:
	"""
	Ensure a frame with an intact header but missing pixel data is rejected.
	"""
	path = str(tmp_path / "clip_00000001_output.png")
	image = PIL.Image.frombytes("RGB", (64, 34), os.urandom(64 * 34 * 3))
	image.save(path, "PNG")
	assert nona.frame_is_valid(path, 64, 34)
	with open(path, "rb") as handle:
		data = handle.read()
	with open(path, "wb") as handle:
		handle.write(data[:len(data) // 2])
	with PIL.Image.open(path) as header_only:
		assert header_only.size == (64, 34)
	assert not nona.frame_is_valid(path, 64, 34)

#============================================

def test_script_path_requires_input_frame() -> None:
	assert nona.script_path_for("/tmp/a_00000001_input.png") == "/tmp/a_00000001.pto"
	with pytest.raises(RuntimeError):
		nona.reprojectFrame("/tmp/a_00000001.png", 64, 34, 39.6)
