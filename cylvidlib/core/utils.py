#!/usr/bin/env python3

import os
import shlex
import shutil
import subprocess
from fractions import Fraction

_QUIET_MODE = False

#============================================

def set_quiet_mode(enabled: bool) -> None:
	global _QUIET_MODE
	_QUIET_MODE = bool(enabled)
	return

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE

#============================================

def echo(message: str) -> None:
	if not is_quiet_mode():
		print(message)
	return

#============================================

def runCmd(cmd: list, show: bool = True) -> subprocess.CompletedProcess:
	"""
	Run an external command without raising on a nonzero exit status.

	Args:
		cmd: Command list to execute.
		show: Echo the command before running it.

	Returns:
		subprocess.CompletedProcess: Completed process with captured text output.
	"""
	if show:
		echo(f"CMD: '{shlex.join(cmd)}'")
	proc = subprocess.run(cmd, capture_output=True, text=True)
	return proc

#============================================

def run_process(cmd: list) -> subprocess.CompletedProcess:
	"""
	Run an external command, raising on failure.

	Args:
		cmd: Command list to execute.

	Returns:
		subprocess.CompletedProcess: Completed process.
	"""
	proc = runCmd(cmd)
	if proc.returncode != 0:
		stderr_text = (proc.stderr or "").strip()
		raise RuntimeError(f"command failed: {shlex.join(cmd)}\n{stderr_text}")
	return proc

#============================================

def check_dependency(cmd_name: str) -> None:
	if shutil.which(cmd_name) is None:
		raise RuntimeError(f"missing dependency: {cmd_name}")
	return

#============================================

def ensure_file_exists(filepath: str) -> None:
	if not os.path.isfile(filepath):
		raise RuntimeError(f"file not found: {filepath}")
	return

#============================================

def parse_fps(raw_fps) -> Fraction:
	if raw_fps is None:
		raise RuntimeError("frame rate is required")
	if isinstance(raw_fps, int):
		return Fraction(raw_fps, 1)
	if isinstance(raw_fps, float):
		return Fraction(str(raw_fps))
	if isinstance(raw_fps, str):
		text = raw_fps.strip()
		if '/' in text:
			parts = text.split('/')
			if int(parts[1]) == 0:
				raise RuntimeError(f"invalid frame rate: {raw_fps}")
			return Fraction(int(parts[0]), int(parts[1]))
		return Fraction(text)
	raise RuntimeError("frame rate must be int, float, or fraction string")

#============================================

def stderr_tail(text: str, lines: int = 5) -> str:
	if not text:
		return ""
	tail = text.strip().splitlines()[-lines:]
	return "\n".join(tail)
