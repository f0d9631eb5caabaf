#!/usr/bin/env python3

import os
import re
from cylvidlib.core import utils

INPUT_SUFFIX = "_input.png"
OUTPUT_SUFFIX = "_output.png"

#============================================

def input_frame_pattern(temp_dir: str, prefix: str) -> str:
	return os.path.join(temp_dir, f"{prefix}_%08d{INPUT_SUFFIX}")

#============================================

def output_frame_pattern(temp_dir: str, prefix: str) -> str:
	return os.path.join(temp_dir, f"{prefix}_%08d{OUTPUT_SUFFIX}")

#============================================

def output_frame_for(input_frame: str) -> str:
	if not input_frame.endswith(INPUT_SUFFIX):
		raise RuntimeError(f"not an input frame: {input_frame}")
	return input_frame[:-len(INPUT_SUFFIX)] + OUTPUT_SUFFIX

#============================================

def list_frames(temp_dir: str, prefix: str, suffix: str = INPUT_SUFFIX) -> list:
	"""
	List numbered frames for a prefix in frame order.

	Args:
		temp_dir: Directory holding intermediate frames.
		prefix: Frame name prefix.
		suffix: INPUT_SUFFIX or OUTPUT_SUFFIX.

	Returns:
		list: Sorted frame paths.
	"""
	if not os.path.isdir(temp_dir):
		return []
	pattern = re.compile("^" + re.escape(prefix) + "_[0-9]+" + re.escape(suffix) + "$")
	names = [name for name in os.listdir(temp_dir) if pattern.match(name)]
	names.sort()
	return [os.path.join(temp_dir, name) for name in names]

#============================================

def extractFrames(movfile: str, temp_dir: str, prefix: str,
	pixel_format: str = "rgb48be") -> int:
	"""
	Write every source frame as a numbered PNG.

	16 bits per channel keeps the YUV->RGB->RGB->YUV round trip from
	banding even for 8-bit sources.

	Returns:
		int: ffmpeg exit status.
	"""
	cmd = [
		"ffmpeg", "-y",
		"-i", movfile,
		"-pix_fmt", pixel_format,
		input_frame_pattern(temp_dir, prefix),
	]
	proc = utils.runCmd(cmd)
	return proc.returncode

#============================================

def encodeFrames(temp_dir: str, prefix: str, movfile: str, outfile: str,
	framerate: str, codec: str = "prores_ks", pixel_format: str = "yuv422p10le",
	profile: int = 1) -> int:
	"""
	Encode the reprojected frames and copy audio from the source.

	Returns:
		int: ffmpeg exit status.
	"""
	cmd = [
		"ffmpeg", "-y",
		"-r", str(framerate), "-f", "image2",
		"-i", output_frame_pattern(temp_dir, prefix),
		"-i", movfile,
		"-c:v", codec, "-pix_fmt", pixel_format, "-profile:v", str(profile),
		"-map", "0:v:0",
		"-c:a", "copy", "-map", "1:a?",
		outfile,
	]
	proc = utils.runCmd(cmd)
	if proc.returncode != 0:
		tail = utils.stderr_tail(proc.stderr)
		if tail:
			print(tail)
	return proc.returncode
