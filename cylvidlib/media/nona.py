#!/usr/bin/env python3

"""
Single-frame cylindrical reprojection through Hugin's nona.

Each frame gets a tiny PTO script: the `p` line describes the cylindrical
output panorama (f1) and the `o` line a rectilinear source image (f0) with
no rotation, both sharing the lens HFOV.
"""

import os
import PIL.Image
from cylvidlib.core import utils
from cylvidlib.core import geometry
from cylvidlib.media import ffmpeg_frames

#============================================

def build_pto_script(width: int, height: int, hfov: float, in_frame: str) -> str:
	hfov_text = geometry.format_hfov(hfov)
	in_path = os.path.realpath(in_frame)
	lines = []
	lines.append(f"p f1 v{hfov_text} nPNG w{width} h{height}")
	lines.append(f"o f0 r0 p0 y0 v{hfov_text} n\"{in_path}\"")
	lines.append("*")
	lines.append("")
	return "\n".join(lines)

#============================================

def script_path_for(in_frame: str) -> str:
	base = in_frame[:-len(ffmpeg_frames.INPUT_SUFFIX)]
	return f"{base}.pto"

#============================================

def frame_is_valid(out_frame: str, width: int, height: int) -> bool:
	if not os.path.isfile(out_frame):
		return False
	try:
		with PIL.Image.open(out_frame) as image:
			if image.size != (width, height):
				return False
			# decode the pixel data, a truncated frame still has a valid header
			image.load()
			return True
	except (OSError, SyntaxError):
		return False

#============================================

def reprojectFrame(in_frame: str, width: int, height: int, hfov: float,
	verbose: bool = False) -> tuple:
	"""
	Remap one rectilinear frame onto a cylinder.

	The input frame is removed only once the output frame exists and
	decodes at the requested size; otherwise it stays for a retry.

	Args:
		in_frame: Path to a `*_input.png` frame.
		width: Output width in pixels.
		height: Output height in pixels.
		hfov: Horizontal field of view in degrees.
		verbose: Print the generated script.

	Returns:
		tuple: (ok, message)
	"""
	out_frame = ffmpeg_frames.output_frame_for(in_frame)
	script = build_pto_script(width, height, hfov, in_frame)
	script_file = script_path_for(in_frame)
	if verbose:
		utils.echo(script)
	with open(script_file, "w", encoding="utf-8") as handle:
		handle.write(script)
	try:
		proc = utils.runCmd(["nona", "-o", out_frame, script_file], show=verbose)
	finally:
		if os.path.exists(script_file):
			os.remove(script_file)
	if proc.returncode != 0:
		tail = utils.stderr_tail(proc.stderr)
		return (False, f"nona exited {proc.returncode}: {tail}".strip())
	if not frame_is_valid(out_frame, width, height):
		return (False, f"nona output missing or not {width}x{height}: {out_frame}")
	os.remove(in_frame)
	return (True, out_frame)
