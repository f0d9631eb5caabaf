#!/usr/bin/env python3

"""
Lens and frame geometry for rectilinear to cylindrical reprojection.
"""

import math
import os

FULL_FRAME_SENSOR_WIDTH_MM = 36.0
DEFAULT_MIN_FOCAL_LENGTH = 34
DEFAULT_ASPECT = 1.85
DEFAULT_CONTAINER = "mkv"

#============================================

class ValidationError(RuntimeError):
	"""Raised when command-line input is rejected before any work begins."""

#============================================

def parse_focal_length(raw_value) -> float:
	"""
	Parse a 35mm-equivalent focal length.

	Args:
		raw_value: Focal length as given on the command line.

	Returns:
		float: Focal length in millimeters.
	"""
	try:
		focal_length = float(str(raw_value).strip())
	except ValueError:
		raise ValidationError(f"ERROR: focal length must be a number, got '{raw_value}'.")
	if not math.isfinite(focal_length) or focal_length <= 0:
		raise ValidationError(f"ERROR: focal length must be positive, got '{raw_value}'.")
	return focal_length

#============================================

def validate_output_container(output_file: str, container: str = DEFAULT_CONTAINER) -> None:
	"""
	Reject output filenames that do not carry the required container extension.

	Args:
		output_file: Output file path.
		container: Required extension without the dot.
	"""
	extension = os.path.splitext(output_file)[1].lstrip('.')
	if extension == container:
		return
	if container == "mkv":
		raise ValidationError("ERROR: output container must be Matroska (.mkv).")
	raise ValidationError(f"ERROR: output container must be .{container}.")

#============================================

def validate_focal_length(focal_length: float,
	min_focal_length: float = DEFAULT_MIN_FOCAL_LENGTH,
	aspect: float = DEFAULT_ASPECT) -> None:
	if focal_length < min_focal_length:
		raise ValidationError(
			f"ERROR: focal length corrections below {min_focal_length:g} will produce "
			f"vignetting with the hard-coded output aspect of {aspect:g}."
		)
	return

#============================================

def validate_jobs(jobs: int = None) -> None:
	# None defers to the config value, 0 means one job per CPU
	if jobs is not None and jobs < 0:
		raise ValidationError(f"ERROR: jobs must be 0 or more, got {jobs}.")
	return

#============================================

def compute_hfov(focal_length: float,
	sensor_width: float = FULL_FRAME_SENSOR_WIDTH_MM) -> float:
	"""
	Horizontal field of view in degrees, rounded to one decimal.

	Args:
		focal_length: 35mm-equivalent focal length in millimeters.
		sensor_width: Sensor width in millimeters.

	Returns:
		float: HFOV in degrees.
	"""
	hfov = 2.0 * math.atan(sensor_width / (2.0 * focal_length)) * 180.0 / math.pi
	return float(f"{hfov:.1f}")

#============================================

def format_hfov(hfov: float) -> str:
	return f"{hfov:.1f}"

#============================================

def compute_output_height(width: int, aspect: float = DEFAULT_ASPECT) -> int:
	"""
	Output height for a fixed aspect ratio, forced even for 4:2:x chroma.

	Args:
		width: Output width in pixels.
		aspect: Target width/height ratio.

	Returns:
		int: Even output height.
	"""
	if width <= 0:
		raise RuntimeError(f"invalid frame width: {width}")
	height = int(f"{width / aspect:.0f}")
	if height % 2 != 0:
		height -= 1
	if height <= 0:
		raise RuntimeError(f"output height too small for width {width}")
	return height
