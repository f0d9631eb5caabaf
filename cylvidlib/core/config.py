#!/usr/bin/env python3

"""
YAML settings for vid_rect_to_cyl.

A config file is a mapping with a version header and a `settings` block.
Any key left out of the file falls back to the code defaults below.
"""

import os
import yaml

from cylvidlib.core import geometry

#============================================

TOOL_CONFIG_HEADER_KEY = "vid_rect_to_cyl"
TOOL_CONFIG_HEADER_VALUE = 1

#============================================

def default_config() -> dict:
	"""
	Build the default config dictionary.

	Returns:
		dict: Default config.
	"""
	return {
		TOOL_CONFIG_HEADER_KEY: TOOL_CONFIG_HEADER_VALUE,
		"settings": {
			"lens": {
				"sensor_width_mm": geometry.FULL_FRAME_SENSOR_WIDTH_MM,
				"min_focal_length": geometry.DEFAULT_MIN_FOCAL_LENGTH,
			},
			"output": {
				"aspect": geometry.DEFAULT_ASPECT,
				"container": geometry.DEFAULT_CONTAINER,
				"video_codec": "prores_ks",
				"pixel_format": "yuv422p10le",
				"profile": 1,
			},
			"frames": {
				"pixel_format": "rgb48be",
				"jobs": 0,
			},
			"cleanup": {
				"keep_temp": False,
				"confirm": True,
			},
		},
	}

#============================================

def write_config_file(config_path: str, config: dict) -> None:
	"""
	Write a config file to disk.

	Args:
		config_path: Output file path.
		config: Config dictionary.
	"""
	text = yaml.safe_dump(config, sort_keys=False)
	os.makedirs(os.path.dirname(config_path) or ".", exist_ok=True)
	with open(config_path, "w", encoding="utf-8") as handle:
		handle.write(text)
	return

#============================================

def load_config(config_path: str) -> dict:
	"""
	Load a config file from disk.

	Args:
		config_path: Config file path.

	Returns:
		dict: Parsed config mapping.
	"""
	with open(config_path, "r", encoding="utf-8") as handle:
		data = yaml.safe_load(handle)
	if not isinstance(data, dict):
		raise RuntimeError("config file must be a mapping")
	if data.get(TOOL_CONFIG_HEADER_KEY) != TOOL_CONFIG_HEADER_VALUE:
		raise RuntimeError(f"config file must set {TOOL_CONFIG_HEADER_KEY}: {TOOL_CONFIG_HEADER_VALUE}")
	return data

#============================================

def coerce_float(value, config_path: str, key_path: str) -> float:
	if isinstance(value, bool):
		raise RuntimeError(f"config {config_path}: {key_path} must be a number")
	if isinstance(value, (int, float)):
		return float(value)
	if isinstance(value, str):
		try:
			return float(value)
		except ValueError:
			raise RuntimeError(f"config {config_path}: {key_path} must be a number")
	raise RuntimeError(f"config {config_path}: {key_path} must be a number")

#============================================

def coerce_int(value, config_path: str, key_path: str) -> int:
	if isinstance(value, bool):
		raise RuntimeError(f"config {config_path}: {key_path} must be an integer")
	if isinstance(value, int):
		return value
	if isinstance(value, float):
		return int(value)
	if isinstance(value, str):
		try:
			return int(float(value))
		except ValueError:
			raise RuntimeError(f"config {config_path}: {key_path} must be an integer")
	raise RuntimeError(f"config {config_path}: {key_path} must be an integer")

#============================================

def coerce_str(value, config_path: str, key_path: str) -> str:
	if isinstance(value, str):
		return value
	raise RuntimeError(f"config {config_path}: {key_path} must be a string")

#============================================

def coerce_bool(value, config_path: str, key_path: str) -> bool:
	if isinstance(value, bool):
		return value
	raise RuntimeError(f"config {config_path}: {key_path} must be true or false")

#============================================

def build_settings(config: dict, config_path: str) -> dict:
	"""
	Normalize settings with defaults.

	Args:
		config: Raw config mapping.
		config_path: Config file path, used in error messages.

	Returns:
		dict: Normalized settings.
	"""
	settings = default_config()["settings"]
	overrides = {}
	if isinstance(config, dict):
		overrides = config.get("settings") or {}
	if not isinstance(overrides, dict):
		raise RuntimeError(f"config {config_path}: settings must be a mapping")
	lens = overrides.get("lens") or {}
	output = overrides.get("output") or {}
	frames = overrides.get("frames") or {}
	cleanup = overrides.get("cleanup") or {}
	sensor_width_mm = coerce_float(lens.get("sensor_width_mm", settings["lens"]["sensor_width_mm"]),
		config_path, "settings.lens.sensor_width_mm")
	min_focal_length = coerce_float(lens.get("min_focal_length", settings["lens"]["min_focal_length"]),
		config_path, "settings.lens.min_focal_length")
	aspect = coerce_float(output.get("aspect", settings["output"]["aspect"]),
		config_path, "settings.output.aspect")
	container = coerce_str(output.get("container", settings["output"]["container"]),
		config_path, "settings.output.container")
	video_codec = coerce_str(output.get("video_codec", settings["output"]["video_codec"]),
		config_path, "settings.output.video_codec")
	output_pixel_format = coerce_str(output.get("pixel_format", settings["output"]["pixel_format"]),
		config_path, "settings.output.pixel_format")
	profile = coerce_int(output.get("profile", settings["output"]["profile"]),
		config_path, "settings.output.profile")
	frame_pixel_format = coerce_str(frames.get("pixel_format", settings["frames"]["pixel_format"]),
		config_path, "settings.frames.pixel_format")
	jobs = coerce_int(frames.get("jobs", settings["frames"]["jobs"]),
		config_path, "settings.frames.jobs")
	keep_temp = coerce_bool(cleanup.get("keep_temp", settings["cleanup"]["keep_temp"]),
		config_path, "settings.cleanup.keep_temp")
	confirm = coerce_bool(cleanup.get("confirm", settings["cleanup"]["confirm"]),
		config_path, "settings.cleanup.confirm")
	if sensor_width_mm <= 0:
		raise RuntimeError("lens.sensor_width_mm must be positive")
	if min_focal_length <= 0:
		raise RuntimeError("lens.min_focal_length must be positive")
	if aspect <= 0:
		raise RuntimeError("output.aspect must be positive")
	container = container.lstrip(".")
	if container == "":
		raise RuntimeError("output.container must not be empty")
	if jobs < 0:
		raise RuntimeError("frames.jobs must be >= 0")
	return {
		"lens": {
			"sensor_width_mm": sensor_width_mm,
			"min_focal_length": min_focal_length,
		},
		"output": {
			"aspect": aspect,
			"container": container,
			"video_codec": video_codec,
			"pixel_format": output_pixel_format,
			"profile": profile,
		},
		"frames": {
			"pixel_format": frame_pixel_format,
			"jobs": jobs,
		},
		"cleanup": {
			"keep_temp": keep_temp,
			"confirm": confirm,
		},
	}

#============================================

def ensure_config_file(config_file: str = None) -> None:
	"""
	Write a missing config file with defaults.
	"""
	if config_file is None or os.path.exists(config_file):
		return
	write_config_file(config_file, default_config())
	print(f"Wrote default config: {config_file}")
	return

#============================================

def resolve_settings(config_file: str = None, write_missing: bool = True) -> dict:
	"""
	Load settings from a config file, or use code defaults.

	A missing config file resolves to the code defaults. It is written to
	disk here only when write_missing is set; otherwise the caller writes it
	later with ensure_config_file().

	Args:
		config_file: Optional config YAML path.
		write_missing: Write a missing config file before reading it.

	Returns:
		dict: Normalized settings.
	"""
	if config_file is None:
		return build_settings(default_config(), "<code defaults>")
	if not os.path.exists(config_file):
		if not write_missing:
			return build_settings(default_config(), config_file)
		ensure_config_file(config_file)
	config = load_config(config_file)
	return build_settings(config, config_file)
