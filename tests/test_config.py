#!/usr/bin/env python3

"""
Pytest coverage for YAML settings loading.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest
import yaml

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from cylvidlib.core import config

#============================================

def _write_yaml(path, lines: list) -> str:
	with open(str(path), "w", encoding="utf-8") as handle:
		handle.write("\n".join(lines))
		handle.write("\n")
	return str(path)

#============================================

def test_defaults() -> None:
	settings = config.build_settings(config.default_config(), "<code defaults>")
	assert settings["lens"]["sensor_width_mm"] == 36.0
	assert settings["lens"]["min_focal_length"] == 34.0
	assert settings["output"]["aspect"] == 1.85
	assert settings["output"]["container"] == "mkv"
	assert settings["output"]["video_codec"] == "prores_ks"
	assert settings["output"]["pixel_format"] == "yuv422p10le"
	assert settings["output"]["profile"] == 1
	assert settings["frames"]["pixel_format"] == "rgb48be"
	assert settings["frames"]["jobs"] == 0
	assert settings["cleanup"]["keep_temp"] is False
	assert settings["cleanup"]["confirm"] is True

#============================================

def test_partial_overrides(tmp_path) -> None:
	"""
	Ensure keys left out of the file fall back to defaults.
	"""
	lines = []
	lines.append("vid_rect_to_cyl: 1")
	lines.append("settings:")
	lines.append("  frames:")
	lines.append("    jobs: 4")
	lines.append("  output:")
	lines.append("    profile: 3")
	lines.append("    container: .mkv")
	lines.append("  cleanup:")
	lines.append("    confirm: false")
	config_path = _write_yaml(tmp_path / "settings.yaml", lines)
	settings = config.resolve_settings(config_path)
	assert settings["frames"]["jobs"] == 4
	assert settings["output"]["profile"] == 3
	assert settings["output"]["container"] == "mkv"
	assert settings["cleanup"]["confirm"] is False
	assert settings["output"]["aspect"] == 1.85

#============================================

def test_missing_config_is_written(tmp_path) -> None:
	config_path = str(tmp_path / "new" / "settings.yaml")
	settings = config.resolve_settings(config_path)
	assert os.path.isfile(config_path)
	with open(config_path, "r", encoding="utf-8") as handle:
		data = yaml.safe_load(handle)
	assert data["vid_rect_to_cyl"] == 1
	assert settings == config.build_settings(config.default_config(), "<code defaults>")

#============================================

def test_missing_config_deferred_write(tmp_path) -> None:
	config_path = str(tmp_path / "settings.yaml")
	settings = config.resolve_settings(config_path, write_missing=False)
	assert not os.path.exists(config_path)
	assert settings == config.build_settings(config.default_config(), "<code defaults>")
	config.ensure_config_file(config_path)
	assert config.load_config(config_path)["vid_rect_to_cyl"] == 1

#============================================

def test_bad_header_raises(tmp_path) -> None:
	config_path = _write_yaml(tmp_path / "settings.yaml", ["other_tool: 1", "settings: {}"])
	with pytest.raises(RuntimeError):
		config.load_config(config_path)

#============================================

def test_non_mapping_raises(tmp_path) -> None:
	config_path = _write_yaml(tmp_path / "settings.yaml", ["- just", "- a list"])
	with pytest.raises(RuntimeError):
		config.load_config(config_path)

#============================================

def test_bad_values_raise(tmp_path) -> None:
	bad_blocks = [
		["  frames:", "    jobs: many"],
		["  frames:", "    jobs: -1"],
		["  output:", "    aspect: 0"],
		["  cleanup:", "    keep_temp: maybe"],
		["  lens:", "    min_focal_length: true"],
	]
	for block in bad_blocks:
		lines = ["vid_rect_to_cyl: 1", "settings:"] + block
		config_path = _write_yaml(tmp_path / "settings.yaml", lines)
		with pytest.raises(RuntimeError):
			config.resolve_settings(config_path)
