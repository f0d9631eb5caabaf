#!/usr/bin/env python3

import json
from cylvidlib.core import utils

#============================================

def probe_video_stream(input_file: str) -> dict:
	"""
	Probe the first video stream for the values needed to rebuild the video.

	Args:
		input_file: Media file path.

	Returns:
		dict: width, height, fps_fraction (verbatim ffprobe string) and fps.
	"""
	cmd = [
		"ffprobe", "-v", "error",
		"-select_streams", "v:0",
		"-show_entries", "stream=width,height,r_frame_rate,avg_frame_rate",
		"-of", "json",
		input_file,
	]
	proc = utils.run_process(cmd)
	data = json.loads(proc.stdout)
	streams = data.get("streams", [])
	if len(streams) == 0:
		raise RuntimeError(f"no video stream found in {input_file}")
	stream = streams[0]
	width = int(stream.get("width", 0))
	height = int(stream.get("height", 0))
	if width <= 0:
		raise RuntimeError("invalid video width from ffprobe")
	fps_value = stream.get("r_frame_rate")
	if fps_value is None or fps_value == "0/0":
		fps_value = stream.get("avg_frame_rate")
	if fps_value is None or fps_value == "0/0":
		raise RuntimeError("invalid frame rate from ffprobe")
	return {
		"width": width,
		"height": height,
		"fps_fraction": fps_value,
		"fps": float(utils.parse_fps(fps_value)),
	}

#============================================

def probe_has_audio(input_file: str) -> bool:
	cmd = [
		"ffprobe", "-v", "error",
		"-select_streams", "a",
		"-show_entries", "stream=index",
		"-of", "json",
		input_file,
	]
	proc = utils.run_process(cmd)
	data = json.loads(proc.stdout)
	return len(data.get("streams", [])) > 0
