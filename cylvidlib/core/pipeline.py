#!/usr/bin/env python3

import os
import shutil
from cylvidlib.core import geometry
from cylvidlib.core import utils
from cylvidlib.core.reprojector import FrameReprojector
from cylvidlib.media import ffmpeg_frames
from cylvidlib.media import ffprobe

REQUIRED_TOOLS = ("ffmpeg", "ffprobe", "nona")

#============================================

def default_temp_dir(output_file: str) -> str:
	return f"{output_file}_tmp"

#============================================

def frame_prefix(output_file: str) -> str:
	return os.path.splitext(os.path.basename(output_file))[0]

#============================================

class CylinderConversion():
	def __init__(self, focal_length, input_file: str, output_file: str,
		settings: dict, jobs: int = None, keep_temp: bool = None,
		assume_yes: bool = False, verbose: bool = False):
		self.settings = settings
		self.input_file = input_file
		self.output_file = output_file
		lens = settings["lens"]
		output = settings["output"]
		# rejected here, before any tool runs or any file is written
		geometry.validate_output_container(output_file, output["container"])
		self.focal_length = geometry.parse_focal_length(focal_length)
		geometry.validate_focal_length(self.focal_length,
			lens["min_focal_length"], output["aspect"])
		self.hfov = geometry.compute_hfov(self.focal_length, lens["sensor_width_mm"])
		geometry.validate_jobs(jobs)
		self.jobs = settings["frames"]["jobs"] if jobs is None else jobs
		self.keep_temp = settings["cleanup"]["keep_temp"] if keep_temp is None else keep_temp
		self.confirm = settings["cleanup"]["confirm"] and not assume_yes
		self.verbose = verbose
		self.temp_dir = default_temp_dir(output_file)
		self.prefix = frame_prefix(output_file)
		self.framerate = None
		self.width = None
		self.height = None
		self.has_audio = None

	#============================
	def check_tools(self, tools: tuple = REQUIRED_TOOLS) -> None:
		for tool in tools:
			utils.check_dependency(tool)

	#============================
	def probe(self) -> None:
		utils.ensure_file_exists(self.input_file)
		video = ffprobe.probe_video_stream(self.input_file)
		self.framerate = video["fps_fraction"]
		self.width = video["width"]
		self.height = geometry.compute_output_height(self.width,
			self.settings["output"]["aspect"])
		self.has_audio = ffprobe.probe_has_audio(self.input_file)

	#============================
	def plan(self) -> dict:
		return {
			"input": self.input_file,
			"output": self.output_file,
			"focal_length": self.focal_length,
			"hfov": self.hfov,
			"framerate": self.framerate,
			"width": self.width,
			"height": self.height,
			"has_audio": self.has_audio,
			"temp_dir": self.temp_dir,
			"frame_prefix": self.prefix,
			"jobs": self.jobs,
			"settings": self.settings,
		}

	#============================
	def prepare_temp_dir(self) -> None:
		if os.path.isdir(self.temp_dir):
			print("The tmpdir already exists, not recreating.")
			return
		os.makedirs(self.temp_dir)

	#============================
	def extract(self) -> list:
		status = ffmpeg_frames.extractFrames(self.input_file, self.temp_dir,
			self.prefix, self.settings["frames"]["pixel_format"])
		if status != 0:
			print(f"WARNING: frame extraction exited with status {status}")
		frames = ffmpeg_frames.list_frames(self.temp_dir, self.prefix)
		if len(frames) == 0:
			done = ffmpeg_frames.list_frames(self.temp_dir, self.prefix,
				ffmpeg_frames.OUTPUT_SUFFIX)
			if len(done) == 0:
				raise RuntimeError(f"no frames extracted from {self.input_file}")
		return frames

	#============================
	def reproject(self, frames: list) -> dict:
		reprojector = FrameReprojector(self.width, self.height, self.hfov,
			jobs=self.jobs, verbose=self.verbose)
		summary = reprojector.run(frames)
		if len(summary["failed"]) > 0:
			print(f"WARNING: {len(summary['failed'])} of {summary['total']} frames "
				f"failed to reproject; input frames kept in {self.temp_dir}")
		return summary

	#============================
	def encode(self) -> int:
		print("Encoding the output file...")
		output = self.settings["output"]
		if not self.has_audio:
			utils.echo("source has no audio stream, output will be video-only")
		return ffmpeg_frames.encodeFrames(self.temp_dir, self.prefix,
			self.input_file, self.output_file, self.framerate,
			codec=output["video_codec"], pixel_format=output["pixel_format"],
			profile=output["profile"])

	#============================
	def wait_for_review(self) -> None:
		if not self.confirm:
			return
		print("Examine the following output file, then press enter to commence "
			"cleanup of intermediate files.")
		print(os.path.abspath(self.output_file))
		try:
			input()
		except EOFError:
			# stdin closed, proceed with cleanup
			pass
		return

	#============================
	def cleanup(self) -> None:
		print("Deleting all intermediate files...")
		shutil.rmtree(self.temp_dir, ignore_errors=True)

	#============================
	def run(self, dry_run: bool = False) -> int:
		"""
		Run the full conversion.

		Returns:
			int: 0 on success, otherwise the encoder exit status.
		"""
		if dry_run:
			self.check_tools(("ffprobe",))
			self.probe()
			return 0
		self.check_tools()
		self.probe()
		self.prepare_temp_dir()
		frames = self.extract()
		self.reproject(frames)
		status = self.encode()
		if status != 0:
			print(f"Encoding failed with status {status}; "
				f"intermediate files kept in {os.path.abspath(self.temp_dir)}")
			return status
		if self.keep_temp:
			print(f"Keeping intermediate files in {os.path.abspath(self.temp_dir)}")
			return 0
		self.wait_for_review()
		self.cleanup()
		return 0
