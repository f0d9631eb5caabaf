#!/usr/bin/env python3

import os
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import as_completed
from tqdm import tqdm
from cylvidlib.core import utils
from cylvidlib.media import nona

#============================================

def resolve_jobs(jobs: int) -> int:
	if jobs is None or jobs <= 0:
		return os.cpu_count() or 1
	return jobs

#============================================

class FrameReprojector():
	"""
	Fan cylindrical reprojection out over extracted frames.

	At most `jobs` nona processes run at once. A failed frame does not stop
	the others and keeps its input frame on disk.
	"""
	def __init__(self, width: int, height: int, hfov: float, jobs: int = 0,
		verbose: bool = False):
		self.width = width
		self.height = height
		self.hfov = hfov
		self.jobs = resolve_jobs(jobs)
		self.verbose = verbose

	#============================
	def reproject_one(self, in_frame: str) -> tuple:
		try:
			return nona.reprojectFrame(in_frame, self.width, self.height,
				self.hfov, verbose=self.verbose)
		except OSError as error:
			# counted as a failed frame, the input frame stays on disk
			return (False, str(error))

	#============================
	def run(self, frames: list) -> dict:
		"""
		Reproject every frame in the list.

		Args:
			frames: Input frame paths.

		Returns:
			dict: total, succeeded, and failed (list of (frame, message)).
		"""
		total = len(frames)
		failed = []
		succeeded = 0
		if total == 0:
			return {"total": 0, "succeeded": 0, "failed": []}
		utils.echo(f"Reprojecting {total} frames with {self.jobs} parallel jobs")
		show_progress = not utils.is_quiet_mode() and not self.verbose
		with ThreadPoolExecutor(max_workers=self.jobs) as executor:
			futures = {executor.submit(self.reproject_one, frame): frame for frame in frames}
			completed = as_completed(futures)
			if show_progress:
				completed = tqdm(completed, total=total, unit="frame")
			try:
				for future in completed:
					frame = futures[future]
					ok, message = future.result()
					if ok:
						succeeded += 1
						continue
					failed.append((frame, message))
					report = f"FAILED {os.path.basename(frame)}: {message}"
					if show_progress:
						tqdm.write(report)
					else:
						utils.echo(report)
			except BaseException:
				# cancel queued frames on Ctrl-C or an unexpected error
				executor.shutdown(wait=False, cancel_futures=True)
				raise
		failed.sort()
		return {"total": total, "succeeded": succeeded, "failed": failed}
