#!/usr/bin/env python3

"""
Convert rectilinear video to cylindrically projected video.

Example usage:
	vid_rect_to_cyl.py 50 input.MOV output.mkv
"""

import argparse
import sys
import yaml
from cylvidlib.core import config
from cylvidlib.core import utils
from cylvidlib.core.geometry import ValidationError
from cylvidlib.core.pipeline import CylinderConversion

#============================================

def parse_args(argv: list = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Reproject rectilinear video onto a cylinder with nona."
	)
	parser.add_argument('focal_length', metavar='FOCAL_LENGTH',
		help='35mm-equivalent focal length of the source lens')
	parser.add_argument('input_file', metavar='INPUT_FILENAME',
		help='source video file')
	parser.add_argument('output_file', metavar='OUTPUT_FILENAME',
		help='output video file, must be .mkv')
	parser.add_argument('-c', '--config', dest='config_file',
		help='settings yaml file (written with defaults if missing)')
	parser.add_argument('-j', '--jobs', dest='jobs', type=int,
		help='parallel reprojection jobs, 0 for one per CPU')
	parser.add_argument('-k', '--keep-temp', dest='keep_temp', action='store_true',
		help='keep intermediate frames after encoding')
	parser.add_argument('-K', '--no-keep-temp', dest='keep_temp', action='store_false',
		help='remove intermediate frames after encoding')
	parser.add_argument('-y', '--yes', dest='assume_yes', action='store_true',
		help='do not wait for confirmation before cleanup')
	parser.add_argument('-n', '--dry-run', dest='dry_run', action='store_true',
		help='probe and print the plan, do not render')
	parser.add_argument('-v', '--verbose', dest='verbose', action='store_true',
		help='print every generated nona script and command')
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help='suppress command echo and progress bars')
	parser.set_defaults(keep_temp=None)
	args = parser.parse_args(argv)
	return args

#============================================

def main(argv: list = None) -> int:
	args = parse_args(argv)
	utils.set_quiet_mode(args.quiet)
	# a missing config file is only written once the arguments are accepted
	settings = config.resolve_settings(args.config_file, write_missing=False)
	try:
		conversion = CylinderConversion(args.focal_length, args.input_file,
			args.output_file, settings, jobs=args.jobs, keep_temp=args.keep_temp,
			assume_yes=args.assume_yes, verbose=args.verbose)
	except ValidationError as error:
		print(str(error))
		sys.exit(1)
	config.ensure_config_file(args.config_file)
	status = conversion.run(dry_run=args.dry_run)
	if args.dry_run:
		print(yaml.safe_dump(conversion.plan(), sort_keys=False))
	return status


if __name__ == '__main__':
	sys.exit(main())
