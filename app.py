"""Entry point for spacenav

Opens a SpaceNavigator session and either probes its calibration or streams
scaled, change-filtered readings to the log using a chosen profile.
"""
import argparse
import logging
import sys
import threading

from core.calibration import SAMPLE_RANGES, probe_calibration
from core.errors import SpaceNavError
from core.notifier import State, start_notifications
from core.session import create_session
from devices.hid_space_navigator import HidBackend
from devices.pygame_joystick import PygameBackend
from profiles import BACKENDS, Profile, dump_ranges

LOG = logging.getLogger("spacenav")


def make_backend(name):
    if name == "hid":
        return HidBackend()
    return PygameBackend()


def build_parser():
    parser = argparse.ArgumentParser(description="spacenav: SpaceNavigator → calibrated event stream")
    parser.add_argument("--profile", help="YAML profile (device, backend, ranges, tolerance)")
    parser.add_argument("--device", help="regex matched against the controller name (overrides profile)")
    parser.add_argument("--backend", choices=BACKENDS, help="device binding (overrides profile)")
    parser.add_argument("--tolerance", type=float, help="minimum per-axis change to report (overrides profile)")
    parser.add_argument("--calibrate", type=float, metavar="SECONDS",
                        help="probe axis extents for SECONDS and print them as YAML, then exit")
    parser.add_argument("--sample-calibration", action="store_true",
                        help="use the built-in sample calibration ranges")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (default: INFO)")
    parser.add_argument("--log-format", default="%(levelname)s:%(name)s:%(message)s",
                        help="Logging format string (default: %(levelname)s:%(name)s:%(message)s)")
    parser.add_argument("--debug-modules", nargs="*", default=[],
                        help="Modules to set to DEBUG level (e.g., 'notifier', 'hid', 'pygame', 'session')")
    return parser


def configure_logging(args):
    logging.basicConfig(level=getattr(logging, args.log_level), format=args.log_format)
    for module in args.debug_modules:
        logging.getLogger(f"spacenav.{module}").setLevel(logging.DEBUG)


def resolve_profile(args) -> Profile:
    profile = Profile.load(args.profile) if args.profile else Profile()
    if args.device:
        profile.device = args.device
    if args.backend:
        profile.backend = args.backend
    if args.tolerance is not None:
        profile.tolerance = args.tolerance
    if args.sample_calibration:
        profile.calibrated_ranges = SAMPLE_RANGES
    return profile


def run(args, stop_event=None):
    profile = resolve_profile(args)
    session = create_session(profile.device, backend=make_backend(profile.backend))
    try:
        if args.calibrate is not None:
            LOG.info("move every axis to its extremes for the next %.1fs", args.calibrate)
            ranges = probe_calibration(session, args.calibrate)
            sys.stdout.write(dump_ranges(ranges))
            return 0

        stop_event = stop_event or threading.Event()

        def on_values(snapshot):
            LOG.info("%s", snapshot)

        handle = start_notifications(
            session, on_values,
            target_range=profile.ranges,
            calibrated_range=profile.calibrated_ranges,
            tolerance=profile.tolerance,
            interval=profile.interval,
            on_disconnect=lambda err: stop_event.set(),
        )
        LOG.info("spacenav running, press Ctrl+C to stop")
        try:
            while not stop_event.is_set():
                stop_event.wait(0.5)
        except KeyboardInterrupt:
            LOG.info("shutdown requested")
        finally:
            handle.stop()
        return 1 if handle.state is State.DISCONNECTED else 0
    finally:
        session.close()


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args)
    try:
        return run(args)
    except SpaceNavError as e:
        LOG.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
