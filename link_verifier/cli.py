"""
Command line interface: verify-links [OPTION]... [DIR|FILE]...
"""
import argparse
import logging
import sys
from typing import List, Optional

from .coordinator import RunCoordinator
from .errors import UsageError
from .verifier_config import config

logger = logging.getLogger(__name__)

USAGE = """Usage: verify-links [OPTION]... [DIR|FILE]...
Verify all links in markdown files.

  -v   show each file as it is checked
  -d   show each href as it is found
  -?   show this help text
  --   treat remainder of args as dir/files"""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on bad input"""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="verify-links", add_help=False)
    parser.add_argument("-v", dest="verbose", action="store_true")
    parser.add_argument("-d", dest="debug", action="store_true")
    parser.add_argument("-?", "-h", "--help", dest="help", action="store_true")
    parser.add_argument("paths", nargs="*")
    return parser


def parse_args(argv: List[str]) -> argparse.Namespace:
    """Parse argv; raises UsageError for unknown options"""
    args = build_parser().parse_args(argv)
    if args.debug:
        args.verbose = True
    return args


def setup_logging():
    """Log to stderr so stdout carries only the report"""
    logging.basicConfig(
        level=config.effective_log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )
    if config.enable_debug_logging:
        for warning in config.validate_configuration():
            logger.warning(f"Configuration warning: {warning}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit code"""
    argv = sys.argv[1:] if argv is None else argv

    try:
        args = parse_args(argv)
    except UsageError as e:
        print(f"verify-links: {e}")
        print(USAGE)
        return 1

    if args.help:
        print(USAGE)
        return 0

    setup_logging()

    coordinator = RunCoordinator(verbose=args.verbose, debug=args.debug)
    try:
        result = coordinator.run(args.paths)
    except UsageError as e:
        print(f"verify-links: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nVerification stopped by user", file=sys.stderr)
        return 1

    return result.exit_code


def run():
    """Console script entry point"""
    sys.exit(main())
