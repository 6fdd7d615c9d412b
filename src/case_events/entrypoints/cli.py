"""
Generate synthetic case events and persist them to a local store.

Each generated or updated case event is printed to stdout as one JSON line;
logs go to stderr.

Usage:
    # Generate 20 case events
    case-event-generator --generate 20

    # Clear the persistent store
    case-event-generator --clear
"""

import argparse
import logging
import sys

import config
from case_events.adapters import orm
from case_events.adapters.facts import FakerFactSource
from case_events.service_layer.generator import CaseEventGenerator
from case_events.service_layer.unit_of_work import SqlAlchemyUnitOfWork, create_session_factory

logger = logging.getLogger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error"]


class StderrHelpAction(argparse.Action):
    """Print help to stderr; stdout only carries case event JSON lines."""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help(sys.stderr)
        parser.exit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="case-event-generator",
        description="Generate synthetic case events and persist them to a local store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        epilog="""
Examples:
  # Generate 20 case events
  %(prog)s --generate 20

  # Reproducible run against a custom store
  %(prog)s -g 50 --seed 42 --database /tmp/case-events.db

  # Also publish case event changes to Redis
  %(prog)s -g 10 --publish surveillance:case-events

  # Clear the persistent store
  %(prog)s --clear
        """
    )

    parser.add_argument(
        "-h", "--help",
        action=StderrHelpAction,
        help="Show this help message and exit"
    )

    parser.add_argument(
        "-g", "--generate",
        type=int,
        default=0,
        help="Amount of case events to generate (default: 0)"
    )

    parser.add_argument(
        "-c", "--clear",
        action="store_true",
        help="Clear persistent store"
    )

    parser.add_argument(
        "--database",
        type=str,
        default=None,
        help="SQLite file to use (default: $XDG_DATA_HOME/covid-datagenerator/data-gen.db)"
    )

    parser.add_argument(
        "--publish",
        type=str,
        default=config.get_publish_channel(),
        metavar="CHANNEL",
        help="Also publish case events to this Redis channel"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed random facts for reproducible runs"
    )

    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=config.get_log_level(),
        help="Level to log (default: debug)"
    )

    return parser


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.DEBUG),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None, output=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.generate < 0:
        parser.error("generate must be >= 0")

    configure_logging(args.log_level)

    orm.start_mappers()
    uow = SqlAlchemyUnitOfWork(
        session_factory=create_session_factory(config.get_database_uri(args.database)),
        facts_impl=FakerFactSource(seed=args.seed),
        publish_channel=args.publish,
    )
    generator = CaseEventGenerator(uow, output=output)

    if args.clear:
        generator.clear()
        return 0

    generator.generate(args.generate)
    return 0


if __name__ == "__main__":
    sys.exit(main())
