"""Main CLI entry point."""

import argparse
import sys

from . import server, url

SUBPARSERS = [
    url,
    server,
]


def main():
    parser = argparse.ArgumentParser(
        prog="signedurl",
        description="Issue and verify tamper-evident, optionally expiring urls",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    for subparser in SUBPARSERS:
        subparser.add_parser(subparsers)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    # Dispatch
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
