"""Server CLI commands."""

from signedurl.server import app

from .common import add_common_arguments, load_config, setup_logging


def subcommand_serve(args) -> None:
    setup_logging(args.verbose)
    app.run(load_config(args))


def add_parser(subparsers):
    parser_serve = subparsers.add_parser(
        "serve", help="run a server that only serves signed urls"
    )
    add_common_arguments(parser_serve)
    parser_serve.set_defaults(func=subcommand_serve)
