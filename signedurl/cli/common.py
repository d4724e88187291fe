"""Helpers shared by CLI subcommands."""

import argparse
import logging
import sys

from signedurl.config import SignerConfig


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the config and logging flags every subcommand accepts."""
    parser.add_argument(
        "--config-dir", type=str, default=None, help="directory holding config.yaml"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )


def load_config(args: argparse.Namespace) -> SignerConfig:
    """Load config from the directory named by `--config-dir`."""
    return SignerConfig.load(args.config_dir)
