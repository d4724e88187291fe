"""URL signing CLI commands."""

import datetime
import sys

from signedurl.exceptions import SignedUrlError
from signedurl.url_signer import UrlSigner, expired, valid_signature

from .common import add_common_arguments, load_config, setup_logging


def _secret_key(args) -> bytes:
    if args.key:
        return args.key.encode("utf-8")
    return load_config(args).key


def subcommand_sign(args) -> None:
    setup_logging(args.verbose)
    expires_in = args.expires_in
    if expires_in is None and not args.key:
        expires_in = load_config(args).default_expiration
    expiration = None
    if expires_in is not None:
        try:
            expiration = datetime.timedelta(seconds=expires_in)
        except OverflowError:
            print(f"Error: --expires-in out of range: {expires_in}")
            sys.exit(1)

    try:
        signed_url = UrlSigner(_secret_key(args)).sign(args.url, expiration)
    except SignedUrlError as err:
        print(f"Error: {err}")
        sys.exit(1)
    print(signed_url)


def subcommand_verify(args) -> None:
    setup_logging(args.verbose)
    try:
        valid = valid_signature(args.url, _secret_key(args))
    except SignedUrlError as err:
        print(f"Error: {err}")
        sys.exit(1)

    if not valid:
        print("invalid")
        sys.exit(1)
    if expired(args.url):
        print("expired")
        sys.exit(1)
    print("valid")


def add_parser(subparsers):
    parser_sign = subparsers.add_parser("sign", help="sign an absolute url")
    parser_sign.add_argument("url", type=str, help="absolute url to sign")
    parser_sign.add_argument(
        "--expires-in",
        type=int,
        default=None,
        help="seconds until the signed url expires (default: never)",
    )
    parser_sign.add_argument(
        "--key", type=str, default=None, help="secret key (default: from config)"
    )
    add_common_arguments(parser_sign)
    parser_sign.set_defaults(func=subcommand_sign)

    parser_verify = subparsers.add_parser("verify", help="verify a signed url")
    parser_verify.add_argument("url", type=str, help="signed url to verify")
    parser_verify.add_argument(
        "--key", type=str, default=None, help="secret key (default: from config)"
    )
    add_common_arguments(parser_verify)
    parser_verify.set_defaults(func=subcommand_verify)
