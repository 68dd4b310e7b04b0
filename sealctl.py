#!/usr/bin/env python3
"""TimeSeal CLI - issue and check stateless CSRF tokens.

Commands:
  generate-key  Print a random base64 key (use with KEY_ENCODING=base64)
  issue         Generate a token for an identity
  check         Validate an identity/token pair (exit code 1 if invalid)
  info          Show the active codec configuration
"""

import base64
import secrets
import sys

import click

from timeseal.exceptions import ConstructionError


def _load_codec(key, key_encoding, algorithm, max_age):
    from timeseal.codec import decode_key, new_codec
    from timeseal.config import settings

    try:
        return new_codec(
            decode_key(
                key if key is not None else settings.secret_key,
                key_encoding or settings.key_encoding,
            ),
            algorithm=algorithm or settings.algorithm,
            max_age=max_age if max_age is not None else settings.max_age,
        )
    except ConstructionError as exc:
        raise click.UsageError(str(exc)) from exc


codec_options = [
    click.option("--key", default=None, help="Secret key (defaults to SECRET_KEY setting)"),
    click.option(
        "--key-encoding",
        type=click.Choice(["utf-8", "base64", "hex"]),
        default=None,
        help="How --key is encoded (defaults to KEY_ENCODING setting)",
    ),
    click.option(
        "--algorithm",
        type=click.Choice(["aes-gcm", "hmac-sha256"]),
        default=None,
        help="Token algorithm (defaults to ALGORITHM setting)",
    ),
    click.option("--max-age", type=int, default=None, help="Maximum token age in seconds"),
]


def with_codec_options(func):
    for option in reversed(codec_options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """TimeSeal - stateless CSRF token CLI."""
    from timeseal import log

    log.setup("DEBUG" if verbose else "WARNING")


@cli.command()
@click.option("--size", type=click.Choice(["16", "24", "32"]), default="32", help="Random key bytes")
def generate_key(size):
    """Print SIZE random bytes as URL-safe base64.

    Configure the result with KEY_ENCODING=base64 (or pass --key-encoding base64).
    """
    click.echo(base64.urlsafe_b64encode(secrets.token_bytes(int(size))).decode("ascii"))


@cli.command()
@click.option("--identity", required=True, help="Session or user id to bind the token to")
@with_codec_options
def issue(identity, key, key_encoding, algorithm, max_age):
    """Generate a token for IDENTITY."""
    codec = _load_codec(key, key_encoding, algorithm, max_age)
    click.echo(codec.generate(identity))


@cli.command()
@click.option("--identity", required=True, help="Session or user id the token was issued for")
@click.option("--token", required=True, help="Token to validate")
@with_codec_options
def check(identity, token, key, key_encoding, algorithm, max_age):
    """Validate TOKEN for IDENTITY."""
    codec = _load_codec(key, key_encoding, algorithm, max_age)
    if codec.is_valid(identity, token):
        click.echo(f"[{click.style('OK', fg='green')}] Token is valid.")
        return
    click.echo(f"[{click.style('INVALID', fg='red')}] Token is invalid.")
    sys.exit(1)


@cli.command()
@with_codec_options
def info(key, key_encoding, algorithm, max_age):
    """Show the codec configuration in use."""
    codec = _load_codec(key, key_encoding, algorithm, max_age)
    click.echo(f"  Algorithm:    {codec.algorithm}")
    click.echo(f"  Max age:      {codec.max_age:g}s")
    click.echo(f"  Token length: {codec.token_length} characters")


if __name__ == "__main__":
    cli()
