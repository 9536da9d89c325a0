"""Command group: API key management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchGroup, split_csv
from archmap.services.api_keys import ApiKeyService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_KEYS_EXAMPLES = """\
  archmap keys generate ci-bot --scopes read,write
  archmap keys list
  archmap keys revoke 3
  archmap keys check rmap_0123456789abcdef0123456789abcdef"""


@click.group(cls=ArchGroup, examples=_KEYS_EXAMPLES)
@click.pass_obj
def keys(app: AppContext) -> None:
    """Generate, list, revoke, and check API keys."""


@keys.command(
    examples="""\
  archmap keys generate ci-bot
  archmap keys generate admin --scopes read,write,admin --expires 2027-01-01T00:00:00Z
  archmap keys generate seed --key rmap_0123456789abcdef0123456789abcdef"""
)
@click.argument("name")
@click.option(
    "--scopes",
    default=None,
    callback=split_csv,
    help="Comma-separated scopes (read, write, admin). Defaults to [api_keys].default_scopes.",
)
@click.option("--expires", "expires_at", default=None, help="ISO-8601 expiry timestamp.")
@click.option("--key", "plaintext", default=None, help="Use this plaintext key (rmap_...).")
@click.pass_obj
def generate(
    app: AppContext,
    name: str,
    scopes: list[str] | None,
    expires_at: str | None,
    plaintext: str | None,
) -> None:
    """Create a key; the plaintext is shown only once."""
    chosen = scopes if scopes is not None else list(app.settings.api_keys.default_scopes)
    app.emit(ApiKeyService(app.repos).generate(name, chosen, expires_at, plaintext))


@keys.command(
    name="list",
    examples="""\
  archmap keys list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List keys (hashes are never shown)."""
    app.emit(ApiKeyService(app.repos).list_keys())


@keys.command(
    examples="""\
  archmap keys revoke 3"""
)
@click.argument("key_id", type=int)
@click.pass_obj
def revoke(app: AppContext, key_id: int) -> None:
    """Deactivate a key."""
    app.emit(ApiKeyService(app.repos).revoke(key_id))


@keys.command(
    examples="""\
  archmap keys check rmap_0123456789abcdef0123456789abcdef"""
)
@click.argument("plaintext")
@click.pass_obj
def check(app: AppContext, plaintext: str) -> None:
    """Report whether a key is valid, invalid, expired, or revoked."""
    app.emit(ApiKeyService(app.repos).validate(plaintext))
