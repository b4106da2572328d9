"""
typedsig.cli
============

`typedsig` — inspect, hash and sign typed-data JSON documents.

Examples
--------
    $ typedsig encode-type mail.json
    $ typedsig hash mail.json
    $ TYPEDSIG_PRIVATE_KEY=0x... typedsig sign mail.json
    $ typedsig recover mail.json --signature 0x4355...1c

Configuration
-------------
- Log level     : `--log-level` or env `TYPEDSIG_LOG_LEVEL` (default: WARNING)
- Log format    : `--log-json` or env `TYPEDSIG_LOG_FORMAT=json`
- v offset      : `--recovery-offset` or env `TYPEDSIG_RECOVERY_OFFSET` (default: 27)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import typer

from . import logging as tlog
from .config import Config
from .errors import TypedSigError
from .typed_data import TypedData
from .utils.bytes import to_hex
from .version import __version__

app = typer.Typer(
    name="typedsig",
    help="Typed structured data hashing and signing.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main"]


@dataclass
class Ctx:
    config: Config


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _fail(err: TypedSigError) -> typer.Exit:
    typer.echo(f"error: {err}", err=True)
    return typer.Exit(code=1)


def _load(path: Path) -> TypedData:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise typer.BadParameter(f"cannot read {path}: {e}") from e
    try:
        return TypedData.from_json(text)
    except TypedSigError as e:
        raise _fail(e) from e


_FILE = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Typed-data JSON document.")


@app.callback()
def _root(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level (DEBUG, INFO, ...)."),
    log_json: bool = typer.Option(False, "--log-json", help="Emit JSON log lines."),
    recovery_offset: Optional[int] = typer.Option(
        None, "--recovery-offset", help="Added to the recovery id to form v."
    ),
) -> None:
    """Load configuration from the environment and apply flag overrides."""
    try:
        cfg = Config.with_overrides(
            log_level=log_level,
            log_format="json" if log_json else None,
            recovery_offset=recovery_offset,
        )
    except TypedSigError as e:
        raise _fail(e) from e
    tlog.configure_from_config(cfg)
    ctx.obj = Ctx(config=cfg)


@app.command("version")
def version() -> None:
    """Print the package version."""
    typer.echo(f"typedsig {__version__}")


@app.command("encode-type")
def encode_type_cmd(path: Path = _FILE) -> None:
    """Print the canonical type string of the primary type."""
    doc = _load(path)
    try:
        typer.echo(doc.encode_type())
    except TypedSigError as e:
        raise _fail(e) from e


@app.command("hash")
def hash_cmd(path: Path = _FILE) -> None:
    """Print the domain separator, type hash, struct hash and signing digest."""
    doc = _load(path)
    try:
        out = {
            "primaryType": doc.primary_type,
            "domainSeparator": doc.domain_separator().hex(),
            "typeHash": to_hex(doc.type_hash()),
            "structHash": to_hex(doc.struct_hash()),
            "signHash": to_hex(doc.sign_hash()),
        }
    except TypedSigError as e:
        raise _fail(e) from e
    _print_json(out)


@app.command("sign")
def sign_cmd(
    ctx: typer.Context,
    path: Path = _FILE,
    key: str = typer.Option(
        ...,
        "--key",
        envvar="TYPEDSIG_PRIVATE_KEY",
        help="32-byte secp256k1 private key (0x-hex).",
        show_default=False,
    ),
) -> None:
    """Sign the document and print r, s, v and the 65-byte signature."""
    c: Ctx = ctx.obj
    doc = _load(path)
    try:
        sig = doc.sign(key, recovery_offset=c.config.recovery_offset)
    except TypedSigError as e:
        raise _fail(e) from e
    _print_json(
        {
            "signHash": to_hex(doc.sign_hash()),
            "signature": sig.hex(),
            "r": to_hex(sig.r),
            "s": to_hex(sig.s),
            "v": sig.v,
        }
    )


@app.command("recover")
def recover_cmd(
    ctx: typer.Context,
    path: Path = _FILE,
    signature: str = typer.Option(..., "--signature", help="65-byte r‖s‖v signature (0x-hex)."),
) -> None:
    """Print the address that signed the document."""
    c: Ctx = ctx.obj
    doc = _load(path)
    try:
        address = doc.recover(signature, recovery_offset=c.config.recovery_offset)
    except TypedSigError as e:
        raise _fail(e) from e
    typer.echo(str(address))


def main() -> None:  # pragma: no cover - console entrypoint
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
