"""
bsv-keygen / bsv-wifinfo - Generate key pairs and inspect WIF private keys.

Usage:
    bsv-keygen                          # One compressed mainnet key pair
    bsv-keygen -t -c 5 -j               # Five testnet key pairs as JSON
    bsv-wifinfo <WIF>                   # Mainnet and testnet details for a WIF
    echo <WIF> | bsv-wifinfo -u -j      # Include uncompressed forms, JSON output
"""

from __future__ import annotations

import json

import typer
from loguru import logger
from pydantic import BaseModel

from bsvtools.cli.common import DEBUG_OPTION_HELP, handle_errors, log_level, setup_logging, style
from bsvtools.constants import MAX_KEYGEN_COUNT
from bsvtools.inputs import get_input
from bsvtools.keys import (
    KeyPair,
    WIFKey,
    decode_wif,
    derive_address,
    encode_wif,
    generate_key_pair,
    network_name,
)

keygen_app = typer.Typer(
    name="bsv-keygen",
    help="Generate BSV key pairs using cryptographically secure randomness.",
    add_completion=False,
)

wifinfo_app = typer.Typer(
    name="bsv-wifinfo",
    help="Display mainnet and testnet details for a BSV private key in WIF format.",
    add_completion=False,
)

RULE = "─" * 72


def key_pair_dict(kp: KeyPair) -> dict[str, str | bool]:
    return {
        "privateKey": kp.private_key,
        "publicKey": kp.public_key,
        "wif": kp.wif,
        "address": kp.address,
        "network": kp.network,
        "compressed": kp.compressed,
    }


def format_key_pairs(key_pairs: list[KeyPair]) -> str:
    lines = ["", "=== BSV Key Generator ===", ""]
    for i, kp in enumerate(key_pairs):
        if len(key_pairs) > 1:
            lines.append(f"Key #{i + 1}:")
        lines += [
            f"Network: {kp.network}",
            f"Private Key (hex): {kp.private_key}",
            f"Public Key (hex): {kp.public_key}",
            f"WIF: {kp.wif}",
            f"Address: {kp.address}",
            f"Compressed: {str(kp.compressed).lower()}",
        ]
        if i < len(key_pairs) - 1:
            lines.append("---")
    lines += ["", "Keep your private keys secure!"]
    return "\n".join(lines)


@keygen_app.command()
def keygen(
    testnet: bool = typer.Option(
        False, "--testnet", "-t", help="Generate testnet keys (default: mainnet)"
    ),
    uncompressed: bool = typer.Option(
        False, "--uncompressed", "-u", help="Generate uncompressed keys (default: compressed)"
    ),
    count: int = typer.Option(
        1, "--count", "-c", help=f"Number of key pairs to generate (1-{MAX_KEYGEN_COUNT})"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output in JSON format"),
    debug: bool = typer.Option(False, "--debug", help=DEBUG_OPTION_HELP),
) -> None:
    """Generate one or more key pairs."""
    setup_logging(log_level(debug))

    if not 1 <= count <= MAX_KEYGEN_COUNT:
        logger.error(f"count must be between 1 and {MAX_KEYGEN_COUNT}")
        raise typer.Exit(2)

    key_pairs = [
        generate_key_pair(network_name(testnet), compressed=not uncompressed)
        for _ in range(count)
    ]

    if json_output:
        typer.echo(json.dumps([key_pair_dict(kp) for kp in key_pairs], indent=2))
    else:
        typer.echo(format_key_pairs(key_pairs))


class WIFInput(BaseModel):
    wif: str
    network: str
    compressed: bool


class CompressionPair(BaseModel):
    compressed: str
    uncompressed: str | None = None


class NetworkInfo(BaseModel):
    wif: CompressionPair
    address: CompressionPair


class WIFInfo(BaseModel):
    input: WIFInput
    public_key: CompressionPair
    mainnet: NetworkInfo
    testnet: NetworkInfo


def wif_info(wif: str, key: WIFKey, include_uncompressed: bool = False) -> WIFInfo:
    """
    Describe a key on both networks.

    The compressed forms are always present. Uncompressed WIFs, public key and
    addresses are added when include_uncompressed is set.
    """
    secret = key.private_key.secret
    pub_c = key.private_key.public_key.format(compressed=True)
    pub_u = key.private_key.public_key.format(compressed=False)

    def network(name: str) -> NetworkInfo:
        info = NetworkInfo(
            wif=CompressionPair(compressed=encode_wif(secret, name, compressed=True)),
            address=CompressionPair(compressed=derive_address(pub_c, name)),
        )
        if include_uncompressed:
            info.wif.uncompressed = encode_wif(secret, name, compressed=False)
            info.address.uncompressed = derive_address(pub_u, name)
        return info

    return WIFInfo(
        input=WIFInput(wif=wif, network=key.network, compressed=key.compressed),
        public_key=CompressionPair(
            compressed=pub_c.hex(), uncompressed=pub_u.hex() if include_uncompressed else None
        ),
        mainnet=network("mainnet"),
        testnet=network("testnet"),
    )


def format_wif_info(info: WIFInfo, color: bool = True) -> str:
    def label(text: str) -> str:
        return style(text, color, dim=True)

    def value(text: str) -> str:
        return style(text, color, fg=typer.colors.GREEN)

    def heading(text: str) -> str:
        return style(text, color, fg=typer.colors.WHITE)

    lines = [
        heading(RULE),
        f"{label('Input WIF:')} {value(info.input.wif)}",
        f"{label('Network:')}  {value(info.input.network)}",
        f"{label('Compressed:')} {value('yes' if info.input.compressed else 'no')}",
        "",
        label("Public Key:"),
        f"  {label('Compressed:')} {value(info.public_key.compressed)}",
    ]
    if info.public_key.uncompressed:
        lines.append(f"  {label('Uncompressed:')} {value(info.public_key.uncompressed)}")

    for title, net in (("MAINNET", info.mainnet), ("TESTNET", info.testnet)):
        lines += [
            "",
            heading(title),
            f"  {label('WIF:')} {value(net.wif.compressed)}",
            f"  {label('Address:')} {value(net.address.compressed)}",
        ]
        if net.wif.uncompressed and net.address.uncompressed:
            lines.append(f"  {label('WIF (uncompressed):')} {value(net.wif.uncompressed)}")
            lines.append(f"  {label('Address (uncompressed):')} {value(net.address.uncompressed)}")

    lines.append(heading(RULE))
    return "\n".join(lines)


@wifinfo_app.command()
def wifinfo(
    wif_arg: str | None = typer.Argument(None, metavar="WIF", help="WIF private key"),
    wif: str | None = typer.Option(None, "--wif", "-w", help="WIF private key to analyze"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output in JSON format"),
    uncompressed: bool = typer.Option(
        False, "--uncompressed", "-u", help="Include uncompressed keys, WIFs, and addresses"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    debug: bool = typer.Option(False, "--debug", help=DEBUG_OPTION_HELP),
) -> None:
    """Show the public key, WIFs and addresses for a private key."""
    setup_logging(log_level(debug))

    with handle_errors():
        wif_string = get_input(wif_arg, wif, "WIF")
        key = decode_wif(wif_string)
        info = wif_info(wif_string, key, include_uncompressed=uncompressed)

    if json_output:
        typer.echo(json.dumps(info.model_dump(exclude_none=True), indent=2))
    else:
        typer.echo(format_wif_info(info, color=not no_color))


def keygen_main() -> None:
    """bsv-keygen entry point."""
    keygen_app()


def wifinfo_main() -> None:
    """bsv-wifinfo entry point."""
    wifinfo_app()
