"""
Private keys, WIF and P2PKH address utilities.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Literal

import base58
from coincurve import PrivateKey, PublicKey

from bsvtools.constants import (
    MAINNET_P2PKH_PREFIX,
    MAINNET_WIF_PREFIX,
    OP_CHECKSIG,
    OP_DUP,
    OP_EQUALVERIFY,
    OP_HASH160,
    PRIVATE_KEY_LENGTH,
    TESTNET_P2PKH_PREFIX,
    TESTNET_WIF_PREFIX,
    WIF_COMPRESSED_FLAG,
)
from bsvtools.errors import InvalidAddressError, InvalidKeyError

Network = Literal["mainnet", "testnet"]

_ADDRESS_PREFIXES: dict[int, Network] = {
    MAINNET_P2PKH_PREFIX: "mainnet",
    TESTNET_P2PKH_PREFIX: "testnet",
}
_WIF_PREFIXES: dict[int, Network] = {
    MAINNET_WIF_PREFIX: "mainnet",
    TESTNET_WIF_PREFIX: "testnet",
}


def network_name(testnet: bool) -> Network:
    return "testnet" if testnet else "mainnet"


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    h = hashlib.new("ripemd160")
    h.update(hashlib.sha256(data).digest())
    return h.digest()


@dataclass
class WIFKey:
    """A decoded WIF private key"""

    private_key: PrivateKey
    network: Network
    compressed: bool

    @property
    def public_key_bytes(self) -> bytes:
        return self.private_key.public_key.format(compressed=self.compressed)

    def address(self, network: Network | None = None) -> str:
        """P2PKH address for this key, on its own network unless overridden."""
        return derive_address(self.public_key_bytes, network or self.network)


def decode_wif(wif: str) -> WIFKey:
    """
    Decode a WIF string.

    Raises:
        InvalidKeyError: On bad base58, checksum, length, prefix or compression flag
    """
    try:
        decoded = base58.b58decode_check(wif.strip())
    except ValueError as e:
        raise InvalidKeyError(f"invalid WIF: {e}") from e

    if len(decoded) == 1 + PRIVATE_KEY_LENGTH + 1:
        if decoded[-1] != WIF_COMPRESSED_FLAG:
            raise InvalidKeyError(f"invalid compression flag: 0x{decoded[-1]:02x}")
        compressed = True
    elif len(decoded) == 1 + PRIVATE_KEY_LENGTH:
        compressed = False
    else:
        raise InvalidKeyError(f"invalid WIF length: {len(decoded) + 4} bytes")

    network = _WIF_PREFIXES.get(decoded[0])
    if network is None:
        raise InvalidKeyError(f"unknown network prefix: 0x{decoded[0]:02x}")

    try:
        private_key = PrivateKey(decoded[1 : 1 + PRIVATE_KEY_LENGTH])
    except ValueError as e:
        raise InvalidKeyError(f"invalid private key: {e}") from e

    return WIFKey(private_key=private_key, network=network, compressed=compressed)


def encode_wif(secret: bytes, network: Network = "mainnet", compressed: bool = True) -> str:
    prefix = TESTNET_WIF_PREFIX if network == "testnet" else MAINNET_WIF_PREFIX
    payload = bytes([prefix]) + secret
    if compressed:
        payload += bytes([WIF_COMPRESSED_FLAG])
    return base58.b58encode_check(payload).decode()


def derive_address(pubkey: bytes, network: Network = "mainnet") -> str:
    """P2PKH address for a serialized (compressed or uncompressed) public key."""
    return pubkey_hash_to_address(hash160(pubkey), network)


def pubkey_hash_to_address(pubkey_hash: bytes, network: Network = "mainnet") -> str:
    prefix = TESTNET_P2PKH_PREFIX if network == "testnet" else MAINNET_P2PKH_PREFIX
    return base58.b58encode_check(bytes([prefix]) + pubkey_hash).decode()


def decode_address(address: str) -> tuple[bytes, Network]:
    """
    Decode a P2PKH address into (pubkey_hash, network).

    Raises:
        InvalidAddressError: If the address is not a valid P2PKH address
    """
    try:
        decoded = base58.b58decode_check(address)
    except ValueError as e:
        raise InvalidAddressError(f"invalid address {address!r}: {e}") from e

    if len(decoded) != 21:
        raise InvalidAddressError(f"invalid address {address!r}: bad payload length")

    network = _ADDRESS_PREFIXES.get(decoded[0])
    if network is None:
        raise InvalidAddressError(
            f"invalid address {address!r}: unsupported version byte 0x{decoded[0]:02x}"
        )

    return decoded[1:], network


def p2pkh_script(pubkey_hash: bytes) -> bytes:
    """OP_DUP OP_HASH160 <20-byte-pubkeyhash> OP_EQUALVERIFY OP_CHECKSIG"""
    return bytes([OP_DUP, OP_HASH160, 0x14]) + pubkey_hash + bytes([OP_EQUALVERIFY, OP_CHECKSIG])


def address_to_locking_script(address: str) -> bytes:
    pubkey_hash, _ = decode_address(address)
    return p2pkh_script(pubkey_hash)


def parse_public_key(data: bytes) -> PublicKey | None:
    """Parse a serialized secp256k1 public key, None if it is not one."""
    try:
        return PublicKey(data)
    except ValueError:
        return None


@dataclass
class KeyPair:
    private_key: str
    public_key: str
    wif: str
    address: str
    network: Network
    compressed: bool


def generate_key_pair(network: Network = "mainnet", compressed: bool = True) -> KeyPair:
    """Generate a fresh key pair from secure randomness."""
    private_key = PrivateKey()
    pubkey = private_key.public_key.format(compressed=compressed)

    return KeyPair(
        private_key=private_key.secret.hex(),
        public_key=pubkey.hex(),
        wif=encode_wif(private_key.secret, network, compressed),
        address=derive_address(pubkey, network),
        network=network,
        compressed=compressed,
    )
