"""
Bitcoin SV transaction constants.

Size figures approximate a standard P2PKH spend:
- input: 32 prevtxid + 4 vout + 1 script length + ~107 unlocking script + 4 sequence
- output: 8 value + 1 script length + 25 locking script
"""

from __future__ import annotations

# Transaction size estimation (bytes)
INPUT_SIZE = 148
OUTPUT_SIZE = 34
BASE_TX_SIZE = 10

# Fee policy
MIN_FEE = 100  # satoshis, hard floor
DEFAULT_FEE_PER_KB = 100  # satoshis per 1000 bytes

# Selection always budgets for a payment and a change output
SELECTION_OUTPUT_COUNT = 2

# Transaction defaults
TX_VERSION = 1
DEFAULT_SEQUENCE = 0xFFFFFFFF
DEFAULT_LOCKTIME = 0

# Locktime values below this are block heights, at or above are unix timestamps
LOCKTIME_THRESHOLD = 500_000_000

SATOSHIS_PER_BSV = 100_000_000

# Base58Check version bytes
MAINNET_P2PKH_PREFIX = 0x00
TESTNET_P2PKH_PREFIX = 0x6F
MAINNET_WIF_PREFIX = 0x80
TESTNET_WIF_PREFIX = 0xEF
WIF_COMPRESSED_FLAG = 0x01
PRIVATE_KEY_LENGTH = 32

# Signature hash flags (BSV requires FORKID on every signature)
SIGHASH_ALL = 0x01
SIGHASH_FORKID = 0x40
SIGHASH_ALL_FORKID = SIGHASH_ALL | SIGHASH_FORKID

# Script opcodes used by the P2PKH templates and the push walker
OP_PUSHDATA1 = 0x4C
OP_DUP = 0x76
OP_HASH160 = 0xA9
OP_EQUALVERIFY = 0x88
OP_CHECKSIG = 0xAC
MAX_DIRECT_PUSH = 75

# keygen limits
MAX_KEYGEN_COUNT = 100
