"""
Error kinds raised by bsvtools.

Library code raises these; only the CLI boundary turns them into a message
and a process exit code.
"""

from __future__ import annotations


class BsvToolsError(Exception):
    """Base class for all bsvtools errors."""

    exit_code = 1


class NoUTXOsAvailableError(BsvToolsError):
    """No spendable outputs remain after filtering."""


class InsufficientFundsError(BsvToolsError):
    """Candidate outputs cannot cover the target amount plus fee."""

    def __init__(self, available: int, target: int, fee: int):
        self.available = available
        self.target = target
        self.fee = fee
        super().__init__(
            f"insufficient funds: have {available} satoshis, need {target + fee} "
            f"(amount: {target} + fee: ~{fee})"
        )


class InvalidAddressError(BsvToolsError):
    pass


class InvalidKeyError(BsvToolsError):
    pass


class InvalidSelectorCombinationError(BsvToolsError):
    exit_code = 2


class NoSelectorSpecifiedError(BsvToolsError):
    exit_code = 2


class InvalidInputError(BsvToolsError):
    """Missing or non-hex command input."""

    exit_code = 2


class IndexOutOfRangeError(BsvToolsError):
    def __init__(self, kind: str, index: int, count: int):
        self.kind = kind
        self.index = index
        self.count = count
        valid = f"0-{count - 1}" if count else f"transaction has no {kind}s"
        super().__init__(f"{kind} index {index} out of range ({valid})")


class MalformedTransactionError(BsvToolsError):
    pass


class ProviderError(BsvToolsError):
    """Failure talking to WhatsOnChain or ARC."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class SigningFailedError(BsvToolsError):
    pass


class ConfigError(BsvToolsError):
    pass
