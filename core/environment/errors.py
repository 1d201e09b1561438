"""
Provenance Environment — Errors
=================================
Faults raised by the external ledger environment.

These are NOT domain rejections. A failed value transfer is an
unrecoverable environment fault: the operation that triggered
it aborts and no state change is observable.
"""


class LedgerEnvironmentError(Exception):
    """Base error for ledger environment faults."""
    pass


class TransferFailedError(LedgerEnvironmentError):
    """The value-transfer primitive refused or failed a transfer."""

    def __init__(self, amount: int, sender, recipient, detail: str = ""):
        self.amount = amount
        self.sender = sender
        self.recipient = recipient
        self.detail = detail
        message = f"Transfer of {amount} from '{sender}' to '{recipient}' failed."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
