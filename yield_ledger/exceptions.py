"""
Ledger error kinds.

All errors subclass ValueError so callers that only care about
"the request was invalid" can keep catching ValueError. The API
layer maps each kind to an HTTP status.

Every service raises before it writes, or raises inside a database
transaction that the caller rolls back. A raised LedgerError never
leaves a partial effect behind.
"""


class LedgerError(ValueError):
    """Base class for every error raised by the ledger core."""


class NotFound(LedgerError):
    pass


class InvalidAmount(LedgerError):
    pass


class InvalidKind(LedgerError):
    pass


class InsufficientBalance(LedgerError):
    pass


class AlreadyProcessed(LedgerError):
    """The transaction is no longer pending. Nothing to do."""


class AlreadyPaidOut(LedgerError):
    """The investment payout has already been credited. Nothing to do."""


class EmptyReason(LedgerError):
    pass


class Unauthorized(LedgerError):
    pass


class InvalidState(LedgerError):
    pass


class PlanAlreadyActive(LedgerError):
    pass


class Conflict(LedgerError):
    pass
