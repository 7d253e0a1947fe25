"""Token movements: dispute resolution, refunds and deposits."""

from __future__ import annotations

from enum import IntEnum

from starshop.runtime import Address, Env, Token


class DisputeDecision(IntEnum):
    """Which party an arbitrator pays out to."""

    REFUND_BUYER = 0
    PAY_SELLER = 1


class _TransferFailure(Exception):
    """Error reported by a contract that moves tokens."""

    INSUFFICIENT_FUNDS = 1
    TRANSFER_FAILED = 2
    INVALID_AMOUNT = 3
    UNAUTHORIZED_ACCESS = 4

    _MESSAGES = {
        INSUFFICIENT_FUNDS: "insufficient funds",
        TRANSFER_FAILED: "transfer failed",
        INVALID_AMOUNT: "invalid amount",
        UNAUTHORIZED_ACCESS: "unauthorized access",
    }

    def __init__(self, code: int) -> None:
        if code not in self._MESSAGES:
            raise ValueError(f"unknown error code: {code}")
        self.code = code
        super().__init__(self._MESSAGES[code])


class DisputeError(_TransferFailure):
    """Error reported by the dispute contract."""


class RefundError(_TransferFailure):
    """Error reported by the refund contract."""


class TransactionError(_TransferFailure):
    """Error reported by the transaction contract."""


def _checked_transfer(
    error: type[_TransferFailure],
    token: Token,
    sender: Address,
    recipient: Address,
    amount: int,
) -> None:
    if token.balance(sender) < amount:
        raise error(error.INSUFFICIENT_FUNDS)
    token.transfer(sender, recipient, amount)


class DisputeContract:
    """Lets an arbitrator settle a dispute by paying buyer or seller."""

    def __init__(self, env: Env) -> None:
        self.env = env

    def resolve_dispute(
        self,
        token: Token,
        arbitrator: Address,
        buyer: Address,
        seller: Address,
        refund_amount: int,
        decision: DisputeDecision | int,
    ) -> None:
        """Pay refund_amount from the arbitrator to the party the decision names."""
        decision = DisputeDecision(decision)
        self.env.require_auth(arbitrator)
        if refund_amount <= 0:
            raise DisputeError(DisputeError.INVALID_AMOUNT)
        recipient = buyer if decision is DisputeDecision.REFUND_BUYER else seller
        _checked_transfer(DisputeError, token, arbitrator, recipient, refund_amount)
        self.env.publish(
            ("dispute",),
            (arbitrator, buyer, seller, refund_amount, int(decision)),
        )


class RefundContract:
    """Sends refunds from a signer to another address."""

    def __init__(self, env: Env) -> None:
        self.env = env

    def process_refund(
        self, token: Token, signer: Address, to: Address, refund_amount: int
    ) -> None:
        """Move refund_amount from signer to `to`; the two must differ."""
        self.env.require_auth(signer)
        if refund_amount <= 0:
            raise RefundError(RefundError.INVALID_AMOUNT)
        if signer == to:
            raise RefundError(RefundError.UNAUTHORIZED_ACCESS)
        _checked_transfer(RefundError, token, signer, to, refund_amount)
        self.env.publish(("refund",), (signer, to, refund_amount))


class TransactionContract:
    """Records deposits from a signer to another address."""

    def __init__(self, env: Env) -> None:
        self.env = env

    def process_deposit(
        self, token: Token, signer: Address, to: Address, amount_to_deposit: int
    ) -> None:
        """Move amount_to_deposit from signer to `to`; the two must differ."""
        self.env.require_auth(signer)
        if amount_to_deposit <= 0:
            raise TransactionError(TransactionError.INVALID_AMOUNT)
        if signer == to:
            raise TransactionError(TransactionError.UNAUTHORIZED_ACCESS)
        _checked_transfer(TransactionError, token, signer, to, amount_to_deposit)
        self.env.publish(("deposit",), (signer, to, amount_to_deposit))