"""Records and errors of the airdrop contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from starshop.runtime import Address


class AirdropErrorCode(IntEnum):
    """Reasons the airdrop contract refuses a call."""

    ALREADY_INITIALIZED = 1
    UNAUTHORIZED = 2
    INVALID_TOKEN_CONFIG = 3
    AIRDROP_NOT_FOUND = 4
    USER_NOT_ELIGIBLE = 5
    ALREADY_CLAIMED = 6
    INSUFFICIENT_CONTRACT_BALANCE = 7
    TOKEN_TRANSFER_FAILED = 8
    CONDITION_NOT_FOUND = 9
    INVALID_AMOUNT = 10
    PROVIDER_NOT_CONFIGURED = 11
    PROVIDER_CALL_FAILED = 12
    EVENT_INACTIVE = 13
    CAP_EXCEEDED = 14
    INVALID_EVENT_CONFIG = 15


class AirdropError(Exception):
    """Error reported by the airdrop contract; `code` says which one."""

    def __init__(self, code: AirdropErrorCode | int) -> None:
        self.code = AirdropErrorCode(code)
        super().__init__(self.code.name.lower().replace("_", " "))


@dataclass(frozen=True)
class AirdropEvent:
    """An airdrop with eligibility conditions and distribution limits."""

    name: str
    description: bytes
    conditions: dict[str, int]
    amount: int
    token_address: Address
    start_time: int
    end_time: int
    max_users: int | None = None
    max_total_amount: int | None = None
    is_active: bool = True


@dataclass(frozen=True)
class EventStats:
    """How many users claimed an airdrop and how much went out."""

    recipient_count: int = 0
    total_amount_distributed: int = 0