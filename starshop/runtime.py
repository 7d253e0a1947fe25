"""Execution environment shared by the contracts: addresses, auth, events, tokens."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

_address_counter = itertools.count(1)


@dataclass(frozen=True, order=True)
class Address:
    """An account or contract address."""

    value: str

    @classmethod
    def generate(cls) -> "Address":
        """Return a fresh address that differs from every address generated before."""
        return cls(f"G{next(_address_counter):055d}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Event:
    """A published contract event: a tuple of topics and a data payload."""

    topics: tuple
    data: Any


class ContractPanic(Exception):
    """A contract aborted the call."""


class AuthError(ContractPanic):
    """An address did not authorize the call that required it."""


class ProviderError(Exception):
    """Error reported by a metric provider."""

    INVALID_USER = 1
    METRIC_NOT_SUPPORTED = 2
    INTERNAL_ERROR = 3

    _MESSAGES = {
        INVALID_USER: "invalid user",
        METRIC_NOT_SUPPORTED: "metric not supported",
        INTERNAL_ERROR: "internal error",
    }

    def __init__(self, code: int) -> None:
        if code not in self._MESSAGES:
            raise ValueError(f"unknown provider error code: {code}")
        self.code = code
        super().__init__(self._MESSAGES[code])


@runtime_checkable
class MetricProvider(Protocol):
    """A contract that reports per-user metrics (referrals, subscriptions, ...)."""

    def get_user_metric(self, user: Address, metric: str) -> int:
        """Return the user's value for the metric (1/0 for booleans).

        Raises ProviderError when the value cannot be given.
        """
        ...


@dataclass
class Env:
    """Ledger state visible to contracts: time, authorizations, events, contracts."""

    timestamp: int = 0
    events: list[Event] = field(default_factory=list)
    auths: list[Address] = field(default_factory=list)
    _mock_auths: bool = field(default=False, init=False, repr=False)
    _contracts: dict[Address, Any] = field(default_factory=dict, init=False, repr=False)

    def mock_all_auths(self) -> None:
        """Treat every require_auth call as satisfied from now on."""
        self._mock_auths = True

    def require_auth(self, address: Address) -> None:
        """Demand that the address authorized the current call."""
        if not self._mock_auths:
            raise AuthError(f"authorization missing for {address}")
        self.auths.append(address)

    def publish(self, topics: Any, data: Any) -> Event:
        """Record an event and return it."""
        if not isinstance(topics, tuple):
            topics = (topics,)
        event = Event(topics, data)
        self.events.append(event)
        return event

    def register(self, contract: Any) -> Address:
        """Give the contract an address and make it reachable through it."""
        address = Address.generate()
        self._contracts[address] = contract
        return address

    def contract(self, address: Address) -> Any:
        """Return the contract registered at the address."""
        try:
            return self._contracts[address]
        except KeyError:
            raise ContractPanic(f"no contract registered at {address}") from None


class Token:
    """A fungible token holding balances per address."""

    def __init__(self, env: Env) -> None:
        self.env = env
        self._balances: dict[Address, int] = {}
        self.address = env.register(self)

    def balance(self, address: Address) -> int:
        """Return the address's balance (0 if it never held any)."""
        return self._balances.get(address, 0)

    def mint(self, to: Address, amount: int) -> None:
        """Credit newly created tokens to an address."""
        if amount < 0:
            raise ContractPanic("negative amount is not allowed")
        self._balances[to] = self.balance(to) + amount
        self.env.publish(("mint", to), amount)

    def transfer(self, from_: Address, to: Address, amount: int) -> None:
        """Move tokens between addresses; the sender must authorize."""
        self.env.require_auth(from_)
        if amount < 0:
            raise ContractPanic("negative amount is not allowed")
        if self.balance(from_) < amount:
            raise ContractPanic("balance is not sufficient to spend")
        self._balances[from_] = self.balance(from_) - amount
        self._balances[to] = self.balance(to) + amount
        self.env.publish(("transfer", from_, to), amount)