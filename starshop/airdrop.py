"""An airdrop contract: events with metric-based eligibility and claim tracking."""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping

from starshop.airdrop_models import AirdropError, AirdropErrorCode, AirdropEvent, EventStats
from starshop.runtime import Address, ContractPanic, Env, MetricProvider, ProviderError


class AirdropContract:
    """Creates airdrop events, checks eligibility against providers, tracks claims."""

    def __init__(self, env: Env) -> None:
        self.env = env
        self._admin: Address | None = None
        self._event_id: int | None = None
        self._events: dict[int, AirdropEvent] = {}
        self._stats: dict[int, EventStats] = {}
        self._claimed: set[tuple[int, Address]] = set()
        self._claimed_users: dict[int, list[Address]] = {}
        self._providers: dict[str, Address] = {}

    def _load_event(self, event_id: int) -> AirdropEvent:
        try:
            return self._events[event_id]
        except KeyError:
            raise AirdropError(AirdropErrorCode.AIRDROP_NOT_FOUND) from None

    def initialize(
        self,
        admin: Address,
        initial_providers: Mapping[str, Address] | None = None,
    ) -> None:
        """Set the admin and optionally register metric providers; allowed once."""
        if self._admin is not None:
            raise AirdropError(AirdropErrorCode.ALREADY_INITIALIZED)
        self.env.require_auth(admin)
        providers = dict(sorted((initial_providers or {}).items()))
        if any(metric == "" for metric in providers):
            raise AirdropError(AirdropErrorCode.INVALID_EVENT_CONFIG)
        self._admin = admin
        self._event_id = 0
        self._providers.update(providers)

    def create_airdrop(
        self,
        admin: Address,
        name: str,
        description: bytes,
        conditions: Mapping[str, int],
        amount: int,
        token_address: Address,
        start_time: int,
        end_time: int,
        max_users: int | None = None,
        max_total_amount: int | None = None,
    ) -> int:
        """Create an active airdrop event and return its id (ids start at 1)."""
        self.env.require_auth(admin)
        if name == "" or not conditions or amount == 0:
            raise AirdropError(AirdropErrorCode.INVALID_EVENT_CONFIG)
        current_time = self.env.timestamp
        if start_time < current_time or end_time <= start_time:
            raise AirdropError(AirdropErrorCode.INVALID_EVENT_CONFIG)
        if any(metric == "" or value == 0 for metric, value in conditions.items()):
            raise AirdropError(AirdropErrorCode.INVALID_EVENT_CONFIG)

        event_id = (self._event_id or 0) + 1
        self._event_id = event_id
        self._events[event_id] = AirdropEvent(
            name=name,
            description=bytes(description),
            conditions=dict(sorted(conditions.items())),
            amount=amount,
            token_address=token_address,
            start_time=start_time,
            end_time=end_time,
            max_users=max_users,
            max_total_amount=max_total_amount,
        )
        self._stats[event_id] = EventStats()
        self.env.publish(
            ("CreatedAirdropEvent", event_id, admin), (current_time, amount)
        )
        return event_id

    def register_provider(self, admin: Address, metric: str, provider: Address) -> None:
        """Register the provider contract that reports a metric."""
        self.env.require_auth(admin)
        if metric == "":
            raise AirdropError(AirdropErrorCode.INVALID_EVENT_CONFIG)
        self._providers[metric] = provider
        self.env.publish(("ProviderRegistered", metric, admin), provider)

    def update_provider(
        self, admin: Address, metric: str, new_provider: Address
    ) -> None:
        """Replace the provider of an already registered metric."""
        self.env.require_auth(admin)
        if metric not in self._providers:
            raise AirdropError(AirdropErrorCode.PROVIDER_NOT_CONFIGURED)
        if metric == "":
            raise AirdropError(AirdropErrorCode.INVALID_EVENT_CONFIG)
        self._providers[metric] = new_provider
        self.env.publish(("ProviderUpdated", metric, admin), new_provider)

    def remove_provider(self, admin: Address, metric: str) -> None:
        """Unregister the provider of a metric."""
        self.env.require_auth(admin)
        if metric not in self._providers:
            raise AirdropError(AirdropErrorCode.PROVIDER_NOT_CONFIGURED)
        del self._providers[metric]
        self.env.publish(("ProviderRemoved", metric, admin), True)

    def pause_event(self, admin: Address, event_id: int) -> None:
        """Deactivate an active event."""
        self.env.require_auth(admin)
        event = self._load_event(event_id)
        if not event.is_active:
            raise AirdropError(AirdropErrorCode.EVENT_INACTIVE)
        self._events[event_id] = replace(event, is_active=False)
        self.env.publish(("EventPaused", event_id, admin), True)

    def resume_event(self, admin: Address, event_id: int) -> None:
        """Reactivate a paused event."""
        self.env.require_auth(admin)
        event = self._load_event(event_id)
        if event.is_active:
            raise AirdropError(AirdropErrorCode.INVALID_EVENT_CONFIG)
        self._events[event_id] = replace(event, is_active=True)
        self.env.publish(("EventResumed", event_id, admin), True)

    def finalize_event(self, admin: Address, event_id: int) -> None:
        """Close an event; closing an inactive event does nothing."""
        self.env.require_auth(admin)
        event = self._load_event(event_id)
        if not event.is_active:
            return
        self._events[event_id] = replace(event, is_active=False)
        self.env.publish(("EventFinalized", event_id, admin), True)

    def set_admin(self, current_admin: Address, new_admin: Address) -> None:
        """Hand admin rights to another address; both sides must authorize."""
        self.env.require_auth(current_admin)
        self.env.require_auth(new_admin)
        self._admin = new_admin
        self.env.publish(("AdminUpdated", current_admin), new_admin)

    def get_event(self, event_id: int) -> AirdropEvent:
        """Return an airdrop event."""
        return self._load_event(event_id)

    def get_event_stats(self, event_id: int) -> EventStats:
        """Return the statistics of an airdrop event."""
        try:
            return self._stats[event_id]
        except KeyError:
            raise AirdropError(AirdropErrorCode.AIRDROP_NOT_FOUND) from None

    def list_claimed_users(self, event_id: int, max_results: int) -> list[Address]:
        """Return up to max_results users who claimed, in claim order."""
        if event_id not in self._events:
            raise AirdropError(AirdropErrorCode.AIRDROP_NOT_FOUND)
        return self._claimed_users.get(event_id, [])[:max_results]

    def get_provider(self, metric: str) -> Address:
        """Return the provider registered for a metric."""
        try:
            return self._providers[metric]
        except KeyError:
            raise AirdropError(AirdropErrorCode.PROVIDER_NOT_CONFIGURED) from None

    def is_admin(self, address: Address) -> bool:
        """Tell whether the address is the admin."""
        return self._admin is not None and self._admin == address

    def check_eligibility(self, user: Address, event_id: int) -> None:
        """Raise AirdropError unless the user meets every condition of the event."""
        event = self._load_event(event_id)
        if (event_id, user) in self._claimed:
            raise AirdropError(AirdropErrorCode.ALREADY_CLAIMED)

        for metric, required_value in sorted(event.conditions.items()):
            if required_value == 0:
                raise AirdropError(AirdropErrorCode.INVALID_EVENT_CONFIG)
            provider_address = self.get_provider(metric)
            try:
                provider = self.env.contract(provider_address)
                if not isinstance(provider, MetricProvider):
                    raise ContractPanic("contract does not provide metrics")
                user_metric = provider.get_user_metric(user, metric)
            except (ProviderError, ContractPanic):
                raise AirdropError(AirdropErrorCode.PROVIDER_CALL_FAILED) from None
            if user_metric < required_value:
                raise AirdropError(AirdropErrorCode.USER_NOT_ELIGIBLE)

        self.env.publish(("EligibilityChecked", event_id, user), True)

    def mark_claimed(self, user: Address, event_id: int) -> None:
        """Record that the user claimed the event; repeated calls change nothing."""
        if self.has_claimed(user, event_id):
            return
        self._claimed.add((event_id, user))
        self._claimed_users.setdefault(event_id, []).append(user)
        self.env.publish(("ClaimMarked", event_id, user), True)

    def has_claimed(self, user: Address, event_id: int) -> bool:
        """Tell whether the user claimed the event."""
        return (event_id, user) in self._claimed

    def is_event_finalized(self, event_id: int) -> bool:
        """Tell whether the event is inactive; unknown events count as finalized."""
        event = self._events.get(event_id)
        return event is None or not event.is_active