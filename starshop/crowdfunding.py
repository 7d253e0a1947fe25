"""A crowdfunding contract: products are funded, tracked by milestones and rewarded."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from starshop.crowdfunding_models import (
    Contribution,
    Milestone,
    Product,
    ProductStatus,
    RewardTier,
)
from starshop.runtime import Address, ContractPanic, Env


class CrowdfundingCollective:
    """Collects contributions for products and releases them as milestones are met."""

    def __init__(self, env: Env) -> None:
        self.env = env
        self.admin: Address | None = None
        self._next_product_id: int | None = None
        self._products: dict[int, Product] = {}
        self._contributions: dict[int, list[Contribution]] = {}
        self._rewards: dict[int, list[RewardTier]] = {}
        self._milestones: dict[int, list[Milestone]] = {}
        self._totals: dict[int, int] = {}

    def initialize(self, admin: Address) -> None:
        """Set the admin and reset product numbering; the admin must authorize."""
        self.env.require_auth(admin)
        self.admin = admin
        self._next_product_id = 1

    def _load_product(self, product_id: int) -> Product:
        try:
            return self._products[product_id]
        except KeyError:
            raise ContractPanic("Product not found") from None

    def _take_product_id(self) -> int:
        product_id = 1 if self._next_product_id is None else self._next_product_id
        self._next_product_id = product_id + 1
        return product_id

    def create_product(
        self,
        creator: Address,
        name: str,
        description: str,
        funding_goal: int,
        deadline: int,
        reward_tiers: Iterable[RewardTier],
        milestones: Iterable[Milestone],
    ) -> int:
        """Open a product for funding and return its id."""
        self.env.require_auth(creator)
        if funding_goal <= 0:
            raise ContractPanic("Funding goal must be greater than zero")
        if deadline <= self.env.timestamp:
            raise ContractPanic("Deadline must be in the future")

        product_id = self._take_product_id()
        self._products[product_id] = Product(
            id=product_id,
            creator=creator,
            name=name,
            description=description,
            funding_goal=funding_goal,
            deadline=deadline,
        )
        self._rewards[product_id] = list(reward_tiers)
        self._milestones[product_id] = list(milestones)
        self._contributions[product_id] = []
        self._totals[product_id] = 0
        return product_id

    def contribute(self, contributor: Address, product_id: int, amount: int) -> None:
        """Add a contribution; the product becomes funded once its goal is reached."""
        self.env.require_auth(contributor)
        product = self._load_product(product_id)
        if product.status is not ProductStatus.ACTIVE:
            raise ContractPanic("Product is not active")
        if self.env.timestamp > product.deadline:
            raise ContractPanic("Funding period has ended")
        if amount <= 0:
            raise ContractPanic("Contribution must be greater than zero")

        new_total = self._totals.get(product_id, 0) + amount
        if new_total > product.funding_goal:
            raise ContractPanic("Contribution would exceed funding goal")

        self._contributions.setdefault(product_id, []).append(
            Contribution(contributor, amount, self.env.timestamp)
        )
        self._totals[product_id] = new_total
        status = (
            ProductStatus.FUNDED if new_total >= product.funding_goal else product.status
        )
        self._products[product_id] = replace(
            product, total_funded=new_total, status=status
        )
        self.env.publish(("Contribution", product_id, contributor), amount)

    def distribute_funds(self, product_id: int) -> None:
        """Complete a funded product whose milestones are all done."""
        product = self._load_product(product_id)
        if product.status is not ProductStatus.FUNDED:
            raise ContractPanic("Product is not funded")
        if not all(m.completed for m in self._milestones.get(product_id, [])):
            raise ContractPanic("Not all milestones are completed")

        product = replace(product, status=ProductStatus.COMPLETED)
        self._products[product_id] = product
        self.env.publish(("FundsDistributed", product_id), product.total_funded)

    def refund_contributors(self, product_id: int) -> None:
        """Fail an active product past its deadline and refund every contribution."""
        product = self._load_product(product_id)
        if product.status is not ProductStatus.ACTIVE:
            raise ContractPanic("Product is not active")
        if self.env.timestamp <= product.deadline:
            raise ContractPanic("Funding period has not ended")

        self._products[product_id] = replace(product, status=ProductStatus.FAILED)
        for contribution in self._contributions.get(product_id, []):
            self.env.publish(
                ("Refund", product_id, contribution.contributor), contribution.amount
            )
        self._contributions[product_id] = []
        self._totals[product_id] = 0

    def claim_reward(self, contributor: Address, product_id: int) -> RewardTier:
        """Claim the highest reward tier the contributor's total reaches."""
        self.env.require_auth(contributor)
        product = self._load_product(product_id)
        if product.status is not ProductStatus.COMPLETED:
            raise ContractPanic("Product is not completed")

        total_contributed = sum(
            c.amount
            for c in self._contributions.get(product_id, [])
            if c.contributor == contributor
        )
        if total_contributed == 0:
            raise ContractPanic("No contributions found for this contributor")

        eligible: RewardTier | None = None
        for tier in self._rewards.get(product_id, []):
            if total_contributed >= tier.min_contribution and (
                eligible is None or tier.min_contribution > eligible.min_contribution
            ):
                eligible = tier
        if eligible is None:
            raise ContractPanic("No eligible reward tier found")

        self.env.publish(("RewardClaimed", product_id, contributor), eligible.id)
        return eligible

    def update_milestone(
        self, creator: Address, product_id: int, milestone_id: int
    ) -> None:
        """Mark a milestone of a funded product as completed; creator only."""
        self.env.require_auth(creator)
        product = self._load_product(product_id)
        if product.creator != creator:
            raise ContractPanic("Only the creator can update milestones")
        if product.status is not ProductStatus.FUNDED:
            raise ContractPanic("Product is not funded")

        milestones = self._milestones.setdefault(product_id, [])
        if not 0 <= milestone_id < len(milestones):
            raise ContractPanic("Milestone not found")
        milestone = milestones[milestone_id]
        if milestone.completed:
            raise ContractPanic("Milestone already completed")

        milestones[milestone_id] = replace(milestone, completed=True)
        self.env.publish(("MilestoneCompleted", product_id), milestone_id)

    def get_product(self, product_id: int) -> Product:
        """Return a product."""
        return self._load_product(product_id)

    def get_contributions(self, product_id: int) -> list[Contribution]:
        """Return a product's contributions in the order they were made."""
        return list(self._contributions.get(product_id, []))

    def get_milestones(self, product_id: int) -> list[Milestone]:
        """Return a product's milestones."""
        return list(self._milestones.get(product_id, []))

    def get_reward_tiers(self, product_id: int) -> list[RewardTier]:
        """Return a product's reward tiers."""
        return list(self._rewards.get(product_id, []))