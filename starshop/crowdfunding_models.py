"""Records kept by the crowdfunding contract: products, contributions, tiers, milestones."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from starshop.runtime import Address


class ProductStatus(Enum):
    """Where a product stands in its funding life cycle."""

    ACTIVE = "active"
    FUNDED = "funded"
    FAILED = "failed"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Product:
    """A product seeking funding from contributors."""

    id: int
    creator: Address
    name: str
    description: str
    funding_goal: int
    deadline: int
    status: ProductStatus = ProductStatus.ACTIVE
    total_funded: int = 0


@dataclass(frozen=True)
class Contribution:
    """An amount one contributor put into a product at a given time."""

    contributor: Address
    amount: int
    timestamp: int


@dataclass(frozen=True)
class RewardTier:
    """A reward granted to contributors who gave at least min_contribution."""

    id: int
    min_contribution: int
    description: str
    discount: int


@dataclass(frozen=True)
class Milestone:
    """A step the creator promises to deliver."""

    id: int
    description: str
    target_date: int
    completed: bool = False