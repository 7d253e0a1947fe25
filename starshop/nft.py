"""A non-fungible token contract with minting, metadata and transfers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from starshop.runtime import Address, ContractPanic, Env


@dataclass(frozen=True)
class NFTMetadata:
    """Descriptive data attached to a token."""

    name: str
    description: str
    attributes: tuple[str, ...]


@dataclass(frozen=True)
class NFTDetail:
    """A token's owner and metadata."""

    owner: Address
    metadata: NFTMetadata


class NFTContract:
    """Mints, transfers, burns and describes NFTs."""

    def __init__(self, env: Env) -> None:
        self.env = env
        self._admin: Address | None = None
        self._counter: int | None = None
        self._tokens: dict[int, NFTDetail] = {}

    def initialize(self, admin: Address) -> None:
        """Set the admin and reset the token counter; allowed once."""
        if self._admin is not None:
            raise ContractPanic("Already initialized")
        self._admin = admin
        self._counter = 0

    def _check_admin(self, caller: Address) -> None:
        if self._admin is None:
            raise ContractPanic("Contract not initialized")
        if caller != self._admin:
            raise ContractPanic("Unauthorized")

    def _load(self, token_id: int) -> NFTDetail:
        try:
            return self._tokens[token_id]
        except KeyError:
            raise ContractPanic("NFT not exist") from None

    def mint_nft(
        self, to: Address, name: str, description: str, attributes: Iterable[str]
    ) -> int:
        """Create a token owned by `to` and return its id (ids start at 1)."""
        self.env.require_auth(to)
        if self._counter is None:
            raise ContractPanic("Contract not initialized")
        self._counter += 1
        token_id = self._counter
        metadata = NFTMetadata(name, description, tuple(attributes))
        self._tokens[token_id] = NFTDetail(to, metadata)
        return token_id

    def transfer_nft(self, from_: Address, to: Address, token_id: int) -> None:
        """Hand a token from its owner to another address."""
        self.env.require_auth(from_)
        nft = self._load(token_id)
        if nft.owner != from_:
            raise ContractPanic("You are not the owner")
        self._tokens[token_id] = replace(nft, owner=to)

    def burn_nft(self, owner: Address, token_id: int) -> None:
        """Destroy a token; only its owner may do so."""
        self.env.require_auth(owner)
        nft = self._load(token_id)
        if nft.owner != owner:
            raise ContractPanic("You can't burn this NFT")
        del self._tokens[token_id]

    def update_metadata(
        self,
        admin: Address,
        token_id: int,
        name: str,
        description: str,
        attributes: Iterable[str],
    ) -> None:
        """Replace a token's metadata; admin only."""
        self._check_admin(admin)
        nft = self._load(token_id)
        metadata = NFTMetadata(name, description, tuple(attributes))
        self._tokens[token_id] = replace(nft, metadata=metadata)

    def get_metadata(self, token_id: int) -> NFTMetadata:
        """Return a token's metadata."""
        return self._load(token_id).metadata

    def get_nft(self, token_id: int) -> NFTDetail | None:
        """Return the stored token, or None if it does not exist."""
        return self._tokens.get(token_id)