# starshop

Marketplace contracts that run in memory on a simulated ledger. Each
contract is an ordinary Python object bound to an `Env`. The `Env` holds the
ledger time, checks authorisation, keeps the list of published events and
lets contracts find each other by address.

## What is in the package

- `starshop.runtime`: the shared pieces.
  - `Env` has a `timestamp`, an `events` list and an `auths` list, with
    `require_auth`, `mock_all_auths`, `publish`, `register` and `contract`.
  - `Address.generate()` returns a fresh address.
  - `Token` is a fungible token with `balance`, `mint` and `transfer`.
  - `MetricProvider` is the protocol a metric source implements. A metric
    source is any object with `get_user_metric(user, metric)`.
  - The exceptions are `ContractPanic`, `AuthError` (a `ContractPanic`) and
    `ProviderError`.
- `starshop.airdrop.AirdropContract`: airdrop events.
  - Eligibility conditions are checked against registered metric providers.
  - Provider registration, pausing, resuming and finalising.
  - Claim tracking (`mark_claimed`, `has_claimed`, `list_claimed_users`) and
    event statistics.
  - Its records and errors live in `starshop.airdrop_models`: `AirdropEvent`,
    `EventStats`, `AirdropError` and `AirdropErrorCode`.
- `starshop.crowdfunding.CrowdfundingCollective`: crowdfunded products.
  - Products have reward tiers and milestones.
  - Contributions are capped at the funding goal.
  - Funds are distributed once every milestone is complete, contributors are
    refunded after a missed deadline, and rewards are claimed by tier.
  - Its records live in `starshop.crowdfunding_models`: `Product`,
    `ProductStatus`, `Contribution`, `RewardTier` and `Milestone`.
- `starshop.nft.NFTContract`: mints, transfers and burns NFTs, and updates
  their metadata (admin only).
- `starshop.payment.PaymentContract`: admin set-up, admin hand-over, and
  recording a 32-byte code hash through `upgrade`.
- `starshop.transfers`: `DisputeContract`, `RefundContract` and
  `TransactionContract`, which move `Token` balances after checking the
  amount and the sender's funds.
- `starshop.example.HelloContract`: `hello(name)` returns `["Hello", name]`.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Authorisation and errors

By default every `Env.require_auth` call raises `AuthError`. After
`env.mock_all_auths()`, every call succeeds and the address is appended to
`env.auths`.

Contracts report failures by raising exceptions:

- `ContractPanic` is an unrecoverable failure, for example "NFT not exist" or
  "Product is not active".
- `AirdropError`, `PaymentError`, `DisputeError`, `RefundError` and
  `TransactionError` carry a `code` attribute that says what went wrong.

## NFTs

```python
from starshop.runtime import Address, Env
from starshop.nft import NFTContract

env = Env()
env.mock_all_auths()

nft = NFTContract(env)
admin = Address.generate()
nft.initialize(admin)

owner = Address.generate()
token_id = nft.mint_nft(owner, "Ticket", "Entry pass", ["row_1"])
assert token_id == 1
assert nft.get_metadata(token_id).attributes == ("row_1",)

buyer = Address.generate()
nft.transfer_nft(owner, buyer, token_id)
assert nft.get_nft(token_id).owner == buyer
```

## Tokens and refunds

```python
from starshop.runtime import Address, Env, Token
from starshop.transfers import RefundContract

env = Env()
env.mock_all_auths()
token = Token(env)

seller, buyer = Address.generate(), Address.generate()
token.mint(seller, 500)

RefundContract(env).process_refund(token, seller, buyer, 200)
assert token.balance(buyer) == 200
assert token.balance(seller) == 300
```

## Airdrop eligibility

A metric provider is registered in the `Env`. The airdrop contract looks it
up by metric name.

```python
from starshop.runtime import Address, Env, Token
from starshop.airdrop import AirdropContract


class Referrals:
    def __init__(self, counts):
        self.counts = counts

    def get_user_metric(self, user, metric):
        return self.counts.get(user, 0)


env = Env(timestamp=100)
env.mock_all_auths()

admin, alice = Address.generate(), Address.generate()
provider_address = env.register(Referrals({alice: 5}))

airdrop = AirdropContract(env)
airdrop.initialize(admin, {"referrals": provider_address})

token = Token(env)
event_id = airdrop.create_airdrop(
    admin, "July", b"Referral rewards", {"referrals": 3},
    100, token.address, 100, 200,
)

airdrop.check_eligibility(alice, event_id)  # raises AirdropError if not eligible
airdrop.mark_claimed(alice, event_id)
assert airdrop.list_claimed_users(event_id, 10) == [alice]
```

## What the package does not do

- All state lives in the contract objects and the `Env`; nothing is saved to
  disk.
- There is no command-line tool.
- `AirdropContract` checks eligibility and records claims, but it does not
  pay anyone out. It has no claim or batch-distribution call that moves
  tokens, and it leaves `EventStats` at zero.
- `CrowdfundingCollective` moves no tokens either. Distribution, refunds and
  reward claims only change product status and publish events.
- `PaymentContract.upgrade` records the new code hash and nothing more.

## Running the tests

```
pytest
```