import pytest

from starshop.runtime import Address, AuthError, Env, Token
from starshop.transfers import (
    DisputeContract,
    DisputeDecision,
    DisputeError,
    RefundContract,
    RefundError,
    TransactionContract,
    TransactionError,
)

FUNDS = 1000


@pytest.fixture
def env():
    env = Env()
    env.mock_all_auths()
    return env


@pytest.fixture
def token(env):
    return Token(env)


@pytest.fixture
def payer(token):
    address = Address.generate()
    token.mint(address, FUNDS)
    return address


def test_decision_values_fixed_by_wire_format():
    assert DisputeDecision(0) is DisputeDecision.REFUND_BUYER
    assert DisputeDecision(1) is DisputeDecision.PAY_SELLER
    with pytest.raises(ValueError):
        DisputeDecision(2)


@pytest.mark.parametrize(
    "decision, pays_buyer",
    [(DisputeDecision.REFUND_BUYER, True), (DisputeDecision.PAY_SELLER, False)],
)
def test_resolve_dispute_pays_chosen_party(env, token, payer, decision, pays_buyer):
    buyer, seller = Address.generate(), Address.generate()
    DisputeContract(env).resolve_dispute(token, payer, buyer, seller, 300, decision)
    winner, loser = (buyer, seller) if pays_buyer else (seller, buyer)
    assert token.balance(winner) == 300
    assert token.balance(loser) == 0
    assert token.balance(payer) + token.balance(winner) == FUNDS
    assert env.events[-1].topics == ("dispute",)
    assert env.events[-1].data == (payer, buyer, seller, 300, int(decision))


def test_resolve_dispute_accepts_plain_int_decision(env, token, payer):
    buyer, seller = Address.generate(), Address.generate()
    DisputeContract(env).resolve_dispute(token, payer, buyer, seller, 50, 1)
    assert token.balance(seller) == 50


@pytest.mark.parametrize("amount", [0, -5])
def test_resolve_dispute_invalid_amount(env, token, payer, amount):
    with pytest.raises(DisputeError) as info:
        DisputeContract(env).resolve_dispute(
            token, payer, Address.generate(), Address.generate(), amount, 0
        )
    assert info.value.code == DisputeError.INVALID_AMOUNT
    assert token.balance(payer) == FUNDS


def test_resolve_dispute_insufficient_funds(env, token, payer):
    with pytest.raises(DisputeError) as info:
        DisputeContract(env).resolve_dispute(
            token, payer, Address.generate(), Address.generate(), FUNDS + 1, 0
        )
    assert info.value.code == DisputeError.INSUFFICIENT_FUNDS


def test_resolve_dispute_requires_auth():
    env = Env()
    token = Token(env)
    arbitrator = Address.generate()
    token.mint(arbitrator, FUNDS)
    with pytest.raises(AuthError):
        DisputeContract(env).resolve_dispute(
            token, arbitrator, Address.generate(), Address.generate(), 10, 0
        )
    assert token.balance(arbitrator) == FUNDS


def test_process_refund_moves_tokens(env, token, payer):
    to = Address.generate()
    RefundContract(env).process_refund(token, payer, to, 250)
    assert token.balance(to) == 250
    assert token.balance(payer) + token.balance(to) == FUNDS
    assert env.events[-1].topics == ("refund",)
    assert env.events[-1].data == (payer, to, 250)


def test_process_refund_to_self_rejected(env, token, payer):
    with pytest.raises(RefundError) as info:
        RefundContract(env).process_refund(token, payer, payer, 10)
    assert info.value.code == RefundError.UNAUTHORIZED_ACCESS


def test_process_refund_invalid_amount(env, token, payer):
    with pytest.raises(RefundError) as info:
        RefundContract(env).process_refund(token, payer, Address.generate(), 0)
    assert info.value.code == RefundError.INVALID_AMOUNT


def test_process_refund_insufficient_funds(env, token, payer):
    to = Address.generate()
    with pytest.raises(RefundError) as info:
        RefundContract(env).process_refund(token, payer, to, FUNDS + 1)
    assert info.value.code == RefundError.INSUFFICIENT_FUNDS
    assert token.balance(to) == 0


def test_process_deposit_moves_tokens(env, token, payer):
    to = Address.generate()
    TransactionContract(env).process_deposit(token, payer, to, FUNDS)
    assert token.balance(to) == FUNDS
    assert token.balance(payer) == 0
    assert env.events[-1].topics == ("deposit",)
    assert env.events[-1].data == (payer, to, FUNDS)


def test_process_deposit_errors(env, token, payer):
    contract = TransactionContract(env)
    with pytest.raises(TransactionError) as info:
        contract.process_deposit(token, payer, Address.generate(), -1)
    assert info.value.code == TransactionError.INVALID_AMOUNT
    with pytest.raises(TransactionError) as info:
        contract.process_deposit(token, payer, payer, 1)
    assert info.value.code == TransactionError.UNAUTHORIZED_ACCESS
    with pytest.raises(TransactionError) as info:
        contract.process_deposit(token, payer, Address.generate(), FUNDS + 1)
    assert info.value.code == TransactionError.INSUFFICIENT_FUNDS


def test_error_codes_shared_and_validated():
    assert RefundError.INSUFFICIENT_FUNDS == DisputeError.INSUFFICIENT_FUNDS
    assert TransactionError.TRANSFER_FAILED == RefundError.TRANSFER_FAILED
    with pytest.raises(ValueError):
        TransactionError(42)