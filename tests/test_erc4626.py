"""Tests for the share/asset conversion engine and the vault entry points."""

import random

import pytest

from pyvault.utils.Mixer import Mixer, Address, ChainID, Metadata, InstanceType
from pyvault.mocks.token import Token
from pyvault.openzeppelin.interfaces import UnboundedCeiling
from pyvault.openzeppelin.libraries.errors_lib import (
    ArithmeticRevert,
    ExternalCallRevert,
    Revert,
    ValidationRevert,
)
from pyvault.openzeppelin.types import Deposit, Transfer, Withdraw
from pyvault.openzeppelin.utils.math.math import Math
from pyvault.vault.types import VaultConfig
from pyvault.vault.vault import Vault

from conftest import MAX_UINT256, deploy_vault, fund


class FalseReturningToken(Token):
    def transfer_from(self, from_, to, value, sender=Mixer.ZERO_ADDRESS) -> bool:
        return False


class RevertingDecimalsToken(Token):
    def decimals(self, sender=Mixer.ZERO_ADDRESS) -> int:
        raise Revert("no decimals")


class BrokenDecimalsToken(Token):
    def decimals(self, sender=Mixer.ZERO_ADDRESS) -> int:
        raise RuntimeError("asset is broken")


class BoolDecimalsToken(Token):
    def decimals(self, sender=Mixer.ZERO_ADDRESS):
        return True


class DepositCap(UnboundedCeiling):
    def __init__(self, cap):
        self.cap = cap

    def max_deposit(self, vault, receiver):
        return self.cap


def donate(token, vault, amount):
    """Sends assets straight to the vault, without minting any share."""
    donor = Address.new()
    token.mint(donor, amount)
    token.transfer(vault.metadata.address, amount, donor)


# =============================================================================
# Scenarios
# =============================================================================

def test_first_deposit_into_empty_vault(token, vault, alice):
    fund(token, vault, alice, 1000)

    shares = vault.deposit(1000, alice, alice)

    assert shares == 1000
    assert vault.balance_of(alice) == 1000
    assert vault.total_supply() == 1000
    assert vault.total_assets() == 1000
    assert token.balance_of(alice) == 0


def test_second_deposit_at_parity(token, vault, alice, bob):
    fund(token, vault, alice, 1000)
    fund(token, vault, bob, 500)
    vault.deposit(1000, alice, alice)

    assert vault.deposit(500, bob, bob) == 500
    assert vault.total_supply() == 1500
    assert vault.total_assets() == 1500


def test_deposit_emits_records(token, vault, alice, bob):
    fund(token, vault, alice, 1000)
    vault.deposit(1000, bob, alice)

    vault_address = vault.metadata.address
    assert [log.event for log in Mixer.get_logs(vault_address, Deposit)] == [
        Deposit(alice, bob, 1000, 1000)
    ]
    assert [log.event for log in Mixer.get_logs(vault_address, Transfer)] == [
        Transfer(Mixer.ZERO_ADDRESS, bob, 1000)
    ]
    assert [log.event for log in Mixer.get_logs(token.metadata.address, Transfer)][-1] == Transfer(
        alice, vault_address, 1000
    )
    assert Mixer.get_logs(vault_address, Deposit)[0].block_timestamp == Mixer.block_timestamp()


# =============================================================================
# Rounding
# =============================================================================

@pytest.fixture
def uneven_vault(token, vault, alice):
    """1000 shares over 1500 assets."""
    fund(token, vault, alice, 1000)
    vault.deposit(1000, alice, alice)
    donate(token, vault, 500)
    return vault


def test_previews_round_against_the_caller(uneven_vault):
    vault = uneven_vault
    # 100 * 1001 / 1501 = 66.69
    assert vault.preview_deposit(100) == 66
    assert vault.preview_withdraw(100) == 67
    # 66 * 1501 / 1001 = 98.97
    assert vault.preview_mint(66) == 99
    # 67 * 1501 / 1001 = 100.47
    assert vault.preview_redeem(67) == 100
    assert vault.convert_to_shares(100) == 66
    assert vault.convert_to_assets(67) == 100


def test_mint_pulls_rounded_up_assets(token, uneven_vault, bob):
    vault = uneven_vault
    fund(token, vault, bob, 1000)

    assets = vault.mint(66, bob, bob)

    assert assets == 99
    assert vault.balance_of(bob) == 66
    assert token.balance_of(bob) == 1000 - 99


def test_withdraw_burns_rounded_up_shares(token, uneven_vault, alice, carol):
    vault = uneven_vault

    shares = vault.withdraw(100, carol, alice, alice)

    assert shares == 67
    assert vault.balance_of(alice) == 1000 - 67
    assert token.balance_of(carol) == 100
    assert [log.event for log in Mixer.get_logs(vault.metadata.address, Withdraw)] == [
        Withdraw(alice, carol, alice, 100, 67)
    ]


def test_redeem_pays_rounded_down_assets(token, uneven_vault, alice):
    vault = uneven_vault

    assets = vault.redeem(67, alice, alice, alice)

    assert assets == 100
    assert token.balance_of(alice) == 100


def test_total_assets_is_read_live(token, vault, alice):
    fund(token, vault, alice, 1000)
    vault.deposit(1000, alice, alice)
    assert vault.convert_to_shares(1000) == 1000

    donate(token, vault, 1000)

    assert vault.total_assets() == 2000
    assert vault.convert_to_shares(1000) == 1000 * 1001 // 2001


def test_conversions_are_monotonic(uneven_vault):
    vault = uneven_vault
    previous_shares = previous_assets = 0
    for amount in range(0, 3000, 7):
        shares = vault.convert_to_shares(amount)
        assets = vault.convert_to_assets(amount)
        assert shares >= previous_shares
        assert assets >= previous_assets
        previous_shares, previous_assets = shares, assets


def test_round_trip_never_favors_the_depositor(token, alice):
    rng = random.Random(2612)
    for offset in (0, 3, 6):
        vault = deploy_vault(token, offset)
        fund(token, vault, alice, 10**30)
        for _ in range(20):
            vault.deposit(rng.randint(0, 10**24), alice, alice)
            donate(token, vault, rng.randint(0, 10**24))
            for _ in range(10):
                amount = rng.randint(0, 10**27)
                shares = vault._convert_to_shares(amount, Math.Rounding.Floor)
                assert vault._convert_to_assets(shares, Math.Rounding.Ceil) <= amount


# =============================================================================
# Inflation resistance
# =============================================================================

def test_donation_cannot_zero_out_a_comparable_deposit(token, vault, alice, bob):
    attacker, victim = alice, bob
    fund(token, vault, attacker, 1)
    fund(token, vault, victim, 10**18)

    vault.deposit(1, attacker, attacker)
    donate(token, vault, 10**18)

    assert vault.deposit(10**18, victim, victim) > 0


def test_decimals_offset_makes_inflation_unprofitable(token, alice, bob):
    vault = deploy_vault(token, decimals_offset=6)
    attacker, victim = alice, bob
    fund(token, vault, attacker, 1)
    fund(token, vault, victim, 10**18)

    assert vault.deposit(1, attacker, attacker) == 10**6
    donate(token, vault, 10**18)

    # a deposit a million times smaller than the donation still gets shares
    assert vault.preview_deposit(10**12) > 0

    victim_shares = vault.deposit(10**18, victim, victim)
    assert victim_shares > 0
    assert vault.convert_to_assets(victim_shares) >= 10**18 * 99 // 100

    attacker_assets = vault.redeem(vault.balance_of(attacker), attacker, attacker, attacker)
    assert attacker_assets < 10**18 + 1


# =============================================================================
# Ceilings
# =============================================================================

def test_default_ceilings(token, alice):
    vault = deploy_vault(token, decimals_offset=3)
    fund(token, vault, alice, 1000)
    vault.deposit(1000, alice, alice)

    assert vault.max_deposit(alice) == MAX_UINT256
    assert vault.max_mint(alice) == MAX_UINT256
    # shares, not assets
    assert vault.max_redeem(alice) == 10**6
    assert vault.max_withdraw(alice) == 1000


def test_exceeding_max_withdraw_reverts(token, vault, alice):
    fund(token, vault, alice, 1000)
    vault.deposit(1000, alice, alice)

    with pytest.raises(ValidationRevert, match="exceeded max withdraw"):
        vault.withdraw(1001, alice, alice, alice)
    with pytest.raises(ValidationRevert, match="exceeded max redeem"):
        vault.redeem(1001, alice, alice, alice)
    assert vault.balance_of(alice) == 1000


def test_injected_ceiling_caps_deposits(token, alice):
    vault = deploy_vault(token, ceiling=DepositCap(100))
    fund(token, vault, alice, 1000)

    assert vault.max_deposit(alice) == 100
    with pytest.raises(ValidationRevert, match="exceeded max deposit"):
        vault.deposit(101, alice, alice)
    assert vault.deposit(100, alice, alice) == 100


# =============================================================================
# Allowances on behalf of an owner
# =============================================================================

def test_withdraw_on_behalf_spends_share_allowance(token, uneven_vault, alice, bob):
    vault = uneven_vault
    vault.approve(bob, 70, alice)

    shares = vault.withdraw(100, bob, alice, bob)

    assert shares == 67
    assert vault.allowance(alice, bob) == 3
    assert token.balance_of(bob) == 100


def test_redeem_on_behalf_without_allowance_reverts(token, uneven_vault, alice, bob):
    vault = uneven_vault
    with pytest.raises(ValidationRevert, match="insufficient allowance"):
        vault.redeem(10, bob, alice, bob)
    assert vault.balance_of(alice) == 1000
    assert token.balance_of(bob) == 0


# =============================================================================
# Atomicity and external calls
# =============================================================================

def test_failed_asset_transfer_aborts_deposit(alice):
    asset = FalseReturningToken("Broken", "BRK", 18)
    vault = deploy_vault(asset)
    asset.mint(alice, 1000)
    logs_before = len(Mixer.logs)

    with pytest.raises(ExternalCallRevert, match="failed operation"):
        vault.deposit(1000, alice, alice)

    assert vault.total_supply() == 0
    assert vault.balance_of(alice) == 0
    assert len(Mixer.logs) == logs_before


def test_failed_mint_rolls_back_the_asset_pull(token, vault, alice):
    fund(token, vault, alice, 1000)

    with pytest.raises(ValidationRevert, match="invalid receiver"):
        vault.deposit(1000, Mixer.ZERO_ADDRESS, alice)

    assert token.balance_of(alice) == 1000
    assert vault.total_assets() == 0
    assert token.allowance(alice, vault.metadata.address) == MAX_UINT256


def test_deposit_without_asset_allowance_reverts(token, vault, alice):
    token.mint(alice, 1000)
    with pytest.raises(ValidationRevert, match="insufficient allowance"):
        vault.deposit(1000, alice, alice)
    assert vault.total_supply() == 0


# =============================================================================
# Decimals
# =============================================================================

def test_decimals_add_the_offset():
    asset = Token("USD Coin", "USDC", 6)
    vault = deploy_vault(asset, decimals_offset=3)
    assert vault.decimals() == 9
    assert vault.asset() == asset.metadata.address


@pytest.mark.parametrize(
    "asset_factory",
    [
        lambda: RevertingDecimalsToken("No Decimals", "ND", 0).metadata.address,
        lambda: Token("Too Many", "TM", 300).metadata.address,
        lambda: Address.new(),
        lambda: BrokenDecimalsToken("Broken", "BRK", 0).metadata.address,
        lambda: BoolDecimalsToken("Bool", "BOOL", 0).metadata.address,
    ],
    ids=["reverting", "out-of-range", "not-deployed", "raising", "bool"],
)
def test_decimals_probe_falls_back_to_18(asset_factory):
    vault = Vault(
        VaultConfig("Vault Share", "vSHR", asset_factory(), decimals_offset=2),
        Metadata(ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "Vault", InstanceType.CONTRACT),
    )
    assert vault.decimals() == 20


def test_invalid_decimals_offset_is_rejected(token):
    with pytest.raises(ValidationRevert, match="invalid decimals offset"):
        VaultConfig("Vault Share", "vSHR", token.metadata.address, decimals_offset=256)


def test_share_decimals_must_fit_in_a_uint8():
    asset = Token("Wide", "WIDE", 255)
    assert deploy_vault(asset).decimals() == 255

    registered = len(Mixer.contracts_and_eoas)
    with pytest.raises(ArithmeticRevert, match="overflow"):
        deploy_vault(asset, decimals_offset=1)
    assert len(Mixer.contracts_and_eoas) == registered
