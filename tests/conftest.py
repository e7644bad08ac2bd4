"""Shared fixtures: a fresh world per test, an 18-decimal asset and a vault over it."""

import pytest
from eth_account import Account

from pyvault.utils.Mixer import Mixer, Address, ChainID, Metadata, InstanceType
from pyvault.mocks.token import Token
from pyvault.vault.types import VaultConfig
from pyvault.vault.vault import Vault

# Test keys (DO NOT use in production)
ALICE_KEY = "0x" + "ab" * 32
BOB_KEY = "0x" + "cd" * 32

NOW = 1_700_000_000
MAX_UINT256 = 2**256 - 1


@pytest.fixture(autouse=True)
def fresh_world():
    Mixer.reset()
    Mixer.set_block_timestamp(NOW)
    yield
    Mixer.reset()


@pytest.fixture
def deployer():
    return Address.new()


@pytest.fixture
def alice():
    return Address(Account.from_key(ALICE_KEY).address)


@pytest.fixture
def bob():
    return Address(Account.from_key(BOB_KEY).address)


@pytest.fixture
def carol():
    return Address.new()


@pytest.fixture
def token(deployer):
    asset = Token(
        "Mock Asset",
        "MOCK",
        18,
        Metadata(ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "Mock Asset", InstanceType.CONTRACT),
        deployer,
    )
    asset.deploy()
    return asset


def deploy_vault(token, decimals_offset=0, **kwargs):
    vault = Vault(
        VaultConfig("Vault Share", "vSHR", token.metadata.address, decimals_offset=decimals_offset),
        Metadata(ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "Vault", InstanceType.CONTRACT),
        **kwargs,
    )
    vault.deploy()
    return vault


@pytest.fixture
def vault(token):
    return deploy_vault(token)


def fund(token, vault, account, amount, deployer=Mixer.ZERO_ADDRESS):
    """Mints `amount` of the asset to `account` and approves the vault for all of it."""
    token.mint(account, amount, deployer)
    token.approve(vault.metadata.address, MAX_UINT256, account)
