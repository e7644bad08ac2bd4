from pyvault.utils.Mixer import Mixer, Address, ChainID, Metadata, InstanceType
from pyvault.utils.logger_utils import configure_logging, get_logger
from pyvault.utils.signing import sign_permit, submit_permit
from pyvault.mocks.token import Token
from pyvault.vault.types import VaultConfig
from pyvault.vault.vault import Vault
from eth_account import Account

logger = get_logger("pyvault.examples.deploying_vault")

INITIAL_TIMESTAMP: int = 1701841124

# well-known throwaway key, never fund it
ALICE_KEY = "0x" + "ab" * 32


def main():
    Mixer.set_block_timestamp(INITIAL_TIMESTAMP)

    deployer: Address = Address.new()
    alice: Address = Address(Account.from_key(ALICE_KEY).address)
    bob: Address = Address.new()

    # deploying the underlying asset

    usdc = Token(
        "Circle USD",
        "USDC",
        6,
        Metadata(ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "Mock USDC", InstanceType.CONTRACT),
        deployer,
    ).deploy()

    Mixer.contracts_and_eoas[usdc].mint(alice, 10_000 * 10**6, deployer)

    # deploying the vault, 6 + 6 = 12 decimals for the shares

    vault = Vault(
        VaultConfig("Vault USDC", "vUSDC", usdc, decimals_offset=6),
        Metadata(ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "Vault USDC", InstanceType.CONTRACT),
        deployer,
    )
    vault_address = vault.deploy()

    # alice deposits

    Mixer.contracts_and_eoas[usdc].approve(vault_address, 2**256 - 1, alice)
    shares = vault.deposit(1_000 * 10**6, alice, alice)
    logger.info("alice got %d shares worth %d assets", shares, vault.convert_to_assets(shares))

    # alice lets bob pull half her shares without sending a transaction

    permit = sign_permit(ALICE_KEY, vault, bob, shares // 2, INITIAL_TIMESTAMP + 3600)
    submit_permit(vault, permit, bob)

    assets = vault.redeem(shares // 2, bob, alice, bob)
    logger.info("bob redeemed %d shares of alice for %d assets", shares // 2, assets)

    return vault


if __name__ == "__main__":
    configure_logging()
    main()
