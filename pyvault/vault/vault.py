from pyvault.utils.Mixer import Mixer, Metadata, Address, ChainID, InstanceType
from pyvault.openzeppelin.erc20_permit import ERC20Permit
from pyvault.openzeppelin.erc4626 import ERC4626
from pyvault.openzeppelin.interfaces import AmountCeilingProvider, TransferHooks
from pyvault.vault.types import VaultConfig
from pyvault.utils.logger_utils import get_logger
from typing import Optional

logger = get_logger(__name__)


class Vault(ERC4626, ERC20Permit):
    """An ERC4626 vault whose shares support ERC-2612 permits."""

    def __init__(
        self,
        config: VaultConfig,
        metadata: Optional[Metadata] = None,
        sender=Mixer.ZERO_ADDRESS,
        ceiling: Optional[AmountCeilingProvider] = None,
        hooks: Optional[TransferHooks] = None,
    ):
        self._config: VaultConfig = config
        metadata = metadata if metadata is not None else Metadata(
            ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "Vault", InstanceType.CONTRACT
        )

        ERC4626.__init__(
            self, config.asset, config.name, config.symbol, metadata, sender, ceiling, hooks
        )
        ERC20Permit.__init__(self, config.signing_name, config.domain_version)

        logger.info(
            "vault %s (%s) over asset %s, decimals offset %d",
            config.name,
            self.metadata.address,
            config.asset,
            config.decimals_offset,
        )

    def config(self, sender=Mixer.ZERO_ADDRESS) -> VaultConfig:
        return self._config

    def _decimals_offset(self) -> int:
        return self._config.decimals_offset
