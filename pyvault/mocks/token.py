from pyvault.utils.Mixer import Mixer, Address, ChainID, Metadata, InstanceType, external
from pyvault.openzeppelin.erc20 import ERC20
from pyvault.openzeppelin.interfaces import TransferHooks
from typing import Optional


class Token(ERC20):
    def __init__(
        self,
        name_: str,
        symbol_: str,
        decimals: int,
        metadata: Optional[Metadata] = None,
        sender=Mixer.ZERO_ADDRESS,
        hooks: Optional[TransferHooks] = None,
    ):
        self._decimals: int = decimals
        metadata = metadata if metadata is not None else Metadata(
            ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "Token", InstanceType.CONTRACT
        )
        super().__init__(name_, symbol_, metadata, sender, hooks)

    def decimals(self, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._decimals

    @external
    def mint(self, account: Address, amount: int, sender: Address = Mixer.ZERO_ADDRESS) -> int:
        self._mint(account, amount)
        return amount

    @external
    def burn(self, account: Address, amount: int, sender: Address = Mixer.ZERO_ADDRESS) -> int:
        self._burn(account, amount)
        return amount
