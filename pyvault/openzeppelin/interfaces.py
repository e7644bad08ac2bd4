from pyvault.openzeppelin.libraries.constants_lib import ConstantsLib
from pyvault.utils.Mixer import Address
from abc import ABC, abstractmethod


class AmountCeilingProvider(ABC):
    """Policy limits a vault reports through its max_* queries."""

    @abstractmethod
    def max_deposit(self, vault, receiver: Address) -> int:
        pass

    @abstractmethod
    def max_mint(self, vault, receiver: Address) -> int:
        pass

    @abstractmethod
    def max_withdraw(self, vault, owner: Address) -> int:
        pass

    @abstractmethod
    def max_redeem(self, vault, owner: Address) -> int:
        pass


class UnboundedCeiling(AmountCeilingProvider):
    def max_deposit(self, vault, receiver: Address) -> int:
        return ConstantsLib.MAX_UINT256

    def max_mint(self, vault, receiver: Address) -> int:
        return ConstantsLib.MAX_UINT256

    def max_withdraw(self, vault, owner: Address) -> int:
        return ConstantsLib.MAX_UINT256

    def max_redeem(self, vault, owner: Address) -> int:
        return ConstantsLib.MAX_UINT256


class TransferHooks:
    """Called around every balance change of a token (mint, burn and transfer)."""

    def before_update(self, token, from_: Address, to: Address, value: int):
        pass

    def after_update(self, token, from_: Address, to: Address, value: int):
        pass


class NoOpHooks(TransferHooks):
    pass
