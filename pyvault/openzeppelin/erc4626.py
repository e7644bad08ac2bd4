from pyvault.openzeppelin.erc20 import ERC20
from pyvault.openzeppelin.interfaces import AmountCeilingProvider, TransferHooks, UnboundedCeiling
from pyvault.openzeppelin.libraries.constants_lib import ConstantsLib
from pyvault.openzeppelin.libraries.errors_lib import ErrorsLib, ArithmeticRevert, ValidationRevert
from pyvault.openzeppelin.types import Deposit, Withdraw
from pyvault.openzeppelin.utils.safe_erc20 import SafeERC20
from pyvault.utils.Mixer import Mixer, Metadata, Address, ChainID, InstanceType, external
from pyvault.openzeppelin.utils.math.math import Math as OZMath
from pyvault.utils.logger_utils import get_logger
from abc import ABC, abstractmethod
from typing import Optional, Tuple

logger = get_logger(__name__)


class ERC4626(ERC20, ABC):
    """
    Tokenized vault: shares of this token are claims on the `asset` it holds.

    Conversions pad the pool with 10**offset virtual shares and 1 virtual asset,
    which keeps the exchange rate from being pushed around by donations while
    the vault is (nearly) empty. Every entry point rounds against the caller.
    """

    def __init__(
        self,
        asset_: Address,
        name_: str = "ERC4626",
        symbol_: str = "ERC4626",
        metadata: Optional[Metadata] = None,
        sender: Address = Mixer.ZERO_ADDRESS,
        ceiling: Optional[AmountCeilingProvider] = None,
        hooks: Optional[TransferHooks] = None,
    ):
        metadata = metadata if metadata is not None else Metadata(
            ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "ERC4626", InstanceType.CONTRACT
        )
        success, asset_decimals = self._try_get_asset_decimals(asset_)
        if not success:
            logger.warning(
                "could not read decimals of asset %s, assuming %d",
                asset_,
                ConstantsLib.DEFAULT_UNDERLYING_DECIMALS,
            )
        self._underlying_decimals: int = (
            asset_decimals if success else ConstantsLib.DEFAULT_UNDERLYING_DECIMALS
        )
        self._asset: Address = Address(asset_)
        self._ceiling: AmountCeilingProvider = ceiling if ceiling is not None else UnboundedCeiling()
        if self._underlying_decimals + self._decimals_offset() > ConstantsLib.MAX_UINT8:
            raise ArithmeticRevert(ErrorsLib.ArithmeticOverflow)

        ERC20.__init__(self, name_, symbol_, metadata, sender, hooks)

    @staticmethod
    def _try_get_asset_decimals(asset_: Address) -> Tuple[bool, int]:
        try:
            decimals = Mixer.contract(asset_).decimals()
        except Exception:
            # anything a broken asset does here only means "unknown"
            return False, 0
        if isinstance(decimals, bool) or not isinstance(decimals, int):
            return False, 0
        if 0 <= decimals <= ConstantsLib.MAX_UINT8:
            return True, decimals
        return False, 0

    def decimals(self, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._underlying_decimals + self._decimals_offset()

    def asset(self, sender=Mixer.ZERO_ADDRESS) -> Address:
        return self._asset

    def total_assets(self, sender=Mixer.ZERO_ADDRESS) -> int:
        return Mixer.contract(self._asset).balance_of(self.metadata.address, self.metadata.address)

    def convert_to_shares(self, assets: int, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._convert_to_shares(assets, OZMath.Rounding.Floor)

    def convert_to_assets(self, shares: int, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._convert_to_assets(shares, OZMath.Rounding.Floor)

    def max_deposit(self, receiver: Address, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._ceiling.max_deposit(self, receiver)

    def max_mint(self, receiver: Address, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._ceiling.max_mint(self, receiver)

    def max_withdraw(self, owner: Address, sender=Mixer.ZERO_ADDRESS) -> int:
        return OZMath.min(
            self._convert_to_assets(self.balance_of(owner), OZMath.Rounding.Floor),
            self._ceiling.max_withdraw(self, owner),
        )

    def max_redeem(self, owner: Address, sender=Mixer.ZERO_ADDRESS) -> int:
        return OZMath.min(self.balance_of(owner), self._ceiling.max_redeem(self, owner))

    def preview_deposit(self, assets: int, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._convert_to_shares(assets, OZMath.Rounding.Floor)

    def preview_mint(self, shares: int, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._convert_to_assets(shares, OZMath.Rounding.Ceil)

    def preview_withdraw(self, assets: int, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._convert_to_shares(assets, OZMath.Rounding.Ceil)

    def preview_redeem(self, shares: int, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._convert_to_assets(shares, OZMath.Rounding.Floor)

    @external
    def deposit(self, assets: int, receiver: Address, sender=Mixer.ZERO_ADDRESS) -> int:
        max_assets = self.max_deposit(receiver)
        if assets > max_assets:
            raise ValidationRevert(ErrorsLib.ERC4626ExceededMaxDeposit(receiver, assets, max_assets))
        shares = self.preview_deposit(assets)
        self._deposit(sender, receiver, assets, shares)
        return shares

    @external
    def mint(self, shares: int, receiver: Address, sender=Mixer.ZERO_ADDRESS) -> int:
        max_shares = self.max_mint(receiver)
        if shares > max_shares:
            raise ValidationRevert(ErrorsLib.ERC4626ExceededMaxMint(receiver, shares, max_shares))
        assets = self.preview_mint(shares)
        self._deposit(sender, receiver, assets, shares)
        return assets

    @external
    def withdraw(
        self, assets: int, receiver: Address, owner: Address, sender=Mixer.ZERO_ADDRESS
    ) -> int:
        max_assets = self.max_withdraw(owner)
        if assets > max_assets:
            raise ValidationRevert(ErrorsLib.ERC4626ExceededMaxWithdraw(owner, assets, max_assets))
        shares = self.preview_withdraw(assets)
        self._withdraw(sender, receiver, owner, assets, shares)
        return shares

    @external
    def redeem(
        self, shares: int, receiver: Address, owner: Address, sender=Mixer.ZERO_ADDRESS
    ) -> int:
        max_shares = self.max_redeem(owner)
        if shares > max_shares:
            raise ValidationRevert(ErrorsLib.ERC4626ExceededMaxRedeem(owner, shares, max_shares))
        assets = self.preview_redeem(shares)
        self._withdraw(sender, receiver, owner, assets, shares)
        return assets

    def _convert_to_shares(self, assets: int, rounding: OZMath.Rounding) -> int:
        return OZMath.mul_div(
            assets,
            self.total_supply() + 10 ** self._decimals_offset(),
            self.total_assets() + 1,
            rounding,
        )

    def _convert_to_assets(self, shares: int, rounding: OZMath.Rounding) -> int:
        return OZMath.mul_div(
            shares,
            self.total_assets() + 1,
            self.total_supply() + 10 ** self._decimals_offset(),
            rounding,
        )

    def _deposit(self, caller: Address, receiver: Address, assets: int, shares: int):
        # assets come in before shares are minted
        SafeERC20.safe_transfer_from(
            self._asset, caller, self.metadata.address, assets, self.metadata.address
        )
        self._mint(receiver, shares)
        self._emit(Deposit(Address(caller), Address(receiver), assets, shares))
        logger.debug("deposit %s assets for %s shares to %s", assets, shares, receiver)

    def _withdraw(
        self,
        caller: Address,
        receiver: Address,
        owner: Address,
        assets: int,
        shares: int,
    ):
        if caller != owner:
            self._spend_allowance(owner, caller, shares)
        # shares are burned before assets go out
        self._burn(owner, shares)
        SafeERC20.safe_transfer(self._asset, receiver, assets, self.metadata.address)
        self._emit(Withdraw(Address(caller), Address(receiver), Address(owner), assets, shares))
        logger.debug("withdraw %s assets for %s shares of %s", assets, shares, owner)

    @abstractmethod
    def _decimals_offset(self) -> int:
        return 0
