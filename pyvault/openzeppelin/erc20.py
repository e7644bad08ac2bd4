from pyvault.utils.Mixer import Mixer, Metadata, Address, ChainID, InstanceType, external
from pyvault.openzeppelin.interfaces import TransferHooks, NoOpHooks
from pyvault.openzeppelin.libraries.constants_lib import ConstantsLib
from pyvault.openzeppelin.libraries.errors_lib import ErrorsLib, ArithmeticRevert, ValidationRevert
from pyvault.openzeppelin.types import Transfer, Approval
from collections import defaultdict
from typing import Optional, Tuple
from abc import ABC


def _check_uint256(value: int):
    if not (0 <= value <= ConstantsLib.MAX_UINT256):
        raise ArithmeticRevert(ErrorsLib.Uint256OutOfRange(value))


class ERC20(ABC):
    def __init__(
        self,
        name_: str,
        symbol_: str,
        metadata: Optional[Metadata] = None,
        sender: Address = Mixer.ZERO_ADDRESS,
        hooks: Optional[TransferHooks] = None,
    ):
        self._balances: defaultdict[Address, int] = defaultdict(int)
        self._allowances: defaultdict[Tuple[Address, Address], int] = defaultdict(int)
        self._total_supply: int = 0
        self._name: str = name_
        self._symbol: str = symbol_
        self._hooks: TransferHooks = hooks if hooks is not None else NoOpHooks()

        # Mixer utilities
        self.metadata = metadata if metadata is not None else Metadata(
            ChainID.ETH_MAINNET, Mixer.ZERO_ADDRESS, "ERC20", InstanceType.CONTRACT
        )
        self.metadata.address = Mixer.register(self)

    def deploy(self) -> Address:
        self.metadata.address = Mixer.register(self)
        return self.metadata.address

    def name(self, sender=Mixer.ZERO_ADDRESS) -> str: return self._name
    def symbol(self, sender=Mixer.ZERO_ADDRESS) -> str: return self._symbol
    def decimals(self, sender=Mixer.ZERO_ADDRESS) -> int: return 18
    def total_supply(self, sender=Mixer.ZERO_ADDRESS) -> int: return self._total_supply
    def balance_of(self, account: Address, sender=Mixer.ZERO_ADDRESS) -> int: return self._balances[Address(account)]

    @external
    def transfer(self, to: Address, value: int, sender: Address = Mixer.ZERO_ADDRESS) -> bool:
        self._transfer(sender, to, value)
        return True

    def allowance(self, owner: Address, spender: Address, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._allowances[(Address(owner), Address(spender))]

    @external
    def approve(self, spender: Address, value: int, sender: Address = Mixer.ZERO_ADDRESS) -> bool:
        self._approve(sender, spender, value)
        return True

    @external
    def transfer_from(self, from_: Address, to: Address, value: int, sender: Address = Mixer.ZERO_ADDRESS) -> bool:
        self._spend_allowance(from_, sender, value)
        self._transfer(from_, to, value)
        return True

    @external
    def increase_allowance(self, spender: Address, added_value: int, sender: Address = Mixer.ZERO_ADDRESS) -> bool:
        self._approve(sender, spender, self.allowance(sender, spender) + added_value)
        return True

    @external
    def decrease_allowance(self, spender: Address, requested_decrease: int, sender: Address = Mixer.ZERO_ADDRESS) -> bool:
        current_allowance = self.allowance(sender, spender)
        if current_allowance < requested_decrease:
            raise ValidationRevert(
                ErrorsLib.ERC20FailedDecreaseAllowance(spender, current_allowance, requested_decrease)
            )
        self._approve(sender, spender, current_allowance - requested_decrease)
        return True

    def _transfer(self, from_: Address, to: Address, value: int):
        if from_ == Mixer.ZERO_ADDRESS:
            raise ValidationRevert(ErrorsLib.ERC20InvalidSender(from_))
        if to == Mixer.ZERO_ADDRESS:
            raise ValidationRevert(ErrorsLib.ERC20InvalidReceiver(to))
        self._update(from_, to, value)

    def _update(self, from_: Address, to: Address, value: int):
        # ledgers are keyed on normalized addresses, whatever spelling the caller used
        from_, to = Address(from_), Address(to)
        _check_uint256(value)
        self._hooks.before_update(self, from_, to, value)

        if from_ == Mixer.ZERO_ADDRESS:
            _check_uint256(self._total_supply + value)
            self._total_supply += value
        else:
            from_balance = self._balances[from_]
            if from_balance < value:
                raise ValidationRevert(ErrorsLib.ERC20InsufficientBalance(from_, from_balance, value))
            self._balances[from_] = from_balance - value

        if to == Mixer.ZERO_ADDRESS:
            self._total_supply -= value
        else:
            self._balances[to] += value

        self._emit(Transfer(from_, to, value))
        self._hooks.after_update(self, from_, to, value)

    def _mint(self, account: Address, value: int):
        if account == Mixer.ZERO_ADDRESS:
            raise ValidationRevert(ErrorsLib.ERC20InvalidReceiver(account))
        self._update(Mixer.ZERO_ADDRESS, account, value)

    def _burn(self, account: Address, value: int):
        if account == Mixer.ZERO_ADDRESS:
            raise ValidationRevert(ErrorsLib.ERC20InvalidSender(account))
        self._update(account, Mixer.ZERO_ADDRESS, value)

    def _approve(self, owner: Address, spender: Address, value: int, emit_event: bool = True):
        if owner == Mixer.ZERO_ADDRESS:
            raise ValidationRevert(ErrorsLib.ERC20InvalidApprover(owner))
        if spender == Mixer.ZERO_ADDRESS:
            raise ValidationRevert(ErrorsLib.ERC20InvalidSpender(spender))
        _check_uint256(value)
        self._allowances[(Address(owner), Address(spender))] = value
        if emit_event:
            self._emit(Approval(Address(owner), Address(spender), value))

    def _spend_allowance(self, owner: Address, spender: Address, value: int):
        _check_uint256(value)
        current_allowance = self.allowance(owner, spender)
        if current_allowance != ConstantsLib.MAX_UINT256:
            if current_allowance < value:
                raise ValidationRevert(
                    ErrorsLib.ERC20InsufficientAllowance(spender, current_allowance, value)
                )
            self._approve(owner, spender, current_allowance - value, False)

    def _emit(self, event):
        Mixer.emit(self.metadata.address, self.metadata.chain, event)
