class Revert(Exception):
    """An aborted call. Raising one inside `Mixer.atomic()` rolls back every state change of the call."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ValidationRevert(Revert):
    pass


class ArithmeticRevert(Revert):
    pass


class SignatureRevert(Revert):
    pass


class ExternalCallRevert(Revert):
    pass


class ErrorsLib:
    # math
    DivisionByZero = "division or modulo by zero"
    MathOverflowedMulDiv = "math overflowed mul div"
    ArithmeticOverflow = "arithmetic underflow or overflow"

    def Uint256OutOfRange(value):
        return f"value out of uint256 range {value}"

    # erc20
    def ERC20InvalidSender(sender):
        return f"ERC20: invalid sender {sender}"

    def ERC20InvalidReceiver(receiver):
        return f"ERC20: invalid receiver {receiver}"

    def ERC20InvalidApprover(approver):
        return f"ERC20: invalid approver {approver}"

    def ERC20InvalidSpender(spender):
        return f"ERC20: invalid spender {spender}"

    def ERC20InsufficientBalance(sender, balance, needed):
        return f"ERC20: insufficient balance {sender} {balance} {needed}"

    def ERC20InsufficientAllowance(spender, allowance, needed):
        return f"ERC20: insufficient allowance {spender} {allowance} {needed}"

    def ERC20FailedDecreaseAllowance(spender, current_allowance, requested_decrease):
        return f"ERC20: failed decrease allowance {spender} {current_allowance} {requested_decrease}"

    # erc4626
    def ERC4626ExceededMaxDeposit(receiver, assets, max_assets):
        return f"ERC4626: exceeded max deposit {receiver} {assets} {max_assets}"

    def ERC4626ExceededMaxMint(receiver, shares, max_shares):
        return f"ERC4626: exceeded max mint {receiver} {shares} {max_shares}"

    def ERC4626ExceededMaxWithdraw(owner, assets, max_assets):
        return f"ERC4626: exceeded max withdraw {owner} {assets} {max_assets}"

    def ERC4626ExceededMaxRedeem(owner, shares, max_shares):
        return f"ERC4626: exceeded max redeem {owner} {shares} {max_shares}"

    # permit / signatures
    def ERC2612ExpiredSignature(deadline):
        return f"ERC2612: expired signature {deadline}"

    def ERC2612InvalidSigner(signer, owner):
        return f"ERC2612: invalid signer {signer} {owner}"

    ECDSAInvalidSignature = "ECDSA: invalid signature"

    def ECDSAInvalidSignatureLength(length):
        return f"ECDSA: invalid signature length {length}"

    def ECDSAInvalidSignatureS(s):
        return f"ECDSA: invalid signature s {s}"

    # external calls
    def SafeERC20FailedOperation(token):
        return f"SafeERC20: failed operation {token}"

    def AddressEmptyCode(target):
        return f"address has no code {target}"

    # configuration
    def StringTooLong(value):
        return f"string too long {value!r}"

    def InvalidDecimalsOffset(offset):
        return f"invalid decimals offset {offset}"
