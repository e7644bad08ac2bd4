from pyvault.utils.Mixer import Mixer, Address
from pyvault.openzeppelin.libraries.errors_lib import ErrorsLib, ExternalCallRevert


class SafeERC20:
    """
    Calls into an external token that treat a `False` return the same as a revert.
    Reverts raised by the token itself propagate unchanged.
    """

    @staticmethod
    def safe_transfer(token: Address, to: Address, value: int, sender: Address):
        ok = Mixer.contract(token).transfer(to, value, sender)
        if not ok:
            raise ExternalCallRevert(ErrorsLib.SafeERC20FailedOperation(token))

    @staticmethod
    def safe_transfer_from(token: Address, from_: Address, to: Address, value: int, sender: Address):
        ok = Mixer.contract(token).transfer_from(from_, to, value, sender)
        if not ok:
            raise ExternalCallRevert(ErrorsLib.SafeERC20FailedOperation(token))
