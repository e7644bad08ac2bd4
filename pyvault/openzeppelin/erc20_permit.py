from eth_abi import encode
from eth_utils import keccak

from pyvault.utils.Mixer import Mixer, Address, external
from pyvault.openzeppelin.erc20 import ERC20, _check_uint256
from pyvault.openzeppelin.utils.cryptography.ecdsa import ECDSA, Word
from pyvault.openzeppelin.utils.cryptography.eip712 import EIP712
from pyvault.openzeppelin.utils.nonces import Nonces
from pyvault.openzeppelin.libraries.constants_lib import ConstantsLib
from pyvault.openzeppelin.libraries.errors_lib import ErrorsLib, SignatureRevert
from pyvault.utils.logger_utils import get_logger

logger = get_logger(__name__)

PERMIT_TYPEHASH: bytes = keccak(text=ConstantsLib.PERMIT_TYPE)


class ERC20Permit(ERC20, EIP712, Nonces):
    """
    ERC-2612 approvals by signature.

    Only sets up the signing domain and the nonces; the ERC20 part has to be
    initialised first by the concrete token.
    """

    def __init__(self, name_: str, version: str = "1"):
        EIP712.__init__(self, name_, version)
        Nonces.__init__(self)

    @external
    def permit(
        self,
        owner: Address,
        spender: Address,
        value: int,
        deadline: int,
        v: int,
        r: Word,
        s: Word,
        sender: Address = Mixer.ZERO_ADDRESS,
    ):
        if Mixer.block_timestamp(self.metadata.chain) > deadline:
            raise SignatureRevert(ErrorsLib.ERC2612ExpiredSignature(deadline))
        _check_uint256(value)
        _check_uint256(deadline)

        struct_hash = self.permit_struct_hash(owner, spender, value, self._use_nonce(owner), deadline)
        hash_ = self._hash_typed_data_v4(struct_hash)

        signer = ECDSA.recover(hash_, v, r, s)
        if signer != owner:
            raise SignatureRevert(ErrorsLib.ERC2612InvalidSigner(signer, owner))

        self._approve(owner, spender, value)
        logger.debug("permit %s -> %s for %s", owner, spender, value)

    @staticmethod
    def permit_struct_hash(owner: Address, spender: Address, value: int, nonce: int, deadline: int) -> bytes:
        return keccak(
            encode(
                ["bytes32", "address", "address", "uint256", "uint256", "uint256"],
                [PERMIT_TYPEHASH, str(owner), str(spender), value, nonce, deadline],
            )
        )

    def DOMAIN_SEPARATOR(self, sender=Mixer.ZERO_ADDRESS) -> bytes:
        return self._domain_separator_v4()
