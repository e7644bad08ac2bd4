from eth_abi import encode
from eth_utils import keccak

from pyvault.utils.Mixer import Mixer, Address
from pyvault.openzeppelin.libraries.constants_lib import ConstantsLib
from pyvault.openzeppelin.libraries.errors_lib import ErrorsLib, ValidationRevert
from pyvault.openzeppelin.types import DomainCacheState, EIP712DomainFields


def check_short_string(value: str) -> str:
    if len(value.encode("utf-8")) > ConstantsLib.MAX_SHORT_STRING_LENGTH:
        raise ValidationRevert(ErrorsLib.StringTooLong(value))
    return value


class MessageHashUtils:
    @staticmethod
    def to_typed_data_hash(domain_separator: bytes, struct_hash: bytes) -> bytes:
        """keccak256("\\x19\\x01" || domain_separator || struct_hash), as defined by EIP-712."""
        return keccak(b"\x19\x01" + bytes(domain_separator) + bytes(struct_hash))


class EIP712:
    """
    EIP-712 domain separation for a deployed contract.

    The separator is built once, when the mixin is initialised, and reused as long
    as the contract still sits at the same address on a chain reporting the same id.
    Otherwise (a fork, or the contract moved) it is rebuilt on every call and the
    cached value is left untouched.

    Must be initialised after `self.metadata.address` is assigned.
    """

    def __init__(self, name: str, version: str):
        self._eip712_name: str = check_short_string(name)
        self._eip712_version: str = check_short_string(version)
        self._hashed_name: bytes = keccak(text=name)
        self._hashed_version: bytes = keccak(text=version)
        self._type_hash: bytes = keccak(text=ConstantsLib.EIP712_DOMAIN_TYPE)

        self._cached_chain_id: int = Mixer.chain_id(self.metadata.chain)
        self._cached_this: Address = Address(self.metadata.address)
        self._cached_domain_separator: bytes = self._build_domain_separator()

    def domain_cache_state(self, sender=Mixer.ZERO_ADDRESS) -> DomainCacheState:
        if (
            self.metadata.address == self._cached_this
            and Mixer.chain_id(self.metadata.chain) == self._cached_chain_id
        ):
            return DomainCacheState.VALID
        return DomainCacheState.STALE

    def eip712_domain(self, sender=Mixer.ZERO_ADDRESS) -> EIP712DomainFields:
        return EIP712DomainFields(
            fields=b"\x0f",
            name=self._eip712_name,
            version=self._eip712_version,
            chain_id=Mixer.chain_id(self.metadata.chain),
            verifying_contract=Address(self.metadata.address),
            salt=b"\x00" * 32,
            extensions=(),
        )

    def _domain_separator_v4(self) -> bytes:
        if self.domain_cache_state() == DomainCacheState.VALID:
            return self._cached_domain_separator
        return self._build_domain_separator()

    def _build_domain_separator(self) -> bytes:
        return keccak(
            encode(
                ["bytes32", "bytes32", "bytes32", "uint256", "address"],
                [
                    self._type_hash,
                    self._hashed_name,
                    self._hashed_version,
                    Mixer.chain_id(self.metadata.chain),
                    str(self.metadata.address),
                ],
            )
        )

    def _hash_typed_data_v4(self, struct_hash: bytes) -> bytes:
        return MessageHashUtils.to_typed_data_hash(self._domain_separator_v4(), struct_hash)
