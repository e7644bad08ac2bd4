from enum import Enum
from typing import Tuple, Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError

from pyvault.utils.Mixer import Mixer, Address
from pyvault.openzeppelin.libraries.constants_lib import ConstantsLib
from pyvault.openzeppelin.libraries.errors_lib import ErrorsLib, SignatureRevert

Word = Union[int, bytes]


def _to_int(word: Word) -> int:
    if isinstance(word, (bytes, bytearray)):
        return int.from_bytes(word, "big")
    return word


class ECDSA:
    """secp256k1 signer recovery that only accepts canonical (lower-s) signatures."""

    class RecoverError(Enum):
        NoError = 0
        InvalidSignature = 1
        InvalidSignatureLength = 2
        InvalidSignatureS = 3

    @staticmethod
    def try_recover(hash_: bytes, *signature) -> Tuple[Address, "ECDSA.RecoverError", int]:
        """
        Accepts either a packed 65-byte `r || s || v` signature or separate `v, r, s`.
        Returns (signer, error, error_arg); signer is the zero address on any error.
        """
        if len(signature) == 1:
            packed = bytes(signature[0])
            if len(packed) != 65:
                return Mixer.ZERO_ADDRESS, ECDSA.RecoverError.InvalidSignatureLength, len(packed)
            r, s, v = packed[:32], packed[32:64], packed[64]
        else:
            v, r, s = signature
        return ECDSA._try_recover_vrs(hash_, v, _to_int(r), _to_int(s))

    @staticmethod
    def recover(hash_: bytes, *signature) -> Address:
        recovered, error, error_arg = ECDSA.try_recover(hash_, *signature)
        ECDSA._throw_error(error, error_arg)
        return recovered

    @staticmethod
    def _try_recover_vrs(hash_: bytes, v: int, r: int, s: int) -> Tuple[Address, "ECDSA.RecoverError", int]:
        # Signatures with s in the upper half order are the malleable twins of
        # valid lower-s ones; only one of each pair is accepted.
        if s > ConstantsLib.SECP256K1_HALF_N:
            return Mixer.ZERO_ADDRESS, ECDSA.RecoverError.InvalidSignatureS, s

        signer = ECDSA._ecrecover(hash_, v, r, s)
        if signer == Mixer.ZERO_ADDRESS:
            return Mixer.ZERO_ADDRESS, ECDSA.RecoverError.InvalidSignature, 0

        return signer, ECDSA.RecoverError.NoError, 0

    @staticmethod
    def _ecrecover(hash_: bytes, v: int, r: int, s: int) -> Address:
        """Mirrors the ecrecover precompile: the zero address for anything unrecoverable."""
        if v not in (27, 28) or r == 0 or s == 0 or len(hash_) != 32:
            return Mixer.ZERO_ADDRESS
        try:
            signature = keys.Signature(vrs=(v - 27, r, s))
            public_key = signature.recover_public_key_from_msg_hash(bytes(hash_))
        except (BadSignature, ValidationError):
            return Mixer.ZERO_ADDRESS
        return Address(public_key.to_address())

    @staticmethod
    def _throw_error(error: "ECDSA.RecoverError", error_arg: int):
        if error == ECDSA.RecoverError.NoError:
            return
        if error == ECDSA.RecoverError.InvalidSignature:
            raise SignatureRevert(ErrorsLib.ECDSAInvalidSignature)
        if error == ECDSA.RecoverError.InvalidSignatureLength:
            raise SignatureRevert(ErrorsLib.ECDSAInvalidSignatureLength(error_arg))
        if error == ECDSA.RecoverError.InvalidSignatureS:
            raise SignatureRevert(ErrorsLib.ECDSAInvalidSignatureS(error_arg))
