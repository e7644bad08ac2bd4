class ConstantsLib:
    MAX_UINT256 = 2**256 - 1
    MAX_UINT8 = 2**8 - 1

    # Fallback when the underlying asset cannot report its own decimals.
    DEFAULT_UNDERLYING_DECIMALS = 18

    # Names, symbols and signing-domain strings must fit a single word.
    MAX_SHORT_STRING_LENGTH = 31

    # secp256k1 group order and the upper bound of canonical `s` values.
    SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
    SECP256K1_HALF_N = 0x7FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF5D576E7357A4501DDFE92F46681B20A0

    EIP712_DOMAIN_TYPE = (
        "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
    )
    PERMIT_TYPE = (
        "Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)"
    )
