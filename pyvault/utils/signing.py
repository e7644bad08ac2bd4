"""Off-chain side of permits: builds and signs the EIP-712 payload a vault verifies.

Signing goes through eth_account, independently of the vault's own hashing, so a
signature that verifies on-chain is also proof both sides agree on the encoding.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from eth_account import Account
from eth_utils import to_checksum_address

from pyvault.utils.Mixer import Mixer, Address

PERMIT_TYPES: Dict[str, Any] = {
    "Permit": [
        {"name": "owner", "type": "address"},
        {"name": "spender", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "deadline", "type": "uint256"},
    ]
}


@dataclass(frozen=True)
class PermitSignature:
    owner: Address
    spender: Address
    value: int
    nonce: int
    deadline: int
    v: int
    r: int
    s: int
    signature: bytes


def create_eip712_domain(vault, chain_id: Optional[int] = None) -> Dict[str, Any]:
    """Signing domain of `vault`, for the chain id it currently reports unless one is given."""
    fields = vault.eip712_domain()
    return {
        "name": fields.name,
        "version": fields.version,
        "chainId": fields.chain_id if chain_id is None else chain_id,
        "verifyingContract": to_checksum_address(str(fields.verifying_contract)),
    }


def sign_permit(
    private_key: str,
    vault,
    spender: Address,
    value: int,
    deadline: int,
    nonce: Optional[int] = None,
    chain_id: Optional[int] = None,
) -> PermitSignature:
    """Signs a permit for the key's address; the nonce defaults to the owner's current one."""
    account = Account.from_key(private_key)
    owner = Address(account.address)
    nonce = vault.nonces(owner) if nonce is None else nonce

    signed = account.sign_typed_data(
        domain_data=create_eip712_domain(vault, chain_id),
        message_types=PERMIT_TYPES,
        message_data={
            "owner": to_checksum_address(str(owner)),
            "spender": to_checksum_address(str(spender)),
            "value": value,
            "nonce": nonce,
            "deadline": deadline,
        },
    )
    return PermitSignature(
        owner=owner,
        spender=Address(spender),
        value=value,
        nonce=nonce,
        deadline=deadline,
        v=signed.v,
        r=signed.r,
        s=signed.s,
        signature=bytes(signed.signature),
    )


def submit_permit(vault, permit: PermitSignature, sender: Address = Mixer.ZERO_ADDRESS):
    vault.permit(
        permit.owner,
        permit.spender,
        permit.value,
        permit.deadline,
        permit.v,
        permit.r,
        permit.s,
        sender,
    )
