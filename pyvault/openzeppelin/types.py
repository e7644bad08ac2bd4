from dataclasses import dataclass
from enum import Enum
from pyvault.utils.Mixer import Address


@dataclass(frozen=True)
class Transfer:
    from_: Address
    to: Address
    value: int


@dataclass(frozen=True)
class Approval:
    owner: Address
    spender: Address
    value: int


@dataclass(frozen=True)
class Deposit:
    sender: Address
    owner: Address
    assets: int
    shares: int


@dataclass(frozen=True)
class Withdraw:
    sender: Address
    receiver: Address
    owner: Address
    assets: int
    shares: int


class DomainCacheState(Enum):
    VALID = 0
    STALE = 1


@dataclass(frozen=True)
class EIP712DomainFields:
    fields: bytes
    name: str
    version: str
    chain_id: int
    verifying_contract: Address
    salt: bytes
    extensions: tuple
