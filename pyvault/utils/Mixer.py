from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from typing import Any, Optional
from enum import Enum
import copy

from eth_abi import encode
from eth_utils import keccak

from pyvault.openzeppelin.libraries.errors_lib import ErrorsLib, ExternalCallRevert
from pyvault.utils.logger_utils import get_logger

logger = get_logger(__name__)


class ChainID(Enum):
    ETH_MAINNET = 1
    ETH_GOERLI = 5
    ETH_SEPOLIA = 11155111


class InstanceType(Enum):
    EOA = 0
    CONTRACT = 1


class Address(str):
    """Lower-cased hex address. Compares equal to any str spelling of the same address."""

    ADDRESS_SALT: int = 0

    ZERO_ADDRESS: str = "0x0000000000000000000000000000000000000000"

    def __new__(cls, x: object):
        if hasattr(x, "metadata"):
            value = str(x.metadata.address)
        elif isinstance(x, str):
            value = x
        else:
            raise ValueError("Address must be either a string or a contract.")
        return super().__new__(cls, value.lower())

    @property
    def address(self) -> str:
        return str.__str__(self)

    @staticmethod
    def new(chain: ChainID = ChainID.ETH_MAINNET) -> "Address":
        Address.ADDRESS_SALT = Address.ADDRESS_SALT + 1
        digest = keccak(encode(["string", "uint256"], [chain.name, Address.ADDRESS_SALT]))
        return Address("0x" + digest[12:].hex())

    def __eq__(self, other) -> bool:
        if not isinstance(other, str):
            return NotImplemented
        return str.__eq__(self, other.lower())

    def __ne__(self, other) -> bool:
        if not isinstance(other, str):
            return NotImplemented
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return str.__hash__(self)

    def __repr__(self) -> str:
        return self.address


@dataclass
class Metadata:
    chain: ChainID = ChainID.ETH_MAINNET
    address: Address = Address(Address.ZERO_ADDRESS)
    name: str = "Unnamed"
    type: InstanceType = InstanceType.EOA


@dataclass(frozen=True)
class Log:
    emitter: Address
    chain: ChainID
    block_timestamp: int
    event: Any


@dataclass(frozen=True)
class Snapshot:
    registry: dict
    states: dict
    logs_length: int


def _copy_state(state: dict) -> dict:
    # ledgers are dicts of ints/addresses, one level of copying is enough
    return {
        key: copy.copy(value) if isinstance(value, (dict, list, set)) else value
        for key, value in state.items()
    }


class Mixer:
    block_timestamps: defaultdict[ChainID, int] = defaultdict(int)
    chain_ids: dict[ChainID, int] = {}
    contracts_and_eoas: dict[Address, Any] = {}
    logs: list[Log] = []
    ZERO_ADDRESS = Address("0x0000000000000000000000000000000000000000")

    @staticmethod
    def register(thingy: Any) -> Address:
        current = thingy.metadata.address
        already_taken = (
            current in Mixer.contracts_and_eoas.keys()
            and Mixer.contracts_and_eoas[current] is not thingy
        )
        final_address = (
            Address.new(thingy.metadata.chain)
            if current == Mixer.ZERO_ADDRESS or already_taken
            else Address(current)
        )

        Mixer.contracts_and_eoas[final_address] = thingy
        logger.info("registered %s at %s", thingy.metadata.name, final_address)
        return final_address

    @staticmethod
    def contract(address: str) -> Any:
        try:
            return Mixer.contracts_and_eoas[Address(address)]
        except KeyError:
            raise ExternalCallRevert(ErrorsLib.AddressEmptyCode(address)) from None

    @staticmethod
    def block_timestamp(chain: ChainID = ChainID.ETH_MAINNET) -> int:
        return Mixer.block_timestamps[chain]

    @staticmethod
    def set_block_timestamp(timestamp: int, chain: ChainID = ChainID.ETH_MAINNET):
        Mixer.block_timestamps[chain] = timestamp

    @staticmethod
    def chain_id(chain: ChainID = ChainID.ETH_MAINNET) -> int:
        return Mixer.chain_ids.get(chain, chain.value)

    @staticmethod
    def set_chain_id(chain_id: int, chain: ChainID = ChainID.ETH_MAINNET):
        """Changes the id the network reports, e.g. to simulate a fork."""
        Mixer.chain_ids[chain] = chain_id

    @staticmethod
    def emit(emitter: Address, chain: ChainID, event: Any):
        log = Log(Address(emitter), chain, Mixer.block_timestamp(chain), event)
        Mixer.logs.append(log)
        logger.debug("%s emitted %r", emitter, event)

    @staticmethod
    def get_logs(emitter: Optional[str] = None, event_type: Optional[type] = None) -> list[Log]:
        return [
            log
            for log in Mixer.logs
            if (emitter is None or log.emitter == emitter)
            and (event_type is None or isinstance(log.event, event_type))
        ]

    @staticmethod
    def snapshot() -> Snapshot:
        return Snapshot(
            registry=dict(Mixer.contracts_and_eoas),
            states={
                address: _copy_state(thingy.__dict__)
                for address, thingy in Mixer.contracts_and_eoas.items()
            },
            logs_length=len(Mixer.logs),
        )

    @staticmethod
    def revert_to(snapshot: Snapshot):
        Mixer.contracts_and_eoas.clear()
        Mixer.contracts_and_eoas.update(snapshot.registry)
        for address, state in snapshot.states.items():
            thingy = snapshot.registry[address]
            thingy.__dict__.clear()
            thingy.__dict__.update(_copy_state(state))
        del Mixer.logs[snapshot.logs_length:]

    @staticmethod
    @contextmanager
    def atomic():
        """Runs a call all-or-nothing: any exception restores the world as it was on entry."""
        snapshot = Mixer.snapshot()
        try:
            yield
        except Exception as exc:
            Mixer.revert_to(snapshot)
            logger.debug("call reverted: %s", exc)
            raise

    @staticmethod
    def reset():
        Mixer.block_timestamps.clear()
        Mixer.chain_ids.clear()
        Mixer.contracts_and_eoas.clear()
        Mixer.logs.clear()
        Address.ADDRESS_SALT = 0


def external(fn):
    """Marks a state-changing entry point; the call either completes or leaves no trace."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        with Mixer.atomic():
            return fn(*args, **kwargs)

    return wrapper
