from dataclasses import dataclass
from typing import Optional
from pyvault.utils.Mixer import Address
from pyvault.openzeppelin.libraries.constants_lib import ConstantsLib
from pyvault.openzeppelin.libraries.errors_lib import ErrorsLib, ValidationRevert
from pyvault.openzeppelin.utils.cryptography.eip712 import check_short_string


@dataclass(frozen=True)
class VaultConfig:
    """Construction parameters of a Vault. Read-only once built."""

    name: str
    symbol: str
    asset: Address
    decimals_offset: int = 0
    domain_name: Optional[str] = None
    domain_version: str = "1"

    def __post_init__(self):
        check_short_string(self.name)
        check_short_string(self.symbol)
        check_short_string(self.signing_name)
        check_short_string(self.domain_version)
        if not (
            isinstance(self.decimals_offset, int)
            and 0 <= self.decimals_offset <= ConstantsLib.MAX_UINT8
        ):
            raise ValidationRevert(ErrorsLib.InvalidDecimalsOffset(self.decimals_offset))

    @property
    def signing_name(self) -> str:
        return self.domain_name if self.domain_name is not None else self.name
