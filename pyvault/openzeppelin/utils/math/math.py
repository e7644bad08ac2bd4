from enum import Enum

from pyvault.openzeppelin.libraries.constants_lib import ConstantsLib
from pyvault.openzeppelin.libraries.errors_lib import ArithmeticRevert, ErrorsLib

MAX_UINT256 = ConstantsLib.MAX_UINT256


def _check_uint256(*values: int):
    for value in values:
        if not (0 <= value <= MAX_UINT256):
            raise ArithmeticRevert(ErrorsLib.Uint256OutOfRange(value))


def _mulmod(x: int, y: int, m: int) -> int:
    return (x * y) % m


class Math:
    """
    Word-level arithmetic on unsigned 256-bit integers.

    Every intermediate value is reduced modulo 2**256 the way the EVM would,
    so results never depend on Python's unbounded integers.
    """

    class Rounding(Enum):
        Floor = 0  # toward negative infinity
        Ceil = 1  # toward positive infinity
        Trunc = 2  # toward zero
        Expand = 3  # away from zero

    @staticmethod
    def unsigned_rounds_up(rounding: Rounding) -> bool:
        return rounding in (Math.Rounding.Ceil, Math.Rounding.Expand)

    @staticmethod
    def min(a: int, b: int) -> int:
        return a if a < b else b

    @staticmethod
    def max(a: int, b: int) -> int:
        return a if a > b else b

    @staticmethod
    def mul_div(x: int, y: int, denominator: int, rounding: Rounding = Rounding.Floor) -> int:
        """
        Returns x * y / denominator with full precision, rounded according to `rounding`.

        Raises ArithmeticRevert when `denominator` is zero or when the result does not
        fit in 256 bits.
        """
        _check_uint256(x, y, denominator)
        if denominator == 0:
            raise ArithmeticRevert(ErrorsLib.DivisionByZero)

        result = Math._mul_div_floor(x, y, denominator)
        if Math.unsigned_rounds_up(rounding) and _mulmod(x, y, denominator) > 0:
            if result == MAX_UINT256:
                raise ArithmeticRevert(ErrorsLib.ArithmeticOverflow)
            result += 1
        return result

    @staticmethod
    def _mul_div_floor(x: int, y: int, denominator: int) -> int:
        # 512-bit product as prod1 * 2**256 + prod0, rebuilt from the product
        # modulo 2**256 and modulo 2**256 - 1 (Chinese remainder theorem).
        mm = _mulmod(x, y, MAX_UINT256)
        prod0 = (x * y) & MAX_UINT256
        prod1 = (mm - prod0 - (1 if mm < prod0 else 0)) & MAX_UINT256

        if prod1 == 0:
            return prod0 // denominator

        if denominator <= prod1:
            raise ArithmeticRevert(ErrorsLib.MathOverflowedMulDiv)

        # make the 512-bit numerator divisible by denominator
        remainder = _mulmod(x, y, denominator)
        prod1 = (prod1 - (1 if remainder > prod0 else 0)) & MAX_UINT256
        prod0 = (prod0 - remainder) & MAX_UINT256

        # factor out the largest power of two dividing denominator, always >= 1
        twos = denominator & ((-denominator) & MAX_UINT256)
        denominator //= twos
        prod0 //= twos
        # 2**256 / twos, computed without leaving the word
        twos = ((((-twos) & MAX_UINT256) // twos) + 1) & MAX_UINT256
        prod0 = (prod0 | (prod1 * twos)) & MAX_UINT256

        # denominator is odd now, so it is invertible modulo 2**256.
        # The seed is correct to 4 bits; each Newton-Raphson step doubles that.
        inverse = (3 * denominator) ^ 2
        for _ in range(6):  # 8, 16, 32, 64, 128, 256 bits
            inverse = (inverse * (2 - denominator * inverse)) & MAX_UINT256

        return (prod0 * inverse) & MAX_UINT256
