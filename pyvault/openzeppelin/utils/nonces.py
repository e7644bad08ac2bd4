from pyvault.utils.Mixer import Mixer, Address
from collections import defaultdict


class Nonces:
    def __init__(self):
        self._nonces: defaultdict[Address, int] = defaultdict(int)

    def nonces(self, owner: Address, sender=Mixer.ZERO_ADDRESS) -> int:
        return self._nonces[Address(owner)]

    def _use_nonce(self, owner: Address) -> int:
        # returns the value before the increment
        owner = Address(owner)
        nonce = self._nonces[owner]
        self._nonces[owner] = nonce + 1
        return nonce
