from dataclasses import dataclass
from typing import ClassVar, Tuple

from tubeexplode.cipher.operations import CipherOperation, decipher


@dataclass(frozen=True)
class CipherManifest:
    """
    Signature timestamp plus the ordered operations parsed from one player script.

    ``signature_timestamp`` is sent back to the player API so it hands out
    signatures matching this script's algorithm.
    """

    signature_timestamp: str
    operations: Tuple[CipherOperation, ...]

    EMPTY: ClassVar["CipherManifest"]

    def __post_init__(self):
        # Accept any sequence but always store an immutable tuple
        object.__setattr__(self, "operations", tuple(self.operations))

    def decipher(self, signature: str) -> str:
        """Decrypt ``signature`` with this manifest's operations."""
        return decipher(signature, self.operations)


# For flows where no stream needs decryption
CipherManifest.EMPTY = CipherManifest("0", ())
