from tubeexplode.cipher.cache import ManifestCache
from tubeexplode.cipher.manifest import CipherManifest
from tubeexplode.cipher.operations import (
    CipherOperation,
    OperationKind,
    Reverse,
    Slice,
    Swap,
    apply_operation,
    decipher,
)
from tubeexplode.cipher.player_script import PlayerScriptParser, extract_braced_block

__all__ = [
    "CipherManifest",
    "CipherOperation",
    "ManifestCache",
    "OperationKind",
    "PlayerScriptParser",
    "Reverse",
    "Slice",
    "Swap",
    "apply_operation",
    "decipher",
    "extract_braced_block",
]
