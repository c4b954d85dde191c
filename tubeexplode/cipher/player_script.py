"""
Static analysis of the platform's player script (base.js).

The script is treated as plain text. Nothing in it is evaluated: regular
expressions locate the decipher function and its operation container, and
the container's methods are classified by their shape rather than by their
(obfuscated, per-release) names.

Parsing runs in five phases, each of which must succeed:

1. find the signature timestamp (``sts:12345`` / ``signatureTimestamp:12345``)
2. find the decipher function (split -> calls -> join)
3. read the operation container name from the first call in its body
4. find the container object literal and classify each of its methods
5. replay the calls in the decipher body against that symbol table
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from tubeexplode.cipher.manifest import CipherManifest
from tubeexplode.cipher.operations import CipherOperation, OperationKind, build_operation
from tubeexplode.exceptions import CipherParseError, CipherParseReason

logger = logging.getLogger(__name__)

SIGNATURE_TIMESTAMP_PATTERN = re.compile(
    r'(?<![$\w])(?:signatureTimestamp|sts)\s*:\s*(\d{5})(?!\d)'
)

_SPLIT_JOIN_BODY = (
    r'\{\s*([$\w]+)\s*=\s*\2\.split\s*\(\s*(?:""|\'\')\s*\)\s*;'
    r'([\s\S]+?)'
    r'return\s+\2\.join\s*\(\s*(?:""|\'\')\s*\)\s*;?\s*\}'
)

# Xy=function(a){a=a.split("");...;return a.join("")}
DECIPHER_FUNCTION_PATTERN = re.compile(
    r'([$\w]+)\s*=\s*function\s*\(\s*[$\w]+\s*\)\s*' + _SPLIT_JOIN_BODY
)

# function Xy(a){a=a.split("");...;return a.join("")}
DECIPHER_FUNCTION_PATTERN_ALT = re.compile(
    r'function\s+([$\w]+)\s*\(\s*[$\w]+\s*\)\s*' + _SPLIT_JOIN_BODY
)

# Xy.Dz(a,3) or Xy["Dz"](a,3)
CONTAINER_NAME_PATTERN = re.compile(
    r'(?<![$\w.])([$\w]+)(?:\.[$\w]+|\[(["\'])[$\w]+\2\])\s*\(\s*[$\w]+\s*,\s*\d+\s*\)'
)

# Dz:function(a,b){ ... or "Dz":function(a,b){ ...
CONTAINER_METHOD_PATTERN = re.compile(
    r'(?:(?<=[{,\s])|^)(?:([$\w]+)|(["\'])([$\w]+)\2)\s*:\s*function\s*\(([^)]*)\)\s*\{'
)

SWAP_IDIOM = re.compile(r'%')
SLICE_IDIOM = re.compile(r'\.splice\s*\(')
REVERSE_IDIOM = re.compile(r'\.reverse\s*\(\s*\)')


def _container_definition_pattern(name: str) -> "re.Pattern[str]":
    # var Xy={...}  /  Xy={...}, not matching aXy={...} or o.Xy={...}
    return re.compile(r'(?<![$\w.])' + re.escape(name) + r'\s*=\s*\{')


def _container_call_pattern(name: str) -> "re.Pattern[str]":
    return re.compile(
        r'(?<![$\w.])' + re.escape(name)
        + r'(?:\.([$\w]+)|\[(["\'])([$\w]+)\2\])'
        + r'\s*\(\s*[$\w]+\s*(?:,\s*(\d+)\s*)?\)'
    )


def extract_braced_block(text: str, open_index: int) -> Optional[str]:
    """
    Return the text between the brace at ``open_index`` and its matching close.

    Braces inside string literals (single, double or backtick quoted, with
    backslash escapes) and inside comments are ignored. Returns None when the
    block is never closed.
    """
    if open_index >= len(text) or text[open_index] != '{':
        return None

    depth = 0
    i = open_index
    length = len(text)
    while i < length:
        char = text[i]
        if char in ('"', "'", '`'):
            i = _skip_string(text, i)
            continue
        if char == '/' and i + 1 < length and text[i + 1] in '/*':
            i = _skip_comment(text, i)
            continue
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[open_index + 1:i]
        i += 1
    return None


def _skip_string(text: str, start: int) -> int:
    """Index just past the string literal opened at ``start``."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        char = text[i]
        if char == '\\':
            i += 2
            continue
        if char == quote:
            return i + 1
        i += 1
    return len(text)


def _skip_comment(text: str, start: int) -> int:
    if text[start + 1] == '/':
        end = text.find('\n', start)
        return len(text) if end == -1 else end + 1
    end = text.find('*/', start + 2)
    return len(text) if end == -1 else end + 2


def _is_swap(params: List[str], body: str) -> bool:
    return SWAP_IDIOM.search(body) is not None


def _is_slice(params: List[str], body: str) -> bool:
    return SLICE_IDIOM.search(body) is not None


def _is_reverse(params: List[str], body: str) -> bool:
    return len(params) == 1 and REVERSE_IDIOM.search(body) is not None


# Checked in order, first match wins
OPERATION_CLASSIFIERS: Tuple[Tuple[OperationKind, Callable[[List[str], str], bool]], ...] = (
    (OperationKind.SWAP, _is_swap),
    (OperationKind.SLICE, _is_slice),
    (OperationKind.REVERSE, _is_reverse),
)


class PlayerScriptParser:
    """
    Extracts a CipherManifest from player script text.

    Stateless; one instance may be shared between threads.
    """

    def extract_signature_timestamp(self, player_script: str) -> Optional[str]:
        """Return the 5-digit signature timestamp, or None if absent."""
        match = SIGNATURE_TIMESTAMP_PATTERN.search(player_script)
        return match.group(1) if match else None

    def parse(self, player_script: str) -> CipherManifest:
        """
        Parse the player script into a CipherManifest.

        Raises:
            CipherParseError: if any phase finds nothing. ``reason`` says which.
        """
        signature_timestamp = self.extract_signature_timestamp(player_script)
        if signature_timestamp is None:
            raise self._fail(CipherParseReason.TIMESTAMP_NOT_FOUND,
                             "Could not find signature timestamp")
        logger.debug(f"[cipher] Signature timestamp: {signature_timestamp}")

        decipher_body = self.find_decipher_body(player_script)
        if decipher_body is None:
            raise self._fail(CipherParseReason.DECIPHER_FUNCTION_NOT_FOUND,
                             "Could not find decipher function")
        logger.debug(f"[cipher] Decipher body: {decipher_body[:120]}")

        container_name = self.extract_container_name(decipher_body)
        if container_name is None:
            raise self._fail(CipherParseReason.CONTAINER_NAME_NOT_FOUND,
                             "Could not find cipher container name")

        container_definition = self.find_container_definition(player_script, container_name)
        if container_definition is None:
            raise self._fail(CipherParseReason.CONTAINER_DEFINITION_NOT_FOUND,
                             f"Could not find cipher container definition for: {container_name}",
                             container_name=container_name)

        symbol_table = self.build_symbol_table(container_definition)
        logger.debug(f"[cipher] Container {container_name} methods: {symbol_table}")

        operations = self.replay_operations(decipher_body, container_name, symbol_table)
        if not operations:
            raise self._fail(CipherParseReason.NO_OPERATIONS_FOUND,
                             "No cipher operations found",
                             container_name=container_name)

        logger.info(f"[cipher] Parsed {len(operations)} operations (sts={signature_timestamp})")
        return CipherManifest(signature_timestamp, tuple(operations))

    def find_decipher_body(self, player_script: str) -> Optional[str]:
        """Statements between the split and the join of the decipher function."""
        match = (DECIPHER_FUNCTION_PATTERN.search(player_script)
                 or DECIPHER_FUNCTION_PATTERN_ALT.search(player_script))
        return match.group(3) if match else None

    def extract_container_name(self, decipher_body: str) -> Optional[str]:
        match = CONTAINER_NAME_PATTERN.search(decipher_body)
        return match.group(1) if match else None

    def find_container_definition(self, player_script: str, container_name: str) -> Optional[str]:
        """Body of the object literal assigned to ``container_name``."""
        for match in _container_definition_pattern(container_name).finditer(player_script):
            body = extract_braced_block(player_script, match.end() - 1)
            if body is not None:
                return body
        return None

    def build_symbol_table(self, container_definition: str) -> Dict[str, OperationKind]:
        """Map each method of the container to the kind of operation it implements."""
        symbol_table: Dict[str, OperationKind] = {}
        position = 0
        while True:
            match = CONTAINER_METHOD_PATTERN.search(container_definition, position)
            if match is None:
                break
            name = match.group(1) or match.group(3)
            params = [p.strip() for p in match.group(4).split(',') if p.strip()]
            body = extract_braced_block(container_definition, match.end() - 1)
            if body is None:
                break
            # Continue after this method so nested functions are not read as methods
            position = match.end() + len(body) + 1

            for kind, predicate in OPERATION_CLASSIFIERS:
                if predicate(params, body):
                    symbol_table[name] = kind
                    break
        return symbol_table

    def replay_operations(
        self,
        decipher_body: str,
        container_name: str,
        symbol_table: Dict[str, OperationKind]
    ) -> List[CipherOperation]:
        """Turn the container calls in the decipher body into operations, in source order."""
        operations = []
        for match in _container_call_pattern(container_name).finditer(decipher_body):
            method = match.group(1) or match.group(3)
            kind = symbol_table.get(method)
            if kind is None:
                continue
            argument = int(match.group(4)) if match.group(4) else 0
            operations.append(build_operation(kind, argument))
        return operations

    @staticmethod
    def _fail(reason: CipherParseReason, message: str, container_name: Optional[str] = None) -> CipherParseError:
        logger.error(f"[cipher] {message}")
        return CipherParseError(reason, message, container_name=container_name)
