"""Shortcode generation utility

This module provides the short code generator used by the resolution engine
for links without a custom code, plus the validation rule custom codes have
to pass.

Classes:
    CodeGenerator:
        Produce fixed-length base62 codes from time and random entropy.

Example:
    >>> from linkshortener.utils.shortener import CodeGenerator
    >>> generator = CodeGenerator()
    >>> len(generator.generate())
    6
    >>> CodeGenerator.validate_custom_code('Ab3D')
    True
    >>> CodeGenerator.validate_custom_code('ab')
    False
"""

import re
import secrets
import string
import time
from collections.abc import Callable

from linkshortener.utils.constants import DEFAULT_SHORT_CODE_LENGTH


ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
BASE = len(ALPHABET)  # 10 digits + 26 lowercase + 26 uppercase

CUSTOM_CODE_PATTERN = re.compile(r'[0-9A-Za-z]{4,12}')

RANDOM_BYTES = 8


class CodeGenerator:
    """Generate short, printable base62 codes.

    Each code is derived from the current time (nanoseconds) combined with
    cryptographically strong random bytes, reduced into the BASE**length
    space and base62-encoded.

    NOTE:
        - Codes are collision-improbable, not collision-free. Global
          uniqueness is enforced by the link store, not here.
        - The clock and the randomness source are injectable so tests can
          force deterministic (or colliding) output.

    Args:
        random_bytes (Callable[[int], bytes]):
            Source of random bytes. Defaults to secrets.token_bytes.
        clock (Callable[[], int]):
            Source of the time component. Defaults to time.time_ns.
    """

    def __init__(
        self,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
        clock: Callable[[], int] = time.time_ns,
    ):
        self._random_bytes = random_bytes
        self._clock = clock

    def generate(self, length: int = DEFAULT_SHORT_CODE_LENGTH) -> str:
        """Generate a short code of exactly `length` base62 characters.

        Args:
            length (int):
                Number of characters in the resulting code. Defaults to 6.

        Returns:
            str: base62 code, left-padded with '0' when the encoded value is short.

        Raises:
            ValueError: If `length` is not a positive integer.

        Example:
            >>> CodeGenerator().generate(8)
            'k3X0aQ9z'
        """
        if not isinstance(length, int) or length <= 0:
            raise ValueError(f'Length must be a positive integer (given value: {length!r}).')

        # Time occupies the high bits, randomness the low 64 bits. Since
        # 2**64 is not a multiple of 62**length, both feed the reduced value.
        entropy = int.from_bytes(self._random_bytes(RANDOM_BYTES), 'big')
        value = ((self._clock() << (8 * RANDOM_BYTES)) | entropy) % BASE**length

        return _encode_base62(value).rjust(length, ALPHABET[0])

    @staticmethod
    def validate_custom_code(code: str) -> bool:
        """Return True iff `code` matches [0-9A-Za-z]{4,12}."""
        return isinstance(code, str) and CUSTOM_CODE_PATTERN.fullmatch(code) is not None


def _encode_base62(value: int) -> str:
    if value == 0:
        return ''

    digits = []
    while value > 0:
        value, remainder = divmod(value, BASE)
        digits.append(ALPHABET[remainder])
    return ''.join(reversed(digits))
