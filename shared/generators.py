"""
Random code generators — pure, side-effect-free functions.

All generators use the ``secrets`` module.
"""

from __future__ import annotations

import secrets

CODE_LENGTH = 6
_CODE_MIN = 10 ** (CODE_LENGTH - 1)
_CODE_MAX = 10**CODE_LENGTH - 1


def generate_verification_code() -> str:
    """Generate a 6-digit numeric verification code.

    The value is drawn uniformly from 100000–999999, so codes never start with
    a zero.

    Returns:
        String of exactly six decimal digits.
    """
    return str(_CODE_MIN + secrets.randbelow(_CODE_MAX - _CODE_MIN + 1))
