"""
Invite code generation.

Codes skip easily confused characters (I, O, l, o, 0, 1).
"""

import secrets

INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz23456789"
INVITE_CODE_LENGTH = 8


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))
