"""
Password hashing for users created through review submission.
"""

from __future__ import annotations

import bcrypt


def hash_password(plain_password: str) -> str:
    # bcrypt only looks at the first 72 bytes and newer releases refuse longer input.
    password = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")
