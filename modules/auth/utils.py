import secrets
from typing import Optional


def secret_matches(provided: Optional[str], expected: Optional[str]) -> bool:
    """Whole-value equality; an unconfigured secret matches nothing"""
    if not expected or provided is None:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
