"""Short public identifiers for stored blobs."""

import secrets
import string

IDENTIFIER_ALPHABET = string.ascii_lowercase + string.digits


def generate_identifier(length: int = 6) -> str:
    """Return ``length`` characters drawn uniformly from ``[a-z0-9]``.

    Uniqueness is not guaranteed; callers check it against the record store.
    """
    if length < 1:
        msg = "Identifier length must be positive"
        raise ValueError(msg)
    return "".join(secrets.choice(IDENTIFIER_ALPHABET) for _ in range(length))
