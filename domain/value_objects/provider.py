from enum import Enum


class Provider(str, Enum):
    """Third-party storage backends a blob is replicated to."""

    CLOUDSKY = "cloudsky"
    CATBOX = "catbox"
