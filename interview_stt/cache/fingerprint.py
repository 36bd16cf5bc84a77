"""Sampled content fingerprints for the response cache."""
from __future__ import annotations

import hashlib
from typing import Optional

from ..models import AudioEncoding

DEFAULT_SAMPLE_BYTES = 4096


def compute_fingerprint(
    data: bytes,
    encoding: AudioEncoding,
    language: Optional[str] = None,
    sample_size: int = DEFAULT_SAMPLE_BYTES,
) -> str:
    """Fingerprint a clip from its size, encoding, language and edge samples.

    Only the first and last ``sample_size`` bytes are hashed, so the cost is
    constant for large recordings. Two clips that differ only in their middle
    section and have the same length collide; that trade-off is accepted for
    short interview answers, where re-recordings differ at the edges.

    Args:
        data: Audio bytes
        encoding: Declared encoding of ``data``
        language: Language hint, part of the key since it changes the output
        sample_size: Bytes sampled from each end of ``data``

    Returns:
        Hex-encoded SHA-256 digest
    """
    hasher = hashlib.sha256()
    hasher.update(str(len(data)).encode())
    hasher.update(b"|")
    hasher.update(encoding.value.encode())
    hasher.update(b"|")
    hasher.update((language or "").encode())
    hasher.update(b"|")
    hasher.update(data[:sample_size])
    if len(data) > sample_size:
        hasher.update(data[-sample_size:])
    return hasher.hexdigest()
