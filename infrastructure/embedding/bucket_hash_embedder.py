"""Embedder that writes term frequencies into hashed buckets (bag-of-words sketch)."""
from __future__ import annotations

import hashlib
import string
from collections import Counter

from domain.interfaces import Embedder

_BASE36_DIGITS = frozenset(string.digits + string.ascii_lowercase)


def tokenize(text: str, *, min_length: int = 3) -> list[str]:
    """Lower-case, whitespace-split tokens with surrounding punctuation removed."""

    tokens: list[str] = []
    for raw in text.lower().split():
        token = raw.strip(string.punctuation)
        if len(token) >= min_length:
            tokens.append(token)
    return tokens


class BucketHashEmbedder(Embedder):
    """Produces deterministic term-frequency vectors of a fixed dimension.

    Each distinct token lands in the bucket given by its last two characters
    read as a base-36 number. The first token to reach a bucket keeps it;
    later collisions are dropped, so the vector is a lossy overlap signal
    rather than a semantic embedding.
    """

    def __init__(self, dimension: int = 100) -> None:
        if dimension <= 0:
            raise ValueError("dimension must be > 0")
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    def bucket(self, token: str) -> int:
        tail = token[-2:]
        if all(char in _BASE36_DIGITS for char in tail):
            return int(tail, 36) % self._dimension
        digest = hashlib.md5(tail.encode("utf-8")).hexdigest()
        return int(digest, 16) % self._dimension

    def encode(self, text: str) -> list[float]:
        vector = [0.0] * self._dimension
        tokens = tokenize(text)
        if not tokens:
            return vector
        total = len(tokens)
        claimed: set[int] = set()
        # Counter keeps first-occurrence order, which decides collisions.
        for token, count in Counter(tokens).items():
            slot = self.bucket(token)
            if slot in claimed:
                continue
            claimed.add(slot)
            vector[slot] = count / total
        return vector


__all__ = ["BucketHashEmbedder", "tokenize"]
