"""Cosine similarity between embedding vectors."""
from __future__ import annotations

from typing import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine of the angle between ``a`` and ``b``.

    Zero-magnitude vectors have no direction; their similarity to anything is 0.
    """

    left = np.asarray(a, dtype=np.float64)
    right = np.asarray(b, dtype=np.float64)
    if left.shape != right.shape:
        raise ValueError(f"Vector length mismatch: {left.shape[0]} != {right.shape[0]}")
    norm_left = float(np.linalg.norm(left))
    norm_right = float(np.linalg.norm(right))
    if norm_left == 0.0 or norm_right == 0.0:
        return 0.0
    score = float(np.dot(left, right)) / (norm_left * norm_right)
    return max(-1.0, min(1.0, score))


__all__ = ["cosine_similarity"]
