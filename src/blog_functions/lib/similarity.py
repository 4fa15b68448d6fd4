"""Vector helpers for semantic search (parsing and cosine similarity)."""

import json
import math


def parse_embedding(embedding) -> list[float] | None:
    """Return *embedding* as a list of floats.

    Accepts a native list/tuple or its JSON-encoded string form. Returns
    ``None`` for a missing embedding and raises ``ValueError`` for anything
    that is not a numeric vector.
    """
    if embedding is None:
        return None
    if isinstance(embedding, str):
        try:
            embedding = json.loads(embedding)
        except json.JSONDecodeError as exc:
            raise ValueError(f"embedding is not valid JSON: {exc}") from exc
    if not isinstance(embedding, (list, tuple)):
        raise ValueError("embedding must be a list of numbers")
    vec: list[float] = []
    for x in embedding:
        if isinstance(x, bool) or not isinstance(x, (int, float)):
            raise ValueError("embedding must be a list of numbers")
        if not math.isfinite(x):
            raise ValueError("embedding contains non-finite values")
        vec.append(float(x))
    return vec


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Compute ``dot(a, b) / (|a| * |b|)``.

    Only defined for non-empty vectors of equal length with non-zero
    magnitude; raises ``ValueError`` otherwise. The result is clamped to
    [-1, 1] to absorb floating point drift.
    """
    if not a or not b:
        raise ValueError("Cannot compare empty vectors")
    if len(a) != len(b):
        raise ValueError(f"Embedding dimension mismatch: {len(a)} != {len(b)}")

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        raise ValueError("Cannot compare zero-magnitude vectors")

    sim = dot / (math.sqrt(norm_a) * math.sqrt(norm_b))
    if math.isnan(sim):
        raise ValueError("Similarity is undefined for these vectors")
    return max(-1.0, min(1.0, sim))
