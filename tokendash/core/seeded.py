#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Seeded value generation.

Every pseudo-random number in TokenDash is a pure function of its seed: the
seed parts are serialized, hashed with BLAKE2b and the top 53 bits of the
digest become a float in [0, 1). The same seed therefore yields the same
value in any process, on any thread, in any call order.
"""
from __future__ import annotations

import hashlib
import math
from dataclasses import dataclass
from typing import Union

from ..shared.errors import InvalidParameterError

SeedPart = Union[str, int, float]

_FLOAT_SCALE = 2.0 ** -53


def _encode_part(part: SeedPart) -> str:
    if isinstance(part, bool):
        raise InvalidParameterError("Seed parts cannot be booleans")
    if isinstance(part, str):
        return "s:" + part
    if isinstance(part, int):
        return f"i:{part}"
    if isinstance(part, float):
        if not math.isfinite(part):
            raise InvalidParameterError(f"Seed parts must be finite, got {part!r}")
        if part.is_integer():
            return f"i:{int(part)}"
        return "f:" + part.hex()
    raise InvalidParameterError(f"Unsupported seed part type: {type(part).__name__}")


def label_hash(label: str) -> int:
    """Sum of the character codes of a label"""
    return sum(ord(ch) for ch in label)


@dataclass(frozen=True)
class SeededValueGenerator:
    """
    Stateless seeded generator

    Args:
        namespace: Salt mixed into every seed, so two generators with different
            namespaces produce independent streams for the same seed parts
    """
    namespace: str = "tokendash"

    def unit(self, *seed: SeedPart) -> float:
        """
        Deterministic value in [0, 1) for the given seed parts

        Seeds may mix strings, integers (timestamps, hour indices, negative
        values and zero included) and finite floats. Integral floats hash like
        the equal integer.
        """
        if not seed:
            raise InvalidParameterError("At least one seed part is required")
        payload = "\x1f".join([self.namespace] + [_encode_part(p) for p in seed])
        digest = hashlib.blake2b(payload.encode("utf-8"), digest_size=8).digest()
        return (int.from_bytes(digest, "big") >> 11) * _FLOAT_SCALE

    def uniform(self, low: float, high: float, *seed: SeedPart) -> float:
        """Deterministic value in [low, high)"""
        if not (math.isfinite(low) and math.isfinite(high)) or high < low:
            raise InvalidParameterError(f"Invalid range [{low}, {high})")
        return low + (high - low) * self.unit(*seed)

    def chance(self, probability: float, *seed: SeedPart) -> bool:
        """Deterministic Bernoulli draw"""
        if not 0.0 <= probability <= 1.0:
            raise InvalidParameterError(f"probability must be within [0, 1], got {probability}")
        return self.unit(*seed) < probability

    def label_seed(self, label: str, magnitude: float) -> float:
        """Seed value for a labelled quantity (character sum mixed with its magnitude)"""
        return self.unit("label", label_hash(label), float(magnitude))


DEFAULT_GENERATOR = SeededValueGenerator()
