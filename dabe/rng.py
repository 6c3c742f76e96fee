# -*- coding: utf-8 -*-
"""
rng.py  (injectable randomness)
-------------------------------
Every operation that samples takes a sampler exposing

  random(kind)       -> fresh element of ZR, G1, G2 or GT
  random_bytes(n)    -> n fresh bytes (AES-GCM nonces)

GroupSampler is the production source. SeededSampler replays the same
stream for the same seed and exists for reproducible tests only.
"""

from __future__ import annotations

import hashlib
import os
from typing import Any, Optional, Union

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair


class GroupSampler:
    """Charm's own generator for group elements, os.urandom for bytes."""

    def __init__(self, group: PairingGroup):
        self.group = group

    def random(self, kind: int = ZR) -> Any:
        return self.group.random(kind)

    def random_bytes(self, n: int) -> bytes:
        return os.urandom(n)


class SeededSampler:
    """
    Deterministic counter-mode sampler: output i is the group hash of
    (seed, i), so the stream is fully determined by the seed.
    """

    def __init__(self, group: PairingGroup, seed: Union[str, bytes]):
        self.group = group
        self._seed = seed.encode("utf-8") if isinstance(seed, str) else bytes(seed)
        self._counter = 0

    def _label(self, tag: str) -> bytes:
        self._counter += 1
        return b"|".join([self._seed, str(self._counter).encode(), tag.encode()])

    def random(self, kind: int = ZR) -> Any:
        if kind == GT:
            return pair(self.group.hash(self._label("G1"), G1),
                        self.group.hash(self._label("G2"), G2))
        if kind == G1:
            return self.group.hash(self._label("G1"), G1)
        if kind == G2:
            return self.group.hash(self._label("G2"), G2)
        return self.group.hash(self._label("ZR"), ZR)

    def random_bytes(self, n: int) -> bytes:
        out = b""
        while len(out) < n:
            out += hashlib.sha256(self._label("bytes")).digest()
        return out[:n]


def default_sampler(group: PairingGroup, rng: Optional[Any] = None) -> Any:
    return rng if rng is not None else GroupSampler(group)
