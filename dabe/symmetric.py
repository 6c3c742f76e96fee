# -*- coding: utf-8 -*-
"""
symmetric.py  (payload sealing under a GT session key)
------------------------------------------------------
key   = SHA-256(serialize(K_gt))
bytes = nonce(12) || AES-256-GCM(key, nonce, plaintext)   (tag appended by AESGCM)
"""

from __future__ import annotations

import hashlib
from typing import Any

from charm.toolbox.pairinggroup import PairingGroup
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import NONCE_SIZE, TAG_SIZE
from .errors import SymmetricDecryptFailure


def kdf(group: PairingGroup, key_gt: Any) -> bytes:
    """Derive a 32-byte AES key from a GT element via SHA-256."""
    return hashlib.sha256(group.serialize(key_gt)).digest()


def seal(group: PairingGroup, key_gt: Any, plaintext: bytes, rng: Any) -> bytes:
    nonce = rng.random_bytes(NONCE_SIZE)
    return nonce + AESGCM(kdf(group, key_gt)).encrypt(nonce, bytes(plaintext), None)


def open_(group: PairingGroup, key_gt: Any, payload: bytes) -> bytes:
    if len(payload) < NONCE_SIZE + TAG_SIZE:
        raise SymmetricDecryptFailure(f"payload too short ({len(payload)} bytes)")
    nonce, body = payload[:NONCE_SIZE], payload[NONCE_SIZE:]
    try:
        return AESGCM(kdf(group, key_gt)).decrypt(nonce, body, None)
    except InvalidTag as e:
        raise SymmetricDecryptFailure("payload authentication failed") from e
