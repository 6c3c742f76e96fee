# -*- coding: utf-8 -*-
"""
owner_encrypt.py  (data owner: Encrypt + store)
-----------------------------------------------
Encrypts a plaintext under an access policy with the public keys of every
authority the policy mentions, then stores the ciphertext bundle under a
fresh object id.

Example:
  python -m dabe.owner_encrypt \\
      --global keys/global.json \\
      --pk keys/auth1_pk.json --pk keys/auth3_pk.json \\
      --policy '{"AND": [{"ATT": "H"}, {"ATT": "B"}]}' \\
      --plaintext "hello world" \\
      --store_dir keys/store

Prints the object_id that client_decrypt needs.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import uuid
from typing import Any, Dict

from . import aw11_core, serialization
from .config import KEY_DIR, LOG_FORMAT, STORE_DIR
from .errors import ABEError


def _store_put(store_dir: str, obj_id: str, payload: Dict[str, Any]) -> str:
    os.makedirs(store_dir, exist_ok=True)
    path = os.path.join(store_dir, f"{obj_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    return path


def main() -> None:
    ap = argparse.ArgumentParser(description="AW11 encrypt")
    ap.add_argument("--global", dest="global_", default=os.path.join(KEY_DIR, "global.json"),
                    help="Global parameters JSON")
    ap.add_argument("--pk", action="append", required=True,
                    help="Authority public key JSON (repeat for each authority)")
    ap.add_argument("--policy", required=True,
                    help='JSON policy, e.g. \'{"OR": [{"ATT": "A"}, {"ATT": "B"}]}\', or "A and (B or C)"')
    ap.add_argument("--plaintext", required=True, help="Plaintext string to encrypt")
    ap.add_argument("--store_dir", default=STORE_DIR, help="Directory to store the ciphertext bundle")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    gp  = serialization.load_global(serialization.load_json(args.global_))
    pks = [serialization.load_public_key(gp, serialization.load_json(p)) for p in args.pk]

    try:
        ct = aw11_core.encrypt(gp, pks, args.policy, args.plaintext.encode("utf-8"))
    except ABEError as e:
        raise SystemExit(f"[ENCRYPT] FAILED: {e}")

    obj_id = str(uuid.uuid4())
    bundle = {
        "scheme": "AW11",
        "curve":  gp.curve,
        "ct":     serialization.dump_ciphertext(gp, ct),
    }
    path = _store_put(args.store_dir, obj_id, bundle)

    # obj_id first so callers can capture it easily
    print(obj_id)
    print(f"[ENCRYPT] Bundle stored -> {path}  (policy='{ct.policy}')")


if __name__ == "__main__":
    main()
