# -*- coding: utf-8 -*-
"""
client_decrypt.py  (user: load bundle + Decrypt)
------------------------------------------------
Example:
  python -m dabe.client_decrypt \\
      --global    keys/global.json \\
      --key       keys/bob.json \\
      --object_id <OID> \\
      --store_dir keys/store
"""

from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Any, Dict

from . import aw11_core, serialization
from .config import KEY_DIR, LOG_FORMAT, STORE_DIR
from .errors import ABEError, PolicyUnsatisfied, SymmetricDecryptFailure


def _store_get(store_dir: str, obj_id: str) -> Dict[str, Any]:
    path = os.path.join(store_dir, f"{obj_id}.json")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def main() -> None:
    ap = argparse.ArgumentParser(description="AW11 decrypt")
    ap.add_argument("--global", dest="global_", default=os.path.join(KEY_DIR, "global.json"),
                    help="Global parameters JSON")
    ap.add_argument("--key", required=True, help="User key JSON")
    ap.add_argument("--object_id", required=True, help="Object ID printed by owner_encrypt")
    ap.add_argument("--store_dir", default=STORE_DIR, help="Directory that holds ciphertext bundles")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    # ── load key material and ciphertext bundle ───────────────────────────────
    gp = serialization.load_global(serialization.load_json(args.global_))
    sk = serialization.load_secret_key(gp, serialization.load_json(args.key))

    bundle = _store_get(args.store_dir, args.object_id)
    ct     = serialization.load_ciphertext(gp, bundle["ct"])

    # ── decrypt ───────────────────────────────────────────────────────────────
    try:
        pt = aw11_core.decrypt(gp, sk, ct)
    except PolicyUnsatisfied as e:
        raise SystemExit(f"[CLIENT] Access denied: {e}")
    except SymmetricDecryptFailure as e:
        raise SystemExit(f"[CLIENT] Ciphertext corrupted: {e}")
    except ABEError as e:
        raise SystemExit(f"[CLIENT] Decrypt FAILED: {e}")

    print("[CLIENT] Plaintext:", pt.decode("utf-8", errors="replace"))


if __name__ == "__main__":
    main()
