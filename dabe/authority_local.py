# -*- coding: utf-8 -*-
"""
authority_local.py  (global setup + attribute authority utilities)
-----------------------------------------------------------------
Commands:
  python -m dabe.authority_local setup   --out keys/global.json --curve BN254
  python -m dabe.authority_local authgen --global keys/global.json --attrs "A,B,C" \\
                                         --pk keys/auth1_pk.json --msk keys/auth1_msk.json
  python -m dabe.authority_local keygen  --global keys/global.json --msk keys/auth1_msk.json \\
                                         --gid bob --attrs "A,C" --out keys/bob.json
  python -m dabe.authority_local addattr --global keys/global.json --msk keys/auth2_msk.json \\
                                         --key keys/bob.json --attr D

Notes:
- Each authority runs authgen on its own; nothing but the global parameters
  is shared between authorities.
- The master key file never needs to leave the authority that created it.
"""

from __future__ import annotations

import argparse
import logging
import os

from . import aw11_core, serialization
from .config import DEFAULT_CURVE, KEY_DIR, LOG_FORMAT
from .errors import ABEError


def _split(attrs: str):
    return [x.strip() for x in attrs.split(",") if x.strip()]


def cmd_setup(args: argparse.Namespace) -> None:
    gp = aw11_core.setup(curve=args.curve)
    serialization.save_json(args.out, serialization.dump_global(gp))
    print(f"[AUTH] Setup OK -> {args.out}  (curve={gp.curve})")


def cmd_authgen(args: argparse.Namespace) -> None:
    gp = serialization.load_global(serialization.load_json(args.global_))
    pk, msk = aw11_core.authgen(gp, _split(args.attrs))
    serialization.save_json(args.pk, serialization.dump_public_key(gp, pk))
    serialization.save_json(args.msk, serialization.dump_master_key(gp, msk))
    print(f"[AUTH] AuthGen OK -> {args.pk}, {args.msk}  (attrs={list(pk.attributes)})")


def cmd_keygen(args: argparse.Namespace) -> None:
    gp = serialization.load_global(serialization.load_json(args.global_))
    msk = serialization.load_master_key(gp, serialization.load_json(args.msk))
    sk = aw11_core.keygen(gp, msk, args.gid, _split(args.attrs))
    serialization.save_json(args.out, serialization.dump_secret_key(gp, sk))
    print(f"[AUTH] KeyGen OK -> {args.out}  (gid={sk.gid}, attrs={sk.attributes})")


def cmd_addattr(args: argparse.Namespace) -> None:
    gp = serialization.load_global(serialization.load_json(args.global_))
    msk = serialization.load_master_key(gp, serialization.load_json(args.msk))
    sk = serialization.load_secret_key(gp, serialization.load_json(args.key))
    aw11_core.add_attribute(gp, msk, args.attr, sk)
    serialization.save_json(args.key, serialization.dump_secret_key(gp, sk))
    print(f"[AUTH] AddAttribute OK -> {args.key}  (attrs={sk.attributes})")


def main() -> None:
    default_global = os.path.join(KEY_DIR, "global.json")

    ap = argparse.ArgumentParser(description="AW11 authority command-line tool")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # --- setup ---
    s0 = sub.add_parser("setup", help="Create global parameters")
    s0.add_argument("--curve", default=DEFAULT_CURVE, help=f"Pairing curve (default: {DEFAULT_CURVE})")
    s0.add_argument("--out",   default=default_global, help="Output path")
    s0.set_defaults(func=cmd_setup)

    # --- authgen ---
    s1 = sub.add_parser("authgen", help="Create an authority key pair")
    s1.add_argument("--global", dest="global_", default=default_global, help="Global parameters JSON")
    s1.add_argument("--attrs", required=True, help='Comma-separated attributes, e.g. "A,B,C"')
    s1.add_argument("--pk",    required=True, help="Output path for the public key")
    s1.add_argument("--msk",   required=True, help="Output path for the master key")
    s1.set_defaults(func=cmd_authgen)

    # --- keygen ---
    s2 = sub.add_parser("keygen", help="Issue a user secret key")
    s2.add_argument("--global", dest="global_", default=default_global, help="Global parameters JSON")
    s2.add_argument("--msk",   required=True, help="Authority master key JSON")
    s2.add_argument("--gid",   required=True, help="User global identifier")
    s2.add_argument("--attrs", required=True, help='Comma-separated attributes, e.g. "A,C"')
    s2.add_argument("--out",   required=True, help="Output path for the user key")
    s2.set_defaults(func=cmd_keygen)

    # --- addattr ---
    s3 = sub.add_parser("addattr", help="Add one attribute to an existing user key")
    s3.add_argument("--global", dest="global_", default=default_global, help="Global parameters JSON")
    s3.add_argument("--msk",   required=True, help="Authority master key JSON")
    s3.add_argument("--key",   required=True, help="User key JSON (updated in place)")
    s3.add_argument("--attr",  required=True, help="Attribute to add")
    s3.set_defaults(func=cmd_addattr)

    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)
    try:
        args.func(args)
    except ABEError as e:
        raise SystemExit(f"[AUTH] {args.cmd} FAILED: {e}")


if __name__ == "__main__":
    main()
