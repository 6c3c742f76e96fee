# -*- coding: utf-8 -*-
"""
serialization.py  (JSON / base64 persistence of AW11 objects)
-------------------------------------------------------------
Group elements are stored as {"__charm__": "<base64 of group.serialize>"}.
Everything except GlobalParameters is loaded against the group named by the
global parameters it belongs to.
"""

from __future__ import annotations

import base64
import json
import os
from typing import Any, Dict

from charm.toolbox.pairinggroup import PairingGroup

from .aw11_core import (
    AuthorityMasterKey,
    AuthorityPublicKey,
    Ciphertext,
    CiphertextRow,
    GlobalParameters,
    MasterAttribute,
    PublicAttribute,
    UserSecretKey,
    get_group,
)


def _b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def _b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"))

def save_json(path: str, obj: Any) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)

def load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _el(group: PairingGroup, x: Any) -> Dict[str, str]:
    return {"__charm__": _b64e(group.serialize(x))}

def _un(group: PairingGroup, blob: Dict[str, str]) -> Any:
    return group.deserialize(_b64d(blob["__charm__"]))


# ============================================================
# GlobalParameters
# ============================================================

def dump_global(gp: GlobalParameters) -> Dict[str, Any]:
    group = gp.group
    return {"curve": gp.curve, "g1": _el(group, gp.g1), "g2": _el(group, gp.g2)}

def load_global(blob: Dict[str, Any]) -> GlobalParameters:
    group = get_group(blob["curve"])
    return GlobalParameters(curve=blob["curve"],
                            g1=_un(group, blob["g1"]),
                            g2=_un(group, blob["g2"]))


# ============================================================
# Authority keys
# ============================================================

def dump_public_key(gp: GlobalParameters, pk: AuthorityPublicKey) -> Dict[str, Any]:
    group = gp.group
    return {"attributes": {
        name: {"e_gg_alpha": _el(group, a.e_gg_alpha), "g2_y": _el(group, a.g2_y)}
        for name, a in pk.attributes.items()
    }}

def load_public_key(gp: GlobalParameters, blob: Dict[str, Any]) -> AuthorityPublicKey:
    group = gp.group
    return AuthorityPublicKey({
        name: PublicAttribute(_un(group, a["e_gg_alpha"]), _un(group, a["g2_y"]))
        for name, a in blob["attributes"].items()
    })

def dump_master_key(gp: GlobalParameters, msk: AuthorityMasterKey) -> Dict[str, Any]:
    group = gp.group
    return {"attributes": {
        name: {"alpha": _el(group, a.alpha), "y": _el(group, a.y)}
        for name, a in msk.attributes.items()
    }}

def load_master_key(gp: GlobalParameters, blob: Dict[str, Any]) -> AuthorityMasterKey:
    group = gp.group
    return AuthorityMasterKey({
        name: MasterAttribute(_un(group, a["alpha"]), _un(group, a["y"]))
        for name, a in blob["attributes"].items()
    })


# ============================================================
# User key
# ============================================================

def dump_secret_key(gp: GlobalParameters, sk: UserSecretKey) -> Dict[str, Any]:
    group = gp.group
    return {"gid": sk.gid,
            "components": {name: _el(group, k) for name, k in sk.components.items()}}

def load_secret_key(gp: GlobalParameters, blob: Dict[str, Any]) -> UserSecretKey:
    group = gp.group
    return UserSecretKey(gid=blob["gid"],
                         components={name: _un(group, k)
                                     for name, k in blob["components"].items()})


# ============================================================
# Ciphertext
# ============================================================

def dump_ciphertext(gp: GlobalParameters, ct: Ciphertext) -> Dict[str, Any]:
    group = gp.group
    return {
        "policy": ct.policy,
        "c0":     _el(group, ct.c0),
        "rows":   [{"attr": r.attr,
                    "c1": _el(group, r.c1),
                    "c2": _el(group, r.c2),
                    "c3": _el(group, r.c3)} for r in ct.rows],
        "ct":     _b64e(ct.ct),
    }

def load_ciphertext(gp: GlobalParameters, blob: Dict[str, Any]) -> Ciphertext:
    group = gp.group
    return Ciphertext(
        policy=blob["policy"],
        c0=_un(group, blob["c0"]),
        rows=tuple(CiphertextRow(r["attr"], _un(group, r["c1"]), _un(group, r["c2"]), _un(group, r["c3"]))
                   for r in blob["rows"]),
        ct=_b64d(blob["ct"]),
    )
