# -*- coding: utf-8 -*-
"""
aw11_core.py  (decentralized multi-authority CP-ABE, Lewko-Waters AW11)
-----------------------------------------------------------------------
Roles:
  anyone    : Setup                       -> GP
  authority : AuthGen / KeyGen / AddAttr  -> (PK, MK), SK components
  owner     : Encrypt                     -> CT
  user      : Decrypt                     -> M or failure

Over asymmetric groups G1 x G2 -> GT with e = pair:

  GP  = (g1, g2)
  PK  = { i: (e(g1,g2)^{α_i},  g2^{y_i}) }
  MK  = { i: (α_i, y_i) }
  SK  = (gid, { i: g1^{α_i} · H(gid)^{y_i} })          H : {0,1}* -> G1

  Encrypt(policy, M):
    s, K ∈ random;  λ_x = shares of s,  ω_x = shares of 0
    C0   = K · e(g1,g2)^s
    per row x with attribute ρ(x), fresh r_x:
      C1_x = e(g1,g2)^{λ_x} · e(g1,g2)^{α_ρ(x) r_x}
      C2_x = g2^{r_x}
      C3_x = g2^{y_ρ(x) r_x} · g2^{ω_x}
    CT   = (policy, C0, {C1_x, C2_x, C3_x}, AES-GCM_K(M))

  Decrypt:
    C1_x · e(H(gid), C3_x) / e(K_ρ(x), C2_x) = e(g1,g2)^{λ_x} · e(H(gid),g2)^{ω_x}
    ∏_x (...)^{c_x} = e(g1,g2)^s        (Σ c_x λ_x = s,  Σ c_x ω_x = 0)
    K = C0 / e(g1,g2)^s

Attribute names are upper-cased everywhere they are stored or compared.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair

from . import symmetric
from .config import DEFAULT_CURVE
from .errors import AttributeNotFound, EmptyInput, InternalInconsistency, PolicyUnsatisfied
from .lsss import compile_policy, gen_shares, prune, solve_coefficients
from .policy import normalize, parse_policy
from .rng import default_sampler

log = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def get_group(curve: str) -> PairingGroup:
    return PairingGroup(curve)


# ============================================================
# Scheme dataclasses
# ============================================================

@dataclass(frozen=True)
class GlobalParameters:
    curve: str
    g1: Any   # G1
    g2: Any   # G2

    @property
    def group(self) -> PairingGroup:
        return get_group(self.curve)


class PublicAttribute(NamedTuple):
    e_gg_alpha: Any   # GT
    g2_y: Any         # G2


class MasterAttribute(NamedTuple):
    alpha: Any        # ZR
    y: Any            # ZR


@dataclass(frozen=True)
class AuthorityPublicKey:
    attributes: Dict[str, PublicAttribute]

    def __post_init__(self):
        object.__setattr__(self, "attributes",
                           {normalize(n): a for n, a in self.attributes.items()})


@dataclass(frozen=True)
class AuthorityMasterKey:
    attributes: Dict[str, MasterAttribute]

    def __post_init__(self):
        object.__setattr__(self, "attributes",
                           {normalize(n): a for n, a in self.attributes.items()})


@dataclass
class UserSecretKey:
    gid: str
    components: Dict[str, Any] = field(default_factory=dict)   # attr -> G1

    def __post_init__(self):
        self.components = {normalize(n): k for n, k in self.components.items()}

    @property
    def attributes(self) -> List[str]:
        return list(self.components)


class CiphertextRow(NamedTuple):
    attr: str
    c1: Any   # GT
    c2: Any   # G2
    c3: Any   # G2


@dataclass(frozen=True)
class Ciphertext:
    policy: str
    c0: Any                   # GT
    rows: Tuple[CiphertextRow, ...]
    ct: bytes                 # AES-GCM sealed payload

    def __post_init__(self):
        object.__setattr__(self, "rows", tuple(self.rows))


# ============================================================
# Helpers
# ============================================================

def hash_to_g1(gp: GlobalParameters, gid: str) -> Any:
    """H(gid) ∈ G1, keyed by the first generator."""
    group = gp.group
    return group.hash(group.serialize(gp.g1) + gid.encode("utf-8"), G1)


def _egg(gp: GlobalParameters) -> Any:
    return pair(gp.g1, gp.g2)


def _find_public_attribute(pks: Sequence[AuthorityPublicKey], attr: str) -> PublicAttribute:
    for pk in pks:
        entry = pk.attributes.get(attr)
        if entry is not None:
            return entry
    raise AttributeNotFound(attr, "any supplied authority public key")


# ============================================================
# Setup / AuthGen
# ============================================================

def setup(curve: str = DEFAULT_CURVE, rng: Optional[Any] = None) -> GlobalParameters:
    """Sample fresh generators g1 ∈ G1, g2 ∈ G2."""
    group = get_group(curve)
    rng = default_sampler(group, rng)
    gp = GlobalParameters(curve=curve, g1=rng.random(G1), g2=rng.random(G2))
    log.debug("[Setup] curve=%s", curve)
    return gp


def authgen(gp: GlobalParameters, attributes: Iterable[str],
            rng: Optional[Any] = None) -> Tuple[AuthorityPublicKey, AuthorityMasterKey]:
    """
    AuthGen(GP, U) -> (PK, MK)

    For each i ∈ U (upper-cased): α_i, y_i ← ZR,
      PK_i = (e(g1,g2)^{α_i}, g2^{y_i}),  MK_i = (α_i, y_i)
    """
    names = [normalize(a) for a in attributes]
    if not names:
        raise EmptyInput("authgen needs at least one attribute")
    if any(not n for n in names):
        raise EmptyInput("attribute names must be non-empty")

    group = gp.group
    rng = default_sampler(group, rng)
    egg = _egg(gp)

    pk: Dict[str, PublicAttribute] = {}
    msk: Dict[str, MasterAttribute] = {}
    for name in names:
        alpha_i = rng.random(ZR)
        y_i = rng.random(ZR)
        msk[name] = MasterAttribute(alpha_i, y_i)
        pk[name] = PublicAttribute(egg ** alpha_i, gp.g2 ** y_i)

    log.debug("[AuthGen] attributes=%s", list(pk))
    return AuthorityPublicKey(pk), AuthorityMasterKey(msk)


# ============================================================
# KeyGen / AddAttribute
# ============================================================

def keygen(gp: GlobalParameters, msk: AuthorityMasterKey, gid: str,
           attributes: Iterable[str]) -> UserSecretKey:
    """Issue a fresh key for `gid` holding every attribute in `attributes`."""
    names = list(attributes)
    if not gid or not gid.strip():
        raise EmptyInput("keygen needs a non-empty gid")
    if not names:
        raise EmptyInput("keygen needs at least one attribute")
    sk = UserSecretKey(gid=gid)
    for name in names:
        add_attribute(gp, msk, name, sk)
    return sk


def add_attribute(gp: GlobalParameters, msk: AuthorityMasterKey, attribute: str,
                  sk: UserSecretKey) -> UserSecretKey:
    """
    Append K_i = g1^{α_i} · H(gid)^{y_i} to `sk`.

    The component only combines with ciphertext rows under the same gid, so
    keys of different users cannot be pooled.
    """
    if not attribute or not attribute.strip():
        raise EmptyInput("attribute name must be non-empty")
    if not sk.gid or not sk.gid.strip():
        raise EmptyInput("secret key has an empty gid")

    name = normalize(attribute)
    entry = msk.attributes.get(name)
    if entry is None:
        raise AttributeNotFound(name, "authority master key")

    h = hash_to_g1(gp, sk.gid)
    sk.components[name] = (gp.g1 ** entry.alpha) * (h ** entry.y)
    log.debug("[KeyGen] gid=%s attr=%s", sk.gid, name)
    return sk


# ============================================================
# Encrypt
# ============================================================

def encrypt(gp: GlobalParameters, pks: Sequence[AuthorityPublicKey],
            policy: Union[str, dict], plaintext: bytes,
            rng: Optional[Any] = None) -> Ciphertext:
    """
    Encrypt(GP, {PK}, policy, M) -> CT

    The policy is carried verbatim when given as a string; a dict is stored
    as its JSON rendering.
    """
    policy_str = policy if isinstance(policy, str) else json.dumps(policy)
    compiled = compile_policy(parse_policy(policy_str))
    public = [_find_public_attribute(pks, attr) for attr in compiled.rho]

    group = gp.group
    rng = default_sampler(group, rng)
    egg = _egg(gp)

    s = rng.random(ZR)
    s_shares = gen_shares(group, s, compiled.root, rng)
    w_shares = gen_shares(group, group.init(ZR, 0), compiled.root, rng)

    # random GT session key, sealed below
    key_gt = rng.random(GT)
    c0 = key_gt * (egg ** s)

    rows: List[CiphertextRow] = []
    for (attr, lam), (_, w), pk_attr in zip(s_shares, w_shares, public):
        r_x = rng.random(ZR)
        rows.append(CiphertextRow(
            attr,
            (egg ** lam) * (pk_attr.e_gg_alpha ** r_x),
            gp.g2 ** r_x,
            (pk_attr.g2_y ** r_x) * (gp.g2 ** w),
        ))

    log.debug("[Encrypt] policy=%s rows=%d", policy_str, len(rows))
    return Ciphertext(
        policy=policy_str,
        c0=c0,
        rows=tuple(rows),
        ct=symmetric.seal(group, key_gt, plaintext, rng),
    )


# ============================================================
# Decrypt
# ============================================================

def decrypt(gp: GlobalParameters, sk: UserSecretKey, ct: Ciphertext) -> bytes:
    """
    Decrypt(GP, SK, CT) -> M

    Raises PolicyUnsatisfied when the key's attributes do not satisfy
    ct.policy, SymmetricDecryptFailure when the payload fails authentication.
    """
    group = gp.group
    # snapshot, keyed by normalised name
    components = {normalize(name): k for name, k in dict(sk.components).items()}

    compiled = compile_policy(parse_policy(ct.policy))
    if len(compiled.rho) != len(ct.rows):
        raise InternalInconsistency(
            f"ciphertext has {len(ct.rows)} rows but its policy compiles to {len(compiled.rho)}")

    ok, selected = prune(compiled.root, components)
    if not ok:
        log.info("[Decrypt] gid=%s attrs=%s do not satisfy policy", sk.gid, list(components))
        raise PolicyUnsatisfied(f"attributes {sorted(components)} do not satisfy {ct.policy}")

    coeffs = solve_coefficients(group, compiled, selected)
    h = hash_to_g1(gp, sk.gid)

    egg_s = None
    for i in selected:
        if i not in coeffs:
            continue
        row = ct.rows[i]
        if row.attr != compiled.rho[i]:
            raise InternalInconsistency(
                f"row {i} is labelled '{row.attr}', policy expects '{compiled.rho[i]}'")
        k = components.get(row.attr)
        if k is None:
            raise InternalInconsistency(f"selected row {i} has no key component for '{row.attr}'")
        num = row.c1 * pair(h, row.c3)
        dem = pair(k, row.c2)
        term = (num / dem) ** coeffs[i]
        egg_s = term if egg_s is None else egg_s * term

    if egg_s is None:
        raise InternalInconsistency("empty reconstruction product")

    key_gt = ct.c0 / egg_s
    return symmetric.open_(group, key_gt, ct.ct)
