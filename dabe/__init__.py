# -*- coding: utf-8 -*-
"""Decentralized multi-authority CP-ABE (Lewko-Waters, Eurocrypt 2011) over charm pairing groups."""

from .aw11_core import (
    AuthorityMasterKey,
    AuthorityPublicKey,
    Ciphertext,
    CiphertextRow,
    GlobalParameters,
    MasterAttribute,
    PublicAttribute,
    UserSecretKey,
    add_attribute,
    authgen,
    decrypt,
    encrypt,
    get_group,
    hash_to_g1,
    keygen,
    setup,
)
from .errors import (
    ABEError,
    AttributeNotFound,
    EmptyInput,
    InternalInconsistency,
    PolicyParseError,
    PolicyUnsatisfied,
    SymmetricDecryptFailure,
)
from .policy import parse_policy, policy_to_json
from .rng import GroupSampler, SeededSampler

__version__ = "0.1.0"
