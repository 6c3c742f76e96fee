# -*- coding: utf-8 -*-
# ── Defaults (environment overrides, command-line flags override both) ───────

import os

# pairing curve; BN254 is asymmetric (G1 != G2)
DEFAULT_CURVE = os.environ.get("DABE_CURVE", "BN254")

KEY_DIR   = os.environ.get("DABE_KEY_DIR", "keys")
STORE_DIR = os.environ.get("DABE_STORE_DIR", os.path.join(KEY_DIR, "store"))

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# AES-GCM
NONCE_SIZE = 12
TAG_SIZE   = 16
