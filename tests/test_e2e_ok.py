import os
import sys
import subprocess
from pathlib import Path

import re

OID_RE = re.compile(r"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})", re.I)

def parse_object_id(output: str) -> str:
    m = OID_RE.search(output)
    assert m, f"Cannot parse object_id from output:\n{output}"
    return m.group(1)

# Project root (the directory holding the dabe package)
ROOT = Path(__file__).resolve().parents[1]
PY = sys.executable

def _env():
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join([str(ROOT), env.get("PYTHONPATH", "")])
    return env

def run(args, cwd=None) -> str:
    r = subprocess.run(args, cwd=cwd, env=_env(), capture_output=True, text=True)
    assert r.returncode == 0, (
        f"CMD failed:\n{args}\nSTDOUT:\n{r.stdout}\nSTDERR:\n{r.stderr}"
    )
    return r.stdout

def test_e2e_ok(tmp_path: Path):
    keys = tmp_path / "keys"
    store = keys / "store"
    keys.mkdir()
    store.mkdir()

    gp = keys / "global.json"
    pk1, msk1 = keys / "auth1_pk.json", keys / "auth1_msk.json"
    pk3, msk3 = keys / "auth3_pk.json", keys / "auth3_msk.json"
    bob = keys / "bob.json"

    # 1) global setup
    run([PY, "-m", "dabe.authority_local", "setup", "--out", str(gp)])

    # 2) two independent authorities
    run([PY, "-m", "dabe.authority_local", "authgen", "--global", str(gp),
         "--attrs", "A,B,C", "--pk", str(pk1), "--msk", str(msk1)])
    run([PY, "-m", "dabe.authority_local", "authgen", "--global", str(gp),
         "--attrs", "G,H,I", "--pk", str(pk3), "--msk", str(msk3)])

    # 3) bob gets H,I from authority 3, then B from authority 1
    run([PY, "-m", "dabe.authority_local", "keygen", "--global", str(gp),
         "--msk", str(msk3), "--gid", "bob", "--attrs", "H,I", "--out", str(bob)])
    run([PY, "-m", "dabe.authority_local", "addattr", "--global", str(gp),
         "--msk", str(msk1), "--key", str(bob), "--attr", "b"])

    # 4) encrypt -> object_id
    out = run([PY, "-m", "dabe.owner_encrypt", "--global", str(gp),
               "--pk", str(pk3), "--pk", str(pk1),
               "--policy", '{"AND": [{"ATT": "H"}, {"ATT": "B"}]}',
               "--plaintext", "hello world",
               "--store_dir", str(store)])
    object_id = parse_object_id(out)

    # 5) decrypt
    out2 = run([PY, "-m", "dabe.client_decrypt", "--global", str(gp),
                "--key", str(bob),
                "--object_id", object_id,
                "--store_dir", str(store)])
    assert "Plaintext: hello world" in out2
