import base64
import json
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

ROOT = Path(__file__).resolve().parents[1]
PY = sys.executable

def _env():
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join([str(ROOT), env.get("PYTHONPATH", "")])
    return env

def run(args, cwd=None) -> str:
    r = subprocess.run(args, cwd=cwd, env=_env(), capture_output=True, text=True)
    assert r.returncode == 0, f"CMD failed:\n{args}\nSTDOUT:\n{r.stdout}\nSTDERR:\n{r.stderr}"
    return r.stdout

def run_expect_fail(args, cwd=None) -> str:
    r = subprocess.run(args, cwd=cwd, env=_env(), capture_output=True, text=True)
    assert r.returncode != 0, f"Expected fail but succeeded:\n{args}\nSTDOUT:\n{r.stdout}\nSTDERR:\n{r.stderr}"
    return r.stdout + "\n" + r.stderr

def test_tamper_fail(tmp_path: Path):
    keys = tmp_path / "keys"
    store = keys / "store"
    keys.mkdir()
    store.mkdir()

    gp = keys / "global.json"
    pk, msk = keys / "pk.json", keys / "msk.json"
    user = keys / "user1.json"

    run([PY, "-m", "dabe.authority_local", "setup", "--out", str(gp)])
    run([PY, "-m", "dabe.authority_local", "authgen", "--global", str(gp),
         "--attrs", "A", "--pk", str(pk), "--msk", str(msk)])
    run([PY, "-m", "dabe.authority_local", "keygen", "--global", str(gp),
         "--msk", str(msk), "--gid", "user1", "--attrs", "A", "--out", str(user)])

    out = run([PY, "-m", "dabe.owner_encrypt", "--global", str(gp), "--pk", str(pk),
               "--policy", "A",
               "--plaintext", "hello world",
               "--store_dir", str(store)])
    object_id = parse_object_id(out)

    # flip one bit of the sealed payload
    path = store / f"{object_id}.json"
    bundle = json.loads(path.read_text(encoding="utf-8"))
    payload = bytearray(base64.b64decode(bundle["ct"]["ct"]))
    payload[-1] ^= 0x01
    bundle["ct"]["ct"] = base64.b64encode(bytes(payload)).decode("ascii")
    path.write_text(json.dumps(bundle), encoding="utf-8")

    msg = run_expect_fail([PY, "-m", "dabe.client_decrypt", "--global", str(gp),
                           "--key", str(user),
                           "--object_id", object_id,
                           "--store_dir", str(store)])
    assert "Ciphertext corrupted" in msg
    assert "Access denied" not in msg
