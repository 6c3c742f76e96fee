import json

from dabe import aw11_core, serialization

PLAINTEXT = b"hello world"


def test_objects_survive_json(tmp_path, gp):
    pk, msk = aw11_core.authgen(gp, ["A", "B"])
    bob = aw11_core.keygen(gp, msk, "bob", ["A"])
    ct = aw11_core.encrypt(gp, [pk], "A or B", PLAINTEXT)

    path = tmp_path / "bundle.json"
    serialization.save_json(str(path), {
        "gp":  serialization.dump_global(gp),
        "pk":  serialization.dump_public_key(gp, pk),
        "msk": serialization.dump_master_key(gp, msk),
        "sk":  serialization.dump_secret_key(gp, bob),
        "ct":  serialization.dump_ciphertext(gp, ct),
    })
    blob = serialization.load_json(str(path))

    gp2 = serialization.load_global(blob["gp"])
    assert gp2 == gp
    assert serialization.load_public_key(gp2, blob["pk"]) == pk
    assert serialization.load_master_key(gp2, blob["msk"]) == msk

    bob2 = serialization.load_secret_key(gp2, blob["sk"])
    assert bob2 == bob
    ct2 = serialization.load_ciphertext(gp2, blob["ct"])
    assert ct2 == ct
    assert aw11_core.decrypt(gp2, bob2, ct2) == PLAINTEXT


def test_ciphertext_json_shape(gp):
    pk, _ = aw11_core.authgen(gp, ["A"])
    ct = aw11_core.encrypt(gp, [pk], '{"ATT": "A"}', PLAINTEXT)
    blob = json.loads(json.dumps(serialization.dump_ciphertext(gp, ct)))
    assert blob["policy"] == '{"ATT": "A"}'
    assert [r["attr"] for r in blob["rows"]] == ["A"]
    assert set(blob["c0"]) == {"__charm__"}
    assert isinstance(blob["ct"], str)


def test_loaders_normalise_attribute_names(gp):
    pk, msk = aw11_core.authgen(gp, ["A", "B"])
    bob = aw11_core.keygen(gp, msk, "bob", ["A"])

    def lower(blob, key):
        blob[key] = {name.lower(): v for name, v in blob[key].items()}
        return blob

    pk2 = serialization.load_public_key(gp, lower(serialization.dump_public_key(gp, pk), "attributes"))
    msk2 = serialization.load_master_key(gp, lower(serialization.dump_master_key(gp, msk), "attributes"))
    bob2 = serialization.load_secret_key(gp, lower(serialization.dump_secret_key(gp, bob), "components"))
    assert sorted(pk2.attributes) == ["A", "B"]
    assert bob2.attributes == ["A"]

    aw11_core.add_attribute(gp, msk2, "b", bob2)
    ct = aw11_core.encrypt(gp, [pk2], "A and B", PLAINTEXT)
    assert aw11_core.decrypt(gp, bob2, ct) == PLAINTEXT
