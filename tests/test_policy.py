import json

import pytest

from dabe.errors import PolicyParseError
from dabe.policy import AND, OR, Attribute, Gate, attributes_of, parse_policy, policy_to_json


def test_json_policy():
    node = parse_policy('{"AND": [{"ATT": "h"}, {"OR": [{"ATT": "B"}, {"ATT": "c"}]}]}')
    assert node == Gate(AND, (Attribute("H"), Gate(OR, (Attribute("B"), Attribute("C")))))


def test_json_policy_from_dict_and_lowercase_keys():
    node = parse_policy({"or": [{"att": "a"}, {"att": "b"}]})
    assert node == Gate(OR, (Attribute("A"), Attribute("B")))


def test_single_attribute():
    assert parse_policy('{"ATT": "x"}') == Attribute("X")
    assert parse_policy("x") == Attribute("X")


def test_infix_precedence_and_flattening():
    node = parse_policy("a and b and c or d")
    assert node == Gate(OR, (Gate(AND, (Attribute("A"), Attribute("B"), Attribute("C"))),
                             Attribute("D")))


def test_infix_parentheses():
    node = parse_policy("H AND (B or C)")
    assert node == Gate(AND, (Attribute("H"), Gate(OR, (Attribute("B"), Attribute("C")))))


def test_policy_to_json_is_reparseable():
    node = parse_policy("(a or b) and c")
    text = policy_to_json(node)
    assert json.loads(text) == {"AND": [{"OR": [{"ATT": "A"}, {"ATT": "B"}]}, {"ATT": "C"}]}
    assert parse_policy(text) == node


def test_attributes_in_row_order():
    node = parse_policy('{"OR": [{"AND": [{"ATT": "a"}, {"ATT": "b"}]}, {"ATT": "a"}]}')
    assert attributes_of(node) == ["A", "B", "A"]


@pytest.mark.parametrize("bad", [
    '{"AND": []}',
    '{"OR": []}',
    '{"XOR": [{"ATT": "A"}]}',
    '{"ATT": ""}',
    '{"ATT": 5}',
    '{"AND": {"ATT": "A"}}',
    '{"ATT": "A", "OR": []}',
    '{"AND": [{"ATT": "A"}',
    '[{"ATT": "A"}]',
    "",
    "A and",
    "(A or B",
    "A or B)",
    "A & B",
    "and",
])
def test_malformed_policies(bad):
    with pytest.raises(PolicyParseError):
        parse_policy(bad)


def test_non_string_policy():
    with pytest.raises(PolicyParseError):
        parse_policy(42)
