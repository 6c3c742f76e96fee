# -*- coding: utf-8 -*-
"""
policy.py  (policy trees and the two policy syntaxes)
-----------------------------------------------------
A policy is a finite tree of

  Attribute(name)          leaf, name upper-cased
  Gate("AND", children)    all children required
  Gate("OR",  children)    any one child suffices

JSON syntax (canonical, stored inside every ciphertext):

  {"AND": [{"ATT": "H"}, {"OR": [{"ATT": "B"}, {"ATT": "C"}]}]}

Infix syntax (convenience for humans and the command line):

  H and (B or C)
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from .errors import PolicyParseError

AND = "AND"
OR = "OR"
ATT = "ATT"


@dataclass(frozen=True)
class Attribute:
    name: str


@dataclass(frozen=True)
class Gate:
    op: str                          # "AND" or "OR"
    children: Tuple["PolicyNode", ...]


PolicyNode = Union[Attribute, Gate]


def normalize(name: str) -> str:
    return name.strip().upper()


# ============================================================
# JSON syntax
# ============================================================

def _from_obj(obj: Any) -> PolicyNode:
    if not isinstance(obj, dict) or len(obj) != 1:
        raise PolicyParseError(f"policy node must be an object with exactly one key, got {obj!r}")
    (kind, value), = obj.items()
    kind = str(kind).upper()
    if kind == ATT:
        if not isinstance(value, str) or not value.strip():
            raise PolicyParseError(f"attribute name must be a non-empty string, got {value!r}")
        return Attribute(normalize(value))
    if kind in (AND, OR):
        if not isinstance(value, list):
            raise PolicyParseError(f"{kind} expects a list of children, got {value!r}")
        if not value:
            raise PolicyParseError(f"{kind} with an empty child list")
        return Gate(kind, tuple(_from_obj(child) for child in value))
    raise PolicyParseError(f"unknown policy node kind '{kind}'")


def _to_obj(node: PolicyNode) -> Any:
    if isinstance(node, Attribute):
        return {ATT: node.name}
    return {node.op: [_to_obj(child) for child in node.children]}


def policy_to_json(node: PolicyNode) -> str:
    return json.dumps(_to_obj(node))


# ============================================================
# Infix syntax:  A and (B or C)
# ============================================================

_TOKEN = re.compile(r"\s*(\(|\)|[A-Za-z0-9_@:.\-]+)\s*")


def _tokenize(s: str) -> List[str]:
    toks: List[str] = []
    pos = 0
    while pos < len(s):
        m = _TOKEN.match(s, pos)
        if m is None:
            if s[pos:].strip():
                raise PolicyParseError(f"unexpected character {s[pos]!r} at offset {pos}")
            break
        toks.append(m.group(1))
        pos = m.end()
    if not toks:
        raise PolicyParseError("empty policy")
    return toks


class _Parser:
    def __init__(self, toks: List[str]):
        self.toks = toks
        self.i = 0

    def peek(self) -> Optional[str]:
        return self.toks[self.i] if self.i < len(self.toks) else None

    def eat(self, t: Optional[str] = None) -> str:
        cur = self.peek()
        if cur is None:
            raise PolicyParseError("unexpected end of policy")
        if t is not None and cur.lower() != t.lower():
            raise PolicyParseError(f"expected '{t}', got '{cur}'")
        self.i += 1
        return cur

    def _is(self, word: str) -> bool:
        cur = self.peek()
        return cur is not None and cur.lower() == word

    def parse(self) -> PolicyNode:
        node = self.parse_or()
        if self.peek() is not None:
            raise PolicyParseError(f"extra tokens: {self.toks[self.i:]}")
        return node

    def parse_or(self) -> PolicyNode:
        children = [self.parse_and()]
        while self._is("or"):
            self.eat("or")
            children.append(self.parse_and())
        return children[0] if len(children) == 1 else Gate(OR, tuple(children))

    def parse_and(self) -> PolicyNode:
        children = [self.parse_atom()]
        while self._is("and"):
            self.eat("and")
            children.append(self.parse_atom())
        return children[0] if len(children) == 1 else Gate(AND, tuple(children))

    def parse_atom(self) -> PolicyNode:
        if self.peek() == "(":
            self.eat("(")
            node = self.parse_or()
            self.eat(")")
            return node
        tok = self.eat()
        if tok == ")" or tok.lower() in ("and", "or"):
            raise PolicyParseError(f"expected an attribute, got '{tok}'")
        return Attribute(normalize(tok))


# ============================================================
# Entry point
# ============================================================

def parse_policy(policy: Union[str, dict]) -> PolicyNode:
    """Parse a JSON policy (string or decoded dict) or an infix policy string."""
    if isinstance(policy, dict):
        return _from_obj(policy)
    if not isinstance(policy, str):
        raise PolicyParseError(f"policy must be a string or dict, got {type(policy).__name__}")
    text = policy.strip()
    if text.startswith("{"):
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as e:
            raise PolicyParseError(f"invalid JSON policy: {e}") from e
        return _from_obj(obj)
    return _Parser(_tokenize(text)).parse()


def attributes_of(node: PolicyNode) -> List[str]:
    """Leaf names in row order (depth-first, children in listed order)."""
    if isinstance(node, Attribute):
        return [node.name]
    out: List[str] = []
    for child in node.children:
        out.extend(attributes_of(child))
    return out
