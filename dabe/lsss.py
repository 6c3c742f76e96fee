# -*- coding: utf-8 -*-
"""
lsss.py  (AND/OR policy -> monotone span program, shares, reconstruction)
-------------------------------------------------------------------------
Matrix construction (one row per attribute leaf, target vector e_1):

  OR  over children c_1..c_n with vector v : every c_j gets v
  AND over children c_1..c_n with vector v : allocate fresh columns k_1..k_{n-1}
                                             c_j     gets e_{k_j}        (j < n)
                                             c_n     gets v - sum e_{k_j}

Sharing a secret s walks the same tree: an AND node hands a fresh random
value r_j to each of its first n-1 children and (share - sum r_j) to the
last one; an OR node replicates its share. Each leaf share equals <M_i, y>
for y = (s, r_1, r_2, ...), so any row set spanning e_1 recovers s.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from charm.toolbox.pairinggroup import PairingGroup, ZR

from .errors import InternalInconsistency, PolicyParseError
from .policy import AND, OR, Attribute, Gate, PolicyNode, normalize

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledPolicy:
    root: PolicyNode
    matrix: List[List[int]]
    rho: List[str]          # rho[i] = attribute of row i

    @property
    def width(self) -> int:
        return len(self.matrix[0]) if self.matrix else 0


# ============================================================
# PolicyCompiler
# ============================================================

def compile_policy(root: PolicyNode) -> CompiledPolicy:
    vectors: List[Dict[int, int]] = []
    rho: List[str] = []
    width = 1

    def build(node: PolicyNode, v: Dict[int, int]) -> None:
        nonlocal width
        if isinstance(node, Attribute):
            vectors.append(v)
            rho.append(node.name)
            return
        if not isinstance(node, Gate):
            raise PolicyParseError(f"unknown policy node {node!r}")
        if not node.children:
            raise PolicyParseError(f"{node.op} with an empty child list")
        if node.op == OR:
            for child in node.children:
                build(child, v)
            return
        if node.op == AND:
            rest = dict(v)
            for child in node.children[:-1]:
                col = width
                width += 1
                build(child, {col: 1})
                rest[col] = rest.get(col, 0) - 1
            build(node.children[-1], rest)
            return
        raise PolicyParseError(f"unsupported gate: {node.op}")

    build(root, {0: 1})
    matrix = [[vec.get(j, 0) for j in range(width)] for vec in vectors]
    return CompiledPolicy(root=root, matrix=matrix, rho=rho)


# ============================================================
# ShareGenerator
# ============================================================

def gen_shares(group: PairingGroup, secret: Any, root: PolicyNode,
               rng: Any) -> List[Tuple[str, Any]]:
    """Return [(attribute, share)] in row order."""
    out: List[Tuple[str, Any]] = []

    def share(node: PolicyNode, value: Any) -> None:
        if isinstance(node, Attribute):
            out.append((node.name, value))
            return
        if node.op == OR:
            for child in node.children:
                share(child, value)
            return
        rest = value
        for child in node.children[:-1]:
            r = rng.random(ZR)
            share(child, r)
            rest = rest - r
        share(node.children[-1], rest)

    share(root, secret)
    return out


# ============================================================
# PolicyEvaluator
# ============================================================

def prune(root: PolicyNode, attributes: Iterable[str]) -> Tuple[bool, List[int]]:
    """
    Decide whether `attributes` satisfy the policy and, if so, return the row
    indices of a minimal covering leaf set. OR picks its first satisfied child
    in listed order.
    """
    held = {normalize(a) for a in attributes}

    def walk(node: PolicyNode, offset: int) -> Tuple[Optional[List[int]], int]:
        if isinstance(node, Attribute):
            return ([offset] if node.name in held else None), offset + 1
        cur = offset
        if node.op == AND:
            picked: Optional[List[int]] = []
            for child in node.children:
                sub, cur = walk(child, cur)
                if sub is None:
                    picked = None
                elif picked is not None:
                    picked.extend(sub)
            return picked, cur
        chosen: Optional[List[int]] = None
        for child in node.children:
            sub, cur = walk(child, cur)
            if chosen is None and sub is not None:
                chosen = sub
        return chosen, cur

    rows, _ = walk(root, 0)
    if rows is None:
        return False, []
    return True, rows


# ============================================================
# CoefficientSolver
# ============================================================

def _frac_to_zr(group: PairingGroup, f: Fraction) -> Any:
    num = group.init(ZR, abs(f.numerator))
    if f.numerator < 0:
        num = group.init(ZR, 0) - num
    if f.denominator == 1:
        return num
    return num * (group.init(ZR, f.denominator) ** -1)


def solve_coefficients(group: PairingGroup, compiled: CompiledPolicy,
                       rows: Sequence[int]) -> Dict[int, Any]:
    """
    Find {row: w_row} with sum w_row * M_row = e_1.

    Gaussian elimination over Fractions on [M_sel^T | e_1], free variables set
    to zero, then a verification pass. Rows with a zero coefficient are left
    out of the result.
    """
    M = compiled.matrix
    n_sel = len(rows)
    n_cols = compiled.width
    if n_sel == 0:
        raise InternalInconsistency("cannot reconstruct from an empty row set")

    aug: List[List[Fraction]] = []
    for r in range(n_cols):
        line = [Fraction(M[rows[c]][r]) for c in range(n_sel)]
        line.append(Fraction(1) if r == 0 else Fraction(0))
        aug.append(line)

    pivot_row_for_col: Dict[int, int] = {}
    cur_row = 0
    for col in range(n_sel):
        pivot = next((r for r in range(cur_row, n_cols) if aug[r][col] != 0), -1)
        if pivot < 0:
            continue
        aug[cur_row], aug[pivot] = aug[pivot], aug[cur_row]
        pivot_row_for_col[col] = cur_row
        piv_val = aug[cur_row][col]
        aug[cur_row] = [x / piv_val for x in aug[cur_row]]
        for r in range(n_cols):
            if r != cur_row and aug[r][col] != 0:
                factor = aug[r][col]
                aug[r] = [aug[r][k] - factor * aug[cur_row][k] for k in range(n_sel + 1)]
        cur_row += 1
        if cur_row == n_cols:
            break

    omega = [aug[pivot_row_for_col[c]][n_sel] if c in pivot_row_for_col else Fraction(0)
             for c in range(n_sel)]

    check = [Fraction(0)] * n_cols
    for c, row in enumerate(rows):
        if omega[c] == 0:
            continue
        for r in range(n_cols):
            check[r] += omega[c] * M[row][r]
    if check[0] != 1 or any(check[r] != 0 for r in range(1, n_cols)):
        log.error("[Solve] rows %s do not span the target vector", list(rows))
        raise InternalInconsistency(f"rows {list(rows)} do not span the target vector")

    return {row: _frac_to_zr(group, omega[c]) for c, row in enumerate(rows) if omega[c] != 0}
