"""
editalign.costs — pluggable cost model
======================================

The aligner never prices anything itself.  It asks a CostModel:

    is_equal(a, b)          may a and b be aligned for free?
    delete_cost(a)          price of removing source token a
    insert_cost(b)          price of adding target token b
    substitute_cost(a, b)   price of replacing a with b
    transpose_cost(S, T)    price of reordering span S into span T
                            (equal lengths, >= 2 tokens)
    order(a, b)             three-way comparison (<0, 0, >0) used only to
                            test whether two spans are permutations;
                            None disables transposition detection

Every price must be a non-negative number.  The DP optimum is only
meaningful for non-negative costs, so the checked accessors below raise
InvalidCostError as soon as a cost function breaks that rule.
"""

import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from .errors import InvalidCostError


def natural_order(a: Any, b: Any) -> int:
    """Three-way comparison using the tokens' own `<`."""
    return (b < a) - (a < b)


def _one(*tokens: Any) -> float:
    return 1.0


@dataclass(frozen=True, slots=True)
class CostModel:
    """Cost functions for one alignment run.  See module docstring."""
    is_equal: Callable[[Any, Any], bool] = operator.eq
    delete_cost: Callable[[Any], float] = _one
    insert_cost: Callable[[Any], float] = _one
    substitute_cost: Callable[[Any, Any], float] = _one
    transpose_cost: Callable[[Sequence, Sequence], float] = _one
    order: Optional[Callable[[Any, Any], int]] = natural_order

    @property
    def transpositions(self) -> bool:
        return self.order is not None

    def delete(self, a: Any) -> float:
        return _checked("delete", self.delete_cost(a))

    def insert(self, b: Any) -> float:
        return _checked("insert", self.insert_cost(b))

    def substitute(self, a: Any, b: Any) -> float:
        return _checked("substitute", self.substitute_cost(a, b))

    def transpose(self, source_span: Sequence, target_span: Sequence) -> float:
        return _checked("transpose", self.transpose_cost(source_span, target_span))


def _checked(name: str, cost: float) -> float:
    if math.isnan(cost) or cost < 0:
        raise InvalidCostError(f"{name} cost must be >= 0, got {cost!r}")
    return cost


# ═══════════════════════════════════════════════════════════════════
#  STOCK MODELS
# ═══════════════════════════════════════════════════════════════════

def unit_costs(transpositions: bool = True) -> CostModel:
    """Every operation costs 1; multi-token transpositions optionally enabled."""
    return CostModel(order=natural_order if transpositions else None)


def levenshtein_costs() -> CostModel:
    """Plain Levenshtein: unit costs, no transpositions."""
    return unit_costs(transpositions=False)


def levenshtein(s: str, t: str) -> int:
    """Standard Levenshtein distance between two strings."""
    if len(s) < len(t):
        s, t = t, s
    if not t:
        return len(s)

    # Only the row above is kept, sized to the shorter string.
    above = list(range(len(t) + 1))
    for row, a in enumerate(s, start=1):
        row_costs = [row]
        for col, b in enumerate(t, start=1):
            row_costs.append(min(
                above[col] + 1,
                row_costs[col - 1] + 1,
                above[col - 1] + (a != b),
            ))
        above = row_costs
    return above[-1]


def char_distance(a: Any, b: Any) -> float:
    """
    Normalized character edit distance between two tokens, in [0, 1].

    Tokens are compared through `str()`.  Two empty strings are
    identical; otherwise the distance is levenshtein / longer length.
    """
    s, t = str(a), str(b)
    if s == t:
        return 0.0
    return levenshtein(s, t) / max(len(s), len(t))


def _span_transpose_cost(source_span: Sequence, target_span: Sequence) -> float:
    # Moving k tokens into a new order costs k - 1.
    return float(len(source_span) - 1)


def char_costs(transpositions: bool = True) -> CostModel:
    """
    Costs for word tokens that prefer pairing similar spellings.

    Substituting "recieve" for "receive" is cheap (0.29), substituting
    "cat" for "dog" costs a full 1.0.  Insert and delete cost 1.
    """
    return CostModel(
        substitute_cost=char_distance,
        transpose_cost=_span_transpose_cost,
        order=natural_order if transpositions else None,
    )
