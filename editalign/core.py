"""
editalign.core — Damerau-Levenshtein token alignment
====================================================

§1  THE MATRIX
──────────────

For a source sequence a₁..aₘ and a target sequence b₁..bₙ, cell (i, j)
holds the minimum cost of aligning a[:i] with b[:j] together with the
operation that achieved it:

    D[0][0] = 0
    D[i][0] = i                 (DELETE)
    D[0][j] = j                 (INSERT)

    D[i+1][j+1] = D[i][j]                       if is_equal(aᵢ, bⱼ)   (EQUAL)
                = min(
                    D[i-k][j-k] + transpose(a[i-k..i], b[j-k..j]),     (TRANSPOSE)
                    D[i][j]     + substitute(aᵢ, bⱼ),                 (SUBSTITUTE)
                    D[i+1][j]   + insert(bⱼ),                         (INSERT)
                    D[i][j+1]   + delete(aᵢ),                         (DELETE)
                  )                             otherwise

Equality is always free, whatever the substitution cost would be.

Ties go to the candidate listed first: TRANSPOSE, SUBSTITUTE, INSERT,
DELETE.  Changing this order changes which edits are reported when two
paths cost the same.


§2  TRANSPOSITIONS
──────────────────

A transposition reorders a window of k+1 ≥ 2 tokens.  From cell (i, j)
the window is grown backwards along the diagonal, k = 1, 2, ..., for as
long as both indices stay in range and the diagonal step entering the
window start was not free:

    D[i-k+1][j-k+1] != D[i-k][j-k]

so a run of exact matches is never scanned through.  The FIRST window
whose source span is a permutation of its target span is priced and the
scan stops: the shortest window wins, not the cheapest.

Permutation is tested by sorting copies of both spans with the cost
model's `order` and comparing element-wise.  Without an `order`, no
TRANSPOSE candidate exists and the matrix is weighted Levenshtein.


§3  BACKTRACKING
────────────────

Starting at (m, n) the operation stored in each cell says where the
optimal path came from:

    EQUAL, SUBSTITUTE   →  (i-1, j-1)
    DELETE              →  (i-1, j)
    INSERT              →  (i, j-1)
    TRANSPOSE (k)       →  (i-k, j-k)

One Edit is emitted per step; the list is reversed at the end so edits
come out in ascending source order.


§4  COMPLEXITY
──────────────

Memory O(m·n).  Time O(m·n) for typical inputs, O(m·n·min(m, n)) when
every cell scans a maximal transposition window.
"""

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, Optional, Sequence

from .costs import CostModel, unit_costs
from .edits import Alignment, Edit, Operation, Segment
from .errors import AlignmentError, InvalidArgumentError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  MATRIX
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Cell:
    """One DP cell: best cost, the operation that reached it, and the
    transposition window length (0 unless op is TRANSPOSE)."""
    cost: float
    op: Optional[Operation] = None
    k: int = 0


Matrix = list[list[Cell]]


def is_transposed(source_span: Sequence, target_span: Sequence,
                  order: Callable) -> bool:
    """True if `target_span` is a permutation of `source_span` under `order`."""
    if len(source_span) != len(target_span):
        return False
    key = cmp_to_key(order)
    sorted_source = sorted(source_span, key=key)
    sorted_target = sorted(target_span, key=key)
    return all(order(a, b) == 0 for a, b in zip(sorted_source, sorted_target))


def _transpose_candidate(matrix: Matrix, source: Sequence, target: Sequence,
                         i: int, j: int, costs: CostModel) -> Optional[tuple[float, int]]:
    """(cost, window length) of the shortest transposition ending at
    source[i] / target[j], or None if there is none."""
    k = 1
    while (i - k >= 0 and j - k >= 0
           and matrix[i - k + 1][j - k + 1].cost != matrix[i - k][j - k].cost):
        source_span = source[i - k:i + 1]
        target_span = target[j - k:j + 1]
        if is_transposed(source_span, target_span, costs.order):
            cost = matrix[i - k][j - k].cost + costs.transpose(source_span, target_span)
            return cost, k + 1
        k += 1
    return None


def build_matrix(source: Sequence, target: Sequence, costs: CostModel) -> Matrix:
    """Fill the (m+1) x (n+1) alignment matrix.  See §1 and §2."""
    m, n = len(source), len(target)

    # Cells are replaced, never mutated; row 0 / column 0 are unit borders.
    matrix: Matrix = [[Cell(0.0)] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        matrix[i][0] = Cell(float(i), Operation.DELETE)
    for j in range(1, n + 1):
        matrix[0][j] = Cell(float(j), Operation.INSERT)

    for i in range(m):
        for j in range(n):
            source_token = source[i]
            target_token = target[j]

            if costs.is_equal(source_token, target_token):
                matrix[i + 1][j + 1] = Cell(matrix[i][j].cost, Operation.EQUAL)
                continue

            # Preference order for ties: first minimum wins.
            candidates: list[tuple[float, Operation, int]] = []
            if costs.transpositions:
                found = _transpose_candidate(matrix, source, target, i, j, costs)
                if found is not None:
                    candidates.append((found[0], Operation.TRANSPOSE, found[1]))
            candidates.append((matrix[i][j].cost + costs.substitute(source_token, target_token),
                               Operation.SUBSTITUTE, 0))
            candidates.append((matrix[i + 1][j].cost + costs.insert(target_token),
                               Operation.INSERT, 0))
            candidates.append((matrix[i][j + 1].cost + costs.delete(source_token),
                               Operation.DELETE, 0))

            cost, op, k = min(candidates, key=lambda candidate: candidate[0])
            if op is Operation.TRANSPOSE:
                logger.debug("transposition of %d tokens ending at (%d, %d)", k, i, j)
            matrix[i + 1][j + 1] = Cell(cost, op, k)

    return matrix


# ═══════════════════════════════════════════════════════════════════
#  BACKTRACK
# ═══════════════════════════════════════════════════════════════════

def _edit(op: Operation, source: Sequence, target: Sequence,
          source_start: int, source_end: int,
          target_start: int, target_end: int) -> Edit:
    return Edit(
        op,
        Segment(source_start, source[source_start:source_end]),
        Segment(target_start, target[target_start:target_end]),
    )


def backtrack(matrix: Matrix, source: Sequence, target: Sequence) -> list[Edit]:
    """Recover the edit sequence from a filled matrix.  See §3."""
    i = len(matrix) - 1
    j = len(matrix[0]) - 1
    edits: list[Edit] = []

    while i > 0 or j > 0:
        cell = matrix[i][j]
        op = cell.op
        if op is Operation.EQUAL or op is Operation.SUBSTITUTE:
            edits.append(_edit(op, source, target, i - 1, i, j - 1, j))
            i -= 1
            j -= 1
        elif op is Operation.DELETE:
            edits.append(_edit(op, source, target, i - 1, i, j, j))
            i -= 1
        elif op is Operation.INSERT:
            edits.append(_edit(op, source, target, i, i, j - 1, j))
            j -= 1
        elif op is Operation.TRANSPOSE:
            k = cell.k
            edits.append(_edit(op, source, target, i - k, i, j - k, j))
            i -= k
            j -= k
        else:
            raise AlignmentError(f"unfilled matrix cell at ({i}, {j})")

    edits.reverse()
    return edits


# ═══════════════════════════════════════════════════════════════════
#  ALIGNER
# ═══════════════════════════════════════════════════════════════════

class Aligner:
    """
    Aligns token sequences under a fixed cost model.

        >>> Aligner().align(["a", "b", "c"], ["a", "c", "b"]).edits
        (EQUAL ['a']@0 → ['a']@0, TRANSPOSE ['b', 'c']@1 → ['c', 'b']@1)

    An Aligner holds no per-call state, so one instance can serve any
    number of `align` calls, including concurrent ones, as long as its
    cost functions are themselves safe to share.
    """

    def __init__(self, costs: Optional[CostModel] = None):
        self.costs = costs if costs is not None else unit_costs()

    def align(self, source: Sequence, target: Sequence) -> Alignment:
        """
        Minimum-cost alignment of `source` to `target`.

        Raises InvalidArgumentError if either sequence is None, and
        InvalidCostError if a cost function returns a negative value.
        """
        if source is None or target is None:
            raise InvalidArgumentError("source and target sequences are required")

        source = tuple(source)
        target = tuple(target)
        logger.debug("aligning %d source tokens with %d target tokens",
                     len(source), len(target))

        matrix = build_matrix(source, target, self.costs)
        edits = backtrack(matrix, source, target)
        cost = matrix[len(source)][len(target)].cost

        alignment = Alignment.of(edits, cost, max(len(source), len(target)))
        logger.debug("alignment cost %g over %d edits", cost, len(edits))
        return alignment

    def __repr__(self) -> str:
        return f"Aligner({self.costs!r})"


def align(source: Sequence, target: Sequence,
          costs: Optional[CostModel] = None) -> Alignment:
    """Align two token sequences.  Unit costs with transpositions by default."""
    return Aligner(costs).align(source, target)


def distance(source: Sequence, target: Sequence,
             costs: Optional[CostModel] = None) -> float:
    """Cost of the optimal alignment of `source` to `target`."""
    return align(source, target, costs).cost


def normalized_distance(source: Sequence, target: Sequence,
                        costs: Optional[CostModel] = None) -> float:
    """Alignment cost divided by the longer input length (0 for two empty inputs)."""
    return align(source, target, costs).normalized_cost
