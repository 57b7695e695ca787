"""
Test suite for editalign.core — the alignment matrix and backtracker.

Tests are organized by concern:
    §1  Reference scenarios
    §2  Tie-breaking between equal-cost operations
    §3  Transposition detection
    §4  The alignment matrix
    §5  Alignment properties (determinism, identity, coverage, symmetry)
    §6  Error handling
"""

import math
import os
import sys

import pytest

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from editalign.core import (
    Aligner, Cell,
    align, backtrack, build_matrix, distance, is_transposed, normalized_distance,
)
from editalign.costs import CostModel, char_costs, levenshtein_costs, natural_order, unit_costs
from editalign.edits import Edit, Operation, Segment
from editalign.errors import AlignmentError, InvalidArgumentError, InvalidCostError


# ═══════════════════════════════════════════════════════════════════
#  §1  REFERENCE SCENARIOS
# ═══════════════════════════════════════════════════════════════════

class TestScenarios:

    def test_two_token_transposition(self):
        result = align(["a", "b", "c"], ["a", "c", "b"])
        assert list(result) == [
            Edit.equal(0, ["a"], 0, ["a"]),
            Edit.transpose(1, ["b", "c"], 1, ["c", "b"]),
        ]
        assert result.cost == 1.0
        assert result.normalized_cost == pytest.approx(1 / 3)

    def test_insertion_between_equals(self):
        result = align(["the", "cat"], ["the", "big", "cat"])
        assert list(result) == [
            Edit.equal(0, ["the"], 0, ["the"]),
            Edit.insert(1, 1, ["big"]),
            Edit.equal(1, ["cat"], 2, ["cat"]),
        ]
        assert result.cost == 1.0
        assert result.normalized_cost == pytest.approx(1 / 3)

    def test_empty_source(self):
        result = align([], ["x"])
        assert list(result) == [Edit(Operation.INSERT, Segment(0), Segment(0, ["x"]))]
        assert result.cost == 1.0
        assert result.normalized_cost == 1.0

    def test_empty_target(self):
        result = align(["x", "y"], [])
        assert list(result) == [
            Edit.delete(0, ["x"], 0),
            Edit.delete(1, ["y"], 0),
        ]
        assert result.cost == 2.0
        assert result.normalized_cost == 1.0

    def test_both_empty(self):
        result = align([], [])
        assert len(result) == 0
        assert result.cost == 0.0
        assert result.normalized_cost == 0.0

    def test_three_token_rotation(self):
        """A B C → B C A is one transposition, not three edits."""
        result = align(["a", "b", "c"], ["b", "c", "a"])
        assert list(result) == [Edit.transpose(0, ["a", "b", "c"], 0, ["b", "c", "a"])]
        assert result.cost == 1.0

    def test_substitutions_then_equal(self):
        result = align(["the", "cat", "sat"], ["a", "dog", "sat"])
        assert [e.operation for e in result] == [
            Operation.SUBSTITUTE, Operation.SUBSTITUTE, Operation.EQUAL,
        ]
        assert result.cost == 2.0

    def test_spelling_correction_with_char_costs(self):
        result = align(["I", "recieve", "it"], ["I", "receive", "it"], char_costs())
        assert result[1] == Edit.substitute(1, ["recieve"], 1, ["receive"])
        assert result.cost == pytest.approx(2 / 7)

    def test_distance_helpers(self):
        assert distance(["a", "b"], ["b", "a"]) == 1.0
        assert distance(["a", "b"], ["b", "a"], levenshtein_costs()) == 2.0
        assert normalized_distance(["a", "b"], ["b", "a"]) == pytest.approx(0.5)
        assert normalized_distance([], []) == 0.0

    def test_non_string_tokens(self):
        result = align((1, 2, 3, 4), (1, 3, 2, 4))
        assert result[1] == Edit.transpose(1, [2, 3], 1, [3, 2])

    def test_segments_are_tuples(self):
        result = align(["a"], ["a"])
        assert result[0].source.tokens == ("a",)


# ═══════════════════════════════════════════════════════════════════
#  §2  TIE-BREAKING
#      Preference on equal cost: TRANSPOSE, SUBSTITUTE, INSERT, DELETE
# ═══════════════════════════════════════════════════════════════════

class TestTieBreaking:

    def test_transpose_beats_insert(self):
        """With transposition priced len-1 = 2, the rotation ties an
        insert-based path at cell (3, 3); the transposition is kept."""
        result = align(["a", "b", "c"], ["b", "c", "a"], char_costs())
        assert list(result) == [Edit.transpose(0, ["a", "b", "c"], 0, ["b", "c", "a"])]
        assert result.cost == 2.0

    def test_substitute_beats_insert_and_delete(self):
        result = align(["a", "b"], ["b", "a"], levenshtein_costs())
        assert list(result) == [
            Edit.substitute(0, ["a"], 0, ["b"]),
            Edit.substitute(1, ["b"], 1, ["a"]),
        ]
        assert result.cost == 2.0

    def test_insert_beats_delete(self):
        costs = CostModel(substitute_cost=lambda a, b: math.inf, order=None)
        result = align(["a"], ["b"], costs)
        assert list(result) == [
            Edit.delete(0, ["a"], 0),
            Edit.insert(1, 0, ["b"]),
        ]
        assert result.cost == 2.0

    def test_equality_is_free_despite_substitute_cost(self):
        costs = CostModel(substitute_cost=lambda a, b: 5.0)
        result = align(["x"], ["x"], costs)
        assert result.cost == 0.0
        assert result[0].operation is Operation.EQUAL


# ═══════════════════════════════════════════════════════════════════
#  §3  TRANSPOSITION DETECTION
# ═══════════════════════════════════════════════════════════════════

class TestTransposition:

    @pytest.mark.parametrize("source,target,expected", [
        (["b", "c"], ["c", "b"], True),
        (["a", "b", "c"], ["c", "a", "b"], True),
        (["a", "a", "b"], ["a", "b", "a"], True),
        (["a", "b"], ["a", "c"], False),
        (["a", "a", "b"], ["a", "b", "b"], False),
        (["a", "b"], ["b", "a", "c"], False),
    ])
    def test_is_transposed(self, source, target, expected):
        assert is_transposed(source, target, natural_order) is expected

    def test_is_transposed_uses_supplied_order(self):
        def case_insensitive(a, b):
            return natural_order(a.lower(), b.lower())

        assert is_transposed(["A", "b"], ["B", "a"], case_insensitive)
        assert not is_transposed(["A", "b"], ["B", "a"], natural_order)

    def test_is_transposed_does_not_reorder_inputs(self):
        source = ["c", "b", "a"]
        is_transposed(source, ["a", "b", "c"], natural_order)
        assert source == ["c", "b", "a"]

    def test_disabled_without_order(self):
        result = align(["a", "b"], ["b", "a"], unit_costs(transpositions=False))
        assert all(e.operation is not Operation.TRANSPOSE for e in result)

    def test_scan_stops_at_equal_run(self):
        """The window may not grow through a free diagonal step, so the
        swap around an unchanged middle token is two substitutions."""
        result = align(["a", "x", "b"], ["b", "x", "a"])
        assert list(result) == [
            Edit.substitute(0, ["a"], 0, ["b"]),
            Edit.equal(1, ["x"], 1, ["x"]),
            Edit.substitute(2, ["b"], 2, ["a"]),
        ]
        assert result.cost == 2.0

    def test_shortest_window_wins_over_cheaper_longer_one(self):
        """Ending at (3, 3) both the 2-token and the 3-token window are
        permutations under the case-insensitive order, and "A" / "a" is
        not a free step, so the scan could reach the free 3-token window.
        It stops at the first one instead."""
        def case_insensitive(a, b):
            return natural_order(a.lower(), b.lower())

        costs = CostModel(
            substitute_cost=lambda a, b: 100.0,
            insert_cost=lambda b: 100.0,
            delete_cost=lambda a: 100.0,
            transpose_cost=lambda s, t: 10.0 if len(s) == 2 else 0.0,
            order=case_insensitive,
        )
        source, target = ("A", "b", "a"), ("a", "a", "b")
        assert build_matrix(source, target, costs)[3][3] == Cell(110.0, Operation.TRANSPOSE, 2)

        result = align(source, target, costs)
        assert list(result) == [
            Edit.substitute(0, ["A"], 0, ["a"]),
            Edit.transpose(1, ["b", "a"], 1, ["a", "b"]),
        ]
        assert result.cost == 110.0

    def test_transpose_cost_receives_spans(self):
        seen = []

        def transpose_cost(source_span, target_span):
            seen.append((tuple(source_span), tuple(target_span)))
            return 0.5

        align(["a", "b"], ["b", "a"], CostModel(transpose_cost=transpose_cost))
        assert seen == [(("a", "b"), ("b", "a"))]


# ═══════════════════════════════════════════════════════════════════
#  §4  THE ALIGNMENT MATRIX
# ═══════════════════════════════════════════════════════════════════

class TestMatrix:

    def test_dimensions_and_borders(self):
        matrix = build_matrix(("a", "b"), ("x", "y", "z"), unit_costs())
        assert len(matrix) == 3
        assert all(len(row) == 4 for row in matrix)
        assert matrix[0][0] == Cell(0.0)
        assert [cell.cost for cell in matrix[0]] == [0.0, 1.0, 2.0, 3.0]
        assert [row[0].cost for row in matrix] == [0.0, 1.0, 2.0]
        assert all(cell.op is Operation.INSERT for cell in matrix[0][1:])
        assert all(row[0].op is Operation.DELETE for row in matrix[1:])

    def test_borders_are_unit_cost(self):
        costs = CostModel(delete_cost=lambda a: 3.0, insert_cost=lambda b: 3.0)
        matrix = build_matrix(("a", "b"), ("c",), costs)
        assert matrix[2][0].cost == 2.0
        assert matrix[0][1].cost == 1.0

    def test_transposition_cell(self):
        matrix = build_matrix(("a", "b", "c"), ("a", "c", "b"), unit_costs())
        assert matrix[3][3] == Cell(1.0, Operation.TRANSPOSE, 2)
        assert matrix[1][1] == Cell(0.0, Operation.EQUAL, 0)
        assert matrix[2][2].op is Operation.SUBSTITUTE

    def test_backtrack_from_matrix(self):
        source, target = ("a", "b"), ("b", "a")
        matrix = build_matrix(source, target, unit_costs())
        assert backtrack(matrix, source, target) == [
            Edit.transpose(0, ["a", "b"], 0, ["b", "a"]),
        ]

    def test_backtrack_empty(self):
        matrix = build_matrix((), (), unit_costs())
        assert backtrack(matrix, (), ()) == []


# ═══════════════════════════════════════════════════════════════════
#  §5  ALIGNMENT PROPERTIES
# ═══════════════════════════════════════════════════════════════════

PAIRS = [
    ("", ""),
    ("abc", "abc"),
    ("abc", "acb"),
    ("abc", "bca"),
    ("kitten", "sitting"),
    ("saturday", "sunday"),
    ("intention", "execution"),
    ("abcd", "dcba"),
    ("aab", "aba"),
    ("", "xyz"),
    ("xyz", ""),
]


class TestProperties:

    @pytest.mark.parametrize("s,t", PAIRS)
    def test_coverage(self, s, t):
        """Concatenated segments rebuild both inputs exactly."""
        result = align(list(s), list(t))
        assert "".join(result.source()) == s
        assert "".join(result.target()) == t

    @pytest.mark.parametrize("s,t", PAIRS)
    def test_length_bound(self, s, t):
        assert len(align(list(s), list(t))) <= len(s) + len(t)

    @pytest.mark.parametrize("s,t", PAIRS)
    def test_edits_are_contiguous(self, s, t):
        edits = list(align(list(s), list(t)))
        for left, right in zip(edits, edits[1:]):
            assert left.is_left_sibling_of(right)

    @pytest.mark.parametrize("s,t", PAIRS)
    def test_determinism(self, s, t):
        assert align(list(s), list(t)) == align(list(s), list(t))

    @pytest.mark.parametrize("s", ["", "a", "hello", "abcabc"])
    def test_identity(self, s):
        result = align(list(s), list(s))
        assert result.cost == 0.0
        assert all(e.operation is Operation.EQUAL for e in result)
        assert len(result) == len(s)

    @pytest.mark.parametrize("s,t", PAIRS)
    def test_cost_symmetry_without_substitution(self, s, t):
        costs = CostModel(
            substitute_cost=lambda a, b: math.inf,
            delete_cost=lambda a: 0.5 + ord(a) % 3,
            insert_cost=lambda b: 0.5 + ord(b) % 3,
            order=None,
        )
        assert distance(list(s), list(t), costs) == distance(list(t), list(s), costs)

    @pytest.mark.parametrize("s,t", PAIRS)
    def test_transposes_are_permutations(self, s, t):
        for edit in align(list(s), list(t)):
            if edit.operation is Operation.TRANSPOSE:
                assert edit.source.size() >= 2
                assert sorted(edit.source.tokens) == sorted(edit.target.tokens)

    def test_aligner_reusable(self):
        aligner = Aligner()
        first = aligner.align(["a", "b"], ["b", "a"])
        aligner.align(["x"], ["y", "z"])
        assert aligner.align(["a", "b"], ["b", "a"]) == first

    def test_default_costs(self):
        assert Aligner().costs == unit_costs()


# ═══════════════════════════════════════════════════════════════════
#  §6  ERROR HANDLING
# ═══════════════════════════════════════════════════════════════════

class TestErrors:

    def test_none_source(self):
        with pytest.raises(InvalidArgumentError):
            align(None, ["a"])

    def test_none_target(self):
        with pytest.raises(InvalidArgumentError):
            align(["a"], None)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            align(None, None)

    def test_negative_cost(self):
        costs = CostModel(delete_cost=lambda a: -1.0)
        with pytest.raises(InvalidCostError):
            align(["a"], ["b"], costs)

    def test_nan_cost(self):
        costs = CostModel(substitute_cost=lambda a, b: math.nan)
        with pytest.raises(InvalidCostError):
            align(["a"], ["b"], costs)

    def test_backtrack_rejects_unfilled_cell(self):
        with pytest.raises(AlignmentError):
            backtrack([[Cell(0.0), Cell(0.0)]], (), ("x",))

    def test_negative_transpose_cost(self):
        costs = CostModel(transpose_cost=lambda s, t: -0.5)
        with pytest.raises(InvalidCostError):
            align(["a", "b"], ["b", "a"], costs)
