"""
editalign
=========

Token-sequence alignment for error annotation.

    align(["a", "b", "c"], ["a", "c", "b"])
        → EQUAL a, TRANSPOSE b c → c b            cost 1.0
    align(["the", "cat"], ["the", "big", "cat"])
        → EQUAL the, INSERT big, EQUAL cat        cost 1.0

The aligner is Damerau-Levenshtein extended to transpositions of any
length, with every price supplied by a pluggable CostModel.  Results are
immutable Edit values (operation + source segment + target segment) that
can be sorted, mapped, visited and merged with their neighbours.
"""

from editalign.core import (
    Aligner,
    Cell,
    align,
    backtrack,
    build_matrix,
    distance,
    is_transposed,
    normalized_distance,
)
from editalign.costs import (
    CostModel,
    char_costs,
    char_distance,
    levenshtein,
    levenshtein_costs,
    natural_order,
    unit_costs,
)
from editalign.edits import (
    Alignment,
    Edit,
    EditVisitor,
    Operation,
    Segment,
    edit_sort_key,
    is_difference,
    visitor,
)
from editalign.errors import (
    AlignmentError,
    InvalidArgumentError,
    InvalidCostError,
    InvalidMergeError,
)
from editalign.merge import MergeResult, merge_adjacent, merge_edits, split_edits

__version__ = "0.1.0"
__all__ = [
    "Aligner", "Cell", "align", "backtrack", "build_matrix",
    "distance", "normalized_distance", "is_transposed",
    "CostModel", "unit_costs", "levenshtein_costs", "char_costs",
    "char_distance", "levenshtein", "natural_order",
    "Alignment", "Edit", "EditVisitor", "Operation", "Segment",
    "edit_sort_key", "is_difference", "visitor",
    "AlignmentError", "InvalidArgumentError", "InvalidCostError", "InvalidMergeError",
    "MergeResult", "merge_adjacent", "merge_edits", "split_edits",
]
