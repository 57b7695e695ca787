"""
editalign.merge — coalescing and splitting edits.

Annotation tools rarely want the raw step-by-step edits the aligner
reports.  "The cat sat" → "A dog sat" is one correction to a human, not
two substitutions.  This module regroups edits without realigning:

    merge_edits     fold a run of sibling edits into a single edit
    merge_adjacent  coalesce every maximal run of consecutive sibling
                    edits that satisfy a predicate (default: every
                    non-EQUAL edit), leaving the rest untouched
    split_edits     the inverse: break multi-token edits back into
                    single-token steps

All three rely on `Edit.merge_with` and its per-operation merge rule,
so e.g. an INSERT merged with a DELETE becomes a SUBSTITUTE.
"""

import logging
import operator
from dataclasses import dataclass
from typing import Callable, Iterable

from .edits import Edit, Operation, Segment, edit_sort_key, is_difference
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Result of `merge_adjacent`."""
    edits: list[Edit]
    merged_groups: int

    def __repr__(self) -> str:
        return f"MergeResult({len(self.edits)} edits, {self.merged_groups} merged groups)"


def merge_edits(edits: Iterable[Edit]) -> Edit:
    """
    Merge sibling edits into one edit.

    The edits are sorted first.  Raises InvalidMergeError if any two
    neighbours are not siblings, and InvalidArgumentError if there are
    no edits at all.
    """
    ordered = sorted(edits, key=edit_sort_key)
    if not ordered:
        raise InvalidArgumentError("no edits to merge")

    merged = ordered[0]
    for edit in ordered[1:]:
        merged = merged.merge_with(edit)
    return merged


def merge_adjacent(edits: Iterable[Edit],
                   predicate: Callable[[Edit], bool] = is_difference) -> MergeResult:
    """
    Coalesce runs of consecutive sibling edits matching `predicate`.

        EQUAL the, SUBSTITUTE cat→dog, INSERT big, EQUAL sat
            → EQUAL the, SUBSTITUTE cat→dog big, EQUAL sat

    Edits are processed in sorted order; edits that fail the predicate
    break runs and are passed through as they are.
    """
    result: list[Edit] = []
    run: list[Edit] = []
    groups = 0

    def flush():
        nonlocal groups
        if not run:
            return
        if len(run) > 1:
            groups += 1
        result.append(merge_edits(run))
        run.clear()

    for edit in sorted(edits, key=edit_sort_key):
        if not predicate(edit):
            flush()
            result.append(edit)
            continue
        if run and not run[-1].is_left_sibling_of(edit):
            flush()
        run.append(edit)
    flush()

    logger.debug("merged %d groups, %d edits remain", groups, len(result))
    return MergeResult(result, groups)


def _split(edit: Edit, is_equal: Callable) -> list[Edit]:
    source, target = edit.source, edit.target
    if edit.operation is Operation.TRANSPOSE:
        return [edit]

    paired = min(source.size(), target.size())
    pieces: list[Edit] = []
    for t in range(paired):
        a, b = source.tokens[t], target.tokens[t]
        if edit.operation is Operation.EQUAL or is_equal(a, b):
            op = Operation.EQUAL
        else:
            op = Operation.SUBSTITUTE
        pieces.append(Edit(
            op,
            Segment(source.position + t, (a,)),
            Segment(target.position + t, (b,)),
        ))
    for t in range(paired, source.size()):
        pieces.append(Edit(
            Operation.DELETE,
            Segment(source.position + t, (source.tokens[t],)),
            Segment(target.position + paired),
        ))
    for t in range(paired, target.size()):
        pieces.append(Edit(
            Operation.INSERT,
            Segment(source.position + paired),
            Segment(target.position + t, (target.tokens[t],)),
        ))
    return pieces or [edit]


def split_edits(edits: Iterable[Edit],
                is_equal: Callable = operator.eq) -> list[Edit]:
    """
    Break every multi-token edit into single-token steps.

    Tokens of the two segments are paired by index: pairs inside an
    EQUAL edit, or pairs that `is_equal` accepts, become EQUAL and the
    rest SUBSTITUTE.  Pass the aligner's `CostModel.is_equal` when it is
    not plain `==`.  Surplus source tokens become DELETEs and surplus target
    tokens INSERTs.  TRANSPOSE edits are kept whole.  The pieces remain
    siblings of each other, so `merge_edits` can fold them back into one
    edit covering the same spans.
    """
    result: list[Edit] = []
    for edit in sorted(edits, key=edit_sort_key):
        result.extend(_split(edit, is_equal))
    return result
