"""
editalign.edits — Edit / Segment value model
============================================

An alignment is reported as a sequence of EDITS.  Each edit binds one
OPERATION to a pair of SEGMENTS:

    Segment(position, tokens)     a contiguous, positioned span of one of
                                  the two aligned sequences

    Edit(operation, source, target)

        EQUAL        source tokens == target tokens
        INSERT       source is empty, marking the insertion point
        DELETE       target is empty, marking the deletion point
        SUBSTITUTE   source tokens replaced by target tokens
        TRANSPOSE    target tokens are a permutation of source tokens

All values are frozen.  Combining two edits (`Edit.merge_with`) always
produces a NEW edit; the originals are never touched.

SIBLINGS
────────
Edit L is the left sibling of edit R when both of its segments end
exactly where R's segments start:

    L.source.position + L.source.size() == R.source.position
    L.target.position + L.target.size() == R.target.position

Only siblings can be merged.  Which operation the merged edit carries is
decided by the merge rule owned by each operation (see `_MERGE_RULES`).
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

from .errors import InvalidArgumentError, InvalidMergeError

T = TypeVar("T")
R = TypeVar("R")


# ═══════════════════════════════════════════════════════════════════
#  SEGMENT
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Segment(Generic[T]):
    """
    A contiguous span of a token sequence.

    An empty segment still has a meaningful position: it marks where
    tokens were inserted (source side) or removed (target side).

    Examples:
        Segment(0, ("the", "cat"))
        Segment(2, ())              # insertion point before index 2
    """
    position: int
    tokens: tuple[T, ...] = ()

    def __post_init__(self):
        if self.position is None or self.position < 0:
            raise InvalidArgumentError(
                f"segment position must be >= 0, got {self.position!r}"
            )
        object.__setattr__(self, "tokens", tuple(self.tokens))

    def size(self) -> int:
        return len(self.tokens)

    @property
    def end(self) -> int:
        """Index one past the last token of this segment."""
        return self.position + len(self.tokens)

    def is_empty(self) -> bool:
        return not self.tokens

    def append(self, extra: Iterable[T]) -> "Segment[T]":
        """New segment at the same position with `extra` appended."""
        return Segment(self.position, self.tokens + tuple(extra))

    def map(self, fn: Callable[[T], R]) -> "Segment[R]":
        return Segment(self.position, tuple(fn(token) for token in self.tokens))

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[T]:
        return iter(self.tokens)

    def __repr__(self) -> str:
        return f"Segment({self.position}, {list(self.tokens)!r})"


# ═══════════════════════════════════════════════════════════════════
#  OPERATION
# ═══════════════════════════════════════════════════════════════════

class Operation(Enum):
    """The five edit operations."""
    EQUAL = auto()
    INSERT = auto()
    DELETE = auto()
    SUBSTITUTE = auto()
    TRANSPOSE = auto()

    def merge(self, other: "Operation") -> "Operation":
        """Operation of the edit obtained by merging a `self` edit with an `other` edit."""
        return _MERGE_RULES[self](other)


def _merge_equal(other: Operation) -> Operation:
    # Equal context never changes the kind of the other edit.
    return other


def _merge_insert(other: Operation) -> Operation:
    if other in (Operation.EQUAL, Operation.INSERT):
        return Operation.INSERT
    return Operation.SUBSTITUTE


def _merge_delete(other: Operation) -> Operation:
    if other in (Operation.EQUAL, Operation.DELETE):
        return Operation.DELETE
    return Operation.SUBSTITUTE


def _merge_substitute(other: Operation) -> Operation:
    return Operation.SUBSTITUTE


def _merge_transpose(other: Operation) -> Operation:
    # A permutation extended by equal tokens, or by another permutation,
    # is still a permutation.
    if other in (Operation.EQUAL, Operation.TRANSPOSE):
        return Operation.TRANSPOSE
    return Operation.SUBSTITUTE


_MERGE_RULES: dict[Operation, Callable[[Operation], Operation]] = {
    Operation.EQUAL: _merge_equal,
    Operation.INSERT: _merge_insert,
    Operation.DELETE: _merge_delete,
    Operation.SUBSTITUTE: _merge_substitute,
    Operation.TRANSPOSE: _merge_transpose,
}


# ═══════════════════════════════════════════════════════════════════
#  VISITOR
# ═══════════════════════════════════════════════════════════════════

def _ignore(edit: "Edit") -> None:
    return None


@dataclass(frozen=True, slots=True)
class EditVisitor(Generic[R]):
    """
    One handler per operation.  `Edit.accept` routes an edit to the
    handler matching its operation, so callers can interpret results
    without branching on `edit.operation` themselves.

    Transpositions go to `on_substitute` unless `on_transpose` is given.
    """
    on_equal: Callable[["Edit"], R] = _ignore
    on_insert: Callable[["Edit"], R] = _ignore
    on_delete: Callable[["Edit"], R] = _ignore
    on_substitute: Callable[["Edit"], R] = _ignore
    on_transpose: Optional[Callable[["Edit"], R]] = None

    def handler(self, operation: Operation) -> Callable[["Edit"], R]:
        table = {
            Operation.EQUAL: self.on_equal,
            Operation.INSERT: self.on_insert,
            Operation.DELETE: self.on_delete,
            Operation.SUBSTITUTE: self.on_substitute,
            Operation.TRANSPOSE: self.on_transpose or self.on_substitute,
        }
        return table[operation]


def visitor(**handlers: Callable[["Edit"], Any]) -> EditVisitor:
    """Build an EditVisitor from keyword handlers (on_equal=..., ...)."""
    return EditVisitor(**handlers)


# ═══════════════════════════════════════════════════════════════════
#  EDIT
# ═══════════════════════════════════════════════════════════════════

def edit_sort_key(edit: "Edit") -> tuple[int, int, int, int]:
    """Total order over edits: source position, then target position."""
    return (
        edit.source.position,
        edit.target.position,
        edit.source.size(),
        edit.target.size(),
    )


@dataclass(frozen=True, slots=True)
class Edit(Generic[T]):
    """
    A labeled correspondence between a source segment and a target segment.

    Two edits are equal when operation, source and target are all equal,
    regardless of where they came from.  Sorting a collection of edits
    orders them by source position, then target position.
    """
    operation: Operation
    source: Segment[T]
    target: Segment[T]

    def __post_init__(self):
        if not isinstance(self.operation, Operation):
            raise InvalidArgumentError(f"not an Operation: {self.operation!r}")
        if self.source is None or self.target is None:
            raise InvalidArgumentError("edit segments must not be None")

    # ── Construction ──────────────────────────────────────────────

    @classmethod
    def of(cls, operation: Operation, source: Segment[T], target: Segment[T]) -> "Edit[T]":
        return cls(operation, source, target)

    @classmethod
    def equal(cls, source_position: int, source_tokens: Iterable[T],
              target_position: int, target_tokens: Iterable[T]) -> "Edit[T]":
        return cls(Operation.EQUAL,
                   Segment(source_position, source_tokens),
                   Segment(target_position, target_tokens))

    @classmethod
    def insert(cls, source_position: int, target_position: int,
               target_tokens: Iterable[T]) -> "Edit[T]":
        return cls(Operation.INSERT,
                   Segment(source_position),
                   Segment(target_position, target_tokens))

    @classmethod
    def delete(cls, source_position: int, source_tokens: Iterable[T],
               target_position: int) -> "Edit[T]":
        return cls(Operation.DELETE,
                   Segment(source_position, source_tokens),
                   Segment(target_position))

    @classmethod
    def substitute(cls, source_position: int, source_tokens: Iterable[T],
                   target_position: int, target_tokens: Iterable[T]) -> "Edit[T]":
        return cls(Operation.SUBSTITUTE,
                   Segment(source_position, source_tokens),
                   Segment(target_position, target_tokens))

    @classmethod
    def transpose(cls, source_position: int, source_tokens: Iterable[T],
                  target_position: int, target_tokens: Iterable[T]) -> "Edit[T]":
        return cls(Operation.TRANSPOSE,
                   Segment(source_position, source_tokens),
                   Segment(target_position, target_tokens))

    # ── Access ────────────────────────────────────────────────────

    def stream(self) -> Iterator[T]:
        """All tokens of the edit: source tokens, then target tokens."""
        yield from self.source.tokens
        yield from self.target.tokens

    def segments(self, source_fn: Callable[[Segment[T]], R],
                 target_fn: Callable[[Segment[T]], R]) -> tuple[R, R]:
        return source_fn(self.source), target_fn(self.target)

    def matches(self, predicate: Callable[["Edit[T]"], bool]) -> bool:
        return bool(predicate(self))

    def filter(self, predicate: Callable[["Edit[T]"], bool]) -> Optional["Edit[T]"]:
        """This edit if it satisfies `predicate`, else None."""
        return self if predicate(self) else None

    def transform(self, fn: Callable[["Edit[T]"], R]) -> R:
        return fn(self)

    def map(self, fn: Callable[[T], R]) -> "Edit[R]":
        """Same edit with every token passed through `fn`."""
        return Edit(self.operation, self.source.map(fn), self.target.map(fn))

    def map_segments(self, source_fn: Callable[[Segment[T]], Segment[R]],
                     target_fn: Callable[[Segment[T]], Segment[R]]) -> "Edit[R]":
        return Edit(self.operation, source_fn(self.source), target_fn(self.target))

    def accept(self, edit_visitor: EditVisitor[R]) -> R:
        return edit_visitor.handler(self.operation)(self)

    # ── Merging ───────────────────────────────────────────────────

    def is_left_sibling_of(self, other: "Edit") -> bool:
        return (self.source.end == other.source.position
                and self.target.end == other.target.position)

    def merge_with(self, other: "Edit[T]") -> "Edit[T]":
        """
        Merge this edit with an adjacent one into a new edit.

        The pair is sorted first, so `a.merge_with(b) == b.merge_with(a)`.
        Merging an edit with itself returns it unchanged.

        Raises InvalidMergeError if the edits are not siblings.
        """
        if other is None:
            raise InvalidArgumentError("cannot merge with None")
        if self == other:
            return self

        left, right = sorted((self, other), key=edit_sort_key)
        if not left.is_left_sibling_of(right):
            raise InvalidMergeError(f"cannot merge non-adjacent edits {left!r} and {right!r}")

        return Edit(
            self.operation.merge(other.operation),
            left.source.append(right.source.tokens),
            left.target.append(right.target.tokens),
        )

    # ── Ordering / display ────────────────────────────────────────

    def __lt__(self, other: "Edit") -> bool:
        if not isinstance(other, Edit):
            return NotImplemented
        return edit_sort_key(self) < edit_sort_key(other)

    def __repr__(self) -> str:
        return (f"{self.operation.name} "
                f"{list(self.source.tokens)!r}@{self.source.position} → "
                f"{list(self.target.tokens)!r}@{self.target.position}")


def is_difference(edit: Edit) -> bool:
    """True for every edit that is not EQUAL."""
    return edit.operation is not Operation.EQUAL


# ═══════════════════════════════════════════════════════════════════
#  ALIGNMENT
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Alignment(Generic[T]):
    """
    Result of aligning a source sequence with a target sequence.

        edits            ordered by ascending source position
        cost             sum of step costs along the optimal path
        normalized_cost  cost / max(len(source), len(target)),
                         0.0 when both inputs are empty
    """
    edits: tuple[Edit[T], ...]
    cost: float
    normalized_cost: float

    def __post_init__(self):
        object.__setattr__(self, "edits", tuple(self.edits))

    @classmethod
    def of(cls, edits: Iterable[Edit[T]], cost: float, length: int) -> "Alignment[T]":
        normalized = cost / length if length else 0.0
        return cls(tuple(edits), cost, normalized)

    def source(self) -> tuple[T, ...]:
        """Source sequence rebuilt from the edits' source segments."""
        return tuple(token for edit in self.edits for token in edit.source.tokens)

    def target(self) -> tuple[T, ...]:
        """Target sequence rebuilt from the edits' target segments."""
        return tuple(token for edit in self.edits for token in edit.target.tokens)

    def differences(self) -> list[Edit[T]]:
        return [edit for edit in self.edits if is_difference(edit)]

    def __iter__(self) -> Iterator[Edit[T]]:
        return iter(self.edits)

    def __len__(self) -> int:
        return len(self.edits)

    def __getitem__(self, index: int) -> Edit[T]:
        return self.edits[index]

    def __repr__(self) -> str:
        return f"Alignment({len(self.edits)} edits, cost={self.cost:g})"
