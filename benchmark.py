"""
Benchmark: editalign scaling on token sequences.

Measures how alignment time grows with input length for
    1. near-identical sentences (the common annotation case)
    2. unrelated sequences (no free diagonal, full transposition scans)
    3. reversed sequences (every window is a candidate permutation)
and compares unit costs with and without transposition detection.
"""

import os
import random
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from editalign import align, char_costs, levenshtein_costs, unit_costs


VOCAB = ("the cat sat on a mat while big dogs ran past quick brown fox "
         "jumps over lazy red hen and small birds sang in tall green trees").split()


def corrupt(tokens, rate, rng):
    """Copy of `tokens` with roughly `rate` of positions edited."""
    out = []
    i = 0
    while i < len(tokens):
        r = rng.random()
        if r < rate / 4:
            pass                                    # delete
        elif r < rate / 2:
            out.extend([tokens[i], rng.choice(VOCAB)])  # insert
        elif r < 3 * rate / 4:
            out.append(rng.choice(VOCAB))           # substitute
        elif r < rate and i + 1 < len(tokens):
            out.extend([tokens[i + 1], tokens[i]])  # swap
            i += 1
        else:
            out.append(tokens[i])
        i += 1
    return out


def timed(source, target, costs):
    t0 = time.perf_counter()
    result = align(source, target, costs)
    return result, time.perf_counter() - t0


def benchmark_scaling(title, make_pair):
    print("=" * 70)
    print(f"  {title}")
    print("=" * 70)
    print(f"  {'len':>5}  {'damerau cost':>12}  {'time':>10}  "
          f"{'levenshtein cost':>16}  {'time':>10}")

    for n in (10, 50, 100, 200, 400):
        source, target = make_pair(n)
        dl, dl_time = timed(source, target, unit_costs())
        lv, lv_time = timed(source, target, levenshtein_costs())
        print(f"  {n:>5}  {dl.cost:>12.1f}  {dl_time*1000:>8.2f}ms  "
              f"{lv.cost:>16.1f}  {lv_time*1000:>8.2f}ms")
    print()


def benchmark_char_costs():
    print("=" * 70)
    print("  CHARACTER-AWARE COSTS — learner sentence")
    print("=" * 70)
    source = "I recieve your leter yesterday and I very happy".split()
    target = "I received your letter yesterday and I am very happy".split()
    result, elapsed = timed(source, target, char_costs())
    for edit in result.differences():
        print(f"    {edit!r}")
    print(f"  cost={result.cost:.3f}  normalized={result.normalized_cost:.3f}  "
          f"time={elapsed*1000:.2f}ms")
    print()


def main():
    rng = random.Random(7)

    def near_identical(n):
        source = [rng.choice(VOCAB) for _ in range(n)]
        return source, corrupt(source, 0.15, rng)

    def unrelated(n):
        return ([rng.choice(VOCAB) for _ in range(n)],
                [rng.choice(VOCAB) for _ in range(n)])

    def reversed_pair(n):
        source = [rng.choice(VOCAB) for _ in range(n)]
        return source, source[::-1]

    print()
    benchmark_scaling("NEAR-IDENTICAL SENTENCES (15% edits)", near_identical)
    benchmark_scaling("UNRELATED SEQUENCES", unrelated)
    benchmark_scaling("REVERSED SEQUENCES", reversed_pair)
    benchmark_char_costs()


if __name__ == "__main__":
    main()
