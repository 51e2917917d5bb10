"""
Semantics Engine — Dung's Extension Computation

Computes, for one attack graph, all six extension families:
- Conflict-free, admissible, complete, stable (enumerated)
- Preferred (maximal admissible, filtered from the enumeration)
- Grounded (unique, direct IN/OUT labelling, never enumerated)

Computational complexity:
- Grounded: O(|Args|²) — polynomial
- Everything else: O(2^|Args| · |Args|) — every subset is visited

The exponential part is intentional: frameworks are small and the
full families are what the report shows. Frameworks above the
configured cap are rejected before enumeration starts.

Subsets are integer bitmasks over the graph's interned indices. The
set of arguments attacked by a subset is built incrementally from the
subset with its lowest bit cleared, so each subset costs one OR plus
a defence scan.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Iterable, Optional

from .errors import FrameworkTooLarge
from .models import AttackGraph, Extension, ExtensionsResult, Semantics

logger = logging.getLogger("argblazer.argumentation")

DEFAULT_MAX_ARGUMENTS = int(os.environ.get("ARGBLAZER_MAX_ARGUMENTS", "20"))


class SemanticsEngine:
    """
    Core engine for computing argumentation extensions.

    Follows Dung's characteristic function F:
        F(S) = { a ∈ Args | S defends a }

    Complete extensions are the fixpoints of F among conflict-free sets;
    the grounded extension is the least one.
    """

    def __init__(self, max_arguments: Optional[int] = None):
        self.max_arguments = (
            DEFAULT_MAX_ARGUMENTS if max_arguments is None else max_arguments
        )

    def check_size(self, af: AttackGraph) -> None:
        """Reject frameworks too large to enumerate."""
        n = len(af)
        if n > self.max_arguments:
            logger.warning(
                f"Large framework ({n} args) rejected, cap is {self.max_arguments}"
            )
            raise FrameworkTooLarge(n, self.max_arguments)

    # ── Bitmask primitives ──────────────────────────────────────

    @staticmethod
    def _attacked_by(af: AttackGraph, mask: int) -> int:
        hit = 0
        for i, targets in enumerate(af.targets_mask):
            if mask >> i & 1:
                hit |= targets
        return hit

    @staticmethod
    def _defended_by(af: AttackGraph, hit: int) -> int:
        """Mask of arguments whose every attacker lies in ``hit``."""
        defended = 0
        for i, attackers in enumerate(af.attackers_mask):
            if attackers & ~hit == 0:
                defended |= 1 << i
        return defended

    # ── Predicates ──────────────────────────────────────────────

    def is_conflict_free(self, af: AttackGraph, candidate: Iterable[str]) -> bool:
        """Check if no argument in candidate attacks another in candidate."""
        mask = af.mask_of(candidate)
        return self._attacked_by(af, mask) & mask == 0

    def is_admissible(self, af: AttackGraph, candidate: Iterable[str]) -> bool:
        """
        S is admissible iff:
        1. S is conflict-free
        2. S defends all its members
        """
        mask = af.mask_of(candidate)
        hit = self._attacked_by(af, mask)
        if hit & mask:
            return False
        return mask & ~self._defended_by(af, hit) == 0

    def is_complete(self, af: AttackGraph, candidate: Iterable[str]) -> bool:
        """
        S is complete iff S is admissible and contains every
        argument it defends.
        """
        mask = af.mask_of(candidate)
        hit = self._attacked_by(af, mask)
        if hit & mask:
            return False
        return self._defended_by(af, hit) == mask

    def is_stable(self, af: AttackGraph, candidate: Iterable[str]) -> bool:
        """S is stable iff S is conflict-free and attacks every argument not in S."""
        mask = af.mask_of(candidate)
        hit = self._attacked_by(af, mask)
        if hit & mask:
            return False
        return mask | hit == af.full_mask

    # ── Grounded Extension ──────────────────────────────────────

    def grounded_extension(self, af: AttackGraph) -> Extension:
        """
        Compute the grounded extension by labelling to a fixed point.

        Algorithm:
            IN  ← arguments whose attackers are all OUT
            OUT ← arguments attacked by some IN argument
            repeat until neither set grows

        Unattacked arguments go IN on the first pass. The IN set is
        the unique grounded extension.
        """
        n = len(af)
        in_mask = 0
        out_mask = 0
        changed = True
        while changed:
            changed = False
            for i in range(n):
                bit = 1 << i
                if (in_mask | out_mask) & bit:
                    continue
                if af.attackers_mask[i] & ~out_mask == 0:
                    in_mask |= bit
                    changed = True
            for i in range(n):
                if in_mask >> i & 1:
                    fresh = af.targets_mask[i] & ~out_mask
                    if fresh:
                        out_mask |= fresh
                        changed = True
        return af.names_of(in_mask)

    # ── All Families ────────────────────────────────────────────

    def compute_extensions(self, af: AttackGraph) -> ExtensionsResult:
        """
        Enumerate every subset of ``af`` and classify it.

        Preferred extensions are the admissible sets that are not a
        proper subset of any other admissible set.
        """
        self.check_size(af)
        start = time.perf_counter()

        n = len(af)
        full = af.full_mask
        targets = af.targets_mask
        total = 1 << n
        attacked = [0] * total

        conflict_free: list[int] = []
        admissible: list[int] = []
        complete: list[int] = []
        stable: list[int] = []

        for mask in range(total):
            if mask:
                low = mask & -mask
                attacked[mask] = attacked[mask ^ low] | targets[low.bit_length() - 1]
            hit = attacked[mask]
            if hit & mask:
                continue

            conflict_free.append(mask)
            if mask | hit == full:
                stable.append(mask)

            defended = self._defended_by(af, hit)
            if mask & ~defended == 0:
                admissible.append(mask)
                if defended == mask:
                    complete.append(mask)

        preferred = [
            s for s in admissible
            if not any(s != t and s & t == s for t in admissible)
        ]

        def family(masks: list[int]) -> tuple[Extension, ...]:
            return tuple(sorted(af.names_of(m) for m in masks))

        result = ExtensionsResult(
            conflict_free=family(conflict_free),
            admissible=family(admissible),
            complete=family(complete),
            preferred=family(preferred),
            grounded=(self.grounded_extension(af),),
            stable=family(stable),
        )

        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(
            f"Extensions for {n} args / {len(af.attacks)} attacks: "
            f"cf={len(conflict_free)} adm={len(admissible)} "
            f"comp={len(complete)} pref={len(preferred)} "
            f"stable={len(stable)} in {elapsed:.3f}ms"
        )
        return result

    def extensions(self, af: AttackGraph, semantics: Semantics) -> tuple[Extension, ...]:
        """Extensions of a single family; grounded skips enumeration."""
        semantics = Semantics(semantics)
        if semantics == Semantics.GROUNDED:
            return (self.grounded_extension(af),)
        return self.compute_extensions(af).get(semantics)


def compute_extensions(af: AttackGraph, max_arguments: Optional[int] = None) -> ExtensionsResult:
    """Module-level shortcut for :meth:`SemanticsEngine.compute_extensions`."""
    return SemanticsEngine(max_arguments=max_arguments).compute_extensions(af)
