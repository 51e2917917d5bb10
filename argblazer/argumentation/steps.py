"""
Step Decomposer — temporal evolution of a framework

Splits a declaration-ordered argument list into a sequence of
cumulative attack graphs, one per declared step, and computes the
extensions and both rank maps of every step.

Step resolution:
- If no declaration carries a ``{step: N}`` tag, arguments get steps
  1, 2, 3, ... in declaration order.
- Otherwise an untagged argument inherits the most recent explicit
  step seen before it (0 if none has been seen yet).

An argument is visible from its step onwards; an attack is visible
once both its endpoints are. All arguments share one intern table
ordered by (step, declaration index), so each step's argument tuple
is a prefix of it and the cumulative sets only ever grow.
"""

from __future__ import annotations

import bisect
import functools
import logging
import time
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Union

from argblazer.models import BareArgument, TaggedArgument, parse_declaration

from .engine import SemanticsEngine
from .errors import InvalidDocument, InvalidFramework
from .models import AttackGraph, AttackLike, StepResult
from .rank import RankEngine

logger = logging.getLogger("argblazer.steps")

Declaration = Union[BareArgument, TaggedArgument]


@dataclass(frozen=True)
class StepPlan:
    """Resolved declarations: steps, roles and the shared intern table."""
    framework: AttackGraph          # every declared argument and attack
    order: tuple[str, ...]          # intern table, sorted by (step, declaration)
    steps: tuple[int, ...]          # step of each entry in ``order``
    top: tuple[str, ...]
    bottom: tuple[str, ...]
    first: Optional[str]
    last: Optional[str]

    @property
    def step_numbers(self) -> list[int]:
        return sorted(set(self.steps))

    def visible_at(self, step: int) -> tuple[str, ...]:
        return self.order[:bisect.bisect_right(self.steps, step)]


class StepDecomposer:
    """
    Builds per-step frameworks and runs both engines on each of them.

    Validation covers the full declaration and happens before any step
    is computed, so a rejected input never yields partial results.
    """

    def __init__(
        self,
        engine: Optional[SemanticsEngine] = None,
        ranker: Optional[RankEngine] = None,
    ):
        self.engine = engine or SemanticsEngine()
        self.ranker = ranker or RankEngine()

    # ── Step resolution ─────────────────────────────────────────

    @staticmethod
    def resolve_steps(declarations: Sequence[Declaration]) -> dict[str, int]:
        """Step of every declared argument (first declaration wins)."""
        has_step = any(d.step is not None for d in declarations)
        steps: dict[str, int] = {}
        current = 0
        for decl in declarations:
            if has_step:
                if decl.step is not None:
                    current = decl.step
            else:
                current += 1
            if decl.id in steps:
                logger.warning(f"Argument '{decl.id}' declared more than once")
                continue
            steps[decl.id] = current
        return steps

    def plan(
        self,
        declarations: Iterable[Any],
        attacks: Iterable[AttackLike] = (),
    ) -> StepPlan:
        try:
            decls = [parse_declaration(d) for d in declarations]
        except ValueError as e:
            raise InvalidDocument(str(e)) from e
        if not decls:
            raise InvalidFramework("Framework must declare at least one argument.")

        step_of = self.resolve_steps(decls)
        framework = AttackGraph.build(step_of.keys(), attacks)
        self.engine.check_size(framework)

        order = tuple(sorted(step_of, key=step_of.__getitem__))
        return StepPlan(
            framework=framework,
            order=order,
            steps=tuple(step_of[a] for a in order),
            top=tuple(dict.fromkeys(d.id for d in decls if d.is_top)),
            bottom=tuple(dict.fromkeys(d.id for d in decls if d.is_bottom)),
            first=decls[0].id,
            last=decls[-1].id,
        )

    # ── Snapshots ───────────────────────────────────────────────

    def snapshots(self, plan: StepPlan) -> list[tuple[int, AttackGraph]]:
        """Cumulative attack graph of every step, ascending."""
        return [
            (step, plan.framework.restrict(plan.visible_at(step)))
            for step in plan.step_numbers
        ]

    def _rank_inputs(self, plan: StepPlan, graph: AttackGraph, top_side: bool):
        declared = plan.top if top_side else plan.bottom
        fallback = plan.first if top_side else plan.last
        roots = [r for r in declared if r in graph]
        if declared or fallback not in graph:
            fallback = None
        return roots, fallback

    def compute_step(self, plan: StepPlan, step: int, graph: AttackGraph) -> StepResult:
        top_roots, first = self._rank_inputs(plan, graph, top_side=True)
        bottom_roots, last = self._rank_inputs(plan, graph, top_side=False)
        return StepResult(
            step=step,
            framework=graph,
            extensions=self.engine.compute_extensions(graph),
            rank_top=self.ranker.compute_rank(
                graph.attacks, top_roots, first, None, is_top_side=True
            ),
            rank_bottom=self.ranker.compute_rank(
                graph.attacks, bottom_roots, None, last, is_top_side=False
            ),
        )

    def decompose(
        self,
        declarations: Iterable[Any],
        attacks: Iterable[AttackLike] = (),
        executor: Optional[Executor] = None,
    ) -> list[StepResult]:
        """
        Compute every step of the framework's evolution.

        Args:
            declarations: Raw or resolved argument declarations, in order
            attacks: Attack pairs over the declared arguments
            executor: Optional executor; steps are independent snapshots
                and may be computed concurrently

        Returns:
            StepResults ordered by ascending step number
        """
        start = time.perf_counter()
        plan = self.plan(declarations, attacks)
        snapshots = self.snapshots(plan)

        if executor is None:
            results = [self.compute_step(plan, s, g) for s, g in snapshots]
        else:
            steps, graphs = zip(*snapshots)
            results = list(executor.map(functools.partial(self.compute_step, plan), steps, graphs))

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            f"Decomposed {len(plan.order)} args / {len(plan.framework.attacks)} "
            f"attacks into {len(results)} steps in {elapsed:.1f}ms"
        )
        return results
