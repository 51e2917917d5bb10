"""
Argumentation Framework Models — Dung's Abstract Argumentation

Implements the formal structures from Dung (1995): On the acceptability
of arguments, as immutable values.

An AttackGraph interns its argument names to dense integer indices in
declaration order and precomputes, for every argument, a bitmask of its
attackers and a bitmask of its targets. The exponential enumeration in
the engine works on these masks; names only come back at output time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Union

from .errors import InvalidFramework

Extension = tuple[str, ...]
RankMap = Mapping[str, int]


class Semantics(str, Enum):
    """Extension families computed for every framework."""
    CONFLICT_FREE = "conflict_free"
    ADMISSIBLE = "admissible"
    COMPLETE = "complete"
    PREFERRED = "preferred"
    GROUNDED = "grounded"
    STABLE = "stable"


def canonical(names: Iterable[str]) -> Extension:
    """Sorted member sequence used for deterministic output."""
    return tuple(sorted(set(names)))


@dataclass(frozen=True)
class Attack:
    """
    An attack relation between two arguments.

    If (a, b) is an attack, argument 'a' attacks argument 'b'.
    Self-attacks are allowed.
    """
    attacker: str
    target: str

    def as_pair(self) -> tuple[str, str]:
        return (self.attacker, self.target)


AttackLike = Union[Attack, tuple, list]


@dataclass(frozen=True)
class AttackGraph:
    """
    Dung's Abstract Argumentation Framework (AAF).

    AF = (Args, Attacks) where:
    - Args is a finite, non-empty set of arguments
    - Attacks ⊆ Args × Args is a binary attack relation

    Construction validates both; a built graph is never mutated.
    Duplicate attacks are kept as given, duplicate argument names
    collapse to their first occurrence.
    """
    arguments: tuple[str, ...]
    attacks: tuple[Attack, ...] = ()
    index: Mapping[str, int] = field(init=False, repr=False, compare=False)
    attackers_mask: tuple[int, ...] = field(init=False, repr=False, compare=False)
    targets_mask: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        args = tuple(dict.fromkeys(str(a) for a in self.arguments))
        if not args:
            raise InvalidFramework("Framework must declare at least one argument.")

        attacks = tuple(as_attack(a) for a in self.attacks)
        index = {name: i for i, name in enumerate(args)}

        undeclared = sorted({
            name
            for atk in attacks
            for name in atk.as_pair()
            if name not in index
        })
        if undeclared:
            raise InvalidFramework(
                "Attacks reference undeclared arguments: " + ", ".join(undeclared)
            )

        attackers = [0] * len(args)
        targets = [0] * len(args)
        for atk in attacks:
            src, dst = index[atk.attacker], index[atk.target]
            attackers[dst] |= 1 << src
            targets[src] |= 1 << dst

        object.__setattr__(self, "arguments", args)
        object.__setattr__(self, "attacks", attacks)
        object.__setattr__(self, "index", MappingProxyType(index))
        object.__setattr__(self, "attackers_mask", tuple(attackers))
        object.__setattr__(self, "targets_mask", tuple(targets))

    def __reduce__(self):
        # derived fields are rebuilt from arguments and attacks
        return (AttackGraph, (self.arguments, self.attacks))

    @classmethod
    def build(cls, arguments: Iterable, attacks: Iterable[AttackLike] = ()) -> "AttackGraph":
        return cls(arguments=tuple(arguments), attacks=tuple(attacks))

    def __len__(self) -> int:
        return len(self.arguments)

    def __contains__(self, arg_id: object) -> bool:
        return arg_id in self.index

    @property
    def full_mask(self) -> int:
        return (1 << len(self.arguments)) - 1

    @property
    def attack_pairs(self) -> list[tuple[str, str]]:
        return [a.as_pair() for a in self.attacks]

    # ── Bitmask translation ─────────────────────────────────────

    def mask_of(self, names: Iterable[str]) -> int:
        mask = 0
        for name in names:
            mask |= 1 << self.index[name]
        return mask

    def names_of(self, mask: int) -> Extension:
        return canonical(
            name for i, name in enumerate(self.arguments) if mask >> i & 1
        )

    def restrict(self, arguments: Iterable[str]) -> "AttackGraph":
        """Sub-framework induced by ``arguments``; attacks leaving it are dropped."""
        keep = tuple(dict.fromkeys(arguments))
        members = set(keep)
        return AttackGraph(
            arguments=keep,
            attacks=tuple(
                a for a in self.attacks
                if a.attacker in members and a.target in members
            ),
        )

    def to_dict(self) -> dict:
        return {
            "arguments": list(self.arguments),
            "attacks": [list(a.as_pair()) for a in self.attacks],
            "stats": {
                "num_arguments": len(self.arguments),
                "num_attacks": len(self.attacks),
            },
        }


def as_attack(value: AttackLike) -> Attack:
    if isinstance(value, Attack):
        return value
    if len(value) < 2:
        raise InvalidFramework(
            f"Attack {list(value)!r} must name an attacker and a target."
        )
    return Attack(attacker=str(value[0]), target=str(value[1]))


@dataclass(frozen=True)
class ExtensionsResult:
    """
    The six extension families of one framework.

    Each family is a tuple of canonical extensions, itself sorted.
    ``grounded`` always holds exactly one extension, possibly empty.
    """
    conflict_free: tuple[Extension, ...]
    admissible: tuple[Extension, ...]
    complete: tuple[Extension, ...]
    preferred: tuple[Extension, ...]
    grounded: tuple[Extension, ...]
    stable: tuple[Extension, ...]

    def get(self, semantics: Semantics) -> tuple[Extension, ...]:
        return getattr(self, Semantics(semantics).value)

    @property
    def grounded_extension(self) -> Extension:
        return self.grounded[0]

    def to_dict(self) -> dict:
        return {
            s.value: [list(ext) for ext in self.get(s)]
            for s in Semantics
        }


@dataclass(frozen=True)
class StepResult:
    """Everything computed for one step of a framework's evolution."""
    step: int
    framework: AttackGraph
    extensions: ExtensionsResult
    rank_top: RankMap
    rank_bottom: RankMap

    def __post_init__(self):
        object.__setattr__(self, "rank_top", MappingProxyType(dict(self.rank_top)))
        object.__setattr__(self, "rank_bottom", MappingProxyType(dict(self.rank_bottom)))

    def __reduce__(self):
        return (StepResult, (
            self.step, self.framework, self.extensions,
            dict(self.rank_top), dict(self.rank_bottom),
        ))

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "framework": self.framework.to_dict(),
            "extensions": self.extensions.to_dict(),
            "rank_top": dict(self.rank_top),
            "rank_bottom": dict(self.rank_bottom),
        }
