"""
models — Declaration schema and API Request/Response Schemas

Argument declarations arrive in one of two raw shapes:

    - a                       # bare identifier
    - b: [top, {step: 2}]     # identifier with a tag list

They are resolved once, here, into ``BareArgument`` or
``TaggedArgument``; nothing downstream inspects the raw shapes.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

ROLE_TAGS = ("top", "bottom")


# ── Declarations ─────────────────────────────────────────────────

class StepTag(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: int


class BareArgument(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bare"] = "bare"
    id: str

    @property
    def step(self) -> Optional[int]:
        return None

    @property
    def is_top(self) -> bool:
        return False

    @property
    def is_bottom(self) -> bool:
        return False

    @property
    def labels(self) -> tuple[str, ...]:
        return ()


class TaggedArgument(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tagged"] = "tagged"
    id: str
    tags: tuple[Union[StepTag, str], ...] = ()

    @property
    def step(self) -> Optional[int]:
        """Explicit step; the last ``{step: N}`` tag wins."""
        steps = [t.step for t in self.tags if isinstance(t, StepTag)]
        return steps[-1] if steps else None

    @property
    def is_top(self) -> bool:
        return "top" in self.tags

    @property
    def is_bottom(self) -> bool:
        return "bottom" in self.tags

    @property
    def labels(self) -> tuple[str, ...]:
        """Free-text tags, shown next to the argument in reports."""
        return tuple(
            t for t in self.tags
            if isinstance(t, str) and t not in ROLE_TAGS
        )


ArgumentDeclaration = Annotated[
    Union[BareArgument, TaggedArgument],
    Field(discriminator="kind"),
]

_declaration_adapter = TypeAdapter(ArgumentDeclaration)


def _parse_tag(raw: Any) -> Union[StepTag, str]:
    if isinstance(raw, StepTag):
        return raw
    if isinstance(raw, dict):
        if "step" not in raw:
            raise ValueError(f"Unsupported tag {raw!r}; mapping tags must be {{step: N}}")
        return StepTag(step=raw["step"])
    if isinstance(raw, (list, tuple)) or raw is None:
        raise ValueError(f"Unsupported tag {raw!r}")
    return str(raw)


def parse_declaration(raw: Any) -> Union[BareArgument, TaggedArgument]:
    """
    Resolve one raw argument declaration.

    Accepts a scalar identifier, a single-key mapping from identifier to
    its tag list (``None`` or a single tag also allowed), or an already
    resolved declaration.
    """
    if isinstance(raw, (BareArgument, TaggedArgument)):
        return raw
    if isinstance(raw, dict):
        if len(raw) > 1 and {"kind", "id"} <= raw.keys():
            return _declaration_adapter.validate_python(raw)
        if len(raw) != 1:
            raise ValueError(
                f"Argument declaration {raw!r} must map exactly one identifier to its tags"
            )
        ((name, tags),) = raw.items()
        if tags is None:
            tags = []
        elif not isinstance(tags, (list, tuple)):
            tags = [tags]
        return TaggedArgument(id=str(name), tags=tuple(_parse_tag(t) for t in tags))
    if isinstance(raw, (list, tuple)) or raw is None or isinstance(raw, bool):
        raise ValueError(f"Invalid argument declaration {raw!r}")
    return BareArgument(id=str(raw))


def normalize_attacks(raw: Any) -> list[tuple[str, str]]:
    """Attack lists: each entry has at least two elements, the first attacks the second."""
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise ValueError('"attacks" must be a list of lists')
    pairs = []
    for item in raw:
        if isinstance(item, dict) and {"attacker", "target"} <= item.keys():
            item = [item["attacker"], item["target"]]
        if not isinstance(item, (list, tuple)) or len(item) < 2:
            raise ValueError(
                'Each attack must be a list with at least two elements, '
                'where the first attacks the second'
            )
        pairs.append((str(item[0]), str(item[1])))
    return pairs


class FrameworkDocument(BaseModel):
    """A whole framework as written in a YAML or JSON document."""
    arguments: list[ArgumentDeclaration]
    attacks: list[tuple[str, str]] = Field(default_factory=list)
    exhibit: Optional[str] = None

    @field_validator("arguments", mode="before")
    @classmethod
    def resolve_arguments(cls, v: Any) -> list:
        if isinstance(v, dict):
            v = [{k: tags} for k, tags in v.items()]
        if not isinstance(v, (list, tuple)):
            raise ValueError('"arguments" must be a non-empty list')
        return [parse_declaration(item) for item in v]

    @field_validator("attacks", mode="before")
    @classmethod
    def resolve_attacks(cls, v: Any) -> list:
        return normalize_attacks(v)

    @field_validator("exhibit", mode="before")
    @classmethod
    def exhibit_as_text(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @property
    def argument_ids(self) -> list[str]:
        return list(dict.fromkeys(d.id for d in self.arguments))


# ── Request Models ───────────────────────────────────────────────

class ExtensionsRequest(BaseModel):
    arguments: list[str] = Field(default_factory=list)
    attacks: list[tuple[str, str]] = Field(default_factory=list)

    @field_validator("arguments", mode="before")
    @classmethod
    def names_as_text(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return [str(a) for a in v]
        return v

    @field_validator("attacks", mode="before")
    @classmethod
    def resolve_attacks(cls, v: Any) -> list:
        return normalize_attacks(v)


class RankRequest(BaseModel):
    attacks: list[tuple[str, str]] = Field(default_factory=list)
    roots: list[str] = Field(default_factory=list)
    fallback_first: Optional[str] = None
    fallback_last: Optional[str] = None
    is_top_side: bool = True

    @field_validator("attacks", mode="before")
    @classmethod
    def resolve_attacks(cls, v: Any) -> list:
        return normalize_attacks(v)


class ReportRequest(BaseModel):
    yaml: str = Field(..., min_length=1)
    title: Optional[str] = None


# ── Response Models ──────────────────────────────────────────────

class ExtensionsResponse(BaseModel):
    conflict_free: list[list[str]] = Field(default_factory=list)
    admissible: list[list[str]] = Field(default_factory=list)
    complete: list[list[str]] = Field(default_factory=list)
    preferred: list[list[str]] = Field(default_factory=list)
    grounded: list[list[str]] = Field(default_factory=list)
    stable: list[list[str]] = Field(default_factory=list)
    num_arguments: int = 0
    num_attacks: int = 0
    computation_ms: float = 0.0


class RankResponse(BaseModel):
    rank: dict[str, int] = Field(default_factory=dict)


class StepResponse(BaseModel):
    step: int
    arguments: list[str]
    attacks: list[tuple[str, str]] = Field(default_factory=list)
    extensions: dict[str, list[list[str]]]
    rank_top: dict[str, int] = Field(default_factory=dict)
    rank_bottom: dict[str, int] = Field(default_factory=dict)


class StepsResponse(BaseModel):
    steps: list[StepResponse] = Field(default_factory=list)
    total_steps: int = 0
    computation_ms: float = 0.0


class ErrorResponse(BaseModel):
    status: str = "error"
    code: str
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "1.0.0"
    uptime_seconds: int = 0
    max_arguments: int = 0
