from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import ArmStatistics


class Outcomes(BaseModel):
    """Persisted interesting/uninteresting counts for one script."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    interesting: int = Field(0, ge=0)
    uninteresting: int = Field(0, ge=0)


class Script(BaseModel):
    """One arm of the bandit: a command plus everything learned about it."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    name: str = Field(..., min_length=1)
    command: str = Field(..., min_length=1)
    results: Outcomes = Field(default_factory=Outcomes)
    runcount: int = Field(0, ge=0)
    avgruntime_ms: Optional[float] = Field(None, gt=0.0, allow_inf_nan=False)
    # Negative values load so that lint can report them; selection rejects them.
    bias: float = Field(1.0, allow_inf_nan=False)
    limit: Optional[int] = Field(None, ge=0)

    @field_validator("name", "command", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    def statistics(self) -> ArmStatistics:
        return ArmStatistics(self.results.interesting, self.results.uninteresting)

    def reset(self) -> None:
        self.results = Outcomes()
        self.runcount = 0
        self.avgruntime_ms = None


class Roster(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scripts: List[Script] = Field(default_factory=list)

    @field_validator("scripts")
    @classmethod
    def _unique_names(cls, scripts: List[Script]) -> List[Script]:
        seen = set()
        for script in scripts:
            if script.name in seen:
                raise ValueError(f"Duplicate script name '{script.name}'")
            seen.add(script.name)
        return scripts

    def find(self, name: str) -> Script:
        for script in self.scripts:
            if script.name == name:
                return script
        raise KeyError(name)


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in {".yaml", ".yml"}


def load_roster(path: str | Path) -> Roster:
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text) if _is_yaml(p) else json.loads(text)
    return Roster.model_validate(data or {})


def save_roster(roster: Roster, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if _is_yaml(p):
        p.write_text(yaml.safe_dump(roster.model_dump(mode="json"), sort_keys=False), encoding="utf-8")
    else:
        p.write_text(roster.model_dump_json(indent=2) + "\n", encoding="utf-8")
    return p


def new_roster(pairs: Iterable[Tuple[str, str]]) -> Roster:
    """Fresh roster with zeroed statistics for each ``(name, command)`` pair."""
    return Roster(scripts=[Script(name=name, command=command) for name, command in pairs])


def reset_roster(roster: Roster, script_name: Optional[str] = None) -> Roster:
    """Clear learned statistics for one script, or every script when no name is given.

    Raises KeyError when ``script_name`` is not in the roster.
    """
    if script_name is not None:
        roster.find(script_name).reset()
        return roster
    for script in roster.scripts:
        script.reset()
    return roster


__all__ = [
    "Outcomes",
    "Roster",
    "Script",
    "load_roster",
    "new_roster",
    "reset_roster",
    "save_roster",
]
