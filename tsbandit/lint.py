from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .roster import Roster

WARNING = "warning"
ERROR = "error"


@dataclass(frozen=True)
class LintFinding:
    script: str
    level: str
    message: str


def lint_roster(roster: Roster) -> List[LintFinding]:
    """Static checks for roster settings that silently distort scheduling."""
    findings: List[LintFinding] = []
    seen_zero = False
    for script in roster.scripts:
        if script.bias == 0.0:
            findings.append(
                LintFinding(
                    script.name,
                    WARNING,
                    "A bias of 0 will only run after all other scripts reach their limit.",
                )
            )
            if seen_zero:
                findings.append(
                    LintFinding(
                        script.name,
                        ERROR,
                        "Multiple scripts with bias zero are not ranked relative to each other; "
                        "the first one listed always wins regardless of interestingness or runtime.",
                    )
                )
            seen_zero = True
        if script.bias < 0.0:
            findings.append(
                LintFinding(
                    script.name,
                    ERROR,
                    "A negative bias rewards tests that take more time to find an interesting case.",
                )
            )
        if script.limit == 0:
            findings.append(
                LintFinding(
                    script.name,
                    WARNING,
                    "Limit of 0 stops this script from ever running. Leave undefined to have no limit.",
                )
            )
    return findings


def has_errors(findings: List[LintFinding]) -> bool:
    return any(f.level == ERROR for f in findings)
