"""Consistency checks over a skill collection."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rskills.skills.parser import SKILL_FILENAME
from rskills.skills.registry import SkillRegistry

ERROR = "error"
WARNING = "warning"


@dataclass
class LintIssue:
    path: Optional[Path]
    severity: str
    skill: str
    message: str


def lint_collection(registry: SkillRegistry) -> list[LintIssue]:
    """Check the discovered skills for broken metadata.

    Call ``registry.discover()`` first.
    """
    issues: list[LintIssue] = []

    for name, paths in sorted(registry.duplicates.items()):
        for path in paths:
            issues.append(LintIssue(path, ERROR, name, f"duplicate skill name '{name}'"))

    for skill in registry.list():
        path = skill.source_path

        for related in skill.metadata.related_skills:
            if registry.get(related) is None:
                issues.append(LintIssue(path, ERROR, skill.name, f"related skill '{related}' does not exist"))
            elif related == skill.name:
                issues.append(LintIssue(path, WARNING, skill.name, "skill lists itself as related"))

        if skill.unclosed_fence:
            issues.append(LintIssue(path, ERROR, skill.name, "unclosed code block"))

        if not skill.metadata.triggers:
            issues.append(LintIssue(path, WARNING, skill.name, "no trigger keywords"))

        if path is not None:
            expected = path.parent.name if path.name == SKILL_FILENAME else path.stem
            if expected != skill.name:
                issues.append(
                    LintIssue(path, WARNING, skill.name, f"name does not match file location '{expected}'")
                )

    return issues
