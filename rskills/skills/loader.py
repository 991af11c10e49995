"""Skill loader for injecting skills into agent prompts."""

from __future__ import annotations

from typing import Iterable

from rskills.core.errors import SkillNotFoundError
from rskills.skills.parser import Skill
from rskills.skills.registry import SkillRegistry


class SkillLoader:
    """Loads skills from a registry and renders them as prompt text."""

    def __init__(self, registry: SkillRegistry):
        self.registry = registry

    def load_skill(self, name: str) -> Skill:
        """Load a specific skill by name.

        Raises:
            SkillNotFoundError: If no skill has that name
        """
        skill = self.registry.get(name)
        if skill is None:
            raise SkillNotFoundError(name)
        return skill

    def load_skills(self, names: Iterable[str]) -> list[Skill]:
        """Load multiple skills by name.

        Missing and disabled skills are skipped.
        """
        skills = []
        for name in names:
            skill = self.registry.get(name)
            if skill and skill.metadata.enabled:
                skills.append(skill)
        return skills

    def skills_for_query(self, query: str) -> list[Skill]:
        """Skills whose triggers occur in ``query``, best match first."""
        return [m.skill for m in self.registry.match(query)]

    def _with_related(self, skills: list[Skill]) -> list[Skill]:
        ordered: list[Skill] = []
        seen: set[str] = set()
        for skill in skills:
            if skill.name not in seen:
                ordered.append(skill)
                seen.add(skill.name)
        for skill in skills:
            for related in self.registry.related(skill.name):
                if related.name not in seen and related.metadata.enabled:
                    ordered.append(related)
                    seen.add(related.name)
        return ordered

    def build_prompt_injection(
        self,
        skills: list[Skill],
        include_related: bool = False,
    ) -> str:
        """Build a prompt injection string from skills.

        Args:
            skills: Skills to include
            include_related: Append each skill's related skills (once each)

        Returns:
            Formatted prompt injection string, empty when there are no skills
        """
        if not skills:
            return ""

        if include_related:
            skills = self._with_related(skills)

        parts = ["# Active Skills\n"]
        for skill in skills:
            parts.append(f"\n## {skill.name}\n")
            parts.append(f"\n{skill.description}\n")
            parts.append(f"\n{skill.body}\n")

        return "".join(parts)

    def inject_into_prompt(
        self,
        base_prompt: str,
        skills: list[Skill],
        position: str = "after",
    ) -> str:
        """Inject skills into an existing prompt.

        Args:
            base_prompt: Original system prompt
            skills: Skills to inject
            position: Where to inject ("before", "after", or "replace")

        Returns:
            Modified prompt with skills injected
        """
        if position not in ("before", "after", "replace"):
            raise ValueError(f"Invalid position: {position}")

        if not skills:
            return base_prompt

        skill_prompt = self.build_prompt_injection(skills)

        if position == "before":
            return f"{skill_prompt}\n\n{base_prompt}"
        elif position == "after":
            return f"{base_prompt}\n\n{skill_prompt}"
        return skill_prompt
