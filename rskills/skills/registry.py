"""Skill registry for discovering, looking up and matching skills.

Sources are loaded in order; a later source overrides an earlier one when
two documents share a name:
1. The collection's skills directory
2. Any extra directories (local drafts, forks)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from rskills.skills.parser import Skill, SkillParser

logger = logging.getLogger(__name__)


@dataclass
class SkillMatch:
    """A skill selected by trigger lookup."""
    skill: Skill
    triggers: list[str]

    @property
    def score(self) -> int:
        return len(self.triggers)


@dataclass
class ReferenceDocument:
    """A reference document (glossary, best practices, ecosystem notes)."""
    path: Path
    title: str


def _trigger_pattern(trigger: str) -> re.Pattern[str]:
    """Whole-word, case-insensitive pattern for a trigger phrase.

    Word boundaries are only asserted next to word characters so triggers
    such as ``Box<dyn`` or ``&mut`` still match.
    """
    escaped = re.escape(trigger.strip())
    prefix = r"(?<!\w)" if re.match(r"\w", trigger.strip()) else ""
    suffix = r"(?!\w)" if re.search(r"\w$", trigger.strip()) else ""
    return re.compile(prefix + escaped + suffix, re.IGNORECASE)


class SkillRegistry:
    """Registry for managing and discovering skills."""

    def __init__(
        self,
        skills_dir: Path,
        references_dir: Optional[Path] = None,
        extra_dirs: Iterable[Path] = (),
    ):
        """Initialize skill registry.

        Args:
            skills_dir: The collection's skills directory
            references_dir: Directory of reference documents
            extra_dirs: Additional skill directories, higher priority
        """
        self.skills_dir = Path(skills_dir)
        self.references_dir = Path(references_dir) if references_dir else None
        self.extra_dirs = [Path(d) for d in extra_dirs]

        self._skills: dict[str, Skill] = {}
        self._duplicates: dict[str, list[Path]] = {}
        self._parser = SkillParser()

    def discover(self) -> dict[str, Skill]:
        """Discover all available skills.

        Returns:
            Dictionary of skill name -> Skill
        """
        self._skills = {}
        self._duplicates = {}

        for directory in [self.skills_dir, *self.extra_dirs]:
            if not directory.exists():
                logger.debug("Skill directory does not exist: %s", directory)
                continue
            for skill in self._parser.parse_directory(directory):
                existing = self._skills.get(skill.name)
                if existing is not None:
                    logger.warning(
                        "Duplicate skill '%s': %s overrides %s",
                        skill.name, skill.source_path, existing.source_path,
                    )
                    paths = self._duplicates.setdefault(skill.name, [existing.source_path])
                    paths.append(skill.source_path)
                self._skills[skill.name] = skill

        logger.info("Discovered %d skills", len(self._skills))
        return self._skills

    @property
    def duplicates(self) -> dict[str, list[Path]]:
        """Names defined by more than one document, with every source path."""
        return dict(self._duplicates)

    def get(self, name: str) -> Optional[Skill]:
        return self._skills.get(name)

    def list(self) -> list[Skill]:
        """All discovered skills, sorted by name."""
        return sorted(self._skills.values(), key=lambda s: s.name)

    def list_enabled(self) -> list[Skill]:
        return [s for s in self.list() if s.metadata.enabled]

    def register(self, skill: Skill) -> None:
        """Register a skill manually."""
        self._skills[skill.name] = skill

    def unregister(self, name: str) -> bool:
        """Unregister a skill.

        Returns:
            True if skill was removed, False if not found
        """
        if name in self._skills:
            del self._skills[name]
            return True
        return False

    def search(self, query: str) -> list[Skill]:
        """Search skills by name, description, or tags.

        Args:
            query: Search query (case-insensitive substring)
        """
        query_lower = query.lower()
        results = []
        for skill in self.list():
            if query_lower in skill.name.lower():
                results.append(skill)
            elif query_lower in skill.description.lower():
                results.append(skill)
            elif any(query_lower in tag.lower() for tag in skill.metadata.tags):
                results.append(skill)
        return results

    def match(self, query: str) -> list[SkillMatch]:
        """Find enabled skills whose trigger keywords occur in ``query``.

        Results are ordered by the number of distinct triggers hit, then by
        name.
        """
        matches: list[SkillMatch] = []
        for skill in self.list_enabled():
            hits = []
            for trigger in skill.metadata.triggers:
                if trigger.lower() in (h.lower() for h in hits):
                    continue
                if _trigger_pattern(trigger).search(query):
                    hits.append(trigger)
            if hits:
                logger.debug("Skill %s triggered by: %s", skill.name, hits)
                matches.append(SkillMatch(skill=skill, triggers=hits))

        matches.sort(key=lambda m: (-m.score, m.skill.name))
        return matches

    def related(self, name: str) -> list[Skill]:
        """Resolve a skill's ``related_skills`` to loaded skills.

        Unknown names are skipped.
        """
        skill = self.get(name)
        if skill is None:
            return []
        resolved = []
        for related_name in skill.metadata.related_skills:
            related = self.get(related_name)
            if related is None:
                logger.debug("Skill %s references unknown related skill %s", name, related_name)
                continue
            resolved.append(related)
        return resolved

    def references(self) -> list[ReferenceDocument]:
        """List reference documents with their first heading as title."""
        if self.references_dir is None or not self.references_dir.is_dir():
            return []

        docs = []
        for path in sorted(self.references_dir.rglob("*.md")):
            if not path.is_file():
                continue
            title = path.stem.replace("-", " ").replace("_", " ").title()
            try:
                for line in path.read_text(encoding="utf-8", errors="replace").splitlines():
                    if line.startswith("# "):
                        title = line[2:].strip()
                        break
            except OSError as e:
                logger.warning("Failed to read reference %s: %s", path, e)
            docs.append(ReferenceDocument(path=path, title=title))
        return docs
