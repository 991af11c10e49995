"""Skill document parser.

A skill is a markdown file with a YAML front matter block:

    ---
    name: rust-ownership
    description: Ownership, borrowing and lifetimes
    globs: ["**/*.rs"]
    triggers: [ownership, borrow checker, lifetime]
    related_skills: [rust-smart-pointers]
    ---

followed by prose and Rust code snippets.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from rskills.core.errors import SkillParseError

logger = logging.getLogger(__name__)

SKILL_FILENAME = "SKILL.md"

# Top-level documents that describe the collection rather than a skill
NON_SKILL_DOCUMENTS = frozenset({"README.md", "AGENTS.md", "CLAUDE.md", "CHANGELOG.md", "CONTRIBUTING.md"})


@dataclass
class SkillMetadata:
    """Skill metadata from YAML front matter."""
    name: str
    description: str
    globs: list[str] = field(default_factory=list)
    triggers: list[str] = field(default_factory=list)
    related_skills: list[str] = field(default_factory=list)
    version: str = "1.0.0"
    tags: list[str] = field(default_factory=list)
    enabled: bool = True


@dataclass
class CodeBlock:
    """A fenced code block from a skill body."""
    language: str
    code: str


@dataclass
class Skill:
    """A complete skill document."""
    metadata: SkillMetadata
    body: str
    source_path: Optional[Path] = None

    headers: list[str] = field(default_factory=list)
    code_blocks: list[CodeBlock] = field(default_factory=list)
    unclosed_fence: bool = False

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def description(self) -> str:
        return self.metadata.description

    def to_prompt(self) -> str:
        """Convert skill to prompt injection format."""
        prompt = f"## Skill: {self.name}\n\n"
        prompt += f"{self.description}\n\n"
        prompt += self.body
        return prompt


def _as_list(value: Any, field_name: str, split_commas: bool = False) -> list[str]:
    """Coerce a front matter value to a list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",") if split_commas else [value]
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise SkillParseError(f"Front matter field '{field_name}' must be a string or list")
    return [str(item).strip() for item in items if str(item).strip()]


_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


def _as_bool(value: Any, field_name: str) -> bool:
    """Coerce a front matter flag; quoted ``"false"``/``"no"``/``"off"`` mean False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS:
        return value.strip().lower() in _TRUE_STRINGS
    raise SkillParseError(f"Front matter field '{field_name}' must be true or false")


class SkillParser:
    """Parser for skill documents."""

    FRONTMATTER_PATTERN = re.compile(
        r'^\ufeff?---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)',
        re.DOTALL
    )
    HEADER_PATTERN = re.compile(r'^(#{1,6})\s+(.+?)\s*#*\s*$')

    def parse_file(self, path: Path) -> Skill:
        """Parse a skill document.

        Raises:
            FileNotFoundError: If the file does not exist
            SkillParseError: If the document is invalid
        """
        if not path.exists():
            raise FileNotFoundError(f"Skill file not found: {path}")

        content = path.read_text(encoding="utf-8")
        try:
            skill = self.parse_string(content)
        except SkillParseError as e:
            raise SkillParseError(f"{path}: {e}") from e
        skill.source_path = path
        return skill

    def parse_string(self, content: str) -> Skill:
        """Parse a skill document from a string.

        Raises:
            SkillParseError: If the front matter is missing or invalid
        """
        match = self.FRONTMATTER_PATTERN.match(content)
        if not match:
            raise SkillParseError("Invalid skill document: missing YAML frontmatter")

        body = content[match.end():]

        try:
            frontmatter = yaml.safe_load(match.group(1)) or {}
        except yaml.YAMLError as e:
            raise SkillParseError(f"Invalid YAML frontmatter: {e}") from e

        if not isinstance(frontmatter, dict):
            raise SkillParseError("Invalid YAML frontmatter: expected a mapping")

        for required in ("name", "description"):
            if not frontmatter.get(required):
                raise SkillParseError(f"Skill document missing required '{required}' field in frontmatter")

        metadata = SkillMetadata(
            name=str(frontmatter["name"]).strip(),
            description=str(frontmatter["description"]).strip(),
            globs=_as_list(frontmatter.get("globs"), "globs", split_commas=True),
            triggers=_as_list(frontmatter.get("triggers"), "triggers", split_commas=True),
            related_skills=_as_list(frontmatter.get("related_skills"), "related_skills", split_commas=True),
            version=str(frontmatter.get("version", "1.0.0")),
            tags=_as_list(frontmatter.get("tags"), "tags", split_commas=True),
            enabled=_as_bool(frontmatter.get("enabled", True), "enabled"),
        )

        headers, code_blocks, unclosed = self._scan_body(body)

        return Skill(
            metadata=metadata,
            body=body.strip(),
            headers=headers,
            code_blocks=code_blocks,
            unclosed_fence=unclosed,
        )

    def _scan_body(self, body: str) -> tuple[list[str], list[CodeBlock], bool]:
        """Collect heading titles and fenced code blocks.

        Lines starting with ``#`` inside a fence are code (Rust attributes,
        shell comments), not headings.
        """
        headers: list[str] = []
        blocks: list[CodeBlock] = []
        in_fence = False
        language = ""
        buffer: list[str] = []

        for line in body.splitlines():
            if line.startswith("```"):
                if in_fence:
                    blocks.append(CodeBlock(language=language, code="\n".join(buffer)))
                    in_fence = False
                    buffer = []
                else:
                    in_fence = True
                    language = line[3:].strip().split(",")[0]
                continue

            if in_fence:
                buffer.append(line)
                continue

            header = self.HEADER_PATTERN.match(line)
            if header:
                headers.append(header.group(2))

        return headers, blocks, in_fence

    def parse_directory(self, directory: Path) -> list[Skill]:
        """Parse every skill document under a directory.

        Picks up ``<skill>/SKILL.md`` folders and standalone ``*.md`` files,
        recursively. Collection-level documents (README, AGENTS, ...) and
        markdown without front matter are skipped; invalid skills are
        logged and skipped.
        """
        skills: list[Skill] = []

        if not directory.exists():
            return skills

        for md_file in sorted(directory.rglob("*.md")):
            if not md_file.is_file() or md_file.name in NON_SKILL_DOCUMENTS:
                continue
            try:
                skills.append(self.parse_file(md_file))
            except SkillParseError as e:
                if "missing YAML frontmatter" in str(e) and md_file.name != SKILL_FILENAME:
                    logger.debug("Skipping non-skill document %s", md_file)
                    continue
                logger.warning("Failed to parse %s: %s", md_file, e)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to read %s: %s", md_file, e)

        return skills


def create_skill_template(name: str, description: str, triggers: tuple[str, ...] | list[str] = ()) -> str:
    """Create a skill document template.

    Args:
        name: Skill name (lowercase, hyphen-separated)
        description: Brief skill description
        triggers: Keywords that should route an assistant to this skill

    Returns:
        Skill document content
    """
    front = {
        "name": name,
        "description": description,
        "globs": ["**/*.rs"],
        "triggers": list(triggers),
        "related_skills": [],
    }
    frontmatter = yaml.safe_dump(front, sort_keys=False, allow_unicode=True, default_flow_style=None)
    title = name.replace("-", " ").title()
    return f'''---
{frontmatter}---

# {title}

{description}

## Core Concepts

- Explain the idea in one paragraph
- Link to the relevant chapter of the Rust book or reference

## Example

```rust
fn main() {{
    println!("{name}");
}}
```

## Common Mistakes

- Describe the compiler error and how to fix it
'''
