"""Skills system - markdown skill documents with YAML front matter."""

from rskills.skills.lint import LintIssue, lint_collection
from rskills.skills.loader import SkillLoader
from rskills.skills.parser import CodeBlock, Skill, SkillMetadata, SkillParser, create_skill_template
from rskills.skills.registry import ReferenceDocument, SkillMatch, SkillRegistry

__all__ = [
    "CodeBlock",
    "LintIssue",
    "ReferenceDocument",
    "Skill",
    "SkillLoader",
    "SkillMatch",
    "SkillMetadata",
    "SkillParser",
    "SkillRegistry",
    "create_skill_template",
    "lint_collection",
]
