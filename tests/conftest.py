"""Shared test fixtures and pytest configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from rskills.core.logging import reset_logger


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at a temp dir and reset logging."""
    home = tmp_path / ".rskills"
    monkeypatch.setenv("RSKILLS_HOME", str(home))
    reset_logger()
    yield home
    reset_logger()


@pytest.fixture
def tmp_config_dir(tmp_path: Path) -> Path:
    """Provide a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


OWNERSHIP_SKILL = '''---
name: rust-ownership
description: Ownership, borrowing and lifetimes
globs: ["**/*.rs"]
triggers: [ownership, borrow checker, lifetime, "&mut"]
related_skills: [rust-smart-pointers]
---

# Ownership

Every value has a single owner.

## Borrowing

```rust
fn len(s: &String) -> usize {
    s.len()
}
```

## Lifetimes

```rust
#[derive(Debug)]
struct Holder<'a> {
    name: &'a str,
}
```
'''

SMART_POINTERS_SKILL = '''---
name: rust-smart-pointers
description: Box, Rc, Arc and RefCell
triggers: Box, Rc, Arc, RefCell
related_skills: [rust-ownership]
---

# Smart Pointers

Use `Rc` for shared ownership in a single thread.
'''

ASYNC_SKILL = '''---
name: rust-async
description: async/await with tokio
triggers: [async, tokio, future]
---

# Async Rust

```rust
#[tokio::main]
async fn main() {}
```
'''


def write_skill(root: Path, name: str, content: str) -> Path:
    skill_dir = root / name
    skill_dir.mkdir(parents=True, exist_ok=True)
    path = skill_dir / "SKILL.md"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    """A small skill collection with README and a references directory."""
    root = tmp_path / "collection"
    skills = root / "skills"
    write_skill(skills, "rust-ownership", OWNERSHIP_SKILL)
    write_skill(skills, "rust-smart-pointers", SMART_POINTERS_SKILL)
    write_skill(skills, "rust-async", ASYNC_SKILL)
    (skills / "README.md").write_text("# Skills\n\nIndex of skills.\n", encoding="utf-8")

    refs = root / "references"
    refs.mkdir()
    (refs / "glossary.md").write_text("# Rust Glossary\n\n- **Borrow**: a reference\n", encoding="utf-8")
    (refs / "best-practices.md").write_text("No heading here.\n", encoding="utf-8")
    return skills
