"""
Rules loader - reads rules.yaml and validates it against the Rules schema.

Loading is fail-fast: a missing file, broken YAML, a missing required section
or a schema mismatch all raise before the application starts serving.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

DEFAULT_RULES_FILENAME = "rules.yaml"


class RulesSectionError(ValueError):
    """Raised when sections listed in project.required_sections are absent."""

    def __init__(self, missing_sections: list[str]) -> None:
        self.missing_sections = missing_sections
        super().__init__(f"Rules validation failed: missing required sections: {missing_sections}")


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    data = parse_rules_text(path.read_text())
    return validate_rules(data)


def parse_rules_text(content: str) -> dict[str, Any]:
    """Parse YAML rules text, tolerating a ```yaml fenced block."""
    try:
        data = yaml.safe_load(_strip_markdown_fences(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    if data is None:
        raise ValueError("Rules file is empty")
    if not isinstance(data, dict):
        raise ValueError("Rules file must contain a mapping at the top level")

    return data


def validate_rules(data: dict[str, Any]) -> Rules:
    """Check declared sections are present, then validate the schema."""
    declared = data.get("project", {}).get("required_sections", [])
    missing = [section for section in declared if section not in data]
    if missing:
        raise RulesSectionError(missing)

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        # Re-raise with a clear message for the caller/logs
        raise ValueError(f"Rules validation failed:\n{e}") from e


def get_rules_path(base_dir: Path | None = None) -> Path:
    """Resolve the rules path: RULES_PATH env var, else <base_dir>/rules.yaml."""
    env_path = os.environ.get("RULES_PATH")
    if env_path:
        return Path(env_path)
    return (base_dir or Path.cwd()) / DEFAULT_RULES_FILENAME


def _strip_markdown_fences(content: str) -> str:
    lines = content.splitlines()
    yaml_lines = []
    in_block = False
    found_block = False

    for line in lines:
        stripped = line.strip()
        if stripped.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and stripped.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    # No fence means the whole file is YAML
    if found_block:
        return "\n".join(yaml_lines)
    return content
