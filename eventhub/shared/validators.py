"""Shared validation utilities"""

import re
from typing import Optional

USERNAME_PATTERN = r"^[a-zA-Z0-9_.-]{3,50}$"
MAX_SKILLS = 50
MAX_SKILL_LENGTH = 50
# Largest value an Integer column (ids, budget, price) can hold
MAX_DB_INT = 2_147_483_647


def validate_username(username: str) -> str:
    """
    Validate username format.

    Args:
        username: Username string

    Returns:
        Stripped username

    Raises:
        ValueError: If username format is invalid
    """
    username = (username or "").strip()

    if not re.match(USERNAME_PATTERN, username):
        raise ValueError(
            "Username must be 3-50 characters: letters, digits, dots, dashes or underscores"
        )

    return username


def validate_not_blank(value: Optional[str]) -> Optional[str]:
    """
    Reject strings that are empty once stripped.

    Returns:
        Stripped value, or None if value is None

    Raises:
        ValueError: If value is blank
    """
    if value is None:
        return value

    value = value.strip()
    if not value:
        raise ValueError("Field cannot be blank")

    return value


def normalize_skills(skills: Optional[list[str]]) -> Optional[list[str]]:
    """
    Strip skill names, drop blanks and duplicates (case-insensitive), keep order.

    Raises:
        ValueError: If there are too many skills or one is too long
    """
    if skills is None:
        return skills

    normalized = []
    seen = set()
    for skill in skills:
        skill = skill.strip()
        if not skill or skill.lower() in seen:
            continue
        if len(skill) > MAX_SKILL_LENGTH:
            raise ValueError(f"Skill names must be at most {MAX_SKILL_LENGTH} characters")
        seen.add(skill.lower())
        normalized.append(skill)

    if len(normalized) > MAX_SKILLS:
        raise ValueError(f"At most {MAX_SKILLS} skills are allowed")

    return normalized
