import re
from typing import FrozenSet, Iterable, List, Optional

# Requirements are split on commas, periods and whitespace only.
_TOKEN_SPLIT = re.compile(r"[,.\s]+")
_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


def tokenize_requirements(requirements: Optional[str]) -> FrozenSet[str]:
    """
    Lower-case a requirements string and split it into a token set.
    Empty tokens are discarded; None yields an empty set.
    """
    if not requirements:
        return frozenset()
    return frozenset(t for t in _TOKEN_SPLIT.split(requirements.lower()) if t)


def normalize_skill(skill: str) -> str:
    return skill.lower()


def distinct_skills(skills: Optional[Iterable[str]]) -> List[str]:
    """Lower-cased skills in first-seen order, duplicates and blanks dropped."""
    if not skills:
        return []
    seen = set()
    result = []
    for skill in skills:
        if not isinstance(skill, str) or skill == "":
            continue
        key = normalize_skill(skill)
        if key not in seen:
            seen.add(key)
            result.append(key)
    return result


def sanitize_name(name: str) -> str:
    """Replace every character outside [a-zA-Z0-9] with '-'."""
    return _UNSAFE_NAME_CHARS.sub("-", name)


def file_extension(file_name: str) -> str:
    return file_name.split(".")[-1]
