"""
Naming utilities for code generation.

Splits identifiers into words and re-joins them in the casing conventions
that serialization directives (``rename_all``) and the global field-naming
policy can ask for.
"""

import re
from enum import Enum
from typing import List, Optional

_SEPARATORS = re.compile(r"[_\-\s]+")


class RenameRule(Enum):
    """Casing conventions accepted by ``rename_all``."""

    LOWERCASE = "lowercase"
    UPPERCASE = "UPPERCASE"
    PASCAL_CASE = "PascalCase"
    CAMEL_CASE = "camelCase"
    SNAKE_CASE = "snake_case"
    SCREAMING_SNAKE_CASE = "SCREAMING_SNAKE_CASE"
    KEBAB_CASE = "kebab-case"
    SCREAMING_KEBAB_CASE = "SCREAMING-KEBAB-CASE"

    @classmethod
    def parse(cls, name: str) -> Optional["RenameRule"]:
        """Look up a rule by its directive spelling; None if unknown."""
        for rule in cls:
            if rule.value == name:
                return rule
        return None

    def apply(self, name: str) -> str:
        return apply_rule(self, name)


class FieldNaming(Enum):
    """Global policy for field names without explicit renames."""

    PRESERVE = "preserve"
    CAMEL_CASE = "camelCase"

    @classmethod
    def parse(cls, name: str) -> Optional["FieldNaming"]:
        for policy in cls:
            if policy.value == name:
                return policy
        return None

    def apply(self, name: str) -> str:
        if self == FieldNaming.CAMEL_CASE:
            return to_camel_case(name)
        return name


def split_words(name: str) -> List[str]:
    """
    Split an identifier into words.

    Separators (``_``, ``-``, whitespace) always split. Within a segment a
    new word starts at an uppercase letter that follows a lowercase letter
    or digit, and at the last uppercase letter of an uppercase run when a
    lowercase letter follows it (``HTTPSPort`` -> ``HTTPS``, ``Port``).

    Args:
        name: Identifier in any casing.

    Returns:
        List of non-empty words, original casing kept.
    """
    words: List[str] = []
    for segment in _SEPARATORS.split(name):
        if not segment:
            continue
        current = segment[0]
        for i in range(1, len(segment)):
            char = segment[i]
            prev = segment[i - 1]
            nxt = segment[i + 1] if i + 1 < len(segment) else ""
            boundary = False
            if char.isupper():
                if prev.islower() or prev.isdigit():
                    boundary = True
                elif prev.isupper() and nxt.islower():
                    boundary = True
            if boundary:
                words.append(current)
                current = char
            else:
                current += char
        words.append(current)
    return words


def _capitalize(word: str) -> str:
    return word[0].upper() + word[1:].lower() if word else word


def to_camel_case(name: str) -> str:
    """Convert to camelCase (``user_id`` -> ``userId``)."""
    words = split_words(name)
    if not words:
        return ""
    return words[0].lower() + "".join(_capitalize(w) for w in words[1:])


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase (``user_id`` -> ``UserId``)."""
    return "".join(_capitalize(w) for w in split_words(name))


def to_snake_case(name: str) -> str:
    """Convert to snake_case (``UserId`` -> ``user_id``)."""
    return "_".join(w.lower() for w in split_words(name))


def to_kebab_case(name: str) -> str:
    """Convert to kebab-case (``UserId`` -> ``user-id``)."""
    return "-".join(w.lower() for w in split_words(name))


def apply_rule(rule: RenameRule, name: str) -> str:
    """
    Convert a name according to a rename rule.

    Args:
        rule: Target convention.
        name: Original identifier.

    Returns:
        Converted identifier; empty input gives an empty string.
    """
    if not name:
        return ""

    if rule == RenameRule.LOWERCASE:
        return "".join(split_words(name)).lower()
    elif rule == RenameRule.UPPERCASE:
        return "".join(split_words(name)).upper()
    elif rule == RenameRule.PASCAL_CASE:
        return to_pascal_case(name)
    elif rule == RenameRule.CAMEL_CASE:
        return to_camel_case(name)
    elif rule == RenameRule.SNAKE_CASE:
        return to_snake_case(name)
    elif rule == RenameRule.SCREAMING_SNAKE_CASE:
        return to_snake_case(name).upper()
    elif rule == RenameRule.KEBAB_CASE:
        return to_kebab_case(name)
    elif rule == RenameRule.SCREAMING_KEBAB_CASE:
        return to_kebab_case(name).upper()
    return name
