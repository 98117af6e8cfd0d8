"""Slug generation for heading anchors"""

import re


def slugify(text: str) -> str:
    """Convert text to a GitHub-style anchor slug.

    Lowercases, drops everything that is not a word character, space or hyphen,
    then turns each space into a hyphen. Runs of hyphens are kept so that
    'a - b' becomes 'a---b', the same as GitHub renders it.
    """
    text = text.lower()
    text = re.sub(r'[^\w\- ]', '', text)
    return text.replace(' ', '-')


class Slugger:
    """Per-render slug registry that disambiguates duplicates with -1, -2, ..."""

    def __init__(self) -> None:
        self.occurrences: dict[str, int] = {}

    def slug(self, text: str) -> str:
        original = slugify(text)
        result = original
        while result in self.occurrences:
            self.occurrences[original] += 1
            result = f"{original}-{self.occurrences[original]}"
        self.occurrences[result] = 0
        return result
