"""
Field Extraction Strategies
===========================
Ordered regex strategies for pulling single fields out of profile HTML.

Profile pages change markup over time, so each field is described by a list
of patterns tried in sequence; the first one that matches wins.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Pattern, Union

from utils.data_normalizer import safe_int


@dataclass(frozen=True)
class RegexStrategy:
    """
    One way of finding a field: a pattern plus an optional transform of the
    captured group. A transform returning None means "no match" and lets the
    next strategy run.
    """
    name: str
    pattern: Pattern
    transform: Optional[Callable[[str], object]] = None
    group: int = 1

    def extract(self, text: str):
        match = self.pattern.search(text)
        if not match:
            return None
        try:
            captured = match.group(self.group)
        except IndexError:
            return None
        if captured is None:
            return None
        captured = captured.strip()
        if self.transform is None:
            return captured or None
        return self.transform(captured)


def strategy(name: str, pattern: Union[str, Pattern], transform=None,
             group: int = 1, flags: int = re.IGNORECASE) -> RegexStrategy:
    if isinstance(pattern, str):
        pattern = re.compile(pattern, flags)
    return RegexStrategy(name=name, pattern=pattern, transform=transform, group=group)


def extract_first(text: str, strategies: Iterable[RegexStrategy], default=None):
    """Run strategies in order and return the first non-None result."""
    if not text:
        return default
    for candidate in strategies:
        value = candidate.extract(text)
        if value is not None:
            return value
    return default


def extract_number(text: Optional[str]) -> Optional[int]:
    """First (possibly negative) integer in text, ignoring thousands separators."""
    if not text:
        return None
    match = re.search(r'-?\d+', text.replace(',', ''))
    return safe_int(match.group()) if match else None
