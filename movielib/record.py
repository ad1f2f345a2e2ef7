#!/usr/bin/env python3
"""
Movie record value type

One validated line of input. Records are built by movielib.validator, written to
genre containers as CSV, packed into binary archives and shown by the navigator.
"""

from dataclasses import dataclass, astuple
from typing import Tuple

from movielib.constants import CONTAINER_EXTENSION


@dataclass(frozen=True)
class Record:
    """Container for one movie, all ten fields required"""
    year: int
    title: str
    duration: int
    category: str
    rating: str
    score: float
    primary: str      # director
    secondary: str    # actor 1
    tertiary: str     # actor 2
    quaternary: str   # actor 3

    def values(self) -> Tuple:
        """Field values in record order"""
        return astuple(self)

    @property
    def container_name(self) -> str:
        """Genre container this record belongs in, e.g. drama.csv"""
        return self.category.lower() + CONTAINER_EXTENSION

    def to_csv(self) -> str:
        """
        Render as one container line: fields joined by ", ".

        Text containing a comma is quoted so the line tokenizes back to the
        same record.
        """
        return ', '.join(_csv_field(value) for value in self.values())

    def __str__(self) -> str:
        return (
            f"{self.title} ({self.year}) | {self.duration} min | {self.category} | "
            f"{self.rating} | score {self.score} | dir. {self.primary} | "
            f"{self.secondary}, {self.tertiary}, {self.quaternary}"
        )


def _csv_field(value) -> str:
    text = str(value)
    if isinstance(value, str) and ',' in text:
        return f'"{text}"'
    return text
