#!/usr/bin/env python3
"""
Movie record tokenizer and validator

Turns one raw input line into a Record, or into exactly one ValidationFailure
naming the first problem found.

Tokenizing rules:
- a double quote toggles the "inside quotes" flag and is dropped
- an unquoted comma closes the current field (trimmed)
- the tenth unquoted comma closes the last field; another unquoted comma
  after it is rejected immediately, other trailing text is dropped
- a quote left open at end of line is rejected

Field checks run in record order and stop at the first failure:
year, title, duration, category, rating, score, then the four names.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from movielib.constants import (
    CATEGORIES, RATINGS, FIELD_COUNT,
    MIN_YEAR, MAX_YEAR, MIN_DURATION, MAX_DURATION, MIN_SCORE, MAX_SCORE,
)
from movielib.record import Record

INTEGER_RE = re.compile(r'^[+-]?\d+$')


class FailureKind(Enum):
    """Reason a line was rejected"""
    MALFORMED_QUOTING = 'MalformedQuoting'
    TOO_MANY_FIELDS = 'TooManyFields'
    TOO_FEW_FIELDS = 'TooFewFields'
    BAD_YEAR = 'BadYear'
    BAD_TITLE = 'BadTitle'
    BAD_DURATION = 'BadDuration'
    BAD_CATEGORY = 'BadCategory'
    BAD_RATING = 'BadRating'
    BAD_SCORE = 'BadScore'
    BAD_NAME = 'BadName'
    BAD_ENCODING = 'BadEncoding'


@dataclass(frozen=True)
class ValidationFailure:
    kind: FailureKind
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of parsing one line.

    Exactly one of record/failure is set, or neither for a blank line.
    """
    record: Optional[Record] = None
    failure: Optional[ValidationFailure] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @property
    def skipped(self) -> bool:
        return self.record is None and self.failure is None


def tokenize(line: str) -> Tuple[Optional[List[str]], Optional[ValidationFailure]]:
    """
    Split a line into exactly FIELD_COUNT trimmed fields.

    The tenth unquoted comma closes the last field; text after it is dropped
    unless another unquoted comma follows, which is rejected.

    Returns:
        (fields, None) on success, (None, failure) otherwise
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == ',' and not in_quotes:
            if len(fields) == FIELD_COUNT:
                return None, ValidationFailure(FailureKind.TOO_MANY_FIELDS, "Excess number of fields.")
            fields.append(''.join(current).strip())
            current = []
        else:
            current.append(ch)

    if in_quotes:
        return None, ValidationFailure(FailureKind.MALFORMED_QUOTING, "Missing closing quote.")

    if len(fields) < FIELD_COUNT - 1:
        return None, ValidationFailure(
            FailureKind.TOO_FEW_FIELDS,
            f"Missing fields. Expected {FIELD_COUNT} but found {len(fields) + 1}"
        )

    if len(fields) < FIELD_COUNT:
        fields.append(''.join(current).strip())
    return fields, None


def _parse_int(text: str) -> Optional[int]:
    if not INTEGER_RE.match(text):
        return None
    return int(text)


def _parse_float(text: str) -> Optional[float]:
    # float() also takes "1_0", "nan" and "inf"; none of those are scores
    if '_' in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def validate_year(text: str) -> Optional[ValidationFailure]:
    year = _parse_int(text)
    if year is None:
        return ValidationFailure(
            FailureKind.BAD_YEAR,
            f"The year must be an integer between {MIN_YEAR} and {MAX_YEAR}."
        )
    if year < MIN_YEAR or year > MAX_YEAR:
        return ValidationFailure(
            FailureKind.BAD_YEAR,
            f"Invalid year: {year}. The year must be between {MIN_YEAR} and {MAX_YEAR}."
        )
    return None


def validate_title(text: str) -> Optional[ValidationFailure]:
    if not text:
        return ValidationFailure(FailureKind.BAD_TITLE, "Missing title")
    return None


def validate_duration(text: str) -> Optional[ValidationFailure]:
    duration = _parse_int(text)
    if duration is None:
        return ValidationFailure(
            FailureKind.BAD_DURATION,
            f"The duration must be an integer between {MIN_DURATION} and {MAX_DURATION} minutes."
        )
    if duration < MIN_DURATION or duration > MAX_DURATION:
        return ValidationFailure(FailureKind.BAD_DURATION, f"Invalid duration: {duration}")
    return None


def validate_category(text: str) -> Optional[ValidationFailure]:
    if not text:
        return ValidationFailure(FailureKind.BAD_CATEGORY, "Missing genre")
    if text.lower() not in CATEGORIES:
        return ValidationFailure(FailureKind.BAD_CATEGORY, f"Invalid genre: {text.lower()}")
    return None


def validate_rating(text: str) -> Optional[ValidationFailure]:
    if not text:
        return ValidationFailure(FailureKind.BAD_RATING, "Missing rating")
    if text.lower() not in RATINGS:
        return ValidationFailure(FailureKind.BAD_RATING, f"Invalid rating: {text.lower()}")
    return None


def validate_score(text: str) -> Optional[ValidationFailure]:
    score = _parse_float(text)
    if score is None:
        return ValidationFailure(
            FailureKind.BAD_SCORE,
            "Score must be a positive double value less than or equal to 10."
        )
    if score < MIN_SCORE or score > MAX_SCORE:
        return ValidationFailure(
            FailureKind.BAD_SCORE,
            f"Invalid score: {score}. Score must be between {MIN_SCORE} and {MAX_SCORE}."
        )
    return None


def validate_names(names: Sequence[str]) -> Optional[ValidationFailure]:
    for name in names:
        if not name.strip():
            return ValidationFailure(FailureKind.BAD_NAME, "Missing name(s) in the record.")
    return None


# (field index, check) in the order failures are reported
FIELD_CHECKS: Tuple[Tuple[int, Callable[[str], Optional[ValidationFailure]]], ...] = (
    (0, validate_year),
    (1, validate_title),
    (2, validate_duration),
    (3, validate_category),
    (4, validate_rating),
    (5, validate_score),
)


def validate_fields(fields: Sequence[str]) -> Optional[ValidationFailure]:
    """Return the first failure in field order, or None if every field is valid"""
    for index, check in FIELD_CHECKS:
        failure = check(fields[index])
        if failure is not None:
            return failure
    return validate_names(fields[6:FIELD_COUNT])


def build_record(fields: Sequence[str]) -> Record:
    """Create a Record from already-validated fields"""
    return Record(
        year=int(fields[0]),
        title=fields[1].strip('"'),
        duration=int(fields[2]),
        category=fields[3],
        rating=fields[4],
        score=float(fields[5]),
        primary=fields[6],
        secondary=fields[7],
        tertiary=fields[8],
        quaternary=fields[9],
    )


def parse_record(line: str) -> ParseResult:
    """
    Parse one raw line into a Record.

    Args:
        line: Raw line, with or without its line terminator

    Returns:
        ParseResult with the record, the first failure, or neither (blank line)
    """
    line = line.rstrip('\r\n')
    if not line.strip():
        return ParseResult()

    fields, failure = tokenize(line)
    if failure is not None:
        return ParseResult(failure=failure)

    failure = validate_fields(fields)
    if failure is not None:
        return ParseResult(failure=failure)

    return ParseResult(record=build_record(fields))


def parse_bytes(raw: bytes) -> ParseResult:
    """
    Decode one undecoded input line as UTF-8 and parse it.

    Bytes that do not decode fail this line only, as BadEncoding.
    """
    try:
        line = raw.decode('utf-8')
    except UnicodeDecodeError as e:
        return ParseResult(failure=ValidationFailure(
            FailureKind.BAD_ENCODING,
            f"Invalid UTF-8 byte {raw[e.start]:#04x} at position {e.start + 1}."
        ))
    return parse_record(line)
