#!/usr/bin/env python3
"""
Shared constants for the movie record pipeline

Single source of truth for the genre list, ratings, field bounds and the
default artifact names. DO NOT duplicate these lists in other modules - import
from here instead.
"""

# Recognized genres, in menu/manifest order (closed set, matched case-insensitively)
CATEGORIES = (
    'musical',
    'comedy',
    'animation',
    'adventure',
    'drama',
    'crime',
    'biography',
    'horror',
    'action',
    'documentary',
    'fantasy',
    'mystery',
    'sci-fi',
    'family',
    'romance',
    'thriller',
    'western',
)

# Recognized MPAA-style ratings (matched case-insensitively)
RATINGS = (
    'pg',
    'unrated',
    'g',
    'r',
    'pg-13',
    'nc-17',
)

# Record layout: field name and Python type, in input/CSV/archive order
RECORD_FIELDS = (
    ('year', int),
    ('title', str),
    ('duration', int),
    ('category', str),
    ('rating', str),
    ('score', float),
    ('primary', str),      # director
    ('secondary', str),    # actor 1
    ('tertiary', str),     # actor 2
    ('quaternary', str),   # actor 3
)

FIELD_COUNT = len(RECORD_FIELDS)

# Inclusive validation bounds
MIN_YEAR = 1990
MAX_YEAR = 1999
MIN_DURATION = 30
MAX_DURATION = 300
MIN_SCORE = 0.0
MAX_SCORE = 10.0

# Stage 2 keeps at most this many records per genre archive
MAX_RECORDS_PER_CATEGORY = 1000

# Default artifact names (overridable from config.yaml)
PART1_MANIFEST = 'part1_manifest.txt'
PART2_MANIFEST = 'part2_manifest.txt'
PART3_MANIFEST = 'part3_manifest.txt'
ERROR_LOG = 'bad-movie_records.txt'
CONTAINER_EXTENSION = '.csv'
ARCHIVE_EXTENSION = '.bin'
AUDIT_REPORT = 'pipeline_audit.csv'
