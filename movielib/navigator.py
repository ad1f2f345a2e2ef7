#!/usr/bin/env python3
"""
Stage 3 (browse) - interactive navigation over the loaded genres

Three modes:
- MAIN_MENU      s: pick a genre, n: browse the current genre, x: exit
- CATEGORY_MENU  1-based genre number, re-prompts until valid
- BROWSE         signed offset; 0 returns to the main menu

step() is a pure function of (state, input line) -> (new state, output lines).
run_session() is the only place that touches the console.

Offsets in BROWSE: a negative k moves to max(0, cursor + k); a positive k
moves to min(last, cursor + k - 1), so 1 keeps the cursor and 2 advances one
record. Every record between the old and new cursor is shown.
"""

import sys
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, TextIO, Tuple

from movielib.constants import CATEGORIES
from movielib.loader import Library
from movielib.record import Record
from movielib.validator import INTEGER_RE

RULE = '-------------------------------'
BOF_MARKER = 'BOF has been reached.'
EOF_MARKER = 'EOF has been reached.'
EXIT_MESSAGE = 'Exiting navigation.'
INVALID_CHOICE = 'Invalid choice. Please try again.'
INVALID_NUMBER = 'Invalid input. Please enter a number.'
NO_RECORDS = 'No records in this genre.'


class Mode(Enum):
    MAIN_MENU = 'main_menu'
    CATEGORY_MENU = 'category_menu'
    BROWSE = 'browse'
    TERMINAL = 'terminal'


@dataclass(frozen=True)
class BrowseState:
    """Session position: active genre and cursor within its records"""
    mode: Mode = Mode.MAIN_MENU
    category_index: int = 0
    cursor: int = 0

    @property
    def category(self) -> str:
        return CATEGORIES[self.category_index]


def records_for(library: Library, category_index: int) -> List[Record]:
    return library.get(CATEGORIES[category_index]) or []


def _parse_int(text: str) -> Optional[int]:
    text = text.strip()
    if not INTEGER_RE.match(text):
        return None
    return int(text)


def render_screen(state: BrowseState, library: Library) -> str:
    """Menu text and input prompt for the current mode (prompt has no newline)"""
    if state.mode is Mode.MAIN_MENU:
        count = len(records_for(library, state.category_index))
        lines = [
            RULE,
            '            Main Menu          ',
            RULE,
            's: Select a movie array to navigate',
            f"n: Navigate {state.category} movies ({count} records)",
            'x: Exit',
            RULE,
        ]
        return '\n'.join(lines) + '\nEnter Your Choice: '

    if state.mode is Mode.CATEGORY_MENU:
        lines = [RULE, '         Genre Sub-Menu        ', RULE]
        for i, category in enumerate(CATEGORIES):
            lines.append(f"{i + 1}: {category} ({len(records_for(library, i))} movies)")
        lines.append(RULE)
        return '\n'.join(lines) + '\nEnter Your Choice: '

    if state.mode is Mode.BROWSE:
        count = len(records_for(library, state.category_index))
        return (
            f"Navigating {state.category} movies ({count})\n"
            'Enter Your Choice (0 to return to the main menu): '
        )

    return ''


def move_cursor(records: Sequence[Record], cursor: int, offset: int) -> Tuple[int, List[str]]:
    """
    Apply a non-zero browse offset.

    Returns:
        (new cursor, lines to display)
    """
    last = len(records) - 1
    lines: List[str] = []

    if offset < 0:
        requested = cursor + offset
        target = max(0, requested)
        if requested < 0:
            lines.append(BOF_MARKER)
    else:
        requested = cursor + offset - 1
        target = min(last, requested)

    for i in range(min(cursor, target), max(cursor, target) + 1):
        lines.append(f"{i + 1}: {records[i]}")

    if offset > 0 and requested > last:
        lines.append(EOF_MARKER)

    return target, lines


def step(state: BrowseState, line: str, library: Library) -> Tuple[BrowseState, List[str]]:
    """Advance the session by one line of user input"""
    if state.mode is Mode.MAIN_MENU:
        choice = line.strip().lower()
        if choice == 's':
            return replace(state, mode=Mode.CATEGORY_MENU), []
        if choice == 'n':
            if records_for(library, state.category_index):
                return replace(state, mode=Mode.BROWSE), []
            return state, [NO_RECORDS]
        if choice == 'x':
            return replace(state, mode=Mode.TERMINAL), [EXIT_MESSAGE]
        return state, [INVALID_CHOICE]

    if state.mode is Mode.CATEGORY_MENU:
        number = _parse_int(line)
        if number is None:
            return state, [INVALID_NUMBER]
        if number < 1 or number > len(CATEGORIES):
            return state, [INVALID_CHOICE]
        return BrowseState(mode=Mode.MAIN_MENU, category_index=number - 1, cursor=0), []

    if state.mode is Mode.BROWSE:
        offset = _parse_int(line)
        if offset is None:
            return state, [INVALID_NUMBER]
        if offset == 0:
            return replace(state, mode=Mode.MAIN_MENU), []
        records = records_for(library, state.category_index)
        cursor, lines = move_cursor(records, state.cursor, offset)
        return replace(state, cursor=cursor), lines

    return state, []


def run_session(library: Library, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None,
                state: Optional[BrowseState] = None) -> BrowseState:
    """
    Run the console loop until the user exits or input runs out.

    Returns:
        Final state (mode TERMINAL)
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    state = state if state is not None else BrowseState()

    while state.mode is not Mode.TERMINAL:
        stdout.write(render_screen(state, library))
        stdout.flush()

        line = stdin.readline()
        if not line:
            # end of input behaves like 'x'
            stdout.write('\n' + EXIT_MESSAGE + '\n')
            return replace(state, mode=Mode.TERMINAL)

        state, output = step(state, line, library)
        for text in output:
            stdout.write(text + '\n')

    return state
