"""Builds ``dockutil --add`` argument fragments from parsed Dock items.

A fragment is the part of the add command that follows ``--add``. It is
stored verbatim in a preset and later passed through ``/bin/sh``, so paths
are quoted for the shell here, once.

Examples::

    /Applications/Safari.app
    '/Applications/Visual Studio Code.app'
    ~/Downloads --view grid --display stack --sort dateadded
    '' --type small-spacer

"""
import logging
import re
from typing import List, Optional, Tuple

from .parser import ParsedItem
from ..status import status

STRAY_CHARS: str = '"\'\\'

# Anything else is escaped with a backslash when a path is left unquoted
SHELL_UNSAFE = re.compile(r"([^\w/.,:@%+=~-])")

SMALL_SPACER_MARKER: str = 'small-spacer-tile'
FOLDER_MARKER: str = 'file-type" = 2;'

# Markers are checked in order, the first one found wins
VIEW_FLAGS: Tuple[Tuple[str, str], ...] = (
    ('"showas" = 1;', '--view grid'),
    ('"showas" = 2;', '--view list'),
    ('"showas" = 3;', '--view fan'),
)
DISPLAY_FLAGS: Tuple[Tuple[str, str], ...] = (
    ('"viewas" = 1;', '--display folder'),
    ('"viewas" = 2;', '--display stack'),
)
SORT_FLAGS: Tuple[Tuple[str, str], ...] = (
    ('"arrangement" = 1;', '--sort name'),
    ('"arrangement" = 2;', '--sort dateadded'),
    ('"arrangement" = 3;', '--sort datemodified'),
    ('"arrangement" = 4;', '--sort datecreated'),
    ('"arrangement" = 5;', '--sort kind'),
)


def _first_match(options: str, flags: Tuple[Tuple[str, str], ...]) -> Optional[str]:
    return next((flag for marker, flag in flags if marker in options), None)


def quote_path(path: str) -> str:
    """Quote a cleaned path for use in a shell fragment.

    Paths containing a space are wrapped in single quotes, except the bare
    home abbreviation. Embedded single quotes are closed, escaped and
    reopened. Other paths stay unwrapped, with every shell metacharacter
    backslash-escaped, so ``/Applications/R&D.app`` becomes
    ``/Applications/R\\&D.app`` and a leading ``~`` still expands.
    """
    if ' ' in path and path != '~':
        return "'" + path.replace("'", "'\\''") + "'"
    return SHELL_UNSAFE.sub(r'\\\1', path)


def option_flags(options: Optional[str]) -> List[str]:
    """Translate a raw options report into add flags.

    At most one flag is emitted for view, display and sort. The display flag
    only applies to folder tiles. Unknown or absent values emit nothing, so
    dockutil's own defaults apply on replay.
    """
    if not options:
        return []

    flags: List[str] = []

    view = _first_match(options, VIEW_FLAGS)
    if view:
        flags.append(view)

    if FOLDER_MARKER in options:
        display = _first_match(options, DISPLAY_FLAGS)
        if display:
            flags.append(display)

    sort = _first_match(options, SORT_FLAGS)
    if sort:
        flags.append(sort)

    return flags


def build_fragment(item: ParsedItem) -> str:
    """Build the ``dockutil --add`` argument fragment for a parsed item.

    Args:
        item: A record produced by :func:`ProDock.core.parser.parse_list_output`.

    Returns:
        str: The fragment, e.g. ``'~/My Docs' --view list --display folder``.

    Raises:
        status.ConstructionFailedException: If the item has no usable path.
    """
    parts: List[str] = []

    if item.is_spacer:
        parts.append("''")
        if item.options and SMALL_SPACER_MARKER in item.options:
            parts.append('--type small-spacer')
        else:
            parts.append('--type spacer')
    else:
        path = item.locator.strip(STRAY_CHARS)
        if not path:
            raise status.ConstructionFailedException(
                f'Dock item {item.label!r} has an empty path.'
            )
        parts.append(quote_path(path))

    parts.extend(option_flags(item.options))

    fragment = ' '.join(parts)
    logging.debug(f'Built fragment for {item.label!r}: {fragment}')
    return fragment


def build_fragments(items: List[ParsedItem]) -> List[str]:
    """Build one fragment per item, preserving order."""
    return [build_fragment(item) for item in items]
