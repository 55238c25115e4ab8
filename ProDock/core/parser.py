"""Parser for ``dockutil --list`` output.

Each line of the listing is a tab separated record::

    <label>\\t<locator>\\t<section>\\t<options>

The locator is usually a ``file://`` URL, and the options field is a
plist-like report of semicolon terminated ``"key" = value;`` pairs. The
parser drops entries that should never be part of a preset (recent items,
running apps that are not kept in the Dock), then turns file URLs into
plain, home-abbreviated paths.
"""
import dataclasses
import enum
import logging
import pathlib
import urllib.parse
from typing import List, Optional, Union

from ..status import status

SPACER_LOCATOR: str = 'spacer-tile'
SPACER_LABEL: str = 'Spacer'

RECENT_TILE_MARKER: str = '"tile-type" = "recent-tile";'
RUNNING_APP_PREFIX: str = "file:///\\'/"
RUNNING_APP_SUFFIX: str = "\\'"

# label, locator, section, options
MAX_FIELDS: int = 4


class MalformedLinePolicy(enum.StrEnum):
    """What to do with a listing line that has fewer than two fields."""
    Skip = 'skip'
    Fail = 'fail'


@dataclasses.dataclass(frozen=True)
class ParsedItem:
    """A Dock entry read from the listing, after filtering and locator cleanup.

    Attributes:
        label: Display name of the entry.
        locator: Cleaned path (``~`` abbreviated or absolute) or the spacer sentinel.
        options: Raw options report, or None when the line carried no options field.
    """
    label: str
    locator: str
    options: Optional[str] = None

    @property
    def is_spacer(self) -> bool:
        return self.locator == SPACER_LOCATOR or self.label == SPACER_LABEL


def is_filtered(raw_locator: str, options: Optional[str]) -> bool:
    """Return True if a record must be left out of a preset.

    Recent-items stacks and the malformed, quoted URLs dockutil reports for
    running apps that are not kept in the Dock are dropped.
    """
    if options and RECENT_TILE_MARKER in options:
        return True
    if raw_locator.startswith(RUNNING_APP_PREFIX) and raw_locator.endswith(RUNNING_APP_SUFFIX):
        return True
    return False


def abbreviate_home(path: str, home: Union[str, pathlib.Path]) -> str:
    """Replace a leading home directory with ``~``.

    Only whole path components are matched, so ``/Users/alicex`` is not
    abbreviated for the home ``/Users/alice``.
    """
    home = str(home).rstrip('/')
    if not home:
        return path
    if path == home or path == f'{home}/':
        return '~'
    if path.startswith(f'{home}/'):
        return '~' + path[len(home):]
    return path


def clean_locator(raw_locator: str, home: Optional[Union[str, pathlib.Path]] = None) -> str:
    """Turn a raw listing locator into the form stored in a preset.

    ``file://`` URLs are percent-decoded into plain paths without a trailing
    slash, and paths under the home directory are abbreviated with ``~``. Any
    other locator is returned unchanged. If the URL cannot be decoded the raw
    value is kept.

    Args:
        raw_locator: The locator field as printed by dockutil.
        home: Home directory to abbreviate. Defaults to the current user's home.

    Returns:
        str: The cleaned locator.
    """
    if not raw_locator.startswith('file://'):
        return raw_locator

    try:
        url = urllib.parse.urlsplit(raw_locator)
        if url.scheme != 'file':
            raise ValueError(f'Not a file URL: {raw_locator}')
        path = urllib.parse.unquote(url.path, errors='strict')
    except (ValueError, UnicodeDecodeError) as ex:
        logging.warning(f'Could not parse file URL: {raw_locator}, using raw value ({ex})')
        return raw_locator

    if len(path) > 1:
        path = path.rstrip('/')

    if home is None:
        home = pathlib.Path.home()
    return abbreviate_home(path, home)


def parse_line(line: str, home: Optional[Union[str, pathlib.Path]] = None) -> Optional[ParsedItem]:
    """Parse a single, already stripped listing line.

    Returns:
        ParsedItem or None if the record is filtered out.

    Raises:
        ValueError: If the line has fewer than two fields.
    """
    fields = line.split('\t', MAX_FIELDS - 1)
    if len(fields) < 2:
        raise ValueError(f'Expected at least 2 tab separated fields, got {len(fields)}')

    label = fields[0]
    raw_locator = fields[1]
    options = fields[3] if len(fields) > 3 else None

    if is_filtered(raw_locator, options):
        logging.debug(f'Filtered Dock entry: {label!r} ({raw_locator})')
        return None

    if raw_locator == SPACER_LOCATOR or label == SPACER_LABEL:
        return ParsedItem(label, raw_locator, options)

    return ParsedItem(label, clean_locator(raw_locator, home=home), options)


def parse_list_output(
        raw: str,
        home: Optional[Union[str, pathlib.Path]] = None,
        policy: MalformedLinePolicy = MalformedLinePolicy.Skip
) -> List[ParsedItem]:
    """Parse the full output of ``dockutil --list``.

    Args:
        raw: The captured standard output.
        home: Home directory used to abbreviate paths. Defaults to the current user's home.
        policy: Skip lines with fewer than two fields, or fail on the first one.

    Returns:
        list[ParsedItem]: The surviving records in listing order.

    Raises:
        status.ParseFailedException: If the policy is Fail and a line is malformed.
    """
    policy = MalformedLinePolicy(policy)
    items: List[ParsedItem] = []

    for n, line in enumerate(raw.split('\n'), start=1):
        line = line.strip()
        if not line:
            continue

        try:
            item = parse_line(line, home=home)
        except ValueError as ex:
            if policy is MalformedLinePolicy.Fail:
                raise status.ParseFailedException(f'Line {n}: {ex}: {line!r}') from ex
            logging.warning(f'Skipping malformed dockutil line {n}: {line!r}')
            continue

        if item is not None:
            items.append(item)

    logging.debug(f'Parsed {len(items)} Dock item(s)')
    return items
