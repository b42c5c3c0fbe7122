"""Report file name derivation from a name pattern."""

import re
from datetime import datetime
from typing import Callable, Optional


DEFAULT_NAME_PATTERN = '{date}-Scan-Report-{site}'

PLACEHOLDER_PATTERN = re.compile(r'\{(\w+)(?::([^{}]*))?\}')
SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')
UNSAFE_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|]')


def sanitize_site(site: str) -> str:
    """Make a site name usable inside a file name.

    ``https://example.com:8443`` becomes ``example.com-8443``.
    """
    name = SCHEME_PATTERN.sub('', site)
    name = name.rstrip('/')
    return UNSAFE_FILENAME_CHARS.sub('-', name)


class ReportNamer:
    """Expands report name patterns.

    Recognized placeholders:

    - ``{site}``: the focused site, empty when no site is focused
    - ``{date}``: current date as ``YYYY-MM-DD``
    - ``{date:<strftime format>}``: current time in a custom format
    - ``{time}``: current time as ``HHMMSS``

    Unknown placeholders expand to an empty string and all other text is
    kept as written.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def name(self, pattern: str, selected_site: Optional[str]) -> str:
        """Return the base file name for ``pattern``."""
        now = self.clock()

        def substitute(match: re.Match) -> str:
            key, argument = match.group(1), match.group(2)
            if key == 'site':
                return sanitize_site(selected_site) if selected_site else ''
            if key == 'date':
                return now.strftime(argument or '%Y-%m-%d')
            if key == 'time':
                return now.strftime(argument or '%H%M%S')
            return ''

        return PLACEHOLDER_PATTERN.sub(substitute, pattern)

    def file_name(self, pattern: str, selected_site: Optional[str], extension: str) -> str:
        """Base name plus the template's extension."""
        return self.name(pattern, selected_site) + "." + extension
