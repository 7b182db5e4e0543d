"""Parsing and formatting of the timestamp strings mediastamp deals with."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional

from mediastamp.config.models import TimestampSettings

LOGGER = logging.getLogger(__name__)

SENTINEL_DATE = date(1970, 1, 1)


class TimestampParser:
    """Turn raw metadata or filename strings into naive datetimes.

    Formats are tried in the order given; the first that parses wins. Zoned
    values keep their local wall time and lose the offset. Any value landing on
    1970-01-01 is the metadata tool's "no data" placeholder and yields ``None``.
    """

    def __init__(self, settings: TimestampSettings) -> None:
        self.settings = settings

    def parse(self, raw: str | None, formats: Iterable[str]) -> Optional[datetime]:
        """Return the first successful parse of ``raw`` or ``None``.

        Args:
            raw: String to parse.
            formats: strptime formats in priority order.

        Returns:
            Optional[datetime]: Naive datetime, or None when nothing parsed or the
            value is the epoch sentinel.
        """
        if raw is None:
            return None
        text = raw.strip()
        if not text:
            return None

        for fmt in formats:
            try:
                value = datetime.strptime(text, fmt)
            except ValueError:
                continue
            if value.tzinfo is not None:
                value = value.replace(tzinfo=None)
            elif value.strftime(fmt) != text:
                # strptime accepts single-digit fields; the formats here are fixed width.
                continue
            if value.date() == SENTINEL_DATE:
                LOGGER.debug("Ignoring sentinel timestamp %r", raw)
                return None
            return value
        return None

    def parse_metadata(self, raw: str | None) -> Optional[datetime]:
        """Parse a metadata tag value."""
        return self.parse(raw, self.settings.metadata_formats)

    def parse_filename(self, raw: str | None) -> Optional[datetime]:
        """Parse a ``yyyyMMdd_HHmmss`` filename prefix."""
        return self.parse(raw, (self.settings.filename_format,))

    def format_filename(self, value: datetime) -> str:
        return value.strftime(self.settings.filename_format)

    def format_metadata(self, value: datetime) -> str:
        return value.strftime(self.settings.write_format)

    def format_attribute(self, value: datetime) -> str:
        return value.strftime(self.settings.attribute_format)


__all__ = ["SENTINEL_DATE", "TimestampParser"]
