"""
Lenient parsing of the date formats found in server payloads and HTTP headers.


Copyright (c) 2023 Proton AG

This file is part of Proton VPN.

Proton VPN is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

Proton VPN is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with ProtonVPN.  If not, see <https://www.gnu.org/licenses/>.
"""
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Annotated, Any, List, Mapping, Optional

from pydantic import BeforeValidator

logger = logging.getLogger(__name__)

API_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_api_date(value: str) -> Optional[datetime]:
    """
    Parses a UTC date in the ``yyyy-MM-dd'T'HH:mm:ss'Z'`` format.
    :returns: a timezone-aware datetime, or None if the value could not be parsed.
    """
    try:
        return datetime.strptime(value, API_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def parse_http_date(value: str) -> Optional[datetime]:
    """
    Parses an HTTP date (``EEE, dd MMM yyyy HH:mm:ss z``).
    :returns: a timezone-aware datetime, or None if the value could not be parsed.
    """
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_expiry_from_headers(headers: Mapping[str, List[str]]) -> Optional[datetime]:
    """Returns the date in the first ``Expires`` header, if there is a valid one."""
    values = headers.get("Expires")
    if not values:
        return None

    expiry = parse_http_date(values[0])
    if expiry is None:
        logger.error("Unable to parse expires header: %r", values[0])
    return expiry


def _to_lenient_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        value = value.strip()
        if value.isdigit():
            return _to_lenient_datetime(int(value))
        return parse_api_date(value) or parse_http_date(value)

    return None


# Dates that decode to None instead of failing the whole payload.
LenientDatetime = Annotated[Optional[datetime], BeforeValidator(_to_lenient_datetime)]
