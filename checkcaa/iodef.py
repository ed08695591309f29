# -*- coding: utf-8 -*-
"""CAA iodef property values"""

from __future__ import annotations

import logging
from typing import Literal, Optional, TypedDict

from checkcaa.utils import (
    CAASyntaxError,
    is_email,
    is_web_uri,
    strip_mailto,
    untaint,
)

"""Copyright 2019-2023 Sean Whalen

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   https://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License."""


class InvalidCAAIodefURI(CAASyntaxError):
    """Raised when a CAA iodef value is not a valid reporting URI"""


class ParsedCAAIodefValue(TypedDict):
    scheme: Literal["http", "https", "mailto"]
    address: str
    warnings: list[str]


def is_caa_iodef(value: str) -> Optional[str]:
    """
    Returns the trusted value if it looks like a CAA ``iodef`` property value

    HTTP and HTTPS URLs are returned as-is. For ``mailto:`` URIs, the email
    address is returned without the ``mailto:`` prefix.

    Args:
        value (str): A CAA ``iodef`` property value

    Returns:
        str: A :class:`checkcaa.utils.TrustedValue`, or ``None`` if the value
        is not valid
    """
    if not isinstance(value, str):
        return None

    if is_web_uri(value):
        return untaint(value)

    address = strip_mailto(value)
    if address is not None and is_email(address):
        return untaint(address)

    logging.debug(f"Rejected CAA iodef value {value!r}")
    return None


def parse_caa_iodef_value(value: str) -> ParsedCAAIodefValue:
    """
    Parses a CAA ``iodef`` property value

    Args:
        value (str): A CAA ``iodef`` property value

    Returns:
        dict: a ``dict`` with the following keys:
         - ``scheme`` - ``http``, ``https``, or ``mailto``
         - ``address`` - The URL, or the email address of a ``mailto`` URI
         - ``warnings`` - A ``list`` of warnings

    Raises:
        :exc:`checkcaa.iodef.InvalidCAAIodefURI`
    """
    logging.debug(f"Parsing CAA iodef value {value!r}")
    address = is_caa_iodef(value)
    if address is None:
        raise InvalidCAAIodefURI(
            f"{value} is not a valid CAA iodef URI - the value must be an "
            "http, https, or mailto URI"
        )

    warnings = []
    if address == value:
        scheme = value.split(":", 1)[0].lower()
        if scheme == "http":
            warnings.append(
                f"{value} does not use HTTPS; incident reports may be "
                "intercepted or altered in transit."
            )
    else:
        scheme = "mailto"

    results: ParsedCAAIodefValue = {
        "scheme": scheme,
        "address": str(address),
        "warnings": warnings,
    }

    return results
