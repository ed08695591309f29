# -*- coding: utf-8 -*-
"""Shared validation helpers"""

from __future__ import annotations

import logging
import re
from typing import Optional

import validators

from checkcaa._constants import IODEF_URL_SCHEMES

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

LET_DIG_REGEX = r"[0-9A-Za-z]"
WEB_URI_SCHEME_REGEX = re.compile(
    rf"^({'|'.join(IODEF_URL_SCHEMES)})://", re.IGNORECASE
)
MAILTO_REGEX_STRING = r"^mailto:\S+@\S+"
MAILTO_REGEX = re.compile(MAILTO_REGEX_STRING)
MAILTO_PREFIX_REGEX = re.compile(r"^mailto:")


class CAAError(Exception):
    """Raised when a CAA property tag or value is rejected"""

    def __init__(self, msg: str, data: Optional[dict] = None):
        """
        Args:
            msg (str): The error message
            data (dict): A dictionary of data to include in the results
        """
        self.data = data
        Exception.__init__(self, msg)


class CAASyntaxError(CAAError):
    """Raised when a CAA property value does not match its syntax"""


class TrustedValue(str):
    """
    A string that has passed validation

    The content is always identical to the string that was validated; the
    type only tells the caller that the value may skip further sanitization.
    """

    __slots__ = ()


def untaint(value: str) -> TrustedValue:
    """
    Marks a validated value as trusted

    Args:
        value (str): A value that has passed validation

    Returns:
        TrustedValue: A new string with the same content
    """
    return TrustedValue(value)


def is_web_uri(value: str) -> bool:
    """
    Checks if a value is a well-formed absolute HTTP or HTTPS URI

    Args:
        value (str): A URI

    Returns:
        bool: ``True`` if the URI uses the ``http`` or ``https`` scheme and is
        otherwise valid
    """
    if not isinstance(value, str):
        return False
    if WEB_URI_SCHEME_REGEX.match(value) is None:
        return False
    try:
        return bool(validators.url(value))
    except validators.ValidationError as error:
        logging.debug(f"Rejected URI {value!r}: {error}")
        return False


def is_email(value: str) -> bool:
    """
    Checks if a value is a syntactically valid email address

    Args:
        value (str): An email address

    Returns:
        bool: ``True`` if the address is valid
    """
    if not isinstance(value, str):
        return False
    try:
        return bool(validators.email(value))
    except validators.ValidationError as error:
        logging.debug(f"Rejected email address {value!r}: {error}")
        return False


def strip_mailto(value: str) -> Optional[str]:
    """
    Returns the address part of a ``mailto:`` URI

    The lowercased value must look like ``mailto:<local>@<domain>``, but only
    a lowercase ``mailto:`` prefix is removed from the original value.

    Args:
        value (str): A ``mailto:`` URI

    Returns:
        str: The value without the ``mailto:`` prefix, or ``None`` if the
        value does not have the shape of a ``mailto:`` URI
    """
    if MAILTO_REGEX.match(value.lower()) is None:
        return None
    return MAILTO_PREFIX_REGEX.sub("", value, count=1)
