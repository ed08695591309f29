# -*- coding: utf-8 -*-
"""CAA property tags"""

from __future__ import annotations

import logging
import re
from typing import Optional, TypedDict

from checkcaa._constants import CAA_PROPERTY_TAGS
from checkcaa.utils import CAAError, untaint

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

INVALID_TAG_CHARACTER_REGEX = re.compile(r"[^a-zA-Z0-9]")


class InvalidCAATag(CAAError):
    """Raised when an invalid CAA property tag is found"""


class CAATagMapItem(TypedDict):
    name: str
    description: str


caa_tags: dict[str, CAATagMapItem] = {
    "issue": {
        "name": "Issue",
        "description": "Authorizes the holder of the domain name given in "
        "the value, or a party acting under its explicit "
        "authority, to issue certificates for the domain in "
        "which the property is published. An empty domain "
        "name means that no CA is authorized.",
    },
    "issuewild": {
        "name": "Issue Wildcard",
        "description": "Has the same syntax and semantics as issue, but "
        "only grants authorization to issue certificates that "
        "specify a wildcard domain name. When present, issuewild "
        "properties take precedence over issue properties for "
        "wildcard certificate requests.",
    },
    "iodef": {
        "name": "Incident Object Description Exchange Format",
        "description": "A URL that the CA may use to report certificate "
        "issue requests or certificate issuance that violate "
        "the security policy of the domain. The mailto, http "
        "and https schemes are supported.",
    },
}


def is_caa_tag(value: str, *, strict: Optional[bool] = True) -> Optional[str]:
    """
    Returns the trusted tag if the value looks like a valid CAA property tag
    as defined in RFC 6844

    Args:
        value (str): A CAA property tag
        strict (bool): Only accept the ``issue``, ``issuewild``, and
                       ``iodef`` tags (compared case-insensitively). Reserved
                       and other registered tags are rejected. When
                       ``False``, only the tag syntax is checked.

    Returns:
        str: The original value as a :class:`checkcaa.utils.TrustedValue`,
        or ``None`` if the tag is not valid

    .. note::
        In non-strict mode an empty tag passes the syntax check, so test the
        result with ``is not None``.
    """
    if not isinstance(value, str):
        return None
    if strict is None:
        strict = True

    if strict:
        if value.lower() in CAA_PROPERTY_TAGS:
            return untaint(value)
    elif INVALID_TAG_CHARACTER_REGEX.search(value) is None:
        return untaint(value)

    logging.debug(f"Rejected CAA property tag {value!r} (strict={strict})")
    return None


def get_caa_tag_description(tag: str) -> str:
    """
    Get the description of a supported CAA property tag

    Args:
        tag (str): A CAA property tag

    Returns:
        str: The tag description

    Raises:
        :exc:`checkcaa.tag.InvalidCAATag`
    """
    tag = tag.lower()
    if tag not in caa_tags:
        raise InvalidCAATag(f"{tag} is not a supported CAA property tag.")
    return caa_tags[tag]["description"]
