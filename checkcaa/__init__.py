# -*- coding: utf-8 -*-

"""Validates DNS Certification Authority Authorization (CAA) record fields"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal, Optional, TypedDict, Union

import checkcaa._constants
from checkcaa._constants import CAA_ISSUE_PROPERTY_TAGS
from checkcaa.iodef import (
    InvalidCAAIodefURI,
    ParsedCAAIodefValue,
    is_caa_iodef,
    parse_caa_iodef_value,
)
from checkcaa.issue import (
    CAAIssueValueSyntaxError,
    ParsedCAAIssueValue,
    is_caa_issue,
    is_caa_issuewild,
    parse_caa_issue_value,
)
from checkcaa.tag import InvalidCAATag, get_caa_tag_description, is_caa_tag
from checkcaa.utils import CAAError, CAASyntaxError, TrustedValue

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


__version__ = checkcaa._constants.__version__

__all__ = [
    "CAAError",
    "CAASyntaxError",
    "CAAIssueValueSyntaxError",
    "CAAValidator",
    "InvalidCAAIodefURI",
    "InvalidCAATag",
    "TrustedValue",
    "UnsupportedCAATag",
    "check_caa_property",
    "get_caa_tag_description",
    "is_caa_iodef",
    "is_caa_issue",
    "is_caa_issuewild",
    "is_caa_tag",
    "is_caa_value",
    "parse_caa_iodef_value",
    "parse_caa_issue_value",
    "results_to_json",
]


class UnsupportedCAATag(InvalidCAATag):
    """Raised when a syntactically valid CAA property tag has no value
    validator"""


class CAAPropertySuccess(TypedDict):
    tag: str
    value: str
    valid: Literal[True]
    parsed: Union[ParsedCAAIssueValue, ParsedCAAIodefValue]
    warnings: list[str]


class _CAAPropertySuccessOptional(TypedDict, total=False):
    description: str


class CAAPropertySuccessWithDescription(
    CAAPropertySuccess, _CAAPropertySuccessOptional
):
    pass


class _CAAPropertyFailureOptional(TypedDict, total=False):
    position: int


class CAAPropertyFailure(_CAAPropertyFailureOptional):
    tag: str
    value: str
    valid: Literal[False]
    error: str


CAAPropertyResults = Union[
    CAAPropertySuccess, CAAPropertySuccessWithDescription, CAAPropertyFailure
]


def is_caa_value(tag: str, value: str) -> Optional[str]:
    """
    Returns the trusted value if it looks like a valid value for the given
    CAA property tag

    The tag itself is not validated; use :func:`checkcaa.tag.is_caa_tag` for
    that.

    Args:
        tag (str): A CAA property tag (case-insensitive)
        value (str): A CAA property value

    Returns:
        str: A :class:`checkcaa.utils.TrustedValue`, or ``None`` if the tag
        has no value validator or the value is not valid
    """
    if not isinstance(tag, str):
        return None
    tag = tag.lower()

    if tag in CAA_ISSUE_PROPERTY_TAGS:
        return is_caa_issue(value)
    elif tag == "iodef":
        return is_caa_iodef(value)

    logging.debug(f"No value validator for CAA property tag {tag!r}")
    return None


def check_caa_property(
    tag: str,
    value: str,
    *,
    strict: Optional[bool] = True,
    include_tag_descriptions: bool = False,
) -> CAAPropertyResults:
    """
    Returns a dictionary with a parsed CAA property value or an error

    Args:
        tag (str): A CAA property tag
        value (str): A CAA property value
        strict (bool): Only accept the ``issue``, ``issuewild``, and
                       ``iodef`` tags
        include_tag_descriptions (bool): Include a description of the tag
                                         in the results

    Returns:
        dict: a ``dict`` with the following keys:

                       - ``tag`` - The tag
                       - ``value`` - The value
                       - ``valid`` - True
                       - ``parsed`` - The output of
                         :func:`checkcaa.issue.parse_caa_issue_value` or
                         :func:`checkcaa.iodef.parse_caa_iodef_value`
                       - ``warnings`` - A ``list`` of warnings

                    If an error occurs, the dictionary will have the
                    following keys:

                      - ``tag`` - The tag
                      - ``value`` - The value
                      - ``valid`` - False
                      - ``error`` - The error message
                      - ``position`` - The position of a syntax error in
                        the value, when known
    """
    logging.debug(f"Checking CAA property {tag!r} {value!r}")
    try:
        if is_caa_tag(tag, strict=strict) is None:
            raise InvalidCAATag(f"{tag} is not a valid CAA property tag.")
        normalized_tag = tag.lower()
        if normalized_tag in CAA_ISSUE_PROPERTY_TAGS:
            parsed = parse_caa_issue_value(value)
        elif normalized_tag == "iodef":
            parsed = parse_caa_iodef_value(value)
        else:
            raise UnsupportedCAATag(
                f"Values of the {tag} CAA property cannot be validated."
            )
    except CAAError as error:
        failure: CAAPropertyFailure = {
            "tag": tag,
            "value": value,
            "valid": False,
            "error": str(error),
        }
        if error.data:
            for key in error.data:
                failure[key] = error.data[key]
        return failure

    results: CAAPropertyResults = {
        "tag": tag,
        "value": value,
        "valid": True,
        "parsed": parsed,
        "warnings": parsed["warnings"],
    }
    if include_tag_descriptions:
        results["description"] = get_caa_tag_description(normalized_tag)

    return results


class CAAValidator:
    """
    Object interface to the CAA validation functions

    The validator holds no state; any keyword arguments given to the
    constructor are kept in ``options`` and are otherwise ignored.
    """

    def __init__(self, **options: Any):
        self.options = options

    def is_caa_tag(self, value: str, *, strict: Optional[bool] = True):
        return is_caa_tag(value, strict=strict)

    def is_caa_value(self, tag: str, value: str):
        return is_caa_value(tag, value)

    def is_caa_issue(self, value: str):
        return is_caa_issue(value)

    def is_caa_issuewild(self, value: str):
        return is_caa_issuewild(value)

    def is_caa_iodef(self, value: str):
        return is_caa_iodef(value)

    def check_caa_property(self, tag: str, value: str, **kwargs):
        return check_caa_property(tag, value, **kwargs)


def results_to_json(
    results: Union[dict[str, object], list[dict[str, object]]],
) -> str:
    """
    Converts a dictionary of results or list of results to a JSON string

    Args:
        results (dict): A dictionary of results

    Returns:
        str: Results in JSON format
    """
    return json.dumps(results, ensure_ascii=False, indent=2)
