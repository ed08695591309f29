# -*- coding: utf-8 -*-
"""CAA issue and issuewild property values"""

from __future__ import annotations

import logging
import re
from typing import Optional, TypedDict

import dns.exception
import dns.name
import pyleri

from checkcaa._constants import SYNTAX_ERROR_MARKER
from checkcaa.utils import LET_DIG_REGEX, CAASyntaxError, untaint

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

CAA_LET_DIG_RUN_REGEX_STRING = rf"{LET_DIG_REGEX}+"
CAA_PARAMETER_REGEX_STRING = rf"{LET_DIG_REGEX}+=[\x21-\x7e]*"

# A single parameter with a value that excludes ";", as written in RFC 6844
CAA_PARAMETER_TAG_VALUE_REGEX = re.compile(
    rf"({LET_DIG_REGEX}+)=([\x21-\x3a\x3c-\x7e]*)"
)


class CAAIssueValueSyntaxError(CAASyntaxError):
    """Raised when a CAA issue or issuewild value syntax error is found"""


class _CAAIssueValueGrammar(pyleri.Grammar):
    """Defines Pyleri grammar for CAA issue and issuewild values
    (RFC 6844 section 5.2)"""

    let_dig = pyleri.Regex(CAA_LET_DIG_RUN_REGEX_STRING)
    hyphens = pyleri.Regex(r"-+")
    label = pyleri.List(let_dig, delimiter=hyphens, mi=1)
    issuer_domain_name = pyleri.List(label, delimiter=pyleri.Token("."), mi=1)
    parameter = pyleri.Regex(CAA_PARAMETER_REGEX_STRING)
    parameters = pyleri.Sequence(pyleri.Token(";"), pyleri.Repeat(parameter))
    START = pyleri.Sequence(
        pyleri.Optional(issuer_domain_name),
        pyleri.Optional(parameters),
    )


class ParsedCAAIssueValue(TypedDict):
    domain: Optional[str]
    parameters: dict[str, str]
    warnings: list[str]


def _split_issue_value(value: str) -> tuple[int, str, Optional[str]]:
    start = len(value) - len(value.lstrip())
    domain, separator, parameters = value[start:].partition(";")
    if not separator:
        parameters = None
    return start, domain.rstrip(), parameters


def _find_syntax_error(value: str) -> Optional[int]:
    """
    Returns the position of the first syntax error in an issue value, or
    ``None`` if the value is valid
    """
    parsed_value = _CAAIssueValueGrammar().parse(value)
    if not parsed_value.is_valid:
        return parsed_value.pos

    # Whitespace between tokens is skipped by the grammar, but the issuer
    # domain name must not contain any
    start, domain, _ = _split_issue_value(value)
    for i, char in enumerate(domain):
        if char.isspace():
            return start + i

    return None


def is_caa_issue(value: str) -> Optional[str]:
    """
    Returns the trusted value if it looks like a CAA ``issue`` (or
    ``issuewild``) property value

    Args:
        value (str): A CAA ``issue`` property value

    Returns:
        str: The original value as a :class:`checkcaa.utils.TrustedValue`,
        or ``None`` if the value is not valid

    .. note::
        The empty string is a valid value, so test the result with
        ``is not None``.
    """
    if not isinstance(value, str):
        return None
    if _find_syntax_error(value) is not None:
        logging.debug(f"Rejected CAA issue value {value!r}")
        return None

    return untaint(value)


def is_caa_issuewild(value: str) -> Optional[str]:
    """
    Returns the trusted value if it looks like a CAA ``issuewild`` property
    value. Since ``issuewild`` values have the same syntax as ``issue``
    values, this is identical to :func:`is_caa_issue`.
    """
    return is_caa_issue(value)


def _check_issuer_domain_name(domain: str) -> Optional[str]:
    try:
        dns.name.from_text(domain)
    except dns.exception.DNSException as error:
        return f"The issuer domain name {domain} is not a valid DNS name: {error}"
    return None


def parse_caa_issue_value(
    value: str,
    *,
    syntax_error_marker: str = SYNTAX_ERROR_MARKER,
) -> ParsedCAAIssueValue:
    """
    Parses a CAA ``issue`` or ``issuewild`` property value

    Args:
        value (str): A CAA ``issue`` or ``issuewild`` property value
        syntax_error_marker (str): The maker for pointing out syntax errors

    Returns:
        dict: a ``dict`` with the following keys:
         - ``domain`` - The issuer domain name, or ``None`` if no CA is
           authorized
         - ``parameters`` - A ``dict`` of issuer parameters
         - ``warnings`` - A ``list`` of warnings

    Raises:
        :exc:`checkcaa.issue.CAAIssueValueSyntaxError`
    """
    if not isinstance(value, str):
        raise CAAIssueValueSyntaxError("A CAA issue value must be a string.")
    logging.debug(f"Parsing CAA issue value {value!r}")
    pos = _find_syntax_error(value)
    if pos is not None:
        marked_value = value[:pos] + syntax_error_marker + value[pos:]
        raise CAAIssueValueSyntaxError(
            f"Error: Unexpected character at position {pos} "
            f"(marked with {syntax_error_marker}) in: {marked_value}",
            data={"position": pos},
        )

    warnings = []
    _, domain, tail = _split_issue_value(value)
    if domain == "":
        domain = None
    else:
        warning = _check_issuer_domain_name(domain)
        if warning is not None:
            warnings.append(warning)

    parameters = {}
    duplicate_tags = []
    if tail is not None:
        for chunk in tail.split():
            for piece in chunk.split(";"):
                if piece == "":
                    continue
                parameter = CAA_PARAMETER_TAG_VALUE_REGEX.fullmatch(piece)
                if parameter is None:
                    warnings.append(
                        f"{piece} is not a valid issuer parameter "
                        "(parameters must be in the form tag=value)."
                    )
                    continue
                tag, tag_value = parameter.groups()
                if tag in parameters and tag not in duplicate_tags:
                    duplicate_tags.append(tag)
                parameters[tag] = tag_value
    if len(duplicate_tags):
        duplicate_tags_str = ",".join(duplicate_tags)
        warnings.append(
            f"Duplicate {duplicate_tags_str} parameters were found; "
            "only the last value of each is used."
        )

    results: ParsedCAAIssueValue = {
        "domain": domain,
        "parameters": parameters,
        "warnings": warnings,
    }

    return results
