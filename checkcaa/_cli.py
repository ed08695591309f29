#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Validates DNS Certification Authority Authorization (CAA) record fields"""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser

from checkcaa import (
    __version__,
    check_caa_property,
    results_to_json,
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


def _main(argv=None):
    """Called when the module in executed"""
    arg_parser = ArgumentParser(description=__doc__)
    arg_parser.add_argument("tag", help="a CAA property tag, such as issue")
    arg_parser.add_argument("value", help="the CAA property value to check")
    arg_parser.add_argument(
        "--non-strict",
        action="store_true",
        help="only check the syntax of the tag instead of requiring "
        "issue, issuewild, or iodef",
    )
    arg_parser.add_argument(
        "-d",
        "--descriptions",
        action="store_true",
        help="include a description of the tag in the JSON output",
    )
    arg_parser.add_argument("-v", "--version", action="version", version=__version__)
    arg_parser.add_argument(
        "--debug", action="store_true", help="enable debugging output"
    )

    args = arg_parser.parse_args(argv)

    logging_format = "%(asctime)s - %(levelname)s: %(message)s"
    logging.basicConfig(level=logging.WARNING, format=logging_format)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Debug output enabled")

    results = check_caa_property(
        args.tag,
        args.value,
        strict=not args.non_strict,
        include_tag_descriptions=args.descriptions,
    )
    print(results_to_json(results))

    return 0 if results["valid"] else 1


if __name__ == "__main__":
    sys.exit(_main())
