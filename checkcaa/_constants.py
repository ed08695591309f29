# -*- coding: utf-8 -*-
"""Constant values"""

from __future__ import annotations

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

__version__ = "1.0.0"

SYNTAX_ERROR_MARKER = "➞"

# Property tags with a value validator (RFC 6844 section 5)
CAA_PROPERTY_TAGS = ("issue", "issuewild", "iodef")
CAA_ISSUE_PROPERTY_TAGS = ("issue", "issuewild")

IODEF_URL_SCHEMES = ("http", "https")
