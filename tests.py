#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Automated tests"""

import io
import json
import unittest
from contextlib import redirect_stdout

import checkcaa
import checkcaa._cli
import checkcaa.iodef
import checkcaa.issue
import checkcaa.tag
import checkcaa.utils

valid_issue_values = [
    "",
    ";",
    "ca.example.com",
    "ca.example.net;",
    "ca.example.com; policy=ev",
    "ca.example.com; policy=ev; account=123",
    "ca.example.net; account=230123",
    "  ca.example.net  ;  ",
    "ca.example.net; policy=",
    "ca.example.net;policy=ev\taccount=1",
    "ca--1.example.net",
    "CA.Example.NET",
    "localhost",
]

invalid_issue_values = [
    "not a domain!!!",
    "ca..example.net",
    "-ca.example.net",
    "ca-.example.net",
    ".ca.example.net",
    "ca.example.net.",
    "ca.example.net policy=ev",
    "ca.example.net; =ev",
    "ca.example.net; pol-icy=ev",
    "ca.example.net; policy=év",
    "ca_1.example.net",
    "ca.example.net;;",
    "ca .example.net",
    "ca. example.net",
    "ca - 1.example.net",
]


class Test(unittest.TestCase):
    def testStrictTags(self):
        """Only issue, issuewild, and iodef are accepted in strict mode"""
        for tag in ["issue", "ISSUE", "Issue", "issuewild", "IssueWild", "iodef"]:
            self.assertEqual(checkcaa.is_caa_tag(tag), tag)

        for tag in ["unknown", "UNKNOWN", "contactemail", "tbs", "auth", ""]:
            self.assertIsNone(checkcaa.is_caa_tag(tag))

    def testStrictTagKeepsCase(self):
        """The original tag is returned, not a lowercased copy"""
        result = checkcaa.is_caa_tag("IODEF")
        self.assertEqual(result, "IODEF")
        self.assertIsInstance(result, checkcaa.TrustedValue)

    def testStrictNoneDefaultsToStrict(self):
        """A strict option of None is treated as strict"""
        self.assertIsNone(checkcaa.is_caa_tag("contactemail", strict=None))
        self.assertEqual(checkcaa.is_caa_tag("issue", strict=None), "issue")

    def testNonStrictTags(self):
        """Non-strict mode only checks the tag syntax"""
        for tag in ["contactemail", "issuemail", "Foo123", "issue", ""]:
            self.assertEqual(checkcaa.is_caa_tag(tag, strict=False), tag)

        for tag in ["bogus-tag", "issue ", "is_sue", "täg", "a.b", "tag\n"]:
            self.assertIsNone(checkcaa.is_caa_tag(tag, strict=False))

    def testEmptyNonStrictTagIsTrusted(self):
        """An empty tag passes the non-strict syntax check"""
        result = checkcaa.is_caa_tag("", strict=False)
        self.assertIsNotNone(result)
        self.assertIsInstance(result, checkcaa.TrustedValue)

    def testNonStringInput(self):
        """Non-string input is rejected without raising an exception"""
        for bad in [None, 1, b"issue", ["issue"]]:
            self.assertIsNone(checkcaa.is_caa_tag(bad))
            self.assertIsNone(checkcaa.is_caa_issue(bad))
            self.assertIsNone(checkcaa.is_caa_iodef(bad))
            self.assertIsNone(checkcaa.is_caa_value(bad, "ca.example.net"))

    def testValidIssueValues(self):
        """Valid issue values are returned unchanged"""
        for value in valid_issue_values:
            result = checkcaa.is_caa_issue(value)
            self.assertEqual(result, value, f"{value!r} should be valid")
            self.assertIsInstance(result, checkcaa.TrustedValue)

    def testInvalidIssueValues(self):
        """Invalid issue values are rejected"""
        for value in invalid_issue_values:
            self.assertIsNone(
                checkcaa.is_caa_issue(value), f"{value!r} should be invalid"
            )

    def testIssuewildIsAlias(self):
        """issuewild values are validated exactly like issue values"""
        for value in valid_issue_values + invalid_issue_values:
            self.assertEqual(
                checkcaa.is_caa_issuewild(value), checkcaa.is_caa_issue(value)
            )

    def testIssueGrammarDoesNotBacktrackCatastrophically(self):
        """Long near-miss values are rejected"""
        value = "ca.example.net; " + "a=a" * 5000 + " é"
        self.assertIsNone(checkcaa.is_caa_issue(value))
        value = "-".join(["a"] * 5000) + "!"
        self.assertIsNone(checkcaa.is_caa_issue(value))

    def testValidIodefValues(self):
        """HTTP and HTTPS URLs are accepted as-is"""
        for value in [
            "https://example.com/report",
            "http://ca.example.net/iodef",
            "https://iodef.example.com:8443/caa?domain=example.com",
            "HTTPS://example.com/report",
            "Https://example.com/",
        ]:
            result = checkcaa.is_caa_iodef(value)
            self.assertEqual(result, value)
            self.assertIsInstance(result, checkcaa.TrustedValue)

    def testMailtoIodefValue(self):
        """The mailto: prefix is removed from iodef email addresses"""
        result = checkcaa.is_caa_iodef("mailto:security@example.com")
        self.assertEqual(result, "security@example.com")
        self.assertIsInstance(result, checkcaa.TrustedValue)

    def testInvalidIodefValues(self):
        """Other schemes and malformed mailto URIs are rejected"""
        for value in [
            "mailto:not-an-email",
            "mailto:security@",
            "mailto:@example.com",
            "mailto:",
            "MAILTO:security@example.com",
            "security@example.com",
            "ftp://example.com",
            "ldap://example.com/report",
            "https://",
            "",
        ]:
            self.assertIsNone(
                checkcaa.is_caa_iodef(value), f"{value!r} should be invalid"
            )

    def testValueDispatch(self):
        """Values are checked with the validator for the lowercased tag"""
        self.assertEqual(
            checkcaa.is_caa_value("ISSUE", "ca.example.com"),
            checkcaa.is_caa_issue("ca.example.com"),
        )
        self.assertEqual(
            checkcaa.is_caa_value("IssueWild", "ca.example.com; policy=ev"),
            "ca.example.com; policy=ev",
        )
        self.assertEqual(
            checkcaa.is_caa_value("iodef", "mailto:security@example.com"),
            "security@example.com",
        )
        self.assertIsNone(checkcaa.is_caa_value("iodef", "ca.example.com"))
        self.assertIsNone(checkcaa.is_caa_value("issue", "not a domain!!!"))

    def testUnknownTagValues(self):
        """Values of tags without a validator are rejected"""
        self.assertIsNone(checkcaa.is_caa_value("bogus-tag", "anything"))
        self.assertIsNone(checkcaa.is_caa_value("contactemail", "a@example.com"))

    def testIdempotence(self):
        """Validating an accepted value again returns the same value"""
        for value in valid_issue_values:
            first = checkcaa.is_caa_issue(value)
            self.assertEqual(checkcaa.is_caa_issue(first), first)
        first = checkcaa.is_caa_tag("IssueWild")
        self.assertEqual(checkcaa.is_caa_tag(first), first)
        first = checkcaa.is_caa_iodef("https://example.com/report")
        self.assertEqual(checkcaa.is_caa_iodef(first), first)

    def testValidatorObject(self):
        """The object interface gives the same results as the functions"""
        validator = checkcaa.CAAValidator(foo="bar", strict=False)
        self.assertEqual(validator.options, {"foo": "bar", "strict": False})
        self.assertEqual(validator.is_caa_tag("Issue"), "Issue")
        self.assertIsNone(validator.is_caa_tag("contactemail"))
        self.assertEqual(
            validator.is_caa_tag("contactemail", strict=False), "contactemail"
        )
        self.assertEqual(
            validator.is_caa_value("issue", "ca.example.net"), "ca.example.net"
        )
        self.assertEqual(validator.is_caa_issue(";"), ";")
        self.assertIsNone(validator.is_caa_issuewild("not a domain!!!"))
        self.assertEqual(
            validator.is_caa_iodef("mailto:security@example.com"),
            "security@example.com",
        )
        results = validator.check_caa_property("iodef", "https://example.com/report")
        self.assertTrue(results["valid"])
        self.assertIsInstance(checkcaa.CAAValidator(), checkcaa.CAAValidator)

    def testParseIssueValue(self):
        """Issue values are split into an issuer domain and parameters"""
        results = checkcaa.parse_caa_issue_value("ca.example.net; account=230123")
        self.assertEqual(results["domain"], "ca.example.net")
        self.assertEqual(results["parameters"], {"account": "230123"})
        self.assertEqual(results["warnings"], [])

        results = checkcaa.parse_caa_issue_value(
            "ca.example.com; policy=ev; account=123"
        )
        self.assertEqual(results["parameters"], {"policy": "ev", "account": "123"})

        results = checkcaa.parse_caa_issue_value(" ; ")
        self.assertIsNone(results["domain"])
        self.assertEqual(results["parameters"], {})

    def testParseIssueValueWarnings(self):
        """Suspicious but valid issue values produce warnings"""
        results = checkcaa.parse_caa_issue_value("ca.example.net; a=1 a=2")
        self.assertEqual(results["parameters"], {"a": "2"})
        self.assertEqual(len(results["warnings"]), 1)
        self.assertIn("Duplicate a", results["warnings"][0])

        results = checkcaa.parse_caa_issue_value("ca.example.net; a=b;c")
        self.assertEqual(results["parameters"], {"a": "b"})
        self.assertTrue(any("c is not a valid" in w for w in results["warnings"]))

        results = checkcaa.parse_caa_issue_value(f"{'a' * 64}.example.net")
        self.assertTrue(any("not a valid DNS name" in w for w in results["warnings"]))

    def testIssueValueSyntaxError(self):
        """Invalid issue values raise CAAIssueValueSyntaxError"""
        self.assertRaises(
            checkcaa.CAAIssueValueSyntaxError,
            checkcaa.parse_caa_issue_value,
            "not a domain!!!",
        )
        try:
            checkcaa.parse_caa_issue_value("ca.example.net policy=ev")
        except checkcaa.CAASyntaxError as error:
            self.assertIn("position 15", str(error))
            self.assertIn("ca.example.net ➞policy=ev", str(error))
        else:
            self.fail("CAAIssueValueSyntaxError was not raised")

    def testIssueValueSyntaxErrorPosition(self):
        """Syntax errors point at the first character that breaks the grammar"""
        for value, position, marked_value in [
            ("ca..example.net", 3, "ca.➞.example.net"),
            ("ca-.example.net", 3, "ca-➞.example.net"),
            ("ca.example.net.", 15, "ca.example.net.➞"),
            ("ca .example.net", 2, "ca➞ .example.net"),
            ("ca. example.net", 3, "ca.➞ example.net"),
        ]:
            try:
                checkcaa.parse_caa_issue_value(value)
            except checkcaa.CAAIssueValueSyntaxError as error:
                self.assertIn(f"position {position} ", str(error))
                self.assertIn(marked_value, str(error))
                self.assertEqual(error.data, {"position": position})
            else:
                self.fail(f"{value!r} did not raise CAAIssueValueSyntaxError")

    def testParseIodefValue(self):
        """iodef values are parsed into a scheme and an address"""
        results = checkcaa.parse_caa_iodef_value("mailto:security@example.com")
        self.assertEqual(results["scheme"], "mailto")
        self.assertEqual(results["address"], "security@example.com")
        self.assertEqual(results["warnings"], [])

        results = checkcaa.parse_caa_iodef_value("https://example.com/report")
        self.assertEqual(results["scheme"], "https")
        self.assertEqual(results["warnings"], [])

        results = checkcaa.parse_caa_iodef_value("http://example.com/report")
        self.assertEqual(results["scheme"], "http")
        self.assertEqual(len(results["warnings"]), 1)

        self.assertRaises(
            checkcaa.InvalidCAAIodefURI,
            checkcaa.parse_caa_iodef_value,
            "ftp://example.com",
        )

    def testTagDescriptions(self):
        """Descriptions are available for the supported tags"""
        for tag in ["issue", "ISSUEWILD", "iodef"]:
            self.assertTrue(len(checkcaa.get_caa_tag_description(tag)) > 0)
        self.assertRaises(
            checkcaa.InvalidCAATag, checkcaa.get_caa_tag_description, "tbs"
        )

    def testCheckCAAProperty(self):
        """check_caa_property returns parsed results or an error"""
        results = checkcaa.check_caa_property(
            "Issue", "ca.example.net; account=230123", include_tag_descriptions=True
        )
        self.assertTrue(results["valid"])
        self.assertEqual(results["parsed"]["domain"], "ca.example.net")
        self.assertEqual(
            results["description"], checkcaa.get_caa_tag_description("issue")
        )

        results = checkcaa.check_caa_property("bogus", "x")
        self.assertFalse(results["valid"])
        self.assertIn("not a valid CAA property tag", results["error"])

        results = checkcaa.check_caa_property("contactemail", "x", strict=False)
        self.assertFalse(results["valid"])
        self.assertIn("cannot be validated", results["error"])

        results = checkcaa.check_caa_property("iodef", "ftp://example.com")
        self.assertFalse(results["valid"])
        self.assertNotIn("position", results)

        results = checkcaa.check_caa_property("issue", "ca..example.net")
        self.assertFalse(results["valid"])
        self.assertEqual(results["position"], 3)

        results = checkcaa.check_caa_property("issue", None)
        self.assertFalse(results["valid"])

    def testResultsToJSON(self):
        """Results can be converted to JSON"""
        results = checkcaa.check_caa_property("iodef", "mailto:security@example.com")
        parsed = json.loads(checkcaa.results_to_json(results))
        self.assertEqual(parsed["parsed"]["address"], "security@example.com")

    def testCLI(self):
        """The command line interface prints JSON results"""
        output = io.StringIO()
        with redirect_stdout(output):
            status = checkcaa._cli._main(["issue", "ca.example.net; policy=ev"])
        self.assertEqual(status, 0)
        self.assertTrue(json.loads(output.getvalue())["valid"])

        output = io.StringIO()
        with redirect_stdout(output):
            status = checkcaa._cli._main(["bogus", "x"])
        self.assertEqual(status, 1)
        self.assertFalse(json.loads(output.getvalue())["valid"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
