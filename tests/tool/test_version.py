"""
Unit tests for wakatimekit.tool.version module.
"""

import responses

from wakatimekit.tool.version import (
    UNKNOWN_VERSION,
    VERSION_URL,
    latest_cli_version,
    parse_version_descriptor,
)

ABOUT_PY = """# -*- coding: utf-8 -*-
__title__ = 'wakatime'
__description__ = 'Common interface to the WakaTime api.'
__url__ = 'https://github.com/wakatime/wakatime'
__version_info__ = ('4', '1', '3')
__version__ = '.'.join(__version_info__)
"""


class TestParseVersionDescriptor:
    """Tests for parse_version_descriptor function."""

    def test_bare_line(self):
        assert parse_version_descriptor("__version_info__ = ('4', '1', '3')") == "4.1.3"

    def test_full_about_file(self):
        assert parse_version_descriptor(ABOUT_PY) == "4.1.3"

    def test_multi_digit_components(self):
        text = "__version_info__ = ('10', '22', '135')"
        assert parse_version_descriptor(text) == "10.22.135"

    def test_no_match_is_unknown(self):
        assert parse_version_descriptor("no version here") == UNKNOWN_VERSION
        assert UNKNOWN_VERSION == "Unknown"

    def test_double_quotes_do_not_match(self):
        """Test the pattern is literal about quoting."""
        text = '__version_info__ = ("4", "1", "3")'
        assert parse_version_descriptor(text) == "Unknown"

    def test_empty_and_none(self):
        assert parse_version_descriptor("") == "Unknown"
        assert parse_version_descriptor(None) == "Unknown"


class TestLatestCliVersion:
    """Tests for latest_cli_version function."""

    def test_uses_fetcher(self):
        seen = []

        def fetcher(url):
            seen.append(url)
            return ABOUT_PY

        assert latest_cli_version(fetcher) == "4.1.3"
        assert seen == [VERSION_URL]

    @responses.activate
    def test_over_http(self):
        responses.add(responses.GET, VERSION_URL, body=ABOUT_PY)

        assert latest_cli_version() == "4.1.3"

    @responses.activate
    def test_network_failure_is_unknown(self):
        responses.add(responses.GET, VERSION_URL, status=500)

        assert latest_cli_version() == "Unknown"
