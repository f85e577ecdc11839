"""
Unit tests for the link-path filter.

Covers:
- Path segment extraction after scheme and host
- Prefix matching against a whitelist
- Allow-list and block-list modes
- Links too short to carry a path segment
"""

import logging

import pytest

from feedproxy.core.models import CanonicalItem
from feedproxy.processing.filter_engine import (
    filter_items,
    is_retained,
    matches,
    path_segment,
)
from feedproxy.utils.exceptions import PathSegmentError, ErrorCode

WHITELIST = ("security", "developer", "select/ix")


class TestPathSegment:

    def test_segment_after_host(self):
        assert path_segment("https://www.heise.de/security/meldung/x.html") == "security/meldung/x.html"

    def test_trailing_slash_only_gives_empty_segment(self):
        assert path_segment("https://www.heise.de/") == ""

    @pytest.mark.parametrize("link", ["https://www.heise.de", "", "no-slashes"])
    def test_short_links_raise(self, link):
        with pytest.raises(PathSegmentError) as exc_info:
            path_segment(link)

        assert exc_info.value.error_code == ErrorCode.PATH_TOO_SHORT
        assert exc_info.value.link == link

    def test_error_is_an_index_error(self):
        with pytest.raises(IndexError):
            path_segment("https://host")


class TestMatches:

    def test_prefix_match(self):
        assert matches("select/ix/2020/4", WHITELIST)
        assert matches("security", WHITELIST)

    def test_prefix_only_not_substring(self):
        assert not matches("news/security", WHITELIST)

    def test_empty_whitelist_never_matches(self):
        assert not matches("security", ())


class TestFilterItems:
    """Test allow-list/block-list selection over a batch of items."""

    def test_include_keeps_matching(self, sample_items):
        kept = filter_items(sample_items, WHITELIST, include=True)

        assert [item.id for item in kept] == ["id-0", "id-2", "id-3"]

    def test_exclude_keeps_non_matching(self, sample_items):
        kept = filter_items(sample_items, WHITELIST, include=False)

        assert [item.id for item in kept] == ["id-1", "id-4"]

    def test_include_and_exclude_partition_the_input(self, sample_items):
        included = filter_items(sample_items, WHITELIST, include=True)
        excluded = filter_items(sample_items, WHITELIST, include=False)

        assert len(included) + len(excluded) == len(sample_items)
        assert not {i.id for i in included} & {i.id for i in excluded}

    def test_order_is_preserved(self, sample_items):
        reversed_items = list(reversed(sample_items))

        kept = filter_items(reversed_items, WHITELIST, include=True)

        assert [item.id for item in kept] == ["id-3", "id-2", "id-0"]

    def test_short_link_is_dropped_in_both_modes(self, sample_items, caplog):
        broken = CanonicalItem(title="broken", content="", link="https://host", id="broken")
        items = sample_items + [broken]
        logger = logging.getLogger("feedproxy.test")

        with caplog.at_level(logging.WARNING, logger="feedproxy.test"):
            included = filter_items(items, WHITELIST, include=True, logger=logger)
            excluded = filter_items(items, WHITELIST, include=False, logger=logger)

        assert "broken" not in {i.id for i in included + excluded}
        assert "Dropping item without path segment" in caplog.text

    def test_is_retained(self):
        assert is_retained("https://h/security/x", ("security",), include=True)
        assert not is_retained("https://h/security/x", ("security",), include=False)
