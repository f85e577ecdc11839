"""
Unit tests for upstream feed parsing.
"""

from datetime import datetime, timezone

import pytest

from feedproxy.ingestion.feed_parser import fetch_feed, parse_feed
from feedproxy.utils.exceptions import ParseError, ErrorCode

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>heise online</title>
  <subtitle>Nachrichten</subtitle>
  <rights>Copyright heise</rights>
  <link href="https://www.heise.de/"/>
  <id>tag:heise.de,2020:feed</id>
  <updated>2020-01-02T10:00:00Z</updated>
  <author><name>heise</name><email>info@heise.de</email></author>
  <entry>
    <title>First</title>
    <link href="https://www.heise.de/security/meldung/a.html"/>
    <id>http://heise.de/-1</id>
    <published>2020-01-02T10:00:00Z</published>
    <updated>2020-01-02T10:00:00Z</updated>
    <content type="html">&lt;p&gt;Full text&lt;/p&gt;</content>
    <summary>Short</summary>
  </entry>
  <entry>
    <title>Second</title>
    <link href="https://www.heise.de/developer/artikel/b.html"/>
    <id>http://heise.de/-2</id>
    <updated>2020-01-01T08:30:00Z</updated>
    <summary>Only a summary</summary>
  </entry>
</feed>
"""


class TestParseFeed:

    def test_channel_metadata(self):
        feed = parse_feed(ATOM_FEED, "https://www.heise.de/rss/heise-atom.xml")

        assert feed.title == "heise online"
        assert feed.link == "https://www.heise.de/"
        assert feed.description == "Nachrichten"
        assert feed.copyright == "Copyright heise"
        assert feed.author.name == "heise"
        assert feed.author.email == "info@heise.de"

    def test_entries_in_document_order(self):
        feed = parse_feed(ATOM_FEED)

        assert [item.title for item in feed.items] == ["First", "Second"]
        assert feed.items[0].link == "https://www.heise.de/security/meldung/a.html"
        assert feed.items[0].guid == "http://heise.de/-1"

    def test_content_preferred_over_summary(self):
        feed = parse_feed(ATOM_FEED)

        assert feed.items[0].content == "<p>Full text</p>"
        assert feed.items[1].content == "Only a summary"

    def test_published_is_utc(self):
        feed = parse_feed(ATOM_FEED)

        assert feed.items[0].published == datetime(2020, 1, 2, 10, 0, tzinfo=timezone.utc)

    def test_rss_feed(self, rss_factory):
        feed = parse_feed(rss_factory([("A", "https://x.test/a/", "body")]))

        assert feed.title == "Upstream"
        assert feed.items[0].content == "body"
        assert feed.items[0].published == datetime(2020, 1, 2, 10, 0, tzinfo=timezone.utc)

    def test_garbage_raises(self):
        with pytest.raises(ParseError) as exc_info:
            parse_feed("this is not xml at all <<<", "https://x.test/feed")

        assert exc_info.value.error_code == ErrorCode.FEED_PARSE_ERROR
        assert exc_info.value.context["url"] == "https://x.test/feed"


class TestFetchFeed:

    @pytest.mark.asyncio
    async def test_fetch_and_parse(self, make_client, rss_factory):
        client = make_client(pages={"https://x.test/feed": rss_factory([("A", "https://x.test/a/", "b")])})

        feed = await fetch_feed(client, "https://x.test/feed")

        assert len(feed.items) == 1
        assert client.requests == ["https://x.test/feed"]
