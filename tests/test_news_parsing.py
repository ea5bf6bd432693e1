"""
tests/test_news_parsing.py
--------------------------
Google News RSS parsing and NewsService with a mocked HTTP session.
"""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import requests

from sharesathi.services.news_service import (
    DEFAULT_QUERY,
    NewsService,
    build_feed_url,
    build_query,
    clean_text,
    parse_news_feed,
)

RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
  <title>Indian stock market - Google News</title>
  <item>
    <title>Sensex ends flat as IT gains offset bank losses</title>
    <link>https://news.example.com/a</link>
    <pubDate>Mon, 15 Jan 2024 10:00:00 GMT</pubDate>
    <description>&lt;a href="https://news.example.com/a"&gt;Sensex ends flat&lt;/a&gt;&amp;nbsp;&lt;font color="#6f6f6f"&gt;Mint&lt;/font&gt;</description>
    <source url="https://www.livemint.com">Mint</source>
  </item>
  <item>
    <title>Reliance shares hit record high</title>
    <link>https://news.example.com/b</link>
    <pubDate>Tue, 16 Jan 2024 08:30:00 GMT</pubDate>
    <source url="https://economictimes.indiatimes.com">The Economic Times</source>
  </item>
  <item>
    <title>Undated market wrap</title>
    <link>https://news.example.com/c</link>
  </item>
  <item>
    <title></title>
    <link>https://news.example.com/empty</link>
  </item>
</channel>
</rss>
"""


class TestQueries(unittest.TestCase):

    def test_symbol_query(self):
        self.assertEqual(build_query(symbol="RELIANCE"), "RELIANCE stock BSE India")

    def test_free_text_and_default(self):
        self.assertEqual(build_query(query="budget 2024"), "budget 2024")
        self.assertEqual(build_query(), DEFAULT_QUERY)

    def test_feed_url_is_india_edition(self):
        url = build_feed_url("tata motors")
        self.assertIn("q=tata+motors", url)
        self.assertIn("gl=IN", url)
        self.assertIn("hl=en-IN", url)

    def test_clean_text(self):
        self.assertEqual(clean_text("<b>Nifty</b> &amp; Sensex"), "Nifty & Sensex")
        self.assertEqual(clean_text(""), "")


class TestParseFeed(unittest.TestCase):

    def test_newest_first_undated_last(self):
        items = parse_news_feed(RSS)
        self.assertEqual(
            [i["link"] for i in items],
            ["https://news.example.com/b", "https://news.example.com/a", "https://news.example.com/c"],
        )

    def test_fields(self):
        item = parse_news_feed(RSS)[1]
        self.assertEqual(item["title"], "Sensex ends flat as IT gains offset bank losses")
        self.assertEqual(item["source"], "Mint")
        self.assertEqual(item["published"], datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc))
        self.assertNotIn("<", item["snippet"])

    def test_missing_source_and_snippet(self):
        item = parse_news_feed(RSS)[2]
        self.assertEqual(item["source"], "News")
        self.assertIsNone(item["snippet"])
        self.assertIsNone(item["published"])

    def test_limit(self):
        self.assertEqual(len(parse_news_feed(RSS, limit=1)), 1)

    def test_garbage(self):
        self.assertEqual(parse_news_feed(b"not a feed"), [])


class TestNewsService(unittest.TestCase):

    def setUp(self):
        self.service = NewsService()

    def test_get_news(self):
        response = MagicMock(content=RSS)
        with patch.object(self.service.session, "get", return_value=response) as get:
            result = self.service.get_news(symbol="RELIANCE")

        self.assertEqual(result["query"], "RELIANCE stock BSE India")
        self.assertEqual(len(result["items"]), 3)
        self.assertIn("RELIANCE", get.call_args[0][0])

    def test_feed_down_gives_empty_items(self):
        with patch.object(self.service.session, "get", side_effect=requests.exceptions.ConnectionError("down")):
            result = self.service.get_news()

        self.assertEqual(result["items"], [])
        self.assertEqual(result["query"], DEFAULT_QUERY)


if __name__ == "__main__":
    unittest.main()
