"""RSS feed fetching and parsing."""

from __future__ import annotations

import html
import urllib.error
import urllib.request
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field


class FetchError(Exception):
    """A feed could not be downloaded or decoded."""


@dataclass
class RSSItem:
    title: str = ""
    link: str = ""
    description: str = ""
    pub_date: str = ""


@dataclass
class RSSChannel:
    title: str = ""
    link: str = ""
    description: str = ""
    items: list[RSSItem] = field(default_factory=list)


@dataclass
class RSSFeed:
    channel: RSSChannel = field(default_factory=RSSChannel)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(elem: ET.Element, name: str) -> list[ET.Element]:
    return [c for c in elem if isinstance(c.tag, str) and _local(c.tag) == name]


def _text(elem: ET.Element, name: str) -> str:
    found = _children(elem, name)
    return "".join(found[0].itertext()) if found else ""


def parse_feed(data: bytes | str) -> RSSFeed:
    """Decode an RSS document."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise FetchError(f"error unmarshaling data: {exc}") from exc
    channels = _children(root, "channel")
    if not channels:
        return RSSFeed()
    ch = channels[0]
    items = [
        RSSItem(
            title=_text(it, "title"),
            link=_text(it, "link"),
            description=_text(it, "description"),
            pub_date=_text(it, "pubDate"),
        )
        for it in _children(ch, "item")
    ]
    return RSSFeed(
        RSSChannel(
            title=_text(ch, "title"),
            link=_text(ch, "link"),
            description=_text(ch, "description"),
            items=items,
        )
    )


def unescape_feed(feed: RSSFeed) -> RSSFeed:
    """Resolve HTML entities in titles and descriptions, in place."""
    ch = feed.channel
    ch.title, ch.description = html.unescape(ch.title), html.unescape(ch.description)
    for item in ch.items:
        item.title, item.description = html.unescape(item.title), html.unescape(item.description)
    return feed


def fetch_feed(url: str, timeout: float | None = None) -> RSSFeed:
    """Download, parse and unescape the feed at ``url``."""
    request = urllib.request.Request(url, headers={"User-Agent": "gator"})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as resp:
            if resp.status != 200:
                raise FetchError(f"http error: unexpected status code: {resp.status}")
            data = resp.read()
    except urllib.error.HTTPError as exc:
        raise FetchError(f"http error: unexpected status code: {exc.code}") from exc
    except (urllib.error.URLError, ValueError, OSError) as exc:
        raise FetchError(f"http error: {exc}") from exc
    return unescape_feed(parse_feed(data))