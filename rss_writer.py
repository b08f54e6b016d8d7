#!/usr/bin/env python3
"""
RSS 2.0 serializer for feed items.
Builds the document with ElementTree and returns it ready to serve or write.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

from constants import Branding, FeedFormat
from content_store import coerce_pub_date
from errors import ConfigurationError, ValidationError
from feed_items import FeedItemRecord
from logger_config import get_logger

logger = get_logger(__name__)

# Characters XML 1.0 does not allow anywhere in a document
XML_ILLEGAL_RX = re.compile("[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


@dataclass
class FeedResponse:
    """Rendered feed plus the headers to serve it with."""

    body: str
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": FeedFormat.CONTENT_TYPE})

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "")


def rss_date(value) -> str:
    """Format a pubDate as RFC 822; naive values are UTC, strings must parse as dates."""
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif isinstance(value, str):
        dt = coerce_pub_date(value, "pubDate")
    else:
        raise ValidationError(f"cannot format pubDate {value!r}", "pubDate")
    return dt.strftime(FeedFormat.DATE_FORMAT)


def xml_text(value: str, label: str = "") -> str:
    """Drop characters XML 1.0 forbids (e.g. \\x0b) so the feed stays parseable."""
    cleaned = XML_ILLEGAL_RX.sub("", value)
    if cleaned != value:
        logger.warning(f"Removed {len(value) - len(cleaned)} XML-illegal character(s) from {label or 'text'}")
    return cleaned


def rss_now() -> str:
    return datetime.now(timezone.utc).strftime(FeedFormat.DATE_FORMAT)


def _check_site(site: Optional[str]) -> str:
    parsed = urlparse(str(site or ""))
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"feed requires an absolute site URL, got {site!r}")
    return str(site)


def make_item(item: FeedItemRecord, site: str) -> ET.Element:
    link = xml_text(urljoin(site, item.link), "link")

    node = ET.Element("item")
    ET.SubElement(node, "title").text = xml_text(item.title, f"title of {link}")
    ET.SubElement(node, "link").text = link
    ET.SubElement(node, "guid", attrib={"isPermaLink": "true"}).text = link
    ET.SubElement(node, "description").text = xml_text(item.description, f"description of {link}")
    ET.SubElement(node, "pubDate").text = rss_date(item.pub_date)
    if item.enclosure is not None:
        ET.SubElement(node, "enclosure", attrib={
            "url": xml_text(item.enclosure.url, f"enclosure of {link}"),
            "type": item.enclosure.type,
            "length": str(item.enclosure.length),
        })
    return node


def build_tree(title: str, description: str, site: str, items: Sequence[FeedItemRecord],
               language: str = Branding.CHANNEL_LANGUAGE, build_date: Optional[str] = None) -> ET.ElementTree:
    site = _check_site(site)

    rss = ET.Element("rss", attrib={"version": FeedFormat.RSS_VERSION})
    ch = ET.SubElement(rss, "channel")
    ET.SubElement(ch, "title").text = xml_text(title, "channel title")
    ET.SubElement(ch, "link").text = site
    ET.SubElement(ch, "description").text = xml_text(description, "channel description")
    ET.SubElement(ch, "language").text = language
    ET.SubElement(ch, "lastBuildDate").text = build_date or rss_now()
    for item in items:
        ch.append(make_item(item, site))
    return ET.ElementTree(rss)


def render_rss(title: str, description: str, site: str, items: Sequence[FeedItemRecord],
               language: str = Branding.CHANNEL_LANGUAGE, build_date: Optional[str] = None) -> str:
    """
    Serialize feed items into an RSS 2.0 document.

    Args:
        title: Channel title
        description: Channel description
        site: Absolute site URL; relative item links are resolved against it
        items: Feed items in output order
        language: Channel language code
        build_date: lastBuildDate override (default: now)

    Returns:
        UTF-8 XML text with declaration
    """
    tree = build_tree(title, description, site, items, language=language, build_date=build_date)
    ET.indent(tree)
    body = ET.tostring(tree.getroot(), encoding="unicode")
    return '<?xml version="1.0" encoding="utf-8"?>\n' + body + "\n"


def rss(title: str, description: str, site: str, items: List[FeedItemRecord],
        language: str = Branding.CHANNEL_LANGUAGE, build_date: Optional[str] = None) -> FeedResponse:
    """Render the feed and wrap it in a FeedResponse with the RSS content type."""
    body = render_rss(title, description, site, items, language=language, build_date=build_date)
    logger.info(f"Rendered RSS feed with {len(items)} items for {site}")
    return FeedResponse(body=body)
