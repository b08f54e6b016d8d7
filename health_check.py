#!/usr/bin/env python3
"""
Health check script for the blog RSS feed.
Validates the built feed's structure and reports any issues.
"""

import os
import sys
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

import feedparser

from constants import HealthLimits, Paths, load_site_config
from logger_config import get_logger

logger = get_logger(__name__)


def _channel(rss_path: str) -> Optional[ET.Element]:
    return ET.parse(rss_path).getroot().find("channel")


class HealthCheck:
    """Feed health validation."""

    def __init__(self):
        self.checks: List[Tuple[str, bool, str]] = []

    def add_result(self, check_name: str, passed: bool, message: str = "") -> None:
        """Add a check result."""
        self.checks.append((check_name, passed, message))
        status = "✓ PASS" if passed else "✗ FAIL"
        log_method = logger.info if passed else logger.error
        log_method(f"{status}: {check_name} - {message}")

    def check_file_exists(self, file_path: str, description: str) -> bool:
        """Check if a required file or directory exists."""
        exists = os.path.exists(file_path)
        self.add_result(
            f"File: {description}",
            exists,
            file_path if exists else f"{file_path} not found"
        )
        return exists

    def check_rss_valid(self, rss_path: str = Paths.FEED_FILE) -> bool:
        """Validate RSS feed is well-formed XML with the required channel elements."""
        try:
            channel = _channel(rss_path)
        except (ET.ParseError, OSError) as e:
            self.add_result("RSS Structure", False, f"XML parse error: {e}")
            return False

        if channel is None:
            self.add_result("RSS Structure", False, "Missing channel element")
            return False

        required = ["title", "link", "description"]
        missing = [elem for elem in required if channel.find(elem) is None]
        if missing:
            self.add_result("RSS Structure", False, f"Missing elements: {missing}")
            return False

        self.add_result("RSS Structure", True, "Valid RSS 2.0 feed")
        return True

    def check_feed_parses(self, rss_path: str = Paths.FEED_FILE) -> bool:
        """Check a feed reader can parse the feed without errors."""
        parsed = feedparser.parse(rss_path)
        if parsed.bozo:
            self.add_result("Feed Parse", False, f"{parsed.bozo_exception}")
            return False
        if not parsed.version.startswith("rss"):
            self.add_result("Feed Parse", False, f"Unexpected feed format: {parsed.version or 'unknown'}")
            return False
        self.add_result("Feed Parse", True, f"{parsed.version}, {len(parsed.entries)} entries")
        return True

    def check_items(self, rss_path: str = Paths.FEED_FILE) -> bool:
        """Check every item has a title, an absolute link and a guid."""
        try:
            channel = _channel(rss_path)
        except (ET.ParseError, OSError) as e:
            self.add_result("Feed Items", False, f"XML parse error: {e}")
            return False
        items = channel.findall("item") if channel is not None else []

        problems = []
        for index, item in enumerate(items):
            if not (item.findtext("title") or "").strip():
                problems.append(f"item {index}: missing title")
            link = (item.findtext("link") or "").strip()
            if not urlparse(link).netloc:
                problems.append(f"item {index}: link is not absolute ({link!r})")
            if item.find("guid") is None:
                problems.append(f"item {index}: missing guid")

        if problems:
            self.add_result("Feed Items", False, "; ".join(problems))
            return False
        self.add_result("Feed Items", True, f"{len(items)} items OK")
        return True

    def check_enclosures(self, rss_path: str = Paths.FEED_FILE) -> bool:
        """Check enclosures carry an absolute URL, an image type and a numeric length."""
        try:
            channel = _channel(rss_path)
        except (ET.ParseError, OSError) as e:
            self.add_result("Enclosures", False, f"XML parse error: {e}")
            return False
        enclosures = channel.findall("item/enclosure") if channel is not None else []

        problems = []
        for enc in enclosures:
            url = enc.get("url", "")
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                problems.append(f"relative or missing url {url!r}")
            elif not url.isascii() or any(ch.isspace() for ch in url):
                problems.append(f"unencoded characters in url {url!r}")
            if not enc.get("type", "").startswith("image/"):
                problems.append(f"{url}: non-image type {enc.get('type')!r}")
            if not enc.get("length", "").isdigit():
                problems.append(f"{url}: bad length {enc.get('length')!r}")

        if problems:
            self.add_result("Enclosures", False, "; ".join(problems))
            return False
        self.add_result("Enclosures", True, f"{len(enclosures)} enclosures OK")
        return True

    def check_file_size(self, file_path: str, max_mb: float, description: str) -> bool:
        """Check if file size is within acceptable limits."""
        if not os.path.exists(file_path):
            self.add_result(f"File Size: {description}", False, f"{file_path} not found")
            return False

        size_mb = os.path.getsize(file_path) / (1024 * 1024)
        if size_mb > max_mb:
            self.add_result(
                f"File Size: {description}",
                False,
                f"{size_mb:.2f}MB exceeds limit of {max_mb}MB"
            )
            return False

        self.add_result(
            f"File Size: {description}",
            True,
            f"{size_mb:.2f}MB (limit: {max_mb}MB)"
        )
        return True

    def run_all_checks(self, feed_file: str = Paths.FEED_FILE, content_dir: str = Paths.CONTENT_DIR) -> bool:
        """Run all health checks."""
        logger.info("Starting health checks...")

        self.check_file_exists(os.path.join(content_dir, Paths.BLOG_COLLECTION), "Blog Collection")
        if self.check_file_exists(feed_file, "RSS Feed"):
            if self.check_rss_valid(feed_file):
                self.check_feed_parses(feed_file)
                self.check_items(feed_file)
                self.check_enclosures(feed_file)
            self.check_file_size(feed_file, max_mb=HealthLimits.MAX_FEED_MB, description="RSS Feed")

        summary = self.get_summary()
        logger.info(f"Health Check Summary: {summary['passed']}/{summary['total']} passed, {summary['failed']} failed")

        if summary["failed"] > 0:
            logger.error("Failed checks:")
            for name, result, message in self.checks:
                if not result:
                    logger.error(f"  - {name}: {message}")

        return summary["failed"] == 0

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        total = len(self.checks)
        passed = sum(1 for _, result, _ in self.checks if result)

        return {
            "total": total,
            "passed": passed,
            "failed": total - passed,
            "success_rate": (passed / total * 100) if total > 0 else 0
        }


def main():
    """Run health checks and exit with appropriate code."""
    config = load_site_config()
    health = HealthCheck()
    success = health.run_all_checks(config.feed_file, config.content_dir)

    summary = health.get_summary()
    print(f"\n{'='*50}")
    print(f"Health Check Results: {summary['passed']}/{summary['total']} passed")
    print(f"Success Rate: {summary['success_rate']:.1f}%")
    print(f"{'='*50}")

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
