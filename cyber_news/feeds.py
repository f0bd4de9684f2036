from __future__ import annotations

from typing import List, Optional, Tuple

from .models import FeedSource


CYBERSECURITY_FEEDS: Tuple[FeedSource, ...] = (
    FeedSource("Krebs on Security", "https://krebsonsecurity.com/feed/",
               "In-depth security news and investigation", "news"),
    FeedSource("SANS Internet Storm Center", "https://isc.sans.edu/rssfeed.xml",
               "Daily security diary and threat analysis", "threat-intelligence"),
    FeedSource("EclecticIQ Threat Intelligence", "https://blog.eclecticiq.com/rss.xml",
               "EclecticIQ Threat Intelligence Blog", "research"),
    FeedSource("Microsoft Security Blog", "https://www.microsoft.com/security/blog/feed/",
               "Microsoft Security Blog", "news"),
    FeedSource("Proofpoint Threat Research", "https://www.proofpoint.com/us/threat-insight-blog.xml",
               "Proofpoint Threat Research Blog", "news"),
    FeedSource("SentinelOne Labs", "https://www.sentinelone.com/labs/feed/",
               "SentinelOne Labs Blog", "news"),
    FeedSource("Crowdstrike Threat Research", "https://www.crowdstrike.com/blog/category/threat-intel-research/",
               "Crowdstrike Threat Research Blog", "news"),
    FeedSource("CISA Alerts", "https://www.cisa.gov/cybersecurity-advisories/all.xml",
               "Official US cybersecurity alerts and advisories", "vulnerabilities"),
    FeedSource("The Hacker News", "https://thehackernews.com/feeds/posts/default",
               "Latest cybersecurity news and updates", "news"),
    FeedSource("Dark Reading", "https://www.darkreading.com/rss.xml",
               "Enterprise security news and analysis", "news"),
    FeedSource("Threatpost", "https://threatpost.com/feed/",
               "Breaking cybersecurity news", "news"),
    FeedSource("Security Week", "https://www.securityweek.com/feed/",
               "Security industry news and analysis", "news"),
    FeedSource("Malwarebytes Labs", "https://blog.malwarebytes.com/feed/",
               "Malware research and security insights", "research"),
    FeedSource("FireEye Threat Research", "https://www.fireeye.com/blog/threat-research/_jcr_content.feed",
               "Advanced threat research and analysis", "threat-intelligence"),
    FeedSource("BleepingComputer", "https://www.bleepingcomputer.com/feed/",
               "Computer security and technology news", "news"),
    FeedSource("TheRecord", "https://therecord.media/feed/",
               "Cybersecurity news and investigations", "news"),
)


def get_feed_by_name(name: str, feeds: Tuple[FeedSource, ...] = CYBERSECURITY_FEEDS) -> Optional[FeedSource]:
    """First feed whose name contains `name`, case-insensitively."""
    needle = name.lower()
    for feed in feeds:
        if needle in feed.name.lower():
            return feed
    return None


def get_feeds_by_category(category: str, feeds: Tuple[FeedSource, ...] = CYBERSECURITY_FEEDS) -> List[FeedSource]:
    return [f for f in feeds if f.category == category]
