"""
Fixed keyword tables used by trend detection, brief categorization and sentence scoring.

The tables are data, not code: `Taxonomy` bundles them and `load_taxonomy` reads the same
shape from a YAML file, so the matching code never needs to know which topics exist.

YAML layout (every section optional; missing sections keep the defaults)::

    topics:
      Ransomware: [ransomware, crypto locker, encryption attack]
    topic_categories:
      Ransomware: malware
    brief_categories:            # scanned top to bottom, first hit wins
      vulnerability: [vulnerability, cve-, exploit]
    trending_keywords: [malware, phishing]
    summary_keywords: [security, attack]
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

import yaml

from .exceptions import TaxonomyError
from .matching import DEFAULT_MAX_LENGTH


@dataclass(frozen=True)
class Topic:
    label: str
    patterns: Tuple[str, ...]


_DEFAULT_TOPICS: Tuple[Topic, ...] = (
    Topic("AI Security", ("ai", "artificial intelligence", "machine learning", "chatgpt", "llm", "deepfake")),
    Topic("Ransomware", ("ransomware", "crypto locker", "encryption attack")),
    Topic("Phishing", ("phishing", "social engineering", "email attack", "credential theft")),
    Topic("Zero-day", ("zero-day", "zero day", "0-day", "unknown vulnerability")),
    Topic("Data Breach", ("data breach", "breach", "data leak", "exposed data")),
    Topic("Malware", ("malware", "trojan", "virus", "worm", "backdoor")),
    Topic("APT", ("apt", "advanced persistent threat", "nation state", "state-sponsored")),
    Topic("Vulnerability", ("vulnerability", "cve-", "security flaw", "exploit")),
    Topic("DDoS", ("ddos", "denial of service", "botnet attack")),
    Topic("Cloud Security", ("cloud security", "aws security", "azure security", "cloud breach")),
    Topic("IoT Security", ("iot security", "smart device", "connected device")),
    Topic("Mobile Security", ("mobile malware", "android malware", "ios security")),
)

_DEFAULT_TOPIC_CATEGORIES: Dict[str, str] = {
    "AI Security": "ai-security",
    "Ransomware": "malware",
    "Phishing": "social-engineering",
    "Zero-day": "vulnerability",
    "Data Breach": "breach",
    "Malware": "malware",
    "APT": "threat-intelligence",
    "Vulnerability": "vulnerability",
    "DDoS": "attack",
    "Cloud Security": "cloud",
    "IoT Security": "iot",
    "Mobile Security": "mobile",
}

# Order matters: the first category with a matching keyword wins
_DEFAULT_BRIEF_CATEGORIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("vulnerability", ("vulnerability", "cve-", "exploit", "patch", "security flaw")),
    ("malware", ("malware", "ransomware", "trojan", "virus", "backdoor")),
    ("breach", ("breach", "data leak", "exposed", "stolen data")),
    ("threat-intelligence", ("apt", "threat actor", "campaign", "attribution")),
    ("ai-security", ("ai", "artificial intelligence", "machine learning", "chatgpt")),
)

_DEFAULT_TRENDING_KEYWORDS: Tuple[str, ...] = (
    "malware", "ransomware", "phishing", "vulnerability", "exploit", "breach", "attack",
    "cybersecurity", "security", "hacker", "threat", "zero-day", "patch", "backdoor",
    "botnet", "ddos", "apt", "credential", "password", "encryption", "vpn", "firewall",
    "ai", "artificial intelligence", "machine learning", "deepfake", "chatgpt", "llm",
)

_DEFAULT_SUMMARY_KEYWORDS: Tuple[str, ...] = (
    "security", "attack", "vulnerability", "threat", "malware", "ransomware",
    "phishing", "breach", "exploit", "hacker", "cybersecurity", "data",
)


@dataclass(frozen=True)
class Taxonomy:
    topics: Tuple[Topic, ...] = _DEFAULT_TOPICS
    topic_categories: Mapping[str, str] = field(default_factory=lambda: dict(_DEFAULT_TOPIC_CATEGORIES))
    brief_categories: Tuple[Tuple[str, Tuple[str, ...]], ...] = _DEFAULT_BRIEF_CATEGORIES
    trending_keywords: Tuple[str, ...] = _DEFAULT_TRENDING_KEYWORDS
    summary_keywords: Tuple[str, ...] = _DEFAULT_SUMMARY_KEYWORDS

    def category_for(self, topic: str) -> str:
        """Category label for a topic; "general" when the table has no entry."""
        return self.topic_categories.get(topic, "general")


DEFAULT_TAXONOMY = Taxonomy()


def _patterns(value: Any, where: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise TaxonomyError(f"{where}: expected a non-empty list of strings")
    out: List[str] = []
    for p in value:
        if not isinstance(p, str) or not p.strip():
            raise TaxonomyError(f"{where}: patterns must be non-empty strings")
        p = p.strip().lower()
        if len(p) > DEFAULT_MAX_LENGTH:
            raise TaxonomyError(f"{where}: pattern longer than {DEFAULT_MAX_LENGTH} characters")
        out.append(p)
    return tuple(out)


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TaxonomyError(f"{where}: expected a mapping")
    for k in value:
        if not isinstance(k, str) or not k.strip():
            raise TaxonomyError(f"{where}: keys must be non-empty strings")
    return value


def taxonomy_from_dict(data: Mapping[str, Any]) -> Taxonomy:
    """Build a Taxonomy from plain data, keeping defaults for absent sections."""
    if not isinstance(data, Mapping):
        raise TaxonomyError("taxonomy document must be a mapping")
    tax = DEFAULT_TAXONOMY

    if "topics" in data:
        raw = _mapping(data["topics"], "topics")
        topics = tuple(Topic(label.strip(), _patterns(pats, f"topics.{label}")) for label, pats in raw.items())
        tax = replace(tax, topics=topics)

    if "topic_categories" in data:
        raw = _mapping(data["topic_categories"], "topic_categories")
        cats: Dict[str, str] = {}
        for topic, cat in raw.items():
            if not isinstance(cat, str) or not cat.strip():
                raise TaxonomyError(f"topic_categories.{topic}: category must be a non-empty string")
            cats[topic.strip()] = cat.strip()
        tax = replace(tax, topic_categories=cats)

    if "brief_categories" in data:
        raw = _mapping(data["brief_categories"], "brief_categories")
        table = tuple((name.strip(), _patterns(pats, f"brief_categories.{name}")) for name, pats in raw.items())
        tax = replace(tax, brief_categories=table)

    if "trending_keywords" in data:
        tax = replace(tax, trending_keywords=_patterns(data["trending_keywords"], "trending_keywords"))

    if "summary_keywords" in data:
        tax = replace(tax, summary_keywords=_patterns(data["summary_keywords"], "summary_keywords"))

    return tax


def load_taxonomy(path: Union[str, Path]) -> Taxonomy:
    """Load a taxonomy YAML file. Raises TaxonomyError on unreadable or malformed input."""
    p = Path(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise TaxonomyError(f"Cannot read taxonomy file: {p} ({e})") from e
    if data is None:
        return DEFAULT_TAXONOMY
    return taxonomy_from_dict(data)
