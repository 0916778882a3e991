"""Data models for snaplink."""

import time
from dataclasses import dataclass, field
from typing import Dict, Optional


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass
class URLEntry:
    """One shortened URL with its access analytics.

    Timestamps and ``ttl`` are in milliseconds. An entry with no ``ttl``
    never expires.
    """

    long_url: str
    short_id: str
    created_at: int
    ttl: Optional[int] = None
    access_count: int = 0
    last_accessed: Optional[int] = None
    referrers: Dict[str, int] = field(default_factory=dict)
    browser_stats: Dict[str, int] = field(default_factory=dict)
    qr_code: Optional[str] = None

    def is_expired(self, now: Optional[int] = None) -> bool:
        """Return True once ``now`` is past ``created_at + ttl``."""
        if not self.ttl:
            return False
        now = now_ms() if now is None else now
        return now > self.created_at + self.ttl

    def update_stats(self, referrer: str, browser: str, now: Optional[int] = None) -> None:
        """Count one successful access."""
        self.access_count += 1
        self.last_accessed = now_ms() if now is None else now
        self.referrers[referrer] = self.referrers.get(referrer, 0) + 1
        self.browser_stats[browser] = self.browser_stats.get(browser, 0) + 1

    def get_stats(self, now: Optional[int] = None) -> dict:
        """Public view of the entry as returned by the HTTP API."""
        return {
            "shortId": self.short_id,
            "longUrl": self.long_url,
            "accessCount": self.access_count,
            "lastAccessed": self.last_accessed,
            "createdAt": self.created_at,
            "ttl": self.ttl,
            "isExpired": self.is_expired(now),
            "referrers": dict(self.referrers),
            "browserStats": dict(self.browser_stats),
            "qrCode": self.qr_code,
        }

    def to_dict(self) -> dict:
        """Convert to the persisted document representation."""
        return {
            "longUrl": self.long_url,
            "shortId": self.short_id,
            "createdAt": self.created_at,
            "ttl": self.ttl,
            "accessCount": self.access_count,
            "lastAccessed": self.last_accessed,
            "referrers": dict(self.referrers),
            "browserStats": dict(self.browser_stats),
            "qrCode": self.qr_code,
        }

    @classmethod
    def from_dict(cls, data: dict, key: Optional[str] = None) -> "URLEntry":
        """Create from the persisted document representation.

        Args:
            data: Serialized entry
            key: Document key the entry was stored under, used when the
                record has no ``shortId`` of its own
        """
        return cls(
            long_url=data["longUrl"],
            short_id=data.get("shortId") or key,
            created_at=int(data["createdAt"]),
            ttl=data.get("ttl"),
            access_count=data.get("accessCount", 0),
            last_accessed=data.get("lastAccessed"),
            referrers=dict(data.get("referrers") or {}),
            browser_stats=dict(data.get("browserStats") or {}),
            qr_code=data.get("qrCode"),
        )
