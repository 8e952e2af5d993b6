"""Source classification for collected candidate values."""

from __future__ import annotations

from urllib.parse import urlparse

from src.resolver.models import SourceType

PRESS_DOMAINS: frozenset[str] = frozenset(
    {
        "forbes.com",
        "wsj.com",
        "bloomberg.com",
        "ft.com",
        "cnbc.com",
        "reuters.com",
        "techcrunch.com",
        "theverge.com",
        "wired.com",
        "entrepreneur.com",
        "inc.com",
        "fastcompany.com",
        "prnewswire.com",
        "businesswire.com",
        "globenewswire.com",
        "marketwatch.com",
        "sec.gov",
    }
)

VENDOR_DOMAINS: frozenset[str] = frozenset(
    {
        "clearbit.com",
        "peopledatalabs.com",
        "fullcontact.com",
    }
)

SOCIAL_DOMAINS: frozenset[str] = frozenset(
    {
        "linkedin.com",
        "github.com",
        "twitter.com",
        "x.com",
        "facebook.com",
        "instagram.com",
        "tiktok.com",
        "medium.com",
        "gravatar.com",
    }
)

# Link slots keyed by the platform domain they hold.
PLATFORM_LINK_SLOTS: dict[str, str] = {
    "linkedin.com": "linkedin",
    "github.com": "github",
    "twitter.com": "x",
    "x.com": "x",
}


def url_domain(url: str | None) -> str:
    """Return the lowercase host of a URL without a leading ``www.``."""
    if not url:
        return ""
    raw = url.strip()
    if "://" not in raw:
        raw = f"https://{raw}"
    host = (urlparse(raw).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def _matches(host: str, domains: frozenset[str]) -> bool:
    return any(host == d or host.endswith(f".{d}") for d in domains)


def email_domain(email: str | None) -> str:
    if not email or "@" not in email:
        return ""
    return email.rsplit("@", 1)[1].strip().lower()


def classify_source(url: str | None, company_domain: str | None = None) -> SourceType:
    """Map a URL to the kind of source it represents.

    Pages on the member's own company domain are first-party. Vendor
    enrichment APIs rank above press, which ranks above social profiles;
    anything unrecognised is treated as a directory listing.
    """
    host = url_domain(url)
    if not host:
        return SourceType.DIRECTORY

    company = url_domain(company_domain) if company_domain else ""
    if company and (host == company or host.endswith(f".{company}")):
        return SourceType.FIRST_PARTY
    if _matches(host, VENDOR_DOMAINS) or host.startswith("api."):
        return SourceType.VENDOR
    if _matches(host, PRESS_DOMAINS):
        return SourceType.PRESS
    if _matches(host, SOCIAL_DOMAINS):
        return SourceType.SOCIAL
    return SourceType.DIRECTORY


def link_slot(url: str | None) -> str | None:
    """Return the profile link slot (linkedin, github, x) a URL belongs in."""
    host = url_domain(url)
    for domain, slot in PLATFORM_LINK_SLOTS.items():
        if host == domain or host.endswith(f".{domain}"):
            return slot
    return None
