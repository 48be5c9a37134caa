"""Outbound search links, built only from an item's own title and location."""

from __future__ import annotations

from urllib.parse import quote


def _encode(*parts: str) -> str:
    # Same character set as JavaScript's encodeURIComponent
    return quote(" ".join(part for part in parts if part), safe="-_.!~*'()")


def google_jobs_url(title: str, location: str, company: str = "") -> str:
    return f"https://www.google.com/search?q={_encode(title, company, location)}+jobs&ibp=htl;jobs"


def linkedin_jobs_url(title: str, location: str) -> str:
    return f"https://www.linkedin.com/jobs/search/?keywords={_encode(title, location)}"


def indeed_jobs_url(title: str, location: str) -> str:
    return f"https://www.indeed.com/jobs?q={_encode(title, location)}&l={_encode(location)}"


def google_shopping_url(name: str, category: str = "") -> str:
    return f"https://www.google.com/search?q={_encode(name, category)}+buy&tbm=shop"


def amazon_url(name: str) -> str:
    return f"https://www.amazon.com/s?k={_encode(name)}"


def walmart_url(name: str) -> str:
    return f"https://www.walmart.com/search?q={_encode(name)}"


def university_search_url(name: str, country: str, field: str = "") -> str:
    query = _encode(name, field, country, "university programs")
    return f"https://www.google.com/search?q={query}"


def scholarship_search_url(field: str, country: str, level: str) -> str:
    return f"https://www.google.com/search?q={_encode(field, level, 'scholarships', country)}"


def scholarship_url(title: str, sponsor: str = "") -> str:
    return f"https://www.google.com/search?q={_encode(title, sponsor, 'scholarship application')}"
