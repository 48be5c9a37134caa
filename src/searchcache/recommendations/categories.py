"""Per-category knowledge: request bodies, prompts, item shapes and fallbacks.

One generic search page is parameterised by a CategoryProfile instead of
keeping a near-identical copy of the cache/history code per category.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from searchcache.models.recommendation import RecommendationItem
from searchcache.models.search import HistoryEntry
from searchcache.recommendations import links

Normalizer = Callable[[dict[str, Any], HistoryEntry, int], RecommendationItem]


@dataclass(frozen=True)
class CategoryProfile:
    """Everything category-specific the generic components need."""

    name: str
    # Filters that define the search; anything else in ``filters`` is a label
    identity_filters: tuple[str, ...]
    search_body: Callable[[str, Mapping[str, str]], dict[str, Any]]
    build_prompt: Callable[[HistoryEntry], str]
    normalize: Normalizer
    fallback: Callable[[HistoryEntry], list[RecommendationItem]]

    def identity_of(self, filters: Mapping[str, str]) -> dict[str, str]:
        return {name: filters[name] for name in self.identity_filters if name in filters}


def _text(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return str(value)


def _list(raw: dict[str, Any], key: str, default: list[str]) -> list[str]:
    value = raw.get(key)
    if isinstance(value, list) and value:
        return [str(v) for v in value]
    return list(default)


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


def _job_location(entry: HistoryEntry) -> str:
    city = entry.filters.get("city", "")
    country = entry.filters.get("country_name") or entry.filters.get("country", "")
    return ", ".join(part for part in (city, country) if part)


def _job_links(title: str, location: str, company: str = "") -> dict[str, str]:
    return {
        "google": links.google_jobs_url(title, location, company),
        "linkedin": links.linkedin_jobs_url(title, location),
        "indeed": links.indeed_jobs_url(title, location),
    }


def _jobs_search_body(query: str, filters: Mapping[str, str]) -> dict[str, Any]:
    return {
        "query": query,
        "country": filters.get("country", "").lower(),
        "city": filters.get("city", "").lower(),
        "page": 1,
    }


def _jobs_prompt(entry: HistoryEntry) -> str:
    location = _job_location(entry)
    return f"""You are a career advisor and job search expert. Based on the following
job search criteria:

Job Title: "{entry.query}"
Location: "{location}"

Please provide 6-8 additional job title recommendations that are related to the search
but offer different career paths, are in high demand in {location}, and have good growth
potential. Use real company names where possible.

Format the response as a JSON array of objects with these exact fields:
[
  {{
    "title": "Specific Job Title",
    "description": "Brief description",
    "skills": ["skill1", "skill2", "skill3"],
    "salary": "Realistic salary range like $80,000 - $120,000",
    "whyGood": "Why it's a good alternative",
    "type": "Full-time/Remote/Hybrid/Contract",
    "experience": "Entry-level/Mid-level/Senior",
    "company": "Real Company 1, Real Company 2",
    "location": "{location}",
    "growth": "High/Medium/Low demand"
  }}
]"""


def _jobs_normalize(raw: dict[str, Any], entry: HistoryEntry, index: int) -> RecommendationItem:
    title = _text(raw, "title", f"{entry.query} Specialist")
    location = _text(raw, "location", _job_location(entry))
    company = _text(raw, "company", "Various Companies")
    item_links = _job_links(title, location, company)
    return RecommendationItem(
        id=f"ai-jobs-{index}",
        title=title,
        rationale=_text(raw, "whyGood", "Growing demand in this location"),
        links=item_links,
        primary_link=item_links["google"],
        source="ai",
        details={
            "description": _text(
                raw, "description", f"AI-recommended {entry.query} role in {location}"
            ),
            "company": company,
            "location": location,
            "salary": _text(raw, "salary", "Competitive salary"),
            "job_type": _text(raw, "type", "Full-time"),
            "experience": _text(raw, "experience", "2-5 years"),
            "skills": _list(raw, "skills", ["Adaptability", "Problem Solving", "Communication"]),
            "growth": _text(raw, "growth", "High demand"),
        },
    )


_JOB_TITLE_TEMPLATES = (
    "{q} Manager",
    "Senior {q}",
    "{q} Analyst",
    "{q} Consultant",
    "Lead {q}",
    "{q} Developer",
    "{q} Specialist",
    "{q} Coordinator",
)
_JOB_COMPANIES = (
    "Google, Microsoft, Amazon",
    "Apple, Facebook, Netflix",
    "IBM, Oracle, SAP",
    "Salesforce, Adobe, Intuit",
    "Tesla, SpaceX, Boeing",
    "Uber, Lyft, DoorDash",
    "Airbnb, Booking.com, Expedia",
    "Spotify, Netflix, Disney",
)
_JOB_TYPES = ("Full-time", "Remote", "Hybrid", "Contract")
_JOB_LEVELS = ("Entry-level", "Mid-level", "Senior", "Mid-level")
_JOB_GROWTH = ("High", "Medium", "High", "Medium")


def _jobs_fallback(entry: HistoryEntry) -> list[RecommendationItem]:
    location = _job_location(entry)
    items = []
    for index, template in enumerate(_JOB_TITLE_TEMPLATES):
        title = template.format(q=entry.query)
        company = _JOB_COMPANIES[index]
        item_links = _job_links(title, location, company)
        items.append(
            RecommendationItem(
                id=f"fallback-jobs-{index}",
                title=title,
                rationale="High demand role with good growth potential",
                links=item_links,
                primary_link=item_links["google"],
                source="fallback",
                details={
                    "description": (
                        f"AI-recommended position based on your search for {entry.query}"
                    ),
                    "company": company,
                    "location": location,
                    "salary": "$80,000 - $120,000",
                    "job_type": _JOB_TYPES[index % 4],
                    "experience": _JOB_LEVELS[index % 4],
                    "skills": ["Communication", "Problem Solving", "Teamwork", "Technical Skills"],
                    "growth": _JOB_GROWTH[index % 4],
                },
            )
        )
    return items


JOBS = CategoryProfile(
    name="jobs",
    identity_filters=("country", "city"),
    search_body=_jobs_search_body,
    build_prompt=_jobs_prompt,
    normalize=_jobs_normalize,
    fallback=_jobs_fallback,
)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def _product_links(name: str, category: str = "") -> dict[str, str]:
    return {
        "google": links.google_shopping_url(name, category),
        "amazon": links.amazon_url(name),
        "walmart": links.walmart_url(name),
    }


def _price_range(entry: HistoryEntry) -> str:
    low = entry.filters.get("min_price", "")
    high = entry.filters.get("max_price", "")
    if low and high:
        return f"${low} - ${high}"
    return ""


def _products_search_body(query: str, filters: Mapping[str, str]) -> dict[str, Any]:
    body: dict[str, Any] = {"query": query}
    if filters.get("min_price"):
        body["minPrice"] = filters["min_price"]
    if filters.get("max_price"):
        body["maxPrice"] = filters["max_price"]
    return body


def _products_prompt(entry: HistoryEntry) -> str:
    budget = _price_range(entry) or "any budget"
    return f"""You are a shopping assistant. A shopper searched for "{entry.query}" with {budget}.

Please provide 6-8 alternative or complementary product recommendations with real brands.

Format the response as a JSON array of objects with these exact fields:
[
  {{
    "name": "Product Name",
    "description": "Brief description",
    "brand": "Brand",
    "category": "Category",
    "price": "Price range",
    "rating": "4.5",
    "features": ["feature1", "feature2", "feature3"],
    "whyGood": "Why it's a good alternative",
    "retailers": "Amazon, Walmart, Target"
  }}
]"""


def _products_normalize(
    raw: dict[str, Any], entry: HistoryEntry, index: int
) -> RecommendationItem:
    name = _text(raw, "name", f"{entry.query} Alternative")
    category = _text(raw, "category", "General")
    item_links = _product_links(name, category)
    return RecommendationItem(
        id=f"ai-products-{index}",
        title=name,
        rationale=_text(raw, "whyGood", "Excellent alternative with great features"),
        links=item_links,
        primary_link=item_links["google"],
        source="ai",
        details={
            "description": _text(
                raw, "description", f"AI-recommended alternative to {entry.query}"
            ),
            "brand": _text(raw, "brand", "Various Brands"),
            "category": category,
            "price": _text(raw, "price", "Price varies"),
            "rating": _text(raw, "rating", "4.0"),
            "features": _list(raw, "features", ["High quality", "Good value", "Popular choice"]),
            "retailers": _text(raw, "retailers", "Amazon, Walmart, Target"),
        },
    )


_PRODUCT_NAME_TEMPLATES = (
    "{q} Pro",
    "Premium {q}",
    "{q} with Advanced Features",
    "Budget {q}",
    "{q} Alternative",
    "{q} Deluxe Edition",
    "Smart {q}",
    "{q} Wireless Version",
)
_PRODUCT_BRANDS = (
    "Samsung, Sony, LG",
    "Apple, Microsoft, Google",
    "Amazon Basics, Anker, Belkin",
    "Dyson, Shark, Bissell",
    "Nike, Adidas, Under Armour",
    "KitchenAid, Cuisinart, Ninja",
    "Dell, HP, Lenovo",
    "Nest, Ring, Arlo",
)
_PRODUCT_CATEGORIES = (
    "Electronics",
    "Home & Kitchen",
    "Clothing & Accessories",
    "Health & Beauty",
    "Sports & Outdoors",
    "Books & Media",
    "Toys & Games",
    "Automotive",
)
_PRODUCT_RATINGS = ("4.6", "4.4", "4.2", "4.5", "4.1", "4.7", "4.3", "4.0")


def _products_fallback(entry: HistoryEntry) -> list[RecommendationItem]:
    price = _price_range(entry) or "$49.99 - $129.99"
    items = []
    for index, template in enumerate(_PRODUCT_NAME_TEMPLATES):
        name = template.format(q=entry.query)
        category = _PRODUCT_CATEGORIES[index]
        item_links = _product_links(name, category)
        items.append(
            RecommendationItem(
                id=f"fallback-products-{index}",
                title=name,
                rationale="Popular alternative with similar features at competitive price",
                links=item_links,
                primary_link=item_links["google"],
                source="fallback",
                details={
                    "description": (
                        f"AI-recommended alternative to {entry.query} with excellent features"
                    ),
                    "brand": _PRODUCT_BRANDS[index],
                    "category": category,
                    "price": price,
                    "rating": _PRODUCT_RATINGS[index],
                    "features": [
                        "High quality materials",
                        "Excellent customer reviews",
                        "Great value for money",
                    ],
                    "retailers": "Amazon, Walmart, Best Buy",
                },
            )
        )
    return items


PRODUCTS = CategoryProfile(
    name="products",
    identity_filters=("min_price", "max_price"),
    search_body=_products_search_body,
    build_prompt=_products_prompt,
    normalize=_products_normalize,
    fallback=_products_fallback,
)


# ---------------------------------------------------------------------------
# Universities (query is the field of study)
# ---------------------------------------------------------------------------


def _university_links(name: str, country: str, field: str, level: str) -> dict[str, str]:
    return {
        "google": links.university_search_url(name, country, field),
        "scholarships": links.scholarship_search_url(field, country, level),
    }


def _universities_search_body(query: str, filters: Mapping[str, str]) -> dict[str, Any]:
    country = filters.get("country", "").lower()
    return {
        "country": "usa" if country == "united states of america" else country,
        "studyLevel": filters.get("study_level", "").lower(),
        "field": query.lower(),
    }


def _universities_prompt(entry: HistoryEntry) -> str:
    country = entry.filters.get("country", "")
    level = entry.filters.get("study_level", "")
    return f"""You are an international education advisor. A student is looking for:

Country: "{country}"
Study Level: "{level}"
Field of Study: "{entry.query}"

Please provide 3-4 alternative university and program recommendations with strong
programs in the field, good scholarship opportunities and good career outcomes.

Format the response as a JSON array of objects with these fields:
[
  {{
    "name": "University Name",
    "location": "City, Country",
    "whyGood": "Why it's a good alternative",
    "programStrength": "Program strength description",
    "tuition": "Tuition range",
    "scholarshipAvailability": "High/Medium/Low",
    "keyFeatures": ["Feature 1", "Feature 2", "Feature 3"],
    "type": "Public/Private/Research University",
    "ranking": "World ranking if known"
  }}
]"""


def _universities_normalize(
    raw: dict[str, Any], entry: HistoryEntry, index: int
) -> RecommendationItem:
    field = entry.query
    country = entry.filters.get("country", "")
    level = entry.filters.get("study_level", "")
    name = _text(raw, "name", f"Top University for {field}")
    location = _text(raw, "location", country)
    item_links = _university_links(name, location, field, level)
    return RecommendationItem(
        id=f"ai-universities-{index}",
        title=name,
        rationale=_text(raw, "whyGood", f"Excellent {field} program in {country}"),
        links=item_links,
        primary_link=item_links["google"],
        source="ai",
        details={
            "location": location,
            "program_strength": _text(
                raw, "programStrength", "Strong program in selected field"
            ),
            "tuition": _text(raw, "tuition", "$15,000 - $30,000 per year"),
            "scholarship_availability": _text(raw, "scholarshipAvailability", "Medium"),
            "key_features": _list(
                raw,
                "keyFeatures",
                [
                    "Research opportunities",
                    "International student support",
                    "Industry connections",
                ],
            ),
            "type": _text(raw, "type", "Research University"),
            "ranking": _text(raw, "ranking", "Top 200 globally"),
            "field": field,
            "study_level": level,
        },
    )


def _universities_fallback(entry: HistoryEntry) -> list[RecommendationItem]:
    field = entry.query
    country = entry.filters.get("country", "") or "International"
    level = entry.filters.get("study_level", "")
    stem = country.split(" ")[0]
    templates = (
        (
            f"University of {stem}",
            f"{stem}, {country}",
            f"Leading public university with strong {field} programs and research opportunities",
            f"Top-ranked {field} program in the country",
            "$10,000 - $25,000 per year",
            "High",
            ["Research-focused", "Industry partnerships", "International student office"],
            "Public Research University",
            "Top 100 globally",
        ),
        (
            f"{stem} Institute of Technology",
            f"Major City, {country}",
            f"Technical university with excellent {field} programs and strong industry connections",
            f"Specialized {field} curriculum with practical focus",
            "$20,000 - $35,000 per year",
            "Medium",
            ["Technical focus", "Startup incubation", "Career services"],
            "Technical University",
            "Top 150 globally",
        ),
        (
            "Global International University",
            f"Capital City, {country}",
            f"Comprehensive university with diverse {field} programs"
            " and an international community",
            f"Interdisciplinary {field} programs with global perspective",
            "$15,000 - $28,000 per year",
            "High",
            ["International community", "Study abroad programs", "Research centers"],
            "Comprehensive University",
            "Top 200 globally",
        ),
    )
    items = []
    for index, (name, location, why, strength, tuition, aid, features, kind, rank) in enumerate(
        templates
    ):
        item_links = _university_links(name, country, field, level)
        items.append(
            RecommendationItem(
                id=f"fallback-universities-{index}",
                title=name,
                rationale=why,
                links=item_links,
                primary_link=item_links["google"],
                source="fallback",
                details={
                    "location": location,
                    "program_strength": strength,
                    "tuition": tuition,
                    "scholarship_availability": aid,
                    "key_features": features,
                    "type": kind,
                    "ranking": rank,
                    "field": field,
                    "study_level": level,
                },
            )
        )
    return items


UNIVERSITIES = CategoryProfile(
    name="universities",
    identity_filters=("country", "study_level"),
    search_body=_universities_search_body,
    build_prompt=_universities_prompt,
    normalize=_universities_normalize,
    fallback=_universities_fallback,
)


# ---------------------------------------------------------------------------
# Scholarships (same search form as universities, separate tab and cache)
# ---------------------------------------------------------------------------


def _scholarship_links(title: str, sponsor: str, entry: HistoryEntry) -> dict[str, str]:
    return {
        "google": links.scholarship_url(title, sponsor),
        "search": links.scholarship_search_url(
            entry.query, entry.filters.get("country", ""), entry.filters.get("study_level", "")
        ),
    }


def _scholarships_prompt(entry: HistoryEntry) -> str:
    country = entry.filters.get("country", "")
    level = entry.filters.get("study_level", "")
    return f"""You are a student funding advisor. A student is looking for scholarships:

Country: "{country}"
Study Level: "{level}"
Field of Study: "{entry.query}"

Please provide 4-6 real scholarship, grant or fellowship programs open to international
students at this level, preferring fully or substantially funded awards.

Format the response as a JSON array of objects with these fields:
[
  {{
    "title": "Scholarship Name",
    "sponsor": "Awarding organisation",
    "amount": "Award amount or Full tuition",
    "deadline": "YYYY-MM-DD or Varies",
    "location": "Country where it can be used",
    "studyLevel": "{level}",
    "eligibility": "Who can apply",
    "whyGood": "Why it fits this student"
  }}
]"""


def _scholarships_normalize(
    raw: dict[str, Any], entry: HistoryEntry, index: int
) -> RecommendationItem:
    country = entry.filters.get("country", "")
    title = _text(raw, "title", "") or _text(raw, "name", f"{entry.query} Scholarship")
    sponsor = _text(raw, "sponsor", "Sponsor")
    item_links = _scholarship_links(title, sponsor, entry)
    return RecommendationItem(
        id=f"ai-scholarships-{index}",
        title=title,
        rationale=_text(raw, "whyGood", f"Funding for {entry.query} students in {country}"),
        links=item_links,
        primary_link=item_links["google"],
        source="ai",
        details={
            "sponsor": sponsor,
            "amount": _text(raw, "amount", "Amount Varies"),
            "deadline": _text(raw, "deadline", "Varies"),
            "location": _text(raw, "location", country or "Location N/A"),
            "study_level": _text(raw, "studyLevel", entry.filters.get("study_level") or "All Levels"),
            "eligibility": _text(raw, "eligibility", "International students"),
            "field": entry.query,
        },
    )


_SCHOLARSHIP_TEMPLATES = (
    ("{field} Excellence Scholarship", "University Partnerships", "Full tuition"),
    ("International {field} Merit Award", "Ministry of Education", "$10,000 per year"),
    ("Global {field} Fellowship", "Research Foundation", "$25,000 stipend"),
    ("{field} Access Grant", "Private Foundations", "Amount Varies"),
)


def _scholarships_fallback(entry: HistoryEntry) -> list[RecommendationItem]:
    country = entry.filters.get("country", "") or "International"
    level = entry.filters.get("study_level", "") or "All Levels"
    items = []
    for index, (template, sponsor, amount) in enumerate(_SCHOLARSHIP_TEMPLATES):
        title = template.format(field=entry.query)
        item_links = _scholarship_links(title, sponsor, entry)
        items.append(
            RecommendationItem(
                id=f"fallback-scholarships-{index}",
                title=title,
                rationale=f"Common funding route for {level} {entry.query} students",
                links=item_links,
                primary_link=item_links["search"],
                source="fallback",
                details={
                    "sponsor": sponsor,
                    "amount": amount,
                    "deadline": "Varies",
                    "location": country,
                    "study_level": level,
                    "eligibility": "International students",
                    "field": entry.query,
                },
            )
        )
    return items


SCHOLARSHIPS = CategoryProfile(
    name="scholarships",
    identity_filters=("country", "study_level"),
    search_body=_universities_search_body,
    build_prompt=_scholarships_prompt,
    normalize=_scholarships_normalize,
    fallback=_scholarships_fallback,
)


CATEGORIES: dict[str, CategoryProfile] = {
    profile.name: profile for profile in (JOBS, PRODUCTS, UNIVERSITIES, SCHOLARSHIPS)
}
