"""Static reference tables used to constrain inputs and enrich results."""

from __future__ import annotations

from typing import Literal, TypedDict

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "INR": "₹",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF",
    "SGD": "S$",
    "AED": "د.إ",
    "BRL": "R$",
    "MXN": "Mex$",
    "ZAR": "R",
    "KRW": "₩",
    "SEK": "kr",
    "NOK": "kr",
    "DKK": "kr",
    "PLN": "zł",
    "ILS": "₪",
    "NZD": "NZ$",
    "ARS": "ARS$",
}

COUNTRY_CURRENCY: dict[str, str] = {
    "United States": "USD",
    "United Kingdom": "GBP",
    "Canada": "CAD",
    "Australia": "AUD",
    "Germany": "EUR",
    "France": "EUR",
    "Netherlands": "EUR",
    "Switzerland": "CHF",
    "Singapore": "SGD",
    "United Arab Emirates": "AED",
    "India": "INR",
    "China": "CNY",
    "Japan": "JPY",
    "South Korea": "KRW",
    "Brazil": "BRL",
    "Mexico": "MXN",
    "Spain": "EUR",
    "Italy": "EUR",
    "Poland": "PLN",
    "Ireland": "EUR",
    "Sweden": "SEK",
    "Norway": "NOK",
    "Denmark": "DKK",
    "Finland": "EUR",
    "Belgium": "EUR",
    "Austria": "EUR",
    "New Zealand": "NZD",
    "Israel": "ILS",
    "South Africa": "ZAR",
    "Argentina": "ARS",
}

COUNTRIES: tuple[str, ...] = tuple(COUNTRY_CURRENCY)
COMPANY_SIZES: tuple[str, ...] = ("startup", "small", "medium", "large", "enterprise")
EDUCATION_LEVELS: tuple[str, ...] = ("high_school", "associate", "bachelor", "master", "phd")
WORK_MODES: tuple[str, ...] = ("remote", "hybrid", "onsite")


def currency_for(country: str) -> tuple[str, str]:
    currency = COUNTRY_CURRENCY.get(country, "USD")
    return currency, CURRENCY_SYMBOLS.get(currency, "$")


class Certification(TypedDict):
    name: str
    provider: str
    relevance: Literal["high", "medium"]
    timeframe: str
    costRange: str
    rationale: str


class Resource(TypedDict):
    type: Literal["book", "course", "podcast", "blog"]
    title: str
    author: str
    relevance: str
    priority: Literal["high", "medium"]


CertificationTrack = Literal[
    "strategic",
    "team_management",
    "communication",
    "change_management",
    "project_management",
    "agile",
]

CERTIFICATIONS: dict[CertificationTrack, tuple[Certification, ...]] = {
    "strategic": (
        {
            "name": "Executive Leadership Certificate",
            "provider": "Cornell University",
            "relevance": "high",
            "timeframe": "3-6 months",
            "costRange": "$3,000-$6,000",
            "rationale": "Develops strategic thinking and executive decision-making skills",
        },
        {
            "name": "Strategic Leadership and Management",
            "provider": "MIT Sloan",
            "relevance": "high",
            "timeframe": "2-3 months",
            "costRange": "$2,500-$5,000",
            "rationale": "Focuses on driving organizational change and innovation",
        },
    ),
    "team_management": (
        {
            "name": "Leadership and Management Certificate",
            "provider": "Harvard Extension School",
            "relevance": "high",
            "timeframe": "4-8 months",
            "costRange": "$5,000-$10,000",
            "rationale": "Comprehensive program covering team dynamics and people management",
        },
    ),
    "communication": (
        {
            "name": "Executive Communication Certificate",
            "provider": "Northwestern University",
            "relevance": "high",
            "timeframe": "2-3 months",
            "costRange": "$2,000-$4,000",
            "rationale": "Enhances communication effectiveness for leadership roles",
        },
    ),
    "change_management": (
        {
            "name": "Change Management Certification",
            "provider": "Prosci",
            "relevance": "high",
            "timeframe": "1-2 months",
            "costRange": "$3,000-$5,000",
            "rationale": "Industry-standard certification for leading organizational change",
        },
    ),
    "project_management": (
        {
            "name": "PMP (Project Management Professional)",
            "provider": "PMI",
            "relevance": "high",
            "timeframe": "3-6 months",
            "costRange": "$1,000-$2,000",
            "rationale": "Gold standard certification for project and program management",
        },
    ),
    "agile": (
        {
            "name": "Certified Scrum Master (CSM)",
            "provider": "Scrum Alliance",
            "relevance": "medium",
            "timeframe": "1-2 months",
            "costRange": "$1,000-$1,500",
            "rationale": "Essential for leading agile teams and transformations",
        },
    ),
}

# Skill keywords (lowercased substrings) that pull in each certification track.
TRACK_SKILL_KEYWORDS: dict[CertificationTrack, tuple[str, ...]] = {
    "team_management": ("team building", "delegation", "performance management"),
    "communication": ("communication", "stakeholder"),
    "change_management": ("change management", "vision setting"),
    "project_management": ("project management", "budget management"),
    "agile": ("agile",),
}

SENIOR_ROLE_KEYWORDS: tuple[str, ...] = ("MANAGER", "DIRECTOR", "VP", "EXECUTIVE", "HEAD", "CHIEF")

RESOURCES: tuple[Resource, ...] = (
    {
        "type": "book",
        "title": "The First 90 Days",
        "author": "Michael D. Watkins",
        "relevance": "Essential playbook for leadership transitions",
        "priority": "high",
    },
    {
        "type": "book",
        "title": "Leaders Eat Last",
        "author": "Simon Sinek",
        "relevance": "Builds understanding of servant leadership",
        "priority": "high",
    },
    {
        "type": "book",
        "title": "Dare to Lead",
        "author": "Brené Brown",
        "relevance": "Develops courage and vulnerability in leadership",
        "priority": "high",
    },
    {
        "type": "book",
        "title": "Radical Candor",
        "author": "Kim Scott",
        "relevance": "Teaches effective feedback and team management",
        "priority": "high",
    },
    {
        "type": "course",
        "title": "Leadership Principles",
        "author": "Amazon (via Coursera)",
        "relevance": "Learn leadership frameworks from top companies",
        "priority": "high",
    },
    {
        "type": "course",
        "title": "Inspirational Leadership",
        "author": "HEC Paris",
        "relevance": "Develop emotional intelligence and influence",
        "priority": "medium",
    },
    {
        "type": "podcast",
        "title": "HBR IdeaCast",
        "author": "Harvard Business Review",
        "relevance": "Weekly insights on leadership and management",
        "priority": "high",
    },
    {
        "type": "podcast",
        "title": "The Tim Ferriss Show",
        "author": "Tim Ferriss",
        "relevance": "Learn from world-class performers and leaders",
        "priority": "medium",
    },
)
