"""Pattern Registry - map field names to local value generators.

Matching is first-match-wins over matchers sorted by priority (stable, so
equal priorities keep declaration order). The built-in table is tiered:

* 100/90/85: the key equals a canonical name (``email``, ``first_name``).
* 70/65/60: the key contains a keyword, with exclusions where a broader
  keyword would shadow a more specific rule.
* 60: suffix conventions (``...id``, ``...at``, ``...date``, ``...url``).
* 55: prefix conventions (``is...``, ``has...``, ``total...``).

Declaration order inside a tier is part of the behaviour; append new rules
rather than reordering existing ones.
"""

import random
import string
import uuid
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from fieldfill.models.pattern import PatternMatcher

# Data sets

FIRST_NAMES = [
    "Muhammad", "Ahmed", "Omar", "Ali", "Yusuf", "Ibrahim", "Hassan", "Khalid",
    "Sara", "Fatima", "Aisha", "Maryam", "Layla", "Noor", "Zainab", "Hana",
    "James", "John", "Michael", "David", "Emma", "Olivia", "Sophia", "Ava",
    "Carlos", "Maria", "Wei", "Yuki", "Priya", "Arjun", "Anna", "Max",
]

LAST_NAMES = [
    "Al-Hassan", "Khan", "Ali", "Rahman", "Ibrahim", "Malik", "Ahmad", "Hussein",
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Martinez", "Anderson", "Taylor", "Thomas", "Moore", "Jackson", "Lee", "Kim",
]

EMAIL_DOMAINS = [
    "gmail.com", "outlook.com", "yahoo.com", "company.com", "example.org",
    "email.com", "mail.com", "business.net", "work.io",
]

CITIES = [
    "Riyadh", "Jeddah", "Dubai", "Cairo", "London", "New York", "Tokyo",
    "Paris", "Berlin", "Sydney", "Toronto", "Singapore", "Mumbai", "Shanghai",
]

COUNTRIES = [
    "Saudi Arabia", "United Arab Emirates", "Egypt", "United States", "United Kingdom",
    "Germany", "France", "Japan", "Australia", "Canada", "India", "China", "Brazil",
]

STREETS = [
    "Main Street", "Oak Avenue", "Park Road", "King Fahd Road", "Olaya Street",
    "High Street", "Broadway", "Market Street", "First Avenue", "Second Street",
]

COMPANIES = [
    "TechCorp", "Global Solutions", "Digital Innovations", "Smart Systems",
    "Future Tech", "Cloud Services", "Data Dynamics", "Web Solutions",
]

JOB_TITLES = [
    "Software Engineer", "Product Manager", "Designer", "Data Analyst",
    "Marketing Manager", "Sales Representative", "HR Manager", "CEO", "CTO",
]

DEPARTMENTS = ["Engineering", "Marketing", "Sales", "HR", "Finance", "Operations"]

PRODUCT_NAMES = [
    "Premium Widget", "Smart Device", "Pro Tool", "Essential Kit",
    "Deluxe Package", "Basic Plan", "Advanced System", "Ultra Pro",
]

COLORS = ["Red", "Blue", "Green", "Yellow", "Orange", "Purple", "Pink", "Black", "White", "Gray"]

CATEGORIES = [
    "Electronics", "Clothing", "Home & Garden", "Sports", "Books",
    "Toys", "Food", "Health", "Beauty", "Automotive",
]

STATUSES = ["active", "pending", "completed", "cancelled", "processing", "shipped", "delivered"]

CURRENCIES = ["USD", "EUR", "GBP", "SAR", "AED", "JPY", "CNY", "INR"]

SIZES = ["XS", "S", "M", "L", "XL", "XXL"]

LOREM_WORDS = [
    "lorem", "ipsum", "dolor", "sit", "amet", "consectetur", "adipiscing", "elit",
    "sed", "do", "eiusmod", "tempor", "incididunt", "ut", "labore", "et", "dolore",
]

_YEAR = timedelta(days=365)


# Sampling helpers


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def _recent_datetime() -> datetime:
    return datetime.now(timezone.utc) - random.random() * _YEAR


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _sentence(low: int, high: int) -> str:
    return " ".join(LOREM_WORDS[: random.randint(low, high)]) + "."


def _coordinate(bound: int) -> float:
    return round(random.randint(-bound, bound - 1) + random.random(), 6)


# Generators

GENERATORS: Dict[str, Callable[[], Any]] = {
    # Identity
    "uuid": lambda: str(uuid.uuid4()),
    "id": lambda: random.randint(1, 999999),
    # Personal
    "first_name": lambda: random.choice(FIRST_NAMES),
    "last_name": lambda: random.choice(LAST_NAMES),
    "full_name": lambda: f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
    "username": lambda: f"{random.choice(FIRST_NAMES).lower()}{random.randint(100, 999)}",
    "email": lambda: (
        f"{random.choice(FIRST_NAMES).lower()}{random.randint(10, 99)}"
        f"@{random.choice(EMAIL_DOMAINS)}"
    ),
    "phone": lambda: (
        f"+1{random.randint(200, 999)}{random.randint(100, 999)}{random.randint(1000, 9999)}"
    ),
    "avatar": lambda: f"https://i.pravatar.cc/150?u={random.randint(1, 1000)}",
    "password": lambda: random_string(12),
    "age": lambda: random.randint(18, 65),
    "gender": lambda: random.choice(["male", "female", "other"]),
    "bio": lambda: (
        f"{random.choice(FIRST_NAMES)} is a {random.choice(JOB_TITLES)} "
        f"with {random.randint(1, 20)} years of experience."
    ),
    # Location
    "city": lambda: random.choice(CITIES),
    "country": lambda: random.choice(COUNTRIES),
    "street": lambda: f"{random.randint(1, 9999)} {random.choice(STREETS)}",
    "address": lambda: (
        f"{random.randint(1, 9999)} {random.choice(STREETS)}, {random.choice(CITIES)}"
    ),
    "zip_code": lambda: str(random.randint(10000, 99999)),
    "latitude": lambda: _coordinate(90),
    "longitude": lambda: _coordinate(180),
    # Business
    "company": lambda: random.choice(COMPANIES),
    "job_title": lambda: random.choice(JOB_TITLES),
    "department": lambda: random.choice(DEPARTMENTS),
    # E-commerce
    "product_name": lambda: f"{random.choice(COLORS)} {random.choice(PRODUCT_NAMES)}",
    "price": lambda: round(random.randint(10, 1000) + random.random(), 2),
    "quantity": lambda: random.randint(1, 100),
    "sku": lambda: f"SKU-{random_string(8).upper()}",
    "category": lambda: random.choice(CATEGORIES),
    "color": lambda: random.choice(COLORS),
    "size": lambda: random.choice(SIZES),
    "brand": lambda: random.choice(COMPANIES),
    "rating": lambda: round(random.randint(1, 4) + random.random(), 1),
    # Financial
    "amount": lambda: round(random.randint(100, 10000) + random.random(), 2),
    "currency": lambda: random.choice(CURRENCIES),
    "account_number": lambda: str(random.randint(1000000000, 9999999999)),
    "card_number": lambda: f"****-****-****-{random.randint(1000, 9999)}",
    # Dates
    "date": lambda: _recent_datetime().date().isoformat(),
    "datetime": lambda: _iso(_recent_datetime()),
    "timestamp": lambda: int(_recent_datetime().timestamp() * 1000),
    "time": lambda: f"{random.randint(0, 23):02d}:{random.randint(0, 59):02d}",
    # URLs
    "url": lambda: f"https://example.com/{random_string(8)}",
    "image_url": lambda: f"https://picsum.photos/seed/{random_string(8)}/400/300",
    "website_url": lambda: (
        f"https://www.{random.choice(COMPANIES).lower().replace(' ', '')}.com"
    ),
    # Content
    "title": lambda: " ".join(w.capitalize() for w in LOREM_WORDS[: random.randint(3, 6)]),
    "description": lambda: _sentence(10, 17),
    "paragraph": lambda: " ".join(_sentence(8, 15) for _ in range(random.randint(2, 4))),
    "content": lambda: "\n\n".join(_sentence(12, 17) for _ in range(random.randint(3, 5))),
    # Status
    "status": lambda: random.choice(STATUSES),
    "boolean": lambda: random.random() > 0.3,
    # Counts
    "count": lambda: random.randint(0, 1000),
    "total": lambda: random.randint(1, 10000),
    # Technical
    "ip": lambda: (
        f"{random.randint(1, 255)}.{random.randint(0, 255)}."
        f"{random.randint(0, 255)}.{random.randint(1, 255)}"
    ),
    "mac": lambda: ":".join(f"{random.randint(0, 255):02x}" for _ in range(6)),
    "version": lambda: f"{random.randint(1, 10)}.{random.randint(0, 20)}.{random.randint(0, 100)}",
    "token": lambda: random_string(32),
    "hash": lambda: random_string(64),
    # Collections
    "tags": lambda: [random.choice(CATEGORIES).lower() for _ in range(random.randint(2, 5))],
}


def _matcher(
    name: str,
    predicate: Callable[[str], bool],
    generator: str,
    priority: int = 50,
) -> PatternMatcher:
    return PatternMatcher(
        name=name,
        priority=priority,
        predicate=predicate,
        generator=GENERATORS[generator],
    )


def _is(*names: str) -> Callable[[str], bool]:
    options = frozenset(names)
    return lambda k: k in options


def _contains(*words: str, unless: Tuple[str, ...] = ()) -> Callable[[str], bool]:
    return lambda k: any(w in k for w in words) and not any(x in k for x in unless)


BUILTIN_PATTERNS: List[PatternMatcher] = [
    # Exact identity
    _matcher("uuid", _is("uuid", "guid"), "uuid", 100),
    _matcher("id", _is("id", "_id"), "id", 100),
    _matcher("email", _is("email", "mail"), "email", 100),
    _matcher("phone", _is("phone", "mobile", "telephone"), "phone", 100),
    _matcher("avatar", _is("avatar", "profilepicture", "profileimage"), "avatar", 100),
    _matcher("username", _is("username", "login"), "username", 100),
    _matcher("password", _is("password", "passwd"), "password", 100),
    # Names
    _matcher("first_name", _is("firstname", "first_name", "givenname"), "first_name", 90),
    _matcher(
        "last_name", _is("lastname", "last_name", "surname", "familyname"), "last_name", 90
    ),
    _matcher(
        "full_name", _is("fullname", "full_name", "name", "displayname"), "full_name", 85
    ),
    # Location
    _matcher("city", _is("city", "town"), "city", 90),
    _matcher("country", _is("country", "nation"), "country", 90),
    _matcher("street", _is("street", "streetname"), "street", 90),
    _matcher("zip_code", _is("zipcode", "zip", "postalcode", "postal"), "zip_code", 90),
    _matcher("address", _is("address", "location"), "address", 85),
    # Dates
    _matcher("created_at", _is("createdat", "created_at", "creationdate"), "datetime", 90),
    _matcher("updated_at", _is("updatedat", "updated_at", "modifiedat"), "datetime", 90),
    _matcher("deleted_at", _is("deletedat", "deleted_at"), "datetime", 90),
    _matcher("birth_date", _is("birthdate", "birthday", "dob", "dateofbirth"), "date", 90),
    # Business
    _matcher("company", _is("company", "organization", "org"), "company", 90),
    _matcher(
        "job_title",
        _is("jobtitle", "job_title", "title", "position", "role"),
        "job_title",
        85,
    ),
    # E-commerce
    _matcher("price", _is("price", "cost", "amount"), "price", 90),
    _matcher("quantity", _is("quantity", "qty", "stock"), "quantity", 90),
    _matcher("sku", _is("sku", "productcode"), "sku", 90),
    _matcher("category", _is("category", "type"), "category", 85),
    _matcher("color", _is("color", "colour"), "color", 90),
    _matcher("rating", _is("rating", "score", "stars"), "rating", 90),
    # Status
    _matcher("status", _is("status", "state"), "status", 90),
    # Content
    _matcher("description", _is("description", "desc", "summary"), "description", 85),
    _matcher("content", _is("content", "body", "text"), "content", 85),
    # URLs
    _matcher("url", _is("url", "link", "href"), "url", 90),
    _matcher("website", _is("website", "site", "homepage"), "website_url", 90),
    # Contains keyword
    _matcher("contains_email", _contains("email"), "email", 70),
    _matcher("contains_phone", _contains("phone", "mobile", "tel"), "phone", 70),
    _matcher("contains_name", _contains("name", unless=("file", "user")), "full_name", 60),
    _matcher("contains_url", _contains("url", "link"), "url", 70),
    _matcher("contains_image", _contains("image", "img", "photo", "picture"), "image_url", 70),
    _matcher("contains_price", _contains("price", "cost", "fee"), "price", 70),
    _matcher("contains_date", _contains("date", "time"), "datetime", 65),
    _matcher("contains_address", _contains("address", "location"), "address", 65),
    _matcher("contains_city", _contains("city"), "city", 70),
    _matcher("contains_country", _contains("country"), "country", 70),
    _matcher("contains_description", _contains("description", "desc"), "description", 65),
    _matcher("contains_title", _contains("title", "heading"), "title", 65),
    _matcher("contains_count", _contains("count", "total", "num"), "count", 65),
    # Suffixes
    _matcher("suffix_id", lambda k: k.endswith("id") and k != "id", "id", 60),
    _matcher("suffix_at", lambda k: k.endswith("at"), "datetime", 60),
    _matcher("suffix_date", lambda k: k.endswith("date"), "date", 60),
    _matcher("suffix_time", lambda k: k.endswith("time"), "time", 60),
    _matcher("suffix_url", lambda k: k.endswith("url"), "url", 60),
    _matcher("suffix_count", lambda k: k.endswith("count"), "count", 60),
    # Prefixes
    _matcher("prefix_is", lambda k: k.startswith("is"), "boolean", 55),
    _matcher("prefix_has", lambda k: k.startswith("has"), "boolean", 55),
    _matcher("prefix_can", lambda k: k.startswith("can"), "boolean", 55),
    _matcher("prefix_total", lambda k: k.startswith("total"), "total", 55),
    _matcher("prefix_num", lambda k: k.startswith("num"), "count", 55),
    # Geo
    _matcher("latitude", _is("lat", "latitude"), "latitude", 90),
    _matcher("longitude", _is("lng", "lon", "longitude"), "longitude", 90),
    # Technical
    _matcher("ip", _is("ip", "ipaddress", "ip_address"), "ip", 90),
    _matcher("token", _is("token", "accesstoken", "refreshtoken"), "token", 90),
    _matcher("version", _is("version", "ver"), "version", 90),
    # Profile and catalogue extras
    _matcher("age", _is("age"), "age", 90),
    _matcher("gender", _is("gender", "sex"), "gender", 90),
    _matcher("department", _is("department", "dept"), "department", 90),
    _matcher("brand", _is("brand", "manufacturer"), "brand", 90),
    _matcher("size", _is("size"), "size", 90),
    _matcher("currency", _is("currency", "currencycode"), "currency", 90),
    _matcher("tags", _is("tags", "labels", "keywords"), "tags", 90),
    _matcher("bio", _is("bio", "about"), "bio", 85),
]


class PatternRegistry:
    """Immutable, priority-ordered collection of pattern matchers."""

    def __init__(self, matchers: Iterable[PatternMatcher]):
        # sorted() is stable: equal priorities keep declaration order
        self._matchers: Tuple[PatternMatcher, ...] = tuple(
            sorted(matchers, key=lambda m: m.priority, reverse=True)
        )

    def find_match(self, key: str) -> Optional[PatternMatcher]:
        """Return the first matcher accepting the lower-cased key."""
        normalized = key.lower()
        for matcher in self._matchers:
            if matcher.predicate(normalized):
                return matcher
        return None

    def generate(self, key: str) -> Any:
        """Generate a value for a key, or None when nothing matches."""
        matcher = self.find_match(key)
        return matcher.generate() if matcher else None

    def with_matchers(self, extra: Iterable[PatternMatcher]) -> "PatternRegistry":
        """Return a new registry with additional matchers."""
        return PatternRegistry(self._matchers + tuple(extra))

    @property
    def names(self) -> List[str]:
        """Matcher names in match order."""
        return [m.name for m in self._matchers]

    def __iter__(self) -> Iterator[PatternMatcher]:
        return iter(self._matchers)

    def __len__(self) -> int:
        return len(self._matchers)


@lru_cache
def default_registry() -> PatternRegistry:
    """Get the registry of built-in patterns."""
    return PatternRegistry(BUILTIN_PATTERNS)


def sample_for_type(generate: Callable[[], Any], field_type: str, array_length: int) -> Any:
    """Call ``generate``, repeating it into a list when the field is an array.

    A generator that already returns a list (``tags``) is used as is, so an
    empty array is never replaced with a scalar.
    """
    value = generate()
    if field_type != "array" or isinstance(value, list):
        return value
    return [value] + [generate() for _ in range(array_length - 1)]
