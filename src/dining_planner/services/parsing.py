"""HTML parsing for menu listings and nutrition labels."""

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from dining_planner.domain.catalog import Campus, FoodItem, Meal, NutritionInfo, dedupe

BLACKLIST = ("build", "custom", "create your own")

_SECTION_TAGS = {"h1", "h2", "h3", "h4", "legend"}
_SECTION_CLASSES = {"category", "menu-category", "menuCat", "station"}
_SECTION_SELECTOR = (
    "h1, h2, h3, h4, legend, .category, .menu-category, .menuCat, .station"
)

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_AMOUNT_RE = re.compile(r"(-?\d+(?:\.\d+)?)\s*(mg|g)\b", re.IGNORECASE)
_PORTION_RE = re.compile(
    r"portion\s*(?:size)?\s*[:\-]\s*([^|]+?)(?=$|\s{2,}|\|)", re.IGNORECASE
)
_SERVING_RE = re.compile(r"Serving Size\s*(.+?)(?=\s*Calories\b|$)", re.IGNORECASE)
_INGREDIENTS_PREFIX_RE = re.compile(r"^ingredients:\s*", re.IGNORECASE)

# (field, label pattern, required unit)
_NUTRIENT_CELLS = (
    ("total_fat_g", re.compile(r"Total Fat", re.IGNORECASE), "g"),
    ("sat_fat_g", re.compile(r"Sat\.?\s*Fat", re.IGNORECASE), "g"),
    ("cholesterol_mg", re.compile(r"Cholesterol", re.IGNORECASE), "mg"),
    ("sodium_mg", re.compile(r"Sodium", re.IGNORECASE), "mg"),
    ("total_carb_g", re.compile(r"Tot\.?\s*Carb", re.IGNORECASE), "g"),
    ("dietary_fiber_g", re.compile(r"Dietary Fiber", re.IGNORECASE), "g"),
    ("protein_g", re.compile(r"Protein", re.IGNORECASE), "g"),
)


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def parse_number(text: str) -> float | None:
    """Return the first number in the text, ignoring thousands separators."""
    match = _NUMBER_RE.search(text.replace(",", ""))
    if match is None:
        return None
    return float(match.group(0))


def parse_amount(text: str) -> tuple[float | None, str | None]:
    """Return (value, unit) for the first amount suffixed with g or mg."""
    match = _AMOUNT_RE.search(collapse_whitespace(text).replace(",", ""))
    if match is None:
        return None, None
    return parse_number(match.group(1)), match.group(2).lower()


def is_blacklisted(food_name: str) -> bool:
    """True for build-your-own style entries that have no fixed nutrition."""
    name = food_name.lower()
    return any(word in name for word in BLACKLIST)


def parse_nutrition_label(html: str) -> NutritionInfo:
    """Extract nutrition facts from a label page."""
    soup = BeautifulSoup(html, "html.parser")
    values: dict[str, object] = {}

    facts = soup.select_one("#facts")
    if facts is not None:
        serving = _serving_size(facts)
        if serving:
            values["serving_size"] = serving
        strong = facts.select_one("p.strong")
        if strong is not None:
            calories_text = collapse_whitespace(strong.get_text(" "))
            if "calories" in calories_text.lower():
                values["calories"] = parse_number(calories_text)

    cells = [
        collapse_whitespace(cell.get_text(" "))
        for cell in soup.select("#specs table td")
    ]
    for field_name, pattern, unit in _NUTRIENT_CELLS:
        cell = next((text for text in cells if pattern.search(text)), None)
        if cell is None:
            continue
        value, found_unit = parse_amount(cell)
        if found_unit == unit:
            values[field_name] = value

    for paragraph in soup.find_all("p"):
        text = paragraph.get_text(" ").strip()
        if text.upper().startswith("INGREDIENTS:"):
            values["ingredients"] = _INGREDIENTS_PREFIX_RE.sub(
                "", collapse_whitespace(text)
            ).strip()
            break

    return NutritionInfo(**values)


def parse_menu(
    html: str, campus: Campus, meal: Meal, iso_date: str, base_url: str
) -> list[FoodItem]:
    """Extract menu entries from a listing page.

    Each entry is a fieldset holding the name, a label link and, when the
    markup allows, a portion size and a station/section name.
    """
    soup = BeautifulSoup(html, "html.parser")
    items: list[FoodItem] = []
    for fieldset in soup.find_all("fieldset"):
        label = fieldset.select_one(".col-1 label")
        name = label.get_text().strip() if label is not None else ""
        if not name or is_blacklisted(name):
            continue
        anchor = fieldset.select_one(".col-3 a")
        href = str(anchor.get("href") or "").strip() if anchor is not None else ""
        if not href:
            continue
        items.append(
            FoodItem(
                campus=campus,
                meal=meal,
                section=detect_section(fieldset),
                name=name,
                link=to_absolute_url(href, base_url),
                date=iso_date,
                portion_size=_portion_size(fieldset),
            )
        )
    return dedupe(items)


def to_absolute_url(href: str, base_url: str) -> str:
    if re.match(r"^https?://", href, re.IGNORECASE):
        return href
    return urljoin(base_url, href.lstrip("/"))


def detect_section(fieldset: Tag) -> str | None:
    """Best-effort station name for a menu entry; markup varies by page."""
    legend = fieldset.find("legend")
    if legend is not None:
        text = legend.get_text().strip()
        if text:
            return _normalize_section(text)

    for sibling in fieldset.find_previous_siblings():
        if _is_section_heading(sibling):
            text = sibling.get_text().strip()
            if text:
                return _normalize_section(text)
            break

    if fieldset.parent is not None:
        heading = fieldset.parent.select_one(_SECTION_SELECTOR)
        if heading is not None:
            text = heading.get_text().strip()
            if text:
                return _normalize_section(text)
    return None


def _is_section_heading(tag: Tag) -> bool:
    if tag.name in _SECTION_TAGS:
        return True
    classes = tag.get("class") or []
    return any(cls in _SECTION_CLASSES for cls in classes)


def _normalize_section(text: str) -> str | None:
    cleaned = collapse_whitespace(text)
    if not cleaned or cleaned.lower() == "menu":
        return None
    return cleaned


def _portion_size(fieldset: Tag) -> str | None:
    text = collapse_whitespace(fieldset.get_text(" "))
    match = _PORTION_RE.search(text)
    if match:
        return match.group(1).strip() or None
    column = fieldset.select_one(".col-2")
    if column is not None:
        return collapse_whitespace(column.get_text(" ")) or None
    return None


def _serving_size(facts: Tag) -> str | None:
    for paragraph in facts.find_all("p"):
        text = collapse_whitespace(paragraph.get_text(" "))
        if "serving size" in text.lower():
            match = _SERVING_RE.search(text)
            if match:
                return match.group(1).strip() or None
    match = _SERVING_RE.search(collapse_whitespace(facts.get_text(" ")))
    if match:
        return match.group(1).strip() or None
    return None
