"""Tests for menu and label HTML parsing."""

from dining_planner.domain.catalog import Campus, Meal
from dining_planner.services.parsing import (
    is_blacklisted,
    parse_amount,
    parse_menu,
    parse_nutrition_label,
    parse_number,
    to_absolute_url,
)
from tests.conftest import BASE_URL, LABEL_HTML, MENU_HTML


def test_parse_nutrition_label_reads_all_fields() -> None:
    nutrition = parse_nutrition_label(LABEL_HTML)

    assert nutrition.serving_size == "1 EACH"
    assert nutrition.calories == 85
    assert nutrition.total_fat_g == 5
    assert nutrition.sat_fat_g == 1.5
    assert nutrition.cholesterol_mg == 185
    assert nutrition.sodium_mg == 1070
    assert nutrition.total_carb_g == 2
    assert nutrition.dietary_fiber_g == 0
    assert nutrition.protein_g == 7
    assert nutrition.ingredients == "Eggs, Milk, Salt"


def test_parse_nutrition_label_rejects_wrong_units() -> None:
    html = """
    <div id="specs"><table>
      <tr><td>Total Fat 5mg</td><td>Sodium 2g</td><td>Sat Fat 2 g</td></tr>
    </table></div>
    """

    nutrition = parse_nutrition_label(html)

    assert nutrition.total_fat_g is None
    assert nutrition.sodium_mg is None
    assert nutrition.sat_fat_g == 2
    assert nutrition.calories is None
    assert nutrition.ingredients is None


def test_parse_nutrition_label_empty_document() -> None:
    nutrition = parse_nutrition_label("<html></html>")

    assert nutrition.model_dump(exclude_none=True) == {}


def test_parse_menu_extracts_items() -> None:
    items = parse_menu(MENU_HTML, Campus.ATRIUM, Meal.LUNCH, "2026-01-20", BASE_URL)

    assert [item.name for item in items] == ["Scrambled Eggs", "Blueberry Muffin"]
    eggs, muffin = items
    assert eggs.link == "https://menu.test/foodpronet/label.aspx?RecNumAndPort=111"
    assert eggs.portion_size == "4 OZ"
    assert eggs.section == "Grill"
    assert eggs.campus is Campus.ATRIUM
    assert eggs.meal is Meal.LUNCH
    assert eggs.date == "2026-01-20"
    assert muffin.link == "https://menu.test/foodpronet/label.aspx?RecNumAndPort=222"
    assert muffin.section == "Bakery"
    assert muffin.portion_size is None


def test_parse_menu_portion_label_and_parent_heading() -> None:
    html = """
    <div>
      <fieldset>
        <div class="col-1"><label>Cheese Pizza</label></div>
        <span>Portion Size: 1 SLICE</span>
        <div class="col-3"><a href="https://other.test/label.aspx?id=9">N</a></div>
      </fieldset>
      <div class="station">Pizza</div>
    </div>
    """

    items = parse_menu(html, Campus.LIVINGSTON, Meal.DINNER, "2026-01-20", BASE_URL)

    assert len(items) == 1
    assert items[0].portion_size.startswith("1 SLICE")
    assert items[0].link == "https://other.test/label.aspx?id=9"
    assert items[0].section == "Pizza"


def test_parse_menu_ignores_generic_menu_heading_and_duplicates() -> None:
    fieldset = """
    <fieldset>
      <div class="col-1"><label>Fries</label></div>
      <div class="col-3"><a href="label.aspx?id=1">N</a></div>
    </fieldset>
    """
    html = f"<h2>Menu</h2>{fieldset}{fieldset}"

    items = parse_menu(html, Campus.LIVINGSTON, Meal.LUNCH, "2026-01-20", BASE_URL)

    assert len(items) == 1
    assert items[0].section is None


def test_number_helpers() -> None:
    assert parse_number("Calories 1,250") == 1250
    assert parse_number("none") is None
    assert parse_amount("Sodium 1,070 mg") == (1070, "mg")
    assert parse_amount("Protein 7G") == (7, "g")
    assert parse_amount("Protein") == (None, None)


def test_blacklist_and_urls() -> None:
    assert is_blacklisted("Create Your Own Salad")
    assert is_blacklisted("Custom Stir Fry")
    assert not is_blacklisted("Grilled Chicken")
    assert to_absolute_url("//label.aspx", BASE_URL) == f"{BASE_URL}label.aspx"
