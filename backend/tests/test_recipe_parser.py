import pytest

from smart_fridge.services.recipes import parser
from smart_fridge.services.recipes.parser import (
    Section,
    SECTION_TRANSITIONS,
    parse_ingredient_line,
    parse_match_score,
    parse_recipe_block,
    parse_recipe_response,
    split_header,
)

from conftest import SAMPLE_RESPONSE


def test_parse_sample_response_sorted_by_match():
    recipes = parse_recipe_response(SAMPLE_RESPONSE)
    assert [r.name for r in recipes] == ["Garlic Rice", "Pad Krapow Gai"]
    rice, krapow = recipes
    assert rice.match_score == 100
    assert krapow.match_score == 67
    assert [m.name for m in krapow.available_ingredients] == ["chicken", "cloves garlic"]
    assert [m.name for m in krapow.missing_ingredients] == ["bunch holy basil"]
    assert krapow.instructions == ["1. Fry the garlic", "2. Add the chicken and basil"]
    assert krapow.cooking_time == "20 minutes"
    assert krapow.difficulty == "easy"
    assert all(m.available for m in krapow.available_ingredients)
    assert not any(m.available for m in krapow.missing_ingredients)


def test_exact_layout_round_trips():
    text = (
        "RECIPE:\n"
        "Title: Tom Yum\n"
        "Match: 50%\n"
        "Available Ingredients:\n"
        "- 2 cups water\n"
        "Missing Ingredients:\n"
        "- 3 stalks lemongrass\n"
        "Instructions:\n"
        "Boil water\n"
        "Add lemongrass\n"
        "Cooking Time: 30 minutes\n"
        "Difficulty: medium\n"
    )
    (recipe,) = parse_recipe_response(text)
    assert recipe.name == "Tom Yum"
    assert recipe.match_score == 50
    water = recipe.available_ingredients[0]
    assert (water.quantity, water.unit, water.name) == ("2", "cups", "water")
    lemongrass = recipe.missing_ingredients[0]
    assert (lemongrass.quantity, lemongrass.unit, lemongrass.name) == ("3", "", "stalks lemongrass")
    assert recipe.instructions == ["Boil water", "Add lemongrass"]
    assert recipe.cooking_time == "30 minutes"
    assert recipe.difficulty == "medium"


def test_inline_sections_round_trip():
    text = (
        "RECIPE:\nTitle: X\nMatch: 80\nAvailable Ingredients: 2 cups Flour\n"
        "Missing Ingredients: 1 Egg\nInstructions: Mix well\n"
    )
    (recipe,) = parse_recipe_response(text)
    assert recipe.name == "X"
    assert recipe.match_score == 80
    (flour,) = recipe.available_ingredients
    assert (flour.name, flour.quantity, flour.unit, flour.available) == ("Flour", "2", "cups", True)
    (egg,) = recipe.missing_ingredients
    assert (egg.name, egg.available) == ("Egg", False)
    assert recipe.instructions == ["Mix well"]


def test_no_delimiter_yields_nothing():
    assert parse_recipe_response("Sorry, I can't help with that.") == []
    assert parse_recipe_response("") == []


def test_malformed_block_is_skipped():
    text = (
        "RECIPE:\nMatch: 90%\nInstructions:\nStir\n"
        "RECIPE:\nTitle: Omelette\nMatch: 40%\nAvailable Ingredients:\n- 2 eggs\n"
    )
    recipes = parse_recipe_response(text)
    assert [r.name for r in recipes] == ["Omelette"]


def test_block_without_ingredients_is_dropped():
    assert parse_recipe_block("Title: Air\nMatch: 100%\nInstructions:\nBreathe") is None


def test_ties_keep_model_order():
    text = "".join(
        f"RECIPE:\nTitle: Dish {i}\nMatch: 50%\nAvailable Ingredients:\n- rice\n" for i in range(3)
    )
    assert [r.name for r in parse_recipe_response(text)] == ["Dish 0", "Dish 1", "Dish 2"]


def test_unknown_section_content_is_ignored():
    block = (
        "Title: Larb\n"
        "Available Ingredients:\n- pork\n"
        "Notes:\nServe with sticky rice\n"
        "Missing Ingredients:\n- mint\n"
    )
    recipe = parse_recipe_block(block)
    assert [m.name for m in recipe.all_ingredients()] == ["pork", "mint"]
    assert recipe.instructions == []


def test_inline_ingredient_after_header():
    recipe = parse_recipe_block("Title: Toast\nAvailable Ingredients: 2 slices bread\n")
    assert [m.name for m in recipe.available_ingredients] == ["slices bread"]
    assert recipe.available_ingredients[0].quantity == "2"


def test_first_title_wins():
    recipe = parse_recipe_block("Title: First\nTitle: Second\nAvailable Ingredients:\n- salt\n")
    assert recipe.name == "First"


def test_markdown_labels_and_decoration():
    block = "**Title:** Som Tam\n---\n**Available Ingredients:**\n- 1 papaya\n"
    recipe = parse_recipe_block(block)
    assert recipe.name == "Som Tam"
    assert [m.name for m in recipe.available_ingredients] == ["papaya"]


@pytest.mark.parametrize(
    "line,expected",
    [
        ("- 2 cups of flour", ("2", "cups", "flour")),
        ("• 200 g chicken", ("200", "g", "chicken")),
        ("* 1 tbsp fish sauce", ("1", "tbsp", "fish sauce")),
        ("½ tsp salt", ("½", "tsp", "salt")),
        ("1/2 lb beef", ("1/2", "lb", "beef")),
        ("3 garlic cloves", ("3", "", "garlic cloves")),
        ("2 large eggs", ("2", "", "large eggs")),
        ("lime juice", ("", "", "lime juice")),
        ("2 cups", ("", "", "2 cups")),
    ],
)
def test_parse_ingredient_line(line, expected):
    mention = parse_ingredient_line(line, available=True)
    assert (mention.quantity, mention.unit, mention.name) == expected
    assert mention.available is True


@pytest.mark.parametrize(
    "content,score",
    [("85%", 85), ("about 70 percent", 70), ("150%", 100), ("none", 0), ("", 0)],
)
def test_parse_match_score(content, score):
    assert parse_match_score(content) == score


def test_split_header():
    assert split_header("Cooking Time: 20 minutes") == ("cooking time", "20 minutes")
    assert split_header("- 1 tsp salt: fine") is None
    assert split_header("no colon here") is None


def test_transition_table_covers_every_named_section():
    named = {s for s in Section if s not in (Section.NONE, Section.UNKNOWN)}
    assert set(SECTION_TRANSITIONS.values()) == named


def test_block_that_raises_is_skipped(monkeypatch):
    real_parse_block = parser.parse_recipe_block

    def flaky(block):
        if "Title: A" in block:
            raise RuntimeError("unexpected layout")
        return real_parse_block(block)

    monkeypatch.setattr(parser, "parse_recipe_block", flaky)
    text = (
        "RECIPE:\nTitle: A\nAvailable Ingredients:\n- rice\n"
        "RECIPE:\nTitle: B\nAvailable Ingredients:\n- noodles\n"
    )
    assert [r.name for r in parse_recipe_response(text)] == ["B"]
