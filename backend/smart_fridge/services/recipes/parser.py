"""Parse free-text model output into structured recipes.

The model is asked for blocks of the form::

    RECIPE:
    Title: Pad Krapow
    Match: 80%
    Available Ingredients:
    - 200 g chicken
    Missing Ingredients: 1 bunch holy basil
    Instructions:
    1. Heat the wok
    Cooking Time: 20 minutes
    Difficulty: easy

Nothing guarantees the model honors that layout, so parsing is a small state
machine over lines: a header line (``name: rest``) moves to the section named
in SECTION_TRANSITIONS, every other line is content for the current section.
Malformed blocks are dropped, never raised.
"""

import re
from enum import Enum
from typing import Callable, Optional

from smart_fridge.logging import get_logger
from smart_fridge.schemas.recipe import IngredientMention, ParsedRecipe
from smart_fridge.services.llm.prompts import RECIPE_DELIMITER

logger = get_logger(__name__)


class Section(Enum):
    NONE = "none"
    TITLE = "title"
    MATCH = "match"
    COOKING_TIME = "cooking time"
    DIFFICULTY = "difficulty"
    AVAILABLE = "available ingredients"
    MISSING = "missing ingredients"
    INSTRUCTIONS = "instructions"
    UNKNOWN = "unknown"


# Header text (lower-cased) -> next state. Anything else goes to UNKNOWN, whose content is discarded.
SECTION_TRANSITIONS: dict[str, Section] = {
    "title": Section.TITLE,
    "match": Section.MATCH,
    "cooking time": Section.COOKING_TIME,
    "difficulty": Section.DIFFICULTY,
    "available ingredients": Section.AVAILABLE,
    "missing ingredients": Section.MISSING,
    "instructions": Section.INSTRUCTIONS,
}

# A line starting with one of these is list content even if it contains a colon
HEADER_EXCLUDED_PREFIXES = ("-", "•")

UNIT_PATTERN = r"(?:cup|tablespoon|teaspoon|tbsp|tsp|g|ml|l|oz|pound|lb|kg)s?"
VULGAR_FRACTIONS = "½⅓⅔¼¾⅕⅖⅗⅘⅙⅚⅛⅜⅝⅞"

_BULLET_RE = re.compile(r"^(?:[-•]|\*(?=\s))\s*")
_QUANTITY_RE = re.compile(rf"^[\d\s/.\-{VULGAR_FRACTIONS}]+")
_UNIT_RE = re.compile(rf"^({UNIT_PATTERN})\.?(?=\s|$)", re.IGNORECASE)
_LEADING_OF_RE = re.compile(r"^of\s+", re.IGNORECASE)
_DIGITS_RE = re.compile(r"\d+")
_HAS_WORD_RE = re.compile(r"\w")


def split_header(line: str) -> Optional[tuple[str, str]]:
    """Return (section name, inline content) when `line` is a section header, else None."""
    if ":" not in line or line.startswith(HEADER_EXCLUDED_PREFIXES):
        return None
    head, _, rest = line.partition(":")
    # Tolerate markdown emphasis around labels, e.g. "**Title:** Larb"
    name = head.strip().strip("*#").strip().lower()
    content = rest.strip().lstrip("*").strip()
    return name, content


def parse_ingredient_line(line: str, available: bool) -> IngredientMention:
    """Split '2 cups of flour' into quantity '2', unit 'cups', name 'flour'."""
    text = _BULLET_RE.sub("", line.strip()).strip()
    quantity = ""
    unit = ""
    rest = text
    qty_match = _QUANTITY_RE.match(text)
    if qty_match and any(ch.isdigit() or ch in VULGAR_FRACTIONS for ch in qty_match.group(0)):
        quantity = qty_match.group(0).strip()
        rest = text[qty_match.end():]
        unit_match = _UNIT_RE.match(rest)
        if unit_match:
            unit = unit_match.group(1)
            rest = rest[unit_match.end():]
    name = _LEADING_OF_RE.sub("", rest.strip()).strip()
    if not name:
        # Nothing left after the quantity (e.g. "2 cups"): keep the raw text as the name
        name = text
        quantity = ""
        unit = ""
    return IngredientMention(name=name, quantity=quantity, unit=unit, available=available)


def parse_match_score(content: str) -> int:
    digits = _DIGITS_RE.search(content)
    if not digits:
        return 0
    return max(0, min(100, int(digits.group(0))))


class _RecipeBuilder:
    """Accumulates one block's fields while walking its lines."""

    def __init__(self) -> None:
        self.state = Section.NONE
        self.name: Optional[str] = None
        self.match_score: Optional[int] = None
        self.cooking_time: Optional[str] = None
        self.difficulty: Optional[str] = None
        self.available: list[IngredientMention] = []
        self.missing: list[IngredientMention] = []
        self.instructions: list[str] = []
        self._handlers: dict[Section, Callable[[str], None]] = {
            Section.TITLE: self._on_title,
            Section.MATCH: self._on_match,
            Section.COOKING_TIME: self._on_cooking_time,
            Section.DIFFICULTY: self._on_difficulty,
            Section.AVAILABLE: self._on_available,
            Section.MISSING: self._on_missing,
            Section.INSTRUCTIONS: self._on_instruction,
        }

    def feed(self, line: str) -> None:
        header = split_header(line)
        if header is not None:
            section_name, content = header
            self.state = SECTION_TRANSITIONS.get(section_name, Section.UNKNOWN)
            if not content:
                return
            line = content
        handler = self._handlers.get(self.state)
        # NONE (before any header) and UNKNOWN sections drop their content
        if handler is not None:
            handler(line)

    def _on_title(self, content: str) -> None:
        if self.name is None:
            self.name = content

    def _on_match(self, content: str) -> None:
        if self.match_score is None:
            self.match_score = parse_match_score(content)

    def _on_cooking_time(self, content: str) -> None:
        if self.cooking_time is None:
            self.cooking_time = content

    def _on_difficulty(self, content: str) -> None:
        if self.difficulty is None:
            self.difficulty = content

    def _on_available(self, content: str) -> None:
        self.available.append(parse_ingredient_line(content, available=True))

    def _on_missing(self, content: str) -> None:
        self.missing.append(parse_ingredient_line(content, available=False))

    def _on_instruction(self, content: str) -> None:
        self.instructions.append(content)

    def build(self) -> Optional[ParsedRecipe]:
        if not self.name or not (self.available or self.missing):
            return None
        return ParsedRecipe(
            name=self.name,
            match_score=self.match_score or 0,
            available_ingredients=self.available,
            missing_ingredients=self.missing,
            instructions=self.instructions,
            cooking_time=self.cooking_time,
            difficulty=self.difficulty,
        )


def parse_recipe_block(block: str) -> Optional[ParsedRecipe]:
    builder = _RecipeBuilder()
    for raw in block.splitlines():
        line = raw.strip()
        # Skip blanks and pure decoration such as "---" or "##"
        if not line or not _HAS_WORD_RE.search(line):
            continue
        builder.feed(line)
    return builder.build()


def parse_recipe_response(text: str) -> list[ParsedRecipe]:
    """Parse raw model text into recipes sorted by match score, highest first.

    Text without a single RECIPE: delimiter yields no recipes. Blocks that fail
    to parse, or lack a title or any ingredient, are skipped.
    """
    if not text or RECIPE_DELIMITER not in text:
        logger.info("parser.no_recipes chars=%s", len(text or ""))
        return []
    # Preamble before the first delimiter is a candidate too; without a title it is dropped
    blocks = [b for b in text.split(RECIPE_DELIMITER) if b.strip()]
    recipes: list[ParsedRecipe] = []
    for index, block in enumerate(blocks):
        try:
            recipe = parse_recipe_block(block)
        except Exception as e:  # noqa: BLE001 - one bad block must not sink the rest
            logger.warning("parser.block_failed index=%s error=%s", index, e)
            continue
        if recipe is None:
            logger.debug("parser.block_dropped index=%s reason=missing_name_or_ingredients", index)
            continue
        recipes.append(recipe)
    recipes.sort(key=lambda r: r.match_score, reverse=True)
    logger.info("parser.end blocks=%s recipes=%s", len(blocks), len(recipes))
    return recipes
