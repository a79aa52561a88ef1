RECIPE_PROMPT_VERSION = "v2"
RECIPE_MODE_PROMPT_VERSION = "v1"

RECIPE_DELIMITER = "RECIPE:"

RECIPE_PROMPT_TEMPLATE = """Here are my current ingredients:
{ingredient_lines}

Suggest {recipe_count} recipes{cuisine_clause}, sorted by how many of my ingredients they use. For each recipe, return in this exact format:

RECIPE:
Title: [recipe name]
Match: [percentage of ingredients I already have]
Available Ingredients: [list ingredients I already have that are used, one per line, be specific with quantities]
Missing Ingredients: [list ingredients I don't have that are needed, one per line, be specific with quantities]
Instructions: [numbered list of steps, one per line]
Cooking Time: [estimated time]
Difficulty: [easy, medium, or hard]

Make sure to ONLY include ingredients from my list in the "Available Ingredients" section."""

CUISINE_CLAUSE = " with a focus on {cuisine} cuisine if possible"

RECIPE_MODE_SINGLE_HEADER = "Generate a recipe based on the following ingredients:\n\n"
RECIPE_MODE_MULTIPLE_HEADER = (
    "Based on the following ingredients, generate 3 different recipe options "
    "ranked by how well they match the available ingredients:\n\n"
)

RECIPE_MODE_SINGLE_FORMAT = """Please format the response with these sections:
Recipe Name:
Ingredients:
Instructions:
Cooking Time:
Difficulty:
Alternative Ingredients (for missing ones):"""

RECIPE_MODE_MULTIPLE_FORMAT = """Please provide three recipes in the following format:

RECIPE OPTION 1:
Recipe Name:
Match Score: (Give a percentage indicating how well this recipe matches the available ingredients)
Ingredients:
- Available: (List the ingredients this recipe uses that the user already has)
- Missing: (List the ingredients this recipe needs that the user doesn't have)
Instructions:
Cooking Time:
Difficulty:

RECIPE OPTION 2:
(Follow the same format)

RECIPE OPTION 3:
(Follow the same format)"""
