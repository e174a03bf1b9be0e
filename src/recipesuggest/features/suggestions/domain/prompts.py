# src/recipesuggest/features/suggestions/domain/prompts.py
from typing import Dict, List, Sequence

SUPPORTED_CUISINES = ("Malaysian", "Indonesian", "Korean", "Japanese")

RECIPE_SUGGEST_SYSTEM_PROMPT = """You are a helpful Asian cuisine chef. Given a list of ingredients, suggest 3 delicious Asian recipes (Malaysian, Indonesian, Korean, or Japanese) that can be made using those ingredients.

You MUST respond with valid JSON only, no markdown or other formatting. The response must be an array of recipe objects with this exact structure:
{
  "recipes": [
    {
      "name": "Recipe Name",
      "description": "Brief description of the dish",
      "cuisine": "Malaysian/Indonesian/Korean/Japanese",
      "cookTime": "30 mins",
      "ingredients": ["ingredient 1", "ingredient 2"],
      "instructions": ["Step 1", "Step 2", "Step 3"]
    }
  ]
}

Keep instructions concise (5-7 steps max). Focus on dishes that prominently feature the given ingredients."""

RECIPE_SUGGEST_USER_TEMPLATE = """I have these ingredients: {ingredients}

Suggest 3 Asian recipes I can make. Remember to respond with valid JSON only."""


def build_user_prompt(ingredients: Sequence[str]) -> str:
    return RECIPE_SUGGEST_USER_TEMPLATE.format(ingredients=", ".join(ingredients))


def build_messages(ingredients: Sequence[str]) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": RECIPE_SUGGEST_SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(ingredients)},
    ]
