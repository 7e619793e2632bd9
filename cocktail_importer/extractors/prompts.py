"""
Prompt contracts for cocktail recipe extraction.

These contracts keep multi-recipe responses consistent across models. The
JSON contract is what the parser prefers; the markdown card format is what
the parser falls back to when a model ignores the JSON instruction.
"""

MULTI_RECIPE_JSON_CONTRACT = """
You MUST return exactly ONE valid JSON object, no prose before or after.
Shape:
{
  "recipes": [
    {
      "name": "string",
      "description": "string",
      "ingredients": [
        {"quantity": "string", "unit": "string", "item": "string", "notes": "string?"}
      ],
      "instructions": ["string"],
      "glassware": "string?",
      "garnish": "string?",
      "tags": ["string"]
    }
  ]
}
Do NOT use label keys like "Ingredients:" or "Instructions:". Use "ingredients" and "instructions" only.
Keep fractional quantities as written (e.g. "1 1/2", "3/4").

EXAMPLE - one classic cocktail:
{
  "recipes": [
    {
      "name": "Old Fashioned",
      "description": "A timeless cocktail with a robust, sweet, and spicy flavor.",
      "ingredients": [
        {"quantity": "2", "unit": "oz", "item": "Bourbon whiskey", "notes": ""},
        {"quantity": "1/2", "unit": "oz", "item": "Rich simple syrup", "notes": "2 parts sugar : 1 part water"},
        {"quantity": "2", "unit": "dashes", "item": "Angostura bitters", "notes": ""},
        {"quantity": "1", "unit": "", "item": "Orange twist", "notes": "for garnish"}
      ],
      "instructions": [
        "In an old-fashioned glass, combine the bourbon, simple syrup, and bitters.",
        "Add ice and stir until well chilled.",
        "Garnish with an orange twist."
      ],
      "glassware": "Old-fashioned glass",
      "garnish": "Orange twist",
      "tags": ["classic", "bourbon", "stirred"]
    }
  ]
}

CRITICAL: Return ONLY valid JSON. No explanatory text before or after.
"""

MULTI_RECIPE_MARKDOWN_FALLBACK = """
If you cannot produce JSON, use exactly this markdown card per recipe:

### <Recipe Name>
_Description_

**Ingredients**
- <quantity> <unit> <item> (notes?)

**Instructions**
1) ...
2) ...

**Glassware**: ...
**Garnish**: ...
**Tags**: tag1, tag2
---
"""

RECIPE_IMPORT_SYSTEM_PROMPT = f"""
You are a cocktail recipe parser. Extract every cocktail recipe from the
provided content (a web page, a video transcript or pasted text).

Rules:
- Only include complete recipes with a clear ingredient list and instructions.
- Keep ingredient names as written; put preparation details in "notes".
- Use short units: oz, ml, cl, tsp, tbsp, dashes, barspoon.
- Do not invent recipes that are not in the content.
{MULTI_RECIPE_JSON_CONTRACT}
{MULTI_RECIPE_MARKDOWN_FALLBACK}
"""
