# smoothie_sync/services/seed_recipes.py
from __future__ import annotations

from smoothie_sync.app.domain.models import Recipe

_SEED_DEFINITIONS: list[dict[str, object]] = [
    {
        "id": "1",
        "name": "Tropical Paradise",
        "emoji": "🥭",
        "color": "#FFA500",
        "contributor": "Sarah M.",
        "prepTime": "5 mins",
        "servings": 2,
        "containsFat": True,
        "containsNuts": False,
        "ingredients": [
            "1 cup frozen mango chunks",
            "1/2 cup frozen pineapple",
            "1 banana",
            "1 cup coconut milk",
            "1 tbsp honey",
            "1/2 cup ice",
        ],
        "instructions": (
            "Add coconut milk to blender first. Add frozen fruits and banana. "
            "Drizzle in honey. Blend on high for 60 seconds. "
            "Add ice and blend until smooth. Serve immediately with a fun straw!"
        ),
    },
    {
        "id": "2",
        "name": "Green Goddess",
        "emoji": "🥬",
        "color": "#32CD32",
        "contributor": "Mike R.",
        "prepTime": "3 mins",
        "servings": 1,
        "containsFat": True,
        "containsNuts": True,
        "ingredients": [
            "2 cups fresh spinach",
            "1 green apple, cored",
            "1 banana",
            "1 cup almond milk",
            "1 tbsp almond butter",
            "1 tsp vanilla extract",
        ],
        "instructions": (
            "Wash spinach thoroughly. Add almond milk and spinach to blender. "
            "Add apple, banana, and almond butter. Add vanilla extract. "
            "Blend until completely smooth. Enjoy your green goodness!"
        ),
    },
    {
        "id": "3",
        "name": "Berry Bliss",
        "emoji": "🫐",
        "color": "#4B0082",
        "contributor": "Emma L.",
        "prepTime": "4 mins",
        "servings": 2,
        "containsFat": True,
        "containsNuts": False,
        "ingredients": [
            "1 cup mixed frozen berries",
            "1/2 cup blueberries",
            "1 cup Greek yogurt",
            "1/2 cup milk of choice",
            "2 tbsp maple syrup",
            "1 tsp lemon juice",
        ],
        "instructions": (
            "Combine yogurt and milk in blender. Add all frozen berries. "
            "Pour in maple syrup and lemon juice. Blend until smooth and creamy. "
            "Taste and adjust sweetness if needed. Serve with fresh berries on top."
        ),
    },
    {
        "id": "4",
        "name": "Chocolate Peanut Power",
        "emoji": "🍫",
        "color": "#8B4513",
        "contributor": "David K.",
        "prepTime": "3 mins",
        "servings": 1,
        "containsFat": True,
        "containsNuts": True,
        "ingredients": [
            "1 frozen banana",
            "2 tbsp natural peanut butter",
            "1 cup chocolate almond milk",
            "1 scoop chocolate protein powder",
            "1 tbsp cocoa powder",
            "Handful of ice",
        ],
        "instructions": (
            "Add chocolate almond milk to blender. Add frozen banana and peanut butter. "
            "Scoop in protein powder and cocoa. Add ice cubes. "
            "Blend until thick and creamy. Perfect post-workout treat!"
        ),
    },
    {
        "id": "5",
        "name": "Sunrise Citrus",
        "emoji": "🍊",
        "color": "#FF6347",
        "contributor": "Lisa P.",
        "prepTime": "5 mins",
        "servings": 2,
        "containsFat": False,
        "containsNuts": False,
        "ingredients": [
            "2 oranges, peeled",
            "1 cup frozen mango",
            "1/2 cup carrot juice",
            "1 inch fresh ginger",
            "1 tbsp honey",
            "1/2 cup coconut water",
        ],
        "instructions": (
            "Peel and segment oranges. Add coconut water and carrot juice. "
            "Add oranges, mango, and ginger. Drizzle in honey. "
            "Blend until smooth. Strain if desired for smoother texture."
        ),
    },
    {
        "id": "6",
        "name": "Vanilla Dream",
        "emoji": "🍦",
        "color": "#FFD700",
        "contributor": "Rachel W.",
        "prepTime": "3 mins",
        "servings": 1,
        "containsFat": True,
        "containsNuts": True,
        "ingredients": [
            "1 frozen banana",
            "1 cup vanilla oat milk",
            "1/2 cup vanilla Greek yogurt",
            "1 tsp pure vanilla extract",
            "1 tbsp cashew butter",
            "Pinch of sea salt",
        ],
        "instructions": (
            "Add oat milk and yogurt to blender. Add frozen banana and cashew butter. "
            "Pour in vanilla extract. Add a pinch of sea salt. "
            "Blend until ultra creamy. Top with a dash of cinnamon."
        ),
    },
    {
        "id": "7",
        "name": "Avocado Mint Fresh",
        "emoji": "🥑",
        "color": "#9ACD32",
        "contributor": "Tom H.",
        "prepTime": "4 mins",
        "servings": 2,
        "containsFat": True,
        "containsNuts": False,
        "ingredients": [
            "1 ripe avocado",
            "1 cup coconut milk",
            "1/4 cup fresh mint leaves",
            "1 lime, juiced",
            "2 tbsp agave nectar",
            "1 cup ice cubes",
        ],
        "instructions": (
            "Scoop out avocado flesh. Add coconut milk and mint to blender. "
            "Add avocado and lime juice. Sweeten with agave nectar. "
            "Add ice and blend until smooth. Garnish with fresh mint sprig."
        ),
    },
    {
        "id": "8",
        "name": "Strawberry Fields",
        "emoji": "🍓",
        "color": "#FF6B6B",
        "contributor": "Anna S.",
        "prepTime": "3 mins",
        "servings": 1,
        "containsFat": False,
        "containsNuts": False,
        "ingredients": [
            "2 cups fresh strawberries",
            "1/2 banana",
            "1 cup oat milk",
            "3-4 fresh basil leaves",
            "1 tbsp honey",
            "1/2 cup ice",
        ],
        "instructions": (
            "Hull and halve strawberries. Add oat milk and basil to blender. "
            "Add strawberries and banana. Drizzle in honey. "
            "Add ice and blend until smooth. The basil adds an amazing flavor!"
        ),
    },
]


def seed_recipes() -> list[Recipe]:
    """Fresh copies of the bundled recipes; callers may mutate them."""
    return [Recipe.from_dict(definition) for definition in _SEED_DEFINITIONS]


SEED_RECIPE_IDS = frozenset(str(definition["id"]) for definition in _SEED_DEFINITIONS)
