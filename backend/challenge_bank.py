"""
Challenge bank for the verification mini-games.

Provides randomized drawing prompts and the shooter game configuration
handed to the client when a verification starts.
"""
import random
from typing import List, Dict, Any, Optional

from content_analysis import ObjectCategory, extract_object_from_prompt
from policy import GameType


# Drawing prompts organized by heuristic category
DRAWING_PROMPTS = {
    ObjectCategory.FISH: ["a fish", "a fish swimming", "a fish with big fins"],
    ObjectCategory.CAT: ["a cat", "a cat sitting down", "a cat with whiskers"],
    ObjectCategory.HOUSE: ["a house", "a house with a door", "a house with a chimney"],
    ObjectCategory.TREE: ["a tree", "a tree with apples", "a tree in winter"],
    ObjectCategory.CAR: ["a car", "a car with two wheels", "a car on a road"],
    ObjectCategory.GENERAL: ["a sun", "a flower", "an umbrella", "a cup", "a star", "a boat"],
}

SHOOTER_CONFIG = {
    "target_score": 3,
    "max_enemies": 3,
    "bullet_speed": 8,
    "spawn_rate": 0.01,
    "canvas_width": 350,
    "canvas_height": 200,
}

DRAWING_CONFIG = {
    "canvas_width": 400,
    "canvas_height": 300,
    "timebox_s": 120,
}


def get_all_prompts(categories: Optional[List[ObjectCategory]] = None) -> List[str]:
    """Flatten prompts, optionally restricted to some categories."""
    prompts = []
    for category, items in DRAWING_PROMPTS.items():
        if categories and category not in categories:
            continue
        prompts.extend(items)
    return prompts


def select_drawing_prompt(
    categories: Optional[List[ObjectCategory]] = None,
    seed: Optional[int] = None
) -> str:
    """
    Pick a random drawing prompt.

    Args:
        categories: Restrict to these categories (optional)
        seed: Random seed for reproducibility (optional)

    Returns:
        Prompt text, e.g. "a fish"
    """
    rng = random.Random(seed)
    available = get_all_prompts(categories) or get_all_prompts()
    return rng.choice(available)


def prompt_category(prompt: str) -> ObjectCategory:
    """Category whose heuristic will score a drawing of this prompt."""
    return ObjectCategory.from_keyword(extract_object_from_prompt(prompt))


def get_game_challenge(game_type: str, seed: Optional[int] = None) -> Dict[str, Any]:
    """
    Build the challenge handed to the client for a game.

    Raises:
        ValueError: For an unknown game type
    """
    game = GameType(game_type)

    if game is GameType.DRAWING:
        prompt = select_drawing_prompt(seed=seed)
        return {
            "game_type": game.value,
            "prompt": prompt,
            "config": {**DRAWING_CONFIG, "category": prompt_category(prompt).value},
        }

    return {
        "game_type": game.value,
        "prompt": None,
        "config": dict(SHOOTER_CONFIG),
    }
