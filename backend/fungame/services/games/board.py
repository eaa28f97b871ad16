import random
from typing import List, Optional

TILE_COLORS = ('red', 'blue', 'green', 'yellow', 'purple', 'orange')


def generate_board(size: int = 8, rng: Optional[random.Random] = None) -> List[List[str]]:
    """Generate a size x size grid of uniformly random tile colors."""
    rng = rng or random
    return [[rng.choice(TILE_COLORS) for _ in range(size)] for _ in range(size)]
