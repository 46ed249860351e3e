from singulars.models.performance import Performance
from singulars.models.poem import Poem
from singulars.models.vote import Vote

__all__ = [
    "Performance",
    "Poem",
    "Vote",
]
