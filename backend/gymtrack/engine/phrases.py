import random
from typing import Optional

MOTIVATIONAL_PHRASES = [
    "Done is better than perfect. Great work today!",
    "Every set counts. See you next session.",
    "Consistency beats intensity. Keep showing up.",
    "Stronger than yesterday.",
    "You showed up, and that is the hardest part.",
    "Small steps, big results.",
    "Rest well, you earned it.",
    "One more day closer to your goal.",
]


def pick_phrase(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(MOTIVATIONAL_PHRASES)
