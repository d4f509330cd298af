"""
Confidence score for the local validator from the share of uncertain ingredients.
No uncertain ingredient -> 1.0. Any uncertain ingredient caps confidence at 0.8,
decaying linearly to 0.5 when every ingredient is uncertain.
"""

UNCERTAIN_CAP = 0.8
UNCERTAIN_FLOOR = 0.5


def compute_confidence(total_ingredients: int, uncertain_count: int) -> float:
    """
    confidence = 0.8 - 0.3 * (uncertain_count / total_ingredients)
    Non-increasing in uncertain_count for a fixed total.
    """
    if total_ingredients <= 0 or uncertain_count <= 0:
        return 1.0
    ratio = min(1.0, uncertain_count / total_ingredients)
    return round(UNCERTAIN_CAP - (UNCERTAIN_CAP - UNCERTAIN_FLOOR) * ratio, 4)
