"""
Human-readable explanation of why two items were matched.
"""

from typing import Optional

from .categorical import shared_values
from .geo import days_between, distance_km
from .models import Explanation, FeatureSet, Item
from .scoring import CONFIDENCE_LEVELS, confidence_label, display_score

IMAGE_MENTION_THRESHOLD = 0.6
# Below this the label is "Very Low"
LOW_CONFIDENCE = CONFIDENCE_LEVELS[-1][0]


def build_explanation(lost: Item,
                      found: Item,
                      lost_features: FeatureSet,
                      found_features: FeatureSet,
                      score: float,
                      image_similarity: Optional[float] = None) -> Explanation:
    """
    Turn shared attributes, proximity and recency into ordered reasons.

    Reasons appear in this order: colors, brands, materials, key phrases,
    conditions, location, time, photos. If nothing specific overlaps, a
    single generic reason graded by score is used.
    """
    reasons = []

    colors = shared_values(lost_features.colors, found_features.colors)
    if colors:
        reasons.append(f"Both items are described as {', '.join(colors)}")

    brands = shared_values(lost_features.brands, found_features.brands)
    if brands:
        reasons.append(f"Both items are {', '.join(brands)} brand")

    materials = shared_values(lost_features.materials, found_features.materials)
    if materials:
        reasons.append(f"Both items are made of {', '.join(materials)}")

    phrases = shared_values(lost_features.key_phrases, found_features.key_phrases)
    if phrases:
        quoted = '", "'.join(phrases)
        reasons.append(f'Both descriptions mention: "{quoted}"')

    conditions = shared_values(lost_features.conditions, found_features.conditions)
    if conditions:
        reasons.append(f"Both items are described as {', '.join(conditions)}")

    distance = distance_km(lost.location, found.location)
    if distance is not None:
        if distance < 1:
            reasons.append(f"Found very close to where it was lost ({distance * 1000:.0f}m away)")
        elif distance < 5:
            reasons.append(f"Found within {distance:.1f}km of where it was lost")

    days = days_between(lost.created_at, found.created_at)
    if days is not None:
        if days <= 1:
            reasons.append("Found within 24 hours of when it was lost")
        elif days <= 7:
            reasons.append(f"Found within {round(days)} days of when it was lost")

    if image_similarity is not None and image_similarity >= IMAGE_MENTION_THRESHOLD:
        reasons.append(f"Photos look similar ({display_score(image_similarity)}% image match)")

    if not reasons:
        if score > 0.7:
            reasons.append("High similarity in description and characteristics")
        elif score > 0.5:
            reasons.append("Moderate similarity in description and characteristics")
        elif score >= LOW_CONFIDENCE:
            reasons.append("Some similarity in description and characteristics")
        else:
            reasons.append("Little similarity in description and characteristics")

    return Explanation(
        reasons=reasons,
        confidence_label=confidence_label(score),
        score=display_score(score),
    )
