from typing import Dict, List

DESTINATION_SUGGESTIONS: Dict[str, List[str]] = {
    "paris": [
        "Visit the Eiffel Tower at sunset for stunning views",
        "Explore the Louvre Museum and see the Mona Lisa",
        "Take a Seine River cruise in the evening",
        "Walk through Montmartre and visit Sacré-Cœur",
        "Enjoy authentic French pastries at a local boulangerie",
        "Stroll through the Luxembourg Gardens",
        "Visit Notre-Dame Cathedral (exterior)",
        "Shop at the Champs-Élysées",
    ],
    "tokyo": [
        "Visit the historic Senso-ji Temple in Asakusa",
        "Experience the bustling Shibuya Crossing",
        "Explore traditional gardens at Shinjuku Gyoen",
        "Try authentic sushi at Tsukiji Outer Market",
        "Visit teamLab Borderless digital art museum",
        "Take a day trip to Mount Fuji",
        "Shop in the trendy Harajuku district",
        "Enjoy cherry blossoms at Ueno Park (spring season)",
    ],
    "new york": [
        "Visit the Statue of Liberty and Ellis Island",
        "Walk through Central Park",
        "See a Broadway show in Times Square",
        "Visit the Metropolitan Museum of Art",
        "Walk the High Line urban park",
        "Explore the diverse neighborhoods of Brooklyn",
        "Visit the 9/11 Memorial and Museum",
        "Enjoy pizza at a classic NYC pizzeria",
    ],
    "london": [
        "Visit the Tower of London and see the Crown Jewels",
        "Explore the British Museum",
        "Take a ride on the London Eye",
        "Visit Buckingham Palace and watch the Changing of the Guard",
        "Explore the diverse food scene at Borough Market",
        "Walk along the South Bank of the Thames",
        "Visit the iconic Big Ben and Westminster Abbey",
        "Explore the trendy neighborhoods of Shoreditch or Camden",
    ],
    "default": [
        "Research popular landmarks and attractions",
        "Try local cuisine at highly-rated restaurants",
        "Take a guided walking tour to learn about local history",
        "Visit local markets for authentic experiences",
        "Explore parks and natural areas",
        "Check out museums and cultural sites",
        "Ask locals for their favorite hidden gems",
        "Book activities that showcase local culture",
    ],
}

# Checked in order; first substring hit wins
DESTINATION_ALIASES = [
    ("paris", "paris"),
    ("tokyo", "tokyo"),
    ("new york", "new york"),
    ("nyc", "new york"),
    ("london", "london"),
]


def get_destination_key(destination: str) -> str:
    dest = destination.lower()
    for needle, key in DESTINATION_ALIASES:
        if needle in dest:
            return key
    return "default"


class SuggestionService:
    """Static lookup; no state, no side effects"""

    def __init__(self, limit: int = 5):
        self.limit = limit

    def suggest(self, destination: str) -> Dict[str, object]:
        key = get_destination_key(destination)
        return {
            "suggestions": DESTINATION_SUGGESTIONS[key][:self.limit],
            "destination": destination,
        }
