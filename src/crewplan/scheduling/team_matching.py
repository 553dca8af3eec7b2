"""
Legacy team-name matching.

Older bookings reference their team by free text ("Ploeg groen", "blue team")
instead of an id. The scheduling core works on ids only; this module exists
for the backfill that converts those rows (see ``crewplan.storage.legacy``).
"""

from typing import Iterable, Optional

from .models import Team

# Dutch colour names used in team names, mapped to English
COLOUR_ALIASES = {
    "groen": "green",
    "blauw": "blue",
    "rood": "red",
    "geel": "yellow",
    "oranje": "orange",
    "paars": "purple",
    "zwart": "black",
    "wit": "white",
    "grijs": "grey",
    "roze": "pink",
}


def _normalise(value: str) -> str:
    return " ".join(value.lower().split())


def _colour_keywords(value: str) -> set:
    words = set(_normalise(value).replace("-", " ").split())
    found = set()
    for word in words:
        if word in COLOUR_ALIASES:
            found.add(COLOUR_ALIASES[word])
        elif word in COLOUR_ALIASES.values():
            found.add(word)
    return found


def match_team_by_name(reference: Optional[str], teams: Iterable[Team]) -> Optional[Team]:
    """
    Best team for a free-text reference.

    Tried in order: case-insensitive exact name, substring in either
    direction, then a shared colour keyword (Dutch or English). Ambiguous
    colour matches return None.
    """
    if not reference or not reference.strip():
        return None
    teams = [t for t in teams if not t.is_unassigned]
    wanted = _normalise(reference)

    for team in teams:
        if _normalise(team.name) == wanted:
            return team

    for team in teams:
        name = _normalise(team.name)
        if name and (wanted in name or name in wanted):
            return team

    colours = _colour_keywords(reference)
    if colours:
        matches = [t for t in teams if _colour_keywords(t.name) & colours]
        if len(matches) == 1:
            return matches[0]
    return None
