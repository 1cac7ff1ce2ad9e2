"""
Expositions, dérivées des fiches artistes.
"""

from datetime import date
from typing import Dict, List, Optional

from app.pipeline.schemas import parse_date


def artist_to_exhibition(artist: Dict) -> Dict:
    return {
        "id": artist.get("id"),
        "name": artist.get("exhibitionName"),
        "artist": artist.get("artistName"),
        "artistBio": artist.get("artistBio"),
        "startDate": artist.get("exhibitionStartDate"),
        "endDate": artist.get("exhibitionEndDate"),
        "artistPhotoURL": artist.get("artistPhotoURL"),
        "worksURLs": artist.get("exemplaryWorksURLs") or [],
        "createdAt": artist.get("createdAt"),
    }


def group_exhibitions(artists: List[Dict], today: date) -> Dict[str, List[Dict]]:
    """
    Classe les expositions en cours / à venir / passées.
    Chaque groupe est trié par date de début, la plus récente d'abord.
    Une exposition sans date valide est rangée dans les passées.
    """
    exhibitions = [artist_to_exhibition(artist) for artist in artists]
    exhibitions.sort(key=lambda ex: parse_date(ex["startDate"]) or date.min, reverse=True)

    groups = {"current": [], "upcoming": [], "past": []}
    for exhibition in exhibitions:
        start = parse_date(exhibition["startDate"])
        end = parse_date(exhibition["endDate"])
        if start is not None and today < start:
            groups["upcoming"].append(exhibition)
        elif start is not None and end is not None and start <= today <= end:
            groups["current"].append(exhibition)
        else:
            groups["past"].append(exhibition)
    return groups


def get_exhibitions(repository=None, today: Optional[date] = None) -> Dict[str, List[Dict]]:
    if repository is None:
        from app.repositories.record_repo import record_repo as repository
    return group_exhibitions(repository.list_artists(), today or date.today())
