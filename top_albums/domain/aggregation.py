"""Fold a ranked track list into a ranked album list."""

from dataclasses import dataclass
from typing import Optional, Union

from top_albums.domain.model import AlbumEntry, Track

ALL_YEARS = "all"
MIN_TRACKS_PER_ALBUM = 2


@dataclass
class _AlbumTally:
    id: str
    name: str
    artists: list[str]
    images: list[dict]
    release_date: Optional[str]
    score: int = 0
    track_count: int = 0
    best_rank: int = 0

    def add(self, weight: int, rank: int) -> None:
        self.score += weight
        self.track_count += 1
        self.best_rank = rank if self.track_count == 1 else min(self.best_rank, rank)

    def freeze(self) -> AlbumEntry:
        return AlbumEntry(
            id=self.id,
            name=self.name,
            artists=tuple(self.artists),
            images=tuple(self.images),
            release_date=self.release_date,
            score=self.score,
            track_count=self.track_count,
            best_rank=self.best_rank,
        )


def normalize_year_filter(year_filter: Union[str, int, None]) -> str:
    if year_filter is None:
        return ALL_YEARS
    value = str(year_filter).strip()
    return value or ALL_YEARS


def filter_by_release_year(tracks: list[Track], year_filter: Union[str, int, None] = ALL_YEARS) -> list[Track]:
    """Keep tracks released in ``year_filter``; undated tracks only survive under "all"."""
    year = normalize_year_filter(year_filter)
    if year == ALL_YEARS:
        return list(tracks)
    return [t for t in tracks if t.album.release_date and t.album.release_date.startswith(year)]


def aggregate(tracks: list[Track], year_filter: Union[str, int, None] = ALL_YEARS) -> list[AlbumEntry]:
    """Score albums from rank-ordered tracks.

    The track at index ``i`` of the filtered list weighs ``len - i``, so the
    most-played track counts most. Albums backed by a single track are
    dropped. Ordering is score desc, track count desc, best rank asc, then
    album id so ties are reproducible.
    """
    ranked = filter_by_release_year(tracks, year_filter)
    total = len(ranked)

    tallies: dict[str, _AlbumTally] = {}
    for i, track in enumerate(ranked):
        album = track.album
        if not album.id:
            continue
        tally = tallies.get(album.id)
        if tally is None:
            tally = _AlbumTally(
                id=album.id,
                name=album.name,
                artists=list(track.artists),
                images=list(album.images),
                release_date=album.release_date,
            )
            tallies[album.id] = tally
        tally.add(weight=total - i, rank=i + 1)

    albums = [t.freeze() for t in tallies.values() if t.track_count >= MIN_TRACKS_PER_ALBUM]
    albums.sort(key=lambda a: (-a.score, -a.track_count, a.best_rank, a.id))
    return albums


def release_year_options(current_year: int, span: int = 10) -> list[str]:
    """Choices offered for the release-year filter, newest first."""
    return [ALL_YEARS] + [str(current_year - offset) for offset in range(span)]
