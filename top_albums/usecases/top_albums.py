"""Use case: build the ranked top-albums report for the signed-in user."""

import logging
from typing import Union

from top_albums.domain.aggregation import aggregate, normalize_year_filter
from top_albums.domain.model import TimeRange, TopAlbumsReport
from top_albums.domain.ports import TrackSourcePort

logger = logging.getLogger("top_albums.report")


class TopAlbumsUseCase:

    def __init__(self, track_source: TrackSourcePort):
        self.track_source = track_source

    def execute(
        self,
        token: str,
        time_range: Union[TimeRange, str] = TimeRange.MEDIUM_TERM,
        total_wanted: int = 250,
        year_filter: Union[str, int, None] = "all",
    ) -> TopAlbumsReport:
        time_range = TimeRange(time_range)
        year = normalize_year_filter(year_filter)

        tracks = self.track_source.fetch_top_tracks(token, time_range, total_wanted)
        partial = len(tracks) < total_wanted
        if partial:
            logger.info("Got %s of %s requested top tracks", len(tracks), total_wanted)

        return TopAlbumsReport(
            time_range=time_range,
            year_filter=year,
            requested=total_wanted,
            tracks=tracks,
            albums=aggregate(tracks, year),
            partial=partial,
        )
