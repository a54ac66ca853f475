"""Use case: turn a top-albums list into shareable plain text."""

from typing import Optional

from top_albums.domain.aggregation import ALL_YEARS
from top_albums.domain.model import AlbumEntry


def share_title(year_filter: str) -> str:
    return f"My Top Albums ({'All Time' if year_filter == ALL_YEARS else year_filter})"


class ShareTopAlbumsUseCase:

    def execute(self, albums: list[AlbumEntry], year_filter: str, path: Optional[str] = None) -> str:
        lines = [f"{i}. {a.name} - {', '.join(a.artists)}" for i, a in enumerate(albums, start=1)]
        text = f"{share_title(year_filter)}\n\n" + "\n".join(lines)
        if path:
            with open(path, "w", encoding="utf-8") as f:
                f.write(text + "\n")
        return text
