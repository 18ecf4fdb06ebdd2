from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from constants import EXPORT_COLUMNS
from spotify_api.models import Track

# Column widths follow the export layout order.
COLUMN_WIDTHS = {
    "title": 30,
    "duration": 10,
    "artist": 30,
    "album": 30,
    "release_date": 12,
    "external_url": 56,
}

console = Console()


def build_tracks_table(playlist_name: str, tracks: Sequence[Track]) -> Table:
    table = Table(
        title=f"{playlist_name} ({len(tracks)} tracks)",
        box=box.SIMPLE_HEAVY,
        header_style="bold green",
    )
    for key, title in EXPORT_COLUMNS:
        table.add_column(title, max_width=COLUMN_WIDTHS.get(key), overflow="ellipsis", no_wrap=True)

    for track in tracks:
        row = track.to_row()
        table.add_row(*[str(row[key]) for key, _ in EXPORT_COLUMNS])
    return table


def display_tracks(playlist_name: str, tracks: Sequence[Track], *, out: Optional[Console] = None) -> None:
    (out or console).print(build_tracks_table(playlist_name, tracks))
    (out or console).print()
