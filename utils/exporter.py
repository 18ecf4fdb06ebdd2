import csv
import os
from typing import Iterable

from constants import DEFAULT_EXPORT_STEM, EXPORT_COLUMNS, UNSAFE_FILENAME_CHARS
from spotify_api.models import Track
from utils.logger import log_info


def sanitize_playlist_name(name: str) -> str:
    """Strip path-unsafe characters (and dots) so the playlist name can be a file stem."""
    cleaned = "".join(
        ch for ch in (name or "")
        if ch not in UNSAFE_FILENAME_CHARS and ch.isprintable()
    )
    return cleaned.strip() or DEFAULT_EXPORT_STEM


def export_filename(playlist_name: str) -> str:
    return f"{sanitize_playlist_name(playlist_name)}.csv"


def export_tracks_to_csv(playlist_name: str, tracks: Iterable[Track], export_dir: str) -> str:
    """Write one CSV row per track with the fixed column layout. Returns the file path."""
    os.makedirs(export_dir, exist_ok=True)
    file_path = os.path.join(export_dir, export_filename(playlist_name))

    rows = 0
    with open(file_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([title for _, title in EXPORT_COLUMNS])
        for track in tracks:
            row = track.to_row()
            writer.writerow([row[key] for key, _ in EXPORT_COLUMNS])
            rows += 1

    log_info(f"Wrote {rows} track(s) to {file_path}")
    return file_path
