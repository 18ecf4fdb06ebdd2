SPOTIFY_ACCOUNTS_BASE_URL = "https://accounts.spotify.com"
SPOTIFY_AUTHORIZE_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/authorize"
SPOTIFY_TOKEN_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/api/token"

SPOTIFY_API_BASE_URL = "https://api.spotify.com/v1"
CURRENT_USER_PLAYLISTS_URL = f"{SPOTIFY_API_BASE_URL}/me/playlists"

DEFAULT_REDIRECT_URI = "http://127.0.0.1:8888/callback"
DEFAULT_SCOPES = [
    "user-read-private",
    "playlist-read-private",
    "playlist-read-collaborative",
]

# Page served to the browser after the redirect, from spotify_api/views/.
BACK_TO_CLI_PAGE = "back_to_cli.html"

# CSV export layout: (track dict key, column title), in file order.
EXPORT_COLUMNS = [
    ("title", "Track"),
    ("duration", "Duration"),
    ("artist", "Artist"),
    ("album", "Album"),
    ("release_date", "Release-Date"),
    ("external_url", "Spotify-Url"),
]

# Characters removed from playlist names before they become file names.
UNSAFE_FILENAME_CHARS = '/\\:*?"<>|.'
DEFAULT_EXPORT_STEM = "playlist"

# Post-display menu
CHOICE_EXPORT = "Export this playlist to disk"
CHOICE_ANOTHER = "Let's look at another playlist"
CHOICE_DONE = "Thanks, I'm done"
