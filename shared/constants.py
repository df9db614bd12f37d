"""
Shared constants used across the player.
"""

# Catalog source
DEFAULT_BUCKET = "songs"
CATALOG_LIST_LIMIT = 200
SIGNED_URL_TTL_SECONDS = 60 * 60
CONTAINER_SEPARATOR = "/"

# Audio formats
SUPPORTED_AUDIO_FORMATS = [
    ".mp3", ".m4a", ".wav", ".ogg", ".aac", ".flac"
]
COVER_IMAGE_FORMATS = [".jpg", ".jpeg", ".png", ".webp"]

# Display metadata
UNKNOWN_ARTIST = "Unknown Artist"
ARTIST_TITLE_DELIMITER = " - "

ACCENT_PALETTE = ["#1db954", "#20c997", "#64b5f6", "#f06292", "#9575cd", "#ff8a65"]
MANIFEST_PALETTE = ["#7C68F8", "#9C5DF2", "#B067F0", "#6F7EF4", "#5A8EF5", "#FF8BA7"]

# Favourites
LIKED_SONGS_KEY = "liked-songs"

# Waveform geometry
WAVE_WAVELENGTH = 24.0  # pixels per full sine period
WAVE_AMPLITUDE = 6.0    # pixels
WAVE_MIN_SAMPLES = 32
WAVE_SAMPLE_SPACING = 4.0  # pixels between samples once past the minimum
WAVE_TICK_INTERVAL = 0.05  # seconds
WAVE_PHASE_STEP = 0.18     # radians per tick
DEFAULT_WAVE_WIDTH = 320
DEFAULT_WAVE_HEIGHT = 40

# S3 Provider endpoints
CLOUDFLARE_R2_ENDPOINT_TEMPLATE = "https://{account_id}.r2.cloudflarestorage.com"
AWS_S3_ENDPOINT_TEMPLATE = "https://s3.{region}.amazonaws.com"

# Configuration paths
DEFAULT_CONFIG_DIR = "~/.config/tunenoodle"
CONFIG_FILENAME = "config.json"
STORE_FILENAME = "store.json"
MANIFEST_FILENAME = "manifest.json"

# API
DEFAULT_API_PORT = 5005
RUNTIME_CALL_TIMEOUT = 30  # seconds
