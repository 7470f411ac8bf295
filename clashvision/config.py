from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "ClashVision"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/clashvision"

    youtube_api_key: str = ""
    youtube_api_base: str = "https://www.googleapis.com/youtube/v3"
    youtube_transcript_url: str = "https://www.youtube.com/api/timedtext"

    clash_royale_api_key: str = ""
    clash_royale_api_base: str = "https://api.clashroyale.com/v1"
    royaleapi_base: str = "https://api.royaleapi.com"
    # Community deck and card usage statistics
    royaleapi_stats_base: str = "https://royaleapi.com/api"

    # Per-call timeout for every outbound request (seconds)
    request_timeout: float = 5.0

    # Transcript retrieval is rate limited upstream
    transcript_batch_size: int = 5
    transcript_batch_delay: float = 0.2


settings = Settings()


# =============================================================================
# VIDEO RANKING
# =============================================================================

# Creators whose videos get a score bonus and their own recent-video search
TRUSTED_CHANNELS: tuple[str, ...] = (
    "Clash Royale",
    "B-Rad Gaming",
    "Clash with Ash",
    "OJ",
    "Surgical Goblin",
    "Clash Royale Esports",
    "Clash Royale TV",
    "Clash Royale Pro",
    "Clash Royale Strategy",
    "Clash Royale Deck",
)

# A candidate must mention the game somewhere to be considered at all
GAME_NAME_TERMS: tuple[str, ...] = ("clash royale", "cr deck", "clash")

# YouTube search API hard limit on maxResults
MAX_SEARCH_RESULTS = 50

MAX_RANKED_VIDEOS = 24

MIN_CARDS_MATCHED = 3

NO_MATCHING_VIDEOS_MESSAGE = (
    "No videos found that feature at least 3 cards from this deck. "
    "Try a more popular deck or swap a card or two."
)


# =============================================================================
# CARDS
# =============================================================================

DECK_SIZE = 8

# Evolution variants get a synthesized id so they never collide with base cards
EVOLUTION_ID_OFFSET = 10_000_000
EVOLUTION_SUFFIX = " (Evolution)"
