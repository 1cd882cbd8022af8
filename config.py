"""
Tandem - text, configuration and JSON comparison engine
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine tuning with environment variable support (TANDEM_ prefix)."""

    # Application Info
    APP_NAME: str = "Tandem"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "WARNING"

    # Inline differ
    INLINE_CHAR_SIMILARITY_THRESHOLD: float = 0.2  # char-level diff above this similarity
    INLINE_CHAR_MAX_LENGTH: int = 500              # both lines shorter than this for char-level diff
    INLINE_HARD_MAX_LENGTH: int = 1000             # longer lines get one removed/added segment

    # Line differ
    LINE_PAIR_SIMILARITY_THRESHOLD: float = 0.3    # pair differing lines as "modified" above this

    # Structural aligner
    STRUCTURAL_SEARCH_WINDOW: int = 30             # +/- lines searched for relocated content
    STRUCTURAL_INDENT_TOLERANCE: int = 2           # indent levels allowed between relocated lines
    KEY_VALUE_INDENT_TOLERANCE: int = 1            # indent levels allowed for key/value matches
    MODIFIED_PAIR_WINDOW: int = 5                  # +/- lines searched for similar lines
    MODIFIED_SIMILARITY_THRESHOLD: float = 0.4
    COMMENT_SIMILARITY_THRESHOLD: float = 0.3      # both lines are comments and close together
    COMMENT_POSITION_WINDOW: int = 3
    PREFIX_BOOST: float = 0.2                      # similarity bonus for a long shared prefix
    PREFIX_BOOST_MIN_LENGTH: int = 10

    # Caches
    SIMILARITY_CACHE_SIZE: int = 2000
    EQUALITY_CACHE_SIZE: int = 5000

    # JSON handling
    MAX_TREE_DEPTH: int = 200
    STRUCTURAL_ANALYSIS_MAX_SIZE: int = 100_000    # compact JSON chars; larger trees skip move detection
    JSON_INDENT: int = 2

    class Config:
        env_prefix = "TANDEM_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
