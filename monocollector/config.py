"""Configuration management"""
import os
from dotenv import load_dotenv

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# API
# Comma-separated bearer keys; read again at request time by monocollector.api.auth
API_KEYS: list[str] = [k.strip() for k in os.getenv("API_KEYS", "").split(",") if k.strip()]
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()
]
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8080"))

# Observability
ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

# Streak scanning
STREAK_WINDOW_DAYS: int = int(os.getenv("STREAK_WINDOW_DAYS", "365"))

# Achievements shown as "next up" in the stats view
NEXT_ACHIEVEMENTS_PREVIEW: int = int(os.getenv("NEXT_ACHIEVEMENTS_PREVIEW", "3"))

# EXP weights (game-design tunables)
EXP_PER_ITEM: int = int(os.getenv("EXP_PER_ITEM", "10"))
EXP_PER_CATEGORY: int = int(os.getenv("EXP_PER_CATEGORY", "5"))
EXP_STREAK_FACTOR: int = int(os.getenv("EXP_STREAK_FACTOR", "2"))
RARITY_EXP_BONUS: dict[str, int] = {
    "common": 0,
    "uncommon": int(os.getenv("EXP_BONUS_UNCOMMON", "2")),
    "rare": int(os.getenv("EXP_BONUS_RARE", "5")),
    "epic": int(os.getenv("EXP_BONUS_EPIC", "10")),
    "legendary": int(os.getenv("EXP_BONUS_LEGENDARY", "25")),
}

# Level curve: level n starts at (n - 1)^2 * LEVEL_EXP_BASE
LEVEL_EXP_BASE: int = int(os.getenv("LEVEL_EXP_BASE", "50"))
MAX_LEVEL: int = int(os.getenv("MAX_LEVEL", "200"))

# Photos whose header claims more pixels than this are not decoded
MAX_IMAGE_PIXELS: int = int(os.getenv("MAX_IMAGE_PIXELS", "40000000"))


# Validation
def validate_config() -> None:
    """Validate configuration"""
    from monocollector.exceptions import ConfigurationError

    positive = {
        "STREAK_WINDOW_DAYS": STREAK_WINDOW_DAYS,
        "NEXT_ACHIEVEMENTS_PREVIEW": NEXT_ACHIEVEMENTS_PREVIEW,
        "EXP_PER_ITEM": EXP_PER_ITEM,
        "LEVEL_EXP_BASE": LEVEL_EXP_BASE,
        "MAX_LEVEL": MAX_LEVEL,
        "MAX_IMAGE_PIXELS": MAX_IMAGE_PIXELS,
    }
    for key, value in positive.items():
        if value <= 0:
            raise ConfigurationError(f"{key} must be positive, got {value}", config_key=key)

    non_negative = {
        "EXP_PER_CATEGORY": EXP_PER_CATEGORY,
        "EXP_STREAK_FACTOR": EXP_STREAK_FACTOR,
        **{f"RARITY_EXP_BONUS[{k}]": v for k, v in RARITY_EXP_BONUS.items()},
    }
    for key, value in non_negative.items():
        if value < 0:
            raise ConfigurationError(f"{key} must not be negative, got {value}", config_key=key)
