import logging
from typing import Dict, List

from pydantic import BaseModel, Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from goal_scraper.models.enums import FetchBackend


class SelectorSettings(BaseModel):
    """CSS selectors for the goal listing, tried in order where a list is given."""

    table_selectors: List[str] = Field(
        default_factory=lambda: [
            "table.items",
            "table.inline-table",
            "#yw1",
            ".responsive-table table",
            "table",
        ],
        description="Fallback list used to detect that the listing table rendered.",
    )
    row_selector: str = "tbody tr"
    cell_selector: str = "td"
    venue_cell_selector: str = "td.hauptlink"
    competition_cell_index: int = Field(1, ge=0)
    # Cells carrying all of these classes hold competition links, not teams
    competition_link_cell_classes: List[str] = Field(
        default_factory=lambda: ["no-border-links", "links"]
    )
    cookie_selectors: List[str] = Field(
        default_factory=lambda: [
            'button[title="Accept All"]',
            "#onetrust-accept-btn-handler",
            ".onetrust-close-btn-handler",
            'button:has-text("Accept")',
            'button:has-text("Akzeptieren")',
        ]
    )


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Source page
    goals_url: HttpUrl = Field(
        "https://www.transfermarkt.com/cristiano-ronaldo/alletore/spieler/8198/saison/2025/verein/0/liga/0/wettbewerb//pos/0/trainer_id/0/minute/0/torart/0/plus/1",
        description="Listing page with the goals of the current season.",
    )
    fetch_backend: FetchBackend = FetchBackend.BROWSER

    # Fetch settings (milliseconds, as playwright expects them)
    timeout_ms: int = Field(60000, gt=0, description="Navigation timeout.")
    settle_ms: int = Field(3000, ge=0, description="Pause after navigation.")
    selector_timeout_ms: int = Field(
        10000, gt=0, description="Wait per table selector before trying the next."
    )
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    viewport_width: int = 1920
    viewport_height: int = 1080
    locale: str = "en-US"

    # Persisted artifact
    component_file: str = Field(
        "src/components/RoadSection.astro",
        description="File holding the rawData array of goal lines.",
    )
    array_name: str = "rawData"

    selectors: SelectorSettings = Field(default_factory=SelectorSettings)

    # Used when a full row carries no team link
    default_team: str = "Al-Nassr"

    # Competition patterns for non-official goals
    non_official_patterns: List[str] = Field(
        default_factory=lambda: [
            "Friendly",
            "Friendlies",
            "Pre-Season",
            "Club Friendly",
            "Testimonial",
            "Amistoso",
        ]
    )

    # Team name mappings for consistency
    team_mappings: Dict[str, str] = Field(
        default_factory=lambda: {
            "Al-Nassr FC": "Al-Nassr",
            "Al Nassr": "Al-Nassr",
            "Al-Nassr Riad": "Al-Nassr",
            "Al-Nassr Riyadh": "Al-Nassr",
            "Manchester United": "Man United",
            "Manchester Utd": "Man United",
            "Real Madrid CF": "Real Madrid",
            "Juventus FC": "Juventus",
            "Sporting CP": "Sporting",
        }
    )

    # Keyword -> label, checked in order
    goal_type_mappings: Dict[str, str] = Field(
        default_factory=lambda: {
            "penalty": "Penalty",
            "header": "Header",
            "free kick": "Direct free kick",
            "freekick": "Direct free kick",
            "free-kick": "Direct free kick",
            "counter": "Counter attack goal",
            "counter-attack": "Counter attack goal",
            "left foot": "Left-footed shot",
            "left-footed": "Left-footed shot",
            "right foot": "Right-footed shot",
            "right-footed": "Right-footed shot",
        }
    )

    # Labels the extractor looks for in full rows
    known_goal_types: List[str] = Field(
        default_factory=lambda: [
            "Penalty",
            "Header",
            "Right-footed shot",
            "Left-footed shot",
            "Counter attack goal",
            "Direct free kick",
            "Not reported",
        ]
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
