from enum import Enum

# Number field of goals scored outside official competitions
NON_OFFICIAL = "N.O"


class Venue(str, Enum):
    HOME = "H"
    AWAY = "A"
    NEUTRAL = "N"


class GoalType(str, Enum):
    PENALTY = "Penalty"
    HEADER = "Header"
    RIGHT_FOOT = "Right-footed shot"
    LEFT_FOOT = "Left-footed shot"
    COUNTER_ATTACK = "Counter attack goal"
    DIRECT_FREE_KICK = "Direct free kick"


class FetchBackend(str, Enum):
    BROWSER = "browser"  # Headless chromium via playwright
    HTTP = "http"  # Plain GET, for pre-rendered markup
