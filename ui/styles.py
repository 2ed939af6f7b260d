from rich.theme import Theme
from rich.style import Style
from rich.text import Text

RSE_GREEN = "#2E8B57"
RSE_GOLD = "#F1C40F"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=RSE_GREEN, bold=True),
        "secondary": Style(color=RSE_GOLD, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "option_label": Style(color=RSE_GOLD, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "title": Style(color=RSE_GREEN, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)


def get_stars_style(stars: int) -> Style:
    """Get color style for a star rating."""
    if stars >= 3:
        return Style(color=RSE_GOLD, bold=True)
    elif stars >= 1:
        return Style(color=SUCCESS_GREEN)
    else:
        return Style(color=MUTED_GRAY)


def format_stars(stars: int, max_stars: int = 3) -> str:
    """Render a rating as filled and empty stars."""
    return "★" * stars + "☆" * (max_stars - stars)


def format_lives(lives: int, max_lives: int) -> Text:
    """Render remaining lives as hearts."""
    text = Text()
    text.append("♥" * lives, Style(color=ERROR_RED, bold=True))
    text.append("♡" * (max_lives - lives), Style(color=MUTED_GRAY))
    return text
