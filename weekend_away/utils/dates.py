"""Timeframe keys and date helpers."""

from datetime import date, timedelta
from typing import Optional, Tuple

# UI timeframe choice -> Google Events "htichips" key
TIMEFRAME_KEYS = {
    "today": "date:today",
    "tomorrow": "date:tomorrow",
    "week": "date:week",
    "weekend": "date:weekend",
    "next-weekend": "date:next_week",
}


def timeframe_key_for(choice: str) -> str:
    """Event timeframe key for a timeframe choice, e.g. "today" or "weekend"."""
    try:
        return TIMEFRAME_KEYS[choice.lower()]
    except KeyError:
        raise ValueError(f"Unknown timeframe: {choice}. Available: {list(TIMEFRAME_KEYS)}") from None


def target_date_for(choice: str, today: Optional[date] = None) -> str:
    """Day a timeframe choice points at; "week" means starting today, weekends start on Saturday."""
    today = today or date.today()
    timeframe_key_for(choice)  # validate
    choice = choice.lower()
    if choice == "tomorrow":
        return (today + timedelta(days=1)).isoformat()
    if choice == "weekend":
        return date_range_for_timeframe("This weekend", today)[0]
    if choice == "next-weekend":
        return date_range_for_timeframe("Next weekend", today)[0]
    return today.isoformat()


def date_range_for_timeframe(option: str, current: Optional[date] = None) -> Tuple[str, str]:
    """
    Start and end dates for a timeframe option, weekends being Saturday and Sunday.

    Args:
        option: "Today", "This weekend" or "Next weekend"
        current: Reference day (defaults to today)

    Returns:
        (start, end) as YYYY-MM-DD; unknown options give the current day twice
    """
    current = current or date.today()
    # Monday=0 ... Saturday=5, Sunday=6
    weekday = current.weekday()

    if option == "This weekend":
        if weekday == 5:
            start = current
        elif weekday == 6:
            start = current - timedelta(days=1)
        else:
            start = current + timedelta(days=5 - weekday)
        end = start + timedelta(days=1)
    elif option == "Next weekend":
        # Upcoming Saturday (today if Saturday), then one week on
        upcoming_saturday = current + timedelta(days=(5 - weekday) % 7)
        start = upcoming_saturday + timedelta(days=7)
        end = start + timedelta(days=1)
    else:
        start = end = current

    return start.isoformat(), end.isoformat()
