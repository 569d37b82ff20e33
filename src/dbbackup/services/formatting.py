"""Human readable size and duration helpers."""

from typing import Optional

from dbbackup.messages import MessageCatalog

KB = 1024
MB = KB * 1024
GB = MB * 1024
TB = GB * 1024

MINUTE = 60
HOUR = MINUTE * 60
DAY = HOUR * 24


def _render_number(value: float, precision: int) -> str:
    rounded = round(value, precision)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def format_size(size: int, precision: int = 2) -> str:
    if size < KB:
        return f"{size} bytes"
    if size < MB:
        return f"{_render_number(size / KB, precision)} KB"
    if size < GB:
        return f"{_render_number(size / MB, precision)} MB"
    if size < TB:
        return f"{_render_number(size / GB, precision)} GB"
    return f"{_render_number(size / TB, precision)} TB"


def format_duration(
    seconds: float,
    precision: int = 2,
    catalog: Optional[MessageCatalog] = None,
) -> str:
    """Converts elapsed seconds to seconds/minutes/hours/days.

    Unit labels are looked up in ``catalog`` so they can be translated.
    """
    catalog = catalog or MessageCatalog()

    if seconds < MINUTE:
        value, unit = seconds, "seconds"
    elif seconds < HOUR:
        value, unit = seconds / MINUTE, "minutes"
    elif seconds < DAY:
        value, unit = seconds / HOUR, "hours"
    else:
        value, unit = seconds / DAY, "days"

    return f"{_render_number(value, precision)} {catalog.raw(unit)}"
