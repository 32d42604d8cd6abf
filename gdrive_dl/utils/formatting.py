"""
Helper functions for formatting byte counts and durations for the console.
"""

MEBIBYTE = 1024 * 1024


def format_megabytes(bytes_size: int) -> str:
    """Formats bytes as megabytes with two decimals (e.g., '12.50MB')."""
    return f"{bytes_size / MEBIBYTE:.2f}MB"


def format_size(bytes_size: float) -> str:
    """Formats bytes into a human-readable size string (e.g., '145.3 MB')."""
    if bytes_size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while bytes_size >= 1024 and i < len(units) - 1:
        bytes_size /= 1024
        i += 1
    return f"{bytes_size:.1f} {units[i]}"


def format_duration(seconds: float) -> str:
    """Formats a duration in seconds (e.g., '2h 34m 12s')."""
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)
