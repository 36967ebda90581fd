"""Date and time formatting utilities."""


def format_relative_duration(seconds: float) -> str:
    """
    Format an elapsed duration the way the header shows fetch age.

    Args:
        seconds: Elapsed seconds (negative values count as zero)

    Returns:
        "just now", "Nm ago", "Nh ago" or "Nd ago"
    """
    seconds = max(0, int(seconds))
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"
