"""Uri helpers"""

__all__ = ["join"]


def join(base: str, *parts: str) -> str:
    """
    Join a base uri with path parts.
    Slashes between parts are collapsed, a trailing slash on the last part is kept.
    """
    if not parts:
        return base

    segments = [base.rstrip("/")]
    segments.extend(part.strip("/") for part in parts[:-1])
    segments.append(parts[-1].lstrip("/"))

    return "/".join(segment for segment in segments if segment)
