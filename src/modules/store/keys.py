import time

HEARD_PREFIX = "heard:"
LATER_PREFIX = "later:"
SUMMARY_PREFIX = "summary:"


def heard_key(article_id: str) -> str:
    return f"{HEARD_PREFIX}{article_id}"


def later_key(article_id: str) -> str:
    return f"{LATER_PREFIX}{article_id}"


def summary_key(article_id: str) -> str:
    return f"{SUMMARY_PREFIX}{article_id}"


def marker_value() -> str:
    """Markers only need presence; the value records when they were set (ms)."""
    return str(int(time.time() * 1000))
