import re

def sanitize_string(v: str) -> str:
    if not isinstance(v, str):
        return v
    # 1. Strip HTML tags
    v = re.sub(r'<[^>]*>', '', v)
    # 2. Trim whitespace
    return v.strip()


def trim_string(v: str) -> str:
    # Free text such as task bodies keeps its angle brackets
    if not isinstance(v, str):
        return v
    return v.strip()


def clean_lines(values: list[str]) -> list[str]:
    """Trim each entry and drop the ones left empty, keeping order."""
    cleaned = (trim_string(v) for v in values if isinstance(v, str))
    return [v for v in cleaned if v]
