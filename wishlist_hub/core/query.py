from wishlist_hub.core.errors import ValidationError


def parse_ids(raw: str | None) -> list[int]:
    """
    Parse a comma-separated id list such as "3,1,3".

    Blank entries are skipped and duplicates collapsed (first occurrence
    wins). Anything that is not an integer is a ValidationError.
    """
    if not raw:
        return []

    ids: list[int] = []
    seen: set[int] = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            value = int(part)
        except ValueError:
            raise ValidationError("ids must be a comma-separated list of integers")
        if value not in seen:
            seen.add(value)
            ids.append(value)
    return ids


def format_ids(ids) -> str:
    return ",".join(str(i) for i in ids)
