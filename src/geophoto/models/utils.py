import uuid


def generate_short_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"
