import hashlib


def hash_source_text(source_text: str) -> str:
    """MD5 hex digest of the raw source text, used to spot repeated submissions."""
    return hashlib.md5(source_text.encode("utf-8")).hexdigest()


def source_text_length(source_text: str) -> int:
    return len(source_text.strip())
