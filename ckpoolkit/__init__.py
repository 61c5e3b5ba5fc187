"""Mining pool building blocks: SHA-256, lookup3, encoding, JSON picking, difficulty maths and TCP helpers."""

__version__ = "0.9.9"

__all__ = [
    "sha2",
    "lookup3",
    "jsonutil",
    "encoding",
    "net",
    "difficulty",
]