"""Exception types raised while loading front matter"""


class MdfrontError(Exception):
    """Base exception for mdfront."""


class MalformedHeader(MdfrontError, ValueError):
    """A front-matter header that cannot be split or decoded.

    offset is the character offset of the opening marker in the raw text.
    """

    def __init__(self, offset: int, reason: str):
        self.offset = offset
        self.reason = reason
        super().__init__(f"Malformed header at offset {offset}: {reason}")
