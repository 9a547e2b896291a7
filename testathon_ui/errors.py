class PageTimeoutError(TimeoutError):
    """A wait in the base interaction layer ran past its bound."""


class UnknownFilterError(ValueError):
    """A symbolic filter name (brand, sort, view) has no mapping."""

    def __init__(self, kind: str, name):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} filter for {name!r} not found")
