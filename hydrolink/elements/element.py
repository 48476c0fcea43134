class Element:
    """Named component of a network."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.index: int = -1
        """Pool handle of the element, -1 until placed"""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
