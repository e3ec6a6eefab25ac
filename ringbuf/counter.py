class DelimiterCounter:
    """Running count of buffered bytes equal to `delimiter`."""

    _delimiter: int
    _count: int

    def __init__(self, delimiter: int):
        if not (0 <= delimiter <= 0xFF):
            raise ValueError(f"Invalid delimiter: {delimiter}, valid: 0 <= delimiter <= 255")
        self._delimiter = delimiter
        self._count = 0

    def __repr__(self) -> str:
        return f"DelimiterCounter(delimiter={self._delimiter:#04x}, count={self._count})"

    @property
    def delimiter(self) -> int:
        return self._delimiter

    @property
    def count(self) -> int:
        return self._count

    def added(self, element: int) -> None:
        if element == self._delimiter:
            self._count += 1

    def added_from(self, data) -> None:
        self._count += bytes(data).count(self._delimiter)

    def removed(self, element: int) -> None:
        if element == self._delimiter:
            self._count -= 1

    def removed_from(self, data) -> None:
        self._count -= bytes(data).count(self._delimiter)

    def reset(self) -> None:
        self._count = 0

    def copy(self) -> "DelimiterCounter":
        counter = DelimiterCounter(self._delimiter)
        counter._count = self._count
        return counter
