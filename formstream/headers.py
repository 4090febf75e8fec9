from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

HeadersInput = Mapping[str, object] | Iterable[tuple[str, object]]


def _sanitize_header(name: str, value: str) -> tuple[str, str]:
    """
    Sanitize header name and value to prevent header injection (CRLF injection).
    Strips CR, LF, and null bytes from both name and value.
    """
    clean_name = name.replace("\r", "").replace("\n", "").replace("\x00", "")
    clean_value = value.replace("\r", "").replace("\n", "").replace("\x00", "")
    return clean_name, clean_value


class HeaderList:
    """
    Ordered header collection with case-insensitive lookup.

    Names keep the casing they were stored with and are emitted in insertion
    order. Lookups go through an index of lower-cased names that points at the
    first entry stored under that name.
    """

    def __init__(self, headers: HeadersInput | None = None) -> None:
        self._items: list[tuple[str, str]] = []
        self._index: dict[str, int] = {}
        if headers:
            if isinstance(headers, (Mapping, HeaderList)):
                pairs = headers.items()
            else:
                pairs = headers
            for name, value in pairs:
                self.add(name, value)

    def add(self, name: str, value: object) -> None:
        name, text = _sanitize_header(str(name), str(value))
        self._index.setdefault(name.lower(), len(self._items))
        self._items.append((name, text))

    def setdefault(self, name: str, value: object) -> str:
        """Store `value` unless a header with this name exists; return the stored value."""
        existing = self.get(name)
        if existing is not None:
            return existing
        self.add(name, value)
        return self._items[-1][1]

    def get(self, name: str, default: str | None = None) -> str | None:
        pos = self._index.get(name.lower())
        if pos is None:
            return default
        return self._items[pos][1]

    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    def render(self) -> bytes:
        return "".join(f"{name}: {value}\r\n" for name, value in self._items).encode("utf-8")

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderList):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"HeaderList({self._items!r})"
