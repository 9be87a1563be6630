"""Migration file sources and line extraction.

A migration file is plain text, one method name per line. It is either
read from disk (``path`` / ``file_name``) or supplied in memory
(``content``); non-empty in-memory content always wins.

File names follow ``<version>_<name>.<up|down>.<ext>``, for example
``0003_add_email_index.up.gm``. ``MigrationFile.from_path`` parses that
pattern; files that do not match still load, they just carry no version.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from stepback.core.errors import SourceAccessError

MEMORY_SOURCE = "<memory>"

_FILE_NAME_RE = re.compile(r"^(?P<version>\d+)_(?P<name>.+)\.(?P<direction>up|down)\.[^.]+$")


class Direction(str, Enum):
    """Which way a migration file moves the schema."""

    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class MigrationFile:
    """One migration source.

    Attributes:
        path: Directory containing the file
        file_name: File name within ``path``
        content: In-memory file body; takes precedence over disk when non-empty
        version: Numeric version parsed from the file name
        name: Human name parsed from the file name
        direction: ``Direction.UP`` or ``Direction.DOWN``
    """

    path: Path | None = None
    file_name: str = ""
    content: bytes = b""
    version: int | None = None
    name: str | None = None
    direction: Direction | None = None

    def __post_init__(self) -> None:
        if self.path is not None and not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))
        if isinstance(self.content, str):
            object.__setattr__(self, "content", self.content.encode("utf-8"))

    @classmethod
    def from_path(cls, path: str | Path) -> MigrationFile:
        """Build a disk-backed source, parsing version metadata from the name."""
        path = Path(path)
        match = _FILE_NAME_RE.match(path.name)
        if match is None:
            return cls(path=path.parent, file_name=path.name)
        return cls(
            path=path.parent,
            file_name=path.name,
            version=int(match.group("version")),
            name=match.group("name"),
            direction=Direction(match.group("direction")),
        )

    @classmethod
    def from_content(cls, content: str | bytes, file_name: str = "") -> MigrationFile:
        """Build an in-memory source."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        parsed = cls.from_path(file_name) if file_name else cls()
        return cls(
            content=content,
            file_name=file_name,
            version=parsed.version,
            name=parsed.name,
            direction=parsed.direction,
        )

    @property
    def full_path(self) -> Path:
        """Location on disk (``path`` joined with ``file_name``)."""
        return (self.path or Path(".")) / self.file_name

    @property
    def label(self) -> str:
        """Name used in logs and error context."""
        if self.content:
            return self.file_name or MEMORY_SOURCE
        return str(self.full_path)


def read_lines(migration: MigrationFile) -> list[str]:
    """Return the raw lines of ``migration`` in order.

    Line terminators are removed; no other trimming happens here.

    Raises:
        SourceAccessError: The file cannot be opened, read or decoded.
    """
    if migration.content:
        try:
            text = migration.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceAccessError(migration.label, e) from e
        return text.split("\n")

    full_path = migration.full_path
    try:
        # only "\n" ends a line, a lone "\r" stays part of the name
        with full_path.open(encoding="utf-8", newline="\n") as handle:
            return [line.removesuffix("\n").removesuffix("\r") for line in handle]
    except (OSError, UnicodeDecodeError) as e:
        raise SourceAccessError(str(full_path), e) from e
