"""File system utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Union

PathLike = Union[str, Path]


def read_text(path: PathLike) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def write_text(path: PathLike, content: str) -> None:
    """Write ``content`` to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def filesystem_resolver(base_dir: Optional[PathLike] = None) -> Callable[[str], str]:
    """Return a resolver reading files relative to ``base_dir`` (default: cwd)."""
    base = Path(base_dir) if base_dir is not None else None

    def resolve(path: str) -> str:
        target = Path(path).expanduser()
        if base is not None and not target.is_absolute():
            target = base / target
        return read_text(target)

    return resolve
