"""File-system capability consumed by the embedder."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol


class FileHandling(Protocol):
    """File operations the embedder is allowed to perform."""

    @property
    def current_path(self) -> Path:
        """Return the current working directory."""
        ...

    def exists(self, path: Path) -> bool:
        """Return whether a file or folder exists at ``path``."""
        ...

    def copy(self, source: Path, destination: Path) -> None:
        """Copy a file or folder tree to ``destination``."""
        ...

    def glob(self, path: Path, pattern: str) -> list[Path]:
        """Return paths under ``path`` matching ``pattern``."""
        ...

    def create_folder(self, path: Path) -> None:
        """Create a folder and its parents."""
        ...

    def delete(self, path: Path) -> None:
        """Delete a file or folder tree."""
        ...

    def is_folder(self, path: Path) -> bool:
        """Return whether ``path`` points to a folder."""
        ...


class FileHandler:
    """Default ``FileHandling`` implementation backed by pathlib and shutil."""

    @property
    def current_path(self) -> Path:
        """Return the process working directory.

        Returns
        -------
        Path
            Absolute working directory.
        """
        return Path.cwd()

    def exists(self, path: Path) -> bool:
        """Return whether ``path`` exists, counting dangling symlinks.

        Returns
        -------
        bool
            True if there is a file, folder or link at ``path``.
        """
        return path.exists() or path.is_symlink()

    def copy(self, source: Path, destination: Path) -> None:
        """Copy ``source`` to ``destination``.

        A link at ``source`` itself is followed, so the destination is always
        a real file or folder. Folder trees keep their internal symlinks,
        which versioned macOS frameworks rely on (``Versions/Current``).

        Parameters
        ----------
        source
            File or folder to copy.
        destination
            Target path; must not exist yet.

        Raises
        ------
        FileExistsError
            Raised when ``destination`` already exists.
        """
        if self.exists(destination):
            msg = f"Destination already exists: {destination}"
            raise FileExistsError(msg)
        if source.is_dir():
            shutil.copytree(source.resolve(), destination, symlinks=True)
            return
        shutil.copy2(source, destination)

    def glob(self, path: Path, pattern: str) -> list[Path]:
        """Return sorted matches for ``pattern`` under ``path``.

        Returns
        -------
        list[Path]
            Matching paths.
        """
        return sorted(path.glob(pattern))

    def create_folder(self, path: Path) -> None:
        """Create ``path`` and any missing parents."""
        path.mkdir(parents=True, exist_ok=True)

    def delete(self, path: Path) -> None:
        """Delete the file, link or folder tree at ``path``."""
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
            return
        path.unlink()

    def is_folder(self, path: Path) -> bool:
        """Return whether ``path`` is a folder.

        Returns
        -------
        bool
            True when ``path`` exists and is a directory.
        """
        return path.is_dir()


__all__ = ["FileHandler", "FileHandling"]
