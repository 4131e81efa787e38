"""Screenshot images stored under the local data directory."""

import re
from dataclasses import dataclass
from pathlib import Path

from study_tracker.domain.sessions import ContextNames
from study_tracker.errors import StorageError
from study_tracker.services.screenshots import ImageStorage

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def safe_path_component(name: str) -> str:
    """Reduce a display name to a filesystem-safe path component."""
    cleaned = _UNSAFE_CHARS.sub("_", name.strip()).strip("_")
    return cleaned or "untitled"


@dataclass
class LocalImageStorage(ImageStorage):
    """Writes PNG screenshots as ``<folder>/<course>/<set>/<problem>.png``."""

    base_dir: Path

    def save_image(self, names: ContextNames, problem_name: str, data: bytes) -> str:
        """Write image bytes and return the path relative to base_dir."""
        relative = Path(
            safe_path_component(names.folder_name),
            safe_path_component(names.course_name),
            safe_path_component(names.set_name),
            f"{safe_path_component(problem_name)}.png",
        )
        target = self.base_dir / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to write screenshot {target}: {exc}") from exc
        return relative.as_posix()
