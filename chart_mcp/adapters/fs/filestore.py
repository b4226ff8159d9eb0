from pathlib import Path


class ChartFileSink:
    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path).resolve()

    def _safe_path(self, path: str | Path) -> Path:
        # Prevent traversal
        target = (self.base_path / path).resolve()
        if target != self.base_path and self.base_path not in target.parents:
            raise ValueError(f"Path traversal attempt detected: {path}")
        return target

    def ensure_directory(self, path: str | Path) -> None:
        """Create the directory (and parents). Existing directories are fine."""
        self._safe_path(path).mkdir(parents=True, exist_ok=True)

    def write(self, path: str | Path, data: bytes) -> None:
        target = self._safe_path(path)
        with open(target, "wb") as f:
            f.write(data)

    def read(self, path: str | Path) -> bytes:
        """Retrieve bytes by path. Raises FileNotFoundError."""
        target = self._safe_path(path)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        with open(target, "rb") as f:
            return f.read()
