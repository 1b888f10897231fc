import logging
import os
import subprocess
from pathlib import Path
from typing import Iterable, List, Set

log = logging.getLogger(__name__)


class SourceDiscovery:
    def __init__(self, root_path: Path, extensions: Iterable[str]):
        self.root_path = root_path
        self.extensions = {ext.lower() for ext in extensions}

    def _matches(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def _git_files(self) -> Set[Path]:
        # ls-files --cached (tracked) --others (untracked) --exclude-standard (respect .gitignore)
        result = subprocess.run(
            ["git", "ls-files", "--cached", "--others", "--exclude-standard"],
            cwd=self.root_path,
            capture_output=True,
            text=True,
            check=True,
        )
        return {
            self.root_path / line.strip()
            for line in result.stdout.splitlines()
            if line.strip()
        }

    def _walk(self, base: Path) -> Set[Path]:
        found: Set[Path] = set()
        for root, dirs, files in os.walk(base):
            # Skip hidden dirs and installed dependencies
            dirs[:] = [d for d in dirs if not d.startswith(".") and d != "node_modules"]
            for name in files:
                if not name.startswith("."):
                    found.add(Path(root) / name)
        return found

    def _candidates(self) -> Set[Path]:
        if (self.root_path / ".git").exists():
            try:
                return self._git_files()
            except (subprocess.CalledProcessError, OSError):
                log.warning("Git discovery failed, falling back to OS walk.")
        return self._walk(self.root_path)

    def discover(self, scan_paths: List[str]) -> List[Path]:
        candidates = {p.resolve() for p in self._candidates() if self._matches(p)}
        if not scan_paths:
            return sorted(candidates)

        selected: Set[Path] = set()
        for entry in scan_paths:
            target = (self.root_path / entry).resolve()
            if target.is_file():
                if self._matches(target):
                    selected.add(target)
                continue
            if not target.is_dir():
                log.warning(f"Scan path does not exist: {entry}")
                continue
            for path in candidates:
                if target in path.parents:
                    selected.add(path)
        return sorted(selected)
