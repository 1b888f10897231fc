import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from innerbind.common import L, bus
from innerbind.spec import InnerbindError, SourceTransformerProtocol, TransformResult
from innerbind.transform.loader import report_diagnostics

log = logging.getLogger(__name__)


@dataclass
class FileOutcome:
    path: Path
    result: Optional[TransformResult] = None
    error: Optional[InnerbindError] = None
    read_error: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.result is not None and self.result.changed


@dataclass
class TransformReport:
    modified: List[Path] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)
    failed: Dict[Path, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failed


class TransformRunner:
    def __init__(
        self,
        root_path: Path,
        transformer: SourceTransformerProtocol,
        prefix: str,
        out_dir: Optional[Path] = None,
        jobs: int = 1,
    ):
        self.root_path = root_path
        self.transformer = transformer
        self.prefix = prefix
        self.out_dir = out_dir
        self.jobs = jobs

    def _relative(self, path: Path) -> Path:
        try:
            return path.relative_to(self.root_path)
        except ValueError:
            return path

    def _transform_file(self, path: Path) -> FileOutcome:
        try:
            # newline="" keeps \r\n intact
            with path.open("r", encoding="utf-8", newline="") as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"Could not read file {path}: {e}")
            return FileOutcome(path, read_error=str(e))

        try:
            result = self.transformer.transform(source, str(self._relative(path)))
        except InnerbindError as e:
            return FileOutcome(path, error=e)
        return FileOutcome(path, result=result)

    def _destination(self, path: Path) -> Path:
        if self.out_dir is None:
            return path
        return self.out_dir / self._relative(path)

    def _write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)

    def _outcomes(self, files: List[Path]) -> List[FileOutcome]:
        if self.jobs <= 1 or len(files) <= 1:
            return [self._transform_file(path) for path in files]
        with ThreadPoolExecutor(max_workers=self.jobs) as pool:
            return list(pool.map(self._transform_file, files))

    def run(self, files: List[Path], check: bool = False) -> TransformReport:
        report = TransformReport()

        for outcome in self._outcomes(files):
            relative_path = self._relative(outcome.path)

            if outcome.read_error is not None:
                bus.error(L.transform.file.read_error, path=relative_path, error=outcome.read_error)
                report.failed[outcome.path] = outcome.read_error
                continue

            result = outcome.result
            if result is None:
                error = outcome.error
                bus.error(
                    L.transform.file.error,
                    path=relative_path,
                    line=getattr(error, "line", 0),
                    column=getattr(error, "column", 0),
                    message=getattr(error, "message", str(error)),
                )
                report.failed[outcome.path] = str(error)
                continue

            report_diagnostics(result, self.prefix)

            if not result.changed:
                bus.debug(L.transform.file.unchanged, path=relative_path)
                report.unchanged.append(outcome.path)
                if self.out_dir is not None and not check:
                    self._write(self._destination(outcome.path), result.code)
                continue

            names = ", ".join(
                f"{method}({', '.join(aliased)})"
                for method, aliased in result.aliases().items()
            )
            report.modified.append(outcome.path)
            if check:
                bus.warning(L.transform.file.would_change, path=relative_path, names=names)
                continue
            self._write(self._destination(outcome.path), result.code)
            bus.success(L.transform.file.success, path=relative_path, names=names)

        if report.failed:
            bus.error(L.transform.run.failed, count=len(report.failed))
        elif report.modified:
            if check:
                bus.warning(L.transform.run.check_failed, count=len(report.modified))
            else:
                bus.success(L.transform.run.complete, count=len(report.modified))
        else:
            bus.success(L.transform.run.clean, count=len(report.unchanged))
        return report
