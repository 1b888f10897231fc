from pathlib import Path
from typing import List, Optional

from innerbind.common import L, bus
from innerbind.common.messaging import Renderer
from innerbind.config import InnerbindConfig, load_config_from_path
from innerbind.lang.tsx import DEFAULT_EXTENSIONS
from innerbind.spec import ConfigError
from innerbind.transform import create_transformer
from innerbind.app.runners import TransformReport, TransformRunner
from innerbind.app.services import SourceDiscovery


class InnerbindApp:
    def __init__(
        self,
        root_path: Path,
        config: Optional[InnerbindConfig] = None,
        renderer: Optional[Renderer] = None,
    ):
        self.root_path = root_path.resolve()
        if renderer is not None:
            bus.set_renderer(renderer)
        if config is None:
            try:
                config = load_config_from_path(self.root_path)
            except ConfigError as e:
                bus.error(L.error.config, error=e)
                raise
        self.config = config
        self.transformer = create_transformer(config)
        self.discovery = SourceDiscovery(
            self.root_path, set(DEFAULT_EXTENSIONS) | set(config.extensions)
        )

    @property
    def out_dir(self) -> Optional[Path]:
        if not self.config.out_dir:
            return None
        return (self.root_path / self.config.out_dir).resolve()

    def discover_files(self) -> List[Path]:
        files = self.discovery.discover(self.config.scan_paths)
        out_dir = self.out_dir
        if out_dir is None:
            return files
        # Never feed previous output back in.
        return [p for p in files if out_dir not in p.parents]

    def run_transform(
        self, files: Optional[List[Path]] = None, check: bool = False
    ) -> TransformReport:
        out_dir = self.out_dir
        runner = TransformRunner(
            root_path=self.root_path,
            transformer=self.transformer,
            prefix=self.config.prefix,
            out_dir=out_dir,
            jobs=self.config.jobs,
        )
        if files is None:
            files = self.discover_files()
        else:
            files = [p if p.is_absolute() else self.root_path / p for p in files]
        return runner.run(files, check=check)
