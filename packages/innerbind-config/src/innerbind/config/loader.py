import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

from innerbind.spec import ConfigError, Dialect, MemberTagPolicy


@dataclass
class InnerbindConfig:
    prefix: str = "render"
    scan_paths: List[str] = field(default_factory=list)
    # Suffix -> dialect, merged over the built-in extension table.
    extensions: Dict[str, Dialect] = field(default_factory=dict)
    member_tags: MemberTagPolicy = MemberTagPolicy.ALIAS
    out_dir: Optional[str] = None
    jobs: int = 1


def _find_pyproject_toml(search_path: Path) -> Path:
    current_dir = search_path.resolve()
    while True:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        if current_dir.parent == current_dir:
            break
        current_dir = current_dir.parent
    raise FileNotFoundError("Could not find pyproject.toml in any parent directory.")


def _parse_extensions(raw: Any) -> Dict[str, Dialect]:
    if not isinstance(raw, dict):
        raise ConfigError("'extensions' must be a table of suffix = dialect")
    extensions: Dict[str, Dialect] = {}
    for suffix, dialect in raw.items():
        key = suffix if suffix.startswith(".") else f".{suffix}"
        try:
            extensions[key.lower()] = Dialect(str(dialect).lower())
        except ValueError:
            raise ConfigError(f"Unknown dialect '{dialect}' for '{suffix}'")
    return extensions


def config_from_dict(data: Dict[str, Any]) -> InnerbindConfig:
    config = InnerbindConfig()

    prefix = data.get("prefix", config.prefix)
    if not isinstance(prefix, str) or not prefix.isidentifier():
        raise ConfigError(f"'prefix' must be a valid identifier, got {prefix!r}")
    config.prefix = prefix

    scan_paths = data.get("scan_paths", [])
    if not isinstance(scan_paths, list):
        raise ConfigError("'scan_paths' must be a list of paths")
    config.scan_paths = [str(p) for p in scan_paths]

    if "extensions" in data:
        config.extensions = _parse_extensions(data["extensions"])

    try:
        config.member_tags = MemberTagPolicy(data.get("member_tags", "alias"))
    except ValueError:
        raise ConfigError(
            f"'member_tags' must be 'alias' or 'skip', got {data['member_tags']!r}"
        )

    if data.get("out_dir") is not None:
        config.out_dir = str(data["out_dir"])

    jobs = data.get("jobs", 1)
    if not isinstance(jobs, int) or isinstance(jobs, bool) or jobs < 1:
        raise ConfigError(f"'jobs' must be a positive integer, got {jobs!r}")
    config.jobs = jobs

    return config


def load_config_from_path(search_path: Path) -> InnerbindConfig:
    try:
        config_path = _find_pyproject_toml(search_path)
    except FileNotFoundError:
        return InnerbindConfig()

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"{config_path}: {e}")

    innerbind_data: Dict[str, Any] = data.get("tool", {}).get("innerbind", {})
    return config_from_dict(innerbind_data)
