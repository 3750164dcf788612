from pathlib import Path

from .config import OutlineConfig
from .nodes import SPEC_FILE_SUFFIX


def is_spec_file(path: Path | str, suffix: str = SPEC_FILE_SUFFIX) -> bool:
    return str(path).endswith(suffix)


def discover_spec_files(root: Path, config: OutlineConfig) -> list[Path]:
    files: list[Path] = []
    for rel in config.spec_dirs:
        base = (root / rel).resolve()
        if not base.exists():
            continue
        if base.is_file():
            if is_spec_file(base, config.spec_suffix):
                files.append(base)
            continue
        for p in base.rglob(f"*{config.spec_suffix}"):
            files.append(p)
    return sorted(set(files))
