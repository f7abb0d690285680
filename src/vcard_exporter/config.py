from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .batching import DEFAULT_BATCH_SIZE

logger = logging.getLogger(__name__)


@dataclass
class Paths:
    root: Path
    source_dir: Path
    export_dir: Path
    local_dir: Path
    conf_file: Path


@dataclass
class Settings:
    batch_size: int = DEFAULT_BATCH_SIZE
    export_dir: str = "cards-export"
    source_dir: str = "cards-source"
    share: str = "console"


DEFAULT_CONF = """# vcard-export local config (TOML)
batch_size = 100
export_dir = "cards-export"
source_dir = "cards-source"
# console | locate
share = "console"
"""


def load_settings(conf: Path) -> Settings:
    """Read settings from a TOML file; unknown keys are ignored."""
    settings = Settings()
    try:
        data = tomllib.loads(conf.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring config %s: %s", conf, exc)
        return settings

    batch_size = data.get("batch_size", settings.batch_size)
    if isinstance(batch_size, int) and not isinstance(batch_size, bool) and batch_size > 0:
        settings.batch_size = batch_size
    else:
        logger.warning("Ignoring invalid batch_size %r in %s", batch_size, conf)
    settings.export_dir = str(data.get("export_dir", settings.export_dir))
    settings.source_dir = str(data.get("source_dir", settings.source_dir))
    settings.share = str(data.get("share", settings.share))
    return settings


def ensure_workspace(base: Path | None = None) -> tuple[Paths, Settings]:
    """Create the workspace folders and config on first run, then load settings."""
    root = Path(base or os.getcwd())
    local = root / "local"
    conf = local / "export.conf"

    local.mkdir(parents=True, exist_ok=True)
    if not conf.exists():
        conf.write_text(DEFAULT_CONF, encoding="utf-8")
        logger.info("Created default config at %s", conf)

    settings = load_settings(conf)
    source = root / settings.source_dir
    export = root / settings.export_dir
    for d in (source, export):
        d.mkdir(parents=True, exist_ok=True)

    return (
        Paths(root=root, source_dir=source, export_dir=export, local_dir=local, conf_file=conf),
        settings,
    )
