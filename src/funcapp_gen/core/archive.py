import logging
import os
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZipEntryPlan:
    source_entry_name: str
    resolved_target_path: Path
    is_directory: bool


def plan_entry(name: str, target_dir: str | Path) -> ZipEntryPlan:
    """Resolve an archive entry against *target_dir*, rejecting names that escape it."""
    root = Path(os.path.abspath(target_dir))
    resolved = Path(os.path.abspath(root / name))
    if not resolved.is_relative_to(root):
        raise OSError(f"Bad zip entry: {name}")
    return ZipEntryPlan(source_entry_name=name, resolved_target_path=resolved, is_directory=name.endswith("/"))


def extract_archive(archive_path: str | Path, target_dir: str | Path) -> None:
    """Unpack *archive_path* into *target_dir* in archive order.

    Extraction stops at the first entry that resolves outside the target; entries written
    before it stay on disk. Existing files are overwritten.
    """
    try:
        archive = zipfile.ZipFile(archive_path)
    except zipfile.BadZipFile as exc:
        raise OSError(f"Cannot open archive: {archive_path}") from exc

    with archive:
        for info in archive.infolist():
            plan = plan_entry(info.filename, target_dir)
            target = plan.resolved_target_path
            if plan.is_directory:
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with archive.open(info) as src, target.open("wb") as dst:
                shutil.copyfileobj(src, dst)
            logger.debug("Extracted %s", plan.source_entry_name)
    logger.info("Extracted %s into %s", archive_path, target_dir)
