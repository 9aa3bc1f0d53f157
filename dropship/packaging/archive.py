"""Artifact packaging: zip a flat directory into a single archive."""

import logging
import os
import stat
import zipfile

from dropship.errors import PackagingError

logger = logging.getLogger(__name__)


def _list_regular_files(source_dir):
    """Return sorted (name, os.stat_result) for regular files directly in source_dir.

    Subdirectories are skipped, not recursed into.
    """
    try:
        entries = sorted(os.scandir(source_dir), key=lambda e: e.name)
    except OSError as e:
        raise PackagingError(f"Cannot list artifact source directory '{source_dir}'", context=str(e)) from e

    files = []
    for entry in entries:
        if entry.is_dir():
            logger.info(f"Ignoring directory: {entry.name}")
            continue
        try:
            st = entry.stat()
        except OSError as e:
            raise PackagingError(f"Cannot stat '{entry.path}'", context=str(e)) from e
        if not stat.S_ISREG(st.st_mode):
            logger.info(f"Ignoring non-regular file: {entry.name}")
            continue
        files.append((entry.name, st))
    return files


def package_directory(source_dir, dest_path) -> str:
    """Zip every regular file directly inside *source_dir* into *dest_path*.

    Each file is stored deflated under its bare name. A partially written
    archive is left in place if packaging fails.

    Returns:
        Absolute path to the archive.

    Raises:
        PackagingError: the directory can't be listed or a file can't be read.
    """
    dest_path = os.path.abspath(dest_path)
    files = _list_regular_files(source_dir)

    logger.info("Files to be included in the docker context:")
    for name, st in files:
        logger.info(f"{stat.filemode(st.st_mode):<11}{st.st_size:<12d}{name}")

    logger.info("Smooshing files together...")
    try:
        # Pre-1980 mtimes are clamped to 1980 rather than rejected
        with zipfile.ZipFile(dest_path, "w", compression=zipfile.ZIP_DEFLATED, strict_timestamps=False) as zf:
            for name, _ in files:
                path = os.path.join(source_dir, name)
                logger.debug(f"File added to archive: {path}")
                zf.write(path, arcname=name)
    except (OSError, ValueError) as e:
        raise PackagingError(f"Failed to write archive '{dest_path}'", context=str(e)) from e

    logger.info(f"Archive written: {dest_path} ({len(files)} files)")
    # TODO: remove stale archives once a deployment no longer needs them
    return dest_path
