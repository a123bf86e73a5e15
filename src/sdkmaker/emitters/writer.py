"""Write rendered files under an output directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from sdkmaker.exceptions import EmitError

logger = logging.getLogger(__name__)


def write_files(files: dict[str, str], output_dir: Union[str, Path]) -> list[Path]:
    """Write every ``relative path -> text`` entry of *files* below *output_dir*.

    Files are written atomically (temp file + rename) so an interrupted run
    never leaves a half-written module behind.

    Returns:
        The written paths, in the order of *files*.

    Raises:
        EmitError: A relative path escapes *output_dir*, or the file system
            refused a write.
    """
    root = Path(output_dir).resolve()
    written: list[Path] = []
    for relative, text in files.items():
        target = (root / relative).resolve()
        if not target.is_relative_to(root):
            raise EmitError("write", f"Refusing to write outside the output directory: {relative}")
        try:
            _atomic_write(target, text)
        except OSError as exc:
            raise EmitError("write", f"Failed to write {target}: {exc}") from exc
        logger.debug("Wrote %s (%d bytes)", target, len(text))
        written.append(target)
    return written


def _atomic_write(path: Path, data: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
