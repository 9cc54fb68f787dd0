"""
Derived copies of detection files.
"""

import logging
import os
from pathlib import Path

from core.records import DEFAULT_FORMAT, FileFormat, open_detection_file, parse_line

logger = logging.getLogger(__name__)


def default_pruned_path(source) -> Path:
    """``dir/name.csv`` -> ``dir/modifiedname.csv``"""
    source = Path(source)
    return source.with_name("modified" + source.name)


def write_tracked_only(source, destination=None, file_format: FileFormat = DEFAULT_FORMAT) -> Path:
    """
    Copy a detection file keeping the header and only the tracked lines.

    Lines are copied byte for byte. The copy is written to a temporary file
    next to the destination and moved into place only when every line parsed,
    so a malformed line leaves no partial output behind.

    Parameters
    ----------
    source : str or Path
        Detection file to prune.
    destination : str or Path, optional
        Output path. Defaults to ``modified<name>`` beside the source.
    file_format : FileFormat
        Layout used to decide whether a line is tracked.

    Returns
    -------
    Path
        The path written.
    """
    destination = Path(destination) if destination is not None else default_pruned_path(source)
    temporary = destination.with_name(destination.name + ".part")

    kept = dropped = 0
    try:
        with open_detection_file(source) as reader, open(temporary, "w", encoding="utf-8", newline="") as writer:
            for line_number, line in enumerate(reader, start=1):
                if line_number <= file_format.header_lines:
                    writer.write(line)
                    continue
                if not line.strip():
                    continue
                if parse_line(line, file_format, line_number).is_tracked:
                    writer.write(line if line.endswith("\n") else line + "\n")
                    kept += 1
                else:
                    dropped += 1
        os.replace(temporary, destination)
    finally:
        if temporary.exists():
            temporary.unlink()

    logger.info(f"Wrote {kept} tracked lines to {destination} ({dropped} untracked lines dropped)")
    return destination
