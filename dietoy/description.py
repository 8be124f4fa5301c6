"""Reading and writing die description (``.ddf``) JSON documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from .types import DescriptionFormatError, Point2D

logger = logging.getLogger(__name__)

FILE_TYPE = "Die Description File"
FORMAT_VERSION = 1

PathLike = Union[str, Path]


@dataclass
class DieDescription:
    """Plain-data form of a session: bounds as stored plus both slice lists."""

    rom_bounds: List[Point2D] = field(default_factory=list)
    horizontal_slices: List[float] = field(default_factory=list)
    vertical_slices: List[float] = field(default_factory=list)


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DescriptionFormatError(f"{where} must be a number, got {value!r}")
    return float(value)


def _number_list(data: Mapping[str, Any], key: str) -> List[float]:
    raw = data.get(key, [])
    if not isinstance(raw, list):
        raise DescriptionFormatError(f'"{key}" must be an array')
    return [_number(value, f"{key}[{idx}]") for idx, value in enumerate(raw)]


def parse_description(data: Mapping[str, Any]) -> DieDescription:
    """Validate a decoded JSON object and convert it to a :class:`DieDescription`."""

    if not isinstance(data, Mapping):
        raise DescriptionFormatError("die description must be a JSON object")

    file_type = data.get("fileType")
    if file_type != FILE_TYPE:
        raise DescriptionFormatError(f"not a die description file (fileType={file_type!r})")

    version = data.get("version", 0)
    if isinstance(version, bool) or not isinstance(version, int):
        raise DescriptionFormatError(f"version must be an integer, got {version!r}")
    if version <= 0 or version > FORMAT_VERSION:
        raise DescriptionFormatError(
            f"can only read die description versions 1..{FORMAT_VERSION}, got {version}"
        )

    raw_bounds = data.get("romBounds", [])
    if not isinstance(raw_bounds, list):
        raise DescriptionFormatError('"romBounds" must be an array')
    if len(raw_bounds) > 4:
        raise DescriptionFormatError(f'"romBounds" holds at most 4 points, got {len(raw_bounds)}')
    bounds: List[Point2D] = []
    for idx, entry in enumerate(raw_bounds):
        if not isinstance(entry, list) or len(entry) != 2:
            raise DescriptionFormatError(f"romBounds[{idx}] must be an [x, y] pair")
        bounds.append((_number(entry[0], f"romBounds[{idx}][0]"), _number(entry[1], f"romBounds[{idx}][1]")))

    return DieDescription(
        rom_bounds=bounds,
        horizontal_slices=_number_list(data, "horizontalSlices"),
        vertical_slices=_number_list(data, "verticalSlices"),
    )


def dump_description(description: DieDescription) -> Dict[str, Any]:
    return {
        "fileType": FILE_TYPE,
        "version": FORMAT_VERSION,
        "romBounds": [[float(x), float(y)] for x, y in description.rom_bounds],
        "horizontalSlices": [float(v) for v in description.horizontal_slices],
        "verticalSlices": [float(v) for v in description.vertical_slices],
    }


def load_description(path: PathLike) -> DieDescription:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DescriptionFormatError(f"{path}: invalid JSON ({exc})") from exc
    description = parse_description(data)
    logger.info(
        "Loaded die description %s: %d bound(s), %d horizontal, %d vertical slice(s)",
        path,
        len(description.rom_bounds),
        len(description.horizontal_slices),
        len(description.vertical_slices),
    )
    return description


def save_description(description: DieDescription, path: PathLike) -> None:
    path = Path(path)
    path.write_text(json.dumps(dump_description(description), indent=4) + "\n", encoding="utf-8")
    logger.info("Saved die description to %s", path)
