"""
JSON file helpers based on orjson.
- read_json(Path)  -> Any | None (None when the file is missing)
- write_json(Path, data) -> atomic write (temp file + replace), parent created

orjson reads/writes bytes, hence the binary modes.
"""
import os
from pathlib import Path
from typing import Any

import orjson


def read_json(path: Path) -> Any:
    if not path.exists():
        return None
    with path.open("rb") as f:
        return orjson.loads(f.read())


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("wb") as f:
        f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))
    os.replace(tmp, path)
