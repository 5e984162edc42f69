from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel


def strip_line_comments(content: str) -> str:
    """Drop ``//`` comments outside of string literals, line by line."""
    result_lines: list[str] = []
    for line in content.splitlines():
        in_string = False
        escaped = False
        cleaned: list[str] = []
        for idx, char in enumerate(line):
            if char == '"' and not escaped:
                in_string = not in_string
            if not in_string and char == "/" and line[idx + 1 : idx + 2] == "/":
                break
            cleaned.append(char)
            escaped = char == "\\" and not escaped
        result_lines.append("".join(cleaned))
    return "\n".join(result_lines)


def loads_commented_json(content: str | bytes) -> Any:
    text = content.decode("utf-8") if isinstance(content, bytes) else content
    return orjson.loads(strip_line_comments(text))


def load_json(path: Path) -> dict[str, Any]:
    data = loads_commented_json(path.read_bytes())
    return data if isinstance(data, dict) else {}


def _default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError


def dump_json_bytes(payload: Any) -> bytes:
    try:
        return orjson.dumps(payload, default=_default, option=orjson.OPT_INDENT_2)
    except TypeError:
        return json.dumps(payload, default=str, ensure_ascii=True, indent=2).encode("utf-8")


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload))
    tmp_path.replace(path)
