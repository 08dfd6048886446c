"""Render command payloads to stdout."""

from __future__ import annotations

import argparse
import json
from typing import Any

from pydantic import BaseModel


def to_payload(value: Any) -> Any:
    """Dump pydantic models with their wire aliases."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [to_payload(v) for v in value]
    if isinstance(value, dict):
        return {k: to_payload(v) for k, v in value.items()}
    return value


def _format_text(payload: Any, indent: int = 0) -> list[str]:
    pad = "  " * indent
    lines: list[str] = []
    if isinstance(payload, dict):
        for key, value in payload.items():
            if isinstance(value, (dict, list)) and value:
                lines.append(f"{pad}{key}:")
                lines.extend(_format_text(value, indent + 1))
            else:
                lines.append(f"{pad}{key}: {value}")
    elif isinstance(payload, list):
        for value in payload:
            if isinstance(value, (dict, list)):
                lines.append(f"{pad}-")
                lines.extend(_format_text(value, indent + 1))
            else:
                lines.append(f"{pad}- {value}")
    else:
        lines.append(f"{pad}{payload}")
    return lines


def emit(args: argparse.Namespace, payload: Any) -> None:
    data = to_payload(payload)
    if getattr(args, "output", "json") == "text":
        print("\n".join(_format_text(data)))
    else:
        print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
