from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict
import json

from .errors import AppError, BAD_JOB
from .models import Selector
from .parsing import parse_column, resolve_path


@dataclass
class MergeJob:
    target: Selector
    input: Selector
    commit: bool = True

    # ---------- Serialization ----------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MergeJob":
        if not isinstance(data, dict):
            raise AppError(BAD_JOB, "Job must be a JSON object")

        def _selector(key: str) -> Selector:
            raw = data.get(key)
            if not isinstance(raw, dict):
                raise AppError(BAD_JOB, f"Missing '{key}' section")
            try:
                path = raw["file_path"]
                id_column = raw["id_column"]
                value_column = raw["value_column"]
            except KeyError as e:
                raise AppError(BAD_JOB, f"'{key}' is missing {e.args[0]!r}")
            return Selector(
                file_path=resolve_path(path),
                id_column=parse_column(id_column),
                value_column=parse_column(value_column),
            )

        commit = data.get("commit", True)
        if not isinstance(commit, bool):
            raise AppError(BAD_JOB, f"'commit' must be true or false (got {commit!r})")
        return cls(target=_selector("target"), input=_selector("input"), commit=commit)

    # ---------- File IO ----------

    def save_json(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_json(cls, path: str) -> "MergeJob":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise AppError(BAD_JOB, f"Job file not found: {path}", {"path": path})
        except json.JSONDecodeError as e:
            raise AppError(BAD_JOB, f"Invalid JSON: {e}", {"path": path})
        return cls.from_dict(data)
