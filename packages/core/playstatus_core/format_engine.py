"""Template engine over ``str.format`` field syntax, e.g. ``"{artist} - {title}"``."""

from __future__ import annotations

import string
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .templates import CompileError, EvaluationError


@dataclass
class CompiledFormat:
    template: str
    fields: tuple[str, ...]
    released: bool = False


class FormatTemplateEngine:
    """Compiles format strings and evaluates them against track metadata mappings.

    Keeps a count of handles that were compiled but not yet released.
    """

    def __init__(self) -> None:
        self._formatter = string.Formatter()
        self._live = 0
        self._lock = threading.Lock()

    @property
    def live_handles(self) -> int:
        with self._lock:
            return self._live

    def compile(self, template: str) -> CompiledFormat:
        try:
            parsed = list(self._formatter.parse(template))
        except ValueError as exc:
            raise CompileError(f"{template!r}: {exc}") from exc

        fields: list[str] = []
        for _literal, field_name, format_spec, conversion in parsed:
            if field_name is None:
                continue
            if not field_name or field_name.isdigit():
                raise CompileError(f"{template!r}: positional fields are not supported")
            if conversion not in (None, "r", "s", "a"):
                raise CompileError(f"{template!r}: unknown conversion !{conversion}")
            if format_spec and ("{" in format_spec or "}" in format_spec):
                raise CompileError(f"{template!r}: nested fields are not supported")
            fields.append(field_name)

        with self._lock:
            self._live += 1
        return CompiledFormat(template=template, fields=tuple(fields))

    @staticmethod
    def _fields(metadata: Any) -> Mapping[str, Any]:
        if isinstance(metadata, Mapping):
            return metadata
        as_dict = getattr(metadata, "as_dict", None)
        if callable(as_dict):
            return as_dict()
        return vars(metadata)

    def evaluate(self, compiled: CompiledFormat, metadata: Any, max_len: int) -> str:
        if compiled.released:
            raise EvaluationError("template handle already released")
        try:
            text = self._formatter.vformat(compiled.template, (), self._fields(metadata))
        except (KeyError, AttributeError, IndexError, TypeError, ValueError) as exc:
            raise EvaluationError(f"{compiled.template!r}: {exc!r}") from exc
        return text[:max_len]

    def release(self, compiled: CompiledFormat) -> None:
        if compiled.released:
            return
        compiled.released = True
        with self._lock:
            self._live -= 1
