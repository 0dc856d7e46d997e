"""JSON response writer."""

import json
from enum import Enum
from typing import Any, TextIO

from embed_resolver.writers.base import ResponseWriter

_OBJECT = "object"
_ARRAY = "array"


def _encode(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return json.dumps(value, ensure_ascii=False)


class JsonResponseWriter(ResponseWriter):
    """
    Streams a JSON document.

    Objects, arrays and properties map directly onto JSON; the element names
    given to array items are not represented.
    """

    content_type = "application/json"

    def __init__(self, stream: TextIO, leave_open: bool = False) -> None:
        super().__init__(stream, leave_open=leave_open)
        # One [kind, item_count] pair per open container
        self._containers: list[list[Any]] = []

    def _begin_item(self) -> None:
        stream = self._ensure_open()
        if self._containers:
            frame = self._containers[-1]
            if frame[1]:
                stream.write(",")
            frame[1] += 1

    def _write_name(self, name: str) -> None:
        self._begin_item()
        self._ensure_open().write(_encode(name) + ":")

    def _open(self, kind: str) -> None:
        self._ensure_open().write("{" if kind == _OBJECT else "[")
        self._containers.append([kind, 0])

    def _close(self) -> None:
        stream = self._ensure_open()
        kind, _ = self._containers.pop()
        stream.write("}" if kind == _OBJECT else "]")

    def start_response(self, name: str) -> None:
        self._begin_item()
        self._open(_OBJECT)

    def end_response(self) -> None:
        self._ensure_open()
        while self._containers:
            self._close()
        self._ensure_open().flush()

    def write_property(self, name: str, value: Any) -> None:
        self._write_name(name)
        self._ensure_open().write(_encode(value))

    def start_array_property(self, name: str) -> None:
        self._write_name(name)
        self._open(_ARRAY)

    def end_array_property(self) -> None:
        self._close()

    def start_object_property(self, name: str) -> None:
        self._write_name(name)
        self._open(_OBJECT)

    def end_object_property(self) -> None:
        self._close()

    def start_object(self, name: str) -> None:
        self._begin_item()
        self._open(_OBJECT)

    def end_object(self) -> None:
        self._close()

    def write_array_value(self, name: str, value: Any) -> None:
        self._begin_item()
        self._ensure_open().write(_encode(value))
