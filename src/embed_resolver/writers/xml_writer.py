"""XML response writer."""

import re
from enum import Enum
from typing import Any, TextIO
from xml.sax.saxutils import XMLGenerator

from embed_resolver.writers.base import ResponseWriter

# Characters XML 1.0 does not allow, even escaped
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _text(value: Any) -> str:
    return _INVALID_XML_CHARS.sub("", _format(value))


def _format(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return repr(value)
    return str(value)


class XmlResponseWriter(ResponseWriter):
    """
    Streams an XML document.

    Every property becomes an element whose text is the value. Arrays become
    an element holding repeated siblings named by each array item call, so
    callers must pass the item name even though JSON ignores it.
    """

    content_type = "text/xml"

    def __init__(self, stream: TextIO, leave_open: bool = False) -> None:
        super().__init__(stream, leave_open=leave_open)
        self._generator = XMLGenerator(stream, encoding="utf-8", short_empty_elements=False)
        self._open_elements: list[str] = []

    def _start(self, name: str) -> None:
        self._ensure_open()
        self._generator.startElement(name, {})
        self._open_elements.append(name)

    def _end(self) -> None:
        self._ensure_open()
        self._generator.endElement(self._open_elements.pop())

    def _element(self, name: str, value: Any) -> None:
        self._ensure_open()
        self._generator.startElement(name, {})
        self._generator.characters(_text(value))
        self._generator.endElement(name)

    def start_response(self, name: str) -> None:
        self._ensure_open()
        self._generator.startDocument()
        self._start(name)

    def end_response(self) -> None:
        self._ensure_open()
        while self._open_elements:
            self._end()
        self._generator.endDocument()

    def write_property(self, name: str, value: Any) -> None:
        self._element(name, value)

    def start_array_property(self, name: str) -> None:
        self._start(name)

    def end_array_property(self) -> None:
        self._end()

    def start_object_property(self, name: str) -> None:
        self._start(name)

    def end_object_property(self) -> None:
        self._end()

    def start_object(self, name: str) -> None:
        self._start(name)

    def end_object(self) -> None:
        self._end()

    def write_array_value(self, name: str, value: Any) -> None:
        self._element(name, value)
