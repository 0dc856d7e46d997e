"""Format-agnostic structured response writer."""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any, TextIO

from embed_resolver.exceptions import WriterDisposedError


class ResponseWriter(ABC):
    """
    Structured writer independent of the target encoding.

    A writer wraps a text stream. It must be closed exactly once, usually by
    using it as a context manager; closing flushes buffered output and closes
    the stream unless ``leave_open`` was requested. Any write after close
    raises WriterDisposedError.
    """

    def __init__(self, stream: TextIO, leave_open: bool = False) -> None:
        """
        Initialize the writer.

        Args:
            stream: Text stream receiving the encoded document
            leave_open: Keep the stream open when the writer is closed
        """
        self._stream: TextIO | None = stream
        self._leave_open = leave_open

    @property
    def closed(self) -> bool:
        """Return True once the writer has been released."""
        return self._stream is None

    def _ensure_open(self) -> TextIO:
        if self._stream is None:
            raise WriterDisposedError(type(self).__name__)
        return self._stream

    def __enter__(self) -> "ResponseWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Flush and release the underlying stream. Further calls are no-ops."""
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        stream.flush()
        if not self._leave_open:
            stream.close()

    @abstractmethod
    def start_response(self, name: str) -> None:
        """Open the top-level response."""
        ...

    @abstractmethod
    def end_response(self) -> None:
        """Close every open container and the response itself."""
        ...

    @abstractmethod
    def write_property(self, name: str, value: Any) -> None:
        """Write a scalar property."""
        ...

    @abstractmethod
    def start_array_property(self, name: str) -> None:
        """Open an array-valued property."""
        ...

    @abstractmethod
    def end_array_property(self) -> None:
        """Close the current array property."""
        ...

    @abstractmethod
    def start_object_property(self, name: str) -> None:
        """Open an object-valued property."""
        ...

    @abstractmethod
    def end_object_property(self) -> None:
        """Close the current object property."""
        ...

    @abstractmethod
    def start_object(self, name: str) -> None:
        """
        Open an object inside an array.

        Args:
            name: Element name of the repeated item (ignored by JSON)
        """
        ...

    @abstractmethod
    def end_object(self) -> None:
        """Close the current array item object."""
        ...

    @abstractmethod
    def write_array_value(self, name: str, value: Any) -> None:
        """
        Write a scalar inside an array.

        Args:
            name: Element name of the repeated item (ignored by JSON)
            value: Scalar value
        """
        ...
