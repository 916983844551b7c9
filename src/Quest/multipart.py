"""Deferred-error multipart form builder.

A :class:`MultipartForm` collects fields and files fluently and remembers the
first thing that went wrong instead of raising, so it can be assembled inline
and handed to :meth:`Quest.request.PendingRequest.multipart_body`, which turns
a carried error into the request's failure. Encoding is delegated to
``urllib3``.

Example:
    >>> form = (
    ...     MultipartForm()
    ...     .add_field("name", "report")
    ...     .add_file("payload", "report.json", {"rows": 3})
    ...     .close()
    ... )
    >>> form.content_type.startswith("multipart/form-data; boundary=")
    True
"""

from __future__ import annotations

import json
from typing import Any, Callable, List, Optional, Tuple, Union

from urllib3.filepost import encode_multipart_formdata

FileEncoder = Callable[[Any], bytes]
_Field = Tuple[str, Union[str, Tuple[str, bytes, str]]]


def json_encode(value: Any) -> bytes:
    """Encode ``value`` as a JSON document terminated by a newline."""

    return (json.dumps(value, allow_nan=False) + "\n").encode("utf-8")


def copy_encode(value: Any) -> bytes:
    """Pass bytes through, encode text as UTF-8, or drain a readable object."""

    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    if hasattr(value, "read"):
        data = value.read()
        return data.encode("utf-8") if isinstance(data, str) else bytes(data)
    raise TypeError(f"cannot copy value of type {type(value).__name__!r} into a form file")


_DEFAULT_MIME_TYPES = {
    json_encode: "application/json",
    copy_encode: "application/octet-stream",
}


class MultipartForm:
    """Fluent ``multipart/form-data`` builder with a deferred error slot."""

    def __init__(self, boundary: Optional[str] = None) -> None:
        self.error: Optional[BaseException] = None
        self.content: bytes = b""
        self.content_type: str = ""
        self.closed = False
        self._boundary = boundary
        self._fields: List[_Field] = []

    def _writable(self) -> bool:
        if self.error is not None:
            return False
        if self.closed:
            self.error = ValueError("multipart form is already closed")
            return False
        return True

    def add_field(self, name: str, value: str) -> "MultipartForm":
        if self._writable():
            self._fields.append((name, str(value)))
        return self

    def add_file(
        self,
        field_name: str,
        file_name: str,
        value: Any,
        encoder: FileEncoder = json_encode,
        mime_type: Optional[str] = None,
    ) -> "MultipartForm":
        """Encode ``value`` with ``encoder`` and attach it as a file part."""

        if not self._writable():
            return self
        try:
            data = encoder(value)
        except (TypeError, ValueError, OSError) as exc:
            self.error = exc
            return self
        mime = mime_type or _DEFAULT_MIME_TYPES.get(encoder, "application/octet-stream")
        self._fields.append((field_name, (file_name, data, mime)))
        return self

    def close(self) -> "MultipartForm":
        """Encode the collected parts; further additions become errors."""

        if self.closed or self.error is not None:
            self.closed = True
            return self
        self.closed = True
        try:
            self.content, self.content_type = encode_multipart_formdata(
                self._fields, boundary=self._boundary
            )
        except (TypeError, ValueError) as exc:
            self.error = exc
        return self


__all__ = ["MultipartForm", "json_encode", "copy_encode", "FileEncoder"]
