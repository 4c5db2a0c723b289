"""
Request body helpers

ReplayableBody keeps the whole body in memory so it can be rewound and sent
again on every retry attempt.
"""

import io
import json
import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any

from .errors import BodyEncodeError, BodyReadError, BodySeekError

logger = logging.getLogger(__name__)


class ReplayableBody(io.BytesIO):
    """In-memory seekable body, closing it does nothing"""

    def close(self) -> None:
        pass


def is_seekable(body: Any) -> bool:
    seekable = getattr(body, "seekable", None)
    if callable(seekable):
        return bool(seekable())
    return callable(getattr(body, "seek", None))


def make_replayable(body: Any) -> Any:
    """
    Return body if it can already seek, otherwise an in-memory copy of it.

    The body is read synchronously: a file or socket backed body blocks the
    event loop while it is copied, pass in-memory bodies from async code.
    """
    try:
        if is_seekable(body):
            return body
        data = body.read()
    except Exception as e:
        raise BodyReadError("failed to read body") from e

    if isinstance(data, str):
        data = data.encode("utf-8")
    data = data or b""

    logger.debug(f"Buffered {len(data)} body bytes for replay")
    return ReplayableBody(data)


def rewind(body: Any) -> None:
    try:
        body.seek(0, io.SEEK_SET)
    except Exception as e:
        raise BodySeekError("failed to seek to start") from e


def json_body(value: Any) -> io.BytesIO:
    """Encode value as a JSON document followed by a newline"""
    try:
        encoded = json.dumps(value) + "\n"
    except (TypeError, ValueError) as e:
        raise BodyEncodeError(f"failed to encode {value!r}") from e
    return io.BytesIO(encoded.encode("utf-8"))


def xml_body(value: Any, root: str = "root") -> io.BytesIO:
    """Encode value as an XML document with the given root element"""
    try:
        element = _to_element(root, value)
        encoded = ET.tostring(element, encoding="unicode").encode("utf-8")
    except (TypeError, ValueError) as e:
        raise BodyEncodeError(f"failed to encode {value!r}") from e
    return io.BytesIO(encoded)


def _to_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)

    if isinstance(value, Mapping):
        for key, item in value.items():
            element.append(_to_element(str(key), item))
    elif isinstance(value, (list, tuple)):
        for item in value:
            element.append(_to_element("item", item))
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif isinstance(value, (str, int, float)):
        element.text = str(value)
    elif value is not None:
        raise TypeError(f"unsupported XML value type: {type(value).__name__}")

    return element
