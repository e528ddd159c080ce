"""Utility helpers (event encoding, output decoding)."""
import codecs
import json


def serialize_event(event) -> str:
    """Encode an invocation event as the single JSON argument for the child.

    Text is kept readable where possible; a lone surrogate cannot be passed
    through exec(), so such events are sent with ASCII escapes instead.
    """
    text = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        text = json.dumps(event, separators=(",", ":"))
    return text


class StreamDecoder:
    """Incremental decoder for one output stream.

    Chunks are cut at arbitrary byte offsets, so a multi-byte character may
    straddle two reads. Undecodable bytes are replaced rather than raised.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def feed(self, data: bytes) -> str:
        return self._decoder.decode(data)

    def flush(self) -> str:
        return self._decoder.decode(b"", final=True)
