"""
Bounded extraction of record content into a text window
"""
from typing import BinaryIO, Optional, Union
import codecs

from .base import BufferWindow
from .exceptions import ConfigurationError

RecordContent = Union[bytes, bytearray, memoryview, BinaryIO]

DEFAULT_CHARACTER_SET = "UTF-8"


class BufferExtractor:
    """
    Reads at most ``max_buffer_bytes`` from the start of a record's content
    and decodes it into text.

    Anything past the limit is never examined, so a pattern that could
    only match using those bytes yields no value. Bytes split at the
    cutoff are decoded with the codec's replacement character.

    Example:
        extractor = BufferExtractor(max_buffer_bytes=3)
        window = extractor.extract(b"foo\\r\\nbar")
        # window.text == "foo", window.truncated is True
    """

    def __init__(
        self,
        max_buffer_bytes: Optional[int] = None,
        character_set: str = DEFAULT_CHARACTER_SET
    ):
        """
        Args:
            max_buffer_bytes: Byte limit; None reads the whole content
            character_set: Codec used to decode the bytes
        """
        if max_buffer_bytes is not None and max_buffer_bytes < 0:
            raise ConfigurationError(f"Buffer size must not be negative: {max_buffer_bytes}")

        try:
            codecs.lookup(character_set)
        except LookupError as e:
            raise ConfigurationError(f"Unknown character set: {character_set}", original_error=e) from e

        self.max_buffer_bytes = max_buffer_bytes
        self.character_set = character_set

    def extract(self, content: RecordContent) -> BufferWindow:
        """
        Extract the bounded window of a record

        Args:
            content: Raw bytes or a readable binary stream positioned at
                the start of the content

        Returns:
            Decoded window
        """
        data, truncated = self._read(content)
        text = data.decode(self.character_set, errors="replace")
        return BufferWindow(text=text, truncated=truncated, byte_count=len(data))

    def _read(self, content: RecordContent):
        limit = self.max_buffer_bytes

        if isinstance(content, (bytes, bytearray, memoryview)):
            data = bytes(content)
            if limit is None or len(data) <= limit:
                return data, False
            return data[:limit], True

        # Stream: raw streams may return short reads, so keep reading until
        # the window is full or the stream is exhausted
        if limit is None:
            return self._read_stream(content, None), False

        data = self._read_stream(content, limit)
        truncated = bool(content.read(1))
        return data, truncated

    def _read_stream(self, stream: BinaryIO, limit: Optional[int]) -> bytes:
        buf = bytearray()
        while limit is None or len(buf) < limit:
            chunk = stream.read(-1 if limit is None else limit - len(buf))
            if not chunk:
                break
            buf += chunk
        return bytes(buf)


def extract(
    content: RecordContent,
    max_buffer_bytes: Optional[int] = None,
    character_set: str = DEFAULT_CHARACTER_SET
) -> BufferWindow:
    """Convenience wrapper around BufferExtractor.extract"""
    return BufferExtractor(max_buffer_bytes, character_set).extract(content)
