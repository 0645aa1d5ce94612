"""UTF-8 position mapping from encoded byte offsets back to text offsets."""

from __future__ import annotations

from bisect import bisect_right
from typing import Final


class UTF8PositionMapper:
    """Maps byte offsets in UTF-8 encoded text to character offsets.

    Errors raised while decoding are located by byte offset. When the input
    came in as ``str``, callers want an index into that string instead. The
    mapper records a checkpoint every ``checkpoint_interval`` characters and
    walks forward from the nearest one, so a lookup never rescans the whole
    text.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper with checkpoint system.

        Args:
            text: The text whose UTF-8 encoding the byte offsets refer to
            checkpoint_interval: Characters between checkpoints
        """
        if checkpoint_interval < 1:
            raise ValueError("checkpoint_interval must be positive")

        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self._is_ascii_only: Final = text.isascii()
        # Parallel lists: byte offset and char offset of each checkpoint
        self._byte_marks: list[int] = []
        self._char_marks: list[int] = []

        if not self._is_ascii_only:
            self._build_checkpoints()

    def _build_checkpoints(self) -> None:
        byte_pos = 0
        for char_pos, char in enumerate(self.text):
            if char_pos % self.checkpoint_interval == 0:
                self._byte_marks.append(byte_pos)
                self._char_marks.append(char_pos)
            byte_pos += _utf8_width(char)

        self._byte_marks.append(byte_pos)
        self._char_marks.append(len(self.text))

    def byte_to_char(self, byte_pos: int) -> int:
        """Convert a byte offset to the index of the character containing it.

        Offsets falling inside a multi-byte sequence map to the character
        that sequence encodes. Offsets at or past the end map to
        ``len(text)``.

        Args:
            byte_pos: Byte offset into the UTF-8 encoding of ``text``

        Returns:
            Character offset into ``text``
        """
        if self._is_ascii_only:
            return min(byte_pos, len(self.text))

        idx = bisect_right(self._byte_marks, byte_pos) - 1
        current_byte = self._byte_marks[idx]
        current_char = self._char_marks[idx]

        while current_char < len(self.text):
            width = _utf8_width(self.text[current_char])
            if current_byte + width > byte_pos:
                break
            current_byte += width
            current_char += 1

        return current_char


def _utf8_width(char: str) -> int:
    code_point = ord(char)
    if code_point < 0x80:
        return 1
    if code_point < 0x800:
        return 2
    if code_point < 0x10000:
        return 3
    return 4
