from typing import Iterator, List

from docbrief.models.document import TextChunk

BOUNDARY_CHARS = (".", "\n")


def _cut_points(text: str, max_chunk_size: int) -> List[int]:
    """End offsets of each chunk, in order"""
    ends = []
    start = 0
    length = len(text)

    while start < length:
        end = start + max_chunk_size

        # Try to break at a sentence or line boundary inside the window
        if end < length:
            break_point = max(text.rfind(ch, start, end) for ch in BOUNDARY_CHARS)
            if break_point > start + max_chunk_size * 0.5:
                end = break_point + 1
        else:
            end = length

        ends.append(end)
        start = end

    return ends


class ChunkedText:
    """Lazy, restartable sequence of chunks over one text.

    Each iteration yields the same chunks in the same order. Chunks are
    contiguous and non-overlapping and never longer than ``max_chunk_size``,
    so ``"".join(c.content for c in chunks) == text``.
    """

    def __init__(self, text: str, max_chunk_size: int):
        if max_chunk_size < 1:
            raise ValueError("max_chunk_size must be at least 1")
        self.text = text
        self.max_chunk_size = max_chunk_size
        self._ends = None

    def _boundaries(self) -> List[int]:
        if self._ends is None:
            if len(self.text) <= self.max_chunk_size:
                self._ends = [len(self.text)]
            else:
                self._ends = _cut_points(self.text, self.max_chunk_size)
        return self._ends

    def __len__(self) -> int:
        return len(self._boundaries())

    def __iter__(self) -> Iterator[TextChunk]:
        ends = self._boundaries()
        total = len(ends)
        start = 0
        for index, end in enumerate(ends):
            yield TextChunk(index=index, content=self.text[start:end], total=total)
            start = end


def chunk_text(text: str, max_chunk_size: int) -> ChunkedText:
    """Split text into bounded chunks, preferring to cut after '.' or a line break"""
    return ChunkedText(text, max_chunk_size)
