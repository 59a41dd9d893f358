from dataclasses import dataclass


@dataclass(frozen=True)
class SourceDocument:
    data: bytes
    content_type: str
    size_bytes: int
    filename: str = "upload"

    @classmethod
    def from_bytes(cls, data: bytes, content_type: str, filename: str = "upload") -> "SourceDocument":
        return cls(data=data, content_type=content_type, size_bytes=len(data), filename=filename)


@dataclass(frozen=True)
class ExtractedText:
    content: str

    @property
    def length(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class TextChunk:
    index: int
    content: str
    total: int

    @property
    def position(self) -> int:
        """1-based position, as shown in prompts ("part 2 of 4")."""
        return self.index + 1


@dataclass(frozen=True)
class ChunkSummary:
    source_chunk_index: int
    text: str


@dataclass(frozen=True)
class FinalSummary:
    text: str
    chunk_count: int = 1
