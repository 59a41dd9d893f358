import asyncio
from typing import Awaitable, Callable, List

from docbrief.core.config import Settings
from docbrief.models.document import ChunkSummary, FinalSummary, TextChunk
from docbrief.services.completion_client import CompletionClient, GenerationConfig
from docbrief.services.text_chunker import chunk_text
from docbrief.utils.logger import logger

DelayFunc = Callable[[float], Awaitable[None]]

DIRECT_PROMPT = (
    "Please provide a concise and comprehensive summary of the following text. "
    "Focus on the main points, key insights, and important details. "
    "Keep the summary between 300-500 words. Proper well structured summary:\n\n{text}"
)

CHUNK_PROMPT = (
    "Please provide a concise summary of this text section (part {position} of {total}). "
    "Focus on the main points and key insights:\n\n{text}"
)

REDUCE_PROMPT = (
    "Please create a comprehensive final summary by combining these section summaries. "
    "Create a cohesive, well-structured summary that captures all the main points "
    "(aim for 400-600 words):\n\n{text}"
)


class SummaryService:
    """Summarizes text with one completion call, or map-reduce over chunks for large input.

    Chunk calls run strictly in order with ``delay`` awaited between them.
    Any failing call aborts the whole summary; nothing partial is returned.
    """

    def __init__(self, client: CompletionClient, settings: Settings, delay: DelayFunc = asyncio.sleep):
        self.client = client
        self.large_text_threshold = settings.LARGE_TEXT_THRESHOLD
        self.max_chunk_size = settings.MAX_CHUNK_SIZE
        self.chunk_delay = settings.CHUNK_DELAY_SECONDS
        self.delay = delay

        base = dict(
            temperature=settings.GEMINI_TEMPERATURE,
            top_k=settings.GEMINI_TOP_K,
            top_p=settings.GEMINI_TOP_P,
        )
        self.direct_config = GenerationConfig(max_output_tokens=settings.SUMMARY_MAX_TOKENS, **base)
        self.chunk_config = GenerationConfig(max_output_tokens=settings.CHUNK_SUMMARY_MAX_TOKENS, **base)
        self.final_config = GenerationConfig(max_output_tokens=settings.FINAL_SUMMARY_MAX_TOKENS, **base)

    def is_large(self, text: str) -> bool:
        return len(text) > self.large_text_threshold

    async def summarize(self, text: str) -> FinalSummary:
        logger.info("Calling summarization API...")
        if self.is_large(text):
            summary = await self._summarize_large_text(text)
        else:
            summary = FinalSummary(
                text=await self.client.complete(DIRECT_PROMPT.format(text=text), self.direct_config)
            )
        logger.info(f"Summary generated successfully, length: {len(summary.text)}")
        return summary

    async def _summarize_large_text(self, text: str) -> FinalSummary:
        chunks = chunk_text(text, self.max_chunk_size)
        total = len(chunks)
        logger.info(f"Processing {total} chunks for large text")

        chunk_summaries: List[ChunkSummary] = []
        for chunk in chunks:
            if chunk.index > 0:
                await self.delay(self.chunk_delay)
            chunk_summaries.append(await self._summarize_chunk(chunk))

        combined = self.combine(chunk_summaries)
        final_text = await self.client.complete(REDUCE_PROMPT.format(text=combined), self.final_config)
        return FinalSummary(text=final_text, chunk_count=total)

    async def _summarize_chunk(self, chunk: TextChunk) -> ChunkSummary:
        logger.info(f"Processing chunk {chunk.position}/{chunk.total}")
        prompt = CHUNK_PROMPT.format(position=chunk.position, total=chunk.total, text=chunk.content)
        text = await self.client.complete(prompt, self.chunk_config)
        return ChunkSummary(source_chunk_index=chunk.index, text=text)

    @staticmethod
    def combine(chunk_summaries: List[ChunkSummary]) -> str:
        ordered = sorted(chunk_summaries, key=lambda s: s.source_chunk_index)
        return "\n\n".join(s.text for s in ordered)
