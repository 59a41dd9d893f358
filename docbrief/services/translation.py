from docbrief.core.config import Settings
from docbrief.services.completion_client import CompletionClient, GenerationConfig
from docbrief.utils.logger import logger

TRANSLATION_UNAVAILABLE = "Translation service temporarily unavailable. Please try again later."

TRANSLATE_PROMPT = (
    "Translate the following English text to {language} language. Maintain the meaning and context. "
    "Only provide the translation, no additional text:\n\n{text}"
)


class TranslationService:
    def __init__(self, client: CompletionClient, settings: Settings):
        self.client = client
        self.config = GenerationConfig(
            temperature=settings.TRANSLATION_TEMPERATURE,
            max_output_tokens=settings.TRANSLATION_MAX_TOKENS,
        )

    async def translate(self, text: str, target_language: str) -> str:
        logger.info(f"Translating to language: {target_language}")
        prompt = TRANSLATE_PROMPT.format(language=target_language, text=text)
        translation = await self.client.complete(prompt, self.config)
        logger.info(f"Translation received, length: {len(translation)}")
        return translation
