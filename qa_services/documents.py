"""
Upload, extraction and question answering over a document slot.
"""
from pathlib import Path
from typing import Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from core.errors import ExternalServiceError, InputError, NotFoundError
from core.logging_config import get_logger
from qa_services.llm import LLMService
from qa_services.pdf_processor import PDFProcessor
from qa_services.store import DocumentStore, SlotState

logger = get_logger(__name__)

NO_FILE_MESSAGE = "No file uploaded."
NO_CONTENT_MESSAGE = "No parsed PDF content found. Please upload a valid PDF first."
NO_QUESTION_MESSAGE = "No question provided"
GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


class DocumentService:
    """Ties the slot store to PDF extraction and the completion service."""

    def __init__(self, store: DocumentStore, pdf_processor: PDFProcessor, llm_service: LLMService):
        self.store = store
        self.pdf_processor = pdf_processor
        self.llm_service = llm_service

    async def upload(self, key: str, pdf_bytes: bytes, extract: bool = True) -> Tuple[Path, SlotState]:
        """Replace the slot's document; extract its text too unless ``extract`` is False."""
        async with self.store.lock(key):
            path = await run_in_threadpool(self.store.write_document, key, pdf_bytes)
            self.store.mark_pending(key)
            if extract:
                await self._extract_locked(key)
            return path, self.store.state(key)

    async def extract(self, key: str) -> SlotState:
        async with self.store.lock(key):
            return await self._extract_locked(key)

    async def _extract_locked(self, key: str) -> SlotState:
        try:
            pdf_bytes = await run_in_threadpool(self.store.read_document, key)
            text = await run_in_threadpool(self.pdf_processor.extract_text, pdf_bytes)
            await run_in_threadpool(self.store.write_text, key, text)
        except Exception as e:
            message = e.message if isinstance(e, ExternalServiceError) else str(e)
            logger.error("Text extraction failed for slot %s: %s", key, message)
            self.store.mark_failed(key, message)
        else:
            logger.info("Text extraction completed for slot %s (%d characters)", key, len(text))
            self.store.mark_completed(key, len(text))
        return self.store.state(key)

    async def answer(self, key: str, question: Optional[str]) -> str:
        if not self.store.has_slot(key):
            raise NotFoundError(NO_CONTENT_MESSAGE)
        async with self.store.lock(key):
            if not self.store.has_text(key):
                raise NotFoundError(NO_CONTENT_MESSAGE)
            if not question:
                raise InputError(NO_QUESTION_MESSAGE)
            try:
                document_text = await run_in_threadpool(self.store.read_text, key)
            except Exception as e:
                logger.exception("Reading extracted text for slot %s failed", key)
                raise ExternalServiceError(GENERIC_ERROR_MESSAGE) from e

        try:
            return await self.llm_service.generate_answer(question, document_text)
        except Exception as e:
            logger.exception("Answer generation failed for slot %s", key)
            raise ExternalServiceError(GENERIC_ERROR_MESSAGE) from e
