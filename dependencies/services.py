from functools import lru_cache

from core.config import settings
from qa_services.documents import DocumentService
from qa_services.llm import LLMService
from qa_services.pdf_processor import PDFProcessor
from qa_services.store import DocumentStore


@lru_cache()
def get_document_store() -> DocumentStore:
    return DocumentStore(
        settings.DATA_DIR,
        default_slot=settings.DEFAULT_SLOT,
        document_filename=settings.DOCUMENT_FILENAME,
        text_filename=settings.TEXT_FILENAME,
    )


@lru_cache()
def get_pdf_processor() -> PDFProcessor:
    return PDFProcessor()


@lru_cache()
def get_llm_service() -> LLMService:
    return LLMService(model=settings.CHAT_MODEL, api_key=settings.OPENAI_API_KEY)


def get_document_service() -> DocumentService:
    return DocumentService(get_document_store(), get_pdf_processor(), get_llm_service())
