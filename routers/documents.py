from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Query, UploadFile
from fastapi.responses import FileResponse
from fastapi.concurrency import run_in_threadpool

from core.config import settings
from core.errors import InputError, NotFoundError
from dependencies.services import get_document_service
from models.qa_model import (
    AskRequest,
    AskResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    PDFInfoResponse,
    StatusResponse,
    UploadResponse,
)
from qa_services.documents import NO_FILE_MESSAGE, DocumentService
from qa_services.store import ExtractionStatus

router = APIRouter(responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})

SLOT_QUERY = Query(None, description="Slot key; omit to use the single default slot")


def format_size(size: int) -> str:
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


@router.post("/upload", response_model=UploadResponse, response_model_exclude_none=True)
async def upload_pdf(
    background_tasks: BackgroundTasks,
    pdf: Optional[UploadFile] = File(None),
    slot: Optional[str] = SLOT_QUERY,
    service: DocumentService = Depends(get_document_service),
):
    """
    Store the uploaded file as the slot's document and extract its text.

    The file is always saved under the same name, replacing whatever was
    uploaded before. With ``AWAIT_EXTRACTION`` off, extraction runs after the
    response is sent and ``/status`` reports when it is done.
    """
    if pdf is None:
        raise InputError(NO_FILE_MESSAGE, status_code=500)
    key = service.store.slot_key(slot)

    pdf_bytes = await pdf.read()
    extract_now = settings.AWAIT_EXTRACTION
    path, state = await service.upload(key, pdf_bytes, extract=extract_now)
    if not extract_now:
        background_tasks.add_task(service.extract, key)
        message = "PDF uploaded; text extraction started."
    elif state.status == ExtractionStatus.COMPLETED:
        message = "PDF uploaded and parsed successfully."
    else:
        message = "PDF uploaded; text extraction failed."

    return UploadResponse(
        message=message,
        filePath=str(path),
        status=state.status.value,
        characters=state.characters,
        error=state.error,
    )


@router.post("/ask", response_model=AskResponse)
async def ask_question(
    payload: Optional[AskRequest] = None,
    slot: Optional[str] = SLOT_QUERY,
    service: DocumentService = Depends(get_document_service),
):
    """Answer a question using only the slot's extracted text."""
    key = service.store.slot_key(slot)
    answer = await service.answer(key, payload.question if payload else None)
    return AskResponse(answer=answer)


@router.get("/status", response_model=StatusResponse)
async def extraction_status(
    slot: Optional[str] = SLOT_QUERY,
    service: DocumentService = Depends(get_document_service),
):
    store = service.store
    key = store.slot_key(slot)
    state = store.state(key)
    return StatusResponse(
        slot=key,
        status=state.status.value,
        characters=state.characters,
        error=state.error,
        has_document=store.has_document(key),
        has_text=store.has_text(key),
    )


@router.get("/pdf")
async def get_pdf(
    slot: Optional[str] = SLOT_QUERY,
    service: DocumentService = Depends(get_document_service),
):
    store = service.store
    key = store.slot_key(slot)
    if not store.has_document(key):
        raise NotFoundError("No PDF available", status_code=404)

    path = store.document_path(key)
    return FileResponse(path=str(path), media_type="application/pdf", filename=path.name)


@router.get("/pdf/info", response_model=PDFInfoResponse)
async def get_pdf_info(
    slot: Optional[str] = SLOT_QUERY,
    service: DocumentService = Depends(get_document_service),
):
    """
    Get details about the uploaded PDF: name and size.
    """
    store = service.store
    key = store.slot_key(slot)
    if not store.has_document(key):
        raise NotFoundError("No PDF uploaded", status_code=404)

    size = store.document_path(key).stat().st_size
    return PDFInfoResponse(name=store.document_filename, size=size, size_formatted=format_size(size))


@router.delete("/clear", response_model=MessageResponse)
async def clear_document(
    slot: Optional[str] = SLOT_QUERY,
    service: DocumentService = Depends(get_document_service),
):
    store = service.store
    key = store.slot_key(slot)
    removed = False
    if store.has_slot(key):
        async with store.lock(key):
            removed = await run_in_threadpool(store.clear, key)
    if not removed:
        raise NotFoundError("No document to clear", status_code=404)
    return MessageResponse(message="Document and extracted text cleared successfully")


@router.get("/health", response_model=HealthResponse)
async def health(service: DocumentService = Depends(get_document_service)):
    store = service.store
    key = store.slot_key()
    return HealthResponse(
        status="ok",
        has_document=store.has_document(key),
        has_text=store.has_text(key),
        characters=store.state(key).characters,
    )
