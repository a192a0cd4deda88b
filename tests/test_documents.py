"""
Document Service Tests

Two uploads to the same slot race for the single document and text files.
The slot lock serializes them, so the slot always ends up holding one upload
cleanly; which one wins is not defined.
"""
import asyncio
import time

import pytest

from core.errors import InputError, NotFoundError
from qa_services.documents import DocumentService
from qa_services.llm import LLMService
from qa_services.store import ExtractionStatus


class SlowTextProcessor:
    """Treats the upload as UTF-8 text and takes a while about it."""

    def __init__(self, delay: float = 0.05):
        self.delay = delay

    def extract_text(self, pdf_bytes: bytes) -> str:
        time.sleep(self.delay)
        return pdf_bytes.decode("utf-8")


@pytest.fixture
def slow_service(store, fake_openai):
    return DocumentService(store, SlowTextProcessor(), LLMService(client=fake_openai))


class TestConcurrentUploads:

    def test_racing_uploads_end_in_one_consistent_state(self, slow_service, store):
        """Known race: the winner is arbitrary, but document and text always match"""
        async def race():
            return await asyncio.gather(
                slow_service.upload("default", b"upload A"),
                slow_service.upload("default", b"upload B"),
            )

        results = asyncio.run(race())

        document = store.read_document("default").decode("utf-8")
        assert document in ("upload A", "upload B")
        assert store.read_text("default") == document
        assert all(state.status == ExtractionStatus.COMPLETED for _, state in results)

    def test_question_waits_for_running_extraction(self, slow_service, store, fake_openai):
        """A question on a slot being extracted sees the finished text"""
        async def upload_then_ask():
            upload = asyncio.ensure_future(slow_service.upload("default", b"fresh text"))
            await asyncio.sleep(0)
            answer = await slow_service.answer("default", "What?")
            await upload
            return answer

        asyncio.run(upload_then_ask())
        user_message = fake_openai.completions.calls[0]["messages"][1]["content"]
        assert "fresh text" in user_message


class TestAnswer:

    def test_no_text(self, slow_service):
        with pytest.raises(NotFoundError):
            asyncio.run(slow_service.answer("default", "What?"))

    def test_no_question(self, slow_service, store):
        store.write_text("default", "text")
        with pytest.raises(InputError):
            asyncio.run(slow_service.answer("default", None))

    def test_deferred_extraction(self, slow_service, store):
        path, state = asyncio.run(slow_service.upload("default", b"later", extract=False))
        assert state.status == ExtractionStatus.PENDING
        assert not store.has_text("default")

        state = asyncio.run(slow_service.extract("default"))
        assert state.status == ExtractionStatus.COMPLETED
        assert state.characters == len("later")
        assert store.read_text("default") == "later"
