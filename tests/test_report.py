"""Tests for report assembly."""

import pytest

from page_audit.core.errors import NavigationTimeout, PersistenceFailed
from page_audit.core.types import DiagnosticLog, NavigationOutcome, SeoMetadata
from page_audit.report.assembler import ReportAssembler
from page_audit.storage.memory import InMemoryScreenshotStore
from tests.helpers import FailingStore


@pytest.fixture
def assembler():
    return ReportAssembler(InMemoryScreenshotStore(), "https://cdn.example.com/")


def test_storage_keys_are_fresh(assembler):
    keys = {assembler.new_storage_key() for _ in range(50)}

    assert len(keys) == 50
    assert all(key.startswith("audits/") and key.endswith(".webp") for key in keys)


def test_empty_prefix():
    assembler = ReportAssembler(InMemoryScreenshotStore(), "https://cdn.example.com", key_prefix="")

    assert "/" not in assembler.new_storage_key()


async def test_persist_stores_webp(assembler):
    artifact = await assembler.persist(b"webp")

    assert artifact.mime_type == "image/webp"
    assert artifact.url == f"https://cdn.example.com/{artifact.storage_key}"
    assert assembler.store.objects[artifact.storage_key].data == b"webp"


async def test_persist_failure():
    assembler = ReportAssembler(FailingStore(), "https://cdn.example.com")

    with pytest.raises(PersistenceFailed, match="bucket unavailable"):
        await assembler.persist(b"webp")


async def test_build_report(assembler):
    artifact = await assembler.persist(b"webp")

    report = assembler.build_report(
        "https://example.com",
        NavigationOutcome(http_status=301, load_time_ms=812),
        SeoMetadata(title="Example", meta_description="desc"),
        DiagnosticLog(console_warnings_and_errors=["[ERROR] boom"]),
        artifact,
    )

    assert report.http_status == 301
    assert report.load_time_ms == 812
    assert report.screenshot_url == artifact.url
    assert report.diagnostics.console_warnings_and_errors == ["[ERROR] boom"]


def test_failure_keeps_kind_and_message(assembler):
    error = assembler.failure(NavigationTimeout("Navigation timeout of 30000 ms exceeded"))

    assert error.kind == "navigation_timeout"
    assert error.message == "Navigation timeout of 30000 ms exceeded"


def test_failure_without_message_is_generic(assembler):
    error = assembler.failure(RuntimeError())

    assert error.kind == "audit_failed"
    assert error.message == "Browser execution failed"
