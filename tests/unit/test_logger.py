"""Tests for session log setup and the provenance header."""

from pathlib import Path

import pytest
from loguru import logger

from compass.utils.logger import PACKAGED, content_sources, setup_logger


@pytest.fixture
def restore_sinks():
    yield
    logger.remove()


@pytest.mark.unit
def test_content_sources_follow_environment(monkeypatch):
    """Test configured paths are reported and unset ones fall back to the packaged label."""
    monkeypatch.setenv("CONTENT_CATALOG_PATH", "/data/catalog")
    monkeypatch.delenv("STAGES_PATH", raising=False)

    sources = content_sources()
    assert sources["Catalog"] == "/data/catalog"
    assert sources["Stages"] == PACKAGED


@pytest.mark.unit
def test_setup_logger_writes_provenance_header(tmp_path: Path, monkeypatch, restore_sinks):
    """Test the session log opens with context, content sources, and extra lines."""
    monkeypatch.setenv("CONTENT_CATALOG_PATH", str(tmp_path / "catalog"))

    log_file = setup_logger(
        "catalog", tmp_path / "logs", extra_provenance={"Phase": "import"}, console_level="ERROR"
    )
    logger.info("[catalog] Imported 3 entries")

    assert log_file == tmp_path / "logs" / "catalog.log"
    text = log_file.read_text()
    assert "Context: catalog" in text
    assert f"Catalog: {tmp_path / 'catalog'}" in text
    assert "Phase: import" in text
    assert text.index("Phase: import") < text.index("Imported 3 entries")
