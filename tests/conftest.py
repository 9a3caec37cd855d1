"""Shared fixtures and helpers for tests."""

import zipfile
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from funcapp_gen.config import AnalyzerConfig
from funcapp_gen.core.diagnostics import CollectingSink

_REPO_ROOT = Path(__file__).parent.parent

SAMPLE_SOURCE = """\
import azure_functions as af


class Order:
    id: str


def audit(order):
    return order


@af.http_service(base_path="/api", auth_level="function")
class OrderService:
    @af.resource(method="get", path="/orders" / pending)
    def list_pending(self, limit: int) -> list:
        return []

    @af.resource(method="post", path="orders", name="create-order")
    @af.queue_output(queue_name="created", connection="AzureWebJobsStorage")
    def create(self, order: Order) -> Order:
        return order

    def helper(self):
        return None


@af.queue_service(queue_name="orders", connection="AzureWebJobsStorage", batch_size=16)
class OrderQueue:
    @af.on_message
    def handle(self, message: str) -> None:
        pass


@af.timer_service(schedule="0 */5 * * * *")
class Cleanup:
    @af.on_tick
    def run(self) -> None:
        pass
"""


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def python_parser() -> Parser:
    """Return a tree-sitter parser for Python."""
    return get_parser("python")


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def config() -> AnalyzerConfig:
    """Return a config that ignores FUNCAPP_* environment variables."""
    return AnalyzerConfig()


@pytest.fixture
def sample_source() -> str:
    return SAMPLE_SOURCE


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "services.py"
    path.write_text(SAMPLE_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def template_zip(tmp_path: Path) -> Path:
    """Return a runtime template archive with a nested layout."""
    path = tmp_path / "template.zip"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("bin/", "")
        archive.writestr("bin/handler", "#!/bin/sh\n")
        archive.writestr("local.settings.json", '{"IsEncrypted": false}')
    return path
