"""Shared fixtures.

Testing Strategy:
1. Storage: a real LocalStorage rooted in a per-test temporary directory
2. AI Services: LLMClient replaced by an AsyncMock at the service boundary
3. HTTP: the FastAPI app driven in-process through httpx's ASGI transport
"""

import os
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# Settings are read at import time by triviet.main
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("PRIMARY_LLM_MODEL", "openai/gpt-4o-mini")

from triviet.config import get_settings
from triviet.exercises.dependencies import get_exercise_service
from triviet.exercises.service import ExerciseService
from triviet.learning_paths.dependencies import get_learning_path_service
from triviet.learning_paths.service import LearningPathService
from triviet.library.router import get_library_service
from triviet.library.service import LibraryService
from triviet.main import app
from triviet.mindmaps.dependencies import get_mindmap_service
from triviet.mindmaps.models import LayoutConstants, TreeNode
from triviet.mindmaps.service import MindMapService
from triviet.storage.local import LocalStorage


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Let each test see environment changes made through monkeypatch."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage")


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """LLM client whose structured completions are set per test."""
    client = MagicMock()
    client.get_completion = AsyncMock()
    return client


@pytest.fixture
def mindmap_service(mock_llm_client) -> MindMapService:
    return MindMapService(LayoutConstants(), llm_client=mock_llm_client)


@pytest.fixture
def library_service(storage) -> LibraryService:
    return LibraryService(storage, limit_bytes=5 * 1024 * 1024)


@pytest.fixture
def learning_path_service(storage, mock_llm_client) -> LearningPathService:
    return LearningPathService(storage, llm_client=mock_llm_client)


@pytest.fixture
def exercise_service(library_service, mock_llm_client) -> ExerciseService:
    return ExerciseService(library_service, llm_client=mock_llm_client)


@pytest_asyncio.fixture
async def client(
    mindmap_service, library_service, learning_path_service, exercise_service
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with services backed by temporary storage."""
    app.dependency_overrides[get_mindmap_service] = lambda: mindmap_service
    app.dependency_overrides[get_library_service] = lambda: library_service
    app.dependency_overrides[get_learning_path_service] = lambda: learning_path_service
    app.dependency_overrides[get_exercise_service] = lambda: exercise_service
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
            yield http_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def fan_out_tree() -> TreeNode:
    """Root with three leaf children A, B, C."""
    return TreeNode.of("Root", [TreeNode.of("A"), TreeNode.of("B"), TreeNode.of("C")])


@pytest.fixture
def unbalanced_tree() -> TreeNode:
    """Root with a leaf child and a child holding three leaves."""
    return TreeNode.of(
        "Root",
        [
            TreeNode.of("child1"),
            TreeNode.of("child2", [TreeNode.of("g1"), TreeNode.of("g2"), TreeNode.of("g3")]),
        ],
    )
