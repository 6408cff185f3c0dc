"""
Root-level shared fixtures for all Mockup Studio tests.

Provides a scriptable fake of the generation adapters: results, failures
and per-call gates that hold a call open until the test releases it.
"""

import asyncio
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator, Sequence

# Keep test logs out of the project tree; must happen before loggers exist
os.environ.setdefault("MOCKUP_STUDIO_LOG_DIR", tempfile.mkdtemp(prefix="mockup_studio_logs_"))

import pytest

from studio.adapters import CloneResult, GenerationAdapters
from studio.models import GroundingSource, ImageAttachment, VisualStyle
from studio.session import Session
from studio.store import HistoryStore


DEFAULT_RESULTS: dict[str, Any] = {
    "enhance_text": "## Overall Vibe & Style\nBold neon.",
    "synthesize_image": "data:image/jpeg;base64,QUJD",
    "synthesize_html": "<div>generated</div>",
    "restyle_html": "<div>restyled</div>",
    "clone_url": CloneResult(
        html="<main>cloned</main>",
        grounding_sources=(
            GroundingSource(title="Example", uri="https://example.com"),
            GroundingSource(title="Docs", uri="https://example.com/docs"),
        ),
    ),
}


class FakeAdapters(GenerationAdapters):
    """
    In-memory adapters for driving the coordinator and session.

    - results[op]: value returned, or a callable receiving the call args
    - failures[op]: exception raised instead
    - hold(op, n): gate the n-th call (0-based) of op until released
    """

    def __init__(self):
        self.results: dict[str, Any] = dict(DEFAULT_RESULTS)
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, tuple]] = []
        self.closed = False
        self._gates: dict[tuple[str, int], asyncio.Event] = {}
        self._counts: dict[str, int] = {}
        self.started: dict[tuple[str, int], asyncio.Event] = {}

    def hold(self, operation: str, call_index: int = 0) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[(operation, call_index)] = gate
        self.started[(operation, call_index)] = asyncio.Event()
        return gate

    def called(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    async def _respond(self, operation: str, *args) -> Any:
        index = self._counts.get(operation, 0)
        self._counts[operation] = index + 1
        self.calls.append((operation, args))

        if (operation, index) in self.started:
            self.started[(operation, index)].set()
        gate = self._gates.get((operation, index))
        if gate is not None:
            await gate.wait()

        if operation in self.failures:
            raise self.failures[operation]
        result = self.results[operation]
        return result(*args) if callable(result) else result

    async def enhance_text(self, text: str, style: VisualStyle) -> str:
        return await self._respond("enhance_text", text, style)

    async def synthesize_image(self, prompt: str) -> str:
        return await self._respond("synthesize_image", prompt)

    async def synthesize_html(self, prompt: str) -> str:
        return await self._respond("synthesize_html", prompt)

    async def restyle_html(self, base_html: str, style_html: str) -> str:
        return await self._respond("restyle_html", base_html, style_html)

    async def clone_url(self, url: str, screenshots: Sequence[ImageAttachment]) -> CloneResult:
        return await self._respond("clone_url", url, tuple(screenshots))

    async def close(self):
        self.closed = True


async def _settle(times: int = 20):
    for _ in range(times):
        await asyncio.sleep(0)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test data.

    Automatically cleaned up after test completion.
    """
    temp_path = Path(tempfile.mkdtemp(prefix="mockup_studio_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def adapters() -> FakeAdapters:
    return FakeAdapters()


@pytest.fixture
def history_file(temp_dir: Path) -> Path:
    return temp_dir / "history.json"


@pytest.fixture
def store(history_file: Path) -> HistoryStore:
    """HistoryStore with a short debounce so tests stay fast."""
    return HistoryStore(history_file, debounce_seconds=0.01)


@pytest.fixture
def session(adapters: FakeAdapters, store: HistoryStore) -> Session:
    session = Session(adapters, store, session_id="test-session")
    session.init()
    return session


@pytest.fixture
def screenshot() -> ImageAttachment:
    return ImageAttachment(data="iVBORw0KGgo=", media_type="image/png")


@pytest.fixture
def make_failure() -> Callable[[str], Exception]:
    def _make(message: str = "quota exceeded") -> Exception:
        return RuntimeError(message)
    return _make


@pytest.fixture
def settle() -> Callable:
    """Coroutine that lets pending tasks run a few scheduler turns."""
    return _settle
