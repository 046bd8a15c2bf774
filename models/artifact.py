"""Client-visible artifact state built by folding delta events.

The :class:`Artifact` is the single "current document" shown next to a chat.
It is immutable; the reducer returns a fresh value for every event so callers
can keep history for undo or debugging.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from models.base import FrozenCamelModel
from models.stream_events import Suggestion

# documentId before the server assigns one via an ``id`` event.
INIT_DOCUMENT_ID = "init"


class ArtifactKind(str, Enum):
    """Artifact types a viewer exists for."""

    TEXT = "text"
    CODE = "code"
    IMAGE = "image"
    SHEET = "sheet"
    HTML = "html"
    SVG = "svg"
    DIAGRAM = "diagram"
    SANDBOX = "sandbox"
    VIDEO_GENERATOR = "video-generator"


class ArtifactStatus(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"


# Side-channel tool → (status field, result field, status value that means "busy").
TOOL_CHANNELS: dict[str, tuple[str, str, str]] = {
    "pexels-search": ("pexels_search_status", "pexels_search_results", "searching-pexels"),
    "web-search": ("web_search_status", "web_search_results", "searching-web"),
    "webpage-screenshot": (
        "webpage_screenshot_status",
        "webpage_screenshot_result",
        "taking-screenshot",
    ),
    "web-scraper": ("web_scraper_status", "web_scraper_result", "scraping-webpage"),
}


class Artifact(FrozenCamelModel):
    """The current artifact projection.

    Side-channel ``*_status`` / ``*_result(s)`` fields hold raw strings exactly
    as streamed; result payloads are usually JSON but are never parsed here.
    """

    document_id: str = INIT_DOCUMENT_ID
    title: str = ""
    kind: ArtifactKind | None = None
    content: str = ""
    status: ArtifactStatus = ArtifactStatus.IDLE
    is_visible: bool = False

    pexels_search_status: str | None = None
    pexels_search_results: str | None = None
    web_search_status: str | None = None
    web_search_results: str | None = None
    webpage_screenshot_status: str | None = None
    webpage_screenshot_result: str | None = None
    web_scraper_status: str | None = None
    web_scraper_result: str | None = None

    @classmethod
    def initial(cls) -> Artifact:
        """Default artifact synthesized when the first event of a session arrives."""
        return cls(status=ArtifactStatus.STREAMING)

    @property
    def is_streaming(self) -> bool:
        return self.status == ArtifactStatus.STREAMING

    def tool_activity(self) -> dict[str, dict[str, str | None]]:
        """Side channels grouped as ``{tool: {"status": ..., "result": ...}}``.

        Tools that never reported anything are omitted.
        """
        activity: dict[str, dict[str, str | None]] = {}
        for tool, (status_field, result_field, _busy) in TOOL_CHANNELS.items():
            status = getattr(self, status_field)
            result = getattr(self, result_field)
            if status is None and result is None:
                continue
            activity[tool] = {"status": status, "result": result}
        return activity


class ArtifactMetadata(FrozenCamelModel):
    """Per-kind side data that lives next to the artifact, not inside it.

    Not touched by ``clear``; replaced only when a new session starts.
    """

    suggestions: list[Suggestion] = Field(default_factory=list)
    # Raw ``suggestion`` payloads that are not suggestion records.
    invalid_suggestions: list[str] = Field(default_factory=list)
    # Raw ``html-smart-update`` progress payloads, in arrival order.
    smart_updates: list[str] = Field(default_factory=list)
    # Latest raw ``pexels-auto-images`` payload.
    auto_images: str | None = None
