"""
Page state and the actions that change it.

One ViewController per browser session owns a UIState and is its only
writer.  Every mutation is followed by an explicit notify so the listeners
(templates, tests) always see a consistent snapshot.
"""
from dataclasses import dataclass, replace
from typing import Awaitable, Callable

import ai_client
from default_content import DefaultContent
from errors import AnalysisError, CarIdentifierError
from image_payload import ACCEPTED_TYPES, ImagePayload, ingest
from prompts import CAR_PROMPT
from result_formatter import DisplayBlock, format_analysis

Analyzer = Callable[[ImagePayload, str], Awaitable[str]]
Listener = Callable[["UIState"], None]
ErrorHook = Callable[[str, Exception], None]

MSG_DEFAULT_MISSING = "Failed to load default image"
MSG_NO_IMAGE        = "Please upload a car photo first"
MSG_ANALYZE_FAILED  = "Failed to analyze image. Please try again."


@dataclass
class UIState:
    current_image: ImagePayload | None = None
    analysis_text: str = ""
    is_loading:    bool = False
    error_message: str | None = None


class ViewController:

    def __init__(
        self,
        default_content: DefaultContent | None,
        analyzer: Analyzer = ai_client.analyze,
        prompt: str = CAR_PROMPT,
        on_error: ErrorHook | None = None,
    ) -> None:
        self._analyzer  = analyzer
        self._prompt    = prompt
        self._on_error  = on_error
        self._listeners: list[Listener] = []
        # Bumped on every analyze request; a reply only lands if it is still the latest
        self._generation = 0

        if default_content is None:
            self.state = UIState(error_message=MSG_DEFAULT_MISSING)
        else:
            self.state = UIState(
                current_image=default_content.image,
                analysis_text=default_content.analysis,
            )

    # ── State plumbing ─────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _set(self, **changes) -> None:
        self.state = replace(self.state, **changes)
        for listener in self._listeners:
            listener(self.state)

    def _report(self, context: str, exc: Exception) -> None:
        if self._on_error is not None:
            self._on_error(context, exc)

    @property
    def blocks(self) -> list[DisplayBlock]:
        return format_analysis(self.state.analysis_text)

    # ── Actions ────────────────────────────────────────────────────────────

    async def upload(self, file) -> bool:
        """Ingest a newly picked photo and analyze it right away.

        On a rejected or unreadable file only the error changes; the previous
        photo and analysis stay on screen.  Returns True if the photo was accepted.
        """
        try:
            payload = await ingest(file)
        except CarIdentifierError as e:
            self.show_error("upload", e)
            return False

        self._set(current_image=payload, error_message=None)
        await self.analyze()
        return True

    async def analyze(self) -> None:
        """(Re-)analyze the photo currently shown."""
        image = self.state.current_image
        if image is None:
            self._set(error_message=MSG_NO_IMAGE)
            return

        self._generation += 1
        generation = self._generation
        self._set(is_loading=True, error_message=None)

        try:
            text = await self._analyzer(image, self._prompt)
        except AnalysisError as e:
            self._report("analyze", e)
            if generation == self._generation:
                self._set(is_loading=False, error_message=str(e))
        except Exception as e:
            self._report("analyze", e)
            if generation == self._generation:
                self._set(is_loading=False, error_message=MSG_ANALYZE_FAILED)
        else:
            # a reply from a superseded request is dropped
            if generation == self._generation:
                self._set(analysis_text=text, is_loading=False, error_message=None)
        finally:
            # cancellation skips the handlers above
            if generation == self._generation and self.state.is_loading:
                self._set(is_loading=False)

    def show_error(self, context: str, exc: CarIdentifierError) -> None:
        """Put a failure in the banner without touching the photo or analysis."""
        self._report(context, exc)
        self._set(error_message=str(exc))

    def switch_photo(self) -> tuple[str, ...]:
        """Open the photo picker: hands back the accepted types, state is untouched."""
        return ACCEPTED_TYPES
