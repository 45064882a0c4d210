"""
Assessment Protocol Handler

Owns one assessment session per WebSocket connection. Translates inbound
frames into state machine events and state machine output into outbound
frames, then closes the connection once the flow ends.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from fastapi import WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from src.core.session_machine import (
    AssessmentStateMachine,
    CloseDirective,
    CloseMode,
    TransitionResult,
)
from src.models.assessment import AssessmentSession, CompletedAssessment
from src.models.messages import (
    ErrorMessage,
    MalformedMessageError,
    OutboundMessage,
    parse_inbound,
)

logger = logging.getLogger(__name__)


INVALID_MESSAGE = "Invalid message format."

CompletionListener = Callable[[CompletedAssessment], Awaitable[None]]


class AssessmentProtocolHandler:
    """
    Per-connection protocol driver.

    The handler is the only writer of its session. Messages from one
    client are processed strictly in arrival order; nothing is shared
    with other connections except the read-only question bank.
    """

    def __init__(
        self,
        websocket: WebSocket,
        state_machine: AssessmentStateMachine,
        close_delay_seconds: float = 0.2,
        completion_listeners: list[CompletionListener] | None = None,
    ):
        """
        Initialize the handler.

        Args:
            websocket: Connection to serve
            state_machine: Shared, stateless transition logic
            close_delay_seconds: Grace period before closing after completion
            completion_listeners: Async callbacks notified of finished assessments
        """
        self.websocket = websocket
        self.state_machine = state_machine
        self.close_delay_seconds = close_delay_seconds
        self.completion_listeners = list(completion_listeners or [])

        self.session: AssessmentSession = state_machine.new_session()
        self._closing = False
        self._close_task: asyncio.Task | None = None

    # =========================================================================
    # CONNECTION LOOP
    # =========================================================================

    async def run(self) -> None:
        """Accept the connection and process frames until it ends."""
        await self.websocket.accept()
        logger.info("Assessment connection opened")

        try:
            while not self._closing:
                message = await self.websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(
                        code=message.get("code", 1000),
                        reason=message.get("reason"),
                    )

                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes")
                await self.handle_frame(raw)

        except WebSocketDisconnect as e:
            # Unfinished sessions are simply dropped
            logger.info(
                f"Assessment connection closed by client (code {e.code}) "
                f"in state {self.session.state.value}, "
                f"{self.session.answered}/{self.session.total} answered"
            )
        finally:
            if self._close_task:
                await self._close_task

    async def handle_frame(self, raw: str | bytes | None) -> TransitionResult | None:
        """
        Process one inbound frame.

        Returns:
            The transition applied, or None if the frame was malformed
        """
        try:
            event = parse_inbound(raw)
        except MalformedMessageError as e:
            logger.warning(f"Malformed assessment message: {e}")
            await self.send(ErrorMessage(message=INVALID_MESSAGE))
            return None

        result = self.state_machine.transition(self.session, event)
        self.session = result.session

        for outbound in result.messages:
            await self.send(outbound)

        if result.completed:
            logger.info(
                f"Assessment complete: persona={self.session.persona} "
                f"score={result.result.score} stage={result.result.stage.value}"
            )

        if result.close:
            await self._apply_close(result.close)

        if result.completed:
            await self._notify_completion(result)

        return result

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def is_open(self) -> bool:
        """Whether both sides of the connection are still connected."""
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, message: OutboundMessage) -> bool:
        """
        Send a message, dropping it if the connection is gone.

        Returns:
            True if the message was handed to the transport
        """
        if not self.is_open():
            logger.debug(f"Dropping '{message.type}' message: connection closed")
            return False

        try:
            await self.websocket.send_json(message.to_wire())
            return True
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.debug(f"Dropping '{message.type}' message: {e}")
            return False

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        """Close the connection if it is still open."""
        if not self.is_open():
            return

        try:
            await self.websocket.close(code=code, reason=reason)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.debug(f"Close skipped: {e}")

    async def _apply_close(self, directive: CloseDirective) -> None:
        self._closing = True

        if directive.mode == CloseMode.IMMEDIATE:
            await self.close(directive.code, directive.reason)
            return

        # Let the final message flush before closing
        self._close_task = asyncio.create_task(
            self._close_after(self.close_delay_seconds, directive)
        )

    async def _close_after(self, delay: float, directive: CloseDirective) -> None:
        await asyncio.sleep(delay)
        await self.close(directive.code, directive.reason)

    # =========================================================================
    # COMPLETION HAND-OFF
    # =========================================================================

    async def _notify_completion(self, result: TransitionResult) -> None:
        completed = CompletedAssessment(
            assessment_id=self.session.external_assessment_id,
            persona=self.session.persona,
            score=result.result.score,
            stage=result.result.stage.value,
            answered=self.session.answered,
            total=self.session.total,
            answers=list(self.session.answers),
        )

        for listener in self.completion_listeners:
            try:
                await listener(completed)
            except Exception as e:
                logger.error(f"Completion listener error: {e}")
