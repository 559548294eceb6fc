"""Dialog stack management.

The stack is the ``frames`` list of a ``ConversationState``; the last frame is
the active one. Operations mutate the owning state in place because exactly
one turn at a time owns a conversation's state.
"""

import logging

from timeoff.core.constants import DialogKind
from timeoff.core.errors import DialogStackError
from timeoff.core.types import ConversationState, DialogFrame, FrameOptions

logger = logging.getLogger(__name__)


class DialogStack:
    """Manages the frames of one conversation."""

    def __init__(self, state: ConversationState) -> None:
        self._state = state

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def frames(self) -> tuple[DialogFrame, ...]:
        return tuple(self._state.frames)

    @property
    def active(self) -> DialogFrame | None:
        """Get the currently active frame."""
        if not self._state.frames:
            return None
        return self._state.frames[-1]

    def __len__(self) -> int:
        return len(self._state.frames)

    def push(self, kind: DialogKind, options: FrameOptions) -> DialogFrame:
        """Push a new frame at step 0 and make it active."""
        frame = DialogFrame(dialog_id=kind, step_index=0, options=options)
        self._state.frames.append(frame)
        logger.debug(
            f"Pushed {kind.value} on {self._state.conversation_id} (depth {len(self)})"
        )
        return frame

    def pop(self) -> DialogFrame:
        """Pop the active frame.

        Raises:
            DialogStackError: If the stack is empty.
        """
        if not self._state.frames:
            raise DialogStackError("Cannot pop from empty dialog stack")
        frame = self._state.frames.pop()
        logger.debug(
            f"Popped {frame.dialog_id.value} from {self._state.conversation_id} (depth {len(self)})"
        )
        return frame

    def clear(self) -> list[DialogFrame]:
        """Discard every frame, returning what was removed (top last)."""
        removed = list(self._state.frames)
        self._state.frames.clear()
        if removed:
            logger.debug(f"Cleared {len(removed)} frame(s) from {self._state.conversation_id}")
        return removed
