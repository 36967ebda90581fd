"""Interactive TUI for git-worktree-keeper using Textual."""

import asyncio
import os
from typing import Optional

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.events import Key, Resize
from textual.message import Message
from textual.widget import Widget

from .controller.commands import ChangeDirectory, CheckRepository, Quit
from .controller.dispatcher import CommandDispatcher
from .controller.messages import KeyPressed, Resized
from .controller.state import AppState
from .controller.transitions import initial_state, transition
from .logging_config import get_logger
from .ui.render import render_frame
from .ui.theme import DEFAULT_PALETTE, NO_COLOR_PALETTE, Palette

logger = get_logger(__name__)


class FrameView(Widget):
    """Draws the whole screen as one frame rendered from the app state."""

    DEFAULT_CSS = """
    FrameView {
        width: 1fr;
        height: 1fr;
    }
    """

    can_focus = True

    class SizeChanged(Message):
        """Posted when the space available for the frame changes."""

        def __init__(self, width: int, height: int) -> None:
            super().__init__()
            self.width = width
            self.height = height

    def __init__(self, state: AppState, palette: Palette) -> None:
        super().__init__()
        self.state = state
        self.palette = palette

    def show(self, state: AppState) -> None:
        """Swap in a new state and redraw."""
        self.state = state
        self.refresh()

    def render(self) -> Text:
        """Render the current state."""
        return render_frame(self.state, self.palette)

    def on_resize(self, event: Resize) -> None:
        self.post_message(self.SizeChanged(event.size.width, event.size.height))


class CommandCompleted(Message):
    """Carries a completion message from a worker back to the event loop."""

    def __init__(self, result) -> None:
        super().__init__()
        self.result = result


class WorktreeKeeperApp(App):
    """Interactive TUI for git-worktree-keeper."""

    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        background: $background;
    }
    """

    # Keys Textual would otherwise keep for itself (focus cycling, copy)
    BINDINGS = [
        Binding("ctrl+c", "forward_key('ctrl+c')", show=False, priority=True),
        Binding("tab", "forward_key('tab')", show=False, priority=True),
        Binding("shift+tab", "forward_key('shift+tab')", show=False, priority=True),
    ]

    def __init__(self, keeper, palette: Optional[Palette] = None):
        super().__init__()
        self.keeper = keeper
        self.dispatcher = CommandDispatcher(keeper)
        if palette is None:
            palette = NO_COLOR_PALETTE if os.environ.get("NO_COLOR") else DEFAULT_PALETTE
        self.palette = palette
        self.state = initial_state(keeper.config.branch_types)

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield FrameView(self.state, self.palette)

    def on_mount(self) -> None:
        """Focus the frame and start the repository check."""
        self.query_one(FrameView).focus()
        self.run_command(CheckRepository())

    def apply(self, event) -> None:
        """Feed one event through the state machine and act on the result."""
        result = transition(self.state, event)
        self.state = result.state
        self.query_one(FrameView).show(self.state)
        if result.command is not None:
            self._issue(result.command)

    def _issue(self, command) -> None:
        if isinstance(command, ChangeDirectory):
            self._change_directory(command.path)
        elif isinstance(command, Quit):
            self.call_later(self.action_quit)
        else:
            self.run_command(command)

    def _change_directory(self, path: str) -> None:
        try:
            self.keeper.record_change_directory(path)
        except Exception as e:
            # The shell stays where it is; still exit cleanly
            logger.error(f"Could not record cd target {path}: {e}")
        self.call_later(self.action_quit)

    @work(thread=False)
    async def run_command(self, command) -> None:
        """Run one command in the background and post its completion.

        Several commands may be in flight at once; their results are applied
        in the order they arrive.
        """
        # Use asyncio.to_thread since keeper methods are sync but we're in async worker
        result = await asyncio.to_thread(self.dispatcher.dispatch, command)
        self.post_message(CommandCompleted(result))

    def on_command_completed(self, message: CommandCompleted) -> None:
        self.apply(message.result)

    def on_frame_view_size_changed(self, message: FrameView.SizeChanged) -> None:
        self.apply(Resized(message.width, message.height))

    def on_key(self, event: Key) -> None:
        event.stop()
        event.prevent_default()
        self.apply(KeyPressed(event.key, event.character))

    def action_forward_key(self, key: str) -> None:
        self.apply(KeyPressed(key))

    async def action_quit(self) -> None:
        """Override quit action to clean up resources before exiting."""
        try:
            # Cancel all running workers before exit
            self.workers.cancel_all()

            # Close keeper resources (GitHub connections, etc.)
            if self.keeper:
                self.keeper.close()
        except Exception as e:
            logger.debug(f"Cleanup on quit failed: {e}")
        finally:
            self.exit()
