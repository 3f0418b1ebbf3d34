"""Terminal rendition of the chat widget."""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Callable, Dict, Optional, TextIO

from .config import load_config, setup_logging, typing_delay
from .messages import USER
from .session import ChatSession
from .widget import widget_info

QUIT_COMMANDS = {"/quit", "/exit"}

LineReader = Callable[[str], str]


class ConsoleView:
    """Prints messages as they are appended; register it with ``session.subscribe``."""

    def __init__(self, info: Dict[str, Any], out: Optional[TextIO] = None) -> None:
        self.info = info
        self.out = out or sys.stdout
        self._shown = 0
        self._typing = False

    def _write(self, text: str = "") -> None:
        self.out.write(text + "\n")
        self.out.flush()

    def header(self) -> None:
        self._write(f"== {self.info['name']} | {self.info['tagline']} ==")
        self._write(f"(!) {self.info['disclaimer']}")
        self._write(self.info["hint"])
        self._write()

    def __call__(self, session: ChatSession) -> None:
        messages = session.messages
        for m in messages[self._shown:]:
            who = "You" if m.role == USER else self.info["name"]
            self._write(f"[{m.time}] {who}:")
            self._write(m.content)
            self._write()
        self._shown = len(messages)

        if session.typing and not self._typing:
            self._write(f"{self.info['name']} is typing...")
        self._typing = session.typing

    def goodbye(self) -> None:
        self._write()
        self._write("Goodbye! Take care.")


async def _exchange(session: ChatSession, line: str) -> None:
    task = session.submit(line)
    if task is not None:
        await task


def run_console(session: ChatSession, view: ConsoleView, read_line: LineReader = input) -> None:
    """Read lines until EOF, Ctrl-C or a quit command, submitting each one.

    Each exchange runs on its own event loop so the blocking prompt never
    sits inside a loop that has to be torn down on interrupt.
    """
    view.header()
    session.subscribe(view)
    view(session)
    while True:
        try:
            line = read_line("> ")
            if line.strip().lower() in QUIT_COMMANDS:
                break
            asyncio.run(_exchange(session, line))
        except (KeyboardInterrupt, EOFError):
            view.goodbye()
            break


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="carebot-console",
        description="Chat with DialysisCareBot in the terminal.",
    )
    parser.add_argument("--config", help="path to a YAML config file")
    parser.add_argument("--delay", type=float, help="typing delay in seconds (overrides config)")
    args = parser.parse_args(argv)

    cfg = load_config(args.config)
    setup_logging(cfg)
    delay = typing_delay(cfg) if args.delay is None else max(0.0, args.delay)

    session = ChatSession(delay=delay)
    run_console(session, ConsoleView(widget_info(cfg)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
