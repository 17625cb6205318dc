from __future__ import annotations

import argparse
import sys
import time
from typing import Callable

from rich.console import Console
from rich.text import Text

from orchat.config import load_settings
from orchat.errors import ChatError, ConfigError
from orchat.llm import build_transport
from orchat.session import ConversationSession
from orchat.utils.run_log import RunLogPaths, append_event, init_run_log, log_error, log_turn, make_run_id

SENTINEL = "quit"
BANNER = f"Chat with the LLM. Type your message and press Enter. Type '{SENTINEL}' to exit."


def is_quit(line: str) -> bool:
    return line.strip().lower() == SENTINEL


def print_error(console: Console, e: ChatError) -> None:
    console.print(Text.assemble((f"error[{e.kind}]: ", "bold red"), str(e)))


def chat_loop(
    session: ConversationSession,
    console: Console,
    *,
    read_line: Callable[[], str] | None = None,
    log: RunLogPaths | None = None,
) -> int:
    """Run the read/submit/print loop until `quit` or end of input. Returns the exit status."""
    if read_line is None:
        read_line = lambda: console.input("> ")  # noqa: E731

    console.print(BANNER)
    while True:
        try:
            line = read_line()
        except EOFError:
            break
        except KeyboardInterrupt:
            console.print()
            return 130

        text = line.strip()
        if is_quit(text):
            break
        if not text:
            continue

        started = time.perf_counter()
        try:
            reply = session.submit(text)
        except ChatError as e:
            print_error(console, e)
            if log:
                log_error(log, session, e)
            continue
        except KeyboardInterrupt:
            console.print()
            return 130

        console.print(Text.assemble(("LLM: ", "bold cyan"), reply))
        if log:
            log_turn(log, session, reply, round((time.perf_counter() - started) * 1000))
    return 0


def main(argv: list[str] | None = None) -> int:
    # Best-effort fix for terminals that do not default to UTF-8.
    try:
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")
    except (AttributeError, ValueError):
        pass

    parser = argparse.ArgumentParser(prog="orchat", description="Chat with an OpenRouter-compatible endpoint.")
    parser.add_argument("--model", default=None, help="model id, overrides ORCHAT_MODEL")
    parser.add_argument("--mock", action="store_true", help="use the offline echo backend (no API key needed)")
    parser.add_argument(
        "--no-log",
        action="store_true",
        help="do not write a run log (default: <ORCHAT_LOG_DIR>/run_*.jsonl, no message content)",
    )
    args = parser.parse_args(argv)

    console = Console()
    try:
        settings = load_settings(backend="mock" if args.mock else None, model=args.model)
    except ConfigError as e:
        print_error(console, e)
        return 2

    transport = build_transport(settings)
    session = ConversationSession.from_settings(settings, transport)

    log: RunLogPaths | None = None
    if not args.no_log:
        log = init_run_log(settings.log_dir, make_run_id())
        append_event(
            log,
            "start",
            session=session,
            extra={"model": settings.model, "url": settings.api_url, "backend": settings.backend},
        )

    try:
        status = chat_loop(session, console, log=log)
    finally:
        transport.close()

    if log:
        append_event(log, "end", session=session, extra={"status": status})
    return status


if __name__ == "__main__":
    raise SystemExit(main())
