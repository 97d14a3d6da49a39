"""
Multi-provider chat service - Main Entry Point
Run with: python src/main.py serve
      or: python src/main.py ask [--model MODE] "your prompt"
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path so that `config` and `src.*` imports resolve correctly
# regardless of the working directory the user runs from.
sys.path.insert(0, str(Path(__file__).parent.parent))

from aiohttp import web
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from config import config
from src.chat.credentials import EnvCredentialStore
from src.chat.orchestrator import AggregateReply, Mode, Orchestrator
from src.server.app import create_app

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

logger = logging.getLogger(__name__)


def render_reply(console: Console, reply: AggregateReply, mode: Mode) -> None:
    """Print a reply as a rich panel; combined sections get one panel each."""
    if not reply.ok:
        console.print(Panel(Text(reply.error, style="bold red"), title="Error", border_style="red"))
        return

    if not reply.sections:
        console.print(Panel(Text(reply.text), title=mode.value, border_style="cyan"))
        return
    for label, body in reply.sections:
        console.print(Panel(Text(body), title=label, border_style="cyan"))


async def ask(prompt: str, mode: Mode) -> AggregateReply:
    """Compose one reply with the deployment's own credentials."""
    credentials = EnvCredentialStore(config).get_credentials()
    return await Orchestrator(cfg=config).compose(prompt, mode, credentials)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Multi-provider chat service")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=config.host, help=f"Bind address (default: {config.host})")
    serve.add_argument("--port", type=int, default=config.port, help=f"Port (default: {config.port})")

    ask_cmd = sub.add_parser("ask", help="Send one prompt and print the reply")
    ask_cmd.add_argument(
        "--model",
        choices=[m.value for m in Mode],
        default=config.default_mode,
        help=f"openai | google | anthropic | combined (default: {config.default_mode})",
    )
    ask_cmd.add_argument("prompt", help="Message to send")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.info("=== Chat service starting on %s:%d ===", args.host, args.port)
        web.run_app(create_app(), host=args.host, port=args.port)
        return 0

    # The console belongs to the rendered reply; logs go to a file.
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler("chat.log")],
    )
    mode = Mode(args.model)
    reply = asyncio.run(ask(args.prompt, mode))
    render_reply(Console(), reply, mode)
    return 0 if reply.ok else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nShutting down...")
