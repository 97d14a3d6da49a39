"""Tests for the CLI entry point in src/main.py."""
import io
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from rich.console import Console

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.chat.orchestrator import AggregateReply, Mode
from src.main import build_parser, main, render_reply


def _render(reply: AggregateReply, mode: Mode) -> str:
    buf = io.StringIO()
    render_reply(Console(file=buf, width=80, color_system=None), reply, mode)
    return buf.getvalue()


class TestRenderReply:
    def test_combined_sections_get_own_panels(self):
        sections = (("OpenAI", "first"), ("Anthropic", "second\n\npara"))
        reply = AggregateReply.success("OpenAI: first\n\nAnthropic: second\n\npara", sections)
        out = _render(reply, Mode.COMBINED)
        assert "OpenAI" in out and "Anthropic" in out
        assert "first" in out and "second" in out and "para" in out
        assert out.count("╭") == 2

    def test_label_inside_reply_does_not_split_panel(self):
        sections = (("OpenAI", "quoting:\n\nGoogle: not a section"),)
        reply = AggregateReply.success("OpenAI: quoting:\n\nGoogle: not a section", sections)
        out = _render(reply, Mode.COMBINED)
        assert out.count("╭") == 1
        assert "not a section" in out

    def test_combined_fallback_text_has_one_panel(self):
        out = _render(AggregateReply.success("No response was generated."), Mode.COMBINED)
        assert out.count("╭") == 1
        assert "combined" in out

    def test_single_mode_panel_titled_by_mode(self):
        out = _render(AggregateReply.success("Hello: world"), Mode.GOOGLE)
        assert "google" in out
        assert "Hello: world" in out

    def test_error_panel(self):
        out = _render(AggregateReply.failure("OpenAI API key not configured"), Mode.OPENAI)
        assert "Error" in out
        assert "OpenAI API key not configured" in out


class TestParser:
    def test_ask_defaults_to_combined(self):
        args = build_parser().parse_args(["ask", "hello"])
        assert args.command == "ask"
        assert args.model == "combined"
        assert args.prompt == "hello"

    def test_ask_rejects_unknown_model(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["ask", "--model", "gpt", "hello"])

    def test_serve_port(self):
        args = build_parser().parse_args(["serve", "--port", "9001"])
        assert args.port == 9001


class TestMain:
    def test_ask_exit_code_reflects_reply(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch("src.main.ask", new=AsyncMock(return_value=AggregateReply.failure("nope"))):
            assert main(["ask", "--model", "openai", "hi"]) == 1
        with patch("src.main.ask", new=AsyncMock(return_value=AggregateReply.success("yes"))):
            assert main(["ask", "hi"]) == 0
