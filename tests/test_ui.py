"""Smoke tests for the UI module and the CLI entry point."""

from __future__ import annotations

import pytest

from acidrain.ui.pygame_client import PygameRenderer


def test_pygame_renderer_importable() -> None:
    """PygameRenderer class is importable without initialising pygame."""
    assert PygameRenderer is not None


def test_main_module_importable() -> None:
    """The __main__ module is importable and exposes main()."""
    from acidrain.__main__ import main

    assert callable(main)


def test_headless_run_prints_chat(capsys: pytest.CaptureFixture[str]) -> None:
    from acidrain.__main__ import main

    main(["--headless", "--frames", "600", "--speed", "1"])
    out = capsys.readouterr().out
    for line in out.splitlines():
        assert "[" in line


def test_parser_defaults() -> None:
    from acidrain.__main__ import build_parser

    args = build_parser().parse_args([])
    assert not args.headless
    assert args.log_level == "WARNING"
