"""Unit tests for __main__ entrypoint."""


def test_main_invokes_uvicorn(monkeypatch):
    """Ensure main configures structlog and calls uvicorn.run."""
    import structlog
    import uvicorn

    from embed_resolver.__main__ import main
    from embed_resolver.config import settings

    called = {"run": False, "configure": False}

    def fake_run(app, host, port, reload, log_level, access_log):  # noqa: ARG001
        called["run"] = True
        assert app == "embed_resolver.app:app"
        assert host == settings.host
        assert port == settings.port

    def fake_configure(*args, **kwargs):  # noqa: ARG001
        called["configure"] = True

    monkeypatch.setattr(uvicorn, "run", fake_run)
    monkeypatch.setattr(structlog, "configure", fake_configure)

    main()

    assert called["run"] is True
    assert called["configure"] is True


def test_configure_logging_selects_renderer(monkeypatch):
    """Debug mode renders to the console, production renders JSON."""
    import structlog

    from embed_resolver import __main__ as entrypoint
    from embed_resolver.config import settings

    captured = {}

    def fake_configure(*args, **kwargs):  # noqa: ARG001
        captured.update(kwargs)

    monkeypatch.setattr(structlog, "configure", fake_configure)

    monkeypatch.setattr(settings, "debug", False)
    entrypoint.configure_logging()
    assert isinstance(captured["processors"][-1], structlog.processors.JSONRenderer)

    monkeypatch.setattr(settings, "debug", True)
    entrypoint.configure_logging()
    assert isinstance(captured["processors"][-1], structlog.dev.ConsoleRenderer)


def test_module_main_executes(monkeypatch):
    """Ensure __main__ guard executes without errors."""
    import runpy

    import structlog
    import uvicorn

    monkeypatch.setattr(structlog, "configure", lambda *args, **kwargs: None)
    monkeypatch.setattr(uvicorn, "run", lambda *args, **kwargs: None)

    runpy.run_module("embed_resolver.__main__", run_name="__main__")
