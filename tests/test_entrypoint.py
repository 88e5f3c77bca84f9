import importlib

import catalog_api.__main__ as entrypoint
from catalog_api import config


def test_importing_main_builds_no_app():
    main = importlib.import_module("catalog_api.main")
    assert not hasattr(main, "app")


def test_main_runs_app_factory(monkeypatch):
    calls = {}
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda target, **kw: calls.update(target=target, **kw))
    monkeypatch.setattr(entrypoint, "load_dotenv", lambda: None)
    monkeypatch.setattr(config, "_settings", config.Settings(_env_file=None, PORT=9000, LOG_LEVEL="DEBUG"))

    entrypoint.main()

    assert calls["target"] == "catalog_api.main:create_app"
    assert calls["factory"] is True
    assert calls["port"] == 9000
    assert calls["log_level"] == "debug"
