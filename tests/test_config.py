from __future__ import annotations

import logging

from sqlalchemy import inspect

from tasknest.config import PROJECT_ROOT, Settings, default_database_url, load_settings
from tasknest.infra.db import init_db, make_engine
from tasknest.infra.logging import HANDLER_NAME, setup_logging


def test_empty_environment_uses_local_sqlite_and_random_quotes() -> None:
    settings = load_settings({})

    assert settings.database_url == default_database_url()
    assert settings.database_url.endswith("tasknest.sqlite3")
    assert settings.quote_mode == "random"
    assert settings.log_level == "INFO"
    assert settings.log_path == PROJECT_ROOT / "logs" / "tasknest.log"


def test_environment_values_are_normalized() -> None:
    settings = load_settings(
        {
            "DATABASE_URL": " postgresql://tasks@localhost/tasknest ",
            "LOG_LEVEL": "debug",
            "QUOTE_MODE": "Fixed",
        }
    )

    assert settings.database_url == "postgresql://tasks@localhost/tasknest"
    assert settings.log_level == "DEBUG"
    assert settings.quote_mode == "fixed"


def test_unusable_values_fall_back_to_defaults() -> None:
    settings = load_settings({"LOG_LEVEL": "chatty", "QUOTE_MODE": "sometimes", "LOG_DIR": "  "})

    assert settings.log_level == "INFO"
    assert settings.quote_mode == "random"
    assert settings.log_dir == "logs"


def test_setup_logging_writes_to_the_configured_file_and_replaces_its_handlers(tmp_path) -> None:
    settings = Settings(database_url="sqlite://", log_level="DEBUG", log_dir=str(tmp_path / "logs"))
    root = logging.getLogger()
    level = root.level
    try:
        setup_logging(settings)
        log_file = setup_logging(settings)
        logging.getLogger("tasknest.test").info("hello log")

        ours = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
        assert len(ours) == 2
        for handler in ours:
            handler.flush()
        assert log_file == tmp_path / "logs" / "tasknest.log"
        assert "hello log" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(level)


def test_in_memory_engine_keeps_schema_across_connections() -> None:
    engine = make_engine("sqlite://")

    init_db(engine)

    assert set(inspect(engine).get_table_names()) == {"tasks", "tags", "quotes"}
