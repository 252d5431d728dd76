import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pdf_compressor.logging_setup import SessionIdFilter, build_handlers, setup_logging
from pdf_compressor.settings import Settings


def test_defaults(monkeypatch):
    for name in ("HOST", "PORT", "LOGS_DIR", "LOG_LEVEL", "MAX_UPLOAD_BYTES", "SESSION_TTL_MINUTES", "LOG_MAX_BYTES", "LOG_BACKUP_COUNT"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.host == "127.0.0.1"
    assert s.port == 8000
    assert s.logs_dir == Path("logs")
    assert s.log_level == "INFO"
    assert s.max_upload_bytes == 100 * 1024 * 1024
    assert s.session_ttl_seconds == 15 * 60
    assert s.log_max_bytes == 10 * 1024 * 1024
    assert s.log_backup_count == 10


def test_env_overrides_and_bad_ints(monkeypatch):
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "not-a-number")
    monkeypatch.setenv("SESSION_TTL_MINUTES", "0")
    monkeypatch.setenv("LOG_LEVEL", " debug ")

    s = Settings.from_env()

    assert s.port == 9001
    assert s.max_upload_bytes == 100 * 1024 * 1024
    assert s.session_ttl_seconds == 0
    assert s.log_level == "debug"


def test_session_id_filter_fills_missing_attribute():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    assert SessionIdFilter().filter(record) is True
    assert record.session_id == "-"

    record.session_id = "abc"
    SessionIdFilter().filter(record)
    assert record.session_id == "abc"


def _settings(tmp_path, **overrides) -> Settings:
    values = dict(
        host="127.0.0.1",
        port=8000,
        logs_dir=tmp_path / "logs",
        log_level="INFO",
        max_upload_bytes=1024,
        session_ttl_minutes=15,
    )
    values.update(overrides)
    return Settings(**values)


def test_handlers_follow_settings(tmp_path):
    handlers = build_handlers(_settings(tmp_path, log_max_bytes=2048, log_backup_count=3))
    try:
        assert len(handlers) == 2
        fh = handlers[1]
        assert isinstance(fh, RotatingFileHandler)
        assert fh.maxBytes == 2048
        assert fh.backupCount == 3
        assert fh.baseFilename.endswith("pdf_compressor.log")
        assert (tmp_path / "logs").is_dir()
        assert all(any(isinstance(f, SessionIdFilter) for f in h.filters) for h in handlers)
    finally:
        for h in handlers:
            h.close()


def test_file_log_can_be_disabled(tmp_path):
    handlers = build_handlers(_settings(tmp_path, log_max_bytes=0))
    assert len(handlers) == 1
    assert not isinstance(handlers[0], RotatingFileHandler)
    assert not (tmp_path / "logs").exists()


def test_setup_logging_applies_level_and_does_not_duplicate(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        assert setup_logging(_settings(tmp_path, log_level="debug")) is True
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        assert logging.getLogger("pikepdf").level == logging.DEBUG

        assert setup_logging(_settings(tmp_path, log_level="warning")) is False
        assert root.level == logging.WARNING
        assert len(root.handlers) == 2
    finally:
        for h in root.handlers:
            h.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("pikepdf").setLevel(logging.NOTSET)
        logging.getLogger("uvicorn.access").setLevel(logging.NOTSET)
