"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging

import structlog

from pkg_to_csv.config import Settings
from pkg_to_csv.log import setup_logging


class TestSetupLogging:
    def test_json_lines_on_stderr(self, capsys):
        setup_logging(Settings(log_format="json"), level="info")

        structlog.get_logger("pkg_to_csv.discovery").info("manifests_located", count=2)

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "manifests_located"
        assert record["count"] == 2
        assert record["level"] == "info"
        assert record["logger"] == "pkg_to_csv.discovery"
        assert "timestamp" in record

    def test_level_override_beats_settings(self):
        setup_logging(Settings(log_level="ERROR"), level="debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_default_level_filters_info(self, capsys):
        setup_logging(Settings())

        structlog.get_logger("pkg_to_csv.core").info("metadata_fetched", packages=3)
        structlog.get_logger("pkg_to_csv.core").warning("metadata_fetch_failed", package="x")

        err = capsys.readouterr().err
        assert "metadata_fetched" not in err
        assert "metadata_fetch_failed" in err

    def test_stdlib_records_share_the_format(self, capsys):
        setup_logging(Settings(log_format="json"))

        logging.getLogger("urllib3.connectionpool").warning("Retrying connection")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "Retrying connection"
        assert record["level"] == "warning"

    def test_repeated_setup_keeps_one_handler(self):
        setup_logging(Settings())
        setup_logging(Settings())
        handlers = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        ]
        assert len(handlers) == 1
