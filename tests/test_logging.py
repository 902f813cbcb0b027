"""Tests for JSON logging helpers and the Timer."""

import json
import logging
import time

from shared.utils import JSONFormatter, Timer, log_summary, setup_logging


class TestJSONFormatter:
    def test_formats_record_as_json(self):
        record = logging.LogRecord("rizzword.race", logging.INFO, __file__, 1, "clue %s done", ("1A",), None)
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["name"] == "rizzword.race"
        assert data["msg"] == "clue 1A done"


class TestSetupLogging:
    def setup_method(self):
        self._saved = list(logging.getLogger().handlers)
        self._level = logging.getLogger().level

    def teardown_method(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in self._saved:
            root.addHandler(handler)
        root.setLevel(self._level)

    def test_writes_json_lines(self, tmp_path):
        log_file = setup_logging(tmp_path, verbose=False)
        logging.getLogger("rizzword.test").info("race started")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        assert json.loads(lines[-1])["msg"] == "race started"


class TestLogSummary:
    def test_appends_results(self, tmp_path):
        log_summary(tmp_path, "run-1", [{"model": "a", "rank": 1}])
        log_summary(tmp_path, "run-2", [{"model": "b", "rank": 1}])

        lines = (tmp_path / "races.jsonl").read_text().splitlines()
        assert [json.loads(line)["run_id"] for line in lines] == ["run-1", "run-2"]
        assert json.loads(lines[0])["results"][0]["model"] == "a"


class TestTimer:
    def test_measures_block(self):
        with Timer() as timer:
            time.sleep(0.01)
        assert timer.elapsed_ms >= 10

    def test_unstarted_timer(self):
        assert Timer().elapsed_ms == 0.0
