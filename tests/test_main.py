import json

import pytest

import main as runner


class ExplodingBrowser:
    def __init__(self, *args, **kwargs):
        raise AssertionError("browser must not be launched")


@pytest.fixture
def no_browser(monkeypatch):
    monkeypatch.setattr(runner, "ChromiumBrowser", ExplodingBrowser)


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestCli:
    def test_empty_job_list_exits_with_status_1(self, tmp_path, no_browser):
        with pytest.raises(SystemExit) as exc_info:
            runner.cli(["-c", write_config(tmp_path, {"urls": []})])
        assert exc_info.value.code == 1

    def test_missing_config_exits_with_status_1(self, tmp_path, no_browser):
        with pytest.raises(SystemExit) as exc_info:
            runner.cli(["-c", str(tmp_path / "absent.json")])
        assert exc_info.value.code == 1

    def test_zero_concurrency_flag_is_rejected(self, tmp_path, no_browser):
        path = write_config(tmp_path, {"urls": ["https://example.com"]})
        with pytest.raises(SystemExit) as exc_info:
            runner.cli(["-c", path, "--concurrency", "0"])
        assert exc_info.value.code == 1

    def test_negative_interval_flag_is_rejected(self, tmp_path, no_browser):
        path = write_config(tmp_path, {"urls": ["https://example.com"]})
        with pytest.raises(SystemExit) as exc_info:
            runner.cli(["-c", path, "--interval", "-1"])
        assert exc_info.value.code == 1

    def test_flags_override_config(self, tmp_path, monkeypatch):
        received = []

        async def fake_main(settings, headless=True):
            received.append((settings, headless))

        monkeypatch.setattr(runner, "main", fake_main)
        path = write_config(tmp_path, {"urls": ["https://example.com"], "concurrency": 2, "interval": 60})

        runner.cli(["-c", path, "--output", "jsonl", "--concurrency", "4", "--interval", "0", "--headful"])

        settings, headless = received[0]
        assert settings.output == "jsonl"
        assert settings.concurrency == 4
        assert settings.interval is None
        assert headless is False
