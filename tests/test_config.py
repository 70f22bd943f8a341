import json

import pytest

from pagestats.config import ConfigurationError, load_settings, parse_jobs


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestParseJobs:
    def test_empty_list_is_fatal(self):
        with pytest.raises(ConfigurationError):
            parse_jobs([])

    def test_none_is_fatal(self):
        with pytest.raises(ConfigurationError):
            parse_jobs(None)

    def test_entries_without_url_are_skipped(self):
        jobs = parse_jobs([{"label": "nothing"}, {"url": "https://example.com"}])
        assert [job.url for job in jobs] == ["https://example.com"]

    def test_only_invalid_entries_is_fatal(self):
        with pytest.raises(ConfigurationError):
            parse_jobs([{"url": ""}, {"label": "x"}])

    def test_bare_strings_and_camel_case_keys(self):
        jobs = parse_jobs([
            "https://a.example",
            {
                "url": "https://b.example",
                "label": "mobile",
                "userAgent": "UA",
                "viewport": {"width": 390, "height": 844},
                "navigationOptions": {"timeout": 5000},
                "waitAfterLoadMs": 250,
            },
        ])
        assert jobs[0].url == "https://a.example"
        assert jobs[0].timeout_ms is None
        assert jobs[1].label == "mobile"
        assert jobs[1].user_agent == "UA"
        assert jobs[1].viewport == {"width": 390, "height": 844}
        assert jobs[1].timeout_ms == 5000
        assert jobs[1].wait_after_load_ms == 250


class TestLoadSettings:
    def test_defaults(self, tmp_path):
        settings = load_settings(write_config(tmp_path, {"urls": ["https://example.com"]}))
        assert settings.output == "stdout"
        assert settings.interval is None
        assert settings.concurrency == 1
        assert settings.influx["measurement"] == "page_stats"

    def test_influx_overrides_merge(self, tmp_path):
        settings = load_settings(write_config(tmp_path, {
            "urls": ["https://example.com"],
            "output": "influx",
            "influx": {"url": "http://influx:8086"},
            "concurrency": 3,
            "interval": 60,
        }))
        assert settings.influx["url"] == "http://influx:8086"
        assert settings.influx["database"] == "pagestats"
        assert settings.concurrency == 3
        assert settings.interval == 60

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(str(tmp_path / "absent.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_settings(str(path))

    def test_unknown_output(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(write_config(tmp_path, {"urls": ["https://example.com"], "output": "kafka"}))

    def test_no_urls(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(write_config(tmp_path, {"urls": []}))

    @pytest.mark.parametrize("concurrency", ["two", 0, -1, None, 1.5, True, [2]])
    def test_invalid_concurrency(self, tmp_path, concurrency):
        with pytest.raises(ConfigurationError, match="concurrency"):
            load_settings(write_config(tmp_path, {"urls": ["https://example.com"], "concurrency": concurrency}))

    def test_numeric_string_concurrency(self, tmp_path):
        settings = load_settings(write_config(tmp_path, {"urls": ["https://example.com"], "concurrency": "4"}))
        assert settings.concurrency == 4

    @pytest.mark.parametrize("interval", ["hourly", "3600", -5, False, {"every": 1}])
    def test_invalid_interval(self, tmp_path, interval):
        with pytest.raises(ConfigurationError, match="interval"):
            load_settings(write_config(tmp_path, {"urls": ["https://example.com"], "interval": interval}))

    def test_zero_interval_runs_once(self, tmp_path):
        settings = load_settings(write_config(tmp_path, {"urls": ["https://example.com"], "interval": 0}))
        assert settings.interval is None

    def test_directory_path(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(str(tmp_path))
