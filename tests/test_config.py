from pathlib import Path

from changelog_viewer.config import AppConfig, load_config


def test_load_config_defaults():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.fetch.retries == 0
    assert cfg.output.format == "text"


def test_load_config_merges_yaml(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "fetch:\n  timeout_seconds: 5\noutput:\n  format: html\n  unknown: 1\nextra:\n  x: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.fetch.timeout_seconds == 5
    assert cfg.fetch.retries == 0
    assert cfg.output.format == "html"
    assert cfg.logging.level == "WARNING"


def test_load_config_empty_file(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()
