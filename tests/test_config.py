import pytest

from ops_finsight.config import AnalyticsConfig, load_config


def test_load_config_reads_sections(tmp_path) -> None:
    cfg_path = tmp_path / "cfg.toml"
    cfg_path.write_text(
        "[analytics]\n"
        'currency = "EUR"\n'
        'link_key = "project_id"\n'
        'fallback_label_prefix = "Project"\n'
        'default_period = "ytd"\n'
        'default_granularity = "weekly"\n'
        "\n"
        "[display]\n"
        "decimals = 0\n",
        encoding="utf-8",
    )

    cfg = load_config(str(cfg_path))

    assert cfg == AnalyticsConfig(
        currency="EUR",
        link_key="project_id",
        fallback_label_prefix="Project",
        default_period="ytd",
        default_granularity="weekly",
        decimals=0,
    )


def test_load_config_defaults_without_file(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_config() == AnalyticsConfig()


def test_load_config_uses_default_file_in_cwd(tmp_path, monkeypatch) -> None:
    (tmp_path / "ops_finsight_config.toml").write_text(
        '[analytics]\ncurrency = "USD"\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)

    cfg = load_config()
    assert cfg.currency == "USD"
    assert cfg.link_key == "seminar_id"
    assert cfg.default_period == "all"
    assert cfg.default_granularity == "monthly"


def test_load_config_explicit_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.toml"))


@pytest.mark.parametrize(
    "content",
    [
        "[analytics\n",
        '[analytics]\ndefault_period = "qtd"\n',
        '[analytics]\ndefault_granularity = "hourly"\n',
        '[display]\ndecimals = "two"\n',
        "[display]\ndecimals = -1\n",
        'analytics = "flat"\n',
    ],
)
def test_load_config_invalid_values(tmp_path, content) -> None:
    cfg_path = tmp_path / "cfg.toml"
    cfg_path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(cfg_path))
