from htmlforge.core.config import DEFAULTS, Config, get_config, reset_config


def test_defaults():
    config = Config.from_env({})
    assert config.get_int("engine.max_depth") == 64
    assert config.get_int("engine.max_passes") == 32
    assert config.get_bool("build.minify") is True
    assert config.get_str("build.template_suffix") == ".html"
    assert config.get_str("log.level") == "INFO"
    assert config.all() == DEFAULTS


def test_environment_overrides():
    config = Config.from_env({
        "HTMLFORGE_ENGINE__MAX_DEPTH": "16",
        "HTMLFORGE_BUILD__MINIFY": "off",
        "HTMLFORGE_LOG__LEVEL": "debug",
        "HTMLFORGE_BUILD__RATIO": "0.5",
        "OTHER_ENGINE__MAX_DEPTH": "1",
    })
    assert config.get("engine.max_depth") == 16
    assert config.get_int("engine.max_passes") == 32
    assert config.get("build.minify") is False
    assert config.get("build.ratio") == 0.5
    assert config.get("log.level") == "debug"


def test_runtime_values_win():
    config = Config.from_env({"HTMLFORGE_ENGINE__MAX_DEPTH": "16"})
    assert config.get_int("engine.max_depth") == 16

    config.set("engine.max_depth", 4)
    assert config.get_int("engine.max_depth") == 4

    config["build.minify"] = "no"
    assert config.get_bool("build.minify") is False


def test_missing_keys_and_bad_values():
    config = Config.from_env({"HTMLFORGE_ENGINE__MAX_DEPTH": "deep"})
    assert config.get("engine.nothing", "fallback") == "fallback"
    assert config.get_int("engine.max_depth", 64) == 64
    assert "engine.max_passes" in config
    assert "engine.nothing" not in config
    assert config["engine"]["max_passes"] == 32


def test_defaults_are_not_shared():
    config = Config.from_env({})
    config.all()["engine"]["max_depth"] = 1
    config.set("engine.max_depth", 2)
    assert DEFAULTS["engine"]["max_depth"] == 64
    assert Config.from_env({}).get_int("engine.max_depth") == 64


def test_global_config_reads_environment(monkeypatch):
    monkeypatch.setenv("HTMLFORGE_ENGINE__MAX_PASSES", "8")
    reset_config()
    assert get_config().get_int("engine.max_passes") == 8
    assert get_config() is get_config()

    monkeypatch.delenv("HTMLFORGE_ENGINE__MAX_PASSES")
    reset_config()
    assert get_config().get_int("engine.max_passes") == 32
