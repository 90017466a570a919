import pytest

from conftest import write_tree

from htmlforge import __version__
from htmlforge.cli.main import cli, create_parser


def _site(tmp_path):
    components = write_tree(tmp_path / "components", {
        "greet.html": "<p>Hello, <self.name/>!</p>",
    })
    source = write_tree(tmp_path / "pages", {
        "index.html": '<greet name="World"></greet>',
        "about/index.html": "<greet></greet>",
        "style.css": "p { color: red }\n",
    })
    return source, components, tmp_path / "public"


def test_generate(tmp_path, capsys):
    source, components, destination = _site(tmp_path)

    assert cli([str(source), str(components), str(destination)]) == 0

    assert (destination / "index.html").read_text(encoding="utf-8") == "<p>Hello, World!</p>"
    assert (destination / "about" / "index.html").read_text(encoding="utf-8") == "<p>Hello, !</p>"
    assert (destination / "style.css").read_text(encoding="utf-8") == "p { color: red }\n"

    out = capsys.readouterr().out
    assert "Generated 2 page(s) and copied 1 file(s)" in out
    assert "1 warning(s), see above" in out
    assert "[WARNING] undefined attribute self.name; available attributes: (none) in <greet> file=/about/index.html" in out
    assert "[INFO] Rendered page file=/index.html passes=2" in out


def test_log_level_from_environment(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("HTMLFORGE_LOG__LEVEL", "error")
    source, components, destination = _site(tmp_path)

    assert cli([str(source), str(components), str(destination)]) == 0

    out = capsys.readouterr().out
    assert "[WARNING]" not in out
    assert "[INFO]" not in out
    assert "1 warning(s), see above" in out


def test_json_logs(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("HTMLFORGE_LOG__FORMAT", "json")
    source, components, destination = _site(tmp_path)

    assert cli([str(source), str(components), str(destination)]) == 0

    assert '"level":"WARNING"' in capsys.readouterr().out


def test_minify_off_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("HTMLFORGE_BUILD__MINIFY", "false")
    components = write_tree(tmp_path / "components", {"box.html": "<div><self.inner/></div>"})
    source = write_tree(tmp_path / "pages", {"index.html": "<box>\n  <p>x</p>\n</box>\n"})
    destination = tmp_path / "public"

    assert cli([str(source), str(components), str(destination)]) == 0
    assert (destination / "index.html").read_text(encoding="utf-8") == "<div>\n  <p>x</p>\n</div>\n"


def test_configuration_error_exits_with_failure(tmp_path, capsys):
    source, components, destination = _site(tmp_path)
    (components / "GREET.html").write_text("<b></b>", encoding="utf-8")

    assert cli([str(source), str(components), str(destination)]) == 1

    err = capsys.readouterr().err
    assert err.startswith("Error: ")
    assert "<greet> is defined twice" in err
    assert not destination.exists()


def test_missing_folder_exits_with_failure(tmp_path, capsys):
    source, components, destination = _site(tmp_path)

    assert cli([str(tmp_path / "nope"), str(components), str(destination)]) == 1
    assert "source path must be a directory" in capsys.readouterr().err

    assert cli([str(source), str(tmp_path / "nope"), str(destination)]) == 1
    assert "components path must be a directory" in capsys.readouterr().err


def test_components_inside_destination_are_refused(tmp_path, capsys):
    source, _, destination = _site(tmp_path)
    components = write_tree(destination / "components", {"greet.html": "<p></p>"})

    assert cli([str(source), str(components), str(destination)]) == 1
    assert "must not be inside destination" in capsys.readouterr().err
    assert (components / "greet.html").exists()


def test_invalid_log_level_is_reported(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("HTMLFORGE_LOG__LEVEL", "loud")
    source, components, destination = _site(tmp_path)

    assert cli([str(source), str(components), str(destination)]) == 1
    assert "Unknown log level" in capsys.readouterr().err


def test_arguments_are_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli([])
    assert excinfo.value.code == 2


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        create_parser().parse_args(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == f"htmlforge {__version__}"


def test_runaway_component_exits_with_failure(tmp_path, capsys):
    components = write_tree(tmp_path / "components", {
        "loop.html": "<div>" * 20 + "<loop></loop>" + "</div>" * 20,
    })
    source = write_tree(tmp_path / "pages", {"index.html": "<loop></loop>"})

    assert cli([str(source), str(components), str(tmp_path / "public")]) == 1
    assert "invoking itself without end" in capsys.readouterr().err
