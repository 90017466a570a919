import pytest

from conftest import write_tree

from htmlforge.engine.library import ComponentDefinition, ComponentLibrary
from htmlforge.engine.tree import serialize
from htmlforge.errors import (
    ComponentStructureError,
    DuplicateComponentError,
    SitePathError,
)


def test_load_uses_file_stem_as_tag_name(tmp_path):
    folder = write_tree(tmp_path / "components", {
        "card.html": "<div class=\"card\"><self.inner/></div>\n",
        "nav-link.html": "<a href=\"${self.href}\"><self.inner/></a>",
        "notes.txt": "not a component",
        "nested/ignored.html": "<p>ignored</p>",
    })

    library = ComponentLibrary.load(folder)

    assert library.names() == ["card", "nav-link"]
    assert "card" in library
    assert "ignored" not in library
    assert len(library) == 2
    assert list(library) == ["card", "nav-link"]
    assert library.get("card").source == folder / "card.html"
    assert library.get("missing") is None


def test_tag_names_are_lower_cased(tmp_path):
    folder = write_tree(tmp_path / "components", {"Hero.HTML": "<header></header>"})
    library = ComponentLibrary.load(folder)
    assert library.names() == ["hero"]


def test_duplicate_tag_names_fail(tmp_path):
    folder = write_tree(tmp_path / "components", {
        "Card.html": "<div></div>",
        "card.html": "<section></section>",
    })

    with pytest.raises(DuplicateComponentError) as excinfo:
        ComponentLibrary.load(folder)

    message = str(excinfo.value)
    assert "<card>" in message
    assert "Card.html" in message and "card.html" in message


def test_load_requires_a_directory(tmp_path):
    with pytest.raises(SitePathError):
        ComponentLibrary.load(tmp_path / "missing")

    path = tmp_path / "file.html"
    path.write_text("<p></p>", encoding="utf-8")
    with pytest.raises(SitePathError):
        ComponentLibrary.load(path)


def test_load_with_other_suffix(tmp_path):
    folder = write_tree(tmp_path / "components", {
        "card.htm": "<div></div>",
        "card.html": "<section></section>",
    })
    library = ComponentLibrary.load(folder, suffix=".htm")
    assert serialize(library.get("card").body) == "<template><div></div></template>"


@pytest.mark.parametrize("markup", [
    "",
    "   \n",
    "<p>one</p><p>two</p>",
    "text before <p>root</p>",
    "<p>root</p> trailing text",
])
def test_component_must_have_one_root_element(markup):
    with pytest.raises(ComponentStructureError):
        ComponentDefinition.from_string("card", markup)


def test_comments_and_whitespace_around_root_are_allowed():
    definition = ComponentDefinition.from_string(
        "card",
        "<!-- card -->\n<div>body</div>\n",
    )
    assert [node.name for node in definition.body.find_all()] == ["div"]
    assert "card" in serialize(definition.body)


def test_structure_error_names_the_file(tmp_path):
    folder = write_tree(tmp_path / "components", {"broken.html": "<p>a</p><p>b</p>"})
    with pytest.raises(ComponentStructureError) as excinfo:
        ComponentLibrary.load(folder)
    assert excinfo.value.path == folder / "broken.html"
    assert str(excinfo.value).startswith(str(folder / "broken.html"))


def test_instantiate_returns_independent_copies():
    definition = ComponentDefinition.from_string("card", "<div><span>x</span></div>")

    first = definition.instantiate()
    first.find("span").string = "changed"
    first.find("div")["class"] = "new"

    assert serialize(definition.body) == "<template><div><span>x</span></div></template>"
    assert serialize(definition.instantiate()) == "<template><div><span>x</span></div></template>"


def test_from_strings():
    library = ComponentLibrary.from_strings({"a": "<b></b>", "c": "<i></i>"})
    assert library.names() == ["a", "c"]

    with pytest.raises(DuplicateComponentError):
        ComponentLibrary({
            "x": ComponentDefinition.from_string("same", "<b></b>"),
            "y": ComponentDefinition.from_string("SAME", "<i></i>"),
        })
