from pathlib import Path

import pytest

from pagewright.document import BODY_KEY, Metadata, load_document, load_text
from pagewright.errors import InvalidAssetsShape, InvalidMetadataShape, NoExtension, UndecodableSource


def test_bare_document_gets_defaults() -> None:
    document = load_text("<p>Hi</p>", Path("page.HTML"))

    assert document.metadata["template"] == "article"
    assert document.metadata["type"] == "html"
    assert document.body == "<p>Hi</p>"


def test_declared_keys_win_over_defaults() -> None:
    document = load_text('template = "custom"\ntype = "markdown"\n***\nHello', Path("page.html"))

    assert document.metadata["template"] == "custom"
    assert document.metadata["type"] == "markdown"
    assert document.body == "Hello"


def test_body_overwrites_front_matter_body() -> None:
    document = load_text('BODY = "from meta"\n***\nreal body', Path("x.html"))

    assert document.metadata[BODY_KEY] == "real body"


def test_missing_extension_is_an_error() -> None:
    with pytest.raises(NoExtension):
        load_text("body", Path("README"))


def test_missing_extension_allowed_when_not_derived() -> None:
    document = load_text("body", Path("README"), type_from_extension=False)

    assert document.metadata["type"] == "html"


def test_explicit_type_skips_extension_check() -> None:
    document = load_text('type = "html"\n***\nbody', Path("README"))

    assert document.metadata["type"] == "html"


def test_malformed_front_matter_still_loads() -> None:
    document = load_text("not = = toml\n***\nbody", Path("x.html"))

    assert set(document.metadata) == {"template", "type", "BODY"}
    assert document.body == "body"


def test_load_document_rejects_binary(tmp_path: Path) -> None:
    path = tmp_path / "logo.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")

    with pytest.raises(UndecodableSource):
        load_document(path)


def test_metadata_accessors() -> None:
    metadata = Metadata({"title": 3, "assets": ["a", 1], "one": "x"}, source=Path("p.html"))

    assert metadata.optional_str("missing") is None
    assert metadata.optional_paths("one") == ["x"]
    assert metadata.optional_paths("missing") == []
    with pytest.raises(InvalidMetadataShape) as exc:
        metadata.require_str("title")
    assert exc.value.key == "title"
    with pytest.raises(InvalidAssetsShape):
        metadata.optional_paths("assets")
