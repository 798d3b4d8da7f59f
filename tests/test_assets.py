from pathlib import Path

import pytest

from pagewright.document import load_text
from pagewright.errors import AssetOutsideTree, BuildIOError, InvalidAssetsShape, InvalidMetadataShape
from pagewright.site import DocumentPaths, copy_document_assets, resolve_assets

from conftest import write


def _paths(tmp_path: Path, relative: str) -> DocumentPaths:
    return DocumentPaths(Path(relative), tmp_path / "src", tmp_path / "out")


def test_assets_list_is_copied_relative_to_document(tmp_path: Path) -> None:
    write(tmp_path / "src" / "blog" / "img" / "logo.png", "png")
    write(tmp_path / "src" / "blog" / "data" / "table.csv", "a,b")
    paths = _paths(tmp_path, "blog/post.html")
    document = load_text('assets = ["img/logo.png", "data/table.csv"]\n***\n', paths.source)

    copied = copy_document_assets(document, paths)

    assert copied == [tmp_path / "out" / "blog" / "img" / "logo.png", tmp_path / "out" / "blog" / "data" / "table.csv"]
    assert (tmp_path / "out" / "blog" / "data" / "table.csv").read_text(encoding="utf-8") == "a,b"


def test_stylesheet_script_and_directory(tmp_path: Path) -> None:
    write(tmp_path / "src" / "site.css", "body {}")
    write(tmp_path / "src" / "app.js", "run()")
    write(tmp_path / "src" / "fonts" / "a" / "x.woff", "font")
    paths = _paths(tmp_path, "index.html")
    document = load_text(
        'stylesheet = "site.css"\nscript = "app.js"\nassets = "fonts"\n***\n',
        paths.source,
    )

    copy_document_assets(document, paths)

    assert (tmp_path / "out" / "site.css").exists()
    assert (tmp_path / "out" / "app.js").exists()
    assert (tmp_path / "out" / "fonts" / "a" / "x.woff").read_text(encoding="utf-8") == "font"


def test_parent_references_stay_inside_tree(tmp_path: Path) -> None:
    write(tmp_path / "src" / "shared" / "site.css", "body {}")
    paths = _paths(tmp_path, "blog/post.html")
    document = load_text('stylesheet = "../shared/site.css"\n***\n', paths.source)

    [item] = resolve_assets(document, paths)

    assert item.destination == tmp_path / "out" / "shared" / "site.css"


def test_reference_outside_input_root(tmp_path: Path) -> None:
    paths = _paths(tmp_path, "index.html")
    document = load_text('assets = ["../secret.txt"]\n***\n', paths.source)

    with pytest.raises(AssetOutsideTree):
        resolve_assets(document, paths)


def test_invalid_assets_shape_copies_nothing(tmp_path: Path) -> None:
    write(tmp_path / "src" / "site.css", "body {}")
    paths = _paths(tmp_path, "index.html")
    document = load_text('stylesheet = "site.css"\nassets = 42\n***\n', paths.source)

    with pytest.raises(InvalidAssetsShape):
        copy_document_assets(document, paths)
    assert not (tmp_path / "out").exists()


def test_stylesheet_must_be_a_string(tmp_path: Path) -> None:
    paths = _paths(tmp_path, "index.html")
    document = load_text('stylesheet = ["a.css"]\n***\n', paths.source)

    with pytest.raises(InvalidMetadataShape):
        resolve_assets(document, paths)


def test_missing_asset_is_io_error(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    paths = _paths(tmp_path, "index.html")
    document = load_text('assets = "missing.png"\n***\n', paths.source)

    with pytest.raises(BuildIOError) as exc:
        copy_document_assets(document, paths)
    assert exc.value.path == tmp_path / "src" / "missing.png"
