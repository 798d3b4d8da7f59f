from pagewright.document import parse_front_matter, split_front_matter


def test_split_at_first_delimiter_line() -> None:
    meta, body = split_front_matter('title = "x"\n***\nbody\n***\nmore\n')

    assert meta == 'title = "x"\n'
    assert body == "body\n***\nmore\n"


def test_missing_delimiter_means_all_body() -> None:
    text = 'title = "x"\n<p>no front matter</p>\n'

    assert split_front_matter(text) == ("", text)


def test_delimiter_must_start_a_line() -> None:
    text = "inline *** marker\nfoo***\nbar\n"

    assert split_front_matter(text) == ("", text)


def test_delimiter_at_file_start_gives_empty_metadata() -> None:
    assert split_front_matter("***\nbody") == ("", "body")


def test_crlf_delimiter_and_custom_marker() -> None:
    assert split_front_matter("a = 1\r\n***\r\nbody") == ("a = 1\r\n", "body")
    assert split_front_matter("a = 1\n+++\nbody", "+++") == ("a = 1\n", "body")


def test_parse_keeps_key_order() -> None:
    table = parse_front_matter('zeta = 1\nalpha = "a"\nmid = [1, 2]\n')

    assert list(table) == ["zeta", "alpha", "mid"]
    assert table["mid"] == [1, 2]


def test_malformed_front_matter_becomes_empty_table(caplog) -> None:
    assert parse_front_matter("this is = = not toml") == {}
    assert "malformed front matter" in caplog.text
