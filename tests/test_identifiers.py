from image_orchestrator.identifiers import parse_scheme, split_image_id


def test_scheme_is_text_before_first_colon() -> None:
    parts = split_image_id("wadouri:http://host/studies/a.dcm")

    assert parts.scheme == "wadouri"
    assert parts.body == "http://host/studies/a.dcm"


def test_id_without_colon_or_prefix_has_no_scheme() -> None:
    assert parse_scheme("a.dcm") is None
    assert parse_scheme(":a.dcm") is None
    assert split_image_id(":a.dcm").body == ":a.dcm"


def test_scheme_is_case_sensitive() -> None:
    assert parse_scheme("WADOURI:a.dcm") == "WADOURI"
