from newsreach.core.status import COMMAND_UNSUPPORTED, classify, status_code


def test_matched():
    match = classify("215 list of newsgroups follows", {"215"})
    assert match
    assert match.code == "215"
    assert match.line == "215 list of newsgroups follows"


def test_matches_any_expected_code():
    assert classify("211 3 1 3 alt.test list follows", {"211", "215"}).code == "211"
    assert classify("215 ok", {"211", "215"})


def test_unmatched_keeps_raw_line():
    match = classify("411 no such newsgroup", {"211"})
    assert not match
    assert match.code == "411"
    assert match.line == "411 no such newsgroup"


def test_unmatched_code_drives_fallback_decision():
    match = classify("500 command not recognized", {"215"})
    assert not match
    assert match.code in COMMAND_UNSUPPORTED


def test_empty_line_has_no_code():
    assert status_code("") is None
    match = classify("", {"200"})
    assert not match
    assert match.code is None


def test_code_is_three_character_prefix():
    assert classify("2150 odd", {"215"}).code == "215"
    assert not classify("21 short", {"215"})
