from newsreach.core.listing import GroupInfo, article_numbers, group_names, newest_first, parse_group_line


def test_parse_group_line():
    info = parse_group_line("alt.test 0000000100 0000000001 y")

    assert info == GroupInfo("alt.test", "0000000100", "0000000001", "y", "alt.test 0000000100 0000000001 y")
    assert info.posting_allowed


def test_parse_group_line_tabs_and_short_lines():
    assert parse_group_line("misc.test\t9\t3\tn").flags == "n"
    assert parse_group_line("lonely.group").name == "lonely.group"
    assert parse_group_line("lonely.group").high == ""


def test_group_names():
    assert group_names(["alt.test 2 1 y", "comp.lang.python 9 3 m"]) == ["alt.test", "comp.lang.python"]


def test_article_numbers_trims_and_drops_blanks():
    assert article_numbers(["1", " 2", "", "   ", "3 "]) == ["1", "2", "3"]


def test_newest_first():
    numbers = [str(n) for n in range(1, 301)]

    shown = newest_first(numbers, 200)

    assert len(shown) == 200
    assert shown[0] == "300"
    assert shown[-1] == "101"


def test_newest_first_short_list():
    assert newest_first(["1", "2"], 200) == ["2", "1"]
    assert newest_first(["1", "2"], 0) == []
