from link_verifier.headings import extract_headings
from link_verifier.slugs import slugify


def test_slugify_strips_punctuation():
    assert slugify("Hello, World!") == "hello-world"


def test_slugify_collapses_whitespace_runs():
    assert slugify("Getting   started\twith  it") == "getting-started-with-it"


def test_slugify_keeps_existing_hyphens_and_digits():
    assert slugify("Step 2 - Install") == "step-2---install"


def test_slugify_drops_apostrophes_and_parentheses():
    assert slugify("What's new (v1.2)") == "whats-new-v12"


def test_slugify_drops_non_ascii():
    assert slugify("Café menu") == "caf-menu"


def test_extract_headings_levels_and_text():
    text = "# Title\n\nSome text\n## Usage  \n   ### Indented heading\n"
    scan = extract_headings(text)

    assert [(h.level, h.text) for h in scan.headings] == [
        (1, "Title"),
        (2, "Usage"),
        (3, "Indented heading"),
    ]
    assert [h.position for h in scan.headings] == [0, 1, 2]
    assert [h.line for h in scan.headings] == [1, 4, 5]


def test_extract_headings_without_space_after_hashes():
    scan = extract_headings("#NoSpace\n")
    assert scan.headings[0].text == "NoSpace"


def test_extract_headings_clamps_level():
    scan = extract_headings("######## deep\n")
    assert scan.headings[0].level == 6
    assert scan.headings[0].text == "deep"


def test_hash_inside_line_is_not_a_heading():
    scan = extract_headings("see issue #12 for details\n")
    assert scan.headings == []


def test_explicit_anchors_are_collected_in_order():
    text = (
        '<a name="first"></a>\n'
        'text <a name="second">x</a> and <a id=\'third\'></a>\n'
        '<a href="#first">not an anchor</a>\n'
    )
    scan = extract_headings(text)
    assert scan.explicit_anchors == ["first", "second", "third"]
