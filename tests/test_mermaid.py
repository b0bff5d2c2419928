from segmenter.lines import Line, split_lines
from segmenter.mermaid import find_mermaid_start, is_mermaid_start, scan_mermaid


def test_keyword_must_be_a_whole_word():
    assert is_mermaid_start(Line("graph TD", 0, 9, True))
    assert is_mermaid_start(Line("sequenceDiagram", 0, 16, True))
    assert is_mermaid_start(Line("pie title Pets", 0, 14, False))
    assert is_mermaid_start(Line("graph LR;", 0, 9, False))
    assert not is_mermaid_start(Line("pies are great", 0, 14, True))
    # may still grow into another word
    assert not is_mermaid_start(Line("pie", 0, 3, False))


def test_find_mermaid_start_skips_prose():
    lines = split_lines("Here is a chart:\ngraph TD\nA-->B\n")
    assert find_mermaid_start(lines) == 1


def test_custom_keywords():
    lines = split_lines("sankey-beta\n")
    assert find_mermaid_start(lines) is None
    assert find_mermaid_start(lines, ("sankey-beta",)) == 0


def test_scan_mermaid_ends_at_blank_line():
    text = "graph TD\nA-->B\n\nmore text"
    scan = scan_mermaid(text)
    assert scan.complete
    assert scan.content == "graph TD\nA-->B"
    assert text[scan.end:] == "\nmore text"


def test_scan_mermaid_ends_before_fence():
    text = "graph TD\nA-->B\n```python\n"
    scan = scan_mermaid(text)
    assert scan.complete
    assert text[scan.end:].startswith("```")


def test_scan_mermaid_open_until_blank_line():
    scan = scan_mermaid("graph TD\nA-->B\n")
    assert not scan.complete
    assert scan.content == "graph TD\nA-->B"
