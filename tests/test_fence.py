from segmenter.fence import scan_fence
from segmenter.header import FenceHeader, parse_header, split_header


def test_fence_found_with_watermark_before_it():
    scan = scan_fence("intro\n```py")
    assert scan.found
    assert (scan.fence_start, scan.fence_end) == (6, 9)
    assert scan.consumable == 5


def test_trailing_whitespace_and_partial_fence_stay_buffered():
    assert scan_fence("hello  \n").consumable == 5
    assert scan_fence("hello ``").consumable == 5
    assert not scan_fence("hello ``").found


def test_dangling_backslash_is_not_consumed():
    assert scan_fence("path\\").consumable == 4


def test_escaped_backtick_breaks_the_run():
    assert scan_fence("\\```not code").fence_start == -1
    assert scan_fence("\\``").fence_start == -1
    assert scan_fence("a\\\\```b").fence_start == 3  # escaped backslash, then a real fence


def test_backtick_run_longer_than_three_matches_first_three():
    assert scan_fence("````").fence_start == 0


def test_parse_header_forms():
    assert parse_header("Python") == FenceHeader(language="python")
    assert parse_header("go:pkg/main.go") == FenceHeader(language="go", file_path="pkg/main.go")
    assert parse_header("src/app.ts") == FenceHeader(file_path="src/app.ts")
    assert parse_header("main.rs") == FenceHeader(file_path="main.rs")
    assert parse_header("mermaid") == FenceHeader(language="mermaid")
    assert parse_header("  ") == FenceHeader()
    assert parse_header("sh:") == FenceHeader(language="sh")


def test_split_header_waits_for_newline():
    assert split_header("python") is None
    assert split_header("python\nprint()") == ("python", "print()")
