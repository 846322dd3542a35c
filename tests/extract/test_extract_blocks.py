import textwrap

import pytest

from chatapply.extract import extract_blocks, iter_fenced_regions, looks_like_path
from chatapply.models import CodeBlock


def test_parses_code_blocks_with_file_paths():
    text = textwrap.dedent("""
        Here's some code to create a hello world program:

        src/hello.js
        ```javascript
        console.log('Hello world!');
        ```

        And another file:

        src/goodbye.js
        ```javascript
        console.log('Goodbye!');
        ```
    """)
    blocks = extract_blocks(text)
    assert len(blocks) == 2
    assert blocks[0] == CodeBlock("src/hello.js", "javascript", "console.log('Hello world!');")
    assert blocks[1].file_path == "src/goodbye.js"
    assert blocks[1].code == "console.log('Goodbye!');"


def test_minimal_block():
    assert extract_blocks("app.js\n```js\nconsole.log(1)\n```") == [
        CodeBlock("app.js", "js", "console.log(1)")
    ]


@pytest.mark.parametrize("hint", ["Here is the code", "Example", "", "run this:"])
def test_hint_without_separator_or_dot_is_skipped(hint):
    assert extract_blocks(f"{hint}\n```js\nx()\n```\n") == []


def test_block_at_start_of_text_has_no_hint():
    assert extract_blocks("```py\nx = 1\n```\n") == []


def test_empty_and_none_like_input():
    assert extract_blocks("") == []
    assert extract_blocks("just prose, no fences at all") == []


def test_empty_body_yields_empty_code():
    blocks = extract_blocks("a.py\n```\n```")
    assert blocks == [CodeBlock("a.py", "", "")]


def test_body_is_verbatim():
    body = "    def f():\n        return 1\n\n\n    # trailing comment"
    blocks = extract_blocks(f"pkg/mod.py\n```python\n{body}\n```\n")
    assert blocks[0].code == body


def test_hint_is_trimmed_and_blank_lines_skipped():
    blocks = extract_blocks("   src/app.ts   \n\n```ts\nlet a = 1;\n```\n")
    assert blocks[0].file_path == "src/app.ts"


def test_language_is_lowercased_first_info_token():
    blocks = extract_blocks("a.js\n```JavaScript title=app\nx\n```\n")
    assert blocks[0].language == "javascript"


def test_info_attribute_only_means_no_language():
    blocks = extract_blocks("a.js\n```title=app.js\nx\n```\n")
    assert blocks[0].language == ""


def test_unterminated_fence_stops_scanning():
    text = "a.py\n```\nx = 1\n```\n\nb.py\n```\ny = 2\n"
    blocks = extract_blocks(text)
    assert [b.file_path for b in blocks] == ["a.py"]
    assert extract_blocks("a.py\n```py\nx = 1\n") == []


def test_nested_fences_stay_inside_outer_block():
    text = textwrap.dedent("""\
        docs/README.md
        ````markdown
        Example:
        ```python
        print(1)
        ```
        done
        ````
    """)
    blocks = extract_blocks(text)
    assert len(blocks) == 1
    assert blocks[0].language == "markdown"
    assert blocks[0].code == "Example:\n```python\nprint(1)\n```\ndone"


def test_tilde_fences():
    blocks = extract_blocks("notes.txt\n~~~\nhello\n~~~\n")
    assert blocks == [CodeBlock("notes.txt", "", "hello")]


def test_hint_never_reaches_into_previous_block():
    text = "a.py\n```\nx\n```\n```\ny\n```\n"
    blocks = extract_blocks(text)
    assert [b.code for b in blocks] == ["x"]


def test_same_path_twice_keeps_document_order():
    text = "a.txt\n```\none\n```\n\na.txt\n```\ntwo\n```\n"
    blocks = extract_blocks(text)
    assert [(b.file_path, b.code) for b in blocks] == [("a.txt", "one"), ("a.txt", "two")]


def test_crlf_line_endings():
    blocks = extract_blocks("a.js\r\n```js\r\nx\r\n```\r\n")
    assert blocks == [CodeBlock("a.js", "js", "x")]


def test_fenced_regions_report_body_offsets():
    text = "app.js\n```js\nconsole.log(1)\n```"
    (region,) = list(iter_fenced_regions(text))
    assert text[region.start:region.end] == region.code == "console.log(1)"
    assert region.info == "js"
    assert region.preamble == "app.js\n"


@pytest.mark.parametrize(
    "candidate, expected",
    [
        ("src/app.js", True),
        ("setup.py", True),
        ("Makefile", False),
        ("", False),
        (None, False),
    ],
)
def test_looks_like_path(candidate, expected):
    assert looks_like_path(candidate) is expected


def test_extraction_round_trip():
    triples = [
        ("src/a.py", "python", "def a():\n    return 1"),
        ("web/index.html", "html", "<p>hi</p>"),
        ("README.md", "", "plain\n\ntext"),
    ]
    text = "\n\n".join(
        f"Next file:\n{path}\n```{lang}\n{code}\n```" for path, lang, code in triples
    )
    assert extract_blocks(text) == [CodeBlock(*t) for t in triples]
