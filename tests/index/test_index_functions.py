import textwrap

import pytest

from chatapply.index import (
    AssignedCallableRecognizer,
    CallShapedBodyRecognizer,
    DeclarationRecognizer,
    IndentationBlockRecognizer,
    index_functions,
)
from chatapply.index.scan import find_closing, indent_width, triple_quote_state
from chatapply.models import FunctionSpan


def _names(source):
    return [s.name for s in index_functions(source)]


def test_function_declarations():
    src = "function foo(){return 1}\nfunction bar(){return 2}"
    spans = index_functions(src)
    assert spans[0] == FunctionSpan("foo", "function foo(){return 1}", 0, 24)
    assert spans[1].name == "bar"
    assert spans[1].content == "function bar(){return 2}"


def test_spans_match_their_source_slice():
    src = textwrap.dedent("""\
        import { x } from './x';

        export async function load(path) {
          const data = await read(path, { encoding: 'utf8' });
          return data;
        }

        const add = (a, b) => {
          return a + b;
        };
        const twice = x => x * 2;

        class Greeter {
          greet(name) {
            return `hi ${name}`;
          }
        }
    """)
    spans = index_functions(src)
    assert [s.name for s in spans] == ["load", "add", "twice", "greet"]
    for span in spans:
        assert src[span.start:span.end] == span.content


def test_arrow_functions():
    src = "const add = (a, b) => {\n  return a + b;\n};\nconst twice = x => x * 2;"
    spans = index_functions(src)
    assert spans[0].content == "const add = (a, b) => {\n  return a + b;\n}"
    assert spans[1].content == "const twice = x => x * 2;"


def test_function_expression_binding():
    src = "var handler = function (evt) {\n  evt.stop();\n};"
    (span,) = index_functions(src)
    assert span.name == "handler"
    assert span.content == "var handler = function (evt) {\n  evt.stop();\n}"


def test_method_shaped_bodies_skip_control_flow():
    src = textwrap.dedent("""\
        class Greeter {
          greet(name) {
            if (name) {
              return "hi " + name;
            }
            return "hi";
          }
        }
    """)
    assert _names(src) == ["greet"]
    assert index_functions("if (ready) {\n  go();\n}") == []


def test_braces_in_strings_and_comments_are_ignored():
    src = 'function f() {\n  const s = "}";\n  // }\n  /* } */\n  return s;\n}'
    (span,) = index_functions(src)
    assert span.content == src


def test_go_method_with_receiver():
    src = "func (s *Server) Start(port int) error {\n\treturn nil\n}"
    (span,) = index_functions(src)
    assert span.name == "Start"
    assert span.content == src


def test_python_functions():
    src = "def a(x):\n    return x\n\n\ndef b():\n    pass\n"
    spans = index_functions(src)
    assert [(s.name, s.content) for s in spans] == [
        ("a", "def a(x):\n    return x"),
        ("b", "def b():\n    pass"),
    ]


def test_python_one_line_and_async_methods():
    assert index_functions("def f(): return 1")[0].content == "def f(): return 1"
    src = "class A:\n    async def run(self):\n        await x()\n"
    (span,) = index_functions(src)
    assert span.name == "run"
    assert span.content == "async def run(self):\n        await x()"


def test_python_lambda_binding():
    (span,) = index_functions("square = lambda n: n * n\n")
    assert span.name == "square"
    assert span.content == "square = lambda n: n * n"


def test_python_block_spans_multiline_strings_at_column_zero():
    src = textwrap.dedent('''\
        def query():
            sql = """
        SELECT *
        FROM t
        """
            return sql


        def other():
            pass
        ''')
    spans = index_functions(src)
    assert [s.name for s in spans] == ["query", "other"]
    assert spans[0].content.endswith("    return sql")
    assert spans[0].content.count('"""') == 2


def test_python_docstring_body_does_not_end_the_block():
    src = "def f():\n    '''\nNot code.\n    def g(): pass\n'''\n    return 1\n"
    (span,) = index_functions(src)
    assert span.name == "f"
    assert span.content == src.rstrip("\n")


def test_first_name_wins_across_recognizers():
    src = "function foo(){}\nconst foo = () => {}"
    spans = index_functions(src)
    assert [s.name for s in spans] == ["foo"]
    assert spans[0].content == "function foo(){}"


def test_empty_and_plain_text():
    assert index_functions("") == []
    assert index_functions("x = 1\ny = 2") == []


def test_indexing_is_deterministic():
    src = "function a(){}\nconst b = () => 1;\ndef c():\n    pass\n"
    assert index_functions(src) == index_functions(src)


def test_custom_recognizer_list():
    src = "function foo(){}\ndef bar():\n    pass\n"
    assert _names_with(src, [IndentationBlockRecognizer()]) == ["bar"]
    assert _names_with(src, [DeclarationRecognizer()]) == ["foo"]


def _names_with(src, recognizers):
    return [s.name for s in index_functions(src, recognizers)]


def test_each_recognizer_reports_its_own_shape():
    assert [s.name for s in AssignedCallableRecognizer().find_spans("let f = async (x) => x;")] == ["f"]
    assert [s.name for s in CallShapedBodyRecognizer().find_spans("obj.call(a) {}\nrun() {}")] == ["run"]


@pytest.mark.parametrize(
    "text, open_idx, expected",
    [
        ("(a, (b))", 0, 7),
        ("{ '}' }", 0, 6),
        ("{ `\n}` }", 0, 7),
        ("(x", 0, -1),
    ],
)
def test_find_closing(text, open_idx, expected):
    assert find_closing(text, open_idx) == expected


def test_find_closing_hash_comments():
    assert find_closing("(a, # )\n b)", 0, comments="hash") == 10


def test_indent_width_counts_tabs_as_four():
    assert indent_width("\t  x") == 6


@pytest.mark.parametrize(
    "line, open_quote, expected",
    [
        ('    sql = """', None, '"""'),
        ('x = """one line"""', None, None),
        ("SELECT * FROM t", '"""', '"""'),
        ('""" + tail', '"""', None),
        ("s = '\"\"\"'  # not a triple quote", None, None),
        ("# '''", None, None),
        ("doc = '''", None, "'''"),
        ('still \\""" escaped', '"""', '"""'),
    ],
)
def test_triple_quote_state(line, open_quote, expected):
    assert triple_quote_state(line, open_quote) == expected
