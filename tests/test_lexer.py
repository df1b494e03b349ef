import pytest

from kaleidoscope.errors import InvalidNumberLiteral, UnexpectedCharacter
from kaleidoscope.lexer import Token, tokenize


@pytest.mark.parametrize(
    "char, kind",
    [
        ("(", "LPAREN"),
        (")", "RPAREN"),
        (",", "COMMA"),
        (";", "SEMI"),
        ("+", "PLUS"),
        ("-", "MINUS"),
        ("*", "MUL"),
        ("/", "DIV"),
        ("%", "MOD"),
    ],
)
def test_single_character_tokens(char: str, kind: str) -> None:
    assert tokenize(char) == [Token(kind, char)]


def test_number_and_operator() -> None:
    assert tokenize("1.5 + 2") == [
        Token("NUMBER", 1.5),
        Token("PLUS", "+"),
        Token("NUMBER", 2.0),
    ]


def test_keywords_and_identifiers() -> None:
    tokens = tokenize("def extern if then else foo x1 define")
    assert [t.kind for t in tokens] == ["DEF", "EXTERN", "IF", "THEN", "ELSE", "ID", "ID", "ID"]
    assert [t.value for t in tokens[5:]] == ["foo", "x1", "define"]


def test_number_followed_by_letters_splits() -> None:
    assert tokenize("12ab") == [Token("NUMBER", 12.0), Token("ID", "ab")]


def test_comments_run_to_end_of_line() -> None:
    src = "# leading comment\n1; # trailing comment\n2;"
    assert tokenize(src) == [
        Token("NUMBER", 1.0),
        Token("SEMI", ";"),
        Token("NUMBER", 2.0),
        Token("SEMI", ";"),
    ]


def test_comment_at_end_of_input() -> None:
    assert tokenize("x # no newline") == [Token("ID", "x")]


def test_invalid_number_literal() -> None:
    with pytest.raises(InvalidNumberLiteral) as excinfo:
        tokenize("1 + 1.2.3")
    assert excinfo.value.text == "1.2.3"
    assert excinfo.value.position == 4
    assert "1.2.3" in str(excinfo.value)


def test_unknown_character_ends_token_stream() -> None:
    assert tokenize("1 + 2 @ 3;") == [
        Token("NUMBER", 1.0),
        Token("PLUS", "+"),
        Token("NUMBER", 2.0),
    ]


def test_unknown_character_in_strict_mode() -> None:
    with pytest.raises(UnexpectedCharacter) as excinfo:
        tokenize("1 + 2 @ 3;", strict=True)
    assert excinfo.value.char == "@"
    assert excinfo.value.position == 6


def test_empty_and_blank_input() -> None:
    assert tokenize("") == []
    assert tokenize(" \t\n ") == []


def test_tokens_are_immutable() -> None:
    token = tokenize("x")[0]
    with pytest.raises(AttributeError):
        token.value = "y"
