import re
from typing import NamedTuple

from .errors import InvalidNumberLiteral, UnexpectedCharacter


class Token(NamedTuple):
    kind: str
    value: object


TOKEN_SPEC = [
    ('NUMBER',   r'[0-9][0-9.]*'),
    ('ID',       r'[A-Za-z][A-Za-z0-9]*'),
    ('LPAREN',   r'\('),
    ('RPAREN',   r'\)'),
    ('COMMA',    r','),
    ('SEMI',     r';'),
    ('PLUS',     r'\+'),
    ('MINUS',    r'-'),
    ('MUL',      r'\*'),
    ('DIV',      r'/'),
    ('MOD',      r'%'),
    ('COMMENT',  r'#[^\n]*'),
    ('SKIP',     r'\s+'),
    ('MISMATCH', r'.'),
]

KEYWORDS = {
    'def': 'DEF',
    'extern': 'EXTERN',
    'if': 'IF',
    'then': 'THEN',
    'else': 'ELSE',
}

BINARY_OPERATORS = ('PLUS', 'MINUS', 'MUL', 'DIV', 'MOD')

TOKEN_REGEX = re.compile('|'.join('(?P<%s>%s)' % pair for pair in TOKEN_SPEC))


def gen_tokens(code, strict=False):
    for mo in TOKEN_REGEX.finditer(code):
        kind = mo.lastgroup
        value = mo.group()
        if kind == 'NUMBER':
            try:
                value = float(value)
            except ValueError:
                raise InvalidNumberLiteral(value, mo.start()) from None
        elif kind == 'ID':
            if value in KEYWORDS:
                kind = KEYWORDS[value]
        elif kind == 'SKIP' or kind == 'COMMENT':
            continue
        elif kind == 'MISMATCH':
            # an unknown character ends the token stream unless asked to complain
            if strict:
                raise UnexpectedCharacter(value, mo.start())
            return
        yield Token(kind, value)


def tokenize(code, strict=False):
    return list(gen_tokens(code, strict))
