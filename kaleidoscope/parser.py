from dataclasses import dataclass, field

from .errors import UnexpectedEOF, UnexpectedToken
from .lexer import BINARY_OPERATORS


class ASTNode:
    pass


@dataclass(frozen=True)
class Num(ASTNode):
    value: float


@dataclass(frozen=True)
class Var(ASTNode):
    name: str


@dataclass(frozen=True)
class BinOp(ASTNode):
    left: ASTNode
    op: str
    right: ASTNode


@dataclass(frozen=True)
class Call(ASTNode):
    callee: str
    args: tuple = ()


@dataclass(frozen=True)
class IfElse(ASTNode):
    cond: ASTNode
    then: ASTNode
    otherwise: ASTNode


@dataclass(frozen=True)
class Prototype:
    name: str
    params: tuple = ()


@dataclass(frozen=True)
class FuncDef:
    prototype: Prototype
    body: ASTNode


@dataclass
class Program:
    externs: list = field(default_factory=list)
    definitions: list = field(default_factory=list)
    expressions: list = field(default_factory=list)
    # name -> Prototype, externs and definitions together; the last one wins
    prototypes: dict = field(default_factory=dict)


class Parser:
    """Recursive descent over the token list produced by the lexer.

    The expression grammar has a single production: a primary expression
    optionally followed by an operator and another full expression. There is
    no precedence, and operators chain to the right, so ``a - b - c`` reads as
    ``a - (b - c)``.
    """

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def consume(self):
        self.pos += 1

    def current_token(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def current_kind(self):
        token = self.current_token()
        return token.kind if token is not None else None

    def expect(self, kind):
        token = self.current_token()
        if token is None:
            raise UnexpectedEOF(kind)
        if token.kind != kind:
            raise UnexpectedToken(token, kind)
        self.consume()
        return token

    def parse(self):
        program = Program()
        while self.current_token() is not None:
            kind = self.current_kind()
            if kind == 'EXTERN':
                proto = self.extern()
                program.externs.append(proto)
                program.prototypes[proto.name] = proto
            elif kind == 'DEF':
                definition = self.definition()
                program.definitions.append(definition)
                program.prototypes[definition.prototype.name] = definition.prototype
            else:
                expr = self.expr()
                self.expect('SEMI')
                program.expressions.append(expr)
        return program

    def extern(self):
        self.expect('EXTERN')
        proto = self.prototype()
        self.expect('SEMI')
        return proto

    def definition(self):
        self.expect('DEF')
        proto = self.prototype()
        body = self.expr()
        self.expect('SEMI')
        return FuncDef(proto, body)

    def prototype(self):
        name = self.identifier()
        self.expect('LPAREN')
        params = self.comma_separated(self.identifier)
        self.expect('RPAREN')
        return Prototype(name, tuple(params))

    def identifier(self):
        return self.expect('ID').value

    def comma_separated(self, parse_term):
        # stops at ')' or end of input, the caller expects the ')'
        terms = []
        while self.current_token() is not None and self.current_kind() != 'RPAREN':
            terms.append(parse_term())
            if self.current_kind() == 'COMMA':
                self.consume()
        return terms

    def expr(self):
        node = self.primary()
        if self.current_kind() in BINARY_OPERATORS:
            op = self.current_token().value
            self.consume()
            node = BinOp(node, op, self.expr())
        return node

    def primary(self):
        token = self.current_token()
        if token is None:
            raise UnexpectedEOF('expression')
        if token.kind == 'LPAREN':
            self.consume()
            node = self.expr()
            self.expect('RPAREN')
            return node
        elif token.kind == 'NUMBER':
            self.consume()
            return Num(token.value)
        elif token.kind == 'ID':
            self.consume()
            if self.current_kind() == 'LPAREN':
                self.consume()
                args = self.comma_separated(self.expr)
                self.expect('RPAREN')
                return Call(token.value, tuple(args))
            return Var(token.value)
        elif token.kind == 'IF':
            self.consume()
            cond = self.expr()
            self.expect('THEN')
            then = self.expr()
            self.expect('ELSE')
            otherwise = self.expr()
            return IfElse(cond, then, otherwise)
        raise UnexpectedToken(token)
