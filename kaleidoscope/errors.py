class KaleidoscopeError(RuntimeError):
    pass


class UsageError(KaleidoscopeError):
    pass


class UnreadableSource(KaleidoscopeError):
    pass


class NestingTooDeep(KaleidoscopeError):
    pass


# lexing

class LexError(KaleidoscopeError):
    def __init__(self, message, position):
        super().__init__(f'{message} at offset {position}')
        self.position = position


class InvalidNumberLiteral(LexError):
    def __init__(self, text, position):
        super().__init__(f'Invalid number literal: {text}', position)
        self.text = text


class UnexpectedCharacter(LexError):
    def __init__(self, char, position):
        super().__init__(f'Unexpected character: {char!r}', position)
        self.char = char


# parsing

class ParseError(KaleidoscopeError):
    pass


class UnexpectedToken(ParseError):
    def __init__(self, token, expected=None):
        message = f'Unexpected token: {token.kind} {token.value!r}'
        if expected is not None:
            message += f', expected {expected}'
        super().__init__(message)
        self.token = token
        self.expected = expected


class UnexpectedEOF(ParseError):
    def __init__(self, expected=None):
        message = 'Unexpected end of input'
        if expected is not None:
            message += f', expected {expected}'
        super().__init__(message)
        self.expected = expected


# code generation

class CodegenError(KaleidoscopeError):
    pass


class UnknownFunction(CodegenError):
    def __init__(self, name):
        super().__init__(f'Unknown function: {name}')
        self.name = name


class ArityMismatch(CodegenError):
    def __init__(self, name, expected, got):
        super().__init__(f'Wrong number of arguments to {name}: expected {expected}, got {got}')
        self.name = name
        self.expected = expected
        self.got = got


class UnknownVariable(CodegenError):
    def __init__(self, name):
        super().__init__(f'Unknown variable: {name}')
        self.name = name


class ConflictingPrototype(CodegenError):
    def __init__(self, name, expected, got):
        super().__init__(f'Conflicting prototype for {name}: declared with {expected} parameters, now {got}')
        self.name = name
        self.expected = expected
        self.got = got


class Redefinition(CodegenError):
    def __init__(self, name):
        super().__init__(f'Redefinition of function: {name}')
        self.name = name


class ReservedName(CodegenError):
    def __init__(self, name):
        super().__init__(f'Function name is reserved: {name}')
        self.name = name


# finishing

class ModuleVerificationError(KaleidoscopeError):
    pass


class UnresolvedSymbol(KaleidoscopeError):
    def __init__(self, name):
        super().__init__(f'Cannot resolve external function: {name}')
        self.name = name
