import os
import shutil
import sys

from .compyler import LLVMCodeGen
from .errors import KaleidoscopeError, NestingTooDeep, UsageError
from .finisher import IR_FILENAME, LLI, make_temp_output, run_jit, run_lli, verify_module
from .lexer import tokenize
from .parser import Parser
from .reader import fetch_code


def compile_source(code):
    # parser and generator both recurse once per nested expression or operator
    try:
        print('Tokenizing', file=sys.stderr)
        tokens = tokenize(code)

        print('Parsing', file=sys.stderr)
        ast = Parser(tokens).parse()

        print('Generating LLVM IR', file=sys.stderr)
        return LLVMCodeGen(ast).generate()
    except RecursionError:
        raise NestingTooDeep('Expression nested too deeply') from None


def execute(module, filename=IR_FILENAME):
    # prefer the real lli, the JIT covers machines without an LLVM install
    if shutil.which(LLI) is None:
        print('lli not found, running in-process', file=sys.stderr)
        sys.stdout.write(run_jit(module))
        return 0

    verify_module(module)
    try:
        make_temp_output(module, filename)
        return run_lli(filename)
    finally:
        if os.path.exists(filename):
            os.remove(filename)


def main(argv=None):
    if argv is None:
        argv = sys.argv
    try:
        # fetch source code, build the module and hand it to the executor
        module = compile_source(fetch_code(argv))
        return execute(module)
    except UsageError as e:
        print(e, file=sys.stderr)
        return 2
    except (KaleidoscopeError, OSError) as e:
        print(f'error: {e}', file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
