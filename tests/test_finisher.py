from pathlib import Path

import pytest

pytest.importorskip("llvmlite")

import llvmlite.ir as ir

from kaleidoscope.compyler import LLVMCodeGen
from kaleidoscope.errors import ModuleVerificationError, UnresolvedSymbol
from kaleidoscope.finisher import make_temp_output, run_jit, verify_module
from kaleidoscope.lexer import tokenize
from kaleidoscope.parser import Parser


def generate(src: str):
    return LLVMCodeGen(Parser(tokenize(src)).parse()).generate()


def run(src: str) -> list:
    return run_jit(generate(src)).splitlines()


def test_if_zero_takes_else_branch() -> None:
    assert run("if 0 then 1 else 2;") == ["2.000000"]


def test_if_nonzero_takes_then_branch() -> None:
    assert run("if 1 then 1 else 2;") == ["1.000000"]


def test_each_top_level_expression_is_printed() -> None:
    assert run("1; 2.5; 3 * 4;") == ["1.000000", "2.500000", "12.000000"]


def test_operators_chain_to_the_right() -> None:
    assert run("8 - 4 - 2; 16 / 4 / 2; 7 % 4;") == ["6.000000", "8.000000", "3.000000"]


def test_recursive_definition() -> None:
    src = """
    # fib(0) = 0, fib(1) = 1
    def fib(n) if n then (if n - 1 then fib(n - 1) + fib(n - 2) else 1) else 0;
    fib(10);
    """
    assert run(src) == ["55.000000"]


def test_nested_if_in_both_arms() -> None:
    src = """
    def sign(x, y) if x then (if y then 11 else 10) else (if y then 1 else 0);
    sign(1, 1); sign(1, 0); sign(0, 1); sign(0, 0);
    """
    assert run(src) == ["11.000000", "10.000000", "1.000000", "0.000000"]


def test_extern_resolved_from_c_library() -> None:
    assert run("extern sqrt(x); sqrt(16);") == ["4.000000"]


def test_unresolved_extern() -> None:
    with pytest.raises(UnresolvedSymbol) as excinfo:
        run_jit(generate("extern kaleidoscopeNoSuchFunction(x);"))
    assert excinfo.value.name == "kaleidoscopeNoSuchFunction"


def test_empty_program_prints_nothing() -> None:
    assert run_jit(generate("")) == ""


def test_verify_accepts_generated_module() -> None:
    verify_module(generate("extern sin(x); def f(x) if x then sin(x) else 0; f(1);"))


def test_verify_rejects_broken_module() -> None:
    module = ir.Module(name="broken")
    func = ir.Function(module, ir.FunctionType(ir.DoubleType(), []), name="f")
    func.append_basic_block(name="entry")
    with pytest.raises(ModuleVerificationError):
        verify_module(module)


def test_make_temp_output(tmp_path: Path) -> None:
    module = generate("1;")
    path = make_temp_output(module, str(tmp_path / "out.ll"))
    assert Path(path).read_text() == str(module)
