import ctypes
import ctypes.util
import os
import subprocess
import sys
import tempfile

import llvmlite.binding as llvm

from .compyler import ENTRY_NAME
from .errors import ModuleVerificationError, UnresolvedSymbol

IR_FILENAME = 'ir.ll'
LLI = os.environ.get('KALEIDOSCOPE_LLI', 'lli')

llvm.initialize_native_target()
llvm.initialize_native_asmprinter()


def verify_module(codegen_module):
    try:
        llvm_module = llvm.parse_assembly(str(codegen_module))
        llvm_module.verify()
    except RuntimeError as e:
        raise ModuleVerificationError(f'Invalid LLVM IR: {e}') from e
    return llvm_module


def make_temp_output(codegen_module, filename=IR_FILENAME):
    print(f'Saving LLVM IR to {filename}', file=sys.stderr)
    with open(filename, 'w') as f:
        f.write(str(codegen_module))
    return filename


def run_lli(filename=IR_FILENAME):
    print(f'Running with {LLI}', file=sys.stderr)
    return subprocess.run([LLI, filename]).returncode


def _c_libraries():
    libs = [ctypes.CDLL(None)]
    libm_path = ctypes.util.find_library('m')
    if libm_path:
        libs.append(ctypes.CDLL(libm_path))
    return libs


def register_symbols(llvm_module):
    """Point every function the module only declares at its C implementation."""
    libs = _c_libraries()
    for func in llvm_module.functions:
        if not func.is_declaration:
            continue
        for lib in libs:
            if hasattr(lib, func.name):
                llvm.add_symbol(func.name, ctypes.cast(getattr(lib, func.name), ctypes.c_void_p).value)
                break
        else:
            raise UnresolvedSymbol(func.name)


def _capture_stdout(func):
    # printf writes to file descriptor 1 directly, so swap the descriptor
    with tempfile.TemporaryFile() as tf:
        sys.stdout.flush()
        old = os.dup(1)
        os.dup2(tf.fileno(), 1)
        try:
            func()
        finally:
            ctypes.CDLL(None).fflush(None)
            os.dup2(old, 1)
            os.close(old)
        tf.seek(0)
        return tf.read().decode(errors='replace')


def run_jit(codegen_module):
    """Run the entry routine in-process and return what it printed."""
    llvm_module = verify_module(codegen_module)
    llvm_module.triple = llvm.get_process_triple()
    register_symbols(llvm_module)

    target_machine = llvm.Target.from_default_triple().create_target_machine()
    engine = llvm.create_mcjit_compiler(llvm_module, target_machine)
    engine.finalize_object()
    engine.run_static_constructors()

    entry = ctypes.CFUNCTYPE(None)(engine.get_function_address(ENTRY_NAME))
    return _capture_stdout(entry)
