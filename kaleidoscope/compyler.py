import llvmlite.ir as ir

from .errors import (ArityMismatch, CodegenError, ConflictingPrototype, Redefinition,
                     ReservedName, UnknownFunction, UnknownVariable)
from .parser import BinOp, Call, IfElse, Num, Var

MODULE_NAME = 'main'
ENTRY_NAME = 'main'
PRINTF_NAME = 'printf'
FORMAT_NAME = '.fmt'
FORMAT_STRING = '%f\n'
RESERVED_NAMES = {ENTRY_NAME, PRINTF_NAME}

DOUBLE = ir.DoubleType()
I8_PTR = ir.IntType(8).as_pointer()
PRINTF_TYPE = ir.FunctionType(ir.IntType(32), [I8_PTR], var_arg=True)


class FunctionScope:
    """Builder and parameter bindings for the body of one function.

    A scope is created when a function body is generated and dropped right
    after, so parameter names are only visible inside their own function.
    """

    def __init__(self, function, params=()):
        self.function = function
        self.builder = ir.IRBuilder(function.append_basic_block(name='entry'))
        self.values = dict(zip(params, function.args))

    def lookup(self, name):
        if name not in self.values:
            raise UnknownVariable(name)
        return self.values[name]


class LLVMCodeGen:
    def __init__(self, program):
        self.program = program
        self.module = None

    def generate(self):
        # every run starts from an empty module
        self.module = ir.Module(name=MODULE_NAME)
        for proto in self.program.externs:
            self.emit_prototype(proto)
        for definition in self.program.definitions:
            self.emit_definition(definition)
        self.create_main()
        return self.module

    def emit_prototype(self, proto):
        if proto.name in RESERVED_NAMES:
            raise ReservedName(proto.name)
        func = self.module.globals.get(proto.name)
        if func is not None:
            if len(func.args) != len(proto.params):
                raise ConflictingPrototype(proto.name, len(func.args), len(proto.params))
            return func
        func_type = ir.FunctionType(DOUBLE, [DOUBLE] * len(proto.params))
        func = ir.Function(self.module, func_type, name=proto.name)
        for arg, name in zip(func.args, proto.params):
            arg.name = name
        return func

    def emit_definition(self, definition):
        proto = definition.prototype
        func = self.emit_prototype(proto)
        if not func.is_declaration:
            raise Redefinition(proto.name)
        scope = FunctionScope(func, proto.params)
        scope.builder.ret(self.generate_code(definition.body, scope))
        return func

    def emit_printf(self):
        func = self.module.globals.get(PRINTF_NAME)
        if func is None:
            func = ir.Function(self.module, PRINTF_TYPE, name=PRINTF_NAME)
        return func

    def emit_format_string(self):
        var = self.module.globals.get(FORMAT_NAME)
        if var is None:
            data = bytearray(FORMAT_STRING.encode('utf-8'))
            data.append(0)
            fmt_type = ir.ArrayType(ir.IntType(8), len(data))
            var = ir.GlobalVariable(self.module, fmt_type, name=FORMAT_NAME)
            var.linkage = 'private'
            var.global_constant = True
            var.initializer = ir.Constant(fmt_type, data)
        return var

    def generate_code(self, node, scope):
        builder = scope.builder
        if isinstance(node, Num):
            return ir.Constant(DOUBLE, node.value)
        elif isinstance(node, Var):
            return scope.lookup(node.name)
        elif isinstance(node, BinOp):
            left = self.generate_code(node.left, scope)
            right = self.generate_code(node.right, scope)
            if node.op == '+':
                return builder.fadd(left, right, name='addtmp')
            elif node.op == '-':
                return builder.fsub(left, right, name='subtmp')
            elif node.op == '*':
                return builder.fmul(left, right, name='multmp')
            elif node.op == '/':
                return builder.fdiv(left, right, name='divtmp')
            elif node.op == '%':
                return builder.frem(left, right, name='remtmp')
            raise CodegenError(f'Unknown operator: {node.op}')
        elif isinstance(node, Call):
            proto = self.program.prototypes.get(node.callee)
            if proto is None:
                raise UnknownFunction(node.callee)
            if len(proto.params) != len(node.args):
                raise ArityMismatch(node.callee, len(proto.params), len(node.args))
            func = self.emit_prototype(proto)
            args = [self.generate_code(arg, scope) for arg in node.args]
            return builder.call(func, args, name='calltmp')
        elif isinstance(node, IfElse):
            return self.generate_if(node, scope)
        raise CodegenError(f'Cannot generate code for {node!r}')

    def generate_if(self, node, scope):
        builder = scope.builder
        cond = self.generate_code(node.cond, scope)
        cond = builder.fcmp_ordered('!=', cond, ir.Constant(DOUBLE, 0.0), name='ifcond')

        then_block = scope.function.append_basic_block(name='then')
        else_block = scope.function.append_basic_block(name='else')
        merge_block = scope.function.append_basic_block(name='merge')
        builder.cbranch(cond, then_block, else_block)

        builder.position_at_end(then_block)
        then_value = self.generate_code(node.then, scope)
        builder.branch(merge_block)
        # a nested if moves the builder, the phi needs the block that jumps to merge
        then_block = builder.block

        builder.position_at_end(else_block)
        else_value = self.generate_code(node.otherwise, scope)
        builder.branch(merge_block)
        else_block = builder.block

        builder.position_at_end(merge_block)
        phi = builder.phi(DOUBLE, name='iftmp')
        phi.add_incoming(then_value, then_block)
        phi.add_incoming(else_value, else_block)
        return phi

    def create_main(self):
        func_type = ir.FunctionType(ir.VoidType(), [])
        func = ir.Function(self.module, func_type, name=ENTRY_NAME)
        scope = FunctionScope(func)
        printf = self.emit_printf()
        fmt = scope.builder.bitcast(self.emit_format_string(), I8_PTR, name='fmt')
        for expr in self.program.expressions:
            value = self.generate_code(expr, scope)
            scope.builder.call(printf, [fmt, value])
        scope.builder.ret_void()
        return func
