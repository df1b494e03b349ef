"""Kaleidoscope: lexer, parser and LLVM IR generator for a tiny expression language."""
