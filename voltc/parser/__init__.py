# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Front-end for Volt call expressions: tokenizer, AST and call parser.
"""

from . import ast
from .lexer import Lexer, Token, TokenKind, tokenize
from .parser import MAX_NESTING, MAX_OPERATORS, decode_string, parse_call

__all__ = ["Lexer", "MAX_NESTING", "MAX_OPERATORS", "Token", "TokenKind", "ast", "decode_string", "parse_call", "tokenize"]
