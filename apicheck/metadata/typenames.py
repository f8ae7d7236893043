"""Parser for the textual type expressions used in module descriptions.

Accepted forms::

    System.Int32
    int                                     (C# keyword alias)
    Scenarios.Outer+Inner
    System.Collections.Generic.IDictionary<TKey, System.String>
    System.String[]   System.Int32[,]
    TKey                                    (generic parameter in scope)
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional, Tuple

from ..errors import ModuleFormatError
from .descriptors import TypeRef

_TOKEN = re.compile(r"\s*(?:(?P<name>[A-Za-z_][\w.`]*)|(?P<symbol>[<>\[\],+]))")

KEYWORD_ALIASES = {
    "void": "System.Void",
    "object": "System.Object",
    "string": "System.String",
    "bool": "System.Boolean",
    "char": "System.Char",
    "byte": "System.Byte",
    "sbyte": "System.SByte",
    "short": "System.Int16",
    "ushort": "System.UInt16",
    "int": "System.Int32",
    "uint": "System.UInt32",
    "long": "System.Int64",
    "ulong": "System.UInt64",
    "float": "System.Single",
    "double": "System.Double",
    "decimal": "System.Decimal",
    "nint": "System.IntPtr",
    "nuint": "System.UIntPtr",
}

Resolver = Callable[[TypeRef], TypeRef]


class TypeNameParser:
    """Recursive-descent parser turning a type expression into a ``TypeRef``."""

    def __init__(self, text: str, *, generic_scope: Iterable[str] = (), resolve: Optional[Resolver] = None) -> None:
        self._text = text
        self._tokens = _tokenize(text)
        self._position = 0
        self._scope = set(generic_scope)
        self._resolve = resolve

    def parse(self) -> TypeRef:
        ref = self._parse_type()
        if self._position != len(self._tokens):
            raise ModuleFormatError(f"Unexpected '{self._tokens[self._position]}' in type '{self._text}'")
        return ref

    def _parse_type(self) -> TypeRef:
        ref = self._parse_named()
        while self._peek() == "[":
            self._advance()
            rank = 1
            while self._peek() == ",":
                self._advance()
                rank += 1
            self._expect("]")
            ref = TypeRef.array_of(ref, rank)
        return ref

    def _parse_named(self) -> TypeRef:
        token = self._advance()
        if not _is_name(token):
            raise ModuleFormatError(f"Expected a type name in '{self._text}'")

        if self._peek() not in {"+", "<"} and token in self._scope:
            return TypeRef.generic_parameter(token)

        qualified = KEYWORD_ALIASES.get(token, token)
        namespace, _, name = qualified.rpartition(".")
        declaring: Optional[TypeRef] = None
        while self._peek() == "+":
            self._advance()
            nested = self._advance()
            if not _is_name(nested) or "." in nested:
                raise ModuleFormatError(f"Invalid nested type name in '{self._text}'")
            declaring = TypeRef.named(namespace, name, declaring=declaring)
            name = nested

        arguments: Tuple[TypeRef, ...] = ()
        if self._peek() == "<":
            self._advance()
            parsed: List[TypeRef] = [self._parse_type()]
            while self._peek() == ",":
                self._advance()
                parsed.append(self._parse_type())
            self._expect(">")
            arguments = tuple(parsed)

        ref = TypeRef.named(namespace, name, declaring=declaring, arguments=arguments)
        if self._resolve is not None:
            ref = self._resolve(ref)
        return ref

    def _peek(self) -> Optional[str]:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return None

    def _advance(self) -> str:
        token = self._peek()
        if token is None:
            raise ModuleFormatError(f"Unexpected end of type '{self._text}'")
        self._position += 1
        return token

    def _expect(self, symbol: str) -> None:
        token = self._advance()
        if token != symbol:
            raise ModuleFormatError(f"Expected '{symbol}' but found '{token}' in type '{self._text}'")


def parse_type_name(
    text: str, *, generic_scope: Iterable[str] = (), resolve: Optional[Resolver] = None
) -> TypeRef:
    """Parse ``text`` into a ``TypeRef``."""
    return TypeNameParser(text, generic_scope=generic_scope, resolve=resolve).parse()


def _tokenize(text: str) -> List[str]:
    tokens: List[str] = []
    position = 0
    stripped_length = len(text.rstrip())
    while position < stripped_length:
        match = _TOKEN.match(text, position)
        if match is None:
            raise ModuleFormatError(f"Invalid character in type '{text}'")
        tokens.append(match.group("name") or match.group("symbol"))
        position = match.end()
    if not tokens:
        raise ModuleFormatError("Type expression must not be empty")
    return tokens


def _is_name(token: str) -> bool:
    return bool(token) and (token[0].isalpha() or token[0] == "_")


__all__ = ["KEYWORD_ALIASES", "TypeNameParser", "parse_type_name"]
