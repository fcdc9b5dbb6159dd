"""Lexical scanner for locating ``mod`` declarations in Rust source text.

The scanner never builds a syntax tree. It only splits the text into coarse
tokens (identifiers, punctuation, literals, lifetimes), skipping comments and
the contents of string and character literals, and then matches the small
item shape ``#[attr]* pub(...)? mod name (; | {)`` at statement starts.
"""

from dataclasses import replace
from typing import Iterator, List, NamedTuple, Optional, Tuple

from modtree.model import ModuleDeclaration
from .errors import ScanError


IDENT = "ident"
PUNCT = "punct"
LITERAL = "literal"
LIFETIME = "lifetime"

# Closing delimiter -> opening delimiter
_CLOSERS = {")": "(", "]": "[", "}": "{"}
_OPENERS = frozenset(_CLOSERS.values())


class Token(NamedTuple):
    """A significant piece of source text with its offsets."""

    kind: str
    text: str
    start: int
    end: int


def _is_ident_start(char: str) -> bool:
    return char == "_" or char.isalpha()


def _is_ident_char(char: str) -> bool:
    return char == "_" or char.isalnum()


def iter_tokens(source: str, start: int = 0, end: Optional[int] = None) -> Iterator[Token]:
    """
    Lazily tokenize ``source[start:end]``.

    Comments and whitespace are dropped. String, raw string, byte string and
    character literals come out as single LITERAL tokens, so nothing inside
    them is ever seen as code.

    Args:
        source: Full source text. Offsets are always relative to it.
        start: Offset to start scanning at.
        end: Offset to stop at (default: end of text).

    Yields:
        Token records in source order.

    Raises:
        ScanError: If a comment or literal is still open at ``end``.
    """
    if end is None:
        end = len(source)
    i = start
    if i == 0:
        i = min(shebang_end(source), end)

    while i < end:
        char = source[i]
        following = source[i + 1] if i + 1 < end else ""

        if char.isspace():
            i += 1
            continue

        if char == "/" and following == "/":
            newline = source.find("\n", i, end)
            i = end if newline == -1 else newline + 1
            continue

        if char == "/" and following == "*":
            i = _skip_block_comment(source, i, end)
            continue

        if char == '"':
            j = _skip_quoted(source, i, end, '"', "unterminated string literal")
            yield Token(LITERAL, source[i:j], i, j)
            i = j
            continue

        if char == "'":
            j = _char_literal_end(source, i, end)
            if j is not None:
                yield Token(LITERAL, source[i:j], i, j)
            elif _is_ident_start(following):
                j = i + 1
                while j < end and _is_ident_char(source[j]):
                    j += 1
                yield Token(LIFETIME, source[i:j], i, j)
            else:
                raise ScanError("unterminated character literal", i, source)
            i = j
            continue

        if _is_ident_start(char):
            j = _prefixed_literal_end(source, i, end)
            if j is not None:
                yield Token(LITERAL, source[i:j], i, j)
                i = j
                continue
            j = i + 1
            # Raw identifier, e.g. r#match
            if char == "r" and following == "#" and i + 2 < end and _is_ident_start(source[i + 2]):
                j = i + 3
            while j < end and _is_ident_char(source[j]):
                j += 1
            yield Token(IDENT, source[i:j], i, j)
            i = j
            continue

        if char.isdigit():
            j = i + 1
            while j < end and (
                _is_ident_char(source[j])
                or (source[j] == "." and j + 1 < end and source[j + 1].isdigit())
            ):
                j += 1
            yield Token(LITERAL, source[i:j], i, j)
            i = j
            continue

        yield Token(PUNCT, char, i, i + 1)
        i += 1


def shebang_end(source: str) -> int:
    """
    Return the offset just past a leading ``#!`` interpreter line, or 0.

    ``#![attr]`` on the first line is an inner attribute, not a shebang.
    """
    if not source.startswith("#!") or source[2:].lstrip().startswith("["):
        return 0
    newline = source.find("\n")
    return len(source) if newline == -1 else newline + 1


def _skip_block_comment(source: str, i: int, end: int) -> int:
    """Return the offset just past a (possibly nested) block comment."""
    depth = 0
    j = i
    while j + 1 < end:
        pair = source[j:j + 2]
        if pair == "/*":
            depth += 1
            j += 2
        elif pair == "*/":
            depth -= 1
            j += 2
            if depth == 0:
                return j
        else:
            j += 1
    raise ScanError("unterminated block comment", i, source)


def _skip_quoted(source: str, i: int, end: int, quote: str, reason: str) -> int:
    """Return the offset just past a quoted literal opened at ``i``."""
    j = i + 1
    while j < end:
        char = source[j]
        if char == "\\":
            j += 2
            continue
        if char == quote:
            return j + 1
        j += 1
    raise ScanError(reason, i, source)


def _char_literal_end(source: str, i: int, end: int) -> Optional[int]:
    """
    Return the end of a character literal opened at ``i``.

    Returns None when the quote opens a lifetime or loop label instead.
    """
    following = source[i + 1] if i + 1 < end else ""
    if following == "\\":
        return _skip_quoted(source, i, end, "'", "unterminated character literal")
    if following and i + 2 < end and source[i + 2] == "'":
        return i + 3
    return None


def _prefixed_literal_end(source: str, i: int, end: int) -> Optional[int]:
    """
    Return the end of a prefixed literal (``r"…"``, ``br#"…"#``, ``b'x'``, ``c"…"``).

    Returns None if the identifier at ``i`` does not open a literal.
    """
    j = i
    if source[j] in "bc":
        j += 1
    if j < end and source[j] == "r":
        k = j + 1
        while k < end and source[k] == "#":
            k += 1
        if k >= end or source[k] != '"':
            return None
        terminator = '"' + "#" * (k - j - 1)
        close = source.find(terminator, k + 1, end)
        if close == -1:
            raise ScanError("unterminated raw string literal", i, source)
        return close + len(terminator)
    if j == i or j >= end:
        return None
    if source[j] == '"':
        return _skip_quoted(source, j, end, '"', "unterminated string literal")
    if source[j] == "'" and source[i] == "b":
        literal_end = _char_literal_end(source, j, end)
        if literal_end is None:
            raise ScanError("unterminated byte literal", i, source)
        return literal_end
    return None


def ends_in_line_comment(source: str) -> bool:
    """Check whether the text ends inside a ``//`` comment (no final newline)."""
    tail = 0
    for token in iter_tokens(source):
        tail = token.end
    i, end = tail, len(source)
    while i < end:
        if source.startswith("//", i):
            newline = source.find("\n", i)
            if newline == -1:
                return True
            i = newline + 1
        elif source.startswith("/*", i):
            i = _skip_block_comment(source, i, end)
        else:
            i += 1
    return False


def iter_declarations(
    source: str,
    start: int = 0,
    end: Optional[int] = None,
) -> Iterator[ModuleDeclaration]:
    """
    Find the ``mod`` items at the top level of ``source[start:end]``.

    Both unresolved (``mod name;``) and inline (``mod name { ... }``)
    declarations are yielded; inline bodies are skipped, not searched.

    Raises:
        ScanError: On unterminated comments or literals, unbalanced delimiters,
            or a ``mod`` item that does not end in ``;`` or ``{``.
    """
    tokens = iter_tokens(source, start, end)
    open_groups: List[Token] = []
    at_start = True

    for token in tokens:
        if not open_groups and at_start and _may_start_item(token):
            declaration, leftover = _match_item(source, tokens, token)
            if declaration is not None:
                yield declaration
                continue
            if leftover is None:
                continue
            token = leftover

        if token.kind != PUNCT:
            at_start = False
        elif token.text in _OPENERS:
            open_groups.append(token)
            at_start = False
        elif token.text in _CLOSERS:
            if not open_groups or open_groups[-1].text != _CLOSERS[token.text]:
                raise ScanError(f"unmatched '{token.text}'", token.start, source)
            open_groups.pop()
            at_start = not open_groups and token.text == "}"
        elif token.text == ";":
            at_start = not open_groups
        else:
            at_start = False

    if open_groups:
        raise ScanError(f"unclosed '{open_groups[0].text}'", open_groups[0].start, source)


def _may_start_item(token: Token) -> bool:
    if token.kind == IDENT:
        return token.text in ("pub", "mod")
    return token.kind == PUNCT and token.text == "#"


def _match_item(
    source: str,
    tokens: Iterator[Token],
    first: Token,
) -> Tuple[Optional[ModuleDeclaration], Optional[Token]]:
    """
    Try to read a module item starting at ``first``.

    Returns the declaration on success. Otherwise returns the first token
    that did not fit, which the caller still has to process, or None when
    everything consumed was a complete inner attribute.
    """
    token: Optional[Token] = first

    while token is not None and token.kind == PUNCT and token.text == "#":
        token = next(tokens, None)
        inner = token is not None and token.text == "!"
        if inner:
            token = next(tokens, None)
        if token is None or token.text != "[":
            return None, token
        _skip_group(source, tokens, token, "[", "]")
        if inner:
            return None, None
        token = next(tokens, None)

    if token is not None and token.kind == IDENT and token.text == "pub":
        token = next(tokens, None)
        if token is not None and token.text == "(":
            _skip_group(source, tokens, token, "(", ")")
            token = next(tokens, None)

    if token is None or token.kind != IDENT or token.text != "mod":
        return None, token

    name = next(tokens, None)
    if name is None or name.kind != IDENT:
        raise ScanError("malformed module declaration: expected a name after 'mod'", token.start, source)

    prefix = source[first.start:token.start]
    terminator = next(tokens, None)
    if terminator is not None and terminator.text == ";":
        return ModuleDeclaration(name.text, prefix, (first.start, terminator.end)), None
    if terminator is not None and terminator.text == "{":
        close = _skip_group(source, tokens, terminator, "{", "}")
        declaration = ModuleDeclaration(
            name.text,
            prefix,
            (first.start, close.end),
            body_span=(terminator.end, close.start),
        )
        return declaration, None
    raise ScanError(
        f"malformed module declaration: expected ';' or '{{' after 'mod {name.text}'",
        name.end,
        source,
    )


def _skip_group(
    source: str,
    tokens: Iterator[Token],
    opening: Token,
    open_char: str,
    close_char: str,
) -> Token:
    """Consume tokens up to the delimiter that closes ``opening`` and return it."""
    depth = 1
    for token in tokens:
        if token.kind != PUNCT:
            continue
        if token.text == open_char:
            depth += 1
        elif token.text == close_char:
            depth -= 1
            if depth == 0:
                return token
    raise ScanError(f"unclosed '{open_char}'", opening.start, source)


class Declarations:
    """
    Restartable view of the declarations in a piece of source text.

    Every iteration runs a fresh scan, so no state leaks between passes.
    """

    def __init__(self, source: str, start: int = 0, end: Optional[int] = None):
        self.source = source
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[ModuleDeclaration]:
        return iter_declarations(self.source, self.start, self.end)

    def unresolved(self) -> Iterator[ModuleDeclaration]:
        """Iterate over unresolved declarations, including those in inline bodies."""
        return iter_unresolved(self.source, self.start, self.end)


def scan(source: str, start: int = 0, end: Optional[int] = None) -> Declarations:
    """Return a restartable sequence of the top-level declarations in ``source``."""
    return Declarations(source, start, end)


def iter_unresolved(
    source: str,
    start: int = 0,
    end: Optional[int] = None,
    namespace: Tuple[str, ...] = (),
) -> Iterator[ModuleDeclaration]:
    """
    Yield every ``mod name;`` declaration, descending into inline bodies.

    Declarations found inside ``mod a { ... }`` carry ``("a",)`` in their
    ``namespace`` so they can be resolved below the inline module's path.
    """
    for declaration in iter_declarations(source, start, end):
        if declaration.is_inline:
            body_start, body_end = declaration.body_span
            yield from iter_unresolved(
                source,
                body_start,
                body_end,
                namespace + (declaration.file_name,),
            )
        else:
            yield replace(declaration, namespace=namespace)
