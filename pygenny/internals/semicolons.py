# internals/semicolons.py
"""
Post-lexer implementing Go's automatic semicolon insertion.

Problem:
--------
Go terminates statements and declarations with semicolons, but source code
almost never spells them out. The lexer inserts one at a line break when the
last token on the line could end a statement:

1. an identifier or a basic literal (number, string, rune)
2. one of the keywords break, continue, fallthrough, return
3. one of the operators ++ and --
4. one of the closing brackets ) ] }

The grammar only sees NAME tokens for those keywords, so rule 2 falls out of
rule 1.

Solution:
---------
Every NEWLINE token becomes a `_SEMI` when the previous significant token
triggers insertion and is dropped otherwise. A block comment that spans
lines acts like a newline. A final `_SEMI` is emitted at end of input when
the file does not end with a newline.
"""
from __future__ import annotations

from lark import Token

_TRIGGER_TYPES = frozenset({
    "NAME", "NUMBER", "STRING", "RAW_STRING", "RUNE",
    "RPAR", "RSQB", "RBRACE",
})
_TRIGGER_OPS = frozenset({"++", "--"})


def _ends_statement(token: Token | None) -> bool:
    if token is None:
        return False
    if token.type in _TRIGGER_TYPES:
        return True
    return token.type == "OP" and token.value in _TRIGGER_OPS


class GoSemicolonInserter:
    """Postlexer that turns significant line breaks into `_SEMI` tokens."""

    NEWLINE_type = "NEWLINE"
    BLOCK_COMMENT_type = "BLOCK_COMMENT"
    SEMI_type = "_SEMI"

    always_accept = (NEWLINE_type, BLOCK_COMMENT_type)

    def process(self, stream):
        last: Token | None = None
        for token in stream:
            if token.type == self.BLOCK_COMMENT_type:
                if "\n" not in token.value:
                    continue
                # A multi-line comment behaves like a newline
            elif token.type != self.NEWLINE_type:
                last = token
                yield token
                continue

            if _ends_statement(last):
                semi = Token.new_borrow_pos(self.SEMI_type, ";", token)
                last = semi
                yield semi

        if _ends_statement(last):
            yield Token.new_borrow_pos(self.SEMI_type, ";", last)
