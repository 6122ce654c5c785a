"""Lexical analysis for the dlang language. Note that this module does not check any grammar (see grammar/parser.py),
but rather splits arbitrary source text into a flat list of Tokens.

Rules are tried in the following order at every position of a line, and the first rule that matches wins (so order
matters: it is not longest-match):

```
<whitespace>  ::= [ \t]+                     ; matched, never emitted
<number>      ::= [0-9]+                     ; integers only
<string>      ::= '"' [^"]* '"'              ; no escape sequences, cannot span lines
<operator>    ::= [+-*/=<>!]+                ; maximal run: "==" and "!=" are single tokens
<punctuation> ::= "(" | ")" | "{" | "}" | ";" | ","
<identifier>  ::= [a-zA-Z_][a-zA-Z0-9_]*     ; becomes a KEYWORD if it is one of KEYWORDS

<comment>     ::= "#" <char>*                ; runs to the end of the line
```

Comments are stripped before any rule is tried: everything from the first "#" on a line is dropped.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from dlang.lang.error import LexError


KEYWORDS = ("let", "print", "if", "else", "while", "break", "continue", "function", "dede")  # dede is return
COMMENT = "#"


class TokenKind(Enum):
    NUMBER = "NUMBER"
    STRING = "STRING"
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"
    IDENTIFIER = "IDENTIFIER"
    KEYWORD = "KEYWORD"


@dataclass(frozen=True)
class Token:
    """Smallest classified unit of dlang source. line_num and col are only used for error messages, so two tokens with
    the same kind and text are equal wherever they came from.
    """
    kind: TokenKind
    text: str
    line_num: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)

    def matches(self, kind, text=None):
        """Whether or not this token is of kind (and, if given, has text)."""
        return self.kind is kind and (text is None or self.text == text)

    def __repr__(self):
        return f"{self.kind.value} {self.text}"


STRING = re.compile(r'"[^"\n]*"')

RULES = [
    (None, re.compile(r"\s+")),
    (TokenKind.NUMBER, re.compile(r"[0-9]+")),
    (TokenKind.STRING, STRING),
    (TokenKind.OPERATOR, re.compile(r"[+\-*/=<>!]+")),
    (TokenKind.PUNCTUATION, re.compile(r"[(){};,]")),
    (TokenKind.IDENTIFIER, re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")),
]


def strip_comment(line):
    """Returns line without its comment, if any."""
    if COMMENT in line:
        line = line[:line.index(COMMENT)]
    return line


def tokenize_line(line, line_num=1):
    """Tokenizes a single line that has already had its comment stripped."""
    tokens = []
    pos = 0
    while pos < len(line):
        for kind, regex in RULES:
            match = regex.match(line, pos)
            if match:
                break
        else:
            raise LexError("unexpected input '{}'", line[pos:pos + 10], line_num=line_num, col=pos, width=1)

        text = match.group()
        if kind is TokenKind.IDENTIFIER and text in KEYWORDS:
            kind = TokenKind.KEYWORD
        if kind is not None:
            tokens.append(Token(kind, text, line_num, pos))
        pos = match.end()

    return tokens


def tokenize(source, first_line=1):
    """Converts source into a list of Tokens. first_line is the line number of the first line of source, used when
    source is a piece of a bigger program (e.g. in command-line mode).
    """
    tokens = []
    for line_num, line in enumerate(source.splitlines(), first_line):
        line = strip_comment(line)
        if line.strip():
            tokens += tokenize_line(line, line_num)
    return tokens
