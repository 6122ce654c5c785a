"""Recursive-descent parser for the dlang language: one token of lookahead, no backtracking, no error recovery (the
first ParseError aborts the whole parse).

Statements:

```
<statement>   ::= "let" <ident> "=" <expr>
                | "print" <expr>
                | "if" <expr> <block> ["else" (<block> | <if>)]   ; no parentheses needed around the condition
                | "while" <expr> <block>
                | "break" | "continue"
                | "function" <ident> "(" [<ident> {"," <ident>}] ")" <block>
                | "dede" <expr>                                   ; return
                | <ident> "=" <expr>                              ; assignment, statement position only
                | <expr>                                          ; e.g. a call used for its side effect
                | ";"                                             ; empty statement
<block>       ::= "{" <statement>* "}"
```

Expressions are folded with precedence climbing, every level associating to the left:

```
<expr>        ::= <primary> {<operator> <primary>}
<primary>     ::= <number> | <string> | <ident> | <ident> "(" [<expr> {"," <expr>}] ")" | "(" <expr> ")"

level 3: * /
level 2: + -
level 1: == != = < > and any other operator (these fail at evaluation time)
```
"""

import logging

from dlang.grammar.nodes import (
    AssignmentExpression, BinaryExpression, BlockStatement, BreakStatement, CallExpression, ContinueStatement,
    FunctionDeclaration, Identifier, IfStatement, NumberLiteral, PrintStatement, ReturnStatement, StringLiteral,
    VariableDeclaration, WhileStatement
)
from dlang.lang.error import ParseError
from dlang.lang.lexical import TokenKind

logger = logging.getLogger(__name__)

LOOSEST = 1
PRECEDENCE = {"*": 3, "/": 3, "+": 2, "-": 2}  # anything else binds loosest


class Parser:
    """Builds a list of top-level statement nodes out of a list of Tokens."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.pos = 0

    # token helpers

    def peek(self, offset=0):
        """Returns the token offset tokens ahead without consuming anything, or None past the end of input."""
        idx = self.pos + offset
        return self.tokens[idx] if idx < len(self.tokens) else None

    def advance(self):
        """Consumes and returns the current token."""
        token = self.peek()
        self.pos += 1
        return token

    def check(self, kind, text=None, offset=0):
        token = self.peek(offset)
        return token is not None and token.matches(kind, text)

    def error(self, expected, token=None):
        """Returns a ParseError saying that expected was wanted where token (default: the current one) was found."""
        token = token if token is not None else self.peek()
        if token is None:
            line_num = self.tokens[-1].line_num if self.tokens else None
            return ParseError("expected {} but reached end of input", expected, line_num=line_num, diagnosis=False)
        return ParseError("expected {} but found '{}'", (expected, token.text), line_num=token.line_num,
                          col=token.col, width=len(token.text))

    def expect(self, kind, text=None, expected=None):
        """Consumes the current token if it is of kind/text, otherwise raises a ParseError."""
        if not self.check(kind, text):
            raise self.error(expected or (f"'{text}'" if text else kind.value.lower()))
        return self.advance()

    # statements

    def parse(self):
        statements = []
        while self.peek() is not None:
            if self.check(TokenKind.PUNCTUATION, ";"):
                self.advance()
                continue
            statements.append(self.parse_statement())
        logger.debug("parsed %d top-level statement(s)", len(statements))
        return statements

    def parse_statement(self):
        token = self.peek()
        if token.kind is TokenKind.KEYWORD:
            handler = {
                "let": self.parse_variable_declaration,
                "print": self.parse_print_statement,
                "if": self.parse_if_statement,
                "while": self.parse_while_statement,
                "break": self.parse_break_statement,
                "continue": self.parse_continue_statement,
                "function": self.parse_function_declaration,
                "dede": self.parse_return_statement,
            }.get(token.text)
            if handler is None:
                raise self.error("a statement")  # e.g. a stray else
            node = handler()

        elif token.kind is TokenKind.IDENTIFIER and self.check(TokenKind.OPERATOR, "=", offset=1):
            node = self.parse_assignment()

        else:
            node = self.parse_expression()

        node.line_num = token.line_num
        return node

    def parse_variable_declaration(self):
        self.advance()  # let
        name = self.expect(TokenKind.IDENTIFIER, expected="variable name after 'let'").text
        self.expect(TokenKind.OPERATOR, "=", expected=f"'=' after variable name '{name}'")
        return VariableDeclaration(name, self.parse_expression())

    def parse_assignment(self):
        name = self.advance().text
        self.advance()  # =
        return AssignmentExpression(name, self.parse_expression())

    def parse_print_statement(self):
        self.advance()  # print
        return PrintStatement(self.parse_expression())

    def parse_if_statement(self):
        self.advance()  # if
        condition = self.parse_expression()
        then_branch = self.parse_block()

        else_branch = None
        if self.check(TokenKind.KEYWORD, "else"):
            self.advance()
            if self.check(TokenKind.KEYWORD, "if"):
                token = self.peek()
                nested = self.parse_if_statement()
                nested.line_num = token.line_num
                else_branch = BlockStatement([nested])
            else:
                else_branch = self.parse_block()

        return IfStatement(condition, then_branch, else_branch)

    def parse_while_statement(self):
        self.advance()  # while
        condition = self.parse_expression()
        return WhileStatement(condition, self.parse_block())

    def parse_break_statement(self):
        self.advance()
        return BreakStatement()

    def parse_continue_statement(self):
        self.advance()
        return ContinueStatement()

    def parse_function_declaration(self):
        self.advance()  # function
        name = self.expect(TokenKind.IDENTIFIER, expected="function name after 'function'").text
        self.expect(TokenKind.PUNCTUATION, "(", expected=f"'(' after function name '{name}'")

        params = []
        if not self.check(TokenKind.PUNCTUATION, ")"):
            while True:
                param = self.expect(TokenKind.IDENTIFIER, expected="parameter name")
                if param.text in params:
                    raise ParseError("duplicate parameter '{}' in function '{}'", (param.text, name),
                                     line_num=param.line_num, col=param.col)
                params.append(param.text)
                if not self.check(TokenKind.PUNCTUATION, ","):
                    break
                self.advance()
        self.expect(TokenKind.PUNCTUATION, ")", expected="',' or ')' in parameter list")

        return FunctionDeclaration(name, params, self.parse_block())

    def parse_return_statement(self):
        self.advance()  # dede
        return ReturnStatement(self.parse_expression())

    def parse_block(self):
        opening = self.expect(TokenKind.PUNCTUATION, "{", expected="'{' to open a block")

        body = []
        while not self.check(TokenKind.PUNCTUATION, "}"):
            if self.peek() is None:
                raise ParseError("unterminated block: '{}' opened here is never closed", "{",
                                 line_num=opening.line_num, col=opening.col)
            if self.check(TokenKind.PUNCTUATION, ";"):
                self.advance()
                continue
            body.append(self.parse_statement())
        self.advance()  # }

        return BlockStatement(body)

    # expressions

    def parse_expression(self, min_precedence=LOOSEST):
        left = self.parse_primary()

        while self.check(TokenKind.OPERATOR):
            operator = self.peek().text
            precedence = PRECEDENCE.get(operator, LOOSEST)
            if precedence < min_precedence:
                break
            self.advance()
            left = BinaryExpression(operator, left, self.parse_expression(precedence + 1))

        return left

    def parse_primary(self):
        token = self.peek()
        if token is None:
            raise self.error("an expression")

        if token.kind is TokenKind.NUMBER:
            self.advance()
            try:
                return NumberLiteral(int(token.text))
            except ValueError:  # past sys.get_int_max_str_digits()
                raise ParseError("number too large ({} digits)", str(len(token.text)), line_num=token.line_num,
                                 col=token.col, width=len(token.text)) from None

        elif token.kind is TokenKind.STRING:
            self.advance()
            return StringLiteral(token.text[1:-1])

        elif token.kind is TokenKind.IDENTIFIER:
            self.advance()
            if self.check(TokenKind.PUNCTUATION, "("):
                return CallExpression(token.text, self.parse_arguments())
            return Identifier(token.text)

        elif token.matches(TokenKind.PUNCTUATION, "("):
            self.advance()
            expr = self.parse_expression()
            self.expect(TokenKind.PUNCTUATION, ")", expected="')' to close '('")
            return expr

        raise self.error("an expression")

    def parse_arguments(self):
        self.advance()  # (
        args = []
        if not self.check(TokenKind.PUNCTUATION, ")"):
            while True:
                args.append(self.parse_expression())
                if not self.check(TokenKind.PUNCTUATION, ","):
                    break
                self.advance()
        self.expect(TokenKind.PUNCTUATION, ")", expected="',' or ')' in argument list")
        return args


def parse(tokens):
    """Converts tokens into a list of top-level statement nodes. Raises ParseError on invalid input."""
    return Parser(tokens).parse()
