"""Abstract syntax tree nodes for the dlang language. Nodes are produced by grammar/parser.py and walked by
lang/evaluator.py; they are never modified after parsing.

Each compound node owns its children outright: there is no sharing between nodes and there are no cycles.
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional


class Node:
    """Superclass of all dlang syntax tree nodes."""
    line_num = None  # set by the parser on statement nodes; not part of node equality

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<field>=<value>, <field>=[
            <Node>(...),
            ...
        ])
        """
        pad = "    " * indents
        parts = []
        for attr in fields(self):
            value = getattr(self, attr.name)
            if isinstance(value, Node):
                parts.append(f"{attr.name}=\n{value.display(indents + 1)}")
            elif isinstance(value, list) and any(isinstance(node, Node) for node in value):
                nodes = ",".join("\n" + node.display(indents + 1) for node in value)
                parts.append(f"{attr.name}=[{nodes}\n{pad}]")
            else:
                parts.append(f"{attr.name}={value!r}")
        return f"{pad}{type(self).__name__}({', '.join(parts)})"

    def __str__(self):
        return self.display()


class Statement(Node):
    """Marks nodes that can only appear at statement position."""


class Expression(Node):
    """Marks nodes that produce a value. Expressions may also stand alone as statements."""


@dataclass(eq=True)
class NumberLiteral(Expression):
    value: int


@dataclass(eq=True)
class StringLiteral(Expression):
    value: str


@dataclass(eq=True)
class Identifier(Expression):
    name: str


@dataclass(eq=True)
class BinaryExpression(Expression):
    operator: str
    left: Expression
    right: Expression


@dataclass(eq=True)
class CallExpression(Expression):
    name: str
    args: List[Expression] = field(default_factory=list)


@dataclass(eq=True)
class BlockStatement(Statement):
    body: List[Node] = field(default_factory=list)


@dataclass(eq=True)
class VariableDeclaration(Statement):
    name: str
    value: Expression


@dataclass(eq=True)
class AssignmentExpression(Statement):
    """name = value. Only ever a statement: '=' inside an expression is equality."""
    name: str
    value: Expression


@dataclass(eq=True)
class PrintStatement(Statement):
    value: Expression


@dataclass(eq=True)
class IfStatement(Statement):
    condition: Expression
    then_branch: BlockStatement
    else_branch: Optional[BlockStatement] = None


@dataclass(eq=True)
class WhileStatement(Statement):
    condition: Expression
    body: BlockStatement


@dataclass(eq=True)
class BreakStatement(Statement):
    pass


@dataclass(eq=True)
class ContinueStatement(Statement):
    pass


@dataclass(eq=True)
class FunctionDeclaration(Statement):
    name: str
    params: List[str]
    body: BlockStatement


@dataclass(eq=True)
class ReturnStatement(Statement):
    """dede value"""
    value: Expression


def node_types(cls=Node):
    """Returns every concrete (dataclass) node type below cls."""
    found = []
    for subclass in cls.__subclasses__():
        if "__dataclass_fields__" in vars(subclass):
            found.append(subclass)
        found += node_types(subclass)
    return found
