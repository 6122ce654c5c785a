"""Tree-walking evaluator for the dlang language.

Executing a statement never raises to transfer control: it returns a Signal, and every caller that runs statements
(blocks, loops, calls, the top level) checks it:
- NORMAL: carry on with the next statement
- BREAK/CONTINUE: unwind to the nearest enclosing while loop
- RETURN: unwind to the nearest enclosing call, which takes its value as the call's result

A BREAK/CONTINUE/RETURN that is not absorbed by the construct it belongs to is an EvaluationError.
"""

import logging
import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dlang.grammar.nodes import (
    AssignmentExpression, BinaryExpression, BlockStatement, BreakStatement, CallExpression, ContinueStatement,
    Expression, FunctionDeclaration, Identifier, IfStatement, NumberLiteral, PrintStatement, ReturnStatement,
    StringLiteral, VariableDeclaration, WhileStatement
)
from dlang.lang.environment import Environment
from dlang.lang.error import EvaluationError
from dlang.lang.values import Function, is_number, render, truthy, type_name

logger = logging.getLogger(__name__)


class SignalKind(Enum):
    NORMAL = "normal"
    BREAK = "break"
    CONTINUE = "continue"
    RETURN = "dede"


@dataclass(frozen=True)
class Signal:
    """Result of executing a statement. value is only meaningful for NORMAL and RETURN."""
    kind: SignalKind
    value: Any = None

    @property
    def is_normal(self):
        return self.kind is SignalKind.NORMAL


NORMAL = Signal(SignalKind.NORMAL)
BREAK = Signal(SignalKind.BREAK)
CONTINUE = Signal(SignalKind.CONTINUE)

ARITHMETIC = {"+": operator.add, "-": operator.sub, "*": operator.mul, "/": operator.truediv}
ORDERING = {"<": operator.lt, ">": operator.gt}
EQUALITY = {"==": operator.eq, "=": operator.eq, "!=": operator.ne}


def stray(signal, function=None, line_num=None):
    """Returns the EvaluationError for a signal that escaped the top level, or the body of function."""
    if signal.kind is SignalKind.RETURN:
        return EvaluationError("'{}' outside function", "dede", line_num=line_num)
    elif function is not None:
        msg = "'{}' outside loop in function '{}'"
        return EvaluationError(msg, (signal.kind.value, function.name), line_num=line_num)
    return EvaluationError("'{}' outside loop", signal.kind.value, line_num=line_num)


class Evaluator:
    """Executes dlang syntax trees. The global Environment outlives a single evaluate call, so an Evaluator can be fed
    a program piece by piece (see lang/session.py).
    """

    def __init__(self, env=None):
        self.globals = env if env is not None else Environment()
        self.output = []  # lines printed by the current evaluate call

        self.statements = {
            VariableDeclaration: self.exec_variable_declaration,
            AssignmentExpression: self.exec_assignment,
            PrintStatement: self.exec_print,
            IfStatement: self.exec_if,
            WhileStatement: self.exec_while,
            BlockStatement: self.exec_block,
            BreakStatement: lambda node, env: BREAK,
            ContinueStatement: lambda node, env: CONTINUE,
            FunctionDeclaration: self.exec_function_declaration,
            ReturnStatement: lambda node, env: Signal(SignalKind.RETURN, self.eval(node.value, env)),
        }
        self.expressions = {
            NumberLiteral: lambda node, env: node.value,
            StringLiteral: lambda node, env: node.value,
            Identifier: lambda node, env: env.lookup(node.name),
            BinaryExpression: self.eval_binary,
            CallExpression: self.eval_call,
        }

    def evaluate(self, ast):
        """Runs every top-level statement of ast in the global scope and returns the printed lines. Lines printed
        before an error stay available in self.output.
        """
        self.output = []
        try:
            for node in ast:
                signal = self.execute(node, self.globals)
                if not signal.is_normal:
                    raise stray(signal, line_num=node.line_num)
        except RecursionError:
            raise EvaluationError("maximum recursion depth exceeded", diagnosis=False) from None
        return self.output

    def execute(self, node, env):
        """Executes a statement (or an expression standing as one) and returns its Signal."""
        try:
            handler = self.statements.get(type(node))
            if handler is not None:
                return handler(node, env)
            elif isinstance(node, Expression):
                return Signal(SignalKind.NORMAL, self.eval(node, env))
            raise EvaluationError("unknown AST node '{}'", type(node).__name__, internal=True)

        except EvaluationError as error:
            if error.line_num is None:
                error.line_num = node.line_num  # innermost statement that knows its line
            raise

    def eval(self, node, env):
        """Evaluates an expression and returns its value."""
        handler = self.expressions.get(type(node))
        if handler is None:
            raise EvaluationError("unknown AST node '{}'", type(node).__name__, internal=True)
        return handler(node, env)

    # statements

    def exec_variable_declaration(self, node, env):
        value = self.eval(node.value, env)
        env.define(node.name, value)
        return Signal(SignalKind.NORMAL, value)

    def exec_assignment(self, node, env):
        if node.name not in env:
            raise EvaluationError("assignment to undeclared variable '{}'", node.name)
        value = self.eval(node.value, env)
        env.assign(node.name, value)
        return Signal(SignalKind.NORMAL, value)

    def exec_print(self, node, env):
        value = self.eval(node.value, env)
        self.output.append(render(value))
        return Signal(SignalKind.NORMAL, value)

    def exec_if(self, node, env):
        if truthy(self.eval(node.condition, env)):
            return self.execute(node.then_branch, env)
        elif node.else_branch is not None:
            return self.execute(node.else_branch, env)
        return NORMAL

    def exec_while(self, node, env):
        while truthy(self.eval(node.condition, env)):
            signal = self.execute(node.body, env)
            if signal.kind is SignalKind.BREAK:
                break
            elif signal.kind is SignalKind.RETURN:
                return signal
        return NORMAL

    def exec_block(self, node, env):
        signal = NORMAL
        for statement in node.body:
            signal = self.execute(statement, env)
            if not signal.is_normal:
                return signal
        return signal

    def exec_function_declaration(self, node, env):
        env.define(node.name, Function(node.name, node.params, node.body, env))
        return NORMAL

    # expressions

    def eval_call(self, node, env):
        function = env.lookup(node.name)
        if not isinstance(function, Function):
            raise EvaluationError("'{}' is not a function (it is a {})", (node.name, type_name(function)))

        args = [self.eval(arg, env) for arg in node.args]
        if len(args) != function.arity:
            msg = "'{}' expects {} argument(s) but got {}"
            raise EvaluationError(msg, (node.name, function.arity, len(args)))

        logger.debug("calling %s with %d argument(s)", function.name, len(args))
        signal = self.execute(function.body, function.closure.extend(dict(zip(function.params, args))))

        if signal.kind is SignalKind.RETURN:
            return signal.value
        elif not signal.is_normal:
            raise stray(signal, function)
        return None

    def eval_binary(self, node, env):
        left = self.eval(node.left, env)
        right = self.eval(node.right, env)
        op = node.operator

        if op == "+" and isinstance(left, str) and isinstance(right, str):
            return left + right

        elif op in ARITHMETIC:
            if not (is_number(left) and is_number(right)):
                raise mismatch(op, left, right)
            if op == "/" and right == 0:
                raise EvaluationError("division by zero", "/")
            try:
                return ARITHMETIC[op](left, right)
            except OverflowError:
                raise EvaluationError("result of '{}' is too large", op) from None

        elif op in ORDERING:
            if not ((is_number(left) and is_number(right)) or (isinstance(left, str) and isinstance(right, str))):
                raise mismatch(op, left, right)
            return ORDERING[op](left, right)

        elif op in EQUALITY:
            if type_name(left) != type_name(right) or isinstance(left, Function):
                raise mismatch(op, left, right)
            return EQUALITY[op](left, right)

        raise EvaluationError("unsupported operator '{}'", op)


def mismatch(op, left, right):
    return EvaluationError("unsupported operand types for '{}': {} and {}", (op, type_name(left), type_name(right)))


def evaluate(ast, env=None):
    """Runs ast in env (a fresh root Environment if None) and returns the printed lines."""
    return Evaluator(env).evaluate(ast)
