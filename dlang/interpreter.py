"""dlang interpreter.

Basic program flow:
    1. Lexer: splits source text into tokens, line by line (see lang/lexical.py)
    2. Parser: builds a syntax tree out of the tokens by recursive descent (see grammar/parser.py, grammar/nodes.py)
    3. Evaluator: walks the tree and executes it on the fly over a chain of scopes (see lang/evaluator.py)

There is no bytecode or compilation step, and nothing here reads files or writes to the terminal: that's the job of
lang/session.py and main.py.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from dlang.grammar.parser import parse
from dlang.lang.environment import Environment
from dlang.lang.evaluator import Evaluator
from dlang.lang.lexical import tokenize


@dataclass
class RunResult:
    lines: List[str]          # printed lines, in order
    bindings: Dict[str, Any]  # global variables after the run


def run(source):
    """Tokenizes, parses and evaluates source. Raises an InterpreterError (LexError, ParseError or EvaluationError)
    on the first failure.

    dlang calls recurse on the Python stack, and run leaves the host recursion limit alone (Config.apply is what
    raises it for the dlang script). At Python's default limit of 1000, programs can only nest calls about 80 deep
    before an EvaluationError "maximum recursion depth exceeded".
    """
    env = Environment()
    lines = Evaluator(env).evaluate(parse(tokenize(source)))
    return RunResult(lines, env.bindings)
