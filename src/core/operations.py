"""
Dispatch table of named operations.

Operations are looked up by name whether they come from the command line,
from an elevated child process, or from another step in the same process.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

from .errors import EXIT_USAGE, BootstrapError, UnknownOperation

Operation = Callable[[List[str]], int]


@dataclass
class RegisteredOperation:
    name: str
    func: Operation
    description: str = ""
    usage: str = ""


class OperationRegistry:
    """Maps operation names to callables returning an exit status."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._operations: Dict[str, RegisteredOperation] = {}

    def register(self, name: str, func: Operation, description: str = "", usage: str = "") -> None:
        if name in self._operations:
            raise ValueError(f"Operation already registered: {name}")
        self._operations[name] = RegisteredOperation(name, func, description, usage)

    def __contains__(self, name: str) -> bool:
        return name in self._operations

    def names(self) -> List[str]:
        return list(self._operations)

    def describe(self) -> List[RegisteredOperation]:
        return list(self._operations.values())

    def dispatch(self, name: str, args: Sequence[str] = ()) -> int:
        """
        Run an operation by name.

        Raises:
            UnknownOperation: No operation has that name
        """
        try:
            operation = self._operations[name]
        except KeyError:
            raise UnknownOperation(name, self._operations)

        self.logger.debug(f"Dispatching {name} {list(args)}")
        return operation.func(list(args))


def require_args(name: str, args: List[str], count: int, usage: str) -> None:
    if len(args) != count:
        raise BootstrapError(f"Usage: {name} {usage}".strip(), exit_code=EXIT_USAGE)
