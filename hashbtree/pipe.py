from collections import deque
from typing import Any, List


class Pipe:
    """
    Holds output of executed commands, e.g. listed elements,
    until the caller reads them
    """

    def __init__(self):
        self.store = deque()

    def write(self, msg: Any):
        self.store.append(msg)

    def has_msgs(self) -> bool:
        return len(self.store) > 0

    def read(self) -> Any:
        """
        Read message and remove from the pipe
        """
        return self.store.popleft()

    def read_all(self) -> List[Any]:
        """
        Drain the pipe
        """
        msgs = list(self.store)
        self.store.clear()
        return msgs

    def reset(self):
        self.store = deque()
