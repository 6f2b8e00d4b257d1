from collections import deque


class Pipe:
    """
    Holds outputs of executed commands, until they're read
    """

    def __init__(self):
        self.store = deque()

    def write(self, msg):
        self.store.append(msg)

    def has_msgs(self) -> bool:
        return len(self.store) > 0

    def read(self):
        """
        Read message and remove from the pipe
        """
        return self.store.popleft()

    def read_all(self) -> list:
        """
        Read all messages, in order written, and empty the pipe
        """
        msgs = list(self.store)
        self.store.clear()
        return msgs

    def reset(self):
        self.store = deque()
