"""
Logger for depfetch
"""

import inspect
import logging


class DepfetchLogger:
    """
    Logger class
    """

    def __init__(self, name: str = "depfetch") -> None:
        self.logger = logging.getLogger(name)

    def log(self, debug_message: str, level: int) -> None:
        """
        Log the message at the given level, tagged with the location of the caller
        """
        debug_message = debug_message.replace("\n", " ")

        # Collect details about the callee
        curframe = inspect.currentframe()
        calframe = inspect.getouterframes(curframe, 2)
        caller_file = calframe[1][1].split("/")[-1]
        caller_line = calframe[1][2]
        caller_name = calframe[1][3]

        self.logger.log(
            level,
            debug_message,
            extra={
                "caller_file": caller_file,
                "caller_name": caller_name,
                "caller_line": caller_line,
            },
        )
