"""
logger.py

Logging module for huffcodec.


"""


from datetime import datetime
from typing import Union, Optional

from .settings import CODING_STEP_INTERVAL

class LogLevel:
    INFO = 0
    WARNING = 1
    ERROR = 2
    PROGRESS = 3


class Log:
    def __init__(self, type_name: str, level: int, message: str) -> None:
        self.level = level
        self.type_name = type_name
        self.message = message
        self.date = datetime.now()

    def __str__(self) -> str:
        return f"{self.date} - {self.type_name} - {self.level} - {self.message}"

    def __repr__(self) -> str:
        return self.__str__()


class TreeConstructionLog(Log):
    def __init__(self, alphabet_size: int, total_weight: int, depth: int) -> None:
        self.alphabet_size = alphabet_size
        self.total_weight = total_weight
        self.depth = depth
        super().__init__("Tree_construction_log", LogLevel.INFO,
                         f"Alphabet size: {alphabet_size}, Total weight: {total_weight}, Depth: {depth}")


class CodingLog(Log):
    def __init__(self, symbol_count: int, encoded_bits: int) -> None:
        self.symbol_count = symbol_count
        self.encoded_bits = encoded_bits
        super().__init__("Coding_log", LogLevel.INFO, f"Symbols: {symbol_count}, Encoded bits: {encoded_bits}")


class ContainerLog(Log):
    def __init__(self, action: str, file_path: str, size: int) -> None:
        self.action = action
        self.file_path = file_path
        self.size = size
        super().__init__("Container_log", LogLevel.INFO, f"{action} {file_path} ({size} bytes)")


class CodingProgressStep(Log):
    def __init__(self, message: str, total_steps: Optional[int] = None) -> None:
        self.base_message = message
        self.total_steps = total_steps
        super().__init__("Coding_progress_step", LogLevel.PROGRESS, message)


class Logger:
    def __init__(self) -> None:
        self.coding_progress_count = 0

        self.logs = []

        self.record_info = True
        self.record_warning = True
        self.record_error = True
        self.record_progress = False

        self.display_info = False
        self.display_warning = True
        self.display_error = True
        self.display_progress = False

        self.coding_step_interval_count = CODING_STEP_INTERVAL

    def wants_progress(self) -> bool:
        """Return True if progress steps are recorded or displayed."""
        return self.record_progress or self.display_progress

    def log(self, log: Union[Log, str]) -> None:
        if not (isinstance(log, Log) or isinstance(log, str)):
            raise ValueError("Log must be an instance of Log class or a string")
        if isinstance(log, str):
            log = Log("General", LogLevel.INFO, log)

        if log.level == LogLevel.INFO:
            if self.record_info:
                self.logs.append(log)
            if self.display_info:
                print(log)
        elif log.level == LogLevel.WARNING:
            if self.record_warning:
                self.logs.append(log)
            if self.display_warning:
                print(log)
        elif log.level == LogLevel.ERROR:
            if self.record_error:
                self.logs.append(log)
            if self.display_error:
                print(log)
        elif log.level == LogLevel.PROGRESS:
            if isinstance(log, CodingProgressStep):
                self.coding_progress_count += 1
                count = self.coding_progress_count
                if log.total_steps is not None:
                    log.message = f"{log.base_message} ({count}/{log.total_steps})"
                else:
                    log.message = f"{log.base_message} ({count})"
                if self.record_progress:
                    self.logs.append(log)
                if self.display_progress and (count % self.coding_step_interval_count == 0):
                    print(log)

    def save(self, file_path: str) -> None:
        with open(file_path, 'w') as file:
            for log in self.logs:
                file.write(str(log) + "\n")
