import datetime
import sys
import traceback
from colorama import Fore, Style, init

# Initialize Colorama
init(autoreset=True)


class Logger:
    """Console logger that holds its records until the invocation ends.

    pkg-config's stdout is parsed by the calling build tool, so nothing is
    printed while the pipeline runs. Records are buffered and written to
    stderr by ``flush`` when the invocation fails, or printed live to stderr
    in verbose mode. A log file receives every record when configured.
    """

    def __init__(self):
        self.log_file = None
        self.verbose = False
        self.records = []

    def configure(self, log_file=None, verbose=False):
        self.log_file = log_file
        self.verbose = verbose

    def _get_timestamp(self):
        return datetime.datetime.now().strftime("%H:%M:%S")

    def _format_fields(self, fields):
        if not fields:
            return ""
        parts = []
        for key, value in fields.items():
            if isinstance(value, (list, tuple)):
                value = "[" + ", ".join(str(v) for v in value) + "]"
            parts.append(f"{key}={value}")
        return " " + " ".join(parts)

    def _log(self, level, message, color, prefix="", show_timestamp=True, **fields):
        message = f"{message}{self._format_fields(fields)}"
        if show_timestamp:
            timestamp = self._get_timestamp()
            log_message = f"[{timestamp}] [{level}] {prefix}{message}\n"
            console = f"{color}{Style.BRIGHT}[{timestamp}]{Style.RESET_ALL} {color}{prefix}{message}{Style.RESET_ALL}"
        else:
            log_message = f"[{level}] {prefix}{message}\n"
            console = f"{color}{prefix}{message}{Style.RESET_ALL}"

        if self.verbose:
            print(console, file=sys.stderr)
        else:
            self.records.append(console)

        if self.log_file:
            with open(self.log_file, "a") as f:
                f.write(log_message)

    def info(self, message, **fields):
        self._log("INFO", message, Fore.CYAN, **fields)

    def step_info(self, message, indent=0, **fields):
        prefix = " " * indent
        self._log("", message, Fore.CYAN, prefix=prefix, show_timestamp=False, **fields)

    def success(self, message, **fields):
        self._log("SUCCESS", message, Fore.GREEN, prefix="✓ ", **fields)

    def warning(self, message, **fields):
        self._log("WARNING", message, Fore.YELLOW, prefix="⚠ ", **fields)

    def error(self, message, **fields):
        self._log("ERROR", message, Fore.RED, prefix="✖ ", **fields)

    def debug(self, message, **fields):
        self._log("DEBUG", message, Fore.WHITE + Style.DIM, **fields)

    def log_output(self, output):
        """Log captured subprocess output line by line, verbatim."""
        for line in output.splitlines():
            if line.strip():
                self._log("ERROR", line, Fore.RED, show_timestamp=False)

    # -------- Exception logging --------
    def exception(self, exc_type, exc_value, exc_traceback):
        self.error(f"An unhandled exception occurred: {exc_value}")
        formatted_lines = traceback.format_exception(exc_type, exc_value, exc_traceback)
        for line in formatted_lines:
            for sub_line in line.splitlines():
                if sub_line.strip():
                    self._log("TRACEBACK", f">> {sub_line}", Fore.RED)

    def flush(self, stream=None):
        """Write the buffered records to ``stream`` (stderr) and clear them."""
        stream = stream or sys.stderr
        for record in self.records:
            print(record, file=stream)
        self.records = []

    def discard(self):
        self.records = []


# ---------------- Helper ----------------
logger = Logger()
