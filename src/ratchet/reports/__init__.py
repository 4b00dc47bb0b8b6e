from .console import ConsoleReporter, write_history_csv
