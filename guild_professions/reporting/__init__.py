"""
Reporting: terminal formatters and file export for analytics results.

Modules
-------
formatters : ASCII formatters used by the CLI commands.
export     : dict/record adapters plus JSON and CSV writers.
"""
