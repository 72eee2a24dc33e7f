"""
Command-line interface for the lifecycle monitor.

Entry point: ``lifecycle-monitor`` (see ``lifecycle_monitor.cli.main``).
"""
