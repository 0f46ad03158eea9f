"""
Built-in commands package.

Commands are loaded from individual subdirectories, each containing an __init__.py
that declares its commands on ``default_commands``.
"""
