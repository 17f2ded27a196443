"""Command-line interface for popplerpages.

Run ``popplerpages --help`` (or ``python -m popplerpages.cli.main``) for the
available commands: ``info``, ``render`` and ``text``.
"""
