"""Built-in CLI commands for specbook.

Each sub-module exposes a Typer app or command function that is registered
on the root application in :mod:`specbook.app`:

* :mod:`~specbook.commands.build` -- ``specbook build``
* :mod:`~specbook.commands.inspect` -- ``specbook inspect``
* :mod:`~specbook.commands.config` -- ``specbook config``
"""
