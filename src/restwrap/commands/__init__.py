"""Built-in CLI sub-commands for restwrap.

* :mod:`~restwrap.commands.inspect` -- ``routes`` and ``uri``: look at a
  configuration without sending anything.
* :mod:`~restwrap.commands.call` -- ``call``: dispatch one route through
  the default transport and print the response.

Both modules export plain command functions that
:func:`restwrap.app.main` registers on the root Typer app.
"""
