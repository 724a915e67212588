"""Built-in CLI sub-commands for clientsynth.

* :mod:`~clientsynth.commands.generate` -- build and write the model.
* :mod:`~clientsynth.commands.init` -- add an API to ``clientsynth.json``.
* :mod:`~clientsynth.commands.inspect` -- ``info`` plus the ``inspect types``
  and ``inspect operations`` tables.

Single commands are plain callbacks registered on the root app; ``inspect``
is a :class:`typer.Typer` sub-application.
"""
