"""Built-in CLI sub-commands for sdkmaker.

* :mod:`~sdkmaker.commands.generate` -- run the pipeline and write a client.
* :mod:`~sdkmaker.commands.inspect` -- show controllers, metadata, and
  models of a document.
* :mod:`~sdkmaker.commands.config` -- show the effective configuration.

``generate`` is a plain callback registered on the root app; ``inspect``
and ``config`` are :class:`typer.Typer` sub-applications.
"""
