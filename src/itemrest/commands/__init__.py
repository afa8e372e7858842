"""Built-in CLI sub-commands for itemrest.

* :mod:`~itemrest.commands.items` -- one command per item operation
  (``path``, ``get``, ``all``, ``one``, ``find``, ``create``, ``update``,
  ``remove``, ``action``), registered directly on the root app.
* :mod:`~itemrest.commands.profile` -- the ``profile`` group for adding,
  listing, showing, and removing connection profiles.
"""
