"""Built-in CLI sub-commands for cordkit.

* :mod:`~cordkit.commands.init` -- create a bot profile.
* :mod:`~cordkit.commands.config` -- view and modify global settings.
* :mod:`~cordkit.commands.profile` -- list, show and delete profiles.
* :mod:`~cordkit.commands.guild` -- inspect a guild over REST.
* :mod:`~cordkit.commands.user` -- look up users.
* :mod:`~cordkit.commands.cache` -- inspect and clear the response cache.

Each module exports a :class:`typer.Typer` sub-application, except
``init`` which is a plain callback registered on the root app.
"""
