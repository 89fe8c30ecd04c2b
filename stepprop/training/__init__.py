"""Training loop, losses and pipeline assembly."""

from . import losses, pipelines, trainer

__all__ = ["losses", "pipelines", "trainer"]
