"""
ChainConfig - Process-wide defaults handed to every new Chain.
"""

import uuid

from .scheduler import DefaultScheduler


def _short_uid():
    return uuid.uuid4().hex[:4]


class ChainConfig:
    """
    Configuration value threaded into each Chain at construction.

    A chain keeps the config it was built with, so replacing the process
    default later only affects chains created afterwards.
    """

    def __init__(self, immediate=False, report=False, scheduler=None, uid_factory=None):
        """
        Initialize a ChainConfig.

        Args:
            immediate: Run steps synchronously unless a chain asks otherwise
                (default: False, i.e. deferred to the next tick)
            report: Emit per-chain diagnostic log lines
            scheduler: Object with a defer(fn, *args) method
                (default: DefaultScheduler)
            uid_factory: Callable returning a diagnostic id for each chain
                when report is on
        """
        self.immediate = bool(immediate)
        self.report = bool(report)
        self.scheduler = scheduler if scheduler is not None else DefaultScheduler()
        self.uid_factory = uid_factory if uid_factory is not None else _short_uid

    def replace(self, **changes):
        """
        Return a copy of this config with some options changed.

        Args:
            **changes: Any of immediate, report, scheduler, uid_factory

        Returns:
            New ChainConfig instance
        """
        options = {
            'immediate': self.immediate,
            'report': self.report,
            'scheduler': self.scheduler,
            'uid_factory': self.uid_factory,
        }
        unknown = set(changes) - set(options)
        if unknown:
            raise TypeError(f"Unknown config options: {', '.join(sorted(unknown))}")
        options.update(changes)
        return ChainConfig(**options)

    def new_uid(self):
        """Return a diagnostic id for a new chain, or None when not reporting."""
        if not self.report:
            return None
        return self.uid_factory()

    def __repr__(self):
        return (f"ChainConfig(immediate={self.immediate}, report={self.report}, "
                f"scheduler={self.scheduler!r})")


_default = ChainConfig()


def get_config():
    """Return the process-wide default configuration."""
    return _default


def configure(config=None, **changes):
    """
    Replace the process-wide default configuration.

    Meant to be called once at startup. Chains that already exist keep the
    configuration they were built with.

    Args:
        config: A complete ChainConfig to install (optional)
        **changes: Options to change on the current default instead

    Returns:
        The new default ChainConfig
    """
    global _default
    if config is None:
        config = _default.replace(**changes)
    elif changes:
        config = config.replace(**changes)
    _default = config
    return _default


def set_immediate(immediate):
    """Shortcut for configure(immediate=...)."""
    return configure(immediate=immediate)


def set_report(report):
    """Shortcut for configure(report=...)."""
    return configure(report=report)
