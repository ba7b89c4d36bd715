"""
Start modes - How a Chain schedules its first step and whether it starts paused.
"""


class Mode:
    """Enumeration of scheduling modes for a new chain."""
    DEFAULT = "default"       # Use the configured process-wide default
    IMMEDIATE = "immediate"   # Run the next step synchronously
    DEFERRED = "deferred"     # Run the next step on the next scheduling tick

    ALL = (DEFAULT, IMMEDIATE, DEFERRED)


class Start:
    """
    Initialization record for a Chain.

    The scheduling mode and the pause flag are independent axes, and the
    payload travels next to them instead of being mixed into the initial
    value. The ready-made records ``NOW``, ``TICK`` and ``PAUSE`` combine
    with ``|``:

        Chain(NOW | PAUSE)                     # immediate, starts paused
        Chain((TICK | PAUSE).with_value(42))   # deferred, paused, value 42
    """

    __slots__ = ('mode', 'paused', 'value')

    def __init__(self, mode=Mode.DEFAULT, paused=False, value=None):
        """
        Initialize a Start record.

        Args:
            mode: One of the Mode constants (default: Mode.DEFAULT)
            paused: Whether the chain starts paused
            value: Initial payload of the chain

        Raises:
            ValueError: If mode is not a known Mode
        """
        if mode not in Mode.ALL:
            raise ValueError(f"Unknown start mode: {mode!r}")
        self.mode = mode
        self.paused = bool(paused)
        self.value = value

    def is_immediate(self, default):
        """
        Resolve the mode against the configured default.

        Args:
            default: Configured immediate flag, used for Mode.DEFAULT

        Returns:
            True if the first step should run synchronously
        """
        if self.mode == Mode.IMMEDIATE:
            return True
        if self.mode == Mode.DEFERRED:
            return False
        return bool(default)

    def with_value(self, value):
        """Return a copy of this record carrying `value` as its payload."""
        return Start(self.mode, self.paused, value)

    def __or__(self, other):
        if not isinstance(other, Start):
            return NotImplemented

        mode = self.mode
        if other.mode != Mode.DEFAULT:
            if mode != Mode.DEFAULT and mode != other.mode:
                raise ValueError(f"Conflicting start modes: {mode} and {other.mode}")
            mode = other.mode

        value = other.value if other.value is not None else self.value
        return Start(mode, self.paused or other.paused, value)

    def __eq__(self, other):
        if not isinstance(other, Start):
            return NotImplemented
        return (self.mode, self.paused, self.value) == (other.mode, other.paused, other.value)

    def __hash__(self):
        return hash((self.mode, self.paused))

    def __repr__(self):
        return f"Start(mode={self.mode}, paused={self.paused}, value={self.value!r})"


NOW = Start(Mode.IMMEDIATE)
IMMEDIATE = NOW
TICK = Start(Mode.DEFERRED)
PAUSE = Start(paused=True)
