"""Exception types raised by the family graph core and its collaborators."""


class FamGraphError(Exception):
    """Base class for all family graph errors."""


class DataSourceError(FamGraphError):
    """The profile/relationship store could not be read or written."""


class UnknownNodeError(FamGraphError, KeyError):
    """A node id was referenced that the active simulation does not hold."""

    def __init__(self, node_id: str):
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Node {self.node_id!r} not found in simulation"


class SimulationStateError(FamGraphError):
    """An operation was attempted on a simulation in the wrong state."""
