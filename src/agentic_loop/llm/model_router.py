from typing import List, Protocol, Sequence

from agentic_loop.domain.model_target import ModelTarget


class ModelRouter(Protocol):
    """Supplies the ordered oracle targets attempted for one turn."""

    def get_route(self) -> List[ModelTarget]:
        """Return the targets to try, primary first."""

        ...


class StaticModelRouter:
    """
    Routes to a fixed primary target followed by fallbacks in order.

    Args:
        primary: Target tried first.
        fallbacks: Targets tried after the primary is exhausted.
    """

    def __init__(self, primary: ModelTarget, fallbacks: Sequence[ModelTarget] = ()):
        self._route: tuple[ModelTarget, ...] = (primary, *fallbacks)

    def get_route(self) -> List[ModelTarget]:
        """Return ``[primary, *fallbacks]``."""

        return list(self._route)
