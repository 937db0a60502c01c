"""CMR deployments that a query can be sent to."""

from dataclasses import dataclass
from typing import Optional, Union

from typing_extensions import TypeAlias


@dataclass(frozen=True)
class System:
    """A named CMR deployment.

    Attributes:
        name: Short name of the deployment, e.g. ``"PROD"``.
        cmr_base_url: Base URL of the deployment's search API. It must end in
            a slash so that routes are appended below it.
    """

    name: str
    cmr_base_url: str

    @classmethod
    def from_mode(cls, mode: Optional[str]) -> "System":
        """Return the deployment matching a mode string.

        Parameters:
            mode: One of ``"CMR_OPS"``, ``"CMR_UAT"`` or ``"CMR_SIT"``.

        Returns:
            The matching System. Unrecognized modes (and ``None``) select
            production.
        """
        return _MODES.get(mode or "", PROD)

    def __str__(self) -> str:
        return f"{self.name} ({self.cmr_base_url})"


PROD = System("PROD", "https://cmr.earthdata.nasa.gov/search/")
UAT = System("UAT", "https://cmr.uat.earthdata.nasa.gov/search/")
SIT = System("SIT", "https://cmr.sit.earthdata.nasa.gov/search/")

_MODES = {
    "CMR_OPS": PROD,
    "CMR_UAT": UAT,
    "CMR_SIT": SIT,
}

SystemLike: TypeAlias = Union[System, str, None]
"""A System, or a mode string accepted by ``System.from_mode``."""


def resolve_system(system: SystemLike) -> System:
    """Coerce a System or mode string into a System."""
    if isinstance(system, System):
        return system
    return System.from_mode(system)
