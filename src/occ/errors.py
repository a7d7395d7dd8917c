"""
Error types raised by occ.

Every error carries a message that can be shown to the user as-is.
"""


class OccError(Exception):
    """Base class for all occ errors."""


class ConfigError(OccError):
    """The configuration file is missing or unreadable."""


class ProbeError(OccError):
    """A host filesystem check failed for a reason other than absence."""


class AgentNotFoundError(OccError):
    """No SSH agent directory was found in the mac private temp directory."""


class RuntimeConnectionError(OccError):
    """The container runtime socket could not be reached."""


class ContainerError(OccError):
    """Creating, starting or attaching to the container failed."""


class InspectFailedError(OccError):
    """Inspecting the running container failed."""


class TempDirError(OccError):
    pass


class FileCreateError(OccError):
    pass


class WriteError(OccError):
    pass


class ArchiveReadError(OccError):
    """Reading the archive from the host filesystem failed."""


class CopyRequestError(OccError):
    """Requesting the copy into the container failed before any data was streamed."""


class CopyStreamError(OccError):
    """Streaming the archive into the container failed."""


class AggregatedRelayError(OccError):
    """One or both sides of a concurrent copy failed.

    ``errors`` keeps the container-side error first, followed by the host-side error.
    """

    def __init__(self, errors: list[BaseException]) -> None:
        self.errors = list(errors)
        super().__init__(self._format())

    def _format(self) -> str:
        count = len(self.errors)
        noun = "error" if count == 1 else "errors"
        points = "".join(f"\n\t* {err}" for err in self.errors)
        return f"{count} {noun} occurred:{points}"


class RelayError(OccError):
    """Delivering the portmap file into the container failed."""
