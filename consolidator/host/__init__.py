"""Host project collaborators consumed by the dedup engine."""

from consolidator.host.base import HostProject
from consolidator.host.memory import InMemoryProject
from consolidator.host.loader import dump_project, load_project

__all__ = ["HostProject", "InMemoryProject", "dump_project", "load_project"]
