# In src/nest_cli/dependency.py
from dataclasses import dataclass


@dataclass(frozen=True)
class NestDependency:
    """A framework package as shown by the info command."""

    name: str
    full_name: str
    value: str
