"""Power scheme handle and the powercfg operations performed on it.

Each operation is a single powercfg invocation whose exit status is the whole
result. Writes are applied by the OS immediately; nothing is buffered here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .alias_resolver import resolve

if TYPE_CHECKING:
    from .models import PowerSource
    from .powercfg import PowercfgService

MAX_VALUE_INDEX = 0xFFFFFFFF


@dataclass(frozen=True)
class PowerScheme:
    """Handle on one OS power scheme, identified by its canonical GUID."""

    guid: str
    powercfg: PowercfgService = field(repr=False, compare=False)

    @classmethod
    def get(cls, powercfg: PowercfgService, alias_or_guid: str) -> PowerScheme | None:
        """Look up a scheme by alias or identifier.

        Returns:
            A handle bound to the resolved GUID, or None if it cannot be resolved.
        """
        guid = resolve(powercfg, alias_or_guid)
        if guid is None:
            return None
        return cls(guid, powercfg)

    def duplicate(self, guid: str) -> PowerScheme | None:
        """Copy all settings of this scheme into a new scheme with the given GUID.

        Returns:
            A handle on the copy, or None if powercfg refused. This scheme is unchanged.
        """
        if not self.powercfg.run("-duplicatescheme", self.guid, guid).ok:
            return None
        return PowerScheme(guid, self.powercfg)

    def change_name(self, name: str, description: str) -> bool:
        """Set the display name and description of this scheme."""
        return self.powercfg.run("-changename", self.guid, name, description).ok

    def set_value_index(self, source: PowerSource, subgroup: str, setting: str, value: int) -> bool:
        """Write a setting value into the AC or DC table of this scheme.

        Args:
            source: Which parameter table to write.
            subgroup: Subgroup GUID or alias, e.g. ``sub_processor``.
            setting: Setting GUID or alias, e.g. ``PROCTHROTTLEMAX``.
            value: Unsigned value index to store.

        Raises:
            ValueError: If value does not fit an unsigned 32-bit integer.
        """
        if not 0 <= value <= MAX_VALUE_INDEX:
            msg = f"Value index must be an unsigned 32-bit integer, got {value}"
            raise ValueError(msg)
        return self.powercfg.run(source.command, self.guid, subgroup, setting, str(value)).ok

    def activate(self) -> bool:
        """Make this scheme the active power scheme."""
        return self.powercfg.run("-setactive", self.guid).ok
