"""Matter cluster ids and the enum values the bridge reports."""

from enum import IntEnum
from typing import Union

# Matter Cluster IDs
ONOFF_CLUSTER_ID = 0x0006
LEVEL_CONTROL_CLUSTER_ID = 0x0008
WINDOW_COVERING_CLUSTER_ID = 0x0102
COLOR_CONTROL_CLUSTER_ID = 0x0300

ONOFF = "OnOff"
LEVEL_CONTROL = "LevelControl"
COLOR_CONTROL = "ColorControl"
WINDOW_COVERING = "WindowCovering"

CLUSTER_IDS = {
    ONOFF: ONOFF_CLUSTER_ID,
    LEVEL_CONTROL: LEVEL_CONTROL_CLUSTER_ID,
    COLOR_CONTROL: COLOR_CONTROL_CLUSTER_ID,
    WINDOW_COVERING: WINDOW_COVERING_CLUSTER_ID,
}
CLUSTER_NAMES = {cluster_id: name for name, cluster_id in CLUSTER_IDS.items()}


def cluster_name(cluster: Union[str, int]) -> str:
    """Resolve a Matter cluster id or name to the cluster name."""
    if isinstance(cluster, int):
        if cluster not in CLUSTER_NAMES:
            raise KeyError(f"Unknown cluster id 0x{cluster:04x}")
        return CLUSTER_NAMES[cluster]
    return cluster


class ColorMode(IntEnum):
    CurrentHueAndCurrentSaturation = 0
    CurrentXAndCurrentY = 1
    ColorTemperatureMireds = 2


class MovementStatus(IntEnum):
    Stopped = 0
    Opening = 1
    Closing = 2
