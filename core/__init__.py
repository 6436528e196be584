"""Core simulation framework (config + scheduler + simulator)."""

from .config import (  # noqa: F401
    ArenaConfig,
    RobotConfig,
    SensorMountConfig,
    SnapshotState,
    load_json,
    save_json,
)
from .scheduler import FrameScheduler  # noqa: F401
from .simulator import Simulator  # noqa: F401
from .programs import (  # noqa: F401
    DEFAULT_PROGRAM,
    PROGRAM_TEMPLATES,
    ProgramCheck,
    check_program,
    get_program_template,
)
from .persistence import (  # noqa: F401
    latest_snapshot,
    load_robot_config,
    load_snapshot,
    load_track,
    next_snapshot_path,
    save_robot_config,
    save_snapshot,
    save_telemetry_csv,
    save_track,
)
