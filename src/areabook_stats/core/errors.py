"""Error type shared by the loading, statistics and export stages."""

# Code families
EC_INPUT_TYPE = -2101
EC_INPUT_MISSING = -2102
EC_INPUT_FORMAT = -2103
EC_WINDOW_INVALID = -2201
EC_WINDOW_PRESET = -2202
EC_STATS_EMPTY = -2302
EC_STORAGE_READ = -2701
EC_STORAGE_PERM = -2702
EC_STORAGE_KIND = -2703
EC_STORAGE_IO = -2704


class PipelineError(Exception):
    """Exception carrying a numeric error code."""

    def __init__(self, code: int, message: str):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


__all__ = [
    "PipelineError",
    "EC_INPUT_TYPE",
    "EC_INPUT_MISSING",
    "EC_INPUT_FORMAT",
    "EC_WINDOW_INVALID",
    "EC_WINDOW_PRESET",
    "EC_STATS_EMPTY",
    "EC_STORAGE_READ",
    "EC_STORAGE_PERM",
    "EC_STORAGE_KIND",
    "EC_STORAGE_IO",
]
