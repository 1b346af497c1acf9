import os


def _as_bool(val: str | None, default: bool = True) -> bool:
    if val is None:
        return default
    v = val.strip().lower()
    return v in {"1", "true", "yes", "on"}


class TimelineFeatures:
    detailed: bool

    def __init__(self) -> None:
        self.detailed = _as_bool(os.getenv("FEATURE_DETAILED_TIMELINE"), True)


features = TimelineFeatures()
