"""
Errors raised by the virtual height grouping pipeline.

Only conditions the caller has to act on are raised. A least-squares fit
that does not converge, or a fitted component that drifts away from the
peak that seeded it, is handled inside the pipeline by falling back to
uniform bins.
"""


class AltitudeGroupingError(ValueError):
    """Base class for all grouping errors."""


class InvalidConfigurationError(AltitudeGroupingError):
    """Grouping parameters (or the sample set) cannot be used."""


class InvalidHistogramError(InvalidConfigurationError):
    """The height range is too small for a histogram analysis at this box width."""

    def __init__(self, nbin: int, vh_min: float, vh_max: float, vh_box: float):
        self.nbin = nbin
        self.vh_min = vh_min
        self.vh_max = vh_max
        self.vh_box = vh_box
        super().__init__(
            f"vheight range too small for a histogram analysis: "
            f"{nbin} = ({vh_max} - {vh_min}) / {vh_box * 0.25}"
        )


class BinCapacityError(AltitudeGroupingError):
    """More virtual height bins are needed than max_vbin allows."""

    def __init__(self, requested: int, max_vbin: int, reason: str = ""):
        self.requested = requested
        self.max_vbin = max_vbin
        message = f"{requested} vheight bins needed but max_vbin is {max_vbin}"
        if reason:
            message = f"{reason}: {message}"
        super().__init__(message)
