import logging
from typing import Callable, Optional, Sequence

from core import config
from models.location import LocationSample
from models.perimeter import Perimeter
from services.polling import PeriodicTask
from utils.geofence import PerimeterCheck, PerimeterStatus, classify

logger = logging.getLogger(__name__)


class LocationMonitor:
    """Samples a location sensor on a timer and keeps the latest perimeter check.

    ``latest`` is the worker view's working set; it is replaced on every
    sample and discarded with the monitor. ``on_check`` is called with each
    new sample and check.
    """

    def __init__(
        self,
        sensor: Callable[[], LocationSample],
        perimeters_loader: Callable[[], Sequence[Perimeter]],
        interval_seconds: Optional[float] = None,
        on_check: Optional[Callable[[LocationSample, PerimeterCheck], None]] = None,
    ):
        self._sensor = sensor
        self._on_check = on_check
        self._perimeters_loader = perimeters_loader
        self.latest: Optional[PerimeterCheck] = None
        self.latest_sample: Optional[LocationSample] = None
        self._task = PeriodicTask(
            interval_seconds or config.LOCATION_POLL_SECONDS,
            self.refresh,
            name="location-monitor",
        )

    def _read_sensor(self) -> LocationSample:
        try:
            return self._sensor()
        except Exception as e:
            logger.warning(f"Location sensor failed: {e}")
            return LocationSample.failure(str(e) or "Location sensor failed.")

    def refresh(self) -> PerimeterCheck:
        sample = self._read_sensor()

        if not sample.available:
            # A sensor failure is reported as such, whatever the perimeters are
            check = classify(sample, [])
        else:
            check = self._check_against_perimeters(sample)

        self.latest_sample = sample
        self.latest = check
        if self._on_check is not None:
            self._on_check(sample, check)
        return check

    def _check_against_perimeters(self, sample: LocationSample) -> PerimeterCheck:
        try:
            perimeters = list(self._perimeters_loader())
        except Exception as e:
            logger.warning(f"Failed to load location perimeters: {e}")
            return PerimeterCheck(
                status=PerimeterStatus.INDETERMINATE,
                reason="Failed to load location perimeters.",
            )
        return classify(sample, perimeters)

    @property
    def can_clock_in(self) -> bool:
        return self.latest is not None and self.latest.allows_clock_in

    @property
    def running(self) -> bool:
        return self._task.running

    def start(self) -> None:
        self._task.start()

    async def stop(self) -> None:
        await self._task.stop()
