from .clock_record import ClockInRequest, ClockOutRequest, ClockRecord, ClockRecordRead
from .location import GeoPoint, LocationSample
from .perimeter import Perimeter, PerimeterCreate, PerimeterRead
from .user import ProfileCreate, SessionContext, UserRole
