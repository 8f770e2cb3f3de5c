# Academy Fleet Portal — Database Models
# Import all models here for SQLAlchemy discovery

from fleet_portal.models.vehicle import Vehicle                 # noqa
from fleet_portal.models.booking import Booking                 # noqa
from fleet_portal.models.user import User                       # noqa
from fleet_portal.models.trainer import Trainer                 # noqa
from fleet_portal.models.service_record import ServiceRecord    # noqa
from fleet_portal.models.parts_order import PartsOrder          # noqa
from fleet_portal.models.security_log import SecurityLog        # noqa
from fleet_portal.models.message import Message                 # noqa
from fleet_portal.models.notification import Notification       # noqa
