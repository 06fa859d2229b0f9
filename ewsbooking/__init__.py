#!/usr/bin/env python
import logging

__version__ = "0.1.0"

from .service import ExchangeWebService
from .service import get_service
from .models import Booking
from .models import Calendar

# Silence notification of no default logging handler
log = logging.getLogger("ewsbooking")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

__all__ = [
    "__version__",
    "Booking",
    "Calendar",
    "ExchangeWebService",
    "get_service",
]
