"""Enums shared by filter settings and matching."""

from enum import Enum


class OrderIdArea(str, Enum):
    """Message header the order-id mask is applied to."""

    TO = "to"
    FROM = "from"
    SUBJECT = "subject"


class ContentArea(str, Enum):
    """Message part a status or extra-field mask is searched in."""

    SUBJECT = "subject"
    BODY = "body"


class ErrorType(str, Enum):
    """Failure classes reported on fetch results."""

    CONFIGURATION = "configuration"
    AUTH = "auth"
    TRANSPORT = "transport"
    DATA = "data"
