from enum import Enum


class UserType(str, Enum):
    """Kinds of account; fixed at registration."""

    PATIENT = "patient"
    THERAPIST = "therapist"
