from enum import Enum


class ContainerPhase(str, Enum):
    """Defines the lifecycle phase of a container.

    Attributes:
        REGISTRATION: Registrations may still be added; not every dependency is known yet.
        LOCKED: The first instance was requested; the registration set is final.
    """

    REGISTRATION = "registration"
    LOCKED = "locked"

    def __str__(self) -> str:
        return self.value
