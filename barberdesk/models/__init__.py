from barberdesk.models import (  # noqa: F401
    appointment,
    barber,
    client,
    notification,
    rating,
    schedule,
    service,
    user,
)
