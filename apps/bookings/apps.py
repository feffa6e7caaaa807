from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    label = "bookings"
    verbose_name = "Car bookings"

    def ready(self):
        from shared.application.message_bus import message_bus

        from .services import register_booking_handlers

        register_booking_handlers(message_bus)
