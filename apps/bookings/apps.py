from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    verbose_name = "Bookings"

    services = None

    def ready(self):  # type: ignore
        from .bootstrap import bootstrap

        self.services = bootstrap()
