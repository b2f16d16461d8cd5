from django.apps import AppConfig, apps


class BookclubConfig(AppConfig):
    name = "bookclub"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self) -> None:
        from bookclub.container import build_container, django_collaborators

        self.container = build_container(django_collaborators())


def get_container():
    """The container built when the app was loaded."""
    return apps.get_app_config("bookclub").container
