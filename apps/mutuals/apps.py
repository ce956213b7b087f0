from django.apps import AppConfig


class MutualsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.mutuals"
    verbose_name = "Mutual friends"

    def ready(self) -> None:
        from apps.mutuals.accessor import FriendListAccessor
        from apps.mutuals.cache import MutualResultCache
        from apps.mutuals.listener import InvalidationListener, SignalFriendshipEventSource
        from apps.mutuals.providers import DjangoSocialGraphProvider

        listener = InvalidationListener(
            FriendListAccessor(DjangoSocialGraphProvider()),
            MutualResultCache(),
        )
        listener.attach(SignalFriendshipEventSource(dispatch_uid="mutuals.invalidation"))
