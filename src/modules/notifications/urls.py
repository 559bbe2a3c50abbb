from django.urls import path

from modules.notifications.views import notification_stream

urlpatterns = [
    path("notifications/", notification_stream, name="notification-stream"),
]
