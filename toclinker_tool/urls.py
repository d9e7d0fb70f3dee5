"""URL configuration for toclinker_tool.

The API views live under ``/api/`` to match the paths the browser client
already calls.
"""

from django.urls import include, path

urlpatterns = [
    path('api/', include('toclinker.urls')),
]
