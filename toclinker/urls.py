"""URL configuration for the toclinker app.

This module defines the URL patterns for the app's API views. It also
specifies the ``app_name`` to allow namespacing from the project URL
configuration.
"""

from django.urls import path

from . import views

app_name = 'toclinker'

urlpatterns = [
    path('notion-extract-links', views.extract_links, name='extract_links'),
    path('notion-search', views.notion_search, name='notion_search'),
    path('sitemap-proxy', views.sitemap_proxy, name='sitemap_proxy'),
]
