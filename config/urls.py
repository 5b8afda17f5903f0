from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    path('admin/', admin.site.urls),

    # Endpoint de santé pour le monitoring (app health dédiée)
    path('api/', include('apps.health.urls')),

    # Le namespace est géré par la variable app_name de chaque urls.py
    path('api/', include('apps.accounts.urls')),
    path('api/', include('apps.teaching_sessions.urls')),
    path('api/', include('apps.attachments.urls')),
    path('api/', include('apps.notifications.urls')),
    path('api/', include('apps.dashboard.urls')),
    path('api/', include('apps.audits.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
