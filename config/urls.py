# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from . import views

# -------------------------------------------------------------------
# URL CONFIGURATION
# -------------------------------------------------------------------

urlpatterns = [
    # ----------------------------------------------------------------
    # Dashboard
    # ----------------------------------------------------------------
    path("", views.home_view, name="home"),

    # ----------------------------------------------------------------
    # Health & diagnostics
    # ----------------------------------------------------------------
    path("health/", views.health_check_view, name="health_check"),

    # ----------------------------------------------------------------
    # Authentication (django-allauth)
    # ----------------------------------------------------------------
    path("accounts/", include("allauth.urls")),

    # ----------------------------------------------------------------
    # Application namespaces
    # ----------------------------------------------------------------
    path("students/", include(("students.urls", "students"), namespace="students")),
    path("teachers/", include(("teachers.urls", "teachers"), namespace="teachers")),
    path("courses/", include(("courses.urls", "courses"), namespace="courses")),
    path("enrollments/", include(("enrollments.urls", "enrollments"), namespace="enrollments")),
    path("billing/", include(("billing.urls", "billing"), namespace="billing")),
    path("live/", include(("live.urls", "live"), namespace="live")),
    path("funnels/", include(("funnels.urls", "funnels"), namespace="funnels")),
    path("settings/", include(("site_settings.urls", "site_settings"), namespace="settings")),

    # ----------------------------------------------------------------
    # Admin
    # ----------------------------------------------------------------
    path("admin/", admin.site.urls),
]

# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------

handler400 = "config.views.handler400"
handler403 = "config.views.handler403"
handler404 = "config.views.handler404"
handler500 = "config.views.handler500"

# -------------------------------------------------------------------
# Static & media (development only)
# -------------------------------------------------------------------

if settings.DEBUG:
    urlpatterns += static(
        settings.MEDIA_URL,
        document_root=settings.MEDIA_ROOT,
    )
