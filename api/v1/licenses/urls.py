"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.licenses import views

urlpatterns = [
    path(
        "licenses",
        views.ListLicensesView.as_view(),
        name="list-licenses",
    ),
    path(
        "licenses/issue",
        views.IssueLicenseView.as_view(),
        name="issue-license",
    ),
    path(
        "licenses/activate",
        views.ActivateLicenseView.as_view(),
        name="activate-license",
    ),
    path(
        "licenses/<uuid:license_key_id>/upgrade",
        views.UpgradeLicenseView.as_view(),
        name="upgrade-license",
    ),
    path(
        "licenses/check/<str:username>",
        views.CheckLicenseView.as_view(),
        name="check-license",
    ),
]
